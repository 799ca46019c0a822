"""
Utility modules for structured chat.
"""

from .conversation.OpenAIConversation import OpenAIConversation
from .conversation.ScriptedConversation import ScriptedConversation

__all__ = [
    "OpenAIConversation",
    "ScriptedConversation",
]
