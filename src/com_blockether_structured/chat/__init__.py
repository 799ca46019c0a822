"""
Chat module - schema-validated answers from a free-text model.

This module turns a noisy text conversation into a bounded-retry,
schema-validated value channel, with optional consensus confirmation
and iterative refinement.
"""

from .ChatCore import ChatCore
from .internal.Chat import Chat
from .internal.ChatErrors import (
    ConfirmationFailure,
    ExtractionExhausted,
    ParseFailure,
    ValidationFailure,
)
from .internal.ChatTypes import (
    ChatSettings,
    ConsensusOutcome,
    Conversation,
    ConversationMessage,
    ExtractionResult,
    MessageRole,
    PromptTemplates,
    RefinementOutcome,
    Reply,
    VerbosityLevel,
)
from .internal.ConsensusSampler import ConsensusSampler
from .internal.RefinementLoop import RefinementLoop
from .internal.ResponseExtractor import ResponseExtractor

__all__ = [
    # Main Components
    "ChatCore",
    "Chat",
    "ResponseExtractor",
    "ConsensusSampler",
    "RefinementLoop",
    # Protocol and Messages
    "Conversation",
    "ConversationMessage",
    "MessageRole",
    "Reply",
    # Configuration Types
    "ChatSettings",
    "PromptTemplates",
    "VerbosityLevel",
    # Results
    "ExtractionResult",
    "ConsensusOutcome",
    "RefinementOutcome",
    # Errors
    "ConfirmationFailure",
    "ExtractionExhausted",
    "ParseFailure",
    "ValidationFailure",
]
