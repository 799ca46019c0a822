"""
Core module for structured chat functionality.

This module provides the main entry point for obtaining schema-conformant
JSON answers from a conversation: single extraction, consensus sampling and
refinement.
"""

from typing import Any, Dict, Optional

from .internal.Chat import Chat
from .internal.ChatTypes import (
    ChatSettings,
    Conversation,
    PromptTemplates,
    VerbosityLevel,
)


class ChatCore:
    @staticmethod
    def chat(
        conversation: Conversation,
        settings: Optional[ChatSettings] = None,
    ) -> Chat:
        """Create a chat over a conversation transport.

        Args:
            conversation: Transport implementing ``ask``, ``id`` and ``messages``
            settings: Chat settings (optional)

        Returns:
            Chat exposing ``extract``, ``get`` and ``refine``
        """
        return Chat(conversation=conversation, settings=settings)

    @staticmethod
    def settings(
        project: Optional[str] = None,
        run_id: Optional[str] = None,
        prompts: Optional[PromptTemplates] = None,
        verbosity: VerbosityLevel = VerbosityLevel.NORMAL,
        log_messages: bool = True,
    ) -> ChatSettings:
        """Create chat settings.

        Args:
            project: Project name attached to log lines
            run_id: Identifier of the current run (defaults to the current epoch seconds)
            prompts: Message templates (defaults to the built-in templates)
            verbosity: Logging verbosity for extraction operations
            log_messages: Whether every ask/reply is logged

        Returns:
            Immutable ChatSettings
        """
        overrides: Dict[str, Any] = {}
        if run_id is not None:
            overrides["run_id"] = run_id
        if prompts is not None:
            overrides["prompts"] = prompts
        return ChatSettings(
            project=project,
            verbosity=verbosity,
            log_messages=log_messages,
            **overrides,
        )
