"""Extraction, consensus sampling and refinement over a conversation."""

from .Chat import Chat
from .ChatErrors import (
    ConfirmationFailure,
    ExtractionExhausted,
    ParseFailure,
    ValidationFailure,
)
from .ChatTypes import (
    AttemptOutcome,
    ChatSettings,
    ConsensusOutcome,
    Conversation,
    ConversationMessage,
    ExtractionAttempt,
    ExtractionResult,
    MessageRole,
    PromptTemplates,
    RefinementOutcome,
    Reply,
    VerbosityLevel,
)
from .ConsensusSampler import ConsensusSampler
from .RefinementLoop import RefinementLoop
from .ResponseExtractor import ResponseExtractor, strip_code_fence

__all__ = [
    # Components
    "Chat",
    "ResponseExtractor",
    "ConsensusSampler",
    "RefinementLoop",
    "strip_code_fence",
    # ChatTypes
    "AttemptOutcome",
    "ChatSettings",
    "ConsensusOutcome",
    "Conversation",
    "ConversationMessage",
    "ExtractionAttempt",
    "ExtractionResult",
    "MessageRole",
    "PromptTemplates",
    "RefinementOutcome",
    "Reply",
    "VerbosityLevel",
    # Errors
    "ConfirmationFailure",
    "ExtractionExhausted",
    "ParseFailure",
    "ValidationFailure",
]
