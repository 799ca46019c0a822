"""
Types for structured chat extraction.

This module provides the conversation protocol consumed by the extraction
components, prompt templates, settings, and the result records returned by
extraction, consensus sampling and refinement.
"""

import string
import time
from abc import abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MessageRole(str, Enum):
    """Author of a conversation message."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ConversationMessage(BaseModel):
    """A single entry of a conversation transcript."""

    role: MessageRole = Field(description="Who authored the message")
    content: str = Field(description="Text content of the message")


class Reply(BaseModel):
    """Text emitted by the model in answer to one ``ask``."""

    content: str = Field(description="Raw text content of the reply")
    role: MessageRole = Field(default=MessageRole.ASSISTANT, description="Author of the reply")


@runtime_checkable
class Conversation(Protocol):
    """
    Protocol for the transport that sends a message and returns model text.

    Implementations own authentication, network I/O and the accumulating
    transcript. Every ``ask`` appends the message and its reply; later asks
    see earlier exchanges as context.
    """

    @property
    def id(self) -> str:
        """Identifier of the conversation, used in log lines."""
        ...

    @property
    def messages(self) -> List[ConversationMessage]:
        """Snapshot of the transcript so far."""
        ...

    @abstractmethod
    async def ask(self, message: str) -> Reply:
        """
        Send a message and wait for the reply.

        Args:
            message: The full text to send

        Returns:
            The model's reply
        """
        ...


class VerbosityLevel(Enum):
    """Logging verbosity levels for extraction operations."""

    SILENT = 0  # No logging except errors
    NORMAL = 1  # Key milestones only
    VERBOSE = 2  # Vote distributions and every attempt


def _placeholders(template: str) -> List[str]:
    return [name for _, name, _, _ in string.Formatter().parse(template) if name]


class PromptTemplates(BaseModel):
    """Message templates sent to the model during extraction."""

    model_config = ConfigDict(frozen=True)

    json_instructions: str = Field(
        default=(
            "Respond with a single JSON value and nothing else. "
            "Do not add commentary, explanations or Markdown around it.\n\n"
        ),
        description="Leading instruction of every extraction request",
    )
    schema_requirement: str = Field(
        default=("Your response MUST validate against the following JSON Schema:\n" "{json_schema}\n\n"),
        description="Schema statement, rendered only when a schema is supplied",
    )
    request_wrapper: str = Field(
        default="BEGIN-REQUEST\n{message}\nEND-REQUEST\n",
        description="Delimited block wrapping the caller's task text",
    )
    json_parse_error: str = Field(
        default=(
            "Your last reply was not valid JSON. "
            "Retry, replying with only the JSON value and no surrounding text."
        ),
        description="Repair instruction after a parse failure",
    )
    schema_validation_error: str = Field(
        default=(
            "Your last reply was valid JSON but failed schema validation. Violations:\n"
            "{errors}\n\n"
            "Retry, replying with only a corrected JSON value."
        ),
        description="Repair instruction after a validation failure",
    )
    refine_message: str = Field(
        default=(
            "You already answered the request below. Review your prior answer, "
            "fix any mistakes and improve it. Reply in the same format.\n\n"
            "BEGIN-ORIGINAL-REQUEST\n{original_message}\nEND-ORIGINAL-REQUEST\n\n"
            "BEGIN-PRIOR-ANSWER\n{prior_answer}\nEND-PRIOR-ANSWER"
        ),
        description="Task text for every refinement round after the first",
    )

    @field_validator("schema_requirement")
    @classmethod
    def _has_schema(cls, v: str) -> str:
        if "json_schema" not in _placeholders(v):
            raise ValueError("schema_requirement must contain a {json_schema} placeholder")
        return v

    @field_validator("request_wrapper")
    @classmethod
    def _has_message(cls, v: str) -> str:
        if "message" not in _placeholders(v):
            raise ValueError("request_wrapper must contain a {message} placeholder")
        return v

    @field_validator("schema_validation_error")
    @classmethod
    def _has_errors(cls, v: str) -> str:
        if "errors" not in _placeholders(v):
            raise ValueError("schema_validation_error must contain an {errors} placeholder")
        return v

    @field_validator("refine_message")
    @classmethod
    def _has_refine_fields(cls, v: str) -> str:
        missing = {"original_message", "prior_answer"} - set(_placeholders(v))
        if missing:
            raise ValueError(f"refine_message is missing placeholders: {', '.join(sorted(missing))}")
        return v


class ChatSettings(BaseModel):
    """Configuration shared by every component of one chat.

    Constructed once per run and passed explicitly; immutable afterwards.
    """

    model_config = ConfigDict(frozen=True)

    project: Optional[str] = Field(default=None, description="Project name attached to log lines")
    run_id: str = Field(
        default_factory=lambda: str(int(time.time())),
        description="Identifier of the current run",
    )
    prompts: PromptTemplates = Field(default_factory=PromptTemplates, description="Message templates")
    verbosity: VerbosityLevel = Field(
        default=VerbosityLevel.NORMAL,
        description="Logging verbosity level for extraction operations",
    )
    log_messages: bool = Field(default=True, description="Whether every ask/reply is logged")


class AttemptOutcome(str, Enum):
    """How a single round trip ended."""

    PARSED = "parsed"
    PARSE_FAILURE = "parse_failure"
    VALIDATION_FAILURE = "validation_failure"


class ExtractionAttempt(BaseModel):
    """Transient record of one round trip inside an extraction."""

    attempt_number: int = Field(ge=1, description="1-based attempt counter")
    prompt: str = Field(description="The message sent")
    raw_text: str = Field(description="The reply text received")
    outcome: AttemptOutcome = Field(description="How the attempt ended")
    violations: List[str] = Field(default_factory=list, description="Validator errors for validation failures")


class ExtractionResult(BaseModel):
    """Result of one successful extraction."""

    value: Any = Field(description="The parsed, schema-conformant JSON value")
    attempts_used: int = Field(ge=1, description="Number of round trips consumed")
    duration_ms: float = Field(default=0.0, description="Duration of the extraction in milliseconds")


class ConsensusOutcome(BaseModel):
    """Result of a confirmed consensus sampling."""

    value: Any = Field(description="The confirmed answer")
    rounds_used: int = Field(ge=1, description="Number of extraction rounds executed")
    answers: List[Any] = Field(default_factory=list, description="Every answer collected, in round order")
    vote_distribution: Dict[str, int] = Field(
        default_factory=dict,
        description="Answer voting key mapped to how many rounds produced it",
    )


class RefinementOutcome(BaseModel):
    """Result of a refinement sequence."""

    value: Any = Field(description="The final round's answer")
    rounds_used: int = Field(ge=1, description="Number of refinement rounds executed")
    history: List[Any] = Field(default_factory=list, description="Each round's answer, in order")
