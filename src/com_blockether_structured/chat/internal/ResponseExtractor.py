"""
Single-round extraction of a schema-conformant JSON value.

The extractor sends one fully composed request, parses the reply, validates it
against the composed schema and, on failure, re-prompts with a repair
instruction specific to the failure class. Parse and validation failures share
one bounded try counter.
"""

import json
import logging
import re
from datetime import datetime, timezone
from typing import Any, Optional

from tenacity import AsyncRetrying, RetryError, retry_if_exception_type, stop_after_attempt

from ...schema.internal.SchemaTypes import ComposedSchema
from ...schema.internal.SchemaValidation import SchemaValidation
from .ChatErrors import ExtractionExhausted, ParseFailure, ValidationFailure
from .ChatTypes import (
    AttemptOutcome,
    ChatSettings,
    Conversation,
    ExtractionAttempt,
    ExtractionResult,
    VerbosityLevel,
)

logger = logging.getLogger(__name__)

_LEADING_FENCE_RE = re.compile(r"\A\s*```(?:json)?[ \t]*\n?", re.IGNORECASE)
_TRAILING_FENCE_RE = re.compile(r"\n?[ \t]*```\s*\Z")


def _reject_constant(token: str) -> Any:
    raise ValueError(f"{token} is not valid JSON")


def strip_code_fence(text: str) -> str:
    """Remove a leading ```json (or bare ```) fence and a trailing ``` fence."""
    stripped = _LEADING_FENCE_RE.sub("", text)
    stripped = _TRAILING_FENCE_RE.sub("", stripped)
    return stripped.strip()


class ResponseExtractor:
    """
    Obtains one JSON value from the model with bounded, targeted retries.

    This is the only component that talks to the conversation transport.
    """

    MAX_TRIES = 5

    def __init__(self, conversation: Conversation, settings: Optional[ChatSettings] = None) -> None:
        """
        Initialize the extractor.

        Args:
            conversation: Transport whose ``ask`` sends a message and returns the reply
            settings: Chat settings. Uses defaults if not provided.
        """
        self._conversation = conversation
        self._settings = settings or ChatSettings()

    async def extract(self, task_text: str, schema: Optional[ComposedSchema] = None) -> Any:
        """
        Extract a JSON value for ``task_text``.

        Args:
            task_text: The caller's request
            schema: Composed schema the reply must match, or None for any JSON

        Returns:
            The parsed JSON value, returned as-is

        Raises:
            ExtractionExhausted: If MAX_TRIES round trips produced no acceptable reply
        """
        result = await self.extract_with_metrics(task_text, schema)
        return result.value

    async def extract_with_metrics(self, task_text: str, schema: Optional[ComposedSchema] = None) -> ExtractionResult:
        """Same as ``extract`` but also reports how many round trips were consumed."""
        start_time = datetime.now(timezone.utc)
        prompts = self._settings.prompts
        message = self.build_message(task_text, schema)
        value: Any = None
        attempts_used = 0

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.MAX_TRIES),
                retry=retry_if_exception_type((ParseFailure, ValidationFailure)),
            ):
                with attempt:
                    attempts_used = attempt.retry_state.attempt_number
                    try:
                        value = await self._attempt(message, schema, attempts_used)
                    except ParseFailure:
                        message = prompts.json_parse_error
                        raise
                    except ValidationFailure as e:
                        message = prompts.schema_validation_error.format(
                            errors="\n".join(f"- {violation}" for violation in e.violations)
                        )
                        raise
        except RetryError as e:
            last_failure = e.last_attempt.exception()
            logger.error(
                f"chat-{self._conversation.id}: ❌ extraction exhausted after {self.MAX_TRIES} attempts "
                f"(last failure: {last_failure})"
            )
            raise ExtractionExhausted(self.MAX_TRIES, type(last_failure).__name__) from None

        duration_ms = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000
        if self._settings.verbosity != VerbosityLevel.SILENT:
            logger.info(f"chat-{self._conversation.id}: ✅ extraction succeeded on attempt {attempts_used}")
        return ExtractionResult(value=value, attempts_used=attempts_used, duration_ms=duration_ms)

    def build_message(self, task_text: str, schema: Optional[ComposedSchema]) -> str:
        """Compose the initial request: JSON instructions, optional schema, delimited task."""
        prompts = self._settings.prompts
        message = prompts.json_instructions
        if schema is not None:
            message += prompts.schema_requirement.format(json_schema=schema.to_json())
        message += prompts.request_wrapper.format(message=task_text)
        return message

    async def _attempt(self, message: str, schema: Optional[ComposedSchema], attempt_number: int) -> Any:
        reply = await self._conversation.ask(message)
        raw_text = reply.content or ""

        try:
            value = json.loads(strip_code_fence(raw_text), parse_constant=_reject_constant)
        except ValueError as e:
            self._log_attempt(
                ExtractionAttempt(
                    attempt_number=attempt_number,
                    prompt=message,
                    raw_text=raw_text,
                    outcome=AttemptOutcome.PARSE_FAILURE,
                )
            )
            raise ParseFailure(raw_text, str(e)) from e

        if schema is not None and not SchemaValidation.matches_any(schema, value):
            violations = SchemaValidation.explain_composed(schema, value)
            self._log_attempt(
                ExtractionAttempt(
                    attempt_number=attempt_number,
                    prompt=message,
                    raw_text=raw_text,
                    outcome=AttemptOutcome.VALIDATION_FAILURE,
                    violations=violations,
                )
            )
            raise ValidationFailure(value, violations)

        if self._settings.verbosity == VerbosityLevel.VERBOSE:
            self._log_attempt(
                ExtractionAttempt(
                    attempt_number=attempt_number,
                    prompt=message,
                    raw_text=raw_text,
                    outcome=AttemptOutcome.PARSED,
                )
            )
        return value

    def _log_attempt(self, attempt: ExtractionAttempt) -> None:
        if attempt.outcome == AttemptOutcome.PARSED:
            logger.debug(f"chat-{self._conversation.id}: attempt {attempt.attempt_number} parsed")
            return

        if self._settings.verbosity == VerbosityLevel.SILENT:
            return
        logger.warning(
            f"chat-{self._conversation.id}: attempt {attempt.attempt_number}/{self.MAX_TRIES} "
            f"{attempt.outcome.value}: {attempt.raw_text[:200]!r}"
        )
        if self._settings.verbosity == VerbosityLevel.VERBOSE:
            for violation in attempt.violations:
                logger.info(f"  • {violation}")
