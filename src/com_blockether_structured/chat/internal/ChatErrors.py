"""
Exceptions raised by structured chat extraction.

ParseFailure and ValidationFailure are transient: the extraction retry loop
recovers from them and they never escape extraction. ExtractionExhausted
records only the class name of the last one, never the raw reply.
"""

import json
from typing import Any, List, Optional

from ...schema.internal.SchemaErrors import StructuredOutputError


class ParseFailure(StructuredOutputError):
    """The reply was not valid JSON."""

    def __init__(self, raw_text: str, reason: str):
        super().__init__(f"Reply is not valid JSON: {reason}", details={"raw_text": raw_text})
        self.raw_text = raw_text


class ValidationFailure(StructuredOutputError):
    """The reply was valid JSON but matched no schema variant."""

    def __init__(self, value: Any, violations: List[str]):
        super().__init__(
            f"Reply failed schema validation with {len(violations)} violation(s)",
            details={"violations": violations},
        )
        self.value = value
        self.violations = violations


class ExtractionExhausted(StructuredOutputError):
    """The try budget was consumed without a valid reply.

    Carries no raw reply text; only the class name of the last failure.
    """

    def __init__(self, attempts: int, last_failure: Optional[str] = None):
        super().__init__(
            f"Failed to get valid response after {attempts} attempts",
            details={"attempts": attempts, "last_failure": last_failure},
        )
        self.attempts = attempts
        self.last_failure = last_failure


class ConfirmationFailure(StructuredOutputError):
    """Consensus sampling ran out of rounds before any answer recurred enough times."""

    def __init__(self, answers: List[Any], confirm_count: int):
        super().__init__(
            f"Unable to confirm an answer ({confirm_count} matching required):\n"
            f"{json.dumps(answers, indent=2, default=str)}",
            details={"answers": answers, "confirm_count": confirm_count},
        )
        self.answers = answers
        self.confirm_count = confirm_count

    @property
    def distinct_answers(self) -> List[Any]:
        """Collected answers with structural duplicates removed, first occurrence first."""
        seen = set()
        distinct = []
        for answer in self.answers:
            key = json.dumps(answer, sort_keys=True, default=str)
            if key not in seen:
                seen.add(key)
                distinct.append(answer)
        return distinct
