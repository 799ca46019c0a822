"""
Iterative refinement of an extracted answer.

Every round after the first re-asks the original request with the previous
round's answer attached. There is no confirmation check; the last answer wins.
"""

import json
import logging
from typing import Any, List, Optional

from ...schema.internal.SchemaTypes import ComposedSchema
from .ChatTypes import ChatSettings, RefinementOutcome, VerbosityLevel
from .ResponseExtractor import ResponseExtractor

logger = logging.getLogger(__name__)


class RefinementLoop:
    """Runs a fixed number of extraction rounds, each improving on the last."""

    def __init__(self, extractor: ResponseExtractor, settings: Optional[ChatSettings] = None) -> None:
        self._extractor = extractor
        self._settings = settings or ChatSettings()

    async def refine(self, task_text: str, schema: Optional[ComposedSchema], rounds: int) -> Any:
        """
        Return the answer of the final refinement round.

        Args:
            task_text: The caller's original request
            schema: Composed schema each answer must match, or None
            rounds: Exact number of rounds to run

        Returns:
            The last round's answer

        Raises:
            ValueError: If rounds is less than 1
            ExtractionExhausted: If any round's extraction failed
        """
        outcome = await self.refine_with_metrics(task_text, schema, rounds)
        return outcome.value

    async def refine_with_metrics(
        self,
        task_text: str,
        schema: Optional[ComposedSchema],
        rounds: int,
    ) -> RefinementOutcome:
        """Same as ``refine`` but also returns every round's answer."""
        if rounds < 1:
            raise ValueError("rounds must be at least 1")

        history: List[Any] = []
        for round_number in range(1, rounds + 1):
            if self._settings.verbosity != VerbosityLevel.SILENT:
                logger.info(f"🔄 === REFINEMENT ROUND {round_number}/{rounds} ===")

            message = task_text if not history else self.build_message(task_text, history[-1])
            history.append(await self._extractor.extract(message, schema))

        return RefinementOutcome(value=history[-1], rounds_used=rounds, history=history)

    def build_message(self, task_text: str, prior_answer: Any) -> str:
        """Task text for a follow-up round, embedding the original request and the prior answer."""
        return self._settings.prompts.refine_message.format(
            original_message=task_text,
            prior_answer=json.dumps(prior_answer),
        )
