"""
Consensus sampling over repeated extractions.

The same request is extracted round after round against one shared
conversation. Answers are grouped by structural equality and the first group
to reach the confirmation threshold wins.
"""

import hashlib
import json
import logging
from collections import Counter
from typing import Any, Dict, List, Optional

from ...schema.internal.SchemaTypes import ComposedSchema
from .ChatErrors import ConfirmationFailure
from .ChatTypes import ChatSettings, ConsensusOutcome, VerbosityLevel
from .ResponseExtractor import ResponseExtractor

logger = logging.getLogger(__name__)


class ConsensusSampler:
    """Repeats extraction until an answer recurs ``confirm_count`` times."""

    def __init__(self, extractor: ResponseExtractor, settings: Optional[ChatSettings] = None) -> None:
        self._extractor = extractor
        self._settings = settings or ChatSettings()

    @staticmethod
    def voting_key(answer: Any) -> str:
        """Deterministic key under which structurally equal answers group together."""
        answer_json = json.dumps(answer, sort_keys=True, default=str)
        return hashlib.sha256(answer_json.encode()).hexdigest()[:16]

    async def sample(
        self,
        task_text: str,
        schema: Optional[ComposedSchema],
        confirm_count: int,
        max_rounds: int,
    ) -> Any:
        """
        Return the first answer produced ``confirm_count`` times within ``max_rounds`` rounds.

        Args:
            task_text: The caller's request, identical for every round
            schema: Composed schema each answer must match, or None
            confirm_count: Number of structurally equal answers needed
            max_rounds: Maximum number of extraction rounds

        Returns:
            The confirmed answer

        Raises:
            ValueError: If the bounds are inconsistent
            ConfirmationFailure: If no answer reached the threshold in time
            ExtractionExhausted: If any round's extraction failed
        """
        outcome = await self.sample_with_metrics(task_text, schema, confirm_count, max_rounds)
        return outcome.value

    async def sample_with_metrics(
        self,
        task_text: str,
        schema: Optional[ComposedSchema],
        confirm_count: int,
        max_rounds: int,
    ) -> ConsensusOutcome:
        """Same as ``sample`` but also returns the rounds used and the vote distribution."""
        if confirm_count < 1 or max_rounds < 1:
            raise ValueError("confirm_count and max_rounds must both be at least 1")
        if confirm_count > max_rounds:
            raise ValueError(f"confirm_count ({confirm_count}) cannot exceed max_rounds ({max_rounds})")

        answers: List[Any] = []
        groups: Dict[str, List[Any]] = {}

        for round_number in range(1, max_rounds + 1):
            if self._settings.verbosity != VerbosityLevel.SILENT:
                logger.info(f"🔄 === CONSENSUS ROUND {round_number}/{max_rounds} ===")

            answer = await self._extractor.extract(task_text, schema)
            answers.append(answer)
            groups.setdefault(self.voting_key(answer), []).append(answer)

            vote_distribution = Counter({key: len(group) for key, group in groups.items()})
            if self._settings.verbosity == VerbosityLevel.VERBOSE:
                logger.info(f"📊 Vote distribution: {dict(vote_distribution)}")

            confirmed_key = next((key for key, group in groups.items() if len(group) >= confirm_count), None)
            if confirmed_key is not None:
                if self._settings.verbosity != VerbosityLevel.SILENT:
                    logger.info(f"✅ Answer confirmed after {round_number} round(s)")
                return ConsensusOutcome(
                    value=groups[confirmed_key][0],
                    rounds_used=round_number,
                    answers=answers,
                    vote_distribution=dict(vote_distribution),
                )

        if self._settings.verbosity != VerbosityLevel.SILENT:
            logger.warning(f"Consensus not reached after {max_rounds} rounds ({len(groups)} distinct answers)")
        raise ConfirmationFailure(answers, confirm_count)
