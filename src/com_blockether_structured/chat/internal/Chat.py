"""
Chat facade over a conversation transport.

Wraps a Conversation with message logging and exposes the three extraction
entry points: single extraction, consensus sampling and refinement.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from ...schema.internal.SchemaComposer import SchemaComposer
from ...schema.internal.SchemaTypes import SchemaInput, SchemaVariant
from .ChatTypes import ChatSettings, Conversation, ConversationMessage, Reply
from .ConsensusSampler import ConsensusSampler
from .RefinementLoop import RefinementLoop
from .ResponseExtractor import ResponseExtractor

logger = logging.getLogger(__name__)

SchemaArgument = Union[None, SchemaInput, Sequence[SchemaVariant]]


class Chat:
    """
    Structured question answering on top of one conversation.

    Every extraction round is appended to the same conversation, so later
    rounds see earlier exchanges. Do not run overlapping operations on one Chat.
    """

    def __init__(self, conversation: Conversation, settings: Optional[ChatSettings] = None) -> None:
        """
        Initialize the chat.

        Args:
            conversation: Transport used for every ask
            settings: Chat settings. Uses defaults if not provided.
        """
        self._conversation = conversation
        self._settings = settings or ChatSettings()

        self._extractor = ResponseExtractor(self, self._settings)
        self._sampler = ConsensusSampler(self._extractor, self._settings)
        self._refinement = RefinementLoop(self._extractor, self._settings)

    @property
    def id(self) -> str:
        return self._conversation.id

    @property
    def settings(self) -> ChatSettings:
        return self._settings

    @property
    def messages(self) -> List[ConversationMessage]:
        return self._conversation.messages

    def to_dicts(self) -> List[Dict[str, str]]:
        """The transcript as plain ``{"role", "content"}`` dictionaries."""
        return [message.model_dump(mode="json") for message in self.messages]

    async def ask(self, message: str) -> Reply:
        """Send a raw message through the conversation, logging both directions."""
        self._log("message start")
        reply = await self._conversation.ask(message)
        self._log(f"message end: {json.dumps(reply.model_dump(mode='json'))}")
        return reply

    async def extract(self, message: str, schema: SchemaArgument = None) -> Any:
        """Single bounded-retry extraction of a JSON value."""
        return await self._extractor.extract(message, SchemaComposer.normalize(schema))

    async def get(
        self,
        message: str,
        schema: SchemaArgument = None,
        confirm: int = 1,
        out_of: int = 1,
    ) -> Any:
        """
        Extract an answer that recurs at least ``confirm`` times within ``out_of`` rounds.

        With the defaults this is a single extraction.

        Args:
            message: The request
            schema: Variant, list of variants or composed schema; None accepts any JSON
            confirm: Number of structurally equal answers required
            out_of: Maximum number of extraction rounds

        Returns:
            The confirmed JSON value

        Raises:
            ConfirmationFailure: If no answer was confirmed within ``out_of`` rounds
            ExtractionExhausted: If a round could not obtain a valid reply
        """
        return await self._sampler.sample(message, SchemaComposer.normalize(schema), confirm, out_of)

    async def refine(self, message: str, schema: SchemaArgument, times: int = 2) -> Any:
        """Ask ``times`` times, each round improving on the previous answer; return the last."""
        return await self._refinement.refine(message, SchemaComposer.normalize(schema), times)

    def _log(self, message: str) -> None:
        if not self._settings.log_messages:
            return
        project = f"[{self._settings.project}/{self._settings.run_id}] " if self._settings.project else ""
        logger.info(f"{project}chat-{self.id}: {message}")
