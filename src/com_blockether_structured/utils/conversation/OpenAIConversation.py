"""
Conversation transport backed by an OpenAI-compatible chat completions API.

The endpoint defaults to a local OpenAI-compatible server and can be pointed
elsewhere with the STRUCTURED_API_BASE_URL and STRUCTURED_API_KEY variables.
"""

import logging
import os
import uuid
from typing import Any, List, Optional, Sequence

from openai import APIConnectionError, APITimeoutError, AsyncOpenAI, RateLimitError
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ...chat.internal.ChatTypes import ConversationMessage, MessageRole, Reply

logger = logging.getLogger(__name__)


class OpenAIConversation:
    """
    Production implementation of the Conversation protocol.

    Keeps the whole transcript and sends it with every request, so each ask
    sees all previous exchanges. Transient API failures are retried here with
    exponential backoff; they never count against extraction tries.
    """

    SYSTEM_PROMPT_SEPARATOR = "\n---\n"

    # Default configuration constants
    DEFAULT_MAX_RETRIES = 3
    DEFAULT_RETRY_MIN_WAIT = 1000  # milliseconds
    DEFAULT_RETRY_MAX_WAIT = 10000  # milliseconds

    def __init__(
        self,
        model: str = "gpt-4o",
        system_prompts: Optional[Sequence[str]] = None,
        client: Optional[Any] = None,
        temperature: float = 0.7,
        conversation_id: Optional[str] = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_min_wait: int = DEFAULT_RETRY_MIN_WAIT,
        retry_max_wait: int = DEFAULT_RETRY_MAX_WAIT,
    ):
        """
        Initialize the conversation.

        Args:
            model: The model to use (default: gpt-4o)
            system_prompts: System prompts, joined into a single system message
            client: Preconfigured AsyncOpenAI client (built from the environment if omitted)
            temperature: Temperature for generation (default: 0.7)
            conversation_id: Identifier used in log lines (random if omitted)
            max_retries: Maximum attempts per request on transient API errors
            retry_min_wait: Minimum wait time between retries (milliseconds)
            retry_max_wait: Maximum wait time between retries (milliseconds)
        """
        self.model = model
        self.temperature = temperature
        self._client = client or AsyncOpenAI(
            base_url=os.environ.get("STRUCTURED_API_BASE_URL", "http://localhost:3005/v1"),
            api_key=os.environ.get("STRUCTURED_API_KEY", "nothing"),
        )
        self._id = conversation_id or uuid.uuid4().hex[:12]
        self._max_retries = max_retries
        self._retry_min_wait = retry_min_wait
        self._retry_max_wait = retry_max_wait

        self._messages: List[ConversationMessage] = []
        if system_prompts:
            self._messages.append(
                ConversationMessage(
                    role=MessageRole.SYSTEM,
                    content=self.SYSTEM_PROMPT_SEPARATOR.join(system_prompts),
                )
            )

    @property
    def id(self) -> str:
        return self._id

    @property
    def messages(self) -> List[ConversationMessage]:
        return list(self._messages)

    async def ask(self, message: str) -> Reply:
        """
        Append ``message`` to the transcript, request a completion and record the reply.

        Args:
            message: The user message to send

        Returns:
            The assistant reply
        """
        self._messages.append(ConversationMessage(role=MessageRole.USER, content=message))

        try:
            completion = await self._complete()
        except Exception:
            # A failed request must not leave an unanswered user message behind
            self._messages.pop()
            raise

        content = completion.choices[0].message.content or ""
        self._messages.append(ConversationMessage(role=MessageRole.ASSISTANT, content=content))
        return Reply(content=content)

    async def _complete(self) -> Any:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._max_retries),
            wait=wait_exponential(min=self._retry_min_wait / 1000, max=self._retry_max_wait / 1000),
            retry=retry_if_exception_type((APIConnectionError, APITimeoutError, RateLimitError)),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        return await retrying(
            self._client.chat.completions.create,
            model=self.model,
            messages=[m.model_dump(mode="json") for m in self._messages],
            temperature=self.temperature,
        )
