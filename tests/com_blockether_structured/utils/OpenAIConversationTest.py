"""
Tests for OpenAIConversation using a mocked AsyncOpenAI client.
"""

from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from openai import APIConnectionError

from com_blockether_structured.chat import MessageRole
from com_blockether_structured.utils import OpenAIConversation


def _completion(content: str) -> Any:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _client(*side_effect: Any) -> MagicMock:
    client = MagicMock()
    client.chat.completions.create = AsyncMock(side_effect=list(side_effect))
    return client


def _connection_error() -> APIConnectionError:
    return APIConnectionError(request=httpx.Request("POST", "http://localhost/v1/chat/completions"))


class TestOpenAIConversation:
    """Test suite for the OpenAI-backed transport."""

    def test_system_prompts_joined(self) -> None:
        conversation = OpenAIConversation(system_prompts=["Be terse.", "Answer in JSON."], client=_client())

        assert len(conversation.messages) == 1
        assert conversation.messages[0].role == MessageRole.SYSTEM
        assert conversation.messages[0].content == "Be terse.\n---\nAnswer in JSON."

    def test_no_system_prompts(self) -> None:
        conversation = OpenAIConversation(client=_client(), conversation_id="conv-1")

        assert conversation.messages == []
        assert conversation.id == "conv-1"

    @pytest.mark.asyncio
    async def test_ask_sends_full_transcript(self) -> None:
        client = _client(_completion("first"), _completion("second"))
        conversation = OpenAIConversation(model="test-model", system_prompts=["sys"], client=client, temperature=0.1)

        await conversation.ask("one")
        reply = await conversation.ask("two")

        assert reply.content == "second"
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["temperature"] == 0.1
        assert kwargs["messages"] == [
            {"role": "system", "content": "sys"},
            {"role": "user", "content": "one"},
            {"role": "assistant", "content": "first"},
            {"role": "user", "content": "two"},
        ]
        assert len(conversation.messages) == 5

    @pytest.mark.asyncio
    async def test_null_content_becomes_empty_reply(self) -> None:
        conversation = OpenAIConversation(client=_client(_completion(None)))  # type: ignore[arg-type]

        reply = await conversation.ask("hello")

        assert reply.content == ""

    @pytest.mark.asyncio
    async def test_retries_connection_errors(self) -> None:
        client = _client(_connection_error(), _completion("ok"))
        conversation = OpenAIConversation(client=client, retry_min_wait=0, retry_max_wait=0)

        reply = await conversation.ask("hello")

        assert reply.content == "ok"
        assert client.chat.completions.create.await_count == 2
        assert [m.content for m in conversation.messages] == ["hello", "ok"]

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self) -> None:
        client = _client(_connection_error(), _connection_error())
        conversation = OpenAIConversation(client=client, max_retries=2, retry_min_wait=0, retry_max_wait=0)

        with pytest.raises(APIConnectionError):
            await conversation.ask("hello")

        assert client.chat.completions.create.await_count == 2
        assert conversation.messages == []

    @pytest.mark.asyncio
    async def test_other_errors_not_retried(self) -> None:
        client = _client(ValueError("bad request"))
        conversation = OpenAIConversation(system_prompts=["sys"], client=client, retry_min_wait=0, retry_max_wait=0)

        with pytest.raises(ValueError, match="bad request"):
            await conversation.ask("hello")

        assert client.chat.completions.create.await_count == 1
        assert [m.role for m in conversation.messages] == [MessageRole.SYSTEM]
