"""
Tests for ScriptedConversation.
"""

import pytest

from com_blockether_structured.chat import MessageRole
from com_blockether_structured.utils import ScriptedConversation


class TestScriptedConversation:
    """Test suite for the scripted transport."""

    @pytest.mark.asyncio
    async def test_cycles_through_responses(self) -> None:
        conversation = ScriptedConversation(["one", "two"])

        replies = [(await conversation.ask(f"q{i}")).content for i in range(3)]

        assert replies == ["one", "two", "one"]
        assert conversation.call_count == 3

    @pytest.mark.asyncio
    async def test_callable_receives_message_and_call_number(self) -> None:
        conversation = ScriptedConversation(lambda message, n: f"{message}#{n}")

        assert (await conversation.ask("a")).content == "a#1"
        assert (await conversation.ask("b")).content == "b#2"

    @pytest.mark.asyncio
    async def test_records_transcript(self) -> None:
        conversation = ScriptedConversation(["reply"], conversation_id="t-1")

        await conversation.ask("question")

        assert conversation.id == "t-1"
        assert conversation.prompts == ["question"]
        assert [(m.role, m.content) for m in conversation.messages] == [
            (MessageRole.USER, "question"),
            (MessageRole.ASSISTANT, "reply"),
        ]

    @pytest.mark.asyncio
    async def test_messages_is_a_snapshot(self) -> None:
        conversation = ScriptedConversation(["reply"])
        await conversation.ask("question")

        conversation.messages.clear()

        assert len(conversation.messages) == 2

    @pytest.mark.asyncio
    async def test_reset_call_count(self) -> None:
        conversation = ScriptedConversation(["one", "two"])
        await conversation.ask("q")

        conversation.reset_call_count()

        assert conversation.call_count == 0
        assert (await conversation.ask("q")).content == "one"

    def test_empty_script_rejected(self) -> None:
        with pytest.raises(ValueError):
            ScriptedConversation([])
