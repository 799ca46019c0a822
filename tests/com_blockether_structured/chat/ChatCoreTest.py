"""
Tests for ChatCore and the Chat facade.
"""

import logging

import pytest

from com_blockether_structured.chat import (
    Chat,
    ChatCore,
    ChatSettings,
    ConfirmationFailure,
    MessageRole,
    PromptTemplates,
    VerbosityLevel,
)
from com_blockether_structured.schema import SchemaCore
from com_blockether_structured.utils import ScriptedConversation

CHAT_LOGGER = "com_blockether_structured.chat.internal.Chat"


class TestChatCore:
    """Test suite for ChatCore factories."""

    def test_chat_factory(self) -> None:
        chat = ChatCore.chat(ScriptedConversation(["{}"], conversation_id="abc"))

        assert isinstance(chat, Chat)
        assert chat.id == "abc"
        assert isinstance(chat.settings, ChatSettings)

    def test_settings_defaults(self) -> None:
        settings = ChatCore.settings()

        assert settings.project is None
        assert settings.run_id.isdigit()
        assert settings.verbosity == VerbosityLevel.NORMAL
        assert settings.log_messages is True
        assert settings.prompts == PromptTemplates()

    def test_settings_overrides(self) -> None:
        prompts = PromptTemplates(json_instructions="JSON please. ")
        settings = ChatCore.settings(
            project="demo",
            run_id="run-1",
            prompts=prompts,
            verbosity=VerbosityLevel.SILENT,
            log_messages=False,
        )

        assert settings.project == "demo"
        assert settings.run_id == "run-1"
        assert settings.prompts.json_instructions == "JSON please. "
        assert settings.verbosity == VerbosityLevel.SILENT
        assert settings.log_messages is False


class TestChat:
    """Test suite for the Chat facade."""

    @pytest.mark.asyncio
    async def test_ask_returns_reply(self) -> None:
        """Test that ask returns the raw reply and records the exchange."""
        chat = ChatCore.chat(ScriptedConversation(["Hello there"]))

        reply = await chat.ask("Hi")

        assert reply.content == "Hello there"
        assert reply.role == MessageRole.ASSISTANT
        assert [m.role for m in chat.messages] == [MessageRole.USER, MessageRole.ASSISTANT]

    @pytest.mark.asyncio
    async def test_to_dicts(self) -> None:
        chat = ChatCore.chat(ScriptedConversation(["pong"]))

        await chat.ask("ping")

        assert chat.to_dicts() == [
            {"role": "user", "content": "ping"},
            {"role": "assistant", "content": "pong"},
        ]

    @pytest.mark.asyncio
    async def test_get_with_schema(self) -> None:
        """Test extraction of a success-shaped answer."""
        conversation = ScriptedConversation(['{"status": "success", "name": "Ada", "age": 36}'])
        chat = ChatCore.chat(conversation)
        schema = SchemaCore.result(SchemaCore.string("name"), SchemaCore.integer("age"))

        value = await chat.get("Who wrote the first program?", schema)

        assert value == {"status": "success", "name": "Ada", "age": 36}
        assert schema.to_json() in conversation.prompts[0]

    @pytest.mark.asyncio
    async def test_get_without_schema(self) -> None:
        """Test that a missing schema accepts any JSON value."""
        chat = ChatCore.chat(ScriptedConversation(['"just text"']))

        assert await chat.get("Say something") == "just text"

    @pytest.mark.asyncio
    async def test_get_returns_error_answer(self) -> None:
        """Test that the model may decline through the error variant."""
        chat = ChatCore.chat(ScriptedConversation(['{"status": "error", "message": "No data available"}']))
        schema = SchemaCore.result(SchemaCore.string("data"))

        value = await chat.get("Fetch unknown data", schema)

        assert value["status"] == "error"
        assert value["message"] == "No data available"

    @pytest.mark.asyncio
    async def test_get_with_variant_list(self) -> None:
        """Test that a list of variants is composed with the error variant."""
        conversation = ScriptedConversation(['{"kind": "circle", "radius": 2}'])
        chat = ChatCore.chat(conversation)
        circle = SchemaCore.variant(
            "circle",
            [SchemaCore.literal("kind", "circle"), SchemaCore.number("radius")],
        )
        square = SchemaCore.variant(
            "square",
            [SchemaCore.literal("kind", "square"), SchemaCore.number("side")],
        )

        value = await chat.get("Describe a shape", [circle, square])

        assert value == {"kind": "circle", "radius": 2}
        assert '"status"' in conversation.prompts[0]

    @pytest.mark.asyncio
    async def test_get_with_confirmation(self) -> None:
        conversation = ScriptedConversation(['{"status": "success", "answer": 4}'])
        chat = ChatCore.chat(conversation)
        schema = SchemaCore.result(SchemaCore.integer("answer"))

        value = await chat.get("What is 2+2?", schema, confirm=2, out_of=3)

        assert value["answer"] == 4
        assert conversation.call_count == 2

    @pytest.mark.asyncio
    async def test_get_confirmation_failure(self) -> None:
        conversation = ScriptedConversation(lambda message, n: f'{{"status": "success", "answer": {n}}}')
        chat = ChatCore.chat(conversation)
        schema = SchemaCore.result(SchemaCore.integer("answer"))

        with pytest.raises(ConfirmationFailure) as exc_info:
            await chat.get("Pick a number", schema, confirm=2, out_of=3)

        assert [a["answer"] for a in exc_info.value.answers] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_extract(self) -> None:
        chat = ChatCore.chat(ScriptedConversation(["oops", '{"status": "success", "x": 1}']))

        value = await chat.extract("Give x", SchemaCore.result(SchemaCore.integer("x")))

        assert value == {"status": "success", "x": 1}
        assert len(chat.messages) == 4

    @pytest.mark.asyncio
    async def test_refine(self) -> None:
        conversation = ScriptedConversation(
            ['{"status": "success", "text": "draft"}', '{"status": "success", "text": "polished"}']
        )
        chat = ChatCore.chat(conversation)

        value = await chat.refine("Write a tagline", SchemaCore.result(SchemaCore.string("text")))

        assert value["text"] == "polished"
        assert '{"status": "success", "text": "draft"}' in conversation.prompts[1]

    @pytest.mark.asyncio
    async def test_ask_logs_messages(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that every ask is logged with the project prefix."""
        settings = ChatCore.settings(project="demo", run_id="42")
        chat = ChatCore.chat(ScriptedConversation(["pong"], conversation_id="c1"), settings)

        with caplog.at_level(logging.INFO, logger=CHAT_LOGGER):
            await chat.ask("ping")

        logged = [r.getMessage() for r in caplog.records if r.name == CHAT_LOGGER]
        assert logged[0] == "[demo/42] chat-c1: message start"
        assert logged[1].startswith("[demo/42] chat-c1: message end: ")
        assert '"content": "pong"' in logged[1]

    @pytest.mark.asyncio
    async def test_message_logging_disabled(self, caplog: pytest.LogCaptureFixture) -> None:
        settings = ChatCore.settings(log_messages=False)
        chat = ChatCore.chat(ScriptedConversation(["pong"]), settings)

        with caplog.at_level(logging.INFO, logger=CHAT_LOGGER):
            await chat.ask("ping")

        assert not [r for r in caplog.records if r.name == CHAT_LOGGER]
