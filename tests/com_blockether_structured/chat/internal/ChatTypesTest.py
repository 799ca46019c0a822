"""
Tests for chat settings and prompt templates.
"""

import pytest
from pydantic import ValidationError

from com_blockether_structured.chat import ChatSettings, Conversation, PromptTemplates, VerbosityLevel
from com_blockether_structured.utils import ScriptedConversation


class TestPromptTemplates:
    """Test suite for template placeholder checks."""

    def test_defaults_render(self) -> None:
        prompts = PromptTemplates()

        assert "{}" in prompts.schema_requirement.format(json_schema="{}")
        assert prompts.request_wrapper.format(message="task") == "BEGIN-REQUEST\ntask\nEND-REQUEST\n"
        assert "- bad" in prompts.schema_validation_error.format(errors="- bad")
        rendered = prompts.refine_message.format(original_message="task", prior_answer="[1]")
        assert "BEGIN-ORIGINAL-REQUEST\ntask\nEND-ORIGINAL-REQUEST" in rendered
        assert "BEGIN-PRIOR-ANSWER\n[1]\nEND-PRIOR-ANSWER" in rendered

    @pytest.mark.parametrize(
        "field,template",
        [
            ("schema_requirement", "Follow the schema."),
            ("request_wrapper", "Request: {task}"),
            ("schema_validation_error", "Try again."),
            ("refine_message", "Improve {prior_answer}"),
        ],
    )
    def test_missing_placeholder_rejected(self, field: str, template: str) -> None:
        with pytest.raises(ValidationError):
            PromptTemplates(**{field: template})

    def test_templates_are_frozen(self) -> None:
        prompts = PromptTemplates()
        with pytest.raises(ValidationError):
            prompts.json_instructions = "changed"  # type: ignore[misc]


class TestChatSettings:
    """Test suite for chat settings."""

    def test_defaults(self) -> None:
        settings = ChatSettings()

        assert settings.project is None
        assert settings.run_id.isdigit()
        assert settings.verbosity == VerbosityLevel.NORMAL
        assert settings.log_messages is True

    def test_frozen(self) -> None:
        settings = ChatSettings(project="demo")
        with pytest.raises(ValidationError):
            settings.project = "other"  # type: ignore[misc]


class TestConversationProtocol:
    def test_scripted_conversation_satisfies_protocol(self) -> None:
        assert isinstance(ScriptedConversation(["{}"]), Conversation)

    def test_plain_object_does_not(self) -> None:
        assert not isinstance(object(), Conversation)
