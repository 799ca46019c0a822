"""
Scripted conversation for testing extraction without real API calls.

This module provides a Conversation implementation that answers every ask
with predefined text, recording the full transcript like a real transport.
"""

from typing import Callable, List, Sequence, Union

from ...chat.internal.ChatTypes import ConversationMessage, MessageRole, Reply

ReplyScript = Union[Sequence[str], Callable[[str, int], str]]


class ScriptedConversation:
    """
    Conversation returning fixed replies.

    Replies come either from a list, cycled through in order, or from a
    callable receiving the message and the 1-based call number.
    """

    def __init__(self, fixed_responses: ReplyScript, conversation_id: str = "scripted"):
        """
        Initialize the scripted conversation.

        Args:
            fixed_responses: Reply texts to cycle through, or a callable producing them
            conversation_id: Identifier used in log lines
        """
        if not callable(fixed_responses) and not fixed_responses:
            raise ValueError("At least one scripted response is required")

        self.fixed_responses = fixed_responses
        self._id = conversation_id
        self._call_count = 0
        self._messages: List[ConversationMessage] = []

    @property
    def id(self) -> str:
        return self._id

    @property
    def messages(self) -> List[ConversationMessage]:
        return list(self._messages)

    @property
    def call_count(self) -> int:
        return self._call_count

    @property
    def prompts(self) -> List[str]:
        """Every message received, in order."""
        return [m.content for m in self._messages if m.role == MessageRole.USER]

    async def ask(self, message: str) -> Reply:
        """Return the next scripted reply."""
        self._call_count += 1

        if callable(self.fixed_responses):
            content = self.fixed_responses(message, self._call_count)
        else:
            content = self.fixed_responses[(self._call_count - 1) % len(self.fixed_responses)]

        self._messages.append(ConversationMessage(role=MessageRole.USER, content=message))
        self._messages.append(ConversationMessage(role=MessageRole.ASSISTANT, content=content))
        return Reply(content=content)

    def reset_call_count(self) -> None:
        """Reset the call counter to start from the first response again."""
        self._call_count = 0
