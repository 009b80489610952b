"""
Append-only conversation log.

The log owns message id sequencing: ids are "{role}-{n}" where n is the
1-based position of the message in this log, so two sessions never share a
counter.
"""

from datetime import datetime, timezone
from typing import Callable, Optional

from commerce_desk.models.schemas import AgentMessage, MessageRole

AGENT_GREETING = (
    "{name} online. Upload your catalog, read out today's metrics, or just say "
    "what needs fixing. I will handle Amazon, Flipkart, Meesho, and Myntra workflows."
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ConversationLog:
    """Ordered AgentMessage history for one operator session."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or _utc_now
        self._messages: list[AgentMessage] = []

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self):
        return iter(self._messages)

    @property
    def messages(self) -> list[AgentMessage]:
        """Snapshot copy of the log."""
        return list(self._messages)

    def next_id(self, role: MessageRole) -> str:
        return f"{MessageRole(role).value}-{len(self._messages) + 1}"

    def append(self, role: MessageRole, text: str) -> AgentMessage:
        """Record one message and return it."""
        message = AgentMessage(
            id=self.next_id(role),
            role=role,
            text=text,
            timestamp=self._clock(),
        )
        self._messages.append(message)
        return message

    def last_agent_message(self) -> Optional[AgentMessage]:
        for message in reversed(self._messages):
            if message.role == MessageRole.AGENT:
                return message
        return None


def last_agent_text(conversation: list[AgentMessage]) -> Optional[str]:
    """Text of the most recent agent message in a plain message list."""
    for message in reversed(conversation):
        if message.role == MessageRole.AGENT:
            return message.text
    return None


__all__ = [
    "AGENT_GREETING",
    "ConversationLog",
    "last_agent_text",
]
