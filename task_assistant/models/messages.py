"""
Chat message formats for the assistant conversation

Messages are immutable once appended to the history. SYSTEM messages are
tool execution log entries and never reach the model dialogue.
"""

from typing import TypedDict, Optional

from .enums import Sender
from .task import generate_id, now_ms


class ChatMessage(TypedDict):
    """
    One entry in the visible conversation history.

    Usage:
        msg = ChatMessage(
            id=generate_id(),
            text="Add milk to my list",
            sender=Sender.USER,
            timestamp=now_ms()
        )
    """
    id: str
    text: str
    sender: Sender
    timestamp: int               # epoch milliseconds


def create_chat_message(text: str, sender: Sender, timestamp: Optional[int] = None) -> ChatMessage:
    """Create a chat message with a fresh id."""
    return ChatMessage(
        id=generate_id(),
        text=text,
        sender=Sender(sender),
        timestamp=timestamp if timestamp is not None else now_ms(),
    )
