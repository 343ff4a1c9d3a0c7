"""
Enums module - Task priority, message sender and loop state types
"""

from enum import Enum


class Priority(str, Enum):
    """Priority levels a task can carry"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Sender(str, Enum):
    """Author of a chat message"""
    USER = "user"
    AI = "ai"
    SYSTEM = "system"  # tool execution log entries


class LoopState(str, Enum):
    """States of the conversation loop"""
    IDLE = "idle"
    AWAITING_MODEL_REPLY = "awaiting_model_reply"
    EXECUTING_TOOLS = "executing_tools"
