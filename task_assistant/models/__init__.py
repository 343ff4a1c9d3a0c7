"""
Models module - Data structures and enums for the Task Assistant
"""

from .enums import Priority, Sender, LoopState
from .task import (
    Task,
    Forest,
    generate_id,
    now_ms,
    create_task,
    task_to_dict,
    task_from_dict,
    forest_to_list,
    forest_from_list,
)
from .messages import ChatMessage, create_chat_message

__all__ = [
    'Priority',
    'Sender',
    'LoopState',
    'Task',
    'Forest',
    'generate_id',
    'now_ms',
    'create_task',
    'task_to_dict',
    'task_from_dict',
    'forest_to_list',
    'forest_from_list',
    'ChatMessage',
    'create_chat_message',
]
