"""
Storage module - Key-value persistence and the task store
"""

from .kv_store import JsonKeyValueStore
from .task_store import TaskStore, default_forest

__all__ = [
    'JsonKeyValueStore',
    'TaskStore',
    'default_forest',
]
