"""
Core module - Tree operations, tool dispatch and the conversation loop
"""

from . import tree_ops
from .tree_ops import (
    toggle_completion,
    delete_subtree,
    set_completion,
    insert_subtask,
    remove_by_id_or_title,
    prepend_task,
    iter_tasks,
    find_task,
    count_tasks,
    sorted_for_display,
)
from .tools import ToolDispatcher, ToolResult, TOOL_SCHEMAS, TOOL_CATALOGUE_VERSION, simplify_forest
from .workflow import ConversationWorkflowBuilder, RoundState
from .conversation import ConversationLoop

__all__ = [
    'tree_ops',
    'toggle_completion',
    'delete_subtree',
    'set_completion',
    'insert_subtask',
    'remove_by_id_or_title',
    'prepend_task',
    'iter_tasks',
    'find_task',
    'count_tasks',
    'sorted_for_display',
    'ToolDispatcher',
    'ToolResult',
    'TOOL_SCHEMAS',
    'TOOL_CATALOGUE_VERSION',
    'simplify_forest',
    'ConversationWorkflowBuilder',
    'RoundState',
    'ConversationLoop',
]
