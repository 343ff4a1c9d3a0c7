"""
Tools module - The tool catalogue and its dispatcher

The catalogue is declared once as JSON-schema function definitions. The same
dicts are bound to the chat model and used to validate the arguments the
model sends back, so the declaration and the checks cannot drift apart.

Dispatch never raises for expected conditions: unknown tools, invalid
arguments and targets that do not exist all come back as ToolResult dicts
with success=False.
"""

from typing import Any, Callable, Dict, List, Mapping, NotRequired, Optional, TypedDict, TYPE_CHECKING

from task_assistant.models import Forest, Priority, create_task
from task_assistant.utils.exceptions import TaskAssistantError, UnknownToolError, ValidationError
from task_assistant.utils.logger import get_logger
from task_assistant.utils.validation import validate_tool_arguments

from . import tree_ops

if TYPE_CHECKING:
    from task_assistant.storage import TaskStore

logger = get_logger(__name__)

TOOL_CATALOGUE_VERSION = "1.0"

_PRIORITY_VALUES = [p.value for p in Priority]


# ============================================================================
# CATALOGUE
# ============================================================================

TOOL_SCHEMAS: List[Dict[str, Any]] = [
    {
        "name": "addTask",
        "description": (
            "Add a new top-level task to the to-do list. Infer priority (low, medium, high) "
            "if mentioned, default to medium."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "title": {
                    "type": "string",
                    "description": "The content of the task (e.g., 'Buy groceries')",
                },
                "priority": {
                    "type": "string",
                    "enum": _PRIORITY_VALUES,
                    "description": "The priority level of the task.",
                },
            },
            "required": ["title"],
        },
    },
    {
        "name": "addSubtask",
        "description": "Add a subtask to an existing task. Identify the parent task by its title.",
        "parameters": {
            "type": "object",
            "properties": {
                "parentQuery": {
                    "type": "string",
                    "description": "The title (or part of the title) of the parent task to attach this subtask to.",
                },
                "title": {
                    "type": "string",
                    "description": "The content of the subtask.",
                },
                "priority": {
                    "type": "string",
                    "enum": _PRIORITY_VALUES,
                    "description": "The priority level of the subtask.",
                },
            },
            "required": ["parentQuery", "title"],
        },
    },
    {
        "name": "removeTask",
        "description": (
            "Remove a task (or subtask) by providing its exact ID or a fuzzy search of its title. "
            "Prefer ID if known."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "taskId": {
                    "type": "string",
                    "description": "The unique ID of the task to remove.",
                },
                "searchTitle": {
                    "type": "string",
                    "description": "A string to match against task titles if ID is unknown.",
                },
            },
        },
    },
    {
        "name": "updateTaskStatus",
        "description": "Mark a task (or subtask) as completed or incomplete.",
        "parameters": {
            "type": "object",
            "properties": {
                "taskId": {
                    "type": "string",
                    "description": "The unique ID of the task.",
                },
                "completed": {
                    "type": "boolean",
                    "description": "True if the task is done, false otherwise.",
                },
            },
            "required": ["taskId", "completed"],
        },
    },
    {
        "name": "getTasks",
        "description": "Get the current list of all tasks (including subtasks) to inspect their IDs, status, or details.",
        "parameters": {
            "type": "object",
            "properties": {},
        },
    },
]

TOOL_SCHEMAS_BY_NAME: Dict[str, Dict[str, Any]] = {schema["name"]: schema for schema in TOOL_SCHEMAS}


class ToolResult(TypedDict):
    """Structured outcome of one tool invocation, returned to the model."""
    success: bool
    result: str
    task_id: NotRequired[str]
    removed_count: NotRequired[int]
    tasks: NotRequired[List[Dict[str, Any]]]
    error: NotRequired[str]
    details: NotRequired[Dict[str, Any]]


def simplify_forest(forest: Forest) -> List[Dict[str, Any]]:
    """Read-only projection of the forest the model uses to look around."""
    return [
        {
            "id": task["id"],
            "title": task["title"],
            "priority": Priority(task["priority"]).value,
            "completed": task["is_completed"],
            "subtasks": simplify_forest(task.get("subtasks") or []),
        }
        for task in forest
    ]


def error_result(error: TaskAssistantError) -> ToolResult:
    return ToolResult(
        success=False,
        result=error.message,
        error=error.message,
        details=error.details,
    )


# ============================================================================
# DISPATCHER
# ============================================================================

class ToolDispatcher:
    """
    Maps tool invocations onto the tree operations.

    Each invocation reads the store's forest at call time and installs the
    new forest before returning, so invocations applied one after another
    see each other's effects.
    """

    def __init__(self, store: "TaskStore"):
        self.store = store
        self._handlers: Dict[str, Callable[[Dict[str, Any]], ToolResult]] = {
            "addTask": self._add_task,
            "addSubtask": self._add_subtask,
            "removeTask": self._remove_task,
            "updateTaskStatus": self._update_task_status,
            "getTasks": self._get_tasks,
        }

    @property
    def tool_names(self) -> List[str]:
        return list(self._handlers)

    @property
    def schemas(self) -> List[Dict[str, Any]]:
        return TOOL_SCHEMAS

    def dispatch(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> ToolResult:
        """
        Run one tool invocation.

        Args:
            name: Tool name as requested by the model
            arguments: Raw arguments as requested by the model

        Returns:
            ToolResult describing what happened
        """
        handler = self._handlers.get(name)
        if handler is None:
            error = UnknownToolError(name, supported_tools=self.tool_names)
            logger.warning(f"[TOOL] Rejected unknown tool '{name}'")
            return error_result(error)

        try:
            cleaned = validate_tool_arguments(name, TOOL_SCHEMAS_BY_NAME[name]["parameters"], arguments)
        except ValidationError as e:
            logger.warning(f"[TOOL] Rejected {name} arguments: {e.message}")
            return error_result(e)

        result = handler(cleaned)
        logger.info(f"[TOOL] {name} -> {result['result']}")
        return result

    # ------------------------------------------------------------------
    # Handlers (arguments already validated)
    # ------------------------------------------------------------------

    def _add_task(self, args: Dict[str, Any]) -> ToolResult:
        task = create_task(args["title"], priority=args.get("priority"))
        self.store.replace(tree_ops.prepend_task(self.store.forest, task))
        return ToolResult(
            success=True,
            result=f"Task added successfully with ID: {task['id']}",
            task_id=task["id"],
        )

    def _add_subtask(self, args: Dict[str, Any]) -> ToolResult:
        parent_query = args["parentQuery"]
        subtask = create_task(args["title"], priority=args.get("priority"))

        forest, added = tree_ops.insert_subtask(self.store.forest, parent_query, subtask)
        if not added:
            return ToolResult(
                success=False,
                result=f"Could not find a parent task matching '{parent_query}' to add the subtask to.",
            )

        self.store.replace(forest)
        return ToolResult(
            success=True,
            result=f"Subtask '{subtask['title']}' added to parent matching '{parent_query}'.",
            task_id=subtask["id"],
        )

    def _remove_task(self, args: Dict[str, Any]) -> ToolResult:
        forest, removed_count = tree_ops.remove_by_id_or_title(
            self.store.forest,
            task_id=args.get("taskId"),
            title_substring=args.get("searchTitle"),
        )
        if removed_count == 0:
            return ToolResult(
                success=False,
                result="No tasks found matching that criteria.",
                removed_count=0,
            )

        self.store.replace(forest)
        return ToolResult(
            success=True,
            result=f"Successfully removed {removed_count} task(s).",
            removed_count=removed_count,
        )

    def _update_task_status(self, args: Dict[str, Any]) -> ToolResult:
        task_id = args["taskId"]
        completed = args["completed"]

        forest, found = tree_ops.set_completion(self.store.forest, task_id, completed)
        if not found:
            return ToolResult(success=False, result=f"Task with ID {task_id} not found.")

        self.store.replace(forest)
        return ToolResult(
            success=True,
            result=f"Task {task_id} marked as {'completed' if completed else 'incomplete'}.",
            task_id=task_id,
        )

    def _get_tasks(self, args: Dict[str, Any]) -> ToolResult:
        forest = self.store.forest
        return ToolResult(
            success=True,
            result=f"{tree_ops.count_tasks(forest)} task(s) on the list.",
            tasks=simplify_forest(forest),
        )
