"""
Task module - Task node structure, id generation and (de)serialization
"""

import time
import uuid
from typing import TypedDict, List, Dict, Any, Optional, NotRequired

from .enums import Priority
from task_assistant.utils.exceptions import MalformedStateError


class Task(TypedDict):
    """Node in the task forest. Subtasks are owned exclusively by the parent."""
    id: str
    title: str
    is_completed: bool
    priority: Priority
    created_at: int              # epoch milliseconds
    subtasks: NotRequired[List["Task"]]


Forest = List[Task]


def generate_id() -> str:
    """Return a fresh opaque task identifier."""
    return uuid.uuid4().hex[:12]


def now_ms() -> int:
    return int(time.time() * 1000)


def create_task(
    title: str,
    priority: Optional[Priority] = None,
    is_completed: bool = False,
    task_id: Optional[str] = None,
    created_at: Optional[int] = None,
    subtasks: Optional[List[Task]] = None,
) -> Task:
    """
    Build a new task node.

    Args:
        title: Display text (must not be blank)
        priority: Priority level, medium when omitted
        is_completed: Initial completion flag
        task_id: Explicit id; a generated one is used when omitted
        created_at: Creation timestamp in epoch ms; now when omitted
        subtasks: Initial children (usually empty)

    Returns:
        Task dict
    """
    if not title or not title.strip():
        raise ValueError("Task title cannot be empty")

    task: Task = {
        "id": task_id or generate_id(),
        "title": title,
        "is_completed": is_completed,
        "priority": Priority(priority) if priority else Priority.MEDIUM,
        "created_at": created_at if created_at is not None else now_ms(),
    }
    if subtasks is not None:
        task["subtasks"] = list(subtasks)
    return task


def task_to_dict(task: Task) -> Dict[str, Any]:
    """Convert a task (and its subtree) to a JSON-compatible dict."""
    data: Dict[str, Any] = {
        "id": task["id"],
        "title": task["title"],
        "is_completed": task["is_completed"],
        "priority": Priority(task["priority"]).value,
        "created_at": task["created_at"],
    }
    if "subtasks" in task:
        data["subtasks"] = [task_to_dict(child) for child in task["subtasks"]]
    return data


def task_from_dict(data: Any) -> Task:
    """
    Rebuild a task (and its subtree) from a stored dict.

    Raises:
        MalformedStateError: If the structure cannot be a valid task
    """
    if not isinstance(data, dict):
        raise MalformedStateError("Task entry must be an object", actual_value=type(data).__name__)

    task_id = data.get("id")
    if not isinstance(task_id, str) or not task_id:
        raise MalformedStateError("Task entry is missing a string 'id'", actual_value=task_id)

    title = data.get("title")
    if not isinstance(title, str) or not title.strip():
        raise MalformedStateError(f"Task {task_id} has no title", actual_value=title)

    is_completed = data.get("is_completed", False)
    if not isinstance(is_completed, bool):
        raise MalformedStateError(f"Task {task_id} has a non-boolean 'is_completed'", actual_value=is_completed)

    try:
        priority = Priority(data.get("priority") or Priority.MEDIUM)
    except ValueError:
        raise MalformedStateError(f"Task {task_id} has an unknown priority", actual_value=data.get("priority"))

    created_at = data.get("created_at", 0)
    if isinstance(created_at, bool) or not isinstance(created_at, (int, float)):
        raise MalformedStateError(f"Task {task_id} has a non-numeric 'created_at'", actual_value=created_at)

    task: Task = {
        "id": task_id,
        "title": title,
        "is_completed": is_completed,
        "priority": priority,
        "created_at": int(created_at),
    }

    if "subtasks" in data and data["subtasks"] is not None:
        children = data["subtasks"]
        if not isinstance(children, list):
            raise MalformedStateError(f"Task {task_id} has non-list 'subtasks'")
        task["subtasks"] = [task_from_dict(child) for child in children]

    return task


def forest_to_list(forest: Forest) -> List[Dict[str, Any]]:
    return [task_to_dict(task) for task in forest]


def forest_from_list(data: Any) -> Forest:
    """Rebuild a whole forest; raises MalformedStateError on any invalid node."""
    if not isinstance(data, list):
        raise MalformedStateError("Stored forest must be a list", actual_value=type(data).__name__)
    return [task_from_dict(entry) for entry in data]
