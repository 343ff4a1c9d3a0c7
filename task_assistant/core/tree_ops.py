"""
Tree operations module - Pure mutations over the task forest

Every operation takes the current forest and returns a new one; input nodes
are never modified. Only the path from a root to a changed node is rebuilt,
untouched subtrees are shared with the input. When nothing changes the input
list itself is returned.

Traversal order is depth-first, parent before children, siblings in stored
order. insert_subtask depends on it to pick its first match.
"""

from typing import Callable, Iterator, List, Optional, Tuple

from task_assistant.models import Task, Forest


TaskPredicate = Callable[[Task], bool]


def _with_subtasks(task: Task, subtasks: List[Task]) -> Task:
    updated = dict(task)
    updated["subtasks"] = subtasks
    return updated  # type: ignore[return-value]


def _title_contains(task: Task, query: Optional[str]) -> bool:
    """Case-insensitive unanchored match; blank queries never match."""
    if not query or not query.strip():
        return False
    return query.lower() in task["title"].lower()


def _update_where(forest: Forest, task_id: str, update: Callable[[Task], Task]) -> Tuple[Forest, bool]:
    found = False
    result: Forest = []

    for task in forest:
        if task["id"] == task_id:
            result.append(update(task))
            found = True
            continue

        children = task.get("subtasks")
        if children:
            new_children, child_found = _update_where(children, task_id, update)
            if child_found:
                result.append(_with_subtasks(task, new_children))
                found = True
                continue

        result.append(task)

    return (result if found else forest), found


def _remove_where(forest: Forest, predicate: TaskPredicate) -> Tuple[Forest, int]:
    # A matched node takes its subtree with it; descendants are not tested.
    removed = 0
    result: Forest = []

    for task in forest:
        if predicate(task):
            removed += 1
            continue

        children = task.get("subtasks")
        if children:
            new_children, child_removed = _remove_where(children, predicate)
            if child_removed:
                removed += child_removed
                result.append(_with_subtasks(task, new_children))
                continue

        result.append(task)

    return (result if removed else forest), removed


# ============================================================================
# MUTATIONS
# ============================================================================

def toggle_completion(forest: Forest, task_id: str) -> Forest:
    """Flip is_completed on the task with task_id. No-op if absent."""
    new_forest, _ = _update_where(
        forest,
        task_id,
        lambda task: {**task, "is_completed": not task["is_completed"]},  # type: ignore[misc]
    )
    return new_forest


def delete_subtree(forest: Forest, task_id: str) -> Forest:
    """Remove the task with task_id together with its subtree. No-op if absent."""
    new_forest, _ = _remove_where(forest, lambda task: task["id"] == task_id)
    return new_forest


def set_completion(forest: Forest, task_id: str, completed: bool) -> Tuple[Forest, bool]:
    """
    Set is_completed on the task with task_id.

    Returns:
        (new forest, found). The original forest comes back when not found.
    """
    return _update_where(
        forest,
        task_id,
        lambda task: {**task, "is_completed": completed},  # type: ignore[misc]
    )


def insert_subtask(forest: Forest, parent_query: str, new_task: Task) -> Tuple[Forest, bool]:
    """
    Append new_task to the subtasks of the first task matching parent_query.

    A task matches when its id equals parent_query or its title contains it
    (case-insensitive). Only the first match in traversal order receives the
    insertion, every other node is left as is.

    Returns:
        (new forest, added). The original forest comes back when nothing matches.
    """
    for index, task in enumerate(forest):
        if task["id"] == parent_query or _title_contains(task, parent_query):
            updated = _with_subtasks(task, list(task.get("subtasks") or []) + [new_task])
            return forest[:index] + [updated] + forest[index + 1:], True

        children = task.get("subtasks")
        if children:
            new_children, added = insert_subtask(children, parent_query, new_task)
            if added:
                return forest[:index] + [_with_subtasks(task, new_children)] + forest[index + 1:], True

    return forest, False


def remove_by_id_or_title(
    forest: Forest,
    task_id: Optional[str] = None,
    title_substring: Optional[str] = None,
) -> Tuple[Forest, int]:
    """
    Remove every task whose id equals task_id or whose title contains
    title_substring (case-insensitive), at any depth.

    Empty or missing criteria never match, so calling this with neither
    criterion is a no-op with a count of 0.

    Returns:
        (new forest, number of matched tasks removed). Descendants dropped
        along with a matched ancestor are not counted.
    """
    if not task_id and not (title_substring and title_substring.strip()):
        return forest, 0

    def matches(task: Task) -> bool:
        return (bool(task_id) and task["id"] == task_id) or _title_contains(task, title_substring)

    return _remove_where(forest, matches)


def prepend_task(forest: Forest, task: Task) -> Forest:
    """Add a top-level task in front of the existing ones (newest first)."""
    return [task] + list(forest)


# ============================================================================
# QUERIES
# ============================================================================

def iter_tasks(forest: Forest, depth: int = 0) -> Iterator[Tuple[int, Task]]:
    """Yield (depth, task) pairs in traversal order."""
    for task in forest:
        yield depth, task
        yield from iter_tasks(task.get("subtasks") or [], depth + 1)


def find_task(forest: Forest, task_id: str) -> Optional[Task]:
    for _, task in iter_tasks(forest):
        if task["id"] == task_id:
            return task
    return None


def count_tasks(forest: Forest) -> int:
    return sum(1 for _ in iter_tasks(forest))


def sorted_for_display(forest: Forest) -> Forest:
    """
    Display order: incomplete before completed, newest first within each group.

    Applied at every level. Returns new lists and leaves stored order alone.
    """
    ordered = sorted(forest, key=lambda task: (task["is_completed"], -task["created_at"]))
    return [
        _with_subtasks(task, sorted_for_display(task["subtasks"])) if task.get("subtasks") else task
        for task in ordered
    ]
