"""
Task store - Owner of the current forest value

The store holds the single forest value shared by the dispatcher and the
front-end. Every change replaces the value as a whole and writes it to the
key-value store; nothing edits nodes in place.
"""

from typing import Optional

from task_assistant.config import StorageConfig
from task_assistant.core import tree_ops
from task_assistant.models import Forest, Priority, create_task, forest_from_list, forest_to_list
from task_assistant.utils.exceptions import MalformedStateError, PersistenceError
from task_assistant.utils.logger import get_logger

from .kv_store import JsonKeyValueStore

logger = get_logger(__name__)

def default_forest() -> Forest:
    """Seed data used when nothing valid is stored yet."""
    return [
        create_task(
            "Review project requirements",
            priority=Priority.HIGH,
            subtasks=[create_task("Check email specs", priority=Priority.MEDIUM)],
        ),
        create_task("Buy coffee beans", priority=Priority.LOW, is_completed=True),
    ]


class TaskStore:
    """
    Current forest plus its persistence.

    Usage:
        store = TaskStore.from_config(config.storage)
        store.toggle(task_id)
        store.replace(tree_ops.delete_subtree(store.forest, other_id))
    """

    def __init__(self, kv_store: JsonKeyValueStore, key: str = "taskai_tasks"):
        self.kv_store = kv_store
        self.key = key
        self._forest: Forest = self._load()

    @classmethod
    def from_config(cls, storage_config: StorageConfig) -> "TaskStore":
        return cls(JsonKeyValueStore(storage_config.data_path), key=storage_config.tasks_key)

    def _load(self) -> Forest:
        try:
            raw = self.kv_store.get(self.key)
            if raw is None:
                logger.info("[STORE] No stored tasks, starting from the default list")
                return default_forest()
            forest = forest_from_list(raw)
            logger.info(f"[STORE] Loaded {tree_ops.count_tasks(forest)} task(s) from {self.kv_store.file_path}")
            return forest
        except MalformedStateError as e:
            logger.warning(f"[STORE] Stored tasks are unreadable, using the default list: {e}")
            return default_forest()

    @property
    def forest(self) -> Forest:
        """The forest as of now. Read it again after each change."""
        return self._forest

    def replace(self, forest: Forest) -> None:
        """
        Install a new forest value and persist it.

        Passing the current value back (an operation that changed nothing)
        skips the write. The value in memory only changes once the write
        succeeded.

        Raises:
            PersistenceError: If the forest cannot be written
        """
        if forest is self._forest:
            return

        try:
            self.kv_store.set(self.key, forest_to_list(forest))
        except PersistenceError as e:
            logger.error(f"[STORE] Keeping the previous task list, write failed: {e.message}")
            raise

        self._forest = forest
        logger.debug(f"[STORE] Persisted {tree_ops.count_tasks(forest)} task(s)")

    # ------------------------------------------------------------------
    # Direct user intents
    # ------------------------------------------------------------------

    def toggle(self, task_id: str) -> None:
        self.replace(tree_ops.toggle_completion(self._forest, task_id))

    def delete(self, task_id: str) -> None:
        self.replace(tree_ops.delete_subtree(self._forest, task_id))

    def add(self, title: str, priority: Optional[Priority] = None) -> str:
        """Add a top-level task and return its id."""
        task = create_task(title, priority=priority)
        self.replace(tree_ops.prepend_task(self._forest, task))
        return task["id"]
