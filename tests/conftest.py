import os

# Keep test runs from writing log files into the working tree
os.environ.setdefault("ASSISTANT_ENABLE_FILE_LOGGING", "false")

import pytest

from task_assistant.models import Priority, create_task
from task_assistant.storage import JsonKeyValueStore, TaskStore
from task_assistant.utils.llm_client import ChatSession

from .fakes import ScriptedChatModel


@pytest.fixture
def scenario_forest():
    """Two roots: 1 with child 2, and completed 3."""
    return [
        create_task(
            "Review project requirements",
            priority=Priority.HIGH,
            task_id="1",
            created_at=1000,
            subtasks=[create_task("Check email specs", task_id="2", created_at=1001)],
        ),
        create_task("Buy coffee beans", priority=Priority.LOW, is_completed=True, task_id="3", created_at=1002),
    ]


@pytest.fixture
def store(tmp_path, scenario_forest):
    task_store = TaskStore(JsonKeyValueStore(tmp_path / "store.json"))
    task_store.replace(scenario_forest)
    return task_store


@pytest.fixture
def make_session():
    """Build a ChatSession around a ScriptedChatModel with the given replies."""
    def factory(*replies):
        model = ScriptedChatModel(replies)
        session = ChatSession(model, system_instruction="You manage tasks.")
        return session, model
    return factory
