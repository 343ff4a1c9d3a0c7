"""
Tests for the tool catalogue and the dispatcher
"""

from task_assistant.core import tree_ops
from task_assistant.core.tools import TOOL_SCHEMAS, ToolDispatcher, simplify_forest
from task_assistant.models import Priority


class TestCatalogue:

    def test_tool_names(self):
        assert [schema["name"] for schema in TOOL_SCHEMAS] == [
            "addTask", "addSubtask", "removeTask", "updateTaskStatus", "getTasks",
        ]

    def test_required_parameters(self):
        required = {schema["name"]: schema["parameters"].get("required", []) for schema in TOOL_SCHEMAS}
        assert required == {
            "addTask": ["title"],
            "addSubtask": ["parentQuery", "title"],
            "removeTask": [],
            "updateTaskStatus": ["taskId", "completed"],
            "getTasks": [],
        }

    def test_priority_enum(self):
        priority = TOOL_SCHEMAS[0]["parameters"]["properties"]["priority"]
        assert priority["enum"] == ["low", "medium", "high"]


class TestDispatcher:

    def test_add_task(self, store):
        result = ToolDispatcher(store).dispatch("addTask", {"title": "Call plumber", "priority": "high"})

        assert result["success"] is True
        assert result["result"] == f"Task added successfully with ID: {result['task_id']}"
        first = store.forest[0]
        assert first["id"] == result["task_id"]
        assert first["title"] == "Call plumber"
        assert first["priority"] == Priority.HIGH
        assert first["is_completed"] is False

    def test_add_task_defaults_to_medium(self, store):
        ToolDispatcher(store).dispatch("addTask", {"title": "Water plants"})
        assert store.forest[0]["priority"] == Priority.MEDIUM

    def test_add_subtask(self, store):
        result = ToolDispatcher(store).dispatch(
            "addSubtask", {"parentQuery": "review", "title": "Verify data"}
        )

        assert result["success"] is True
        assert result["result"] == "Subtask 'Verify data' added to parent matching 'review'."
        children = store.forest[0]["subtasks"]
        assert [child["title"] for child in children] == ["Check email specs", "Verify data"]

    def test_add_subtask_no_parent(self, store):
        """Scenario: parent not found leaves the forest untouched."""
        before = store.forest
        result = ToolDispatcher(store).dispatch(
            "addSubtask", {"parentQuery": "groceries", "title": "Milk"}
        )

        assert result == {
            "success": False,
            "result": "Could not find a parent task matching 'groceries' to add the subtask to.",
        }
        assert store.forest is before

    def test_remove_by_title(self, store):
        result = ToolDispatcher(store).dispatch("removeTask", {"searchTitle": "coffee"})

        assert result["success"] is True
        assert result["result"] == "Successfully removed 1 task(s)."
        assert result["removed_count"] == 1
        assert tree_ops.find_task(store.forest, "3") is None

    def test_remove_without_criteria(self, store):
        result = ToolDispatcher(store).dispatch("removeTask", {})

        assert result["success"] is False
        assert result["result"] == "No tasks found matching that criteria."
        assert tree_ops.count_tasks(store.forest) == 3

    def test_update_status(self, store):
        result = ToolDispatcher(store).dispatch("updateTaskStatus", {"taskId": "2", "completed": True})

        assert result["success"] is True
        assert result["result"] == "Task 2 marked as completed."
        assert tree_ops.find_task(store.forest, "2")["is_completed"] is True

    def test_update_status_incomplete_message(self, store):
        result = ToolDispatcher(store).dispatch("updateTaskStatus", {"taskId": "3", "completed": False})
        assert result["result"] == "Task 3 marked as incomplete."

    def test_update_status_unknown_task(self, store):
        result = ToolDispatcher(store).dispatch("updateTaskStatus", {"taskId": "99", "completed": True})

        assert result == {"success": False, "result": "Task with ID 99 not found."}

    def test_get_tasks_reads_current_forest(self, store):
        dispatcher = ToolDispatcher(store)
        dispatcher.dispatch("addTask", {"title": "Fresh"})
        result = dispatcher.dispatch("getTasks", {})

        assert result["success"] is True
        assert result["tasks"] == simplify_forest(store.forest)
        assert result["tasks"][0]["title"] == "Fresh"
        assert result["tasks"][1]["subtasks"][0] == {
            "id": "2",
            "title": "Check email specs",
            "priority": "medium",
            "completed": False,
            "subtasks": [],
        }

    def test_sequential_calls_see_each_other(self, store):
        dispatcher = ToolDispatcher(store)
        added = dispatcher.dispatch("addTask", {"title": "Plan trip"})
        dispatcher.dispatch("addSubtask", {"parentQuery": added["task_id"], "title": "Book hotel"})

        assert store.forest[0]["subtasks"][0]["title"] == "Book hotel"


class TestDispatcherRejections:
    """Invalid invocations come back as failed results and change nothing."""

    def test_unknown_tool(self, store):
        before = store.forest
        result = ToolDispatcher(store).dispatch("deleteEverything", {})

        assert result["success"] is False
        assert result["result"] == "Unknown tool: deleteEverything"
        assert store.forest is before

    def test_missing_required_title(self, store):
        result = ToolDispatcher(store).dispatch("addTask", {"priority": "low"})

        assert result["success"] is False
        assert "title" in result["error"]
        assert tree_ops.count_tasks(store.forest) == 3

    def test_blank_title(self, store):
        result = ToolDispatcher(store).dispatch("addTask", {"title": "   "})
        assert result["success"] is False

    def test_priority_outside_enum(self, store):
        result = ToolDispatcher(store).dispatch("addTask", {"title": "x", "priority": "urgent"})

        assert result["success"] is False
        assert result["details"]["parameter_name"] == "priority"

    def test_completed_must_be_boolean(self, store):
        result = ToolDispatcher(store).dispatch("updateTaskStatus", {"taskId": "2", "completed": "yes"})

        assert result["success"] is False
        assert tree_ops.find_task(store.forest, "2")["is_completed"] is False

    def test_undeclared_parameter(self, store):
        result = ToolDispatcher(store).dispatch("getTasks", {"filter": "open"})
        assert result["success"] is False

    def test_arguments_must_be_object(self, store):
        result = ToolDispatcher(store).dispatch("addTask", ["Buy milk"])
        assert result["success"] is False

    def test_null_optional_parameter_is_ignored(self, store):
        result = ToolDispatcher(store).dispatch("addTask", {"title": "Walk dog", "priority": None})

        assert result["success"] is True
        assert store.forest[0]["priority"] == Priority.MEDIUM

    def test_missing_arguments_for_tool_without_parameters(self, store):
        assert ToolDispatcher(store).dispatch("getTasks", None)["success"] is True
