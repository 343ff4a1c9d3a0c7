"""
Tests for the conversation loop: rounds, tool batches, failures and the busy gate
"""

import json
from unittest.mock import patch

import pytest
from langchain_core.messages import HumanMessage, SystemMessage, ToolMessage

from task_assistant.core import tree_ops
from task_assistant.core.conversation import ConversationLoop, SKIPPED_TOOL_RESULT
from task_assistant.core.tools import ToolDispatcher
from task_assistant.models import Sender
from task_assistant.utils.prompt_builder import EMPTY_REPLY_FALLBACK, ERROR_FALLBACK_REPLY, GREETING

from .fakes import ai_reply, tool_call


def texts(loop, sender):
    return [message["text"] for message in loop.messages if message["sender"] == sender]


class TestConversationLoop:

    @pytest.fixture(autouse=True)
    def _setup(self, store, make_session):
        self.store = store
        self.make_session = make_session
        self.seen = []

    def _loop(self, *replies, max_tool_rounds=5):
        session, model = self.make_session(*replies)
        loop = ConversationLoop(
            session,
            ToolDispatcher(self.store),
            max_tool_rounds=max_tool_rounds,
            on_message=self._record,
        )
        return loop, session, model

    def _record(self, message):
        self.seen.append((message["sender"], message["text"], tree_ops.count_tasks(self.store.forest)))

    def test_greeting_is_first_message(self):
        loop, _, model = self._loop()

        assert [m["text"] for m in loop.messages] == [GREETING]
        assert loop.messages[0]["sender"] == Sender.AI
        assert model.requests == []

    def test_plain_reply(self):
        loop, session, model = self._loop(ai_reply("Sure, here you go."))
        reply = loop.send("Hello")

        assert reply["sender"] == Sender.AI
        assert reply["text"] == "Sure, here you go."
        assert [m["sender"] for m in loop.messages] == [Sender.AI, Sender.USER, Sender.AI]
        assert loop.is_loading is False

        request = model.requests[0]
        assert isinstance(request[0], SystemMessage)
        assert isinstance(request[-1], HumanMessage)
        assert request[-1].content == "Hello"
        assert len(session.history) == 2

    def test_blank_input_ignored(self):
        loop, _, model = self._loop()

        assert loop.send("   ") is None
        assert loop.send("") is None
        assert len(loop.messages) == 1
        assert model.requests == []

    def test_add_then_complete_in_one_batch(self):
        """A batch applies in order, so the second call sees the task the first one created."""
        loop, _, model = self._loop(
            ai_reply(calls=[
                tool_call("addTask", {"title": "Call mom"}, "c1"),
                tool_call("updateTaskStatus", {"taskId": "new-1", "completed": True}, "c2"),
            ]),
            ai_reply("Added 'Call mom' and marked it done."),
        )

        with patch("task_assistant.models.task.generate_id", return_value="new-1"):
            reply = loop.send("Add call mom and mark it done")

        first = self.store.forest[0]
        assert first["id"] == "new-1"
        assert first["title"] == "Call mom"
        assert first["is_completed"] is True
        assert reply["text"] == "Added 'Call mom' and marked it done."

        # One follow-up turn carrying both results
        assert len(model.requests) == 2
        follow_up = model.requests[1][-2:]
        assert all(isinstance(message, ToolMessage) for message in follow_up)
        assert [message.tool_call_id for message in follow_up] == ["c1", "c2"]
        assert json.loads(follow_up[1].content)["result"] == "Task new-1 marked as completed."

    def test_tool_log_is_shown_before_the_tool_runs(self):
        loop, _, _ = self._loop(
            ai_reply(calls=[tool_call("addTask", {"title": "Buy stamps"})]),
            ai_reply("Done adding."),
        )
        loop.send("Add buy stamps")

        assert self.seen[1:] == [
            (Sender.USER, "Add buy stamps", 3),
            (Sender.SYSTEM, "Executing: addTask...", 3),
            (Sender.AI, "Done adding.", 4),
        ]

    def test_failed_tool_result_goes_back_to_model(self):
        loop, _, model = self._loop(
            ai_reply(calls=[tool_call("addSubtask", {"parentQuery": "groceries", "title": "Milk"})]),
            ai_reply("I couldn't find a groceries task."),
        )
        loop.send("Add milk under groceries")

        payload = json.loads(model.requests[1][-1].content)
        assert payload["success"] is False
        assert texts(loop, Sender.AI)[-1] == "I couldn't find a groceries task."
        assert tree_ops.count_tasks(self.store.forest) == 3

    def test_unknown_tool_does_not_end_round(self):
        loop, _, model = self._loop(
            ai_reply(calls=[tool_call("archiveTask", {"taskId": "1"})]),
            ai_reply("That is not something I can do."),
        )
        loop.send("Archive the review task")

        assert json.loads(model.requests[1][-1].content)["result"] == "Unknown tool: archiveTask"
        assert texts(loop, Sender.SYSTEM) == ["Executing: archiveTask..."]
        assert texts(loop, Sender.AI)[-1] == "That is not something I can do."

    def test_empty_final_text_uses_fallback(self):
        loop, _, _ = self._loop(
            ai_reply(calls=[tool_call("removeTask", {"searchTitle": "coffee"})]),
            ai_reply(""),
        )
        loop.send("Remove coffee")

        assert texts(loop, Sender.AI)[-1] == EMPTY_REPLY_FALLBACK
        assert tree_ops.find_task(self.store.forest, "3") is None

    def test_follow_up_may_request_more_tools(self):
        loop, _, model = self._loop(
            ai_reply(calls=[tool_call("getTasks")]),
            ai_reply(calls=[tool_call("updateTaskStatus", {"taskId": "2", "completed": True})]),
            ai_reply("Checked off the email specs."),
        )
        loop.send("Mark the email one done")

        assert len(model.requests) == 3
        assert texts(loop, Sender.SYSTEM) == ["Executing: getTasks...", "Executing: updateTaskStatus..."]
        assert tree_ops.find_task(self.store.forest, "2")["is_completed"] is True

    def test_tool_round_limit(self):
        loop, session, model = self._loop(
            ai_reply(calls=[tool_call("getTasks", call_id="c1")]),
            ai_reply("Still looking.", calls=[tool_call("addTask", {"title": "Loop"}, "c2")]),
            max_tool_rounds=1,
        )
        loop.send("Do something")

        assert len(model.requests) == 2
        assert texts(loop, Sender.SYSTEM) == ["Executing: getTasks..."]
        assert texts(loop, Sender.AI)[-1] == "Still looking."
        assert tree_ops.count_tasks(self.store.forest) == 3

        skipped = session.history[-1]
        assert isinstance(skipped, ToolMessage)
        assert skipped.tool_call_id == "c2"
        assert json.loads(skipped.content) == SKIPPED_TOOL_RESULT

    def test_model_failure_gives_apology_and_keeps_mutations(self):
        loop, session, model = self._loop(
            ai_reply(calls=[tool_call("addTask", {"title": "Half done"})]),
            RuntimeError("connection reset"),
        )
        reply = loop.send("Add half done")

        assert reply["text"] == ERROR_FALLBACK_REPLY
        assert reply["sender"] == Sender.AI
        assert self.store.forest[0]["title"] == "Half done"
        assert loop.is_loading is False
        assert session.history == []

        # The next round starts from a clean history
        model.replies.append(ai_reply("Hello again"))
        assert loop.send("Are you there?")["text"] == "Hello again"
        assert [type(m) for m in model.requests[-1]] == [SystemMessage, HumanMessage]

    def test_failure_on_first_request(self):
        loop, _, _ = self._loop(RuntimeError("quota exceeded"))
        loop.send("Hi")

        assert [m["sender"] for m in loop.messages] == [Sender.AI, Sender.USER, Sender.AI]
        assert loop.messages[-1]["text"] == ERROR_FALLBACK_REPLY

    def test_send_refused_while_round_in_flight(self):
        nested = []

        def reply_while_busy(messages):
            nested.append((loop.is_loading, loop.send("Another thing")))
            return ai_reply("First answer")

        loop, _, model = self._loop(reply_while_busy)
        loop.send("First thing")

        assert nested == [(True, None)]
        assert len(model.requests) == 1
        assert texts(loop, Sender.USER) == ["First thing"]
        assert loop.is_loading is False

    def test_invalid_max_tool_rounds(self):
        session, _ = self.make_session()
        with pytest.raises(ValueError):
            ConversationLoop(session, ToolDispatcher(self.store), max_tool_rounds=0)
