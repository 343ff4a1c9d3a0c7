"""
Conversation module - The round-at-a-time loop between user, model and tools

States: idle → awaiting_model_reply → (executing_tools → awaiting_model_reply)* → idle

A round starts with one user message and ends with exactly one AI message.
Tool invocations are applied in the order the model listed them, one after
another, and the whole batch of results goes back to the model as a single
follow-up turn. Follow-up replies may request tools again until
max_tool_rounds batches have run; calls beyond that are answered with a
"skipped" result and not executed.
"""

import json
import threading
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING

from langchain_core.messages import ToolMessage

from task_assistant.models import ChatMessage, LoopState, Sender, create_chat_message
from task_assistant.utils.llm_client import ChatSession, message_text
from task_assistant.utils.logger import get_logger
from task_assistant.utils.prompt_builder import (
    PromptBuilder,
    GREETING,
    ERROR_FALLBACK_REPLY,
    EMPTY_REPLY_FALLBACK,
)

from .workflow import ConversationWorkflowBuilder, RoundState

if TYPE_CHECKING:
    from .tools import ToolDispatcher

logger = get_logger(__name__)

MessageListener = Callable[[ChatMessage], None]

SKIPPED_TOOL_RESULT = {
    "success": False,
    "result": "Not executed: tool call limit for this request was reached.",
}


class ConversationLoop:
    """
    Drives rounds of conversation against a model session and a dispatcher.

    Only one round runs at a time; send() while a round is in flight is
    refused. Failures anywhere in a round are caught here, once, and turn
    into a single apologetic AI message. Task changes already made by tools
    in that round stay applied.
    """

    def __init__(
        self,
        session: ChatSession,
        dispatcher: "ToolDispatcher",
        max_tool_rounds: int = 5,
        on_message: Optional[MessageListener] = None,
    ):
        """
        Args:
            session: Persistent model session with the tools bound
            dispatcher: Tool dispatcher operating on the task store
            max_tool_rounds: Tool batches one round may execute
            on_message: Called with every message appended to the history
        """
        if max_tool_rounds < 1:
            raise ValueError("max_tool_rounds must be at least 1")

        self.session = session
        self.dispatcher = dispatcher
        self.max_tool_rounds = max_tool_rounds
        self.on_message = on_message
        self.state = LoopState.IDLE
        self.messages: List[ChatMessage] = []
        self._round_lock = threading.Lock()

        self.app = ConversationWorkflowBuilder(self).build().compile()

        self._append(create_chat_message(GREETING, Sender.AI))

    @property
    def is_loading(self) -> bool:
        return self.state != LoopState.IDLE

    def _append(self, message: ChatMessage) -> ChatMessage:
        self.messages.append(message)
        if self.on_message is not None:
            self.on_message(message)
        return message

    def send(self, text: str) -> Optional[ChatMessage]:
        """
        Run one round for a user message.

        Args:
            text: What the user typed

        Returns:
            The AI message that ended the round, or None when the message was
            blank or a round was already in flight
        """
        if not text or not text.strip():
            return None

        if not self._round_lock.acquire(blocking=False):
            logger.warning("[LOOP] Refusing a new message while a round is in progress")
            return None

        try:
            self._append(create_chat_message(text, Sender.USER))
            checkpoint = self.session.checkpoint()

            try:
                final_state = self.app.invoke(
                    RoundState(user_text=text, reply=None, tool_results=[], tool_rounds=0, final_text=""),
                    config={"recursion_limit": self.max_tool_rounds * 2 + 5},
                )
                reply_text = final_state["final_text"]
            except Exception as e:
                logger.error(f"[LOOP] Round failed: {e}")
                self.session.rollback(checkpoint)
                reply_text = ERROR_FALLBACK_REPLY

            return self._append(create_chat_message(reply_text, Sender.AI))
        finally:
            self.state = LoopState.IDLE
            self._round_lock.release()

    # ------------------------------------------------------------------
    # Graph nodes
    # ------------------------------------------------------------------

    def _call_model(self, state: Dict[str, Any]) -> Dict[str, Any]:
        self.state = LoopState.AWAITING_MODEL_REPLY

        tool_results = state.get("tool_results") or []
        if tool_results:
            logger.debug(f"[LOOP] Sending {len(tool_results)} tool result(s) to the model")
            reply = self.session.send_tool_results(tool_results)
        else:
            reply = self.session.send_message(state["user_text"])

        return {"reply": reply, "tool_results": []}

    def _execute_tools(self, state: Dict[str, Any]) -> Dict[str, Any]:
        self.state = LoopState.EXECUTING_TOOLS

        results: List[ToolMessage] = []
        for call in state["reply"].tool_calls:
            name = call["name"]
            self._append(create_chat_message(PromptBuilder.build_tool_log(name), Sender.SYSTEM))

            result = self.dispatcher.dispatch(name, call.get("args"))
            results.append(
                ToolMessage(
                    content=json.dumps(result),
                    tool_call_id=call.get("id") or name,
                    name=name,
                )
            )

        return {"tool_results": results, "tool_rounds": state.get("tool_rounds", 0) + 1}

    def _finalize(self, state: Dict[str, Any]) -> Dict[str, Any]:
        reply = state["reply"]

        # Calls past the limit still need an answer in the history
        if reply.tool_calls:
            self.session.record_tool_results([
                ToolMessage(
                    content=json.dumps(SKIPPED_TOOL_RESULT),
                    tool_call_id=call.get("id") or call["name"],
                    name=call["name"],
                )
                for call in reply.tool_calls
            ])

        text = message_text(reply).strip()
        return {"final_text": text or EMPTY_REPLY_FALLBACK}
