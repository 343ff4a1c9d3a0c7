"""
Workflow module - LangGraph graph for one conversation round
"""

from typing import Any, Dict, List, Literal, Optional, TypedDict

from langchain_core.messages import AIMessage, ToolMessage
from langgraph.graph import StateGraph, END

from task_assistant.utils.logger import get_logger

logger = get_logger(__name__)


class RoundState(TypedDict, total=False):
    """State carried through one round."""
    user_text: str
    reply: Optional[AIMessage]
    tool_results: List[ToolMessage]
    tool_rounds: int
    final_text: str


class ConversationWorkflowBuilder:
    """
    Builds the LangGraph workflow for a single round.

    Workflow:
    1. call_model → send the user text (or the pending tool results) to the model
    2. route → reply asks for tools and the round still has tool budget?
       yes: execute_tools, no: finalize
    3. execute_tools → run every requested tool in order, then back to call_model
    4. finalize → settle the reply text and end
    """

    def __init__(self, loop: Any):
        """
        Args:
            loop: The ConversationLoop whose methods become graph nodes
        """
        self.loop = loop

    def build(self) -> StateGraph:
        workflow = StateGraph(RoundState)

        workflow.add_node("call_model", self.loop._call_model)
        workflow.add_node("execute_tools", self.loop._execute_tools)
        workflow.add_node("finalize", self.loop._finalize)

        workflow.set_entry_point("call_model")

        workflow.add_conditional_edges(
            "call_model",
            self._route_after_model,
            {
                "execute_tools": "execute_tools",
                "finalize": "finalize",
            }
        )
        workflow.add_edge("execute_tools", "call_model")
        workflow.add_edge("finalize", END)

        return workflow

    def _route_after_model(self, state: Dict[str, Any]) -> Literal["execute_tools", "finalize"]:
        reply = state.get("reply")
        if reply is None or not reply.tool_calls:
            return "finalize"

        if state.get("tool_rounds", 0) >= self.loop.max_tool_rounds:
            logger.warning(
                f"[LOOP] Tool round limit ({self.loop.max_tool_rounds}) reached, "
                f"not running {len(reply.tool_calls)} further tool call(s)"
            )
            return "finalize"

        return "execute_tools"
