"""
Prompt builder module - Fixed texts the assistant shows or sends to the model
"""

from typing import Iterable, Optional


GREETING = (
    "Hello! I'm your Task AI. I can help you manage your tasks. Try saying "
    "'Add a subtask to Review project requirements called Read documentation'."
)

ERROR_FALLBACK_REPLY = "Sorry, I encountered an error processing that request. Please try again."

EMPTY_REPLY_FALLBACK = "Done."


class PromptBuilder:
    """
    Builds the system instruction and tool log lines.

    Keeping these texts in one place makes the model contract easy to review
    and to assert on in tests.
    """

    RULES = [
        "When the user asks to add a task, call 'addTask'.",
        "If the user asks to add a \"subtask\", \"child task\", or \"step\" to a specific task, call 'addSubtask'.",
        "When the user asks to delete/remove a task, ask for clarification if it's ambiguous, or call 'removeTask'.",
        "When the user asks what is on the list, call 'getTasks' first to see the current state, then summarize it.",
        "If you need a task's ID (for example to mark it done), call 'getTasks' to look it up instead of guessing.",
        "If you perform an action (add/remove/update), confirm briefly to the user what you did.",
        "Be concise and professional but friendly.",
    ]

    @staticmethod
    def build_system_instruction(
        extra_rules: Optional[Iterable[str]] = None,
        catalogue_version: Optional[str] = None,
    ) -> str:
        """
        Build the system instruction for the model session.

        Args:
            extra_rules: Additional numbered rules appended after the defaults
            catalogue_version: Version of the bound tool catalogue, stated to the model

        Returns:
            Instruction text
        """
        rules = list(PromptBuilder.RULES) + list(extra_rules or [])
        numbered = "\n".join(f"{index}. {rule}" for index, rule in enumerate(rules, start=1))
        return (
            "You are a highly efficient personal productivity assistant.\n"
            "You help the user manage a Task List using the provided tools.\n"
            "\n"
            f"Rules:\n{numbered}\n"
            + (f"\nTool catalogue version: {catalogue_version}\n" if catalogue_version else "")
        )

    @staticmethod
    def build_tool_log(tool_name: str) -> str:
        """Line shown in the conversation before a tool runs."""
        return f"Executing: {tool_name}..."
