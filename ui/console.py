"""
Console front-end - Text rendering of the task list and the conversation

Renders the forest in display order (open tasks first, newest first) and
turns typed lines into the user intents: add(title), toggle(id), delete(id)
and submit(text).
"""

from typing import Callable, List, Optional

from task_assistant import TaskAssistant
from task_assistant.core.tree_ops import sorted_for_display
from task_assistant.models import ChatMessage, Forest, Priority, Sender
from task_assistant.utils.exceptions import TaskAssistantError
from task_assistant.utils.logger import get_logger

logger = get_logger("task_assistant.ui.console")

PRIORITY_MARKS = {
    Priority.HIGH: "↑",
    Priority.MEDIUM: " ",
    Priority.LOW: "↓",
}

SENDER_LABELS = {
    Sender.USER: "You",
    Sender.AI: "AI",
}

HELP_TEXT = """Commands:
  /tasks          show the task list
  /add <title>    add a top-level task (prefix the title with ! for high priority)
  /toggle <id>    mark a task done / not done
  /delete <id>    delete a task and its subtasks
  /help           show this help
  /quit           leave
Anything else is sent to the assistant, e.g. "Add subtask to Review Report: Verify data"."""


def render_tasks(forest: Forest) -> str:
    """Render the forest as an indented checklist in display order."""
    if not forest:
        return "No tasks yet. Ask the AI to add one!"

    lines: List[str] = []

    def walk(tasks: Forest, level: int) -> None:
        for task in tasks:
            box = "[x]" if task["is_completed"] else "[ ]"
            branch = "  " * level + ("└ " if level else "")
            mark = PRIORITY_MARKS[Priority(task["priority"])]
            lines.append(f"{branch}{box} {mark} {task['title']}  ({task['id']})")
            walk(task.get("subtasks") or [], level + 1)

    walk(sorted_for_display(forest), 0)
    return "\n".join(lines)


def render_message(message: ChatMessage) -> str:
    """Render one chat bubble; tool log lines are shown dimmed and indented."""
    if message["sender"] == Sender.SYSTEM:
        return f"    · {message['text']}"
    return f"{SENDER_LABELS[Sender(message['sender'])]}: {message['text']}"


class ConsoleApp:
    """Read-eval-print loop around a TaskAssistant."""

    def __init__(
        self,
        assistant_factory: Callable[..., TaskAssistant],
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
    ):
        """
        Args:
            assistant_factory: Builds the assistant; receives on_message=
            input_fn: Line reader (input() by default)
            output_fn: Line writer (print() by default)
        """
        self.input_fn = input_fn
        self.output_fn = output_fn
        self.assistant = assistant_factory(on_message=self._show_message)

    def _show_message(self, message: ChatMessage) -> None:
        # The user's own line is already on screen
        if message["sender"] != Sender.USER:
            self.output_fn(render_message(message))

    def handle_line(self, line: str) -> bool:
        """
        Act on one typed line.

        Returns:
            False when the user asked to quit
        """
        line = line.strip()
        if not line:
            return True

        command, _, argument = line.partition(" ")
        argument = argument.strip()

        if command == "/quit":
            return False
        try:
            self._dispatch_command(command, argument, line)
        except TaskAssistantError as e:
            logger.error(f"Command {command} failed: {e}")
            self.output_fn(f"Could not complete that: {e.message}")
        return True

    def _dispatch_command(self, command: str, argument: str, line: str) -> None:
        if command == "/help":
            self.output_fn(HELP_TEXT)
        elif command == "/tasks":
            self.output_fn(render_tasks(self.assistant.tasks))
        elif command in ("/add", "/toggle", "/delete"):
            if not argument:
                noun = "title" if command == "/add" else "task id"
                self.output_fn(f"Usage: {command} <{noun}>")
                return
            if command == "/add":
                self._add_task(argument)
            elif command == "/toggle":
                self.assistant.toggle(argument)
            else:
                self.assistant.delete(argument)
            self.output_fn(render_tasks(self.assistant.tasks))
        elif command.startswith("/"):
            self.output_fn(f"Unknown command {command}. Type /help for the list.")
        else:
            self.assistant.send(line)

    def _add_task(self, argument: str) -> None:
        priority = None
        if argument.startswith("!"):
            priority, argument = Priority.HIGH, argument[1:].strip()
        if not argument:
            self.output_fn("Usage: /add <title>")
            return
        self.assistant.add(argument, priority)

    def run(self, prompt: str = "> ") -> None:
        # The greeting was already shown through on_message
        self.output_fn(render_tasks(self.assistant.tasks))

        while True:
            try:
                line = self.input_fn(prompt)
            except (EOFError, KeyboardInterrupt):
                self.output_fn("")
                break
            if not self.handle_line(line):
                break

        logger.info("Console session ended")


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point used by start_assistant.py and the console script."""
    import argparse

    from task_assistant import AssistantConfig, EnvConfig, LLMConfig
    from task_assistant.utils.exceptions import ConfigurationError

    parser = argparse.ArgumentParser(description="Task Assistant console")
    parser.add_argument("--env-file", help="Path to a .env file (default: search upwards from cwd)")
    parser.add_argument("--provider", choices=["google", "anthropic", "openai"], help="Override ASSISTANT_LLM_PROVIDER")
    parser.add_argument("--model", help="Override ASSISTANT_LLM_MODEL")
    args = parser.parse_args(argv)

    EnvConfig.load_env_file(args.env_file)
    provider = args.provider or EnvConfig.get("ASSISTANT_LLM_PROVIDER", "google").lower()

    try:
        config = AssistantConfig.from_env()
        if args.provider or args.model:
            # A new provider starts from its own default model and key variable
            config.llm = LLMConfig(
                provider=provider,
                model_name=args.model or ("" if args.provider else config.llm.model_name),
                api_key=EnvConfig.get("LLM_API_KEY"),
                temperature=config.llm.temperature,
                timeout=config.llm.timeout,
                max_retries=config.llm.max_retries,
            )
        app = ConsoleApp(lambda on_message: TaskAssistant(config, on_message=on_message))
    except ConfigurationError as e:
        print(f"Cannot start the assistant: {e.message}")
        print(f"Example .env settings:{EnvConfig.show_config_template(provider)}")
        return 1
    except (TaskAssistantError, ValueError) as e:
        print(f"Cannot start the assistant: {e}")
        return 1

    print(HELP_TEXT)
    app.run()
    return 0
