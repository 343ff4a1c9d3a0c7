"""
Task Assistant - Hierarchical to-do list managed through LLM tool calls

Tasks form a forest: every task may carry an ordered list of subtasks. The
list can be edited by hand (toggle, delete) or by talking to a chat model
that calls a fixed set of tools (addTask, addSubtask, removeTask,
updateTaskStatus, getTasks).

Installation:
pip install -e .

Configuration:
    Create a .env file with your LLM provider configuration:

    LLM_API_KEY=AIza...
    ASSISTANT_LLM_PROVIDER=google
    ASSISTANT_LLM_MODEL=gemini-2.5-flash

Example:
    >>> from task_assistant import TaskAssistant, AssistantConfig, EnvConfig
    >>>
    >>> EnvConfig.load_env_file()
    >>> assistant = TaskAssistant(AssistantConfig.from_env())
    >>> reply = assistant.send("Add a subtask to Review project requirements called Read documentation")
    >>> print(reply["text"])
"""

__version__ = "1.0.0"
__all__ = [
    'TaskAssistant',
    'AssistantConfig',
    'LLMConfig',
    'EnvConfig',
    'Priority',
    'Sender',
    'Task',
    'ChatMessage',
]

from task_assistant.models import Priority, Sender, Task, ChatMessage
from task_assistant.config import AssistantConfig, LLMConfig, EnvConfig
from task_assistant.assistant import TaskAssistant
