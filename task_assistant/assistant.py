"""
Assistant module - Main TaskAssistant implementation
"""

from typing import List, Optional

from task_assistant.config import AssistantConfig
from task_assistant.models import ChatMessage, Forest, Priority
from task_assistant.storage import TaskStore
from task_assistant.utils.llm_client import ChatSession
from task_assistant.utils.logger import get_logger, setup_logging
from task_assistant.utils.prompt_builder import PromptBuilder

from task_assistant.core.conversation import ConversationLoop, MessageListener
from task_assistant.core.tools import ToolDispatcher, TOOL_SCHEMAS, TOOL_CATALOGUE_VERSION

logger = get_logger(__name__)


class TaskAssistant:
    """
    Hierarchical to-do list that can be managed by hand or through the model.

    Owns one task store, one tool dispatcher, one model session and one
    conversation loop for the lifetime of the application.
    """

    def __init__(
        self,
        config: Optional[AssistantConfig] = None,
        session: Optional[ChatSession] = None,
        store: Optional[TaskStore] = None,
        on_message: Optional[MessageListener] = None,
    ):
        """
        Initialize the Task Assistant.

        Args:
            config: AssistantConfig instance with all settings
            session: Model session to use; built from config.llm when omitted
            store: Task store to use; opened from config.storage when omitted
            on_message: Called with every message added to the conversation
        """
        self.config = config or AssistantConfig()
        setup_logging(log_level="DEBUG" if self.config.debug else self.config.log_level, force=True)

        logger.info("Initializing TaskAssistant")
        logger.debug(f"Configuration: {self.config.to_dict()}")

        self.store = store or TaskStore.from_config(self.config.storage)
        self.dispatcher = ToolDispatcher(self.store)
        self.session = session or ChatSession.create(
            self.config.llm,
            tools=TOOL_SCHEMAS,
            system_instruction=PromptBuilder.build_system_instruction(catalogue_version=TOOL_CATALOGUE_VERSION),
        )
        logger.info(f"Tool catalogue v{TOOL_CATALOGUE_VERSION}: {', '.join(self.dispatcher.tool_names)}")
        self.loop = ConversationLoop(
            self.session,
            self.dispatcher,
            max_tool_rounds=self.config.max_tool_rounds,
            on_message=on_message,
        )

    @property
    def tasks(self) -> Forest:
        return self.store.forest

    @property
    def messages(self) -> List[ChatMessage]:
        return self.loop.messages

    @property
    def is_loading(self) -> bool:
        return self.loop.is_loading

    def send(self, text: str) -> Optional[ChatMessage]:
        """Submit a message to the assistant; see ConversationLoop.send."""
        return self.loop.send(text)

    def toggle(self, task_id: str) -> None:
        self.store.toggle(task_id)

    def delete(self, task_id: str) -> None:
        self.store.delete(task_id)

    def add(self, title: str, priority: Optional[Priority] = None) -> str:
        """Add a top-level task by hand and return its id."""
        return self.store.add(title, priority)
