"""
LLM Client - Provider chat models and the persistent chat session

The provider model is built through its LangChain wrapper (Google Gemini,
Anthropic or OpenAI) and the tool catalogue is bound to it once. ChatSession
keeps the dialogue history for the lifetime of the application and turns every
provider failure into a ModelTransportError.

Example usage:
    from task_assistant.utils.llm_client import ChatSession

    session = ChatSession.create(config.llm, tools=TOOL_SCHEMAS, system_instruction=instruction)
    reply = session.send_message("Add milk to my list")
    for call in reply.tool_calls:
        ...
"""

import time
from typing import Any, Dict, List, Optional, Sequence, TYPE_CHECKING

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage, ToolMessage

from .exceptions import ConfigurationError, MissingDependencyError, InvalidParameterError, ModelTransportError
from .logger import get_logger

if TYPE_CHECKING:
    from task_assistant.config import LLMConfig

logger = get_logger(__name__)


def build_chat_model(llm_config: "LLMConfig") -> Any:
    """
    Initialize the LangChain chat model for the configured provider.

    Raises:
        ConfigurationError: If no API key is configured
        MissingDependencyError: If the provider's LangChain package is not installed
    """
    provider = llm_config.provider.lower()

    if not llm_config.api_key:
        raise ConfigurationError(
            setting_name="LLM_API_KEY",
            message=f"API key not found. Set LLM_API_KEY or {llm_config.api_key_env_var}."
        )

    logger.info(f"[LLM] Initializing {provider} chat model {llm_config.model_name}")

    if provider == "google":
        try:
            from langchain_google_genai import ChatGoogleGenerativeAI
        except ImportError:
            raise MissingDependencyError(
                package_name="langchain-google-genai",
                install_command="pip install langchain-google-genai",
                purpose="Google Gemini chat model"
            )
        kwargs = {
            "model": llm_config.model_name,
            "google_api_key": llm_config.api_key,
            "temperature": llm_config.temperature,
            "timeout": llm_config.timeout,
            "max_retries": llm_config.max_retries,
        }
        kwargs.update(llm_config.extra_params)
        return ChatGoogleGenerativeAI(**kwargs)

    elif provider == "anthropic":
        try:
            from langchain_anthropic import ChatAnthropic
        except ImportError:
            raise MissingDependencyError(
                package_name="langchain-anthropic",
                install_command="pip install langchain-anthropic",
                purpose="Anthropic chat model"
            )
        kwargs = {
            "model": llm_config.model_name,
            "api_key": llm_config.api_key,
            "temperature": llm_config.temperature,
            "timeout": llm_config.timeout,
            "max_retries": llm_config.max_retries,
        }
        kwargs.update(llm_config.extra_params)
        return ChatAnthropic(**kwargs)

    elif provider == "openai":
        try:
            from langchain_openai import ChatOpenAI
        except ImportError:
            raise MissingDependencyError(
                package_name="langchain-openai",
                install_command="pip install langchain-openai",
                purpose="OpenAI chat model"
            )
        kwargs = {
            "model": llm_config.model_name,
            "api_key": llm_config.api_key,
            "temperature": llm_config.temperature,
            "timeout": llm_config.timeout,
            "max_retries": llm_config.max_retries,
        }
        kwargs.update(llm_config.extra_params)
        return ChatOpenAI(**kwargs)

    raise InvalidParameterError(
        parameter_name="provider",
        message=f"Unsupported LLM provider: {provider}. Supported providers: google, anthropic, openai"
    )


def message_text(message: BaseMessage) -> str:
    """Plain text of a message whose content may be a string or content blocks."""
    content = message.content
    if isinstance(content, str):
        return content

    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


class ChatSession:
    """
    Persistent conversation with the model.

    History holds human, AI and tool messages; the system instruction is
    prepended on every request. History only grows when a request succeeds,
    and checkpoint()/rollback() let the caller drop a round that failed
    half-way so the next request starts from a well-formed history.
    """

    def __init__(
        self,
        model: Any,
        system_instruction: str,
        tools: Optional[Sequence[Dict[str, Any]]] = None,
        provider: Optional[str] = None,
        model_name: Optional[str] = None,
    ):
        """
        Args:
            model: LangChain chat model (or any object with invoke/bind_tools)
            system_instruction: Instruction describing the assistant's role and rules
            tools: Function schemas to bind; the model is used as-is when omitted
            provider: Provider name, for logs and errors
            model_name: Model identifier, for logs and errors
        """
        self.model = model.bind_tools(list(tools)) if tools else model
        self.system_instruction = system_instruction
        self.provider = provider
        self.model_name = model_name
        self.history: List[BaseMessage] = []

    @classmethod
    def create(
        cls,
        llm_config: "LLMConfig",
        tools: Sequence[Dict[str, Any]],
        system_instruction: str,
    ) -> "ChatSession":
        """Build the provider model from configuration and open a session."""
        return cls(
            build_chat_model(llm_config),
            system_instruction=system_instruction,
            tools=tools,
            provider=llm_config.provider,
            model_name=llm_config.model_name,
        )

    def send_message(self, text: str) -> AIMessage:
        """Send a plain-text user turn and return the model reply."""
        return self._invoke([HumanMessage(content=text)])

    def send_tool_results(self, results: Sequence[ToolMessage]) -> AIMessage:
        """Send a batch of tool results as one follow-up turn."""
        if not results:
            raise InvalidParameterError("results", "At least one tool result is required")
        return self._invoke(list(results))

    def record_tool_results(self, results: Sequence[ToolMessage]) -> None:
        """Append tool results to history without asking the model for a reply."""
        self.history.extend(results)

    def checkpoint(self) -> int:
        return len(self.history)

    def rollback(self, checkpoint: int) -> None:
        if checkpoint < len(self.history):
            logger.debug(f"[LLM] Dropping {len(self.history) - checkpoint} message(s) from session history")
            del self.history[checkpoint:]

    def _invoke(self, new_messages: List[BaseMessage]) -> AIMessage:
        messages: List[BaseMessage] = [SystemMessage(content=self.system_instruction)]
        messages.extend(self.history)
        messages.extend(new_messages)

        logger.debug(f"[LLM] Sending request with {len(messages)} message(s)")
        start_time = time.time()
        try:
            response = self.model.invoke(messages)
        except Exception as e:
            latency = time.time() - start_time
            logger.error(f"[LLM] Request failed after {latency:.2f}s: {e}")
            raise ModelTransportError(
                "request to the model failed",
                provider=self.provider,
                model=self.model_name,
                original_error=e,
            ) from e

        if not isinstance(response, AIMessage):
            raise ModelTransportError(
                f"unexpected reply type {type(response).__name__}",
                provider=self.provider,
                model=self.model_name,
            )

        latency = time.time() - start_time
        logger.debug(f"[LLM] Reply received in {latency:.2f}s with {len(response.tool_calls)} tool call(s)")

        self.history.extend(new_messages)
        self.history.append(response)
        return response
