"""
Base Agent Class for Note Agent
Provides LLM access and completion error handling shared by the note agents
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage
from langchain_openai import ChatOpenAI
from langgraph.graph import StateGraph
from openai import APIError, APITimeoutError, AuthenticationError, NotFoundError, RateLimitError

from config.settings import settings
from note_agent.errors import CompletionError
from note_agent.models.chat_models import ConversationMessage, conversation_from_dicts

logger = logging.getLogger(__name__)


class BaseAgent:
    """
    Base class for note agents

    Provides:
    - LLM access configured from settings (or an injected chat model)
    - Lazy, lock-protected workflow construction
    - Translation of completion API errors into CompletionError
    """

    def __init__(self, agent_type: str, api_key: Optional[str] = None, llm: Optional[BaseChatModel] = None):
        self.agent_type = agent_type
        self.api_key = api_key or settings.COMPLETION_API_KEY
        self.llm = llm
        self.workflow = None  # Built lazily on first use
        self._workflow_lock = asyncio.Lock()
        logger.info(f"Initializing {agent_type} agent")

    async def _get_workflow(self) -> StateGraph:
        """Get or build the compiled workflow (lazy initialization)"""
        if self.workflow is None:
            async with self._workflow_lock:
                if self.workflow is None:
                    self.workflow = self._build_workflow()
                    logger.info(f"✅ {self.agent_type} workflow compiled")
        return self.workflow

    def _build_workflow(self) -> StateGraph:
        """Build the LangGraph workflow - implemented by subclasses"""
        raise NotImplementedError("Subclasses must implement _build_workflow")

    def _get_llm(self, temperature: Optional[float] = None, model: Optional[str] = None) -> BaseChatModel:
        """Get the chat model: the injected one, else a ChatOpenAI client for the completion API"""
        if self.llm is not None:
            return self.llm

        final_model = model or settings.DEFAULT_MODEL
        logger.debug(f"Selected model: {final_model}")
        return ChatOpenAI(
            model=final_model,
            api_key=self.api_key or "",
            base_url=settings.COMPLETION_BASE_URL,
            temperature=settings.TEMPERATURE if temperature is None else temperature,
            max_tokens=settings.MAX_TOKENS,
            top_p=settings.TOP_P,
            timeout=settings.REQUEST_TIMEOUT_SECONDS,
            max_retries=settings.COMPLETION_MAX_RETRIES,
            streaming=False,
        )

    def _extract_conversation_history(
        self,
        messages: Sequence[Union[ConversationMessage, Dict[str, Any], BaseMessage]],
    ) -> List[ConversationMessage]:
        """Normalize conversation messages (models, {role, content} dicts or LangChain messages)"""
        history = []
        for msg in messages:
            if isinstance(msg, ConversationMessage):
                history.append(msg)
            elif isinstance(msg, BaseMessage):
                role = {"ai": "assistant", "human": "user", "system": "system"}.get(msg.type, msg.type)
                history.append(ConversationMessage(role=role, content=str(msg.content)))
            else:
                history.extend(conversation_from_dicts([msg]))
        return history

    def _handle_completion_error(self, error: Exception) -> CompletionError:
        """
        Transform completion API errors into user-friendly messages

        Args:
            error: The exception raised by the OpenAI-compatible client

        Returns:
            CompletionError with user message and error type
        """
        error_str = str(error)

        if isinstance(error, AuthenticationError):
            user_message = (
                "⚠️ **Authentication Error**\n\n"
                "The completion service rejected your credentials. "
                "Please sign in again and retry."
            )
            error_type = "authentication_error"
        elif isinstance(error, RateLimitError):
            user_message = (
                "⚠️ **Rate Limit Exceeded**\n\n"
                "Too many requests were sent to the completion service. Please wait a moment and try again."
            )
            error_type = "rate_limit_error"
        elif isinstance(error, NotFoundError):
            user_message = (
                f"⚠️ **Model Not Found**\n\n"
                f"The model '{settings.DEFAULT_MODEL}' is not available on the completion service.\n\n"
                f"**Error details:** {error_str}"
            )
            error_type = "model_not_found"
        elif isinstance(error, APITimeoutError):
            user_message = "⚠️ **Timeout**\n\nThe completion service did not answer in time. Please try again."
            error_type = "timeout_error"
        elif isinstance(error, APIError):
            user_message = (
                f"⚠️ **API Error**\n\n"
                f"An error occurred while communicating with the completion service:\n\n"
                f"**Error details:** {error_str}"
            )
            error_type = "api_error"
        else:
            user_message = f"An unexpected error occurred: {error_str}"
            error_type = "generic_error"

        return CompletionError(user_message, error_type, original_error=error_str)

    async def _safe_llm_invoke(
        self,
        llm: BaseChatModel,
        messages: List[Any],
        error_context: str = "LLM call"
    ) -> Any:
        """
        Invoke the LLM, translating completion API errors

        Raises:
            CompletionError: user-friendly wrapper around the API error
        """
        try:
            return await llm.ainvoke(messages)
        except (APIError, AuthenticationError, NotFoundError, RateLimitError) as e:
            completion_error = self._handle_completion_error(e)
            logger.error(f"❌ {error_context} failed: {completion_error.error_type} - {completion_error.original_error}")
            raise completion_error from e
