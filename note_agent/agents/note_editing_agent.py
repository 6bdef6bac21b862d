"""
Note Editing Agent Implementation
Answers questions about a note and proposes single-node edits to it
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, TypedDict, Union

from langchain_core.language_models.chat_models import BaseChatModel
from langgraph.graph import END, StateGraph

from config.settings import settings
from note_agent.models.chat_models import (
    BriefEntry,
    ChatAction,
    ConversationMessage,
    build_chat_context,
)
from note_agent.models.note_models import Note
from note_agent.utils.action_parser import parse_chat_action
from note_agent.utils.note_brief import project_brief
from note_agent.utils.prompt_builder import build_chat_messages
from .base_agent import BaseAgent

logger = logging.getLogger(__name__)


class NoteEditingState(TypedDict):
    """State for note editing agent LangGraph workflow"""
    conversation: List[ConversationMessage]
    note: Note
    cursor_position: int
    brief: List[BriefEntry]
    llm_messages: List[Any]
    raw_reply: str
    action: Optional[ChatAction]
    processing_time: float


class NoteEditingAgent(BaseAgent):
    """Agent that turns one conversation turn about a note into a ChatAction"""

    def __init__(self, api_key: Optional[str] = None, llm: Optional[BaseChatModel] = None):
        super().__init__("note_editing_agent", api_key=api_key, llm=llm)

    def _build_workflow(self) -> StateGraph:
        """Build LangGraph workflow: prepare context -> generate response -> parse action"""
        workflow = StateGraph(NoteEditingState)

        workflow.add_node("prepare_context", self._prepare_context_node)
        workflow.add_node("generate_response", self._generate_response_node)
        workflow.add_node("parse_action", self._parse_action_node)

        workflow.set_entry_point("prepare_context")
        workflow.add_edge("prepare_context", "generate_response")
        workflow.add_edge("generate_response", "parse_action")
        workflow.add_edge("parse_action", END)

        return workflow.compile()

    async def _prepare_context_node(self, state: NoteEditingState) -> Dict[str, Any]:
        """Project the note brief and build the LLM messages"""
        context = build_chat_context(state["note"], state["cursor_position"])
        brief = project_brief(context.note)
        llm_messages = build_chat_messages(
            context,
            state["conversation"],
            look_back_limit=settings.CONVERSATION_LOOK_BACK_LIMIT,
            brief=brief,
        )
        logger.info(
            f"📝 Prepared note context: {len(brief)} brief entries, "
            f"cursor at {context.cursor_position}, {len(llm_messages)} messages"
        )
        return {"brief": brief, "llm_messages": llm_messages}

    async def _generate_response_node(self, state: NoteEditingState) -> Dict[str, Any]:
        """Call the completion API once"""
        start_time = datetime.now()
        llm = self._get_llm()
        response = await self._safe_llm_invoke(llm, state["llm_messages"], error_context="Note reply generation")
        processing_time = (datetime.now() - start_time).total_seconds()

        content = response.content if hasattr(response, "content") else response
        raw_reply = content if isinstance(content, str) else str(content)
        logger.info(f"✅ Model replied in {processing_time:.2f}s ({len(raw_reply)} chars)")
        return {"raw_reply": raw_reply, "processing_time": processing_time}

    async def _parse_action_node(self, state: NoteEditingState) -> Dict[str, Any]:
        """Decode the raw reply into a ChatAction (parse errors propagate to the caller)"""
        action = parse_chat_action(state["raw_reply"])
        logger.info(f"🎯 Parsed action: {action.action}")
        return {"action": action}

    async def process(
        self,
        messages: Sequence[Union[ConversationMessage, Dict[str, str]]],
        note: Note,
        cursor_position: int,
    ) -> ChatAction:
        """
        Run one conversation turn

        Args:
            messages: Conversation so far, oldest first, ending with the user's request
            note: Current note
            cursor_position: Index of the cursor among the note's top-level nodes

        Returns:
            The ChatAction requested by the model

        Raises:
            InvalidDocumentError: cursor outside the note
            ActionParseError: the model reply could not be decoded
            CompletionError: the completion API call failed
        """
        conversation = self._extract_conversation_history(messages)
        logger.info(f"📝 Note agent processing turn with {len(conversation)} messages")

        workflow = await self._get_workflow()
        initial_state: NoteEditingState = {
            "conversation": conversation,
            "note": note,
            "cursor_position": cursor_position,
            "brief": [],
            "llm_messages": [],
            "raw_reply": "",
            "action": None,
            "processing_time": 0.0,
        }
        result_state = await workflow.ainvoke(initial_state)
        return result_state["action"]


_note_editing_agent_instance = None


def get_note_editing_agent() -> NoteEditingAgent:
    """Get global note editing agent instance (API key from settings)"""
    global _note_editing_agent_instance
    if _note_editing_agent_instance is None:
        _note_editing_agent_instance = NoteEditingAgent()
    return _note_editing_agent_instance
