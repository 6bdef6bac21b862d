"""
Prompt construction for the note editing agent

build_system_prompt renders the fixed instruction template around the note
brief and cursor position; build_chat_messages turns a chat context plus the
conversation into LangChain messages for the completion call.
"""

import logging
from typing import List, Optional, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from note_agent.models.chat_models import BriefEntry, ChatContext, ConversationMessage
from note_agent.utils.note_brief import brief_to_json, project_brief

logger = logging.getLogger(__name__)


def suggested_insert_after(cursor_position: int) -> int:
    """Node to insert after when the user asks to add content at the cursor"""
    return 0 if cursor_position == 0 else cursor_position - 1


def build_system_prompt(brief: Sequence[BriefEntry], cursor_position: int) -> str:
    """Build the system instruction embedding the note brief and the cursor position"""
    brief_json = brief_to_json(brief)
    insert_after = suggested_insert_after(cursor_position)

    return f"""You are a writing assistant embedded in a rich-text note editor. You help the user by answering questions about the note and by editing it.

NOTE BRIEF:
The note is summarized as a JSON array. Each entry is one top-level node of the note:
- "id": the node's position in the note (use it to address the node)
- "nodeType": the kind of node (paragraph, heading, list, quote, code, ...)
- "content": the plain text of the node
Empty nodes are omitted, so ids may skip numbers.

{brief_json}

CURSOR POSITION:
The user's cursor is at position {cursor_position}. When the user asks you to add content "here" or does not say where, insert after node {insert_after}.

AVAILABLE ACTIONS:
1. **reply**: answer the user without changing the note
   {{"action": "reply", "content": "Your message"}}
2. **insert_node**: add a new node after the node with id insert_after
   {{"action": "insert_node", "insert_after": {insert_after}, "node_type": "paragraph", "content": "New text"}}
3. **modify_node**: replace the text of the node with the given id
   {{"action": "modify_node", "id": 0, "node_type": "paragraph", "content": "Updated text"}}

node_type should be one of: text, paragraph, heading, ai-embedding.

STRUCTURED OUTPUT REQUIREMENT:
Respond with exactly ONE JSON object using one of the actions above and nothing else.
Do not wrap it in markdown code fences. Use "reply" when no edit is needed."""


def _to_langchain_message(message: ConversationMessage) -> Optional[BaseMessage]:
    if message.role == "user":
        return HumanMessage(content=message.content)
    if message.role == "assistant":
        return AIMessage(content=message.content)
    if message.role == "system":
        return SystemMessage(content=message.content)
    logger.warning(f"Skipping conversation message with unknown role: {message.role}")
    return None


def build_chat_messages(
    context: ChatContext,
    conversation: Sequence[ConversationMessage],
    look_back_limit: int = 50,
    brief: Optional[Sequence[BriefEntry]] = None,
) -> List[BaseMessage]:
    """
    Build the message list for the completion call

    Message Structure:
    1. SystemMessage: note instructions with the brief and cursor position
    2. The last `look_back_limit` conversation messages (user/assistant/system)

    Args:
        context: Note and cursor position
        conversation: Conversation history, oldest first, ending with the user's request
        look_back_limit: Number of conversation messages to keep
        brief: Already projected brief of context.note (projected here if omitted)

    Returns:
        List of LangChain message objects ready for the LLM
    """
    if brief is None:
        brief = project_brief(context.note)
    messages: List[BaseMessage] = [
        SystemMessage(content=build_system_prompt(brief, context.cursor_position))
    ]

    recent = list(conversation)[-look_back_limit:] if look_back_limit > 0 else []
    for message in recent:
        converted = _to_langchain_message(message)
        if converted is not None:
            messages.append(converted)

    return messages
