"""
Chat Models for the Note Editing Agent

Provides Pydantic models for:
- Brief entries (flat projection of a note handed to the model)
- Chat actions decoded from the model reply (reply / insert_node / modify_node)
- Conversation messages and the chat context used for prompt construction
"""

from enum import Enum
from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from note_agent.errors import InvalidDocumentError
from note_agent.models.note_models import Note


class BriefEntry(BaseModel):
    """One top-level node of a note, reduced to plain text.

    stable_id is the node's index among the note's top-level children, so
    entries are not index-contiguous once empty nodes are dropped.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    stable_id: int = Field(alias="id", ge=0, description="Index of the node among the note's top-level children")
    type_tag: str = Field(alias="nodeType", description="Node type discriminator, e.g. 'paragraph'")
    content: str = Field(description="Plain text extracted from the node")


class ActionType(str, Enum):
    """Actions the model may request"""
    REPLY = "reply"
    INSERT_NODE = "insert_node"
    MODIFY_NODE = "modify_node"


class ReplyAction(BaseModel):
    """Free-text answer shown to the user; the note is left untouched"""
    model_config = ConfigDict(extra="ignore")

    action: Literal["reply"] = "reply"
    content: str = Field(description="Message for the user")


class InsertNodeAction(BaseModel):
    """Insert a new node after the top-level node `insert_after`"""
    model_config = ConfigDict(extra="ignore")

    action: Literal["insert_node"] = "insert_node"
    insert_after: int = Field(ge=0, description="Stable id of the node to insert after")
    node_type: str = Field(description="Type of the node to create, e.g. 'paragraph'")
    content: str = Field(description="Text content of the new node")


class ModifyNodeAction(BaseModel):
    """Replace the text of the top-level node `id`"""
    model_config = ConfigDict(extra="ignore")

    action: Literal["modify_node"] = "modify_node"
    id: int = Field(ge=0, description="Stable id of the node to modify")
    node_type: str = Field(description="Type of the node being modified")
    content: str = Field(description="New text content")


ChatAction = Annotated[
    Union[ReplyAction, InsertNodeAction, ModifyNodeAction],
    Field(discriminator="action"),
]


class ConversationMessage(BaseModel):
    """One chat turn exchanged with the completion API"""
    role: str = Field(description="user, assistant or system")
    content: str


class ChatContext(BaseModel):
    """Everything the prompt needs besides the conversation itself"""
    note: Note
    cursor_position: int = Field(ge=0, description="Index into the note's top-level children; may equal their count")


def build_chat_context(note: Note, cursor_position: int) -> ChatContext:
    """Create a ChatContext, checking the cursor lies within 0..len(children)"""
    node_count = len(note.children)
    if cursor_position < 0 or cursor_position > node_count:
        raise InvalidDocumentError(
            f"Cursor position {cursor_position} is outside the note ({node_count} top-level nodes)"
        )
    return ChatContext(note=note, cursor_position=cursor_position)


def conversation_from_dicts(messages: List[dict]) -> List[ConversationMessage]:
    """Convert {role, content} dicts (e.g. from the UI) into ConversationMessage objects"""
    return [ConversationMessage(role=m.get("role", "user"), content=m.get("content", "")) for m in messages]
