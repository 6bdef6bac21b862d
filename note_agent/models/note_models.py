"""
Note Document Models

Pydantic models for the tree-shaped rich-text note (Lexical editor state).

Every node is one variant of the `LexicalNode` union, selected by its `type`
discriminator. Wire field names are lowerCamelCase (aliases); code may use the
snake_case field names. Fields the schema does not declare are dropped on
input, and optional fields that were absent on input stay absent on output.
"""

import logging
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Sequence, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

from note_agent.errors import InvalidDocumentError, UnrecognizedNodeTypeError

logger = logging.getLogger(__name__)

# Schema versions of the root node this service understands
SUPPORTED_FORMAT_VERSIONS = (1,)


class TextDirection(str, Enum):
    """Text direction of a node"""
    LEFT_TO_RIGHT = "ltr"
    RIGHT_TO_LEFT = "rtl"


class HeadingTag(str, Enum):
    H1 = "h1"
    H2 = "h2"
    H3 = "h3"
    H4 = "h4"
    H5 = "h5"
    H6 = "h6"


class ListType(str, Enum):
    BULLET = "bullet"
    NUMBER = "number"


class MessageSender(str, Enum):
    USER = "user"
    AGENT = "agent"
    SYSTEM = "system"


class NodeBase(BaseModel):
    """Attributes shared by every node"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    version: int = Field(description="Schema version of the node")
    direction: Optional[TextDirection] = Field(default=None, description="ltr or rtl")
    indent: Optional[int] = Field(default=None, ge=0, description="Indentation level")


class ElementNodeBase(NodeBase):
    """Block/element nodes carry an optional string format (alignment)"""
    format: Optional[str] = Field(default=None, description="Element format, e.g. 'left', 'center'")


# ---------------------------------------------------------------------------
# Leaf nodes
# ---------------------------------------------------------------------------

class TextNode(NodeBase):
    """Basic text content"""
    type: Literal["text"] = "text"
    text: str
    format: int = Field(description="Binary flags: 1=bold, 2=italic, 4=underline, 8=strikethrough")
    detail: Optional[int] = None
    mode: Optional[str] = None
    style: Optional[str] = None


class HashtagNode(NodeBase):
    type: Literal["hashtag"] = "hashtag"
    text: str
    format: int


class MentionNode(NodeBase):
    """@mention of a person or entity"""
    type: Literal["mention"] = "mention"
    mention_name: str = Field(alias="mentionName")
    text: str
    format: int


class PageBreakNode(ElementNodeBase):
    type: Literal["page-break"] = "page-break"


class AIEmbeddingNode(ElementNodeBase):
    """AI-generated content block"""
    type: Literal["ai-embedding"] = "ai-embedding"
    content: str
    is_loading: bool = Field(alias="isLoading")


class VoiceInputNode(ElementNodeBase):
    """Voice-to-text transcription"""
    type: Literal["voice-input"] = "voice-input"
    content: str


class ChatMessageNode(ElementNodeBase):
    type: Literal["chat-message"] = "chat-message"
    sender: MessageSender
    content: str
    timestamp: str = Field(description="ISO timestamp")


class ChatSessionMessage(BaseModel):
    """Lightweight message record inside a chat session (not a node)"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    sequence_id: int = Field(alias="id", ge=0)
    sender: MessageSender
    content: str
    timestamp: str = Field(description="ISO timestamp")


class ChatSessionNode(ElementNodeBase):
    type: Literal["chat-session"] = "chat-session"
    session_id: str = Field(alias="sessionId")
    is_active: bool = Field(alias="isActive")
    messages: List[ChatSessionMessage]


# ---------------------------------------------------------------------------
# Container nodes
# ---------------------------------------------------------------------------

class ParagraphNode(ElementNodeBase):
    type: Literal["paragraph"] = "paragraph"
    children: List["LexicalNode"]
    text_format: Optional[int] = Field(default=None, alias="textFormat")
    text_style: Optional[str] = Field(default=None, alias="textStyle")


class HeadingNode(ElementNodeBase):
    type: Literal["heading"] = "heading"
    tag: HeadingTag
    children: List["LexicalNode"]


class ListNode(ElementNodeBase):
    type: Literal["list"] = "list"
    list_type: ListType = Field(alias="listType")
    start: Optional[int] = None
    children: List["LexicalNode"]


class ListItemNode(ElementNodeBase):
    type: Literal["listitem"] = "listitem"
    children: List["LexicalNode"]


class QuoteNode(ElementNodeBase):
    type: Literal["quote"] = "quote"
    children: List["LexicalNode"]


class CodeNode(NodeBase):
    """Inline code (text) or a code block (children), never both"""
    type: Literal["code"] = "code"
    text: Optional[str] = None
    language: Optional[str] = None
    children: Optional[List["LexicalNode"]] = None
    format: int

    @model_validator(mode="after")
    def validate_exclusive_content(self):
        if self.text is not None and self.children is not None:
            raise ValueError("code node cannot carry both inline 'text' and 'children'")
        return self


class LinkNode(ElementNodeBase):
    type: Literal["link"] = "link"
    url: str
    rel: Optional[str] = None
    target: Optional[str] = None
    children: List["LexicalNode"]


class AutoLinkNode(ElementNodeBase):
    type: Literal["autolink"] = "autolink"
    url: str
    children: List["LexicalNode"]


class TableNode(ElementNodeBase):
    type: Literal["table"] = "table"
    children: List["LexicalNode"]


class TableRowNode(ElementNodeBase):
    type: Literal["tablerow"] = "tablerow"
    children: List["LexicalNode"]


class TableCellNode(ElementNodeBase):
    type: Literal["tablecell"] = "tablecell"
    children: List["LexicalNode"]
    header_state: int = Field(alias="headerState")
    col_span: int = Field(alias="colSpan")
    row_span: int = Field(alias="rowSpan")


LexicalNode = Annotated[
    Union[
        TextNode,
        ParagraphNode,
        HeadingNode,
        ListNode,
        ListItemNode,
        QuoteNode,
        CodeNode,
        LinkNode,
        AutoLinkNode,
        HashtagNode,
        TableNode,
        TableRowNode,
        TableCellNode,
        PageBreakNode,
        AIEmbeddingNode,
        VoiceInputNode,
        ChatMessageNode,
        ChatSessionNode,
        MentionNode,
    ],
    Field(discriminator="type"),
]

CONTAINER_NODE_CLASSES = (
    ParagraphNode,
    HeadingNode,
    ListNode,
    ListItemNode,
    QuoteNode,
    CodeNode,
    LinkNode,
    AutoLinkNode,
    TableNode,
    TableRowNode,
    TableCellNode,
)

NODE_TYPES = frozenset(
    cls.model_fields["type"].default
    for cls in (
        TextNode, HashtagNode, MentionNode, PageBreakNode, AIEmbeddingNode,
        VoiceInputNode, ChatMessageNode, ChatSessionNode, *CONTAINER_NODE_CLASSES,
    )
)


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------

class RootNode(ElementNodeBase):
    """Top-level container of the note"""
    type: Literal["root"] = "root"
    children: List[LexicalNode]

    @field_validator("version")
    @classmethod
    def validate_format_version(cls, value: int) -> int:
        if value not in SUPPORTED_FORMAT_VERSIONS:
            raise ValueError(
                f"unsupported format version {value} (supported: {list(SUPPORTED_FORMAT_VERSIONS)})"
            )
        return value


class LexicalState(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    root: RootNode


class Note(BaseModel):
    """A complete note: optional identifiers plus the editor state"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[int] = None
    note_id: Optional[str] = Field(default=None, alias="noteId")
    lexical_state: LexicalState = Field(alias="lexicalState")

    @property
    def children(self) -> List[LexicalNode]:
        """Top-level nodes of the note, in document order"""
        return self.lexical_state.root.children


for _model in (*CONTAINER_NODE_CLASSES, RootNode, LexicalState, Note):
    _model.model_rebuild()

_node_adapter = TypeAdapter(LexicalNode)


# ---------------------------------------------------------------------------
# (De)serialization
# ---------------------------------------------------------------------------

def _format_location(loc: Sequence[Any]) -> str:
    """Render a pydantic error location as a readable path, e.g. lexicalState.root.children[3]"""
    path = ""
    previous = None
    for item in loc:
        if isinstance(item, int):
            path += f"[{item}]"
        elif (previous is None or isinstance(previous, int)) and item in NODE_TYPES:
            # pydantic inserts the selected union tag first or after the list index
            pass
        else:
            path += f".{item}" if path else str(item)
        previous = item
    return path or "<root>"


def _translate_validation_error(error: ValidationError, prefix: str = "") -> Exception:
    """Map a pydantic ValidationError to the service's document errors"""
    errors = error.errors()

    def _location(err: Dict[str, Any]) -> str:
        location = _format_location(err.get("loc", ()))
        if prefix:
            return prefix if location == "<root>" else f"{prefix}.{location}"
        return location

    for err in errors:
        if err.get("type") == "union_tag_invalid":
            node_type = (err.get("ctx") or {}).get("tag")
            return UnrecognizedNodeTypeError(node_type, _location(err))

    details = [f"{_location(err)}: {err.get('msg')}" for err in errors]
    simplified = [
        {"location": _location(err), "type": err.get("type"), "message": err.get("msg")}
        for err in errors
    ]
    return InvalidDocumentError("Invalid note document: " + "; ".join(details), simplified)


def parse_note(payload: Union[str, bytes, Dict[str, Any]]) -> Note:
    """
    Deserialize a note from tree-JSON (string/bytes) or an already decoded dict.

    Raises:
        UnrecognizedNodeTypeError: a node anywhere in the tree has an unknown `type`
            (the whole document is rejected)
        InvalidDocumentError: any other structural problem
    """
    try:
        if isinstance(payload, (str, bytes)):
            note = Note.model_validate_json(payload)
        else:
            note = Note.model_validate(payload)
    except ValidationError as e:
        translated = _translate_validation_error(e)
        logger.warning(f"Rejected note document: {translated}")
        raise translated from e

    logger.debug(f"Parsed note {note.note_id!r} with {len(note.children)} top-level nodes")
    return note


def parse_node(payload: Dict[str, Any]) -> LexicalNode:
    """Deserialize a single node (same error policy as parse_note)"""
    try:
        return _node_adapter.validate_python(payload)
    except ValidationError as e:
        raise _translate_validation_error(e, prefix="node") from e


def dump_node(node: LexicalNode) -> Dict[str, Any]:
    """Serialize a single node to its wire dict"""
    return node.model_dump(mode="json", by_alias=True, exclude_none=True)


def dump_note(note: Note) -> Dict[str, Any]:
    """Serialize a note to its wire dict; absent optional fields stay absent"""
    return note.model_dump(mode="json", by_alias=True, exclude_none=True)


def dump_note_json(note: Note, indent: Optional[int] = None) -> str:
    """Serialize a note to tree-JSON text"""
    return note.model_dump_json(by_alias=True, exclude_none=True, indent=indent)
