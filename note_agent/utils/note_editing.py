"""
Note Editing Utilities

Node factories, read helpers and the application of chat actions to a note.
All edit functions return a new Note and leave their input untouched.
"""

import logging
from typing import List, Optional, Sequence

from note_agent.models.chat_models import (
    ChatAction,
    InsertNodeAction,
    ModifyNodeAction,
    ReplyAction,
)
from note_agent.models.note_models import (
    AIEmbeddingNode,
    HashtagNode,
    HeadingNode,
    HeadingTag,
    LexicalNode,
    LexicalState,
    ListItemNode,
    MentionNode,
    Note,
    ParagraphNode,
    QuoteNode,
    RootNode,
    TextNode,
    VoiceInputNode,
)
from note_agent.utils.note_brief import extract_text, is_node_empty

logger = logging.getLogger(__name__)

_TEXT_LEAVES = (TextNode, HashtagNode, MentionNode)
_CONTENT_LEAVES = (AIEmbeddingNode, VoiceInputNode)
_TEXT_BLOCKS = (ParagraphNode, HeadingNode, QuoteNode, ListItemNode)


# ===== Node factories =====

def create_text_node(text: str, format: int = 0) -> TextNode:
    return TextNode(text=text, format=format, detail=0, mode="normal", style="", version=1)


def create_paragraph_node(children: Optional[List[LexicalNode]] = None) -> ParagraphNode:
    return ParagraphNode(children=children or [], text_format=0, text_style="", version=1)


def create_heading_node(tag: str = "h1", children: Optional[List[LexicalNode]] = None) -> HeadingNode:
    return HeadingNode(tag=HeadingTag(tag), children=children or [], version=1)


def create_ai_embedding_node(content: str, is_loading: bool = False) -> AIEmbeddingNode:
    return AIEmbeddingNode(content=content, is_loading=is_loading, version=1)


def create_empty_note(note_id: str) -> Note:
    return Note(
        note_id=note_id,
        lexical_state=LexicalState(root=RootNode(children=[], version=1)),
    )


def build_node_for_action(node_type: str, content: str) -> LexicalNode:
    """Create the node an insert_node action asks for; unknown types become paragraphs"""
    if node_type == "text":
        return create_text_node(content)
    if node_type == "heading":
        return create_heading_node("h1", [create_text_node(content)])
    if node_type == "ai-embedding":
        return create_ai_embedding_node(content)
    if node_type != "paragraph":
        logger.debug(f"No factory for node type '{node_type}', inserting a paragraph")
    return create_paragraph_node([create_text_node(content)])


# ===== Read helpers =====

def _child_nodes(node: LexicalNode) -> Sequence[LexicalNode]:
    return getattr(node, "children", None) or []


def get_node_by_id(note: Note, node_id: int) -> Optional[LexicalNode]:
    """Top-level node at stable id `node_id`, or None"""
    if 0 <= node_id < len(note.children):
        return note.children[node_id]
    return None


def count_children(node: LexicalNode) -> int:
    """Number of descendant nodes (recursive)"""
    return sum(1 + count_children(child) for child in _child_nodes(node))


def find_nodes_by_type(note: Note, node_type: str) -> List[LexicalNode]:
    """All nodes of `node_type` anywhere in the note, in document order"""
    results = []

    def _visit(node: LexicalNode):
        if node.type == node_type:
            results.append(node)
        for child in _child_nodes(node):
            _visit(child)

    for child in note.children:
        _visit(child)
    return results


def note_plain_text(note: Note) -> str:
    """Plain text of the whole note, one line per top-level node"""
    return "\n".join(extract_text(child) for child in note.children)


def count_words(note: Note) -> int:
    return len(note_plain_text(note).split())


def count_characters(note: Note) -> int:
    return len(note_plain_text(note))


def is_note_empty(note: Note) -> bool:
    return all(is_node_empty(child) for child in note.children)


# ===== Edits =====

def _with_children(note: Note, children: List[LexicalNode]) -> Note:
    root = note.lexical_state.root.model_copy(update={"children": children})
    state = note.lexical_state.model_copy(update={"root": root})
    return note.model_copy(update={"lexical_state": state})


def insert_node(note: Note, node: LexicalNode, position: Optional[int] = None) -> Note:
    """Insert `node` at `position`; out-of-range or missing positions append"""
    children = list(note.children)
    if position is not None and 0 <= position <= len(children):
        children.insert(position, node)
    else:
        children.append(node)
    return _with_children(note, children)


def remove_node(note: Note, node_id: int) -> Note:
    return _with_children(note, [c for i, c in enumerate(note.children) if i != node_id])


def update_node(note: Note, node_id: int, new_node: LexicalNode) -> Note:
    return _with_children(
        note, [new_node if i == node_id else c for i, c in enumerate(note.children)]
    )


def _modified_node(node: LexicalNode, node_type: str, content: str) -> Optional[LexicalNode]:
    if node_type == "text" and isinstance(node, _TEXT_LEAVES):
        return node.model_copy(update={"text": content})
    if node_type == "paragraph" and isinstance(node, _TEXT_BLOCKS):
        return node.model_copy(update={"children": [create_text_node(content)]})
    if node_type == "ai-embedding" and isinstance(node, _CONTENT_LEAVES):
        return node.model_copy(update={"content": content})
    return None


def apply_action(note: Note, action: ChatAction) -> Note:
    """
    Apply a chat action to a note.

    - insert_node: build the requested node and insert it at insert_after + 1
    - modify_node: replace the text of node `id` (text, paragraph and ai-embedding
      edits); unsupported combinations and unknown ids leave the note unchanged
    - reply: no change
    """
    if isinstance(action, InsertNodeAction):
        new_node = build_node_for_action(action.node_type, action.content)
        logger.info(f"Inserting {new_node.type} node after {action.insert_after}")
        return insert_node(note, new_node, action.insert_after + 1)

    if isinstance(action, ModifyNodeAction):
        existing = get_node_by_id(note, action.id)
        if existing is None:
            logger.warning(f"modify_node targets missing node {action.id}, note unchanged")
            return note
        updated = _modified_node(existing, action.node_type, action.content)
        if updated is None:
            logger.warning(
                f"Cannot apply '{action.node_type}' edit to {existing.type} node {action.id}, note unchanged"
            )
            return note
        return update_node(note, action.id, updated)

    return note


def describe_action(action: ChatAction) -> str:
    """Human-readable description of what the agent did"""
    if isinstance(action, ReplyAction):
        return "Agent replied to your message"
    if isinstance(action, InsertNodeAction):
        return f"Agent inserted a new {action.node_type} node"
    if isinstance(action, ModifyNodeAction):
        return f"Agent modified {action.node_type} node at position {action.id}"
    return "Unknown action"
