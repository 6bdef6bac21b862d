"""
Note Brief Projection

Flattens a note into the ordered list of brief entries handed to the model:
one entry per top-level node that has any text, addressed by the node's
index among the top-level children (its stable id).
"""

import json
import logging
from typing import List, Sequence, Union

from note_agent.models.note_models import (
    AIEmbeddingNode,
    AutoLinkNode,
    ChatMessageNode,
    ChatSessionNode,
    CodeNode,
    HashtagNode,
    HeadingNode,
    LexicalNode,
    LinkNode,
    ListItemNode,
    ListNode,
    ListType,
    MentionNode,
    Note,
    PageBreakNode,
    ParagraphNode,
    QuoteNode,
    TableCellNode,
    TableNode,
    TableRowNode,
    TextNode,
    VoiceInputNode,
)
from note_agent.models.chat_models import BriefEntry

logger = logging.getLogger(__name__)

LIST_ITEM_MARKER = "• "
PAGE_BREAK_TEXT = "---"

# Containers whose text is the plain concatenation of their children
_PLAIN_CONTAINERS = (
    ParagraphNode,
    HeadingNode,
    ListNode,
    QuoteNode,
    TableNode,
    TableRowNode,
    TableCellNode,
)


def _join_children(children: Sequence[LexicalNode]) -> str:
    return "".join(extract_text(child) for child in children)


def _format_chat_line(sender, content: str) -> str:
    return f"[{sender.value}] {content}"


def extract_text(node: LexicalNode) -> str:
    """
    Extract plain text from a node, recursing depth-first through children.

    Rules:
    - text/hashtag/mention: the node's own text
    - ai-embedding/voice-input: the node's content
    - listitem: bullet marker followed by its children's text
    - link/autolink: "<children text> (<url>)"
    - chat-message: "[sender] content"; chat-session: one such line per message
    - page-break: "---"
    - code: inline text, else its children's text, else ""
    - every other container: its children's text, no separators
    """
    if isinstance(node, (TextNode, HashtagNode, MentionNode)):
        return node.text
    if isinstance(node, (AIEmbeddingNode, VoiceInputNode)):
        return node.content
    if isinstance(node, ListItemNode):
        return LIST_ITEM_MARKER + _join_children(node.children)
    if isinstance(node, (LinkNode, AutoLinkNode)):
        return f"{_join_children(node.children)} ({node.url})"
    if isinstance(node, CodeNode):
        if node.text is not None:
            return node.text
        if node.children is not None:
            return _join_children(node.children)
        return ""
    if isinstance(node, _PLAIN_CONTAINERS):
        return _join_children(node.children)
    if isinstance(node, ChatMessageNode):
        return _format_chat_line(node.sender, node.content)
    if isinstance(node, ChatSessionNode):
        return "\n".join(_format_chat_line(msg.sender, msg.content) for msg in node.messages)
    if isinstance(node, PageBreakNode):
        return PAGE_BREAK_TEXT
    raise TypeError(f"Unhandled node class: {type(node).__name__}")


def is_node_empty(node: LexicalNode) -> bool:
    """A node is empty when its extracted text is blank"""
    return not extract_text(node).strip()


def project_brief(note: Union[Note, Sequence[LexicalNode]]) -> List[BriefEntry]:
    """
    Project a note (or its top-level children) into brief entries.

    Entries keep document order and the original top-level index as stable_id;
    nodes whose text is empty after trimming are left out.
    """
    children = note.children if isinstance(note, Note) else note

    brief = []
    for index, node in enumerate(children):
        content = extract_text(node)
        if not content.strip():
            continue
        brief.append(BriefEntry(stable_id=index, type_tag=node.type, content=content))

    logger.debug(f"Projected brief: {len(brief)} of {len(children)} top-level nodes kept")
    return brief


def brief_to_json(brief: Sequence[BriefEntry]) -> str:
    """Render a brief in its wire format: [{"id", "nodeType", "content"}, ...]"""
    return json.dumps(
        [entry.model_dump(by_alias=True) for entry in brief],
        ensure_ascii=False,
    )


def node_type_label(node: LexicalNode) -> str:
    """Human-readable label for a node, e.g. 'Heading H2' or 'Bullet List'"""
    if isinstance(node, HeadingNode):
        return f"Heading {node.tag.value.upper()}"
    if isinstance(node, ListNode):
        return "Bullet List" if node.list_type == ListType.BULLET else "Numbered List"

    labels = {
        "text": "Text",
        "paragraph": "Paragraph",
        "listitem": "List Item",
        "quote": "Quote",
        "code": "Code",
        "link": "Link",
        "autolink": "Auto Link",
        "hashtag": "Hashtag",
        "table": "Table",
        "tablerow": "Table Row",
        "tablecell": "Table Cell",
        "page-break": "Page Break",
        "ai-embedding": "AI Embedding",
        "voice-input": "Voice Input",
        "chat-message": "Chat Message",
        "chat-session": "Chat Session",
        "mention": "Mention",
    }
    return labels.get(node.type, "Unknown")
