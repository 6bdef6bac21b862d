"""
Models package for note-agent

Provides Pydantic models for structured data:
- The note document tree (Lexical editor state)
- Brief entries projected from a note
- Chat actions decoded from model replies
- Conversation messages and chat context
"""

from note_agent.models.note_models import (
    SUPPORTED_FORMAT_VERSIONS,
    TextDirection,
    HeadingTag,
    ListType,
    MessageSender,
    LexicalNode,
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
    ChatSessionMessage,
    MentionNode,
    RootNode,
    LexicalState,
    Note,
    parse_note,
    parse_node,
    dump_node,
    dump_note,
    dump_note_json,
)
from note_agent.models.chat_models import (
    BriefEntry,
    ActionType,
    ReplyAction,
    InsertNodeAction,
    ModifyNodeAction,
    ChatAction,
    ConversationMessage,
    ChatContext,
    build_chat_context,
    conversation_from_dicts,
)

__all__ = [
    'SUPPORTED_FORMAT_VERSIONS',
    'TextDirection',
    'HeadingTag',
    'ListType',
    'MessageSender',
    'LexicalNode',
    'TextNode',
    'ParagraphNode',
    'HeadingNode',
    'ListNode',
    'ListItemNode',
    'QuoteNode',
    'CodeNode',
    'LinkNode',
    'AutoLinkNode',
    'HashtagNode',
    'TableNode',
    'TableRowNode',
    'TableCellNode',
    'PageBreakNode',
    'AIEmbeddingNode',
    'VoiceInputNode',
    'ChatMessageNode',
    'ChatSessionNode',
    'ChatSessionMessage',
    'MentionNode',
    'RootNode',
    'LexicalState',
    'Note',
    'parse_note',
    'parse_node',
    'dump_node',
    'dump_note',
    'dump_note_json',
    'BriefEntry',
    'ActionType',
    'ReplyAction',
    'InsertNodeAction',
    'ModifyNodeAction',
    'ChatAction',
    'ConversationMessage',
    'ChatContext',
    'build_chat_context',
    'conversation_from_dicts',
]
