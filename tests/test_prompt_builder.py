"""
Tests for system prompt and chat message construction
"""

import json

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from note_agent.errors import InvalidDocumentError
from note_agent.models.chat_models import BriefEntry, ConversationMessage, build_chat_context
from note_agent.utils.note_brief import brief_to_json, project_brief
from note_agent.utils.prompt_builder import (
    build_chat_messages,
    build_system_prompt,
    suggested_insert_after,
)


@pytest.mark.parametrize("cursor, expected", [(0, 0), (1, 0), (4, 3)])
def test_suggested_insert_after(cursor, expected):
    assert suggested_insert_after(cursor) == expected


def test_system_prompt_embeds_brief_and_cursor():
    brief = [BriefEntry(stable_id=1, type_tag="paragraph", content="hi")]

    prompt = build_system_prompt(brief, 3)

    assert brief_to_json(brief) in prompt
    assert "cursor is at position 3" in prompt
    assert "insert after node 2" in prompt
    assert '"insert_after": 2' in prompt


def test_system_prompt_is_deterministic(sample_note):
    brief = project_brief(sample_note)
    assert build_system_prompt(brief, 0) == build_system_prompt(brief, 0)


def test_system_prompt_examples_are_valid_json():
    prompt = build_system_prompt([], 0)
    examples = [line.strip() for line in prompt.splitlines() if line.strip().startswith('{"action"')]
    assert len(examples) == 3
    assert [json.loads(example)["action"] for example in examples] == ["reply", "insert_node", "modify_node"]


def test_chat_messages_structure(sample_note):
    context = build_chat_context(sample_note, 2)
    conversation = [
        ConversationMessage(role="user", content="What is this note about?"),
        ConversationMessage(role="assistant", content="A weekly plan."),
        ConversationMessage(role="user", content="Add a summary"),
    ]

    messages = build_chat_messages(context, conversation)

    assert isinstance(messages[0], SystemMessage)
    assert "Weekly plan" in messages[0].content
    assert [type(m) for m in messages[1:]] == [HumanMessage, AIMessage, HumanMessage]
    assert messages[-1].content == "Add a summary"


def test_chat_messages_look_back_limit(sample_note):
    context = build_chat_context(sample_note, 0)
    conversation = [ConversationMessage(role="user", content=f"m{i}") for i in range(10)]

    messages = build_chat_messages(context, conversation, look_back_limit=3)

    assert [m.content for m in messages[1:]] == ["m7", "m8", "m9"]


def test_unknown_roles_are_skipped(sample_note):
    context = build_chat_context(sample_note, 0)
    conversation = [
        ConversationMessage(role="tool", content="ignored"),
        ConversationMessage(role="user", content="hello"),
    ]

    messages = build_chat_messages(context, conversation)

    assert len(messages) == 2
    assert messages[1].content == "hello"


def test_cursor_may_equal_child_count_but_not_exceed_it(sample_note):
    assert build_chat_context(sample_note, 5).cursor_position == 5
    with pytest.raises(InvalidDocumentError):
        build_chat_context(sample_note, 6)
