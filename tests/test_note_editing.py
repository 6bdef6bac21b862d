"""
Tests for node factories, read helpers and applying chat actions
"""

from note_agent.models.chat_models import InsertNodeAction, ModifyNodeAction, ReplyAction
from note_agent.models.note_models import (
    AIEmbeddingNode,
    HeadingNode,
    ParagraphNode,
    TextNode,
    dump_note,
    parse_note,
)
from note_agent.utils.note_brief import extract_text
from note_agent.utils.note_editing import (
    apply_action,
    build_node_for_action,
    count_children,
    count_words,
    create_empty_note,
    describe_action,
    find_nodes_by_type,
    get_node_by_id,
    insert_node,
    is_note_empty,
    note_plain_text,
    remove_node,
)


class TestFactories:

    def test_build_node_for_action(self):
        assert isinstance(build_node_for_action("text", "a"), TextNode)
        assert isinstance(build_node_for_action("heading", "a"), HeadingNode)
        assert isinstance(build_node_for_action("ai-embedding", "a"), AIEmbeddingNode)
        fallback = build_node_for_action("quote", "a")
        assert isinstance(fallback, ParagraphNode)
        assert extract_text(fallback) == "a"

    def test_empty_note_serializes(self):
        note = create_empty_note("n-1")
        assert is_note_empty(note)
        assert dump_note(parse_note(dump_note(note))) == dump_note(note)


class TestReadHelpers:

    def test_get_node_by_id(self, sample_note):
        assert get_node_by_id(sample_note, 0).type == "heading"
        assert get_node_by_id(sample_note, 5) is None
        assert get_node_by_id(sample_note, -1) is None

    def test_find_and_count(self, sample_note):
        assert len(find_nodes_by_type(sample_note, "listitem")) == 2
        assert len(find_nodes_by_type(sample_note, "text")) == 4
        assert count_children(sample_note.children[3]) == 4

    def test_plain_text(self, sample_note):
        assert note_plain_text(sample_note).startswith("Weekly plan\n\nShip the #release")
        assert count_words(sample_note) == 11
        assert not is_note_empty(sample_note)


class TestEdits:

    def test_insert_and_remove_do_not_mutate_input(self, sample_note):
        before = dump_note(sample_note)

        inserted = insert_node(sample_note, build_node_for_action("text", "x"), 1)
        removed = remove_node(sample_note, 0)

        assert dump_note(sample_note) == before
        assert inserted.children[1].text == "x"
        assert len(removed.children) == 4

    def test_insert_out_of_range_appends(self, sample_note):
        updated = insert_node(sample_note, build_node_for_action("text", "tail"), 99)
        assert updated.children[-1].text == "tail"


class TestApplyAction:

    def test_insert_after_node(self, sample_note):
        action = InsertNodeAction(insert_after=2, node_type="paragraph", content="Summary")

        updated = apply_action(sample_note, action)

        assert len(updated.children) == 6
        assert updated.children[3].type == "paragraph"
        assert extract_text(updated.children[3]) == "Summary"
        assert updated.children[4].type == "list"

    def test_modify_paragraph(self, sample_note):
        action = ModifyNodeAction(id=2, node_type="paragraph", content="Ship it")

        updated = apply_action(sample_note, action)

        assert extract_text(updated.children[2]) == "Ship it"
        assert extract_text(sample_note.children[2]) == "Ship the #release"

    def test_modify_heading_keeps_tag(self, sample_note):
        updated = apply_action(sample_note, ModifyNodeAction(id=0, node_type="paragraph", content="Plan"))
        assert updated.children[0].type == "heading"
        assert extract_text(updated.children[0]) == "Plan"

    def test_modify_missing_node_is_a_no_op(self, sample_note):
        assert apply_action(sample_note, ModifyNodeAction(id=42, node_type="paragraph", content="x")) is sample_note

    def test_modify_unsupported_combination_is_a_no_op(self, sample_note):
        action = ModifyNodeAction(id=4, node_type="paragraph", content="x")
        assert apply_action(sample_note, action) is sample_note

    def test_reply_leaves_note_unchanged(self, sample_note):
        assert apply_action(sample_note, ReplyAction(content="ok")) is sample_note


def test_describe_action():
    assert describe_action(ReplyAction(content="x")) == "Agent replied to your message"
    assert describe_action(InsertNodeAction(insert_after=0, node_type="text", content="x")) == (
        "Agent inserted a new text node"
    )
    assert describe_action(ModifyNodeAction(id=3, node_type="paragraph", content="x")) == (
        "Agent modified paragraph node at position 3"
    )
