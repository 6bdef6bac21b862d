"""
Tests for parsing raw model replies into chat actions
"""

import pytest

from note_agent.errors import (
    ActionParseError,
    MalformedActionJsonError,
    MalformedActionShapeError,
    UnsupportedActionTypeError,
)
from note_agent.models.chat_models import InsertNodeAction, ModifyNodeAction, ReplyAction
from note_agent.utils.action_parser import parse_chat_action, strip_code_fence


class TestStripCodeFence:

    def test_plain_fence(self):
        assert strip_code_fence('  ```{"a": 1}```  ') == '{"a": 1}'

    def test_fence_with_language_tag(self):
        assert strip_code_fence('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_text_without_fence(self):
        assert strip_code_fence("  hello \n") == "hello"

    def test_json_tag_directly_followed_by_object(self):
        assert strip_code_fence('```json{"a": 1}```') == '{"a": 1}'

    def test_other_tag_without_whitespace_is_kept(self):
        assert strip_code_fence("```python{}```") == "python{}"


class TestParseChatAction:

    def test_fenced_reply(self):
        action = parse_chat_action(' ```{"action":"reply","content":"hi"}``` ')
        assert action == ReplyAction(content="hi")

    def test_prose_passthrough(self):
        assert parse_chat_action("Hello there") == ReplyAction(content="Hello there")

    def test_prose_is_trimmed(self):
        assert parse_chat_action("\n  Sure, done.  \n") == ReplyAction(content="Sure, done.")

    def test_insert_node(self):
        action = parse_chat_action(
            '{"action":"insert_node","insert_after":2,"node_type":"text","content":"x"}'
        )
        assert action == InsertNodeAction(insert_after=2, node_type="text", content="x")

    def test_reply_in_json_fence_without_newline(self):
        action = parse_chat_action('```json{"action":"reply","content":"hi"}```')
        assert action == ReplyAction(content="hi")

    def test_modify_node_in_json_fence(self):
        action = parse_chat_action(
            '```json\n{"action": "modify_node", "id": 3, "node_type": "paragraph", "content": "New"}\n```'
        )
        assert isinstance(action, ModifyNodeAction)
        assert action.id == 3
        assert action.content == "New"

    def test_object_without_action_is_prose(self):
        assert parse_chat_action('{"foo":"bar"}') == ReplyAction(content='{"foo":"bar"}')

    def test_unknown_action_is_an_error(self):
        with pytest.raises(UnsupportedActionTypeError) as exc_info:
            parse_chat_action('{"action":"delete_node"}')
        assert exc_info.value.action_type == "delete_node"

    def test_non_string_action_is_unsupported(self):
        with pytest.raises(UnsupportedActionTypeError):
            parse_chat_action('{"action": 3}')

    def test_invalid_json(self):
        with pytest.raises(MalformedActionJsonError):
            parse_chat_action("{not json")

    def test_prose_starting_with_brace_is_an_error(self):
        with pytest.raises(ActionParseError):
            parse_chat_action("{curly} braces are fun")

    def test_missing_required_field(self):
        with pytest.raises(MalformedActionShapeError) as exc_info:
            parse_chat_action('{"action":"insert_node","node_type":"text","content":"x"}')
        assert exc_info.value.action_type == "insert_node"
        assert any("insert_after" in err for err in exc_info.value.field_errors)

    def test_mistyped_field_is_not_coerced(self):
        with pytest.raises(MalformedActionShapeError):
            parse_chat_action('{"action":"modify_node","id":"3","node_type":"text","content":"x"}')

    def test_negative_id_is_rejected(self):
        with pytest.raises(MalformedActionShapeError):
            parse_chat_action('{"action":"modify_node","id":-1,"node_type":"text","content":"x"}')

    def test_reply_without_content(self):
        with pytest.raises(MalformedActionShapeError):
            parse_chat_action('{"action":"reply"}')

    def test_extra_fields_are_ignored(self):
        action = parse_chat_action('{"action":"reply","content":"ok","confidence":0.9}')
        assert action == ReplyAction(content="ok")

    def test_correction_messages_name_the_problem(self):
        with pytest.raises(UnsupportedActionTypeError) as exc_info:
            parse_chat_action('{"action":"delete_node"}')
        assert "reply, insert_node, modify_node" in exc_info.value.to_correction_message()
