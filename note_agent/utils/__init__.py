"""
Utilities for note projection, prompt construction, reply parsing and note edits
"""

from note_agent.utils.action_parser import parse_chat_action, strip_code_fence
from note_agent.utils.note_brief import brief_to_json, extract_text, node_type_label, project_brief
from note_agent.utils.note_editing import apply_action, describe_action
from note_agent.utils.prompt_builder import build_chat_messages, build_system_prompt

__all__ = [
    'parse_chat_action',
    'strip_code_fence',
    'brief_to_json',
    'extract_text',
    'node_type_label',
    'project_brief',
    'apply_action',
    'describe_action',
    'build_chat_messages',
    'build_system_prompt'
]
