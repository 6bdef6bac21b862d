"""
Pytest Configuration and Fixtures
"""

import copy
from typing import Any, Dict

import pytest

from note_agent.models.note_models import Note, parse_note


def text(value: str, fmt: int = 0) -> Dict[str, Any]:
    return {"type": "text", "version": 1, "text": value, "format": fmt}


def paragraph(*children: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": "paragraph", "version": 1, "children": list(children)}


def note_payload(*children: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": 7,
        "noteId": "note-7",
        "lexicalState": {
            "root": {
                "type": "root",
                "version": 1,
                "format": "",
                "indent": 0,
                "direction": "ltr",
                "children": list(children),
            }
        },
    }


SAMPLE_NOTE: Dict[str, Any] = note_payload(
    {
        "type": "heading",
        "version": 1,
        "tag": "h1",
        "format": "",
        "indent": 0,
        "direction": "ltr",
        "children": [text("Weekly plan", 1)],
    },
    paragraph(),
    {
        "type": "paragraph",
        "version": 1,
        "format": "",
        "indent": 0,
        "direction": "ltr",
        "textFormat": 0,
        "textStyle": "",
        "children": [
            {"type": "text", "version": 1, "text": "Ship the ", "format": 0,
             "detail": 0, "mode": "normal", "style": ""},
            {"type": "hashtag", "version": 1, "text": "#release", "format": 0},
        ],
    },
    {
        "type": "list",
        "version": 1,
        "listType": "bullet",
        "start": 1,
        "children": [
            {"type": "listitem", "version": 1, "children": [text("Write docs")]},
            {"type": "listitem", "version": 1, "children": [text("Fix bugs")]},
        ],
    },
    {"type": "page-break", "version": 1},
)


@pytest.fixture
def sample_payload() -> Dict[str, Any]:
    """Wire dict of a small note (heading, empty paragraph, paragraph, list, page break)"""
    return copy.deepcopy(SAMPLE_NOTE)


@pytest.fixture
def sample_note(sample_payload) -> Note:
    return parse_note(sample_payload)
