"""
Chat Action Parser

Turns a raw model reply into exactly one ChatAction.

Parsing steps:
1. Trim whitespace, strip a surrounding ``` code fence (with optional language tag,
   e.g. ```json followed by a newline or directly by the object)
2. Text not starting with '{' is prose -> ReplyAction(content=text)
3. Otherwise the text must be a JSON object (MalformedActionJsonError if not)
4. No "action" field -> prose -> ReplyAction(content=text)
5. "reply" / "insert_node" / "modify_node" -> validated against the action model
   (MalformedActionShapeError on missing or mistyped fields)
6. Any other "action" value -> UnsupportedActionTypeError

A prose reply that happens to start with '{' but is not valid JSON is an
error, not prose.
"""

import json
import logging
import re
from typing import Any, Dict, List, Type

from pydantic import BaseModel, ValidationError

from note_agent.errors import (
    MalformedActionJsonError,
    MalformedActionShapeError,
    UnsupportedActionTypeError,
)
from note_agent.models.chat_models import (
    ActionType,
    ChatAction,
    InsertNodeAction,
    ModifyNodeAction,
    ReplyAction,
)

logger = logging.getLogger(__name__)

# Opening fence; a language tag is consumed when whitespace follows it, and a
# "json" tag also when the JSON body starts right after it
_OPENING_FENCE = re.compile(r"^```(?:[A-Za-z0-9_+\-.]+(?=\s)|(?i:json)(?=[{\[]))?")
_CLOSING_FENCE = re.compile(r"```$")

_ACTION_MODELS: Dict[str, Type[BaseModel]] = {
    ActionType.REPLY.value: ReplyAction,
    ActionType.INSERT_NODE.value: InsertNodeAction,
    ActionType.MODIFY_NODE.value: ModifyNodeAction,
}


def strip_code_fence(text: str) -> str:
    """Remove a leading and/or trailing ``` fence and surrounding whitespace"""
    stripped = text.strip()
    stripped = _OPENING_FENCE.sub("", stripped, count=1)
    stripped = _CLOSING_FENCE.sub("", stripped, count=1)
    return stripped.strip()


def _field_errors(error: ValidationError) -> List[str]:
    messages = []
    for err in error.errors():
        field = ".".join(str(part) for part in err.get("loc", ())) or "<object>"
        messages.append(f"{field}: {err.get('msg')}")
    return messages


def parse_chat_action(raw_reply: str) -> ChatAction:
    """
    Parse a raw model reply into a ReplyAction, InsertNodeAction or ModifyNodeAction.

    Raises:
        MalformedActionJsonError: reply starts with '{' but is not valid JSON
        MalformedActionShapeError: a known action is missing or has mistyped fields
        UnsupportedActionTypeError: the reply names an unknown action
    """
    text = strip_code_fence(raw_reply or "")

    if not text.startswith("{"):
        logger.debug("Reply classified as prose")
        return ReplyAction(content=text)

    try:
        payload: Any = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning(f"Reply looked like JSON but failed to parse: {e}")
        raise MalformedActionJsonError(text, str(e)) from e

    if not isinstance(payload, dict) or "action" not in payload:
        logger.debug("JSON reply without an action field, treating as prose")
        return ReplyAction(content=text)

    action_type = payload["action"]
    model = _ACTION_MODELS.get(action_type) if isinstance(action_type, str) else None
    if model is None:
        logger.warning(f"Reply requested unsupported action: {action_type!r}")
        raise UnsupportedActionTypeError(action_type)

    try:
        action = model.model_validate(payload, strict=True)
    except ValidationError as e:
        field_errors = _field_errors(e)
        logger.warning(f"Invalid '{action_type}' action: {field_errors}")
        raise MalformedActionShapeError(action_type, field_errors) from e

    logger.debug(f"Reply classified as {action_type}")
    return action
