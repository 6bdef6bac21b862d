"""
Note Agent Errors

All failures raised by the document model, the action parser and the
completion collaborator. None of them is fatal: callers surface them back
into the conversation turn (see to_correction_message) or to the user.
"""

from typing import Any, Dict, List, Optional


class NoteAgentError(Exception):
    """Base class for every error raised by the note agent"""

    error_type = "note_agent_error"

    def to_correction_message(self) -> str:
        """Text the caller can send back to the model to ask for a corrected reply"""
        return str(self)


# ---------------------------------------------------------------------------
# Document errors
# ---------------------------------------------------------------------------

class DocumentError(NoteAgentError):
    """The note payload could not be turned into a Note"""

    error_type = "document_error"


class UnrecognizedNodeTypeError(DocumentError):
    """A node carries a `type` discriminator outside the known node set"""

    error_type = "unrecognized_node_type"

    def __init__(self, node_type: Any, location: str):
        self.node_type = node_type
        self.location = location
        super().__init__(f"Unrecognized node type {node_type!r} at {location}")


class InvalidDocumentError(DocumentError):
    """Structural problem in the note payload (missing fields, bad version, ...)"""

    error_type = "invalid_document"

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        self.errors = errors or []
        super().__init__(message)


# ---------------------------------------------------------------------------
# Action parsing errors
# ---------------------------------------------------------------------------

class ActionParseError(NoteAgentError):
    """The model reply could not be turned into a ChatAction"""

    error_type = "action_parse_error"


class MalformedActionJsonError(ActionParseError):
    """Reply looks like JSON (starts with '{') but does not parse"""

    error_type = "malformed_action_json"

    def __init__(self, raw: str, detail: str):
        self.raw = raw
        self.detail = detail
        super().__init__(f"Reply is not valid JSON: {detail}")

    def to_correction_message(self) -> str:
        return (
            "Your last reply started with '{' but was not valid JSON "
            f"({self.detail}). Reply again with a single valid JSON object."
        )


class MalformedActionShapeError(ActionParseError):
    """JSON parsed, but fields required by the named action are missing or mistyped"""

    error_type = "malformed_action_shape"

    def __init__(self, action_type: str, field_errors: List[str]):
        self.action_type = action_type
        self.field_errors = field_errors
        super().__init__(
            f"Invalid '{action_type}' action: {'; '.join(field_errors)}"
        )

    def to_correction_message(self) -> str:
        return (
            f"Your last '{self.action_type}' action was missing or had invalid fields: "
            f"{'; '.join(self.field_errors)}. Reply again with all required fields."
        )


class UnsupportedActionTypeError(ActionParseError):
    """Reply names an explicit action outside reply / insert_node / modify_node"""

    error_type = "unsupported_action_type"

    def __init__(self, action_type: Any):
        self.action_type = action_type
        super().__init__(f"Unsupported action type: {action_type!r}")

    def to_correction_message(self) -> str:
        return (
            f"The action {self.action_type!r} is not supported. "
            "Use one of: reply, insert_node, modify_node."
        )


# ---------------------------------------------------------------------------
# Completion collaborator errors
# ---------------------------------------------------------------------------

class CompletionError(NoteAgentError):
    """Completion API error with a user-friendly message"""

    def __init__(self, user_message: str, error_type: str, original_error: str = ""):
        self.user_message = user_message
        self.error_type = error_type
        self.original_error = original_error
        super().__init__(user_message)


class AgentNotRunningError(NoteAgentError):
    """Chat was requested before the runtime was started"""

    error_type = "agent_not_running"
