"""Agent events that can trigger a notification.

Raw events arrive as ``{"type": ..., "properties": {...}}`` dicts from the agent
server's event stream. Only the kinds in EventKind are of interest; everything
else is dropped at parse time.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EventKind(Enum):
    """Event kinds the notifier reacts to."""

    SESSION_IDLE = "session.idle"
    SESSION_ERROR = "session.error"
    QUESTION_ASKED = "question.asked"
    PERMISSION_UPDATED = "permission.updated"
    PERMISSION_ASKED = "permission.asked"

    @property
    def is_permission(self) -> bool:
        return self in (EventKind.PERMISSION_UPDATED, EventKind.PERMISSION_ASKED)


@dataclass(frozen=True)
class AgentEvent:
    """Normalized agent event."""

    kind: EventKind
    session_id: str | None
    properties: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "AgentEvent | None":
        """Parse a raw event. Returns None for unknown or malformed events."""
        if not isinstance(data, dict):
            return None
        try:
            kind = EventKind(data.get("type"))
        except ValueError:
            return None

        properties = data.get("properties")
        if not isinstance(properties, dict):
            properties = {}

        session_id = properties.get("sessionID")
        if not isinstance(session_id, str) or not session_id:
            session_id = None

        return cls(kind=kind, session_id=session_id, properties=properties)

    @property
    def error(self) -> dict[str, Any]:
        """The session.error payload, or an empty dict."""
        error = self.properties.get("error")
        return error if isinstance(error, dict) else {}

    @property
    def error_type(self) -> str | None:
        error_type = self.error.get("type")
        return error_type if isinstance(error_type, str) else None

    @property
    def error_message(self) -> str:
        data = self.error.get("data")
        if isinstance(data, dict) and isinstance(data.get("message"), str):
            return data["message"]
        return ""

    @property
    def is_aborted(self) -> bool:
        """User-initiated aborts are not failures."""
        return self.kind is EventKind.SESSION_ERROR and self.error_type == "aborted"

    @property
    def permission_description(self) -> str:
        # permission.updated carries a title, permission.asked a permission name
        title = self.properties.get("title")
        if isinstance(title, str):
            return title
        permission = self.properties.get("permission")
        if isinstance(permission, str):
            return permission
        return "Permission needed"
