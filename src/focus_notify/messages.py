"""Notification text for each event kind."""

from dataclasses import dataclass
from enum import Enum

from focus_notify.events import AgentEvent, EventKind
from focus_notify.session import Session, session_label

MAX_ERROR_MESSAGE_LENGTH = 100
UNKNOWN_SESSION_LABEL = "Unknown session"


class Variant(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Channel(Enum):
    """Independent delivery mechanisms."""

    TOAST = "toast"  # Agent TUI toast
    DESKTOP_BANNER = "desktop_banner"  # OS notification
    TERMINAL_BELL = "terminal_bell"  # BEL marks the kitty tab as needing attention


@dataclass(frozen=True)
class NotificationRequest:
    title: str
    message: str
    variant: Variant
    channels: frozenset[Channel]


TITLES = {
    EventKind.SESSION_IDLE: "Agent is ready for input",
    EventKind.SESSION_ERROR: "Error occurred",
    EventKind.QUESTION_ASKED: "Question for you",
    EventKind.PERMISSION_UPDATED: "Permission needed",
    EventKind.PERMISSION_ASKED: "Permission needed",
}

VARIANTS = {
    EventKind.SESSION_IDLE: Variant.INFO,
    EventKind.SESSION_ERROR: Variant.ERROR,
    EventKind.QUESTION_ASKED: Variant.WARNING,
    EventKind.PERMISSION_UPDATED: Variant.WARNING,
    EventKind.PERMISSION_ASKED: Variant.WARNING,
}


def variant_for(kind: EventKind) -> Variant:
    return VARIANTS[kind]


def describe_error(event: AgentEvent) -> str:
    """Short, user-facing description of a session.error payload."""
    error_type = event.error_type
    detail = event.error_message
    if error_type == "provider_auth":
        return f"Auth error: {detail}"
    if error_type == "unknown":
        return detail or "Unknown error"
    if error_type == "output_length":
        return "Output too long"
    if error_type == "api":
        return f"API error: {detail}"
    return "Something went wrong"


def truncate(text: str, limit: int = MAX_ERROR_MESSAGE_LENGTH) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


def event_label(event: AgentEvent, session: Session | None) -> str:
    if event.session_id is None:
        return UNKNOWN_SESSION_LABEL
    return session_label(session, event.session_id)


def build_message(event: AgentEvent, session: Session | None) -> str:
    label = event_label(event, session)
    if event.kind is EventKind.SESSION_ERROR:
        return truncate(f"{label}: {describe_error(event)}")
    if event.kind.is_permission:
        return f"{label}: {event.permission_description}"
    return label


def build_request(
    event: AgentEvent,
    session: Session | None,
    channels: frozenset[Channel],
) -> NotificationRequest:
    return NotificationRequest(
        title=TITLES[event.kind],
        message=build_message(event, session),
        variant=variant_for(event.kind),
        channels=channels,
    )
