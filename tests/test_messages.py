"""Tests for notification text."""

import pytest

from focus_notify.events import AgentEvent, EventKind
from focus_notify.messages import (
    Channel,
    Variant,
    build_message,
    build_request,
    describe_error,
    truncate,
)
from focus_notify.session import Session


def _error(error_type=None, message=None, session_id="s1"):
    error = {}
    if error_type is not None:
        error["type"] = error_type
    if message is not None:
        error["data"] = {"message": message}
    return AgentEvent(kind=EventKind.SESSION_ERROR, session_id=session_id, properties={"error": error})


class TestDescribeError:
    @pytest.mark.parametrize("error_type,message,expected", [
        ("provider_auth", "bad key", "Auth error: bad key"),
        ("unknown", "segfault", "segfault"),
        ("unknown", None, "Unknown error"),
        ("output_length", None, "Output too long"),
        ("api", "rate limited", "API error: rate limited"),
        ("api", None, "API error: "),
        ("something_new", "x", "Something went wrong"),
        (None, None, "Something went wrong"),
    ])
    def test_mapping(self, error_type, message, expected):
        assert describe_error(_error(error_type, message)) == expected


class TestTruncate:
    def test_short_unchanged(self):
        assert truncate("a" * 100) == "a" * 100

    def test_long_truncated(self):
        result = truncate("a" * 101)
        assert len(result) == 100
        assert result == "a" * 97 + "..."


class TestBuildMessage:
    def test_idle_is_label(self):
        event = AgentEvent(kind=EventKind.SESSION_IDLE, session_id="s1")
        assert build_message(event, Session(id="s1", title="Build")) == "Build"

    def test_permission(self):
        event = AgentEvent(kind=EventKind.PERMISSION_UPDATED, session_id="s1", properties={"title": "Edit main.py"})
        assert build_message(event, Session(id="s1", title="Build")) == "Build: Edit main.py"

    def test_error_body(self):
        event = _error("api", "rate limited")
        assert build_message(event, Session(id="s1", title="Build")) == "Build: API error: rate limited"

    def test_error_body_truncated(self):
        event = _error("unknown", "x" * 200)
        message = build_message(event, Session(id="s1", title="Build"))
        assert len(message) == 100
        assert message.startswith("Build: xxx")
        assert message.endswith("...")

    def test_error_without_session_id(self):
        event = _error("output_length", session_id=None)
        assert build_message(event, None) == "Unknown session: Output too long"

    def test_unresolved_session_uses_raw_id(self):
        event = _error("output_length", session_id="ses_123")
        assert build_message(event, None) == "ses_123: Output too long"


class TestBuildRequest:
    @pytest.mark.parametrize("kind,title,variant", [
        (EventKind.SESSION_IDLE, "Agent is ready for input", Variant.INFO),
        (EventKind.QUESTION_ASKED, "Question for you", Variant.WARNING),
        (EventKind.PERMISSION_ASKED, "Permission needed", Variant.WARNING),
        (EventKind.PERMISSION_UPDATED, "Permission needed", Variant.WARNING),
        (EventKind.SESSION_ERROR, "Error occurred", Variant.ERROR),
    ])
    def test_titles_and_variants(self, kind, title, variant):
        event = AgentEvent(kind=kind, session_id="s1")
        request = build_request(event, Session(id="s1"), frozenset({Channel.TOAST}))
        assert request.title == title
        assert request.variant is variant
        assert request.channels == frozenset({Channel.TOAST})
