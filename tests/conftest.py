"""Shared fixtures for focus-notify tests."""

import io

import pytest

import focus_notify.config as config_module
from focus_notify.focus import FocusState
from focus_notify.shell import CommandResult


def ok(stdout: str = "", returncode: int = 0, stderr: str = "") -> CommandResult:
    """Shorthand for a finished command."""
    return CommandResult(returncode=returncode, stdout=stdout, stderr=stderr)


class FakeFocus:
    """Stands in for FocusProvider and records how often it was asked."""

    def __init__(self, state: FocusState = FocusState.NOT_FOCUSED, in_multiplexer: bool = False):
        self.state = state
        self.in_multiplexer = in_multiplexer
        self.calls = 0

    async def focus_state(self) -> FocusState:
        self.calls += 1
        return self.state


class FakeSessionSource:
    """In-memory session server.

    ``scoped``/``unscoped`` map ids to payloads; a value that is an exception is
    raised instead of returned.
    """

    def __init__(self, scoped=None, unscoped=None, listing=None):
        self.scoped = scoped or {}
        self.unscoped = unscoped or {}
        self.listing = listing if listing is not None else []
        self.calls: list[tuple] = []

    async def get_session(self, session_id, directory=None):
        self.calls.append(("get", session_id, directory))
        table = self.scoped if directory else self.unscoped
        value = table.get(session_id, LookupError(f"no session {session_id}"))
        if isinstance(value, Exception):
            raise value
        return value

    async def list_sessions(self, directory=None, limit=100):
        self.calls.append(("list", directory, limit))
        if isinstance(self.listing, Exception):
            raise self.listing
        return self.listing


class FakeToastSurface:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.toasts: list[dict] = []

    async def show_toast(self, title, message, variant="info", directory=None):
        if self.fail:
            raise ConnectionError("server down")
        self.toasts.append({"title": title, "message": message, "variant": variant, "directory": directory})


class FakeDesktop:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.banners: list[tuple[str, str]] = []

    async def send(self, title, body):
        if self.fail:
            raise FileNotFoundError("notify-send")
        self.banners.append((title, body))
        return True


@pytest.fixture(autouse=True)
def _reset_config_cache():
    """Each test starts without a cached process-wide config."""
    config_module._config = None
    yield
    config_module._config = None


@pytest.fixture
def bell_stream():
    return io.StringIO()
