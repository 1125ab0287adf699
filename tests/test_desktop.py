"""Tests for OS banner delivery."""

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, patch

from focus_notify.desktop import DesktopNotifier, _escape_applescript
from tests.conftest import ok


class TestEscape:
    def test_quotes(self):
        assert _escape_applescript('say "hi"') == 'say \\"hi\\"'

    def test_backslash_before_quotes(self):
        assert _escape_applescript('C:\\dir "x"') == 'C:\\\\dir \\"x\\"'

    def test_plain(self):
        assert _escape_applescript("Build: done") == "Build: done"


class TestBuildCommand:
    def test_linux(self):
        notifier = DesktopNotifier(platform="linux", icon_path=Path("/icons/agent.svg"))
        assert notifier.build_command("Title", "Body") == [
            "notify-send",
            "-a",
            "OpenCode",
            "-h",
            "string:desktop-entry:opencode",
            "-i",
            "/icons/agent.svg",
            "--",
            "Title",
            "Body",
        ]

    def test_linux_dash_leading_text_is_not_an_option(self):
        notifier = DesktopNotifier(platform="linux")
        cmd = notifier.build_command("Agent is ready for input", "--version")
        assert cmd[-3:] == ["--", "Agent is ready for input", "--version"]

    def test_macos(self):
        notifier = DesktopNotifier(platform="darwin")
        cmd = notifier.build_command('Error "x"', "a\\b")
        assert cmd[:2] == ["osascript", "-e"]
        assert cmd[2] == 'display notification "a\\\\b" with title "Error \\"x\\""'

    def test_unsupported(self):
        notifier = DesktopNotifier(platform="win32")
        assert notifier.build_command("T", "B") is None
        assert not notifier.is_available

    def test_default_icon_ships_with_package(self):
        assert DesktopNotifier(platform="linux").icon_path.exists()


class TestSend:
    def test_success(self):
        notifier = DesktopNotifier(platform="linux")
        with patch("focus_notify.desktop.run_command", new=AsyncMock(return_value=ok())) as run:
            assert asyncio.run(notifier.send("T", "B")) is True
        assert run.await_args.args[0] == "notify-send"

    def test_tool_missing(self):
        notifier = DesktopNotifier(platform="linux")
        with patch("focus_notify.desktop.run_command", new=AsyncMock(return_value=None)):
            assert asyncio.run(notifier.send("T", "B")) is False

    def test_tool_fails(self):
        notifier = DesktopNotifier(platform="darwin")
        result = ok(returncode=1, stderr="syntax error")
        with patch("focus_notify.desktop.run_command", new=AsyncMock(return_value=result)):
            assert asyncio.run(notifier.send("T", "B")) is False

    def test_unsupported_platform_is_noop(self):
        notifier = DesktopNotifier(platform="win32")
        with patch("focus_notify.desktop.run_command", new=AsyncMock()) as run:
            assert asyncio.run(notifier.send("T", "B")) is False
            run.assert_not_called()
