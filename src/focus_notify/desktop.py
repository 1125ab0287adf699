"""OS desktop notification sender.

Linux goes through notify-send (libnotify), macOS through an AppleScript
"display notification". Other platforms have no banner; sends are logged only.
"""

import logging
import sys
from pathlib import Path

from focus_notify.shell import run_command

logger = logging.getLogger(__name__)

DEFAULT_ICON_PATH = Path(__file__).parent / "assets" / "notify-icon.svg"


def _escape_applescript(s: str) -> str:
    """Escape a string for use inside an AppleScript string literal."""
    # Backslash first, or the quote escapes would be doubled
    return s.replace("\\", "\\\\").replace('"', '\\"')


class DesktopNotifier:
    """Sends OS-level notification banners."""

    # Identifiers shown by the notification daemon
    APP_NAME = "OpenCode"
    DESKTOP_ENTRY = "opencode"

    def __init__(self, platform: str | None = None, icon_path: Path | None = None):
        self.platform = sys.platform if platform is None else platform
        self.icon_path = icon_path or DEFAULT_ICON_PATH

    @property
    def is_available(self) -> bool:
        """Check if this platform has a known notification facility."""
        return self.platform == "darwin" or self.platform.startswith("linux")

    def build_command(self, title: str, body: str) -> list[str] | None:
        """Command line that displays the banner, or None if unsupported."""
        if self.platform.startswith("linux"):
            return [
                "notify-send",
                "-a",
                self.APP_NAME,
                "-h",
                f"string:desktop-entry:{self.DESKTOP_ENTRY}",
                "-i",
                str(self.icon_path),
                "--",
                title,
                body,
            ]
        if self.platform == "darwin":
            script = (
                f'display notification "{_escape_applescript(body)}" '
                f'with title "{_escape_applescript(title)}"'
            )
            return ["osascript", "-e", script]
        return None

    async def send(self, title: str, body: str) -> bool:
        """Show a banner.

        Returns:
            True if the notification tool ran successfully, False otherwise
        """
        cmd = self.build_command(title, body)
        if cmd is None:
            logger.info(f"[BANNER] {title}: {body} (no notification facility on {self.platform})")
            return False

        result = await run_command(*cmd)
        if result is None:
            logger.warning(f"{cmd[0]} not available - banner not shown")
            return False
        if not result.ok:
            logger.warning(f"{cmd[0]} failed (exit {result.returncode}): {result.stderr.strip()[:200]}")
            return False

        logger.debug(f"Banner sent: {title}")
        return True
