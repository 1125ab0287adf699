"""Async subprocess helper shared by focus detection and desktop banners.

Every external tool this package talks to (hyprctl, niri, osascript, kitty,
notify-send) is invoked through run_command so a missing binary degrades to
None instead of raising.
"""

import asyncio
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Captured output of a finished command."""

    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


async def run_command(*args: str) -> CommandResult | None:
    """Run a command and capture its output.

    Returns:
        CommandResult once the process exits, or None if it could not be started
        (binary missing, permission denied).
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        logger.debug(f"Could not start {args[0]}: {e}")
        return None

    stdout, stderr = await proc.communicate()
    return CommandResult(
        returncode=proc.returncode if proc.returncode is not None else -1,
        stdout=stdout.decode(errors="replace"),
        stderr=stderr.decode(errors="replace"),
    )
