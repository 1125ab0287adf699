"""Pane-level focus for kitty.

A focused kitty OS window may still be showing a different tab or split than
the one running this agent. When KITTY_WINDOW_ID is set, kitty's remote
control is asked which of its windows (panes) has focus and the answer is
compared with our own id.
"""

import json
import logging
import os
from collections.abc import Mapping
from typing import Any

from focus_notify.focus import FocusState
from focus_notify.shell import run_command

logger = logging.getLogger(__name__)

PANE_ID_ENV = "KITTY_WINDOW_ID"


def find_focused_pane(os_windows: Any) -> str | None:
    """Scan kitty's OS window -> tab -> window listing for a focused window id."""
    if not isinstance(os_windows, list):
        return None
    for os_window in os_windows:
        if not isinstance(os_window, dict):
            continue
        for tab in os_window.get("tabs") or []:
            if not isinstance(tab, dict):
                continue
            for window in tab.get("windows") or []:
                if isinstance(window, dict) and window.get("is_focused") and "id" in window:
                    return str(window["id"])
    return None


def first_pane(os_windows: Any) -> str | None:
    """Id of the first window in a listing, whatever its focus flag."""
    if not isinstance(os_windows, list):
        return None
    for os_window in os_windows:
        if not isinstance(os_window, dict):
            continue
        for tab in os_window.get("tabs") or []:
            if not isinstance(tab, dict):
                continue
            for window in tab.get("windows") or []:
                if isinstance(window, dict) and "id" in window:
                    return str(window["id"])
    return None


class KittyPaneMatcher:
    """Decides whether the kitty window hosting this process has focus."""

    def __init__(self, environ: Mapping[str, str] | None = None):
        self.environ = os.environ if environ is None else environ

    @property
    def pane_id(self) -> str | None:
        return self.environ.get(PANE_ID_ENV) or None

    @property
    def is_applicable(self) -> bool:
        """Only meaningful when running inside kitty."""
        return self.pane_id is not None

    async def _list_windows(self, *match: str) -> Any:
        result = await run_command("kitty", "@", "ls", *match)
        if result is None or not result.ok or not result.stdout.strip():
            return None
        return json.loads(result.stdout)

    async def focused_pane(self) -> str | None:
        """Id of the focused kitty window, or None if it can't be determined.

        When no window carries a focus flag, the first listed window is taken.
        """
        listing = await self._list_windows("--match", "state:focused")
        if not listing:
            listing = await self._list_windows()
        return find_focused_pane(listing) or first_pane(listing)

    async def is_current_pane_focused(self) -> FocusState:
        pane_id = self.pane_id
        if pane_id is None:
            return FocusState.UNKNOWN

        try:
            focused = await self.focused_pane()
        except Exception as e:
            logger.debug(f"kitty pane query failed: {e}")
            return FocusState.UNKNOWN

        if focused is None:
            return FocusState.UNKNOWN
        state = FocusState.FOCUSED if focused == pane_id else FocusState.NOT_FOCUSED
        logger.debug(f"kitty focused window {focused}, ours {pane_id}: {state.value}")
        return state
