"""Terminal focus detection.

Answers "is a terminal emulator the foreground window right now?" so
notifications can be held back while the user is already looking at the agent.

Detection chain (first applicable strategy wins):
1. Hyprland (HYPRLAND_INSTANCE_SIGNATURE) -> hyprctl -j activewindow -> .class
2. Niri (NIRI_SOCKET) -> niri msg --json focused-window -> .app_id
3. macOS -> osascript -> name of the frontmost process
4. Anything else -> not focused, so the user is always notified

Every failure (missing tool, bad JSON, odd output) resolves to "not focused".
"""

import json
import logging
import os
import re
import sys
from collections.abc import Mapping
from enum import Enum

from focus_notify.shell import run_command

logger = logging.getLogger(__name__)


class FocusState(Enum):
    """Whether the user is looking at this session."""

    FOCUSED = "focused"
    NOT_FOCUSED = "not_focused"
    UNKNOWN = "unknown"  # Pane query could not tell panes apart


# Canonical short names. Also matched as tokens of longer identifiers, so
# "org.foo.alacritty" or "st-256color" still count.
TERMINAL_NAMES = frozenset({
    "ghostty",
    "kitty",
    "foot",
    "footclient",
    "alacritty",
    "wezterm",
    "wezterm-gui",
    "iterm2",
    "iterm",
    "terminal",
    "hyper",
    "warp",
    "rio",
    "st",
    "urxvt",
    "xterm",
    "konsole",
    "tilix",
})

# Exact-match only: bundle ids and process names that don't tokenize cleanly
TERMINAL_BUNDLE_IDS = frozenset({
    "com.mitchellh.ghostty",
    "net.kovidgoyal.kitty",
    "org.alacritty",
    "io.alacritty",
    "org.wezfurlong.wezterm",
    "com.googlecode.iterm2",
    "com.apple.terminal",
    "co.zeit.hyper",
    "dev.warp.warp-stable",
    "com.raphaelamorim.rio",
    "org.codeberg.dnkl.foot",
    "org.gnome.terminal",
    "org.gnome.console",
    "org.kde.konsole",
    "stable",  # Warp's macOS process name
})

_TOKEN_SPLIT = re.compile(r"[^a-z0-9]+")


def is_known_terminal(identifier: str | None) -> bool:
    """Check a window class, app id or process name against known terminals."""
    if not identifier:
        return False
    normalized = identifier.strip().lower()
    if not normalized:
        return False
    if normalized in TERMINAL_NAMES or normalized in TERMINAL_BUNDLE_IDS:
        return True
    return any(token in TERMINAL_NAMES for token in _TOKEN_SPLIT.split(normalized) if token)


class FocusStrategy:
    """One way of asking the desktop which app has focus."""

    name = "base"

    def is_applicable(self, environ: Mapping[str, str], platform: str) -> bool:
        raise NotImplementedError

    async def focused_app(self) -> str | None:
        """Identifier of the focused app, or None when nothing is focused."""
        raise NotImplementedError


class HyprlandStrategy(FocusStrategy):
    name = "hyprland"

    def is_applicable(self, environ: Mapping[str, str], platform: str) -> bool:
        return bool(environ.get("HYPRLAND_INSTANCE_SIGNATURE"))

    async def focused_app(self) -> str | None:
        result = await run_command("hyprctl", "-j", "activewindow")
        if result is None:
            return None
        window = json.loads(result.stdout)
        # Hyprland returns {} on an empty workspace
        if not isinstance(window, dict):
            return None
        cls = window.get("class")
        return cls if isinstance(cls, str) and cls else None


class NiriStrategy(FocusStrategy):
    name = "niri"

    def is_applicable(self, environ: Mapping[str, str], platform: str) -> bool:
        return bool(environ.get("NIRI_SOCKET"))

    async def focused_app(self) -> str | None:
        result = await run_command("niri", "msg", "--json", "focused-window")
        if result is None:
            return None
        window = json.loads(result.stdout)
        # null means nothing is focused
        if not isinstance(window, dict):
            return None
        app_id = window.get("app_id")
        return app_id if isinstance(app_id, str) and app_id else None


class MacOSStrategy(FocusStrategy):
    name = "macos"

    FRONTMOST_SCRIPT = 'tell application "System Events" to get name of first process whose frontmost is true'

    def is_applicable(self, environ: Mapping[str, str], platform: str) -> bool:
        return platform == "darwin"

    async def focused_app(self) -> str | None:
        result = await run_command("osascript", "-e", self.FRONTMOST_SCRIPT)
        if result is None:
            return None
        name = result.stdout.strip()
        return name or None


DEFAULT_STRATEGIES: tuple[FocusStrategy, ...] = (
    HyprlandStrategy(),
    NiriStrategy(),
    MacOSStrategy(),
)


class FocusDetector:
    """Detects whether any terminal emulator is the foreground window."""

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        platform: str | None = None,
        strategies: tuple[FocusStrategy, ...] = DEFAULT_STRATEGIES,
    ):
        self.environ = os.environ if environ is None else environ
        self.platform = sys.platform if platform is None else platform
        self.strategies = strategies

    def select_strategy(self) -> FocusStrategy | None:
        """First strategy whose environment discriminator is present."""
        for strategy in self.strategies:
            if strategy.is_applicable(self.environ, self.platform):
                return strategy
        return None

    async def is_terminal_focused(self) -> bool:
        strategy = self.select_strategy()
        if strategy is None:
            logger.debug("No focus strategy for this environment, assuming not focused")
            return False

        try:
            app = await strategy.focused_app()
        except Exception as e:
            logger.debug(f"Focus query via {strategy.name} failed: {e}")
            return False

        focused = is_known_terminal(app)
        logger.debug(f"Focused app via {strategy.name}: {app!r} (terminal={focused})")
        return focused
