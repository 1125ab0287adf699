"""Channel selection for agent events.

Rules, in order:
1. Per-kind toggles (errors, permissions, questions; idle is always on)
2. Session hierarchy: unresolved sessions and, unless opted in, child sessions
   never notify
3. Focus suppression for non-error events when suppressWhenFocused is set
4. Errors always get toast and banner; other events only when not suppressed
5. The kitty bell rings for anything that got past 1-2, suppressed or not
"""

import logging
from dataclasses import dataclass

from focus_notify.config import NotifyConfig
from focus_notify.events import AgentEvent, EventKind
from focus_notify.focus import FocusDetector, FocusState
from focus_notify.messages import Channel, Variant, variant_for
from focus_notify.pane import KittyPaneMatcher
from focus_notify.session import Session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Decision:
    """Which channels to fire for one event."""

    toast: bool = False
    desktop_banner: bool = False
    suppressed: bool = False
    bell: bool = False

    @property
    def channels(self) -> frozenset[Channel]:
        selected = set()
        if self.toast:
            selected.add(Channel.TOAST)
        if self.desktop_banner:
            selected.add(Channel.DESKTOP_BANNER)
        if self.bell:
            selected.add(Channel.TERMINAL_BELL)
        return frozenset(selected)

    @property
    def fires(self) -> bool:
        return bool(self.channels)


NO_NOTIFICATION = Decision()


class FocusProvider:
    """Combines terminal focus with kitty pane focus.

    Unknown pane results keep the terminal-level verdict; only a definite
    "another pane is focused" overrides it.
    """

    def __init__(
        self,
        detector: FocusDetector | None = None,
        pane_matcher: KittyPaneMatcher | None = None,
    ):
        self.detector = detector or FocusDetector()
        self.pane_matcher = pane_matcher or KittyPaneMatcher()

    @property
    def in_multiplexer(self) -> bool:
        return self.pane_matcher.is_applicable

    async def focus_state(self) -> FocusState:
        if not await self.detector.is_terminal_focused():
            return FocusState.NOT_FOCUSED
        if not self.in_multiplexer:
            return FocusState.FOCUSED

        pane = await self.pane_matcher.is_current_pane_focused()
        if pane is FocusState.NOT_FOCUSED:
            return FocusState.NOT_FOCUSED
        return FocusState.FOCUSED


def kind_enabled(kind: EventKind, config: NotifyConfig) -> bool:
    if kind is EventKind.SESSION_ERROR:
        return config.notify_on_error
    if kind.is_permission:
        return config.notify_on_permission
    if kind is EventKind.QUESTION_ASKED:
        return config.notify_on_question
    return True


def passes_filters(event: AgentEvent, session: Session | None, config: NotifyConfig) -> bool:
    """Rules 1-2: should this event notify at all?"""
    if not kind_enabled(event.kind, config):
        return False
    if event.is_aborted:
        return False

    if session is None:
        # Errors without any session id still notify (as "Unknown session");
        # an id that failed to resolve never does.
        return event.kind is EventKind.SESSION_ERROR and event.session_id is None

    if session.is_child and not config.notify_child_sessions:
        return False
    return True


async def decide(
    event: AgentEvent,
    session: Session | None,
    config: NotifyConfig,
    focus: FocusProvider,
) -> Decision:
    """Pick the channels for an event.

    The focus provider is only consulted when suppression is enabled and the
    event is not an error.
    """
    if not passes_filters(event, session, config):
        return NO_NOTIFICATION

    bell = focus.in_multiplexer

    if variant_for(event.kind) is Variant.ERROR:
        return Decision(toast=True, desktop_banner=True, suppressed=False, bell=bell)

    suppressed = False
    if config.suppress_when_focused:
        suppressed = await focus.focus_state() is FocusState.FOCUSED

    return Decision(
        toast=not suppressed,
        desktop_banner=not suppressed,
        suppressed=suppressed,
        bell=bell,
    )
