"""Fan-out of a notification request to its channels.

Channels are attempted one after another and each failure is contained, so a
broken notify-send never costs the user their toast or bell.
"""

import logging
import sys
from typing import Protocol, TextIO

from focus_notify.desktop import DesktopNotifier
from focus_notify.messages import Channel, NotificationRequest

logger = logging.getLogger(__name__)

BELL = "\x07"


class ToastSurface(Protocol):
    """Where agent TUI toasts are rendered (see AgentServerClient)."""

    async def show_toast(
        self, title: str, message: str, variant: str = "info", directory: str | None = None
    ) -> None: ...


class NotificationDispatcher:
    """Executes the channels selected for a notification."""

    def __init__(
        self,
        toast_surface: ToastSurface | None = None,
        desktop: DesktopNotifier | None = None,
        directory: str | None = None,
        bell_stream: TextIO | None = None,
    ):
        """Initialize the dispatcher.

        Args:
            toast_surface: Agent server client; toasts are skipped without one
            desktop: OS banner sender (platform default if not provided)
            directory: Working directory the toast is scoped to
            bell_stream: Where BEL is written (stdout if not provided)
        """
        self.toast_surface = toast_surface
        self.desktop = desktop or DesktopNotifier()
        self.directory = directory
        self.bell_stream = bell_stream

    async def dispatch(self, request: NotificationRequest) -> dict[Channel, bool]:
        """Fire every requested channel.

        Returns:
            Per-channel success, for the channels that were requested
        """
        results: dict[Channel, bool] = {}

        if Channel.TOAST in request.channels:
            results[Channel.TOAST] = await self._show_toast(request)
        if Channel.DESKTOP_BANNER in request.channels:
            results[Channel.DESKTOP_BANNER] = await self._send_banner(request)
        if Channel.TERMINAL_BELL in request.channels:
            results[Channel.TERMINAL_BELL] = self._ring_bell()

        logger.info(
            f"[{request.variant.value.upper()}] {request.title}: {request.message} "
            f"-> {', '.join(sorted(c.value for c in results)) or 'no channels'}"
        )
        return results

    async def _show_toast(self, request: NotificationRequest) -> bool:
        if self.toast_surface is None:
            logger.debug("No toast surface configured, skipping toast")
            return False
        try:
            await self.toast_surface.show_toast(
                title=request.title,
                message=request.message,
                variant=request.variant.value,
                directory=self.directory,
            )
            return True
        except Exception as e:
            logger.warning(f"Failed to show toast: {e}")
            return False

    async def _send_banner(self, request: NotificationRequest) -> bool:
        try:
            return await self.desktop.send(request.title, request.message)
        except Exception as e:
            logger.warning(f"Failed to send desktop banner: {e}")
            return False

    def _ring_bell(self) -> bool:
        stream = self.bell_stream or sys.stdout
        try:
            stream.write(BELL)
            stream.flush()
            return True
        except Exception as e:
            logger.warning(f"Failed to ring terminal bell: {e}")
            return False
