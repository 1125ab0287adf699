"""Notification service.

Follows the agent server's event stream and turns notable events into
notifications. Each event is handled in its own task so a slow focus query or
notify-send never holds up the next event.
"""

import asyncio
import logging
import signal
import sys
from pathlib import Path
from typing import Any

from focus_notify.client import DEFAULT_SERVER_URL, AgentServerClient
from focus_notify.config import NotifyConfig, get_config
from focus_notify.dispatcher import NotificationDispatcher
from focus_notify.events import AgentEvent
from focus_notify.messages import build_request
from focus_notify.policy import NO_NOTIFICATION, Decision, FocusProvider, decide, kind_enabled
from focus_notify.session import SessionResolver

logger = logging.getLogger(__name__)

RECONNECT_DELAY = 5.0


class NotifyService:
    """Wires session resolution, policy and dispatch together.

    Components:
    - SessionResolver: looks up the session behind each event
    - FocusProvider: terminal and pane focus, consulted by the policy
    - NotificationDispatcher: toast, banner and bell delivery
    """

    def __init__(
        self,
        client: AgentServerClient,
        config: NotifyConfig,
        directory: str | None = None,
        focus: FocusProvider | None = None,
        dispatcher: NotificationDispatcher | None = None,
    ):
        self.client = client
        self.config = config
        self.directory = directory
        self.resolver = SessionResolver(client, directory=directory)
        self.focus = focus or FocusProvider()
        self.dispatcher = dispatcher or NotificationDispatcher(toast_surface=client, directory=directory)

        self._tasks: set[asyncio.Task] = set()
        self._running = False
        self._shutdown_event = asyncio.Event()

    async def handle_event(self, raw: Any) -> Decision:
        """Run one raw event through the pipeline.

        Returns:
            The decision taken (NO_NOTIFICATION for ignored events)
        """
        event = AgentEvent.from_dict(raw)
        if event is None:
            return NO_NOTIFICATION

        # Cheap checks first, so disabled kinds never hit the server
        if event.is_aborted or not kind_enabled(event.kind, self.config):
            logger.debug(f"Ignoring {event.kind.value} for {event.session_id}")
            return NO_NOTIFICATION

        session = None
        if event.session_id is not None:
            session = await self.resolver.resolve(event.session_id)

        decision = await decide(event, session, self.config, self.focus)
        if not decision.fires:
            logger.debug(f"No notification for {event.kind.value} ({event.session_id})")
            return decision

        request = build_request(event, session, decision.channels)
        await self.dispatcher.dispatch(request)
        return decision

    async def _handle_safely(self, raw: Any) -> None:
        try:
            await self.handle_event(raw)
        except Exception as e:
            logger.error(f"Error handling event: {e}", exc_info=True)

    def submit(self, raw: Any) -> asyncio.Task:
        """Handle an event in the background."""
        task = asyncio.create_task(self._handle_safely(raw))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _event_reader(self) -> None:
        """Background task that follows the server event stream."""
        logger.info("Event reader started")

        while self._running:
            try:
                async for raw in self.client.stream_events():
                    self.submit(raw)
                    if not self._running:
                        break
                logger.warning("Event stream closed by server")
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.warning(f"Event stream lost: {e}")

            if self._running:
                logger.info(f"Reconnecting in {RECONNECT_DELAY:.0f} seconds...")
                await asyncio.sleep(RECONNECT_DELAY)

        logger.info("Event reader stopped")

    async def start(self) -> None:
        """Start the service and run until stop() is called."""
        if self._running:
            logger.warning("Service already running")
            return

        logger.info("Starting focus-notify...")
        logger.info(f"Server: {self.client.server_url}")
        logger.info(f"Directory: {self.directory}")

        status = await self.client.check_server()
        if status.get("status") != "healthy":
            logger.warning(f"Server not healthy: {status}")
            logger.warning("Continuing anyway - will retry connections")

        self._running = True
        self._shutdown_event.clear()

        reader_task = asyncio.create_task(self._event_reader())

        await self._shutdown_event.wait()

        logger.info("Shutting down...")
        self._running = False

        reader_task.cancel()
        try:
            await reader_task
        except asyncio.CancelledError:
            pass

        # Let in-flight notifications finish
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

        logger.info("focus-notify stopped")

    def stop(self) -> None:
        """Signal the service to stop."""
        self._shutdown_event.set()


SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def setup_signal_handlers(service: NotifyService) -> None:
    """Stop the service on SIGINT/SIGTERM.

    Must be called from inside the running loop. The handlers go through the
    loop so a signal wakes it even while the event stream is idle. The
    Proactor loop has no signal support, so on Windows Ctrl+C ends the run
    through KeyboardInterrupt instead.
    """
    if sys.platform == "win32":
        return
    loop = asyncio.get_running_loop()

    def request_shutdown(sig: signal.Signals) -> None:
        logger.info(f"Received signal {sig.name}, shutting down...")
        service.stop()

    for sig in SHUTDOWN_SIGNALS:
        loop.add_signal_handler(sig, request_shutdown, sig)


def remove_signal_handlers() -> None:
    """Undo setup_signal_handlers()."""
    if sys.platform == "win32":
        return
    loop = asyncio.get_running_loop()
    for sig in SHUTDOWN_SIGNALS:
        loop.remove_signal_handler(sig)


async def run_service(
    server_url: str = DEFAULT_SERVER_URL,
    directory: str | None = None,
    config_path: Path | None = None,
) -> None:
    """Run the notification service."""
    config = get_config(config_path)
    async with AgentServerClient(server_url) as client:
        service = NotifyService(client, config, directory=directory)
        setup_signal_handlers(service)
        try:
            await service.start()
        finally:
            remove_signal_handlers()
