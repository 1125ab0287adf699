"""CLI entry point for focus-notify."""

import asyncio
import json
import logging
import os
import sys
from pathlib import Path

import click

from focus_notify import __version__
from focus_notify.client import DEFAULT_SERVER_URL


def setup_logging(verbose: bool = False, log_file: Path | None = None) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO

    # stderr: stdout carries the terminal bell
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )

    # Quiet down noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


@click.group()
@click.version_option(version=__version__)
def cli():
    """focus-notify - focus-aware notifications for coding agents."""
    pass


@cli.command()
@click.option(
    "--server", "-s",
    default=DEFAULT_SERVER_URL,
    help=f"Agent server URL (default: {DEFAULT_SERVER_URL})",
)
@click.option(
    "--directory", "-d",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Working directory sessions are scoped to (default: current directory)",
)
@click.option(
    "--config", "-c",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to config JSON (default: ~/.config/focus-notify/config.json)",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write logs to this file",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose logging",
)
def run(server: str, directory: Path | None, config: Path | None, log_file: Path | None, verbose: bool):
    """Follow the agent's events and notify when it needs you."""
    setup_logging(verbose=verbose, log_file=log_file)

    from focus_notify.service import run_service

    directory = (directory or Path.cwd()).resolve()

    click.echo("Starting focus-notify...", err=True)
    click.echo(f"Connecting to: {server}", err=True)
    click.echo("Press Ctrl+C to stop", err=True)

    try:
        asyncio.run(run_service(server_url=server, directory=str(directory), config_path=config))
    except KeyboardInterrupt:
        click.echo("\nShutdown complete", err=True)


@cli.command()
@click.option(
    "--title", "-t",
    default="Test Notification",
    help="Notification title",
)
@click.option(
    "--message", "-m",
    default="This is a test notification from focus-notify",
    help="Notification body",
)
@click.option(
    "--variant",
    type=click.Choice(["info", "warning", "error"]),
    default="info",
    help="Toast variant",
)
@click.option(
    "--server", "-s",
    default=None,
    help="Agent server URL; also show the test as a TUI toast",
)
def test(title: str, message: str, variant: str, server: str | None):
    """Send a test notification to verify setup."""
    from focus_notify.client import AgentServerClient
    from focus_notify.dispatcher import NotificationDispatcher
    from focus_notify.messages import Channel, NotificationRequest, Variant
    from focus_notify.pane import KittyPaneMatcher

    channels = {Channel.DESKTOP_BANNER}
    if KittyPaneMatcher().is_applicable:
        channels.add(Channel.TERMINAL_BELL)
    if server:
        channels.add(Channel.TOAST)

    request = NotificationRequest(
        title=title,
        message=message,
        variant=Variant(variant),
        channels=frozenset(channels),
    )

    async def send_test():
        client = AgentServerClient(server) if server else None
        try:
            dispatcher = NotificationDispatcher(toast_surface=client, directory=str(Path.cwd()))
            return await dispatcher.dispatch(request)
        finally:
            if client:
                await client.aclose()

    results = asyncio.run(send_test())

    for channel, ok in sorted(results.items(), key=lambda item: item[0].value):
        click.echo(f"{channel.value}: {'✅ sent' if ok else '❌ failed'}", err=True)
    if not all(results.values()):
        sys.exit(1)


@cli.command()
@click.option(
    "--config", "-c",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to config JSON",
)
def config(config: Path | None):
    """Show the effective configuration."""
    from focus_notify.config import get_default_config_path, load_config

    path = config or get_default_config_path()
    effective = load_config(path)

    click.echo(f"Config file: {path} {'(found)' if path.exists() else '(not found, using defaults)'}")
    click.echo(json.dumps(effective.to_dict(), indent=2))


@cli.command()
@click.option(
    "--config", "-c",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to config JSON",
)
def check(config: Path | None):
    """Check focus detection and notification support on this system."""
    from focus_notify.config import load_config
    from focus_notify.desktop import DesktopNotifier
    from focus_notify.focus import FocusDetector
    from focus_notify.pane import KittyPaneMatcher

    click.echo("\n🔍 System Check")
    click.echo("=" * 50)
    click.echo(f"Platform: {sys.platform}")

    detector = FocusDetector()
    strategy = detector.select_strategy()
    if strategy is None:
        click.echo("Focus detection: ⚠️ unsupported environment (always notifies)")
    else:
        focused = asyncio.run(detector.is_terminal_focused())
        click.echo(f"Focus detection: ✅ {strategy.name}")
        click.echo(f"Terminal focused: {'yes' if focused else 'no'}")

    matcher = KittyPaneMatcher()
    if matcher.is_applicable:
        pane = asyncio.run(matcher.is_current_pane_focused())
        click.echo(f"kitty window {matcher.pane_id}: {pane.value}")
    else:
        click.echo("kitty: not running inside kitty (no pane check, no bell)")

    desktop = DesktopNotifier()
    click.echo(f"Desktop banners: {'✅ Ready' if desktop.is_available else '⚠️ Not supported (logged only)'}")

    effective = load_config(config)
    click.echo("\nConfiguration:")
    for key, value in effective.to_dict().items():
        click.echo(f"  {key}: {value}")

    if os.environ.get("TMUX"):
        click.echo("\n⚠️ Running inside tmux: focus is detected per terminal window, not per tmux pane")


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
