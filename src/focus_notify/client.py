"""HTTP client for the agent server.

Covers the small slice of the server API the notifier needs:
- Session lookup (by id, and listing recent sessions)
- TUI toast display
- The server-sent event stream that drives notifications
"""

import json
import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_SERVER_URL = "http://localhost:4096"


class AgentServerClient:
    """Async client for the agent server.

    Query methods raise httpx errors on transport or HTTP failures; callers
    decide whether a failure matters.
    """

    def __init__(
        self,
        server_url: str = DEFAULT_SERVER_URL,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize the client.

        Args:
            server_url: Base URL of the agent server
            http_client: Pre-built httpx client (mainly for tests)
        """
        self.server_url = server_url.rstrip("/")
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(base_url=self.server_url)

    async def __aenter__(self) -> "AgentServerClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()

    def _url(self, path: str) -> str:
        return f"{self.server_url}{path}"

    async def get_session(self, session_id: str, directory: str | None = None) -> Any:
        """Fetch one session by id, optionally scoped to a working directory."""
        params = {"directory": directory} if directory else None
        response = await self.http_client.get(self._url(f"/session/{session_id}"), params=params)
        response.raise_for_status()
        return response.json()

    async def list_sessions(self, directory: str | None = None, limit: int = 100) -> Any:
        """List recent sessions."""
        params: dict[str, Any] = {"limit": limit}
        if directory:
            params["directory"] = directory
        response = await self.http_client.get(self._url("/session"), params=params)
        response.raise_for_status()
        return response.json()

    async def show_toast(
        self,
        title: str,
        message: str,
        variant: str = "info",
        directory: str | None = None,
    ) -> None:
        """Render a toast in the agent's terminal UI."""
        params = {"directory": directory} if directory else None
        response = await self.http_client.post(
            self._url("/tui/show-toast"),
            params=params,
            json={"title": title, "message": message, "variant": variant},
        )
        response.raise_for_status()

    async def stream_events(self) -> AsyncIterator[dict[str, Any]]:
        """Yield events from the server-sent event stream.

        Each ``data:`` line carries one JSON event. Lines that do not parse
        are skipped. The stream ends when the server closes the connection.
        """
        async with self.http_client.stream("GET", self._url("/event"), timeout=None) as response:
            response.raise_for_status()
            async for line in response.aiter_lines():
                if not line.startswith("data:"):
                    continue
                payload = line[len("data:"):].strip()
                if not payload:
                    continue
                try:
                    yield json.loads(payload)
                except json.JSONDecodeError:
                    logger.warning(f"Invalid JSON from server: {payload[:100]}")

    async def check_server(self) -> dict[str, Any]:
        """Check server connectivity.

        Returns:
            Status dict with "status" of "healthy", "unreachable" or "error"
        """
        try:
            response = await self.http_client.get(self._url("/session"), params={"limit": 1}, timeout=5)
            response.raise_for_status()
            return {"status": "healthy"}
        except httpx.ConnectError:
            return {"status": "unreachable", "error": f"Cannot connect to {self.server_url}"}
        except Exception as e:
            return {"status": "error", "error": str(e)}
