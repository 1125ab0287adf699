"""Session lookup.

Sessions are fetched fresh for every event and never cached: titles change
while the agent works, and a stale parent link would misroute notifications.
"""

import logging
from dataclasses import dataclass
from typing import Any, Protocol

logger = logging.getLogger(__name__)

# How many recent sessions the last-resort scan looks through
SESSION_SCAN_LIMIT = 100


def _clean(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


@dataclass(frozen=True)
class Session:
    """Snapshot of agent session metadata."""

    id: str
    title: str | None = None
    slug: str | None = None
    parent_id: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "Session | None":
        """Build a session from a server payload, or None if it isn't one."""
        if not isinstance(data, dict):
            return None
        session_id = data.get("id")
        parent_id = data.get("parentID")
        return cls(
            id=session_id if isinstance(session_id, str) else "",
            title=data.get("title") if isinstance(data.get("title"), str) else None,
            slug=data.get("slug") if isinstance(data.get("slug"), str) else None,
            parent_id=parent_id if isinstance(parent_id, str) and parent_id else None,
        )

    @property
    def is_child(self) -> bool:
        """Child sessions belong to sub-agents spawned by another session."""
        return self.parent_id is not None

    def label(self, fallback: str) -> str:
        """Human-readable name: title, then slug, then id, then fallback."""
        return _clean(self.title) or _clean(self.slug) or _clean(self.id) or fallback


def session_label(session: Session | None, session_id: str) -> str:
    """Label for a possibly missing session."""
    if session is None:
        return session_id
    return session.label(session_id)


class SessionSource(Protocol):
    """The session queries SessionResolver needs (see AgentServerClient)."""

    async def get_session(self, session_id: str, directory: str | None = None) -> Any: ...

    async def list_sessions(self, directory: str | None = None, limit: int = 100) -> Any: ...


class SessionResolver:
    """Resolves a session id to a Session through three fallback lookups.

    1. Get by id, scoped to the working directory
    2. Get by id, unscoped
    3. List recent sessions in the working directory and scan for the id

    A failing step is logged and skipped. If every step fails the session is
    unresolved and the caller should not notify.
    """

    def __init__(self, source: SessionSource, directory: str | None = None):
        self.source = source
        self.directory = directory

    async def resolve(self, session_id: str) -> Session | None:
        session = await self._get_scoped(session_id)
        if session is None:
            session = await self._get_unscoped(session_id)
        if session is None:
            session = await self._scan_recent(session_id)
        if session is None:
            logger.debug(f"Session {session_id} could not be resolved")
        return session

    async def _get_scoped(self, session_id: str) -> Session | None:
        try:
            return Session.from_dict(await self.source.get_session(session_id, directory=self.directory))
        except Exception as e:
            logger.debug(f"Scoped lookup of {session_id} failed: {e}")
            return None

    async def _get_unscoped(self, session_id: str) -> Session | None:
        try:
            return Session.from_dict(await self.source.get_session(session_id))
        except Exception as e:
            logger.debug(f"Unscoped lookup of {session_id} failed: {e}")
            return None

    async def _scan_recent(self, session_id: str) -> Session | None:
        try:
            sessions = await self.source.list_sessions(directory=self.directory, limit=SESSION_SCAN_LIMIT)
        except Exception as e:
            logger.debug(f"Session list for {session_id} failed: {e}")
            return None

        if not isinstance(sessions, list):
            return None
        for item in sessions:
            if isinstance(item, dict) and item.get("id") == session_id:
                return Session.from_dict(item)
        return None
