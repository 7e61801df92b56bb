"""
Viewer Connection Registry

Tracks connected viewer sessions. Each session gets one immediate snapshot
on connect and then its own repeating broadcast thread, stopped through a
per-session event on disconnect or on a transport failure. Sessions are
independent: one viewer's failure never touches another's loop.

A reconnecting viewer is a brand-new session; nothing is resumed.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from ..store import StoreError
from .broadcaster import SnapshotBroadcaster

logger = logging.getLogger(__name__)

SendFn = Callable[[str, Dict[str, Any]], None]


class TransportError(Exception):
    """Raised by a send function when the viewer channel is broken."""


class ViewerSession:
    """State for one connected viewer."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        self.connected_at = datetime.now(timezone.utc)
        self.messages_sent = 0
        self.thread: Optional[threading.Thread] = None

        self._stop = threading.Event()
        self._send_lock = threading.Lock()
        self._last_timestamp: Optional[datetime] = None

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def stop(self) -> None:
        self._stop.set()

    def wait(self, interval: float) -> bool:
        """Sleep for ``interval``; True if the session was stopped meanwhile."""
        return self._stop.wait(interval)

    def next_timestamp(self) -> str:
        """Wall-clock timestamp, bumped so it always exceeds the previous one."""
        now = datetime.now(timezone.utc)
        if self._last_timestamp is not None and now <= self._last_timestamp:
            now = self._last_timestamp + timedelta(microseconds=1)
        self._last_timestamp = now
        return now.isoformat()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "connected_at": self.connected_at.isoformat(),
            "messages_sent": self.messages_sent,
            "stopped": self.stopped,
        }


class ConnectionRegistry:
    """
    Fan-out of snapshots to connected viewers.

    ``send(session_id, message)`` delivers one message and raises
    ``TransportError`` if the channel is gone.
    """

    def __init__(self, broadcaster: SnapshotBroadcaster, send: SendFn, interval: float = 2.0):
        self.broadcaster = broadcaster
        self.send = send
        self.interval = interval

        self._sessions: Dict[str, ViewerSession] = {}
        self._lock = threading.Lock()

    def connect(self, session_id: str) -> ViewerSession:
        """Register a viewer, push one snapshot now and start its loop."""
        session = ViewerSession(session_id)
        with self._lock:
            previous = self._sessions.pop(session_id, None)
            self._sessions[session_id] = session
        if previous is not None:
            previous.stop()

        logger.info(f"Viewer connected: {session_id}")
        try:
            self.push(session)
        except Exception:
            self._drop(session)
            raise

        if not session.stopped:
            session.thread = threading.Thread(
                target=self._run, args=(session,), name=f"broadcast-{session_id}", daemon=True
            )
            session.thread.start()
        return session

    def disconnect(self, session_id: str) -> bool:
        """Stop and forget a viewer's loop. Returns False if it was unknown."""
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.stop()
        logger.info(f"Viewer disconnected: {session_id} ({session.messages_sent} snapshots sent)")
        return True

    def push(self, session: ViewerSession) -> bool:
        """Build and deliver one snapshot. Returns True if it was sent."""
        with session._send_lock:
            if session.stopped:
                return False

            try:
                message = self.broadcaster.build_snapshot(session.next_timestamp())
            except StoreError as e:
                logger.warning(f"Snapshot for {session.session_id} skipped, store read failed: {e}")
                return False

            try:
                self.send(session.session_id, message)
            except TransportError as e:
                logger.warning(f"Send to {session.session_id} failed, closing session: {e}")
                self._drop(session)
                return False

            session.messages_sent += 1
            return True

    def _drop(self, session: ViewerSession) -> None:
        session.stop()
        with self._lock:
            if self._sessions.get(session.session_id) is session:
                del self._sessions[session.session_id]

    def get_session(self, session_id: str) -> Optional[ViewerSession]:
        with self._lock:
            return self._sessions.get(session_id)

    def active_sessions(self) -> List[str]:
        with self._lock:
            return list(self._sessions)

    def shutdown(self) -> None:
        """Stop every session loop."""
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            session.stop()
        logger.info(f"Connection registry shut down, {len(sessions)} sessions stopped")

    def _run(self, session: ViewerSession) -> None:
        while not session.wait(self.interval):
            try:
                self.push(session)
            except Exception as e:
                logger.exception(f"Error sending snapshot to {session.session_id}: {e}")
