"""
Session Store (v2.0.0)
Keeps finished recommendation responses by request id.

Two backends:
- InMemorySessionStore: process-local map, oldest entries dropped past a cap
- DiskSessionStore: JSON file per session with a TTL
"""
import json
import time
import logging
import threading
from collections import OrderedDict
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from stylist_service.config import get_settings

logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    def get(self, request_id: str) -> Optional[Dict[str, Any]]:
        ...

    def set(self, request_id: str, response: Dict[str, Any]) -> None:
        ...


class InMemorySessionStore:
    """Append-only map with an optional entry cap."""

    def __init__(self, max_entries: Optional[int] = None):
        self.max_entries = max_entries
        self._entries: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, request_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            return self._entries.get(request_id)

    def set(self, request_id: str, response: Dict[str, Any]) -> None:
        with self._lock:
            self._entries[request_id] = response
            self._entries.move_to_end(request_id)
            if self.max_entries:
                while len(self._entries) > self.max_entries:
                    dropped, _ = self._entries.popitem(last=False)
                    logger.debug(f"Session evicted: {dropped}")

    def __len__(self) -> int:
        return len(self._entries)

    def get_stats(self) -> Dict[str, Any]:
        return {"backend": "memory", "entries": len(self), "max_entries": self.max_entries}


class DiskSessionStore:
    """Disk-based session store using JSON files."""

    def __init__(self, session_dir: str = None, ttl_minutes: int = 1440):
        """
        Args:
            session_dir: Directory for session files
            ttl_minutes: Time-to-live in minutes (default: 24 hours)
        """
        if session_dir is None:
            module_dir = Path(__file__).parent.parent
            session_dir = module_dir / "data" / "sessions"

        self.session_dir = Path(session_dir)
        self.ttl_seconds = ttl_minutes * 60
        self.session_dir.mkdir(parents=True, exist_ok=True)

    def _get_path(self, request_id: str) -> Path:
        # Request ids are uuid4 hex; anything else is not a file name we write
        safe_id = "".join(c for c in request_id if c.isalnum())
        return self.session_dir / f"{safe_id}.json"

    def get(self, request_id: str) -> Optional[Dict[str, Any]]:
        """Stored response, or None if missing or expired."""
        path = self._get_path(request_id)

        if not path.exists():
            return None

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Session read error: {e}")
            return None

        if time.time() - data.get("_stored_at", 0) > self.ttl_seconds:
            logger.info(f"Session expired: {request_id}")
            self._delete(path)
            return None

        return data.get("response")

    def set(self, request_id: str, response: Dict[str, Any]) -> None:
        path = self._get_path(request_id)
        data = {
            "_stored_at": time.time(),
            "_request_id": request_id,
            "response": response,
        }

        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            logger.info(f"Session saved: {request_id}")
        except OSError as e:
            logger.warning(f"Session write error: {e}")

    def _delete(self, path: Path):
        try:
            if path.exists():
                path.unlink()
        except OSError as e:
            logger.warning(f"Session delete error: {e}")

    def clear_expired(self) -> int:
        """
        Remove all expired session files.

        Returns:
            Number of entries removed
        """
        removed = 0
        for session_file in self.session_dir.glob("*.json"):
            try:
                with open(session_file, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except (OSError, ValueError) as e:
                logger.warning(f"Skipping unreadable session {session_file.name}: {e}")
                continue

            if time.time() - data.get("_stored_at", 0) > self.ttl_seconds:
                self._delete(session_file)
                removed += 1

        if removed > 0:
            logger.info(f"Removed {removed} expired sessions")

        return removed

    def get_stats(self) -> Dict[str, Any]:
        files = list(self.session_dir.glob("*.json"))
        return {
            "backend": "disk",
            "entries": len(files),
            "size_bytes": sum(f.stat().st_size for f in files),
            "ttl_minutes": self.ttl_seconds // 60,
        }


def create_session_store(settings=None):
    """Disk store when a session directory is configured, in-memory otherwise."""
    settings = settings or get_settings()
    if settings.session_dir:
        return DiskSessionStore(settings.session_dir, ttl_minutes=settings.session_ttl_minutes)
    return InMemorySessionStore(max_entries=settings.session_max_entries)
