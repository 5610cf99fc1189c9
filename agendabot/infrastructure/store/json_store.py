from __future__ import annotations

import hashlib
import json
import logging
import threading
from pathlib import Path
from typing import Any

from agendabot.application.ports.session_store import SessionStorePort
from agendabot.domain.entities.channel_session import ChannelSession


class JsonSessionStore(SessionStorePort):
    """Keeps one JSON file per sender so sessions survive restarts."""

    def __init__(self, data_dir: str = "./data/sessions") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._locks: dict[str, threading.Lock] = {}
        self._lock_lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def _get_lock(self, key: str) -> threading.Lock:
        with self._lock_lock:
            if key not in self._locks:
                self._locks[key] = threading.Lock()
            return self._locks[key]

    def _get_file_path(self, key: str) -> Path:
        # Sender ids look like "whatsapp:+5561..."; hash them into safe file names.
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self._data_dir / f"{digest}.json"

    def get(self, key: str) -> ChannelSession | None:
        with self._get_lock(key):
            file_path = self._get_file_path(key)
            if not file_path.exists():
                return None
            try:
                with open(file_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except (json.JSONDecodeError, OSError) as e:
                self._logger.warning("Discarding unreadable session file", extra={"error": str(e)})
                return None
            return _deserialize(data)

    def put(self, key: str, session: ChannelSession) -> None:
        with self._get_lock(key):
            file_path = self._get_file_path(key)
            temp_path = file_path.with_suffix(".json.tmp")
            data = _serialize(session)
            data["key"] = key
            try:
                with open(temp_path, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                temp_path.replace(file_path)
            except OSError:
                if temp_path.exists():
                    temp_path.unlink()
                raise

    def delete(self, key: str) -> None:
        with self._get_lock(key):
            file_path = self._get_file_path(key)
            if file_path.exists():
                file_path.unlink()


def _serialize(session: ChannelSession) -> dict[str, Any]:
    return {
        "session_id": session.session_id,
        "booking_status": session.booking_status,
        "updated_at": session.updated_at,
    }


def _deserialize(data: dict[str, Any]) -> ChannelSession | None:
    session_id = data.get("session_id")
    if not session_id:
        return None
    return ChannelSession(
        session_id=str(session_id),
        booking_status=data.get("booking_status") or None,
        updated_at=data.get("updated_at"),
    )
