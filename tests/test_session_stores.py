"""
Tests for the per-sender channel session stores.
"""

from __future__ import annotations

import json
import tempfile
from pathlib import Path

from agendabot.domain.entities.channel_session import ChannelSession
from agendabot.infrastructure.store.json_store import JsonSessionStore
from agendabot.infrastructure.store.memory_store import MemorySessionStore

SENDER = "whatsapp:+5561999999999"


def test_memory_store_round_trip():
    store = MemorySessionStore()
    session = ChannelSession(session_id="abc", booking_status="AWAITING_EMAIL", updated_at=10.0)

    assert store.get(SENDER) is None
    store.put(SENDER, session)
    assert store.get(SENDER) == session

    store.delete(SENDER)
    assert store.get(SENDER) is None
    store.delete(SENDER)


def test_json_store_persists_across_instances():
    """Sessions written by one store instance are visible to a new one on the same directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        session = ChannelSession(session_id="abc", booking_status="AWAITING_PHONE", updated_at=12.5)
        JsonSessionStore(data_dir=tmpdir).put(SENDER, session)

        assert JsonSessionStore(data_dir=tmpdir).get(SENDER) == session


def test_json_store_file_names_are_safe():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonSessionStore(data_dir=tmpdir)
        store.put(SENDER, ChannelSession(session_id="abc"))

        files = list(Path(tmpdir).glob("*.json"))
        assert len(files) == 1
        assert ":" not in files[0].name and "+" not in files[0].name
        data = json.loads(files[0].read_text(encoding="utf-8"))
        assert data["key"] == SENDER
        assert data["session_id"] == "abc"


def test_json_store_last_write_wins():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonSessionStore(data_dir=tmpdir)
        store.put(SENDER, ChannelSession(session_id="abc", booking_status="AWAITING_NAME"))
        store.put(SENDER, ChannelSession(session_id="abc", booking_status=None))

        assert store.get(SENDER) == ChannelSession(session_id="abc")


def test_json_store_ignores_corrupted_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonSessionStore(data_dir=tmpdir)
        store.put(SENDER, ChannelSession(session_id="abc"))
        next(Path(tmpdir).glob("*.json")).write_text("{not json", encoding="utf-8")

        assert store.get(SENDER) is None


def test_json_store_delete():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonSessionStore(data_dir=tmpdir)
        store.put(SENDER, ChannelSession(session_id="abc"))
        store.delete(SENDER)

        assert store.get(SENDER) is None
        assert list(Path(tmpdir).glob("*.json")) == []
