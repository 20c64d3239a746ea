"""
Tests for credential storage, the session context, and the trip snapshot cache
"""

import os
import stat
import sys

import pytest

from tripjournal.core.exceptions import StorageException
from tripjournal.models import Token, Trip
from tripjournal.services.session import JournalSession
from tripjournal.storage import (
    CredentialStorage,
    JsonFileCredentialStorage,
    JsonFileTripCache,
    MemoryCredentialStorage,
    MemoryTripCache,
)

from conftest import trip_payload


class BrokenCredentialStorage(CredentialStorage):
    """Storage whose every operation fails"""

    async def save(self, token):
        raise StorageException("disk full")

    async def load(self):
        raise RuntimeError("keychain locked")

    async def delete(self):
        raise StorageException("read-only")


class TestJsonFileCredentialStorage:

    async def test_save_then_load(self, tmp_path):
        storage = JsonFileCredentialStorage(tmp_path / "auth" / "token.json")

        await storage.save(Token(access_token="abc", token_type="bearer"))

        assert await storage.load() == Token(access_token="abc", token_type="bearer")

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    async def test_token_file_is_private(self, tmp_path):
        storage = JsonFileCredentialStorage(tmp_path / "token.json")

        await storage.save(Token(access_token="abc"))

        mode = stat.S_IMODE(os.stat(tmp_path / "token.json").st_mode)
        assert mode == 0o600

    async def test_delete_then_load_reports_nothing(self, tmp_path):
        storage = JsonFileCredentialStorage(tmp_path / "token.json")
        await storage.save(Token(access_token="abc"))

        await storage.delete()

        assert await storage.load() is None
        assert not (tmp_path / "token.json").exists()

    async def test_delete_without_token_is_noop(self, tmp_path):
        await JsonFileCredentialStorage(tmp_path / "token.json").delete()

    async def test_corrupt_file_loads_as_no_credential(self, tmp_path):
        path = tmp_path / "token.json"
        path.write_text("{not json", encoding="utf-8")

        assert await JsonFileCredentialStorage(path).load() is None

    async def test_wrong_shape_loads_as_no_credential(self, tmp_path):
        path = tmp_path / "token.json"
        path.write_text('{"token": 1}', encoding="utf-8")

        assert await JsonFileCredentialStorage(path).load() is None


class TestJournalSession:

    async def test_set_token_persists(self):
        storage = MemoryCredentialStorage()
        session = JournalSession(storage)

        await session.set_token(Token(access_token="abc"))

        assert session.is_authenticated
        assert session.access_token == "abc"
        assert (await storage.load()).access_token == "abc"

    async def test_clear_erases_persisted_token(self, tmp_path):
        storage = JsonFileCredentialStorage(tmp_path / "token.json")
        session = JournalSession(storage)
        await session.set_token(Token(access_token="abc"))

        await session.clear()

        assert not session.is_authenticated
        assert await storage.load() is None
        # a fresh process sees no credential either
        restored = JournalSession(JsonFileCredentialStorage(tmp_path / "token.json"))
        assert await restored.restore() is None
        assert not restored.is_authenticated

    async def test_restore_loads_persisted_token(self, tmp_path):
        path = tmp_path / "token.json"
        await JsonFileCredentialStorage(path).save(Token(access_token="persisted"))

        session = JournalSession(JsonFileCredentialStorage(path))
        await session.restore()

        assert session.access_token == "persisted"

    async def test_restore_failure_means_logged_out(self):
        session = JournalSession(BrokenCredentialStorage())

        assert await session.restore() is None
        assert not session.is_authenticated

    async def test_save_failure_keeps_token_in_memory(self):
        session = JournalSession(BrokenCredentialStorage())

        await session.set_token(Token(access_token="abc"))

        assert session.access_token == "abc"

    async def test_delete_failure_propagates(self):
        session = JournalSession(BrokenCredentialStorage())

        with pytest.raises(StorageException):
            await session.clear()
        assert not session.is_authenticated

    async def test_listeners_hear_only_changes(self):
        session = JournalSession()
        seen = []
        unsubscribe = session.subscribe(seen.append)

        await session.set_token(Token(access_token="a"))
        await session.set_token(Token(access_token="b"))
        await session.clear()
        unsubscribe()
        await session.set_token(Token(access_token="c"))

        assert seen == [True, False]


class TestTripCache:

    async def test_file_cache_round_trip(self, tmp_path):
        cache = JsonFileTripCache(tmp_path / "trips.json")
        trips = [Trip.model_validate(trip_payload(1)), Trip.model_validate(trip_payload(2, "Nara"))]

        await cache.save_trips(trips)

        assert await JsonFileTripCache(tmp_path / "trips.json").load_trips() == trips

    async def test_save_overwrites_previous_snapshot(self, tmp_path):
        cache = JsonFileTripCache(tmp_path / "trips.json")
        await cache.save_trips([Trip.model_validate(trip_payload(1))])

        await cache.save_trips([Trip.model_validate(trip_payload(2, "Nara"))])

        assert [t.id for t in await cache.load_trips()] == [2]

    async def test_missing_snapshot_is_empty(self, tmp_path):
        assert await JsonFileTripCache(tmp_path / "none.json").load_trips() == []

    async def test_corrupt_snapshot_is_empty(self, tmp_path):
        path = tmp_path / "trips.json"
        path.write_text("[{]", encoding="utf-8")

        assert await JsonFileTripCache(path).load_trips() == []

    async def test_clear(self, tmp_path):
        cache = JsonFileTripCache(tmp_path / "trips.json")
        await cache.save_trips([Trip.model_validate(trip_payload())])

        await cache.clear()

        assert await cache.load_trips() == []

    async def test_memory_cache_returns_copies(self):
        cache = MemoryTripCache()
        trips = [Trip.model_validate(trip_payload())]
        await cache.save_trips(trips)

        loaded = await cache.load_trips()
        loaded.clear()

        assert len(await cache.load_trips()) == 1
