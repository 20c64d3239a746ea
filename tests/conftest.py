"""
Shared fixtures: sample API payloads and a JournalClient wired to httpx.MockTransport
"""

import json
from typing import Callable, List

import httpx
import pytest

from tripjournal.services.connectivity import StaticConnectivityMonitor
from tripjournal.services.journal_client import JournalClient
from tripjournal.services.session import JournalSession
from tripjournal.storage.credential_store import MemoryCredentialStorage
from tripjournal.storage.trip_cache import MemoryTripCache

BASE_URL = "http://journal.test"


def trip_payload(trip_id: int = 1, name: str = "Kyoto") -> dict:
    return {
        "id": trip_id,
        "name": name,
        "start_date": "2024-03-01T08:00:00Z",
        "end_date": "2024-03-07T20:00:00Z",
        "events": [
            {
                "id": 10 * trip_id,
                "trip_id": trip_id,
                "name": "Fushimi Inari",
                "note": "Go early",
                "date": "2024-03-02T06:30:00Z",
                "location": {"latitude": 34.9671, "longitude": 135.7727, "address": "Fushimi"},
                "transition_from_previous": "Train",
                "medias": [],
            }
        ],
    }


class RecordingHandler:
    """MockTransport handler that records requests and replays canned responses"""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]):
        self.responder = responder
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)


def json_response(status: int, payload) -> httpx.Response:
    return httpx.Response(status, content=json.dumps(payload).encode("utf-8"),
                          headers={"Content-Type": "application/json"})


@pytest.fixture
def credential_storage():
    return MemoryCredentialStorage()


@pytest.fixture
def session(credential_storage):
    return JournalSession(credential_storage)


@pytest.fixture
def trip_cache():
    return MemoryTripCache()


@pytest.fixture
def connectivity():
    return StaticConnectivityMonitor()


@pytest.fixture
async def make_client(session, trip_cache, connectivity):
    """Factory: make_client(responder) -> (client, handler)"""
    clients = []

    def _make(responder: Callable[[httpx.Request], httpx.Response]):
        handler = RecordingHandler(responder)
        client = JournalClient(
            base_url=BASE_URL,
            session=session,
            trip_cache=trip_cache,
            connectivity=connectivity,
            transport=httpx.MockTransport(handler),
        )
        clients.append(client)
        return client, handler

    yield _make

    for client in clients:
        await client.aclose()
