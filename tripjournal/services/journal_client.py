"""
Trip Journal API client
One configurable client for auth, trip, event and media operations (httpx.AsyncClient)
"""

from __future__ import annotations
from typing import Any, List, Optional
import functools

import httpx

from tripjournal.models.auth import AuthRequest, Token
from tripjournal.models.trip import (
    Event,
    EventCreate,
    EventUpdate,
    Media,
    MediaCreate,
    Trip,
    TripCreate,
    TripUpdate,
)
from tripjournal.services.connectivity import ConnectivityMonitor, StaticConnectivityMonitor
from tripjournal.services.endpoints import EndpointResolver, Operation
from tripjournal.services.request_builder import BodyEncoding, RequestBuilder
from tripjournal.services.response_decoder import decode_response
from tripjournal.services.session import JournalSession
from tripjournal.storage.interface import TripCacheStorage
from tripjournal.storage.trip_cache import MemoryTripCache
from tripjournal.core.config import settings
from tripjournal.core.exceptions import JournalServiceError, NetworkError, NotFoundError, StorageException
from tripjournal.core.logging import get_logger, logging_context, set_logging_context

logger = get_logger(__name__)


def _operation(func):
    """Tag log records emitted during the call with the operation name"""

    @functools.wraps(func)
    async def wrapper(self, *args, **kwargs):
        with logging_context(operation=func.__name__):
            return await func(self, *args, **kwargs)

    return wrapper


class JournalClient:
    """
    Trip Journal REST client

    Args:
        base_url: API host (defaults to settings.api_base_url)
        session: Session context holding the token (defaults to an in-memory session)
        trip_cache: Snapshot used when trip listing fails or the device is offline
        connectivity: Connectivity capability gating the trip-list fallback
        login_encoding: Body encoding of /token (FORM for OAuth2 password flow servers)
        timeout: Request timeout in seconds
        transport: Optional httpx transport (e.g. httpx.MockTransport)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[JournalSession] = None,
        trip_cache: Optional[TripCacheStorage] = None,
        connectivity: Optional[ConnectivityMonitor] = None,
        *,
        login_encoding: BodyEncoding = BodyEncoding.FORM,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.resolver = EndpointResolver(base_url)
        self.session = session or JournalSession()
        self.trip_cache: TripCacheStorage = trip_cache or MemoryTripCache()
        self.connectivity: ConnectivityMonitor = connectivity or StaticConnectivityMonitor()
        self.login_encoding = login_encoding
        self.builder = RequestBuilder(self.resolver, self.session)
        self._http = httpx.AsyncClient(
            timeout=timeout or settings.request_timeout_seconds,
            transport=transport,
        )
        logger.debug(f"JournalClient initialized for {self.resolver.base_url}")

    async def __aenter__(self) -> 'JournalClient':
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @property
    def is_authenticated(self) -> bool:
        return self.session.is_authenticated

    async def _perform(self, request: httpx.Request, expected: Any = None) -> Any:
        try:
            response = await self._http.send(request)
        except httpx.RequestError as e:
            logger.warning(f"{request.method} {request.url} failed: {e!r}")
            raise NetworkError(f"Could not reach {request.url.host}: {e}") from e
        logger.debug(f"{request.method} {request.url} -> {response.status_code}")
        return decode_response(response, expected)

    # =============================================================================
    # Auth
    # =============================================================================

    @_operation
    async def register(self, username: str, password: str) -> Token:
        """Create an account; the returned token becomes the session token"""
        body = AuthRequest(username=username, password=password)
        set_logging_context(username=body.username)
        request = self.builder.build("POST", Operation.REGISTER, body=body)
        token: Token = await self._perform(request, Token)
        await self.session.set_token(token)
        logger.info("Registered and logged in")
        return token

    @_operation
    async def log_in(self, username: str, password: str) -> Token:
        """Exchange credentials for a token; the token becomes the session token"""
        auth = AuthRequest(username=username, password=password)
        set_logging_context(username=auth.username)
        body = auth.to_form() if self.login_encoding == BodyEncoding.FORM else auth
        request = self.builder.build(
            "POST",
            Operation.LOGIN,
            body=body,
            encoding=self.login_encoding,
            authorize=False,
        )
        token: Token = await self._perform(request, Token)
        await self.session.set_token(token)
        logger.info("Logged in")
        return token

    @_operation
    async def log_out(self) -> None:
        await self.session.clear()
        logger.info("Logged out")

    # =============================================================================
    # Trips
    # =============================================================================

    @_operation
    async def create_trip(self, trip: TripCreate) -> Trip:
        request = self.builder.build("POST", Operation.TRIPS, body=trip)
        return await self._perform(request, Trip)

    @_operation
    async def get_trips(self) -> List[Trip]:
        """
        List trips with offline fallback

        - Offline: the cached snapshot is returned without any network I/O
        - Online: a successful fetch overwrites the snapshot and is returned
        - Any API/network failure: the cached snapshot is returned (may be empty)
        """
        if not self.connectivity.is_connected:
            logger.info("Offline: loading trips from cache")
            return await self.trip_cache.load_trips()

        request = self.builder.build("GET", Operation.TRIPS)
        try:
            trips: List[Trip] = await self._perform(request, List[Trip])
        except JournalServiceError as e:
            logger.warning(f"Fetching trips failed ({type(e).__name__}: {e}), loading from cache")
            return await self.trip_cache.load_trips()

        try:
            await self.trip_cache.save_trips(trips)
        except StorageException as e:
            logger.warning(f"Trip snapshot not updated: {e}")
        return trips

    @_operation
    async def get_trip(self, trip_id: int) -> Trip:
        """
        Find a trip in the (possibly cached) trip list

        Raises:
            NotFoundError: If no listed trip has this id
        """
        trips = await self.get_trips()
        for trip in trips:
            if trip.id == trip_id:
                return trip
        raise NotFoundError("Trip", trip_id)

    @_operation
    async def update_trip(self, trip_id: int, trip: TripUpdate) -> Trip:
        request = self.builder.build("PUT", Operation.TRIP, resource_id=trip_id, body=trip)
        return await self._perform(request, Trip)

    @_operation
    async def delete_trip(self, trip_id: int) -> None:
        request = self.builder.build("DELETE", Operation.TRIP, resource_id=trip_id)
        await self._perform(request)

    # =============================================================================
    # Events
    # =============================================================================

    @_operation
    async def create_event(self, event: EventCreate) -> Event:
        request = self.builder.build("POST", Operation.EVENTS, body=event)
        return await self._perform(request, Event)

    @_operation
    async def update_event(self, event_id: int, event: EventUpdate) -> Event:
        request = self.builder.build("PUT", Operation.EVENT, resource_id=event_id, body=event)
        return await self._perform(request, Event)

    @_operation
    async def delete_event(self, event_id: int) -> None:
        request = self.builder.build("DELETE", Operation.EVENT, resource_id=event_id)
        await self._perform(request)

    # =============================================================================
    # Media
    # =============================================================================

    @_operation
    async def create_media(self, media: MediaCreate) -> Media:
        request = self.builder.build("POST", Operation.MEDIA, body=media)
        return await self._perform(request, Media)

    @_operation
    async def delete_media(self, media_id: int) -> None:
        request = self.builder.build("DELETE", Operation.MEDIA_ITEM, resource_id=media_id)
        await self._perform(request)
