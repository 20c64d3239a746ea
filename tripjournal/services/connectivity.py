"""
ตัวตรวจสอบการเชื่อมต่อเครือข่าย
ตรวจ path ไปยัง API host เป็นระยะใน background task และแจ้งผู้ฟังเฉพาะตอนสถานะเปลี่ยน
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, List, Optional
import asyncio

from tripjournal.core.config import settings
from tripjournal.core.logging import get_logger

logger = get_logger(__name__)


class ConnectivityStatus(str, Enum):
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


@dataclass(frozen=True)
class PathObservation:
    """One observation of the network path"""
    connected: bool
    metered: bool = False


StatusListener = Callable[[ConnectivityStatus], None]
Probe = Callable[[], Awaitable[PathObservation]]


class ConnectivityMonitor(ABC):
    """
    Connectivity capability consumed by the journal client

    ``connected`` starts True. Listeners only hear about changes of the
    connected flag; the metered flag is refreshed on every observation.
    """

    def __init__(self, connected: bool = True, metered: bool = False):
        self._connected = connected
        self._metered = metered
        self._listeners: List[StatusListener] = []

    def current_status(self) -> ConnectivityStatus:
        return ConnectivityStatus.CONNECTED if self._connected else ConnectivityStatus.DISCONNECTED

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def is_metered(self) -> bool:
        return self._metered

    def subscribe(self, listener: StatusListener) -> Callable[[], None]:
        """Register a status listener; returns an unsubscribe callable"""
        self._listeners.append(listener)

        def _unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _apply(self, observation: PathObservation) -> None:
        self._metered = observation.metered
        if observation.connected == self._connected:
            return
        self._connected = observation.connected
        status = self.current_status()
        logger.info(f"Connectivity changed: {status.value}")
        for listener in list(self._listeners):
            try:
                listener(status)
            except Exception as e:
                logger.error(f"Connectivity listener {listener!r} failed: {e}", exc_info=True)

    @abstractmethod
    async def check_now(self) -> ConnectivityStatus:
        """Observe the path once and return the resulting status"""
        pass


class StaticConnectivityMonitor(ConnectivityMonitor):
    """Status set by the caller (forced offline mode, tests)"""

    def set_status(self, connected: bool, metered: Optional[bool] = None) -> None:
        self._apply(PathObservation(
            connected=connected,
            metered=self._metered if metered is None else metered,
        ))

    async def check_now(self) -> ConnectivityStatus:
        return self.current_status()


def tcp_probe(
    host: Optional[str] = None,
    port: Optional[int] = None,
    timeout: Optional[float] = None,
    metered: Optional[bool] = None,
) -> Probe:
    """
    Build a probe that opens (and closes) a TCP connection to host:port.
    The metered flag cannot be observed from a socket, so it comes from settings.
    """
    host = host or settings.connectivity_probe_host
    port = port or settings.connectivity_probe_port
    timeout = timeout if timeout is not None else settings.connectivity_timeout_seconds
    metered = settings.metered_network if metered is None else metered

    async def _probe() -> PathObservation:
        try:
            _, writer = await asyncio.wait_for(asyncio.open_connection(host, port), timeout=timeout)
        except (OSError, asyncio.TimeoutError) as e:
            logger.debug(f"Probe {host}:{port} failed: {e}")
            return PathObservation(connected=False, metered=metered)
        writer.close()
        try:
            await writer.wait_closed()
        except OSError:
            pass
        return PathObservation(connected=True, metered=metered)

    return _probe


class ProbeConnectivityMonitor(ConnectivityMonitor):
    """
    Polls a probe in a background asyncio task

    Usage:
        async with ProbeConnectivityMonitor() as monitor:
            client = JournalClient(connectivity=monitor)
    """

    def __init__(self, probe: Optional[Probe] = None, interval_seconds: Optional[float] = None):
        super().__init__()
        self.probe: Probe = probe or tcp_probe()
        self.interval_seconds = interval_seconds or settings.connectivity_interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def check_now(self) -> ConnectivityStatus:
        try:
            observation = await self.probe()
        except Exception as e:
            logger.warning(f"Connectivity probe raised, treating path as down: {e}")
            observation = PathObservation(connected=False, metered=self._metered)
        self._apply(observation)
        return self.current_status()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            await self.check_now()

    async def start(self) -> None:
        """Take a first observation, then keep polling in the background"""
        if self.running:
            return
        await self.check_now()
        self._task = asyncio.create_task(self._run())
        logger.debug(f"Connectivity monitor started (interval={self.interval_seconds}s)")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.debug("Connectivity monitor stopped")

    async def __aenter__(self) -> 'ProbeConnectivityMonitor':
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()
