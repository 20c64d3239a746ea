"""
Tests for the connectivity monitors (edge-triggered updates, metered flag, polling task)
"""

import asyncio

from tripjournal.services.connectivity import (
    ConnectivityStatus,
    PathObservation,
    ProbeConnectivityMonitor,
    StaticConnectivityMonitor,
    tcp_probe,
)


class ScriptedProbe:
    """Probe returning a fixed sequence of observations (last one repeats)"""

    def __init__(self, *observations):
        self.observations = list(observations)
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if len(self.observations) > 1:
            return self.observations.pop(0)
        return self.observations[0]


def test_static_monitor_starts_connected():
    monitor = StaticConnectivityMonitor()

    assert monitor.current_status() == ConnectivityStatus.CONNECTED
    assert monitor.is_connected
    assert not monitor.is_metered


def test_updates_are_edge_triggered():
    monitor = StaticConnectivityMonitor()
    seen = []
    monitor.subscribe(seen.append)

    monitor.set_status(True)
    monitor.set_status(False)
    monitor.set_status(False)
    monitor.set_status(True)

    assert seen == [ConnectivityStatus.DISCONNECTED, ConnectivityStatus.CONNECTED]


def test_metered_flag_updates_without_notifying():
    monitor = StaticConnectivityMonitor()
    seen = []
    monitor.subscribe(seen.append)

    monitor.set_status(True, metered=True)

    assert monitor.is_metered
    assert seen == []


def test_unsubscribe():
    monitor = StaticConnectivityMonitor()
    seen = []
    unsubscribe = monitor.subscribe(seen.append)
    unsubscribe()

    monitor.set_status(False)

    assert seen == []


async def test_probe_monitor_check_now_applies_observation():
    probe = ScriptedProbe(PathObservation(connected=False, metered=True))
    monitor = ProbeConnectivityMonitor(probe=probe, interval_seconds=60)

    status = await monitor.check_now()

    assert status == ConnectivityStatus.DISCONNECTED
    assert monitor.is_metered


async def test_probe_exception_counts_as_disconnected():
    async def failing_probe():
        raise RuntimeError("boom")

    monitor = ProbeConnectivityMonitor(probe=failing_probe, interval_seconds=60)

    assert await monitor.check_now() == ConnectivityStatus.DISCONNECTED


async def test_background_polling_publishes_changes():
    probe = ScriptedProbe(
        PathObservation(connected=True),
        PathObservation(connected=False),
        PathObservation(connected=True),
    )
    seen = []
    monitor = ProbeConnectivityMonitor(probe=probe, interval_seconds=0.01)
    monitor.subscribe(seen.append)

    async with monitor:
        assert monitor.running
        for _ in range(100):
            if len(seen) >= 2:
                break
            await asyncio.sleep(0.01)

    assert not monitor.running
    assert seen[:2] == [ConnectivityStatus.DISCONNECTED, ConnectivityStatus.CONNECTED]


async def test_tcp_probe_reports_reachable_server():
    server = await asyncio.start_server(lambda r, w: w.close(), "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    try:
        observation = await tcp_probe("127.0.0.1", port, timeout=2, metered=False)()
    finally:
        server.close()
        await server.wait_closed()

    assert observation == PathObservation(connected=True, metered=False)


async def test_tcp_probe_reports_unreachable_port():
    server = await asyncio.start_server(lambda r, w: w.close(), "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    server.close()
    await server.wait_closed()

    observation = await tcp_probe("127.0.0.1", port, timeout=2, metered=True)()

    assert observation == PathObservation(connected=False, metered=True)


async def test_failing_listener_does_not_stop_polling():
    probe = ScriptedProbe(
        PathObservation(connected=True),
        PathObservation(connected=False),
        PathObservation(connected=True),
    )
    seen = []

    def broken_listener(status):
        raise RuntimeError("listener bug")

    monitor = ProbeConnectivityMonitor(probe=probe, interval_seconds=0.01)
    monitor.subscribe(broken_listener)
    monitor.subscribe(seen.append)

    async with monitor:
        for _ in range(100):
            if len(seen) >= 2:
                break
            await asyncio.sleep(0.01)
        assert monitor.running

    assert seen[:2] == [ConnectivityStatus.DISCONNECTED, ConnectivityStatus.CONNECTED]
    assert monitor.is_connected
    assert probe.calls >= 3


def test_failing_listener_does_not_block_others():
    monitor = StaticConnectivityMonitor()
    seen = []
    monitor.subscribe(lambda status: 1 / 0)
    monitor.subscribe(seen.append)

    monitor.set_status(False)

    assert not monitor.is_connected
    assert seen == [ConnectivityStatus.DISCONNECTED]
