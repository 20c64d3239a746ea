"""Command-line interface for tripjournal.

Run:
    python -m tripjournal login --username sam
    python -m tripjournal trips list
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ValidationError

from tripjournal.core.config import settings
from tripjournal.core.exceptions import JournalException
from tripjournal.core.logging import get_logger, setup_logging
from tripjournal.models.trip import (
    EventCreate,
    EventUpdate,
    Location,
    MediaCreate,
    TripCreate,
    TripUpdate,
    parse_cloud_date,
)
from tripjournal.services.connectivity import (
    ConnectivityMonitor,
    ProbeConnectivityMonitor,
    StaticConnectivityMonitor,
    tcp_probe,
)
from tripjournal.services.journal_client import JournalClient
from tripjournal.services.session import JournalSession
from tripjournal.storage.credential_store import JsonFileCredentialStorage
from tripjournal.storage.trip_cache import JsonFileTripCache

logger = get_logger(__name__)


def _date(value: str) -> datetime:
    """Accept the API's yyyy-MM-ddTHH:mm:ssZ form or any ISO-8601 datetime."""
    try:
        return parse_cloud_date(value)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date: {value!r} (expected e.g. 2024-01-10T12:00:00Z)")


def _emit(value: Any) -> None:
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json")
    elif isinstance(value, list):
        value = [v.model_dump(mode="json") if isinstance(v, BaseModel) else v for v in value]
    print(json.dumps(value, ensure_ascii=False, indent=2))


def _location(args: argparse.Namespace) -> Optional[Location]:
    if args.lat is None and args.lon is None:
        return None
    if args.lat is None or args.lon is None:
        raise argparse.ArgumentTypeError("--lat and --lon must be given together")
    return Location(latitude=args.lat, longitude=args.lon, address=args.address)


async def _connectivity(args: argparse.Namespace) -> ConnectivityMonitor:
    if args.offline:
        return StaticConnectivityMonitor(connected=False)
    probe = None
    if args.base_url:
        parsed = urlparse(args.base_url)
        probe = tcp_probe(parsed.hostname, parsed.port or (443 if parsed.scheme == "https" else 80))
    monitor = ProbeConnectivityMonitor(probe=probe)
    # One-shot CLI: a single observation is enough, no background polling
    await monitor.check_now()
    return monitor


def _password(args: argparse.Namespace) -> str:
    return args.password if args.password is not None else getpass.getpass("Password: ")


# =============================================================================
# Commands
# =============================================================================

async def _cmd_register(client: JournalClient, args: argparse.Namespace) -> int:
    await client.register(args.username, _password(args))
    _emit({"authenticated": client.is_authenticated, "username": args.username})
    return 0


async def _cmd_login(client: JournalClient, args: argparse.Namespace) -> int:
    await client.log_in(args.username, _password(args))
    _emit({"authenticated": client.is_authenticated, "username": args.username})
    return 0


async def _cmd_logout(client: JournalClient, args: argparse.Namespace) -> int:
    await client.log_out()
    _emit({"authenticated": client.is_authenticated})
    return 0


async def _cmd_status(client: JournalClient, args: argparse.Namespace) -> int:
    _emit({
        "api_base_url": client.resolver.base_url,
        "authenticated": client.is_authenticated,
        "connectivity": client.connectivity.current_status().value,
        "metered": client.connectivity.is_metered,
    })
    return 0


async def _cmd_trips_list(client: JournalClient, args: argparse.Namespace) -> int:
    _emit(await client.get_trips())
    return 0


async def _cmd_trips_show(client: JournalClient, args: argparse.Namespace) -> int:
    _emit(await client.get_trip(args.id))
    return 0


async def _cmd_trips_create(client: JournalClient, args: argparse.Namespace) -> int:
    body = TripCreate(name=args.name, start_date=args.start, end_date=args.end)
    _emit(await client.create_trip(body))
    return 0


async def _cmd_trips_update(client: JournalClient, args: argparse.Namespace) -> int:
    body = TripUpdate(name=args.name, start_date=args.start, end_date=args.end)
    _emit(await client.update_trip(args.id, body))
    return 0


async def _cmd_trips_delete(client: JournalClient, args: argparse.Namespace) -> int:
    await client.delete_trip(args.id)
    _emit({"deleted": args.id})
    return 0


async def _cmd_events_create(client: JournalClient, args: argparse.Namespace) -> int:
    body = EventCreate(
        trip_id=args.trip_id,
        name=args.name,
        note=args.note,
        date=args.date,
        location=_location(args),
        transition_from_previous=args.transition,
    )
    _emit(await client.create_event(body))
    return 0


async def _cmd_events_update(client: JournalClient, args: argparse.Namespace) -> int:
    body = EventUpdate(
        name=args.name,
        note=args.note,
        date=args.date,
        location=_location(args),
        transition_from_previous=args.transition,
    )
    _emit(await client.update_event(args.id, body))
    return 0


async def _cmd_events_delete(client: JournalClient, args: argparse.Namespace) -> int:
    await client.delete_event(args.id)
    _emit({"deleted": args.id})
    return 0


async def _cmd_media_upload(client: JournalClient, args: argparse.Namespace) -> int:
    data = Path(args.file).read_bytes()
    body = MediaCreate.from_bytes(args.event_id, data, caption=args.caption)
    media = await client.create_media(body)
    # payload echo is noise on the terminal
    _emit(media.model_dump(mode="json", exclude={"base64_data"}))
    return 0


async def _cmd_media_delete(client: JournalClient, args: argparse.Namespace) -> int:
    await client.delete_media(args.id)
    _emit({"deleted": args.id})
    return 0


# =============================================================================
# Parser
# =============================================================================

def _add_event_fields(p: argparse.ArgumentParser) -> None:
    p.add_argument("--name", required=True)
    p.add_argument("--date", type=_date, required=True)
    p.add_argument("--note", default=None)
    p.add_argument("--lat", type=float, default=None)
    p.add_argument("--lon", type=float, default=None)
    p.add_argument("--address", default=None)
    p.add_argument("--transition", default=None, help="How you got here from the previous event")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tripjournal", description="Trip Journal API client")
    parser.add_argument("--base-url", default=None, help=f"API host (default: {settings.api_base_url})")
    parser.add_argument("--data-dir", default=None, help=f"Token/cache directory (default: {settings.data_dir})")
    parser.add_argument("--offline", action="store_true", help="Skip the network; trip listing uses the cache")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    sub = parser.add_subparsers(dest="command", required=True)

    for name, handler in (("register", _cmd_register), ("login", _cmd_login)):
        p = sub.add_parser(name)
        p.add_argument("--username", required=True)
        p.add_argument("--password", default=None, help="Prompted when omitted")
        p.set_defaults(handler=handler)

    sub.add_parser("logout").set_defaults(handler=_cmd_logout)
    sub.add_parser("status").set_defaults(handler=_cmd_status)

    trips = sub.add_parser("trips").add_subparsers(dest="trips_command", required=True)
    trips.add_parser("list").set_defaults(handler=_cmd_trips_list)
    p = trips.add_parser("show")
    p.add_argument("id", type=int)
    p.set_defaults(handler=_cmd_trips_show)
    for name, handler in (("create", _cmd_trips_create), ("update", _cmd_trips_update)):
        p = trips.add_parser(name)
        if name == "update":
            p.add_argument("id", type=int)
        p.add_argument("--name", required=True)
        p.add_argument("--start", type=_date, required=True)
        p.add_argument("--end", type=_date, required=True)
        p.set_defaults(handler=handler)
    p = trips.add_parser("delete")
    p.add_argument("id", type=int)
    p.set_defaults(handler=_cmd_trips_delete)

    events = sub.add_parser("events").add_subparsers(dest="events_command", required=True)
    p = events.add_parser("create")
    p.add_argument("--trip-id", type=int, required=True)
    _add_event_fields(p)
    p.set_defaults(handler=_cmd_events_create)
    p = events.add_parser("update")
    p.add_argument("id", type=int)
    _add_event_fields(p)
    p.set_defaults(handler=_cmd_events_update)
    p = events.add_parser("delete")
    p.add_argument("id", type=int)
    p.set_defaults(handler=_cmd_events_delete)

    media = sub.add_parser("media").add_subparsers(dest="media_command", required=True)
    p = media.add_parser("upload")
    p.add_argument("--event-id", type=int, required=True)
    p.add_argument("--caption", default=None)
    p.add_argument("file")
    p.set_defaults(handler=_cmd_media_upload)
    p = media.add_parser("delete")
    p.add_argument("id", type=int)
    p.set_defaults(handler=_cmd_media_delete)

    return parser


async def _run(args: argparse.Namespace) -> int:
    data_dir = Path(args.data_dir) if args.data_dir else settings.data_dir
    session = JournalSession(JsonFileCredentialStorage(data_dir / settings.token_file.name))
    await session.restore()
    connectivity = await _connectivity(args)

    async with JournalClient(
        base_url=args.base_url,
        session=session,
        trip_cache=JsonFileTripCache(data_dir / settings.trip_cache_file.name),
        connectivity=connectivity,
    ) as client:
        return await args.handler(client, args)


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.log_level:
        setup_logging("tripjournal", level=args.log_level)
    for warning in settings.validate():
        logger.debug(f"config warning: {warning}")

    try:
        return asyncio.run(_run(args))
    except (JournalException, ValidationError, argparse.ArgumentTypeError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
