"""
โมเดล Pydantic V2 สำหรับข้อมูลของ Trip Journal API
"""

from tripjournal.models.auth import Token, AuthRequest
from tripjournal.models.trip import (
    CLOUD_DATE_FORMAT,
    Location,
    Media,
    Event,
    Trip,
    TripCreate,
    TripUpdate,
    EventCreate,
    EventUpdate,
    MediaCreate,
    format_cloud_date,
    parse_cloud_date,
)

__all__ = [
    "Token",
    "AuthRequest",
    "CLOUD_DATE_FORMAT",
    "Location",
    "Media",
    "Event",
    "Trip",
    "TripCreate",
    "TripUpdate",
    "EventCreate",
    "EventUpdate",
    "MediaCreate",
    "format_cloud_date",
    "parse_cloud_date",
]
