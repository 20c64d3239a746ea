"""
โมเดลทริป อีเวนต์ และสื่อ (Pydantic V2)
วันที่ส่งไป/กลับจากเซิร์ฟเวอร์เป็นสตริง UTC รูปแบบ yyyy-MM-dd'T'HH:mm:ss'Z'
"""

from __future__ import annotations
from typing import Annotated, Optional, List
from datetime import datetime, timezone
import base64
import binascii

from pydantic import AfterValidator, BaseModel, Field, PlainSerializer, field_validator

CLOUD_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def _as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken as UTC; aware ones are converted to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_cloud_date(value: datetime) -> str:
    """Format a datetime the way the journal API expects it."""
    return _as_utc(value).strftime(CLOUD_DATE_FORMAT)


def parse_cloud_date(value: str) -> datetime:
    """Parse a ``yyyy-MM-dd'T'HH:mm:ss'Z'`` string into an aware UTC datetime."""
    return datetime.strptime(value, CLOUD_DATE_FORMAT).replace(tzinfo=timezone.utc)


CloudDatetime = Annotated[
    datetime,
    AfterValidator(_as_utc),
    PlainSerializer(format_cloud_date, return_type=str),
]


class Location(BaseModel):
    """Geographic point attached to an event"""
    latitude: float = Field(..., ge=-90, le=90, description="Latitude")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude")
    address: Optional[str] = Field(None, description="Human-readable address")


class Media(BaseModel):
    """Media attachment of an event (inline base64 payload)"""
    model_config = {"extra": "allow"}

    id: int = Field(..., description="Media ID")
    event_id: Optional[int] = Field(None, description="Owning event ID")
    base64_data: Optional[str] = Field(None, description="Base64-encoded payload")
    caption: Optional[str] = Field(None, description="Caption")

    @property
    def data(self) -> bytes:
        """Decoded payload bytes (empty when the server omitted the payload)"""
        if not self.base64_data:
            return b""
        return base64.b64decode(self.base64_data)


class Event(BaseModel):
    """A single stop/moment within a trip"""
    model_config = {"extra": "allow"}

    id: int = Field(..., description="Event ID")
    trip_id: Optional[int] = Field(None, description="Owning trip ID")
    name: str = Field(..., description="Event name")
    note: Optional[str] = Field(None, description="Free-form note")
    date: CloudDatetime = Field(..., description="When the event happened (UTC)")
    location: Optional[Location] = Field(None, description="Where the event happened")
    transition_from_previous: Optional[str] = Field(
        None,
        description="How the traveller got here from the previous event"
    )
    medias: List[Media] = Field(default_factory=list, description="Attached media")


class Trip(BaseModel):
    """A journaled trip with its ordered events"""
    model_config = {"extra": "allow"}

    id: int = Field(..., description="Trip ID")
    name: str = Field(..., description="Trip name")
    start_date: CloudDatetime = Field(..., description="Trip start (UTC)")
    end_date: CloudDatetime = Field(..., description="Trip end (UTC)")
    events: List[Event] = Field(default_factory=list, description="Events in server order")


# =============================================================================
# Request bodies
# =============================================================================

class TripCreate(BaseModel):
    """Body for creating a trip"""
    name: str = Field(..., min_length=1)
    start_date: CloudDatetime
    end_date: CloudDatetime

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Trip name cannot be empty")
        return v.strip()


class TripUpdate(TripCreate):
    """Body for updating a trip (full replacement of name and dates)"""
    pass


class EventUpdate(BaseModel):
    """Body for updating an event"""
    name: str = Field(..., min_length=1)
    note: Optional[str] = None
    date: CloudDatetime
    location: Optional[Location] = None
    transition_from_previous: Optional[str] = None


class EventCreate(EventUpdate):
    """Body for creating an event under a trip"""
    trip_id: int


class MediaCreate(BaseModel):
    """Body for uploading a media attachment"""
    event_id: int
    base64_data: str = Field(..., min_length=1)
    caption: Optional[str] = None

    @field_validator('base64_data')
    @classmethod
    def validate_base64(cls, v: str) -> str:
        """Reject payloads that are not valid base64"""
        try:
            base64.b64decode(v, validate=True)
        except (binascii.Error, ValueError):
            raise ValueError("base64_data is not valid base64")
        return v

    @classmethod
    def from_bytes(cls, event_id: int, data: bytes, caption: Optional[str] = None) -> 'MediaCreate':
        """Build an upload body from raw file bytes"""
        return cls(
            event_id=event_id,
            base64_data=base64.b64encode(data).decode("ascii"),
            caption=caption,
        )
