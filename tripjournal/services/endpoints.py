"""
Endpoint resolver
Maps logical journal operations to resource URLs under one base host
"""

from __future__ import annotations
from enum import Enum
from typing import Dict, Optional

from tripjournal.core.config import settings


class Operation(str, Enum):
    """Logical journal API resources"""
    REGISTER = "register"
    LOGIN = "login"
    TRIPS = "trips"
    TRIP = "trip"
    EVENTS = "events"
    EVENT = "event"
    MEDIA = "media"
    MEDIA_ITEM = "media_item"


_PATHS: Dict[Operation, str] = {
    Operation.REGISTER: "/register",
    Operation.LOGIN: "/token",
    Operation.TRIPS: "/trips",
    Operation.TRIP: "/trips/{id}",
    Operation.EVENTS: "/events",
    Operation.EVENT: "/events/{id}",
    Operation.MEDIA: "/media",
    Operation.MEDIA_ITEM: "/media/{id}",
}


class EndpointResolver:
    """Builds absolute URLs for journal operations"""

    def __init__(self, base_url: Optional[str] = None):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")

    def path(self, operation: Operation, resource_id: Optional[int] = None) -> str:
        """
        Resolve the path of an operation

        Raises:
            ValueError: If an item operation is missing its id, or a
                collection operation is given one
        """
        operation = Operation(operation)
        template = _PATHS[operation]
        needs_id = "{id}" in template
        if needs_id and resource_id is None:
            raise ValueError(f"Operation '{operation.value}' requires a resource id")
        if not needs_id and resource_id is not None:
            raise ValueError(f"Operation '{operation.value}' does not take a resource id")
        return template.format(id=resource_id) if needs_id else template

    def url(self, operation: Operation, resource_id: Optional[int] = None) -> str:
        return f"{self.base_url}{self.path(operation, resource_id)}"
