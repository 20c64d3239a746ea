"""
Request builder
Turns (verb, operation, body) into an httpx.Request with the journal headers
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Dict, Optional
from urllib.parse import urlencode
import json

import httpx
from pydantic import BaseModel

from tripjournal.services.endpoints import EndpointResolver, Operation
from tripjournal.services.session import JournalSession
from tripjournal.core.logging import get_logger

logger = get_logger(__name__)

JSON_MIME = "application/json"
FORM_MIME = "application/x-www-form-urlencoded"


class BodyEncoding(str, Enum):
    JSON = "json"
    FORM = "form"


def _payload(body: Any) -> Any:
    if isinstance(body, BaseModel):
        return body.model_dump(mode="json")
    return body


class RequestBuilder:
    """
    Builds outgoing requests

    Every request carries ``Content-Type: application/json`` unless the body
    is form encoded. When the session holds a token and ``authorize`` is set,
    ``Authorization: Bearer <token>`` is attached.
    """

    def __init__(self, resolver: EndpointResolver, session: JournalSession):
        self.resolver = resolver
        self.session = session

    def headers(self, encoding: BodyEncoding = BodyEncoding.JSON, authorize: bool = True) -> Dict[str, str]:
        headers = {"Content-Type": FORM_MIME if encoding == BodyEncoding.FORM else JSON_MIME}
        access_token = self.session.access_token
        if authorize and access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    def build(
        self,
        method: str,
        operation: Operation,
        resource_id: Optional[int] = None,
        body: Any = None,
        encoding: BodyEncoding = BodyEncoding.JSON,
        authorize: bool = True,
    ) -> httpx.Request:
        """
        Build a request for an operation

        Args:
            method: HTTP verb
            operation: Logical endpoint
            resource_id: Item id for /{id} endpoints
            body: Pydantic model or plain dict, omitted for GET/DELETE
            encoding: JSON (default) or FORM
            authorize: Attach the bearer token when one is held

        Returns:
            Ready-to-send httpx.Request
        """
        url = self.resolver.url(operation, resource_id)
        content: Optional[bytes] = None
        if body is not None:
            payload = _payload(body)
            if encoding == BodyEncoding.FORM:
                content = urlencode(payload).encode("utf-8")
            else:
                content = json.dumps(payload, ensure_ascii=False).encode("utf-8")

        request = httpx.Request(
            method.upper(),
            url,
            headers=self.headers(encoding, authorize),
            content=content,
        )
        logger.debug(
            f"{request.method} {request.url} "
            f"(auth={'yes' if 'Authorization' in request.headers else 'no'}, body={len(content or b'')} bytes)"
        )
        return request
