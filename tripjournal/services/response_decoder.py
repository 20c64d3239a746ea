"""
Response decoder
Maps status code + body to a typed value, the empty-result sentinel, or a categorized error
"""

from __future__ import annotations
from functools import lru_cache
from typing import Any, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from tripjournal.core.exceptions import InvalidDataError, InvalidResponseError, InvalidTokenError
from tripjournal.core.logging import get_logger

logger = get_logger(__name__)


class _EmptyResult:
    """Result of a successful call that returns no body (204 No Content)"""

    _instance: Optional['_EmptyResult'] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "EMPTY_RESULT"


EMPTY_RESULT = _EmptyResult()


@lru_cache(maxsize=None)
def _adapter(expected: Any) -> TypeAdapter:
    return TypeAdapter(expected)


def decode_response(response: httpx.Response, expected: Any = None) -> Any:
    """
    Decode a journal API response

    Args:
        response: Received response (body already read)
        expected: Type to decode a 200 body into (model class or e.g. ``List[Trip]``).
            None means the caller expects no payload.

    Returns:
        Decoded value, or EMPTY_RESULT for 204 / payload-less calls

    Raises:
        InvalidTokenError: 401
        InvalidDataError: 200 body does not match ``expected``
        InvalidResponseError: any other status, or 204 with a body
    """
    status = response.status_code

    if status == 200:
        if expected is None:
            return EMPTY_RESULT
        try:
            return _adapter(expected).validate_json(response.content)
        except ValidationError as e:
            logger.error(f"Could not decode {response.request.url} as {expected}: {e}")
            raise InvalidDataError(f"Invalid data in response: {e.error_count()} validation error(s)") from e

    if status == 204:
        if not response.content:
            return EMPTY_RESULT
        raise InvalidResponseError("Unexpected body in 204 response", status_code=status)

    if status == 401:
        logger.warning(f"Token rejected by server for {response.request.url}")
        raise InvalidTokenError()

    logger.warning(f"Unexpected status {status} from {response.request.url}: {response.text[:200]}")
    raise InvalidResponseError(f"Unexpected status code {status}", status_code=status)
