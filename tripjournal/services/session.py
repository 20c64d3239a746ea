"""
Session context
Holds the current access token and mirrors every change to the injected credential storage
"""

from __future__ import annotations
from typing import Callable, List, Optional

from tripjournal.models.auth import Token
from tripjournal.storage.interface import CredentialStorage
from tripjournal.storage.credential_store import MemoryCredentialStorage
from tripjournal.core.exceptions import StorageException
from tripjournal.core.logging import get_logger

logger = get_logger(__name__)

AuthListener = Callable[[bool], None]


class JournalSession:
    """
    Explicit session context owned by the caller and passed to the client.

    ``is_authenticated`` derives from whether a token is held. Listeners
    registered with ``subscribe`` are called with the new value whenever it
    flips.
    """

    def __init__(self, storage: Optional[CredentialStorage] = None):
        self.storage: CredentialStorage = storage or MemoryCredentialStorage()
        self._token: Optional[Token] = None
        self._listeners: List[AuthListener] = []

    @property
    def token(self) -> Optional[Token]:
        return self._token

    @property
    def access_token(self) -> Optional[str]:
        return self._token.access_token if self._token else None

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """Register an authenticated-state listener; returns an unsubscribe callable"""
        self._listeners.append(listener)

        def _unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    async def restore(self) -> Optional[Token]:
        """
        Load the persisted token into the session.
        A storage failure leaves the session unauthenticated.
        """
        try:
            token = await self.storage.load()
        except Exception as e:
            logger.warning(f"Failed to load stored credential, continuing logged out: {e}")
            token = None
        self._assign(token)
        logger.info(f"Session restored (authenticated={self.is_authenticated})")
        return token

    async def set_token(self, token: Optional[Token]) -> None:
        """
        Replace the held token and persist it (or erase it when None)

        Raises:
            StorageException: If the stored token cannot be erased
        """
        self._assign(token)
        if token is None:
            await self.storage.delete()
            return
        try:
            await self.storage.save(token)
        except StorageException as e:
            # Token stays usable for this process; only persistence is lost
            logger.error(f"Token could not be persisted: {e}")

    async def clear(self) -> None:
        await self.set_token(None)

    def _assign(self, token: Optional[Token]) -> None:
        was_authenticated = self.is_authenticated
        self._token = token
        if was_authenticated != self.is_authenticated:
            for listener in list(self._listeners):
                listener(self.is_authenticated)
