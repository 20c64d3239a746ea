"""
อินเทอร์เฟซการจัดเก็บ - แบบ Repository
แยก credential กับ snapshot ของทริปออกจากกัน เพื่อเปลี่ยน backend ได้ง่าย (keychain, ไฟล์, หน่วยความจำ)
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional

from tripjournal.models.auth import Token
from tripjournal.models.trip import Trip


class CredentialStorage(ABC):
    """
    Persistent store for a single access token
    """

    @abstractmethod
    async def save(self, token: Token) -> None:
        """
        Persist the token, replacing any previous one

        Raises:
            StorageException: If the token cannot be written
        """
        pass

    @abstractmethod
    async def load(self) -> Optional[Token]:
        """
        Load the persisted token

        Returns:
            Token if one is stored and readable, None otherwise.
            Read failures are reported as None, never raised.
        """
        pass

    @abstractmethod
    async def delete(self) -> None:
        """
        Erase the persisted token (no-op when nothing is stored)

        Raises:
            StorageException: If the token exists but cannot be removed
        """
        pass


class TripCacheStorage(ABC):
    """
    Single-slot snapshot of the last successfully fetched trip list
    """

    @abstractmethod
    async def save_trips(self, trips: List[Trip]) -> None:
        """
        Overwrite the snapshot unconditionally

        Raises:
            StorageException: If the snapshot cannot be written
        """
        pass

    @abstractmethod
    async def load_trips(self) -> List[Trip]:
        """
        Return the snapshot, or an empty list when none exists or it is unreadable
        """
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Drop the snapshot"""
        pass
