"""
แคชรายการทริปล่าสุด (snapshot เดียว ไม่มี TTL ไม่มี eviction)
ใช้เป็นทางสำรองเมื่อออฟไลน์หรือดึงข้อมูลจากเซิร์ฟเวอร์ไม่สำเร็จ
"""

from __future__ import annotations
from typing import List, Optional
import json
import aiofiles
from pathlib import Path
from pydantic import TypeAdapter, ValidationError

from tripjournal.storage.interface import TripCacheStorage
from tripjournal.models.trip import Trip
from tripjournal.core.config import settings
from tripjournal.core.exceptions import StorageException
from tripjournal.core.logging import get_logger

logger = get_logger(__name__)

_TRIP_LIST = TypeAdapter(List[Trip])


class JsonFileTripCache(TripCacheStorage):
    """
    Trip snapshot persisted as a single JSON file
    """

    def __init__(self, cache_file: Optional[Path] = None):
        self.cache_file = Path(cache_file or settings.trip_cache_file)
        logger.debug(f"JsonFileTripCache using {self.cache_file}")

    async def save_trips(self, trips: List[Trip]) -> None:
        try:
            self.cache_file.parent.mkdir(parents=True, exist_ok=True)
            temp_path = self.cache_file.with_suffix('.tmp')

            data = _TRIP_LIST.dump_json(trips).decode("utf-8")
            async with aiofiles.open(temp_path, 'w', encoding='utf-8') as f:
                await f.write(data)

            # Atomic rename
            temp_path.replace(self.cache_file)
            logger.debug(f"Cached {len(trips)} trips to {self.cache_file}")

        except OSError as e:
            logger.error(f"Error writing trip cache {self.cache_file}: {e}", exc_info=True)
            raise StorageException(f"Failed to write trip cache: {e}") from e

    async def load_trips(self) -> List[Trip]:
        if not self.cache_file.exists():
            logger.debug("No trip snapshot on disk")
            return []

        try:
            async with aiofiles.open(self.cache_file, 'r', encoding='utf-8') as f:
                content = await f.read()
            return _TRIP_LIST.validate_json(content)

        except (OSError, ValidationError) as e:
            logger.warning(f"Trip cache {self.cache_file} unreadable, ignoring it: {e}")
            return []

    async def clear(self) -> None:
        try:
            self.cache_file.unlink(missing_ok=True)
        except OSError as e:
            raise StorageException(f"Failed to clear trip cache: {e}") from e


class MemoryTripCache(TripCacheStorage):
    """In-memory trip snapshot"""

    def __init__(self, trips: Optional[List[Trip]] = None):
        self._trips: List[Trip] = list(trips or [])

    async def save_trips(self, trips: List[Trip]) -> None:
        self._trips = list(trips)

    async def load_trips(self) -> List[Trip]:
        return list(self._trips)

    async def clear(self) -> None:
        self._trips = []
