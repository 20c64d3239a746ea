"""โมดูล storage: อินเทอร์เฟซและตัวจัดเก็บ credential / trip snapshot (JSON file, memory)."""
from tripjournal.storage.interface import CredentialStorage, TripCacheStorage
from tripjournal.storage.credential_store import JsonFileCredentialStorage, MemoryCredentialStorage
from tripjournal.storage.trip_cache import JsonFileTripCache, MemoryTripCache

__all__ = [
    "CredentialStorage",
    "TripCacheStorage",
    "JsonFileCredentialStorage",
    "MemoryCredentialStorage",
    "JsonFileTripCache",
    "MemoryTripCache",
]
