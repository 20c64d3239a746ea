"""
Credential storage backends
Async JSON file (aiofiles) and in-memory implementations
"""

from __future__ import annotations
from typing import Optional
import json
import os
import aiofiles
from pathlib import Path
from pydantic import ValidationError

from tripjournal.storage.interface import CredentialStorage
from tripjournal.models.auth import Token
from tripjournal.core.config import settings
from tripjournal.core.exceptions import StorageException
from tripjournal.core.logging import get_logger

logger = get_logger(__name__)


class JsonFileCredentialStorage(CredentialStorage):
    """
    Stores the token as a JSON file readable only by the current user
    Writes go to a temporary file first, then an atomic rename
    """

    def __init__(self, token_file: Optional[Path] = None):
        self.token_file = Path(token_file or settings.token_file)
        logger.debug(f"JsonFileCredentialStorage using {self.token_file}")

    async def save(self, token: Token) -> None:
        try:
            self.token_file.parent.mkdir(parents=True, exist_ok=True)
            temp_path = self.token_file.with_suffix('.tmp')

            async with aiofiles.open(temp_path, 'w', encoding='utf-8') as f:
                await f.write(json.dumps(token.model_dump(), ensure_ascii=False))

            os.chmod(temp_path, 0o600)
            temp_path.replace(self.token_file)
            logger.debug("Token persisted")

        except OSError as e:
            logger.error(f"Error saving token to {self.token_file}: {e}", exc_info=True)
            raise StorageException(f"Failed to save token: {e}") from e

    async def load(self) -> Optional[Token]:
        if not self.token_file.exists():
            return None

        try:
            async with aiofiles.open(self.token_file, 'r', encoding='utf-8') as f:
                content = await f.read()
            return Token.model_validate(json.loads(content))

        except (OSError, json.JSONDecodeError, ValidationError) as e:
            # Unreadable credential is treated as "not logged in"
            logger.warning(f"Could not load stored token from {self.token_file}: {e}")
            return None

    async def delete(self) -> None:
        try:
            self.token_file.unlink(missing_ok=True)
            logger.debug("Stored token erased")
        except OSError as e:
            logger.error(f"Error deleting token file {self.token_file}: {e}", exc_info=True)
            raise StorageException(f"Failed to delete token: {e}") from e


class MemoryCredentialStorage(CredentialStorage):
    """Process-local credential storage (nothing survives a restart)"""

    def __init__(self, token: Optional[Token] = None):
        self._token = token

    async def save(self, token: Token) -> None:
        self._token = token

    async def load(self) -> Optional[Token]:
        return self._token

    async def delete(self) -> None:
        self._token = None
