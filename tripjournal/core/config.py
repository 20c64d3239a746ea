"""การตั้งค่าไคลเอนต์ (ตัวแปรแวดล้อม, API host, ไฟล์ token/cache, การตรวจสอบเครือข่าย)."""

import os
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse
from dotenv import load_dotenv

# Load .env file
_BASE_DIR = Path(__file__).parent.parent.parent
_DOTENV_PATH = Path(os.getenv("DOTENV_PATH") or (_BASE_DIR / ".env"))
load_dotenv(dotenv_path=_DOTENV_PATH, override=False)

# Note: Logger is created lazily to avoid circular imports
from tripjournal.core.logging import get_logger

from tripjournal.core.exceptions import ConfigException

DEFAULT_API_BASE_URL = "http://localhost:8000"


def _env_number(name: str, default, cast=float):
    """Read a numeric env var; malformed values raise ConfigException"""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError:
        kind = "an integer" if cast is int else "a number"
        raise ConfigException(f"{name} must be {kind}, got {raw!r}") from None


class Settings:
    """Client settings"""

    def __init__(self):
        # API Configuration
        self.api_base_url: str = (
            os.getenv("JOURNAL_API_BASE_URL", "").strip() or DEFAULT_API_BASE_URL
        ).rstrip("/")
        self.request_timeout_seconds: float = _env_number("JOURNAL_REQUEST_TIMEOUT_SECONDS", 30.0)

        # Storage Configuration (token + trip snapshot live here)
        data_dir_str = os.getenv("JOURNAL_DATA_DIR", "").strip()
        self.data_dir: Path = Path(data_dir_str) if data_dir_str else Path.home() / ".tripjournal"
        self.token_file: Path = self.data_dir / "token.json"
        self.trip_cache_file: Path = self.data_dir / "trips_cache.json"

        # Connectivity Configuration
        # Probe host defaults to the API host so "connected" means "API reachable"
        parsed = urlparse(self.api_base_url)
        default_port = parsed.port or (443 if parsed.scheme == "https" else 80)
        self.connectivity_probe_host: str = (
            os.getenv("JOURNAL_CONNECTIVITY_PROBE_HOST", "").strip() or (parsed.hostname or "localhost")
        )
        self.connectivity_probe_port: int = _env_number("JOURNAL_CONNECTIVITY_PROBE_PORT", default_port, int)
        self.connectivity_interval_seconds: float = _env_number("JOURNAL_CONNECTIVITY_INTERVAL_SECONDS", 5.0)
        self.connectivity_timeout_seconds: float = _env_number("JOURNAL_CONNECTIVITY_TIMEOUT_SECONDS", 2.0)
        self.metered_network: bool = os.getenv("JOURNAL_METERED_NETWORK", "false").lower() == "true"

        # Logging Configuration
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
        log_file_str = os.getenv("LOG_FILE")
        self.log_file: Optional[Path] = Path(log_file_str) if log_file_str else None

    def validate(self) -> list[str]:
        """
        ตรวจสอบค่า config แล้วคืน list ของคำเตือน
        เรียกตอนเริ่ม CLI เพื่อแจ้งเตือนค่าที่น่าสงสัย
        """
        logger = get_logger(__name__)
        warnings: list[str] = []

        parsed = urlparse(self.api_base_url)
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            msg = f"JOURNAL_API_BASE_URL is not a valid http(s) URL: {self.api_base_url!r}"
            logger.error(f"[config] {msg}")
            warnings.append(msg)
        elif parsed.scheme == "http" and parsed.hostname not in ("localhost", "127.0.0.1"):
            msg = "JOURNAL_API_BASE_URL uses plain http for a remote host - tokens are sent unencrypted"
            logger.warning(f"[config] {msg}")
            warnings.append(msg)

        if self.request_timeout_seconds <= 0:
            msg = "JOURNAL_REQUEST_TIMEOUT_SECONDS must be positive"
            logger.warning(f"[config] {msg}")
            warnings.append(msg)

        if self.connectivity_interval_seconds <= 0:
            msg = "JOURNAL_CONNECTIVITY_INTERVAL_SECONDS must be positive"
            logger.warning(f"[config] {msg}")
            warnings.append(msg)

        if not warnings:
            logger.debug("[config] configuration OK")
        return warnings


# Global settings instance
settings = Settings()
