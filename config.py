import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    # Uygulama Ayarları
    app_name: str = os.getenv("APP_NAME", "Library Inventory")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    debug: bool = _env_flag("DEBUG", "False")
    log_level: str = os.getenv("LOG_LEVEL", "WARNING").upper()

    # API Ayarları
    api_host: str = os.getenv("API_HOST", "127.0.0.1")
    api_port: int = int(os.getenv("API_PORT", "8000"))

    # Katalog Ayarları
    load_seed: bool = _env_flag("LIBRARY_SEED", "True")
    # Seconds a success/error notification stays on screen
    notification_timeout: float = float(os.getenv("NOTIFICATION_TIMEOUT", "3.0"))


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    """Set the root log level; basicConfig ignores repeat calls."""
    resolved = "DEBUG" if settings.debug else (level or settings.log_level)
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
