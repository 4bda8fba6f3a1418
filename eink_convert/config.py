import logging
import os
from dataclasses import dataclass


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ConverterSettings:
    source_url: str
    port: int
    display_width: int
    display_height: int
    thumbnail_width: int
    thumbnail_height: int
    palette: str
    preset: str
    skip_rotation: bool
    timeout: float
    retries: int
    cache_ttl: float
    log_level: str

    @classmethod
    def from_env(cls) -> "ConverterSettings":
        return cls(
            source_url=os.getenv("SOURCE_URL", "http://127.0.0.1:8000/photo.jpg"),
            port=int(os.getenv("PORT", "5500")),
            display_width=int(os.getenv("DISPLAY_WIDTH", "800")),
            display_height=int(os.getenv("DISPLAY_HEIGHT", "480")),
            thumbnail_width=int(os.getenv("THUMB_WIDTH", "400")),
            thumbnail_height=int(os.getenv("THUMB_HEIGHT", "240")),
            palette=os.getenv("PALETTE", "spectra6").lower(),
            preset=os.getenv("PRESET", "cdr").lower(),
            skip_rotation=_env_flag("SKIP_ROTATION"),
            timeout=float(os.getenv("SOURCE_TIMEOUT", "10.0")),
            retries=int(os.getenv("SOURCE_RETRIES", "2")),
            cache_ttl=float(os.getenv("CACHE_TTL", "5")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )


SETTINGS = ConverterSettings.from_env()


def configure_logging(settings: ConverterSettings = SETTINGS) -> logging.Logger:
    logging.basicConfig(level=settings.log_level)
    return logging.getLogger("eink-convert")
