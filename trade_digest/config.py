"""Runtime settings read from the environment.

    TRADE_DIGEST_LOG_LEVEL         – logging level name (default INFO)
    TRADE_DIGEST_EXPORT_DIR        – directory for processed-trade artifacts
    TRADE_DIGEST_CORS_ORIGINS      – comma-separated origins allowed by the API
    TRADE_DIGEST_MAX_UPLOAD_BYTES  – largest text body the API will process
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"

DEFAULT_EXPORT_DIR = "./exports"
DEFAULT_CORS_ORIGINS = "http://localhost:3000"
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    export_dir: Path = Path(DEFAULT_EXPORT_DIR)
    cors_origins: tuple[str, ...] = (DEFAULT_CORS_ORIGINS,)
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES

    @classmethod
    def from_env(cls) -> "Settings":
        origins = os.environ.get("TRADE_DIGEST_CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
        raw_limit = os.environ.get("TRADE_DIGEST_MAX_UPLOAD_BYTES", "")
        try:
            max_upload = int(raw_limit) if raw_limit.strip() else DEFAULT_MAX_UPLOAD_BYTES
        except ValueError:
            logging.getLogger(__name__).warning(
                "Ignoring invalid TRADE_DIGEST_MAX_UPLOAD_BYTES=%r", raw_limit,
            )
            max_upload = DEFAULT_MAX_UPLOAD_BYTES

        return cls(
            log_level=os.environ.get("TRADE_DIGEST_LOG_LEVEL", "INFO").upper(),
            export_dir=Path(os.environ.get("TRADE_DIGEST_EXPORT_DIR", DEFAULT_EXPORT_DIR)),
            cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
            max_upload_bytes=max_upload,
        )


def configure_logging(level: str | None = None) -> None:
    """Install the root handler used by the API and the CLI."""
    level_name = (level or Settings.from_env().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
    )
