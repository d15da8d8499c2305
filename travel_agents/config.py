"""Environment-driven settings and logging setup.

Decision thresholds are module constants in each agent, not settings.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from dotenv import load_dotenv

TEXT_FORMAT = "%(asctime)s %(levelname)-5s [%(name)s] %(message)s"
TEXT_DATEFMT = "%H:%M:%S"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    json_logs: bool = False


def load_settings(env_file: str | Path | None = None) -> Settings:
    if env_file is not None:
        load_dotenv(env_file)
    else:
        load_dotenv()
    level = os.environ.get("TXA_LOG_LEVEL") or os.environ.get("LOG_LEVEL") or "INFO"
    json_logs = os.environ.get("TXA_LOG_JSON", "").strip().lower() in _TRUTHY
    return Settings(log_level=level.upper(), json_logs=json_logs)


class JsonFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, agent, message and data."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "agent": getattr(record, "agent", None),
            "message": record.getMessage(),
        }
        data = getattr(record, "data", None)
        if data is not None:
            entry["data"] = data
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(settings: Settings | None = None) -> None:
    settings = settings or load_settings()
    handler = logging.StreamHandler()
    if settings.json_logs:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATEFMT))
    logging.basicConfig(level=settings.log_level, handlers=[handler], force=True)
