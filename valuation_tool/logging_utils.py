from __future__ import annotations

import atexit
import datetime as dt
import logging
import os
from pathlib import Path
from typing import Optional

from valuation_tool.config import DEFAULT_CONFIG_DIR

LOG_DIR = DEFAULT_CONFIG_DIR / "logs"
LOG_PATH_ENV = "VALUATION_TOOL_API_LOG"

_SESSION_LOG_PATH: Path | None = None
_SHUTDOWN_REGISTERED = False


def configure_logging(log_dir: Path | None = None) -> Path:
    """Attach a per-session file log to the ``valuation_tool`` logger."""

    global _SESSION_LOG_PATH, _SHUTDOWN_REGISTERED

    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    app_logger = logging.getLogger("valuation_tool")

    if _SESSION_LOG_PATH is None:
        target_dir = log_dir or LOG_DIR
        target_dir.mkdir(parents=True, exist_ok=True)
        timestamp = dt.datetime.now(dt.timezone.utc).strftime("%Y%m%d-%H%M%S")
        _SESSION_LOG_PATH = target_dir / f"api-session-{timestamp}.txt"
        session_handler = logging.FileHandler(_SESSION_LOG_PATH, encoding="utf-8")
        session_handler.setLevel(logging.DEBUG)
        session_handler.setFormatter(formatter)

        app_logger.setLevel(logging.DEBUG)
        app_logger.addHandler(session_handler)
        app_logger.propagate = False

        if os.environ.get("VALUATION_TOOL_LOG", "").lower() == "debug":
            stream_handler = logging.StreamHandler()
            stream_handler.setLevel(logging.DEBUG)
            stream_handler.setFormatter(formatter)
            app_logger.addHandler(stream_handler)

        os.environ[LOG_PATH_ENV] = str(_SESSION_LOG_PATH)
        app_logger.info("API session log initialised at %s", _SESSION_LOG_PATH)

    if not _SHUTDOWN_REGISTERED:
        atexit.register(logging.shutdown)
        _SHUTDOWN_REGISTERED = True
    return _SESSION_LOG_PATH


def get_api_log_path() -> Optional[Path]:
    """Return the current session log path if available."""

    if LOG_PATH_ENV in os.environ:
        return Path(os.environ[LOG_PATH_ENV])
    return _SESSION_LOG_PATH


__all__ = ["LOG_DIR", "configure_logging", "get_api_log_path"]
