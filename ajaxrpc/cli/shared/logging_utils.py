"""Loguru sinks for the ajaxrpc command line."""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

from ajaxrpc.config.loader import get_data_dir
from ajaxrpc.config.schema import LoggingConfig

_FILE_SINKS: dict[str, tuple[int, Path]] = {}


def configure_console_logging(level: str = "INFO") -> int:
    """Replace loguru's default stderr sink with one at ``level``."""
    logger.remove()
    return logger.add(sys.stderr, level=level.upper(), backtrace=False, diagnose=False)


def ensure_rotating_log_file(name: str, logging_config: LoggingConfig | None = None) -> Path:
    """Add (once per name) a rotating file sink under ~/.ajaxrpc/logs."""
    if name in _FILE_SINKS:
        return _FILE_SINKS[name][1]
    cfg = logging_config or LoggingConfig()
    log_dir = get_data_dir() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / f"{name}.log"
    sink_id = logger.add(
        str(log_path),
        level=cfg.level.upper(),
        rotation=cfg.rotation,
        retention=cfg.retention,
        enqueue=True,
        encoding="utf-8",
        backtrace=False,
        diagnose=False,
    )
    _FILE_SINKS[name] = (sink_id, log_path)
    return log_path
