from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

APP_LOGGER_NAME = "space_explorer"
GAMEPLAY_LOGGER_NAME = "space_explorer.gameplay"
LATEST_LOG_NAME = "latest.log"
GAMEPLAY_LOG_NAME = "gameplay.log"


@dataclass(slots=True)
class AppLoggerBundle:
    app: logging.Logger
    gameplay: logging.Logger
    latest_log_path: Path

    def close(self) -> None:
        """Detach and close every handler installed by :func:`configure_logging`."""
        for logger in (self.app, self.gameplay):
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)
            logger.propagate = True


def _archive_previous_log(logs_dir: Path, keep_archives: int = 5) -> Path:
    logs_dir.mkdir(parents=True, exist_ok=True)
    latest = logs_dir / LATEST_LOG_NAME
    if latest.exists():
        latest.replace(logs_dir / f"latest_{datetime.now():%Y%m%d_%H%M%S}.log")

    archives = sorted(
        (path for path in logs_dir.glob("latest_*.log") if path.is_file()),
        key=lambda path: path.stat().st_mtime,
        reverse=True,
    )
    for stale in archives[keep_archives:]:
        stale.unlink(missing_ok=True)
    return latest


def _isolated_logger(name: str, level: int, *handlers: logging.Handler) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = False
    for handler in handlers:
        logger.addHandler(handler)
    return logger


def configure_logging(logs_dir: Path, level: int = logging.INFO) -> AppLoggerBundle:
    """Engine logs go to stderr and ``latest.log``; the wave timeline goes to ``gameplay.log`` only."""
    latest = _archive_previous_log(logs_dir)

    engine_format = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    console = logging.StreamHandler()
    console.setFormatter(engine_format)
    engine_file = logging.FileHandler(latest, mode="w", encoding="utf-8")
    engine_file.setFormatter(engine_format)

    timeline = logging.FileHandler(logs_dir / GAMEPLAY_LOG_NAME, mode="w", encoding="utf-8")
    timeline.setFormatter(logging.Formatter("%(asctime)s %(message)s"))

    return AppLoggerBundle(
        app=_isolated_logger(APP_LOGGER_NAME, level, console, engine_file),
        gameplay=_isolated_logger(GAMEPLAY_LOGGER_NAME, logging.INFO, timeline),
        latest_log_path=latest,
    )
