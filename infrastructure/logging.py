"""loguru setup plus helpers behind the Log menu."""

from __future__ import annotations

import os
from pathlib import Path
import subprocess
import sys

from loguru import logger

APP_DIR_NAME = "AdventBoard"
LOG_PREFIX = "advent_"
LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"


def get_log_directory() -> str:
    """Per-user data directory for log files."""
    if os.name == "nt":
        root = Path(os.environ.get("LOCALAPPDATA") or Path.home() / "AppData" / "Local")
    elif sys.platform == "darwin":
        root = Path.home() / "Library" / "Logs"
    else:
        root = Path(os.environ.get("XDG_DATA_HOME") or Path.home() / ".local" / "share")
    return str(root / APP_DIR_NAME / "logs")


def init_logging(log_dir: str | None = None, level: str = "INFO") -> Path:
    """Replace loguru's sinks with a daily file (and stderr when attached).

    Returns:
        The directory log files are written to.
    """
    target = Path(log_dir or get_log_directory())
    target.mkdir(parents=True, exist_ok=True)

    logger.remove()
    # pythonw / gui-scripts run without a console
    if sys.stderr is not None:
        logger.add(sys.stderr, level=level, format=LOG_FORMAT)
    logger.add(
        str(target / (LOG_PREFIX + "{time:YYYYMMDD}.log")),
        level=level,
        format=LOG_FORMAT,
        rotation="10 MB",
        retention="10 days",
        compression="zip",
        enqueue=True,
        backtrace=False,
        diagnose=False,
        encoding="utf-8",
    )
    return target


def find_latest_log_file(log_dir: str | None = None) -> Path | None:
    """Most recently modified `advent_*.log`, or None."""
    folder = Path(log_dir or get_log_directory())
    try:
        candidates = [p for p in folder.glob(f"{LOG_PREFIX}*.log") if p.is_file()]
        return max(candidates, key=lambda p: p.stat().st_mtime, default=None)
    except OSError:
        return None


def _launch(target: str) -> bool:
    try:
        if os.name == "nt":
            os.startfile(target)  # type: ignore[attr-defined]
        else:
            opener = "open" if sys.platform == "darwin" else "xdg-open"
            subprocess.run([opener, target], check=True)
    except (OSError, subprocess.CalledProcessError) as ex:
        logger.warning("Could not open {}: {}", target, ex)
        return False
    return True


def open_latest_log(log_dir: str | None = None) -> bool:
    latest = find_latest_log_file(log_dir)
    return latest is not None and _launch(str(latest))


def open_log_directory(log_dir: str | None = None) -> bool:
    return _launch(log_dir or get_log_directory())
