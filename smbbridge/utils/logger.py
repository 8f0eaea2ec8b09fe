"""
Logging utilities for smbclient-bridge
"""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

NO_COLOR = False

LOGGER_NAME = "smbbridge"


def _plain_file_handler(path: Path, level: int):
    h = FlushFileHandler(path, mode="a", encoding="utf-8", errors="replace")
    h.setLevel(level)
    h.setFormatter(BridgeFileFormatter())
    return h


def _json_file_handler(path: Path, level: int):
    h = FlushFileHandler(path, mode="a", encoding="utf-8", errors="replace")
    h.setLevel(level)
    h.setFormatter(BridgeJSONFormatter())
    return h


class FlushStreamHandler(logging.StreamHandler):
    def emit(self, record):
        super().emit(record)
        try:
            self.flush()
        except Exception:
            pass


class FlushFileHandler(logging.FileHandler):
    def emit(self, record):
        super().emit(record)
        try:
            self.flush()
        except Exception:
            pass


class Colors:
    RED = '\033[91m'
    YELLOW = '\033[93m'
    GREEN = '\033[92m'
    GRAY = '\033[37m'
    RESET = '\033[0m'
    BOLD = '\033[1m'


class BridgeConsoleFormatter(logging.Formatter):
    LEVEL_COLORS = {
        'DEBUG': Colors.GRAY,
        'INFO': Colors.GREEN,
        'WARNING': Colors.YELLOW,
        'ERROR': Colors.RED,
        'CRITICAL': Colors.RED + Colors.BOLD,
    }

    def __init__(self, stream=None):
        super().__init__()
        self.stream = stream or sys.stderr

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime(
            '%Y-%m-%d %H:%M:%S'
        )
        level = record.levelname
        message = record.getMessage()

        if not NO_COLOR and self.stream.isatty():
            color = self.LEVEL_COLORS.get(level, '')
            return (
                f"{Colors.GRAY}[{timestamp}]{Colors.RESET} "
                f"{color}[{level}]{Colors.RESET} {message}"
            )

        return f"[{timestamp}] [{level}] {message}"


class BridgeFileFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime(
            '%Y-%m-%d %H:%M:%S'
        )
        return f"[{timestamp}] [{record.levelname}] {record.getMessage()}"


class BridgeJSONFormatter(logging.Formatter):
    EXTRA_FIELDS = (
        "operation",
        "item_index",
        "remote_path",
        "duration",
    )

    def format(self, record: logging.LogRecord) -> str:
        data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }

        for field in self.EXTRA_FIELDS:
            if hasattr(record, field):
                data[field] = getattr(record, field)

        return json.dumps(data)


def setup_logging(
        log_level: str = "info",
        log_to_file: bool = False,
        log_file_path: Optional[str] = None,
        log_to_console: bool = True,
        log_type: str = "plain",
) -> logging.Logger:
    level_map = {
        "debug": logging.DEBUG,
        "info": logging.INFO,
        "warning": logging.WARNING,
    }
    level = level_map.get(log_level.lower(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()

    # stdout carries operation results, so the console log goes to stderr
    if log_to_console:
        ch = FlushStreamHandler(sys.stderr)
        ch.setLevel(level)
        ch.setFormatter(BridgeConsoleFormatter(sys.stderr))
        logger.addHandler(ch)

    if log_to_file and log_file_path:
        base = Path(log_file_path)
        base.parent.mkdir(parents=True, exist_ok=True)

        handlers = []

        if log_type == "all":
            handlers.append(_plain_file_handler(base.with_suffix(".log"), level))
            handlers.append(_json_file_handler(base.with_suffix(".json"), level))

        elif log_type == "json":
            handlers.append(_json_file_handler(base, level))

        else:  # plain
            handlers.append(_plain_file_handler(base, level))

        for h in handlers:
            logger.addHandler(h)

    return logger


def print_completion_stats(start_time, items: int = 0):
    if not start_time:
        return

    logger = logging.getLogger(LOGGER_NAME)
    end_time = datetime.now()
    duration = end_time - start_time

    seconds = duration.total_seconds()
    m, s = divmod(int(seconds), 60)

    logger.info(
        f"Processed {items} item(s) in "
        + (f"{m}m {s}s" if m else f"{seconds:.2f}s"),
        extra={"duration": seconds},
    )


def format_size(size_bytes: int) -> str:
    for unit in ("B", "KB", "MB", "GB", "TB"):
        if size_bytes < 1024:
            return f"{size_bytes:.1f}{unit}"
        size_bytes /= 1024
    return f"{size_bytes:.1f}PB"
