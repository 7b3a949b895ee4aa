"""Unified logging configuration for the CLI and library callers.

Provides consistent logging across the codec, transforms and rasterizer:
    - Console and file handlers with optional rotation
    - JSON output mode for log ingestion
    - Contextual fields (cmd, file, variant) attached to every record
    - Warning capture (Python warnings → logging)
    - Quieting chatty third-party loggers (Pillow's PNG chunk tracing)

Public API:
    setup_logging(**yaml_cfg.logging, context={"cmd": "convert"})
    push_context(file="in.ppm")
    pop_context(keys=["file"])
    shutdown()

Format examples (timestamps in UTC):
    Human: 2026-10-19T13:45:12.345Z | INFO     | cmd=convert | Decoded P6 640x480
    JSON: {"t":"2026-10-19T13:45:12.345Z","lvl":"INFO","cmd":"convert","msg":"..."}

Library modules never call setup_logging(); they only create module loggers
with logging.getLogger(__name__). Configuration belongs to entrypoints.

Idempotent: repeated setup_logging() calls don't duplicate handlers.
"""

import contextvars
import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional


# Per-context fields appended to every record
_context_var = contextvars.ContextVar('logging_context', default={})

# Track if logging has been configured (idempotency)
_configured = False

# Handlers installed by setup_logging(), detached on reconfigure/shutdown
_handlers: List[logging.Handler] = []

_LEVEL_COLORS = {
    'DEBUG': '\033[36m',
    'INFO': '\033[32m',
    'WARNING': '\033[33m',
    'ERROR': '\033[31m',
    'CRITICAL': '\033[35m',
}
_RESET = '\033[0m'


class ContextFormatter(logging.Formatter):
    """Formatter that appends push_context() fields to each record.

    fmt_mode "human" gives pipe-separated lines (ANSI level colors when the
    console is a tty); "json" gives one JSON object per line.
    """

    def __init__(self, fmt_mode: str = "human", use_color: bool = True):
        super().__init__()
        self.fmt_mode = fmt_mode
        self.use_color = use_color and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        context = _context_var.get({})
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        if self.fmt_mode == "json":
            return self._format_json(record, ts, context)
        return self._format_human(record, ts, context)

    def _format_json(self, record: logging.LogRecord, ts: datetime, context: dict) -> str:
        entry = {
            't': ts.isoformat(),
            'lvl': record.levelname,
            'name': record.name,
            'pid': os.getpid(),
            'msg': record.getMessage(),
            **context,
        }
        if record.exc_info:
            entry['exc'] = self.formatException(record.exc_info)
        return json.dumps(entry)

    def _format_human(self, record: logging.LogRecord, ts: datetime, context: dict) -> str:
        level = f"{record.levelname:8s}"
        if self.use_color:
            level = f"{_LEVEL_COLORS.get(record.levelname, '')}{level}{_RESET}"

        parts = [ts.strftime('%Y-%m-%dT%H:%M:%S.%f')[:-3] + 'Z', '|', level, '|']
        if context:
            parts.extend([' '.join(f"{k}={v}" for k, v in context.items()), '|'])
        parts.append(record.getMessage())

        line = ' '.join(parts)
        if record.exc_info:
            line += '\n' + self.formatException(record.exc_info)
        return line


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    *,
    json: bool = False,
    color: bool = True,
    to_stderr: bool = True,
    rotate: Optional[Dict[str, Any]] = None,
    capture_warnings: bool = True,
    quiet_libs: Optional[List[str]] = None,
    context: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Configure the root logger (idempotent).

    Parameters
    ----------
    log_level : str
        "DEBUG", "INFO", "WARNING", "ERROR" or "CRITICAL"
    log_file : str, optional
        Log file path; None for no file logging
    json : bool
        JSON lines in the log file instead of human lines
    color : bool
        ANSI level colors on the console (only when stderr is a tty)
    to_stderr : bool
        Attach a console handler on stderr
    rotate : dict, optional
        File rotation:
        - {"mode": "size", "max_bytes": 10_000_000, "backup_count": 5}
        - {"mode": "time", "when": "D", "interval": 1, "backup_count": 7}
    capture_warnings : bool
        Route Python warnings through logging
    quiet_libs : list[str], optional
        Loggers raised to WARNING regardless of log_level (e.g. ["PIL"])
    context : dict, optional
        Initial contextual fields (e.g. {"cmd": "info"})

    Returns
    -------
    dict
        {"handlers": [...]} installed by this call

    Raises
    ------
    ValueError
        For an unknown rotation mode
    """
    global _configured

    root = logging.getLogger()
    if _configured:
        _detach_handlers()

    root.setLevel(getattr(logging, log_level.upper()))

    handlers = []
    if to_stderr:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(ContextFormatter("human", color))
        handlers.append(console_handler)

    if log_file:
        handlers.append(_create_file_handler(log_file, rotate, json))

    for handler in handlers:
        root.addHandler(handler)

    if context:
        push_context(**context)

    for lib in quiet_libs or []:
        logging.getLogger(lib).setLevel(logging.WARNING)

    if capture_warnings:
        logging.captureWarnings(True)

    _handlers.extend(handlers)
    _configured = True

    return {'handlers': handlers}


def _create_file_handler(
    log_file: str,
    rotate: Optional[Dict[str, Any]],
    json_format: bool
) -> logging.Handler:
    """File handler, rotating by size or time when requested."""
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    mode = rotate.get('mode', 'size') if rotate else None
    if mode is None:
        handler = logging.FileHandler(log_file)
    elif mode == 'size':
        handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=rotate.get('max_bytes', 10_000_000),
            backupCount=rotate.get('backup_count', 5)
        )
    elif mode == 'time':
        handler = logging.handlers.TimedRotatingFileHandler(
            log_file,
            when=rotate.get('when', 'D'),
            interval=rotate.get('interval', 1),
            backupCount=rotate.get('backup_count', 7)
        )
    else:
        raise ValueError(f"Unknown rotation mode: {mode}. Use 'size' or 'time'.")

    handler.setFormatter(ContextFormatter("json" if json_format else "human", use_color=False))
    return handler


def push_context(**kwargs) -> None:
    """Add contextual fields to all subsequent log records.

    >>> push_context(cmd="convert")
    >>> logger.info("Started")  # → "... | cmd=convert | Started"
    """
    _context_var.set({**_context_var.get({}), **kwargs})


def pop_context(keys: Optional[List[str]] = None) -> None:
    """Remove contextual fields; clears everything when keys is None."""
    if keys is None:
        _context_var.set({})
        return

    current = dict(_context_var.get({}))
    for key in keys:
        current.pop(key, None)
    _context_var.set(current)


def get_context() -> Dict[str, Any]:
    """Copy of the current contextual fields."""
    return dict(_context_var.get({}))


def _detach_handlers() -> None:
    root = logging.getLogger()
    for handler in _handlers:
        root.removeHandler(handler)
        handler.close()
    _handlers.clear()


def shutdown() -> None:
    """Flush, close and detach the handlers installed by setup_logging().

    Call at the end of main(); a later setup_logging() starts fresh.
    """
    global _configured

    for handler in _handlers:
        handler.flush()
    _detach_handlers()
    _configured = False
