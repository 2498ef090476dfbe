"""
Logging setup for deploy-everything.

main.py calls setup_logging() once per invocation; library code only
ever does ``logger = logging.getLogger(__name__)``.

Console verbosity comes from the CLI flags (--debug, -v, -q), then the
EVERYTHING_LOG_LEVEL env var, then WARNING. A run can additionally be
mirrored to a file with EVERYTHING_LOG_FILE (level from
EVERYTHING_LOG_FILE_LEVEL, console level otherwise).
"""

from __future__ import annotations

import logging
import sys

# Console layouts, picked by verbosity
_CONSOLE_LAYOUTS: dict[int, tuple[str, str | None]] = {
    logging.DEBUG: ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s", "%H:%M:%S"),
    logging.INFO: ("%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
}
_CONSOLE_DEFAULT_LAYOUT = ("%(message)s", None)

# File output keeps full detail regardless of console level
_FILE_FORMAT = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Engine/provider libraries that log every RPC at INFO
_NOISY_LOGGERS = ("urllib3", "web3", "asyncio")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Install console (stderr) and optional file handlers on the root logger.

    Args:
        level: Console level name.
        log_file: Optional file to mirror log records to.
        log_file_level: Level for the file handler (default: ``level``).
        quiet_third_party: Hold ``_NOISY_LOGGERS`` at WARNING unless the
            console is at DEBUG.
    """
    console_level = _parse_level(level)
    handlers: list[logging.Handler] = [_console_handler(console_level)]

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setLevel(file_level)
        handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
        handlers.append(handler)

    root = logging.getLogger()
    root.handlers.clear()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(min(h.level for h in handlers))

    if quiet_third_party and console_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def resolve_level(debug: bool, verbose: bool, quiet: bool, env_level: str | None) -> str:
    """Pick the console level from CLI flags, falling back to the env var."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return env_level or "WARNING"


def _console_handler(level: int) -> logging.Handler:
    layout = _CONSOLE_DEFAULT_LAYOUT
    for threshold in sorted(_CONSOLE_LAYOUTS):
        if level <= threshold:
            layout = _CONSOLE_LAYOUTS[threshold]
            break

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(layout[0], datefmt=layout[1]))
    return handler


def _parse_level(level: str | None) -> int:
    """Level name → numeric level; unknown names mean WARNING."""
    numeric = getattr(logging, level.upper(), None) if level else None
    return numeric if isinstance(numeric, int) else logging.WARNING
