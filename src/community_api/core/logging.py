"""Loguru setup shared by the API server and the CLI.

Everything goes to stderr. With a ``log_dir`` the same stream is also
written to ``community-api.log``, and catalogue-changing events (bulk
imports, tech deletions, role changes) logged through :data:`audit_logger`
are copied to ``community-api-audit.log``.
"""

import sys
from pathlib import Path

from loguru import logger

_CONSOLE_FORMAT = "<green>{time:HH:mm:ss.SSS}</green> | <level>{level:<8}</level> | {name}:{line} | {message}"
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} | {message}"

audit_logger = logger.bind(audit=True)


def _is_audit(record) -> bool:
    return record["extra"].get("audit", False)


def setup_logging(log_level: str = "INFO", log_dir: str | None = None) -> None:
    """Replace Loguru's default handler with this application's sinks.

    Safe to call more than once; each call starts from a clean slate.

    Args:
        log_level: Minimum level, case-insensitive.
        log_dir: Directory for the application and audit log files.
            Created if missing. Files rotate daily; application logs
            are kept 7 days, audit logs 90 days.
    """
    level = log_level.upper()
    logger.remove()
    logger.add(sys.stderr, level=level, format=_CONSOLE_FORMAT, colorize=sys.stderr.isatty())

    if not log_dir:
        return

    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    logger.add(
        directory / "community-api.log",
        level=level,
        format=_FILE_FORMAT,
        rotation="00:00",
        retention="7 days",
    )
    logger.add(
        directory / "community-api-audit.log",
        level="INFO",
        format=_FILE_FORMAT,
        filter=_is_audit,
        rotation="00:00",
        retention="90 days",
    )
