"""Logging utilities for the GitHub branch migration tool."""

import os
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

DEFAULT_FORMAT = (
    '<green>{time:YYYY-MM-DD HH:mm:ss}</green> | '
    '<level>{level: <8}</level> | '
    '<cyan>{extra[component]}</cyan>{extra[repo_label]} | '
    '<level>{message}</level>'
)

FILE_FORMAT = (
    '{time:YYYY-MM-DD HH:mm:ss} | '
    '{level: <8} | '
    '{extra[component]}{extra[repo_label]} | '
    '{message}'
)


def _add_repo_label(record) -> None:
    extra = record['extra']
    extra.setdefault('component', record['name'])
    repo = extra.get('repo')
    extra['repo_label'] = f' [{repo}]' if repo else ''


FALLBACK_LEVEL = 'INFO'

# Level names loguru does not define
LEVEL_ALIASES = {
    'NOTICE': 'SUCCESS',
    'WARN': 'WARNING',
}


def normalize_level(value: str) -> str:
    """Upper-case ``value`` and translate aliases to loguru level names."""
    name = value.strip().upper()
    return LEVEL_ALIASES.get(name, name)


def resolve_level(value: Optional[str]) -> str:
    """Return the loguru level for ``value``, or INFO if it is unknown."""
    if not value or not value.strip():
        return FALLBACK_LEVEL

    name = normalize_level(value)
    try:
        logger.level(name)
    except ValueError:
        return FALLBACK_LEVEL
    return name


def default_level() -> str:
    """Minimum severity from ``LOG_LEVEL``, falling back to INFO."""
    return resolve_level(os.getenv('LOG_LEVEL'))


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    log_format: Optional[str] = None,
) -> None:
    """Setup logging configuration using loguru.

    Args:
        level: Log level (TRACE, DEBUG, INFO, SUCCESS, WARNING, ERROR, CRITICAL);
            defaults to the ``LOG_LEVEL`` environment variable. Unknown
            names fall back to INFO.
        log_file: Optional log file path
        log_format: Optional custom log format
    """
    requested = level or os.getenv('LOG_LEVEL')
    level = resolve_level(level) if level else default_level()

    # Remove default handler
    logger.remove()
    logger.configure(patcher=_add_repo_label)

    logger.add(
        sys.stderr,
        format=log_format or DEFAULT_FORMAT,
        level=level,
        colorize=True,
        backtrace=True,
        diagnose=False,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_file,
            format=FILE_FORMAT,
            level=level,
            rotation='10 MB',
            retention='30 days',
            compression='gz',
            backtrace=True,
            diagnose=False,
        )

    if requested and requested.strip() and normalize_level(requested) != level:
        logger.warning(f'Unknown log level {requested!r}, using {level}')
    logger.debug(f'Logging initialized with level: {level}')
    if log_file:
        logger.debug(f'Log file: {log_file}')
