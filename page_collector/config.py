"""
Runtime settings for page-collector.

Every value can be overridden through an environment variable; CLI flags in
turn override the environment.
"""

import os
import logging
from typing import List, Optional

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'data')
DEFAULT_HOST = '0.0.0.0'
DEFAULT_PORT = 3020
DEFAULT_MAX_BODY = 10 * 1024 * 1024  # 10 MB
DEFAULT_SUMMARY_SENTENCES = 2
DEFAULT_SERVER_URL = 'http://127.0.0.1:3020/save'

# Hosts whose pages are never submitted by the collector
DEFAULT_WHITELIST = [
    'localhost',
    '127.0.0.1',
    '192.168',
    'test.com',
]

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _get_int(name: str, default: int) -> int:
    """Read an integer environment variable, falling back to the default on bad input."""
    raw = os.environ.get(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid integer for {name}: {raw!r}, using default {default}")
        return default


def get_data_dir() -> str:
    return os.environ.get('PAGE_COLLECTOR_DATA_DIR', DEFAULT_DATA_DIR)


def get_host() -> str:
    return os.environ.get('PAGE_COLLECTOR_HOST', DEFAULT_HOST)


def get_port() -> int:
    return _get_int('PAGE_COLLECTOR_PORT', DEFAULT_PORT)


def get_max_body_size() -> int:
    return _get_int('PAGE_COLLECTOR_MAX_BODY', DEFAULT_MAX_BODY)


def get_summary_sentences() -> int:
    """Number of sentences kept in a stored summary."""
    count = _get_int('PAGE_COLLECTOR_SUMMARY_SENTENCES', DEFAULT_SUMMARY_SENTENCES)
    if count < 0:
        logger.warning(f"Negative summary sentence count {count}, using default {DEFAULT_SUMMARY_SENTENCES}")
        return DEFAULT_SUMMARY_SENTENCES
    return count


def get_server_url() -> str:
    return os.environ.get('PAGE_COLLECTOR_SERVER_URL', DEFAULT_SERVER_URL)


def get_whitelist() -> List[str]:
    """Get the host whitelist as a list of non-empty entries."""
    raw = os.environ.get('PAGE_COLLECTOR_WHITELIST')
    if raw is None:
        return list(DEFAULT_WHITELIST)
    return [entry.strip() for entry in raw.split(',') if entry.strip()]


def get_user_dict() -> Optional[str]:
    """Optional path to a jieba user dictionary."""
    return os.environ.get('PAGE_COLLECTOR_USER_DICT') or None


def configure_logging(level: int = logging.INFO) -> None:
    """Configure root logging for the command line entry points."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
