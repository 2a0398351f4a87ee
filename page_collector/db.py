"""
SQLite page store.

Pages are stored in one database file per calendar month,
<data_dir>/<YYYY>_<MM>_pages.db, each holding a single `pages` table.
"""

import os
import glob
import sqlite3
import logging
from datetime import datetime
from typing import List, Dict, Optional, Any

from page_collector.config import get_data_dir

logger = logging.getLogger(__name__)

DB_FILENAME_FORMAT = '{year}_{month:02d}_pages.db'


class PageStoreError(Exception):
    """Exception raised when a page cannot be stored or read."""
    pass


def get_db_path(year: int, month: int, data_dir: Optional[str] = None) -> str:
    """Get the database file path for a calendar month.

    Args:
        year (int): Four digit year
        month (int): Month number 1-12
        data_dir (Optional[str]): Data directory, the configured one if None

    Returns:
        str: Path of the monthly database file
    """
    if data_dir is None:
        data_dir = get_data_dir()
    return os.path.join(data_dir, DB_FILENAME_FORMAT.format(year=year, month=month))


def init_db(db_path: str) -> None:
    """Create the pages table if it doesn't exist."""
    conn = sqlite3.connect(db_path)
    try:
        conn.execute('''
        CREATE TABLE IF NOT EXISTS pages (
            id INTEGER PRIMARY KEY,
            url TEXT NOT NULL,
            title TEXT NOT NULL,
            html TEXT NOT NULL,
            summary TEXT NOT NULL,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP
        )
        ''')
        conn.commit()
    finally:
        conn.close()


def save_page_record(url: str, title: str, html: str, summary: str,
                     now: Optional[datetime] = None, data_dir: Optional[str] = None) -> str:
    """Insert a page into the database of the current month.

    Args:
        url (str): Page URL
        title (str): Page title
        html (str): Raw HTML, stored unmodified
        summary (str): Extractive summary of the page
        now (Optional[datetime]): Time used to pick the monthly database, local now if None
        data_dir (Optional[str]): Data directory, the configured one if None

    Returns:
        str: Path of the database the page was written to

    Raises:
        PageStoreError: If the data directory or database cannot be written
    """
    if now is None:
        now = datetime.now()
    db_path = get_db_path(now.year, now.month, data_dir)

    try:
        os.makedirs(os.path.dirname(db_path), exist_ok=True)
    except OSError as e:
        raise PageStoreError(f"Failed to create data directory: {e}") from e

    try:
        init_db(db_path)
        conn = sqlite3.connect(db_path)
        try:
            conn.execute(
                'INSERT INTO pages (url, title, html, summary) VALUES (?, ?, ?, ?)',
                (url, title, html, summary)
            )
            conn.commit()
        finally:
            conn.close()
    except sqlite3.Error as e:
        raise PageStoreError(f"Operation failed: {e}") from e

    logger.info(f"Saved page {url!r} to {db_path}")
    return db_path


def get_recent_pages(limit: int = 20, year: Optional[int] = None, month: Optional[int] = None,
                     data_dir: Optional[str] = None) -> List[Dict[str, Any]]:
    """Get the most recently stored pages of a month.

    Args:
        limit (int): Maximum number of pages to return
        year (Optional[int]): Year, current year if None
        month (Optional[int]): Month, current month if None
        data_dir (Optional[str]): Data directory, the configured one if None

    Returns:
        List[Dict[str, Any]]: Pages (without html), newest first; empty if the
        month has no database
    """
    now = datetime.now()
    db_path = get_db_path(year or now.year, month or now.month, data_dir)
    if not os.path.exists(db_path):
        return []

    try:
        conn = sqlite3.connect(db_path)
        conn.row_factory = sqlite3.Row
        try:
            cursor = conn.execute('''
            SELECT id, url, title, summary, created_at, length(html) AS html_length
            FROM pages
            ORDER BY id DESC
            LIMIT ?
            ''', (limit,))
            return [dict(row) for row in cursor.fetchall()]
        finally:
            conn.close()
    except sqlite3.Error as e:
        raise PageStoreError(f"Failed to read pages from {db_path}: {e}") from e


def get_page(page_id: int, db_path: str) -> Optional[Dict[str, Any]]:
    """Get a single stored page including its html, or None if missing."""
    try:
        conn = sqlite3.connect(db_path)
        conn.row_factory = sqlite3.Row
        try:
            row = conn.execute('SELECT * FROM pages WHERE id = ?', (page_id,)).fetchone()
        finally:
            conn.close()
    except sqlite3.Error as e:
        raise PageStoreError(f"Failed to read page {page_id} from {db_path}: {e}") from e
    return dict(row) if row else None


def list_databases(data_dir: Optional[str] = None) -> List[str]:
    """List the monthly database files present, oldest first."""
    if data_dir is None:
        data_dir = get_data_dir()
    return sorted(glob.glob(os.path.join(data_dir, '*_pages.db')))
