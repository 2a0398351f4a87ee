"""
Extraction -> summarization -> storage.
"""

import logging
from datetime import datetime
from typing import Dict, Any, NamedTuple, Optional

from page_collector.config import get_summary_sentences
from page_collector.content_extractor import extract_main_text
from page_collector.db import save_page_record
from page_collector.summarizer import summarize
from page_collector.tokenizer import Tokenizer

logger = logging.getLogger(__name__)


class PageDigest(NamedTuple):
    text: str
    summary: str


def digest_page(html: str, sentence_count: Optional[int] = None,
                tokenizer: Optional[Tokenizer] = None) -> PageDigest:
    """Extract the main text of a page and summarize it.

    Args:
        html (str): Raw HTML
        sentence_count (Optional[int]): Summary length in sentences, configured default if None
        tokenizer (Optional[Tokenizer]): Tokenizer to use, the shared one if None

    Returns:
        PageDigest: Cleaned text and the summary (sentences joined without separator)
    """
    if sentence_count is None:
        sentence_count = get_summary_sentences()
    text = extract_main_text(html)
    summary = ''.join(summarize(text, sentence_count, tokenizer))
    return PageDigest(text, summary)


def save_page(capture: Dict[str, Any], sentence_count: Optional[int] = None,
              tokenizer: Optional[Tokenizer] = None, data_dir: Optional[str] = None,
              now: Optional[datetime] = None) -> str:
    """Digest a captured page and store it.

    Args:
        capture (Dict[str, Any]): Page with 'url', 'title' and 'html'; missing fields are empty
        sentence_count (Optional[int]): Summary length in sentences
        tokenizer (Optional[Tokenizer]): Tokenizer to use, the shared one if None
        data_dir (Optional[str]): Data directory, the configured one if None
        now (Optional[datetime]): Time used to pick the monthly database

    Returns:
        str: Path of the database the page was written to

    Raises:
        PageStoreError: If the page cannot be stored
    """
    url = _as_text(capture.get('url'))
    title = _as_text(capture.get('title'))
    html = _as_text(capture.get('html'))

    digest = digest_page(html, sentence_count, tokenizer)
    logger.info(f"Digested {url!r}: {len(digest.text)} chars of text, {len(digest.summary)} chars of summary")

    return save_page_record(url, title, html, digest.summary, now=now, data_dir=data_dir)


def _as_text(value: Any) -> str:
    """Non-string field values are treated as missing."""
    return value if isinstance(value, str) else ''
