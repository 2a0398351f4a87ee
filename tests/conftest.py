"""
Global test fixtures for the page-collector project.
"""

import os
import sys
import pytest
from datetime import datetime
from typing import Iterator, Dict, Any

# Add the parent directory to the path so we can import our modules
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from page_collector.tokenizer import Tokenizer, get_tokenizer
from tests.fixtures.fake_tokenizer import CharTokenizer, WordTokenizer
from tests.fixtures.html_pages import ARTICLE_PAGE


@pytest.fixture(scope="session")
def jieba_tokenizer() -> Tokenizer:
    """
    The shared jieba tokenizer. Loading the dictionary is slow, so it is
    done once per test session.
    """
    return get_tokenizer()


@pytest.fixture
def char_tokenizer() -> CharTokenizer:
    """
    A tokenizer that splits text into single characters.
    """
    return CharTokenizer()


@pytest.fixture
def word_tokenizer() -> WordTokenizer:
    """
    A tokenizer that splits text on whitespace.
    """
    return WordTokenizer()


@pytest.fixture
def data_dir(tmp_path, monkeypatch) -> Iterator[str]:
    """
    A temporary data directory, also set as the configured one.
    """
    path = str(tmp_path / "data")
    monkeypatch.setenv("PAGE_COLLECTOR_DATA_DIR", path)
    yield path


@pytest.fixture
def fixed_now() -> datetime:
    """
    A fixed save time, so the monthly database name is predictable.
    """
    return datetime(2024, 3, 15, 10, 30, 0)


@pytest.fixture
def sample_capture() -> Dict[str, Any]:
    """
    Returns a sample page capture as sent by the browser extension.
    """
    return {
        "url": "https://example.com/articles/test",
        "title": "Test Article",
        "html": ARTICLE_PAGE,
    }
