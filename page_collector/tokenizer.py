"""
Word segmentation backed by jieba.

jieba segments text in scripts without explicit word delimiters (Chinese)
and passes delimited text, whitespace and punctuation through as their own
tokens, so the tokens of a string always cover the whole string.
"""

import logging
import threading
from typing import List, Optional

import jieba

from page_collector.config import get_user_dict

logger = logging.getLogger(__name__)

# jieba logs its dictionary cache handling at DEBUG on its own handler
jieba.setLogLevel(logging.WARNING)


class TokenizerError(Exception):
    """Exception raised when the segmentation dictionary cannot be loaded."""
    pass


class Tokenizer:
    """A thin wrapper around a jieba tokenizer instance.

    The dictionary is loaded on the first call to initialize() or segment(),
    after which the instance is read-only and safe to share between threads.
    """

    def __init__(self, dictionary: Optional[str] = None, user_dict: Optional[str] = None):
        """Create a tokenizer.

        Args:
            dictionary (Optional[str]): Path to a main dictionary, jieba's bundled one if None
            user_dict (Optional[str]): Path to an additional user dictionary
        """
        if dictionary:
            self._jieba = jieba.Tokenizer(dictionary=dictionary)
        else:
            self._jieba = jieba.Tokenizer()
        self.user_dict = user_dict
        self._initialized = False
        self._lock = threading.Lock()

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        """Load the dictionary (and user dictionary) once.

        Raises:
            TokenizerError: If a dictionary cannot be loaded
        """
        if self._initialized:
            return
        with self._lock:
            if self._initialized:
                return
            logger.info("Initializing jieba tokenizer...")
            try:
                self._jieba.initialize()
                if self.user_dict:
                    logger.info(f"Loading user dictionary from {self.user_dict}")
                    self._jieba.load_userdict(self.user_dict)
            except (OSError, ValueError) as e:
                raise TokenizerError(f"Failed to load segmentation dictionary: {e}") from e
            self._initialized = True

    def segment(self, text: str) -> List[str]:
        """Split text into word tokens.

        Args:
            text (str): Text to segment

        Returns:
            List[str]: Tokens in input order; joined they reproduce the input
        """
        if not text:
            return []
        self.initialize()
        return self._jieba.lcut(text, cut_all=False, HMM=False)


_shared_tokenizer: Optional[Tokenizer] = None
_shared_lock = threading.Lock()


def get_tokenizer() -> Tokenizer:
    """Get the process-wide tokenizer, initializing it on first use.

    Returns:
        Tokenizer: The shared, fully initialized tokenizer

    Raises:
        TokenizerError: If the dictionary cannot be loaded
    """
    global _shared_tokenizer
    if _shared_tokenizer is None:
        with _shared_lock:
            if _shared_tokenizer is None:
                tokenizer = Tokenizer(user_dict=get_user_dict())
                tokenizer.initialize()
                _shared_tokenizer = tokenizer
    return _shared_tokenizer
