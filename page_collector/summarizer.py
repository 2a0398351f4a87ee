"""
Extractive summarization by term frequency.

Sentences are scored by summing, over their tokens, how often each token
occurs in the whole text. Scores are normalized against the best sentence
and the top sentences are returned in rank order.
"""

import re
import logging
from collections import Counter
from typing import List, NamedTuple, Optional

from page_collector.tokenizer import Tokenizer, get_tokenizer

logger = logging.getLogger(__name__)

SENTENCE_TERMINATORS = '。！？'
_SENTENCE_SPLIT_RE = re.compile(f"[{re.escape(SENTENCE_TERMINATORS)}]")


class Sentence(NamedTuple):
    text: str
    position: int


class ScoredSentence(NamedTuple):
    text: str
    position: int
    score: float


def split_sentences(text: str) -> List[Sentence]:
    """Split text into trimmed, non-empty sentences.

    Positions count every raw piece between terminators, including the
    empty ones that are dropped, so they reflect the place in the source.

    Args:
        text (str): Cleaned text

    Returns:
        List[Sentence]: Sentences in reading order
    """
    if not text:
        return []
    sentences = []
    for position, piece in enumerate(_SENTENCE_SPLIT_RE.split(text)):
        piece = piece.strip()
        if piece:
            sentences.append(Sentence(piece, position))
    return sentences


def term_frequencies(text: str, tokenizer: Tokenizer) -> Counter:
    """Count every token occurrence across the whole text."""
    return Counter(tokenizer.segment(text))


def score_sentences(sentences: List[Sentence], frequencies: Counter,
                    tokenizer: Tokenizer) -> List[ScoredSentence]:
    """Score sentences against the global term frequencies.

    The raw score of a sentence is the sum of the frequencies of its tokens.
    Raw scores are divided by the highest one so the best sentence scores
    1.0; when every raw score is 0 all scores are 0.0.

    Args:
        sentences (List[Sentence]): Sentences to score
        frequencies (Counter): Token counts over the whole text
        tokenizer (Tokenizer): Tokenizer used to build the frequencies

    Returns:
        List[ScoredSentence]: Sentences with scores in [0.0, 1.0], input order
    """
    raw_scores = []
    for sentence in sentences:
        raw_scores.append(sum(frequencies.get(token, 0) for token in tokenizer.segment(sentence.text)))

    max_score = max(raw_scores, default=0)

    scored = []
    for sentence, raw in zip(sentences, raw_scores):
        score = raw / max_score if max_score > 0 else 0.0
        scored.append(ScoredSentence(sentence.text, sentence.position, score))
    return scored


def rank_sentences(scored: List[ScoredSentence]) -> List[ScoredSentence]:
    """Order by score, highest first; equal scores keep the earlier sentence first."""
    return sorted(scored, key=lambda s: (-s.score, s.position))


def summarize(text: str, sentence_count: int, tokenizer: Optional[Tokenizer] = None) -> List[str]:
    """Pick the highest scoring sentences of a text.

    The result is in rank order, not reading order.

    Args:
        text (str): Cleaned plain text
        sentence_count (int): Maximum number of sentences to return
        tokenizer (Optional[Tokenizer]): Tokenizer to use, the shared one if None

    Returns:
        List[str]: Up to sentence_count sentences

    Raises:
        ValueError: If sentence_count is negative
    """
    if sentence_count < 0:
        raise ValueError(f"sentence_count must be non-negative, got {sentence_count}")

    sentences = split_sentences(text)
    if not sentences or sentence_count == 0:
        return []

    if tokenizer is None:
        tokenizer = get_tokenizer()

    frequencies = term_frequencies(text, tokenizer)
    ranked = rank_sentences(score_sentences(sentences, frequencies, tokenizer))

    logger.debug(f"Selected {min(sentence_count, len(ranked))} of {len(ranked)} sentences")
    return [s.text for s in ranked[:sentence_count]]
