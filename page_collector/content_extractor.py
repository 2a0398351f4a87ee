"""
Main-content extraction from raw HTML.

The page is parsed with BeautifulSoup and walked top-down. Anything below an
element matching the boilerplate selector (scripts, navigation, headers,
footers, ads...) is pruned. Text is then collected from the remaining
article/content/paragraph/heading elements, or from the whole body when the
page has none of those.
"""

import logging
from typing import Iterator, List, Optional

import soupsieve
from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.builder import ParserRejectedMarkup
from bs4.element import PreformattedString

logger = logging.getLogger(__name__)

# Compiled at import time, a bad selector fails loudly before any request.
EXCLUDE_SELECTOR = soupsieve.compile(
    "script, style, nav, header, footer, #header, #footer, .header, .footer, "
    ".nav, .menu, .sidebar, .advertisement, .ad, iframe, noscript"
)

CONTENT_SELECTOR = soupsieve.compile(
    "article, .article, .content, .main, main, .post, .post-content, "
    "p, h1, h2, h3, h4, h5, h6"
)

# lxml closes unclosed <p> and friends the way browsers do
DEFAULT_PARSER = 'lxml'


def is_excluded(element: Tag) -> bool:
    """Check whether an element is boilerplate."""
    return EXCLUDE_SELECTOR.match(element)


def is_content(element: Tag) -> bool:
    """Check whether an element is a likely main-content container."""
    return CONTENT_SELECTOR.match(element)


def _child_tags(element: Tag) -> List[Tag]:
    return [child for child in element.contents if isinstance(child, Tag)]


def _iter_kept_elements(root: Tag) -> Iterator[Tag]:
    """Yield the elements below root that have no excluded ancestor, in document order.

    An excluded element is yielded itself, but the walk never descends
    into it.
    """
    stack = list(reversed(_child_tags(root)))
    while stack:
        element = stack.pop()
        yield element
        if not is_excluded(element):
            stack.extend(reversed(_child_tags(element)))


def _element_text(element: Tag) -> List[str]:
    """Collect the trimmed, non-empty text nodes of an element.

    Text inside excluded descendants is skipped. Comments, doctypes and
    other markup declarations are not text.
    """
    fragments = []
    stack = list(reversed(element.contents))
    while stack:
        node = stack.pop()
        if isinstance(node, Tag):
            if not is_excluded(node):
                stack.extend(reversed(node.contents))
        elif isinstance(node, NavigableString) and not isinstance(node, PreformattedString):
            text = node.strip()
            if text:
                fragments.append(text)
    return fragments


def _content_fragments(soup: BeautifulSoup) -> List[str]:
    """Text of every content element that lies outside boilerplate.

    Nested content elements (an <article> holding <p> elements) each
    contribute their own text. A content element that matches the
    boilerplate selector itself, like <p class="ad">, still counts as
    long as none of its ancestors does.
    """
    fragments = []
    for element in _iter_kept_elements(soup):
        if is_content(element):
            fragments.extend(_element_text(element))
    return fragments


def _body_fragments(soup: BeautifulSoup) -> List[str]:
    """Text of the whole body with boilerplate subtrees removed."""
    body = soup.body
    # lxml leaves <body> out of documents with nothing to put in it
    if body is None or is_excluded(body):
        return []
    return _element_text(body)


def normalize_whitespace(text: str) -> str:
    """Collapse all runs of whitespace to single spaces and trim."""
    return ' '.join(text.split())


def extract_main_text(html: str, parser: str = DEFAULT_PARSER) -> str:
    """Extract the readable main text of an HTML page.

    Args:
        html (str): Raw HTML, possibly malformed
        parser (str): BeautifulSoup tree builder to parse with

    Returns:
        str: Whitespace-normalized plain text, empty if nothing was found
    """
    if not html or not html.strip():
        return ""

    try:
        soup = BeautifulSoup(html, parser)
    except ParserRejectedMarkup as e:
        logger.warning(f"Could not parse HTML: {e}")
        return ""

    fragments = _content_fragments(soup)
    if not fragments:
        logger.debug("No content elements found, falling back to body text")
        fragments = _body_fragments(soup)

    return normalize_whitespace(' '.join(fragments))


def extract_title(html: str, parser: str = DEFAULT_PARSER) -> Optional[str]:
    """Get the document <title> text, or None if the page has none.

    Args:
        html (str): Raw HTML
        parser (str): BeautifulSoup tree builder to parse with

    Returns:
        Optional[str]: Whitespace-normalized title
    """
    if not html:
        return None
    soup = BeautifulSoup(html, parser)
    if soup.title is None:
        return None
    title = normalize_whitespace(soup.title.get_text())
    return title or None
