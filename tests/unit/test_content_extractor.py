"""
Unit tests for page_collector.content_extractor module.
"""

import pytest

from page_collector.content_extractor import (
    extract_main_text, extract_title, normalize_whitespace,
    is_excluded, is_content
)
from bs4 import BeautifulSoup

from tests.fixtures.html_pages import (
    ARTICLE_PAGE, CHINESE_PAGE, NO_CONTENT_PAGE,
    ONLY_BOILERPLATE_PAGE, MALFORMED_PAGE
)


@pytest.mark.unit
def test_extract_skips_navigation():
    """Test that navigation text is dropped and paragraph text kept."""
    html = "<html><body><nav>Home</nav><p>Hello world.</p></body></html>"
    assert extract_main_text(html) == "Hello world."


@pytest.mark.unit
def test_extract_empty_input():
    """Test that empty input gives empty text."""
    assert extract_main_text("") == ""
    assert extract_main_text("   \n\t ") == ""


@pytest.mark.unit
def test_extract_article_page():
    """Test extracting a typical page with header, nav, sidebar and footer."""
    text = extract_main_text(ARTICLE_PAGE)

    assert text == (
        "Test Article Title "
        "This is the main content of the article. It contains important information. "
        "This is a second paragraph with additional details."
    )


@pytest.mark.unit
def test_extract_never_returns_script_or_style():
    """Test that script and style content never leaks into the text."""
    html = """
    <html><head><style>.x { color: blue; }</style></head>
    <body>
        <article>
            <p>Visible paragraph.</p>
            <script>var secret = "tracking";</script>
            <style>p { margin: 0; }</style>
            <noscript>Enable JavaScript</noscript>
        </article>
    </body></html>
    """
    text = extract_main_text(html)

    assert "Visible paragraph." in text
    assert "secret" not in text
    assert "tracking" not in text
    assert "margin" not in text
    assert "color" not in text
    assert "Enable JavaScript" not in text


@pytest.mark.unit
def test_extract_excludes_class_and_id_markers():
    """Test that boilerplate class and id names exclude whole subtrees."""
    html = """
    <body>
        <div id="header"><h1>Site Title</h1></div>
        <div class="menu"><p>Menu paragraph</p></div>
        <div class="ad"><p>Buy now</p></div>
        <div class="advertisement"><p>Special offer</p></div>
        <div class="nav"><p>Breadcrumbs</p></div>
        <div class="sidebar"><p>Related</p></div>
        <div class="footer"><p>Footer text</p></div>
        <div id="footer"><p>More footer</p></div>
        <p>Real content.</p>
    </body>
    """
    assert extract_main_text(html) == "Real content."


@pytest.mark.unit
def test_extract_boilerplate_marked_content_element():
    """Test that a content element carrying a boilerplate marker keeps its own text."""
    html = '<body><p class="ad">Sponsored</p><p>Story text.</p></body>'
    assert extract_main_text(html) == "Sponsored Story text."


@pytest.mark.unit
def test_extract_boilerplate_marked_container():
    """Test that a boilerplate-marked container is read once and still drops scripts."""
    html = (
        '<body><article class="sidebar"><p>Inner paragraph.</p>'
        '<script>var secret = 1;</script>Lead text.</article></body>'
    )
    assert extract_main_text(html) == "Inner paragraph. Lead text."


@pytest.mark.unit
def test_extract_unclosed_paragraphs():
    """Test that unclosed <p> tags give each paragraph exactly once."""
    html = "<html><body><p>First para.<p>Second para.<p>Third para.</body></html>"
    assert extract_main_text(html) == "First para. Second para. Third para."


@pytest.mark.unit
def test_extract_iframe_excluded():
    """Test that frame content is not collected."""
    html = '<body><p>Before.</p><iframe><p>Framed</p></iframe><p>After.</p></body>'
    text = extract_main_text(html)

    assert "Framed" not in text
    assert text == "Before. After."


@pytest.mark.unit
def test_extract_nested_content_elements():
    """Test that nested content elements each contribute their text."""
    html = "<body><article><p>Only paragraph.</p></article></body>"
    assert extract_main_text(html) == "Only paragraph. Only paragraph."


@pytest.mark.unit
def test_extract_content_class_containers():
    """Test that content class names are treated as content containers."""
    html = '<body><div class="post-content">Post body</div><div>Ignored div</div></body>'
    assert extract_main_text(html) == "Post body"


@pytest.mark.unit
def test_extract_fallback_to_body():
    """Test that the body is used when no content element matches."""
    text = extract_main_text(NO_CONTENT_PAGE)

    assert text == "Plain text in a div. More plain text."


@pytest.mark.unit
def test_extract_fallback_when_content_only_in_boilerplate():
    """Test the body fallback when every content element is boilerplate."""
    html = """
    <body>
        <nav><p>Navigation paragraph</p></nav>
        <div>Loose body text</div>
    </body>
    """
    assert extract_main_text(html) == "Loose body text"


@pytest.mark.unit
def test_extract_only_boilerplate():
    """Test that a page made only of boilerplate gives empty text."""
    assert extract_main_text(ONLY_BOILERPLATE_PAGE) == ""


@pytest.mark.unit
def test_extract_bare_fragment():
    """Test extracting from a fragment with no html or body element."""
    assert extract_main_text("just some text") == "just some text"
    assert extract_main_text("<div>text <script>x()</script>here</div>") == "text here"
    assert extract_main_text("<title>Only a title</title>") == ""


@pytest.mark.unit
def test_extract_normalizes_whitespace():
    """Test that whitespace runs collapse to single spaces."""
    html = "<body><p>  Hello\n\n   world\t again  </p><p>\n</p><h2> Next </h2></body>"
    assert extract_main_text(html) == "Hello world again Next"


@pytest.mark.unit
def test_extract_ignores_comments():
    """Test that HTML comments are not text."""
    html = "<body><p>Visible<!-- hidden comment --></p></body>"
    assert extract_main_text(html) == "Visible"


@pytest.mark.unit
def test_extract_head_title_not_included():
    """Test that the document title is not part of the main text."""
    html = "<html><head><title>Page Title</title></head><body><p>Body.</p></body></html>"
    assert extract_main_text(html) == "Body."


@pytest.mark.unit
def test_extract_malformed_html():
    """Test that malformed markup degrades gracefully."""
    text = extract_main_text(MALFORMED_PAGE)

    assert isinstance(text, str)
    assert "Unclosed" in text
    assert "bold text" in text
    assert "Second & third" in text


@pytest.mark.unit
def test_extract_garbage_input():
    """Test that arbitrary non-HTML input never raises."""
    for garbage in ["<<<>>>", "</p></div>", "<p", "&&&;;", "\x00\x01binary", "<![CDATA[x]]>"]:
        assert isinstance(extract_main_text(garbage), str)


@pytest.mark.unit
def test_extract_chinese_page():
    """Test extracting a page in a script without word delimiters."""
    text = extract_main_text(CHINESE_PAGE)

    assert text == "今天天气很好。明天也很好。后天会下雨。 天气很好的时候大家都出去玩。"


@pytest.mark.unit
def test_extract_is_deterministic():
    """Test that the same input always gives the same output."""
    assert extract_main_text(ARTICLE_PAGE) == extract_main_text(ARTICLE_PAGE)


@pytest.mark.unit
def test_selectors_match_expected_elements():
    """Test the boilerplate and content selectors on single elements."""
    soup = BeautifulSoup(
        '<nav></nav><div class="menu"></div><div id="header"></div>'
        '<article></article><div class="main"></div><h3></h3><div></div>',
        'lxml'
    )
    nav, menu, header, article, main, h3, div = soup.body.find_all(True)

    assert is_excluded(nav)
    assert is_excluded(menu)
    assert is_excluded(header)
    assert not is_excluded(article)
    assert is_content(article)
    assert is_content(main)
    assert is_content(h3)
    assert not is_content(div)
    assert not is_excluded(div)


@pytest.mark.unit
def test_normalize_whitespace():
    """Test whitespace normalization."""
    assert normalize_whitespace("  a \n b\t\tc  ") == "a b c"
    assert normalize_whitespace("") == ""
    assert normalize_whitespace("a　b") == "a b"


@pytest.mark.unit
def test_extract_title():
    """Test reading the document title."""
    assert extract_title(ARTICLE_PAGE) == "Test Article"
    assert extract_title(CHINESE_PAGE) == "天气新闻"
    assert extract_title("<html><body><p>No title</p></body></html>") is None
    assert extract_title("<title>  </title>") is None
    assert extract_title("") is None
