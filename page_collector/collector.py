"""
Page collector client.

Fetches a page, skips whitelisted hosts and submits the capture to the save
endpoint, the same way the browser extension posts the pages it visits.
"""

import json
import logging
from typing import Dict, List, Optional, Tuple, Any
from urllib.parse import urlparse

import backoff
import requests

from page_collector.config import get_server_url, get_whitelist
from page_collector.content_extractor import extract_title

logger = logging.getLogger(__name__)

USER_AGENT = 'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'

RETRY_STATUS_CODES = (429, 500, 502, 503, 504)


class CollectorError(Exception):
    """Base class for errors while collecting a page."""
    def __init__(self, url, error_type, message, status_code=None):
        self.url = url
        self.error_type = error_type
        self.status_code = status_code
        self.message = message
        super().__init__(self.message)

    def __str__(self):
        return f"{self.error_type} for {self.url}: {self.message} (status: {self.status_code})"


class ContentFetchError(CollectorError):
    """Exception raised when a page cannot be fetched."""


class PageSubmitError(CollectorError):
    """Exception raised when the save endpoint does not store a capture."""


def _is_transient(e: ContentFetchError) -> bool:
    if e.error_type in ('Timeout', 'ConnectionError'):
        return True
    return e.status_code in RETRY_STATUS_CODES


def _log_retry(details: Dict[str, Any]) -> None:
    logger.info(f"Retry {details['tries']} for {details['args'][0]} in {details['wait']:.2f}s")


def is_whitelisted(url: str, whitelist: Optional[List[str]] = None) -> bool:
    """Check whether a URL's host matches a whitelist entry.

    Matching is by substring, so '192.168' covers a whole local network.
    """
    if whitelist is None:
        whitelist = get_whitelist()
    hostname = urlparse(url).hostname or ''
    return any(entry in hostname for entry in whitelist)


def _get(url: str, timeout: int) -> requests.Response:
    """GET a URL, translating requests errors into ContentFetchError."""
    headers = {
        'User-Agent': USER_AGENT,
        'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9',
        'Accept-Language': 'en-US,en;q=0.9,zh-CN;q=0.8',
    }
    try:
        response = requests.get(url, headers=headers, timeout=timeout)
        response.raise_for_status()
        return response
    except requests.exceptions.Timeout:
        raise ContentFetchError(url, "Timeout", f"Request timed out after {timeout}s")
    except requests.exceptions.TooManyRedirects:
        raise ContentFetchError(url, "TooManyRedirects", "Too many redirects")
    except requests.exceptions.ConnectionError as e:
        raise ContentFetchError(url, "ConnectionError", str(e))
    except requests.exceptions.HTTPError as e:
        raise ContentFetchError(url, "HTTPError", str(e), status_code=e.response.status_code)


@backoff.on_exception(
    backoff.expo,
    ContentFetchError,
    max_tries=3,
    giveup=lambda e: not _is_transient(e),
    on_backoff=_log_retry,
    factor=1,
    max_value=10,
    jitter=backoff.full_jitter
)
def fetch_page(url: str, timeout: int = 10) -> Tuple[str, str]:
    """Fetch a page's HTML and title.

    Timeouts, connection errors and 429/5xx responses are retried with
    exponential backoff.

    Args:
        url (str): The URL to fetch
        timeout (int): Request timeout in seconds

    Returns:
        Tuple[str, str]: The HTML and the page title (the URL if the page has none)

    Raises:
        ContentFetchError: When the page cannot be fetched
    """
    parsed_url = urlparse(url or '')
    if parsed_url.scheme not in ('http', 'https') or not parsed_url.netloc:
        raise ContentFetchError(url, "InvalidURL", "URL is missing scheme or domain")

    logger.info(f"Fetching {url}")
    response = _get(url, timeout)
    html = response.text
    title = extract_title(html) or url
    return html, title


def submit_page(capture: Dict[str, str], server_url: Optional[str] = None, timeout: int = 30) -> Dict[str, Any]:
    """Post a page capture to the save endpoint.

    Args:
        capture (Dict[str, str]): Page with url, title and html
        server_url (Optional[str]): Save endpoint, the configured one if None
        timeout (int): Request timeout in seconds

    Returns:
        Dict[str, Any]: The decoded server response

    Raises:
        PageSubmitError: When the request fails or the server reports a failure
    """
    if server_url is None:
        server_url = get_server_url()
    url = capture.get('url', '')

    body = {'content': json.dumps(capture, ensure_ascii=False, indent=2)}
    try:
        response = requests.post(server_url, json=body, timeout=timeout)
    except requests.exceptions.RequestException as e:
        raise PageSubmitError(url, "SubmitError", str(e))

    try:
        result = response.json()
    except ValueError:
        raise PageSubmitError(url, "SubmitError", "Server returned a non-JSON response",
                              status_code=response.status_code)

    if not result.get('success'):
        raise PageSubmitError(url, "SaveFailed", result.get('error') or 'Unknown error',
                              status_code=response.status_code)

    logger.info(f"Saved {url} to {result.get('path')}")
    return result


def collect_url(url: str, server_url: Optional[str] = None,
                whitelist: Optional[List[str]] = None) -> Optional[str]:
    """Fetch a page and submit it unless its host is whitelisted.

    Args:
        url (str): The URL to collect
        server_url (Optional[str]): Save endpoint, the configured one if None
        whitelist (Optional[List[str]]): Hosts to skip, the configured ones if None

    Returns:
        Optional[str]: Path of the database the page was stored in, None if skipped

    Raises:
        ContentFetchError: When the page cannot be fetched
        PageSubmitError: When the page cannot be saved
    """
    if is_whitelisted(url, whitelist):
        logger.info(f"Skipping whitelisted URL {url}")
        return None

    html, title = fetch_page(url)
    result = submit_page({'url': url, 'title': title, 'html': html}, server_url)
    return result.get('path')
