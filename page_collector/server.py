"""
HTTP endpoint receiving page captures.

POST /save with {"content": "<JSON string of {url, title, html}>"} stores the
page and answers {"success": bool, "path": str|null, "error": str|null}.
"""

import json
import asyncio
import logging
from functools import partial
from typing import Dict, Any, Optional

from aiohttp import web

from page_collector.config import get_data_dir, get_max_body_size, get_summary_sentences
from page_collector.db import PageStoreError
from page_collector.pipeline import save_page
from page_collector.tokenizer import Tokenizer, get_tokenizer

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': '*',
    'Access-Control-Allow-Headers': '*',
}

DATA_DIR_KEY = web.AppKey('data_dir', str)
SENTENCE_COUNT_KEY = web.AppKey('sentence_count', int)
TOKENIZER_KEY = web.AppKey('tokenizer', Tokenizer)


class BadRequest(Exception):
    """Exception raised for save requests that cannot be decoded."""
    pass


def api_response(success: bool, path: Optional[str] = None, error: Optional[str] = None,
                 status: int = 200) -> web.Response:
    return web.json_response({'success': success, 'path': path, 'error': error}, status=status)


@web.middleware
async def cors_middleware(request: web.Request, handler) -> web.StreamResponse:
    """Allow requests from any origin, answering preflight requests directly."""
    if request.method == 'OPTIONS':
        return web.Response(headers=CORS_HEADERS)
    try:
        response = await handler(request)
    except web.HTTPException as e:
        e.headers.update(CORS_HEADERS)
        raise
    response.headers.update(CORS_HEADERS)
    return response


def parse_capture(payload: Any) -> Dict[str, Any]:
    """Decode the page capture carried in a save request body.

    Args:
        payload (Any): Decoded JSON request body

    Returns:
        Dict[str, Any]: The capture with url, title and html

    Raises:
        BadRequest: If the body or its content field is malformed
    """
    if not isinstance(payload, dict):
        raise BadRequest("Request body must be a JSON object")
    content = payload.get('content')
    if not isinstance(content, str):
        raise BadRequest("Missing 'content' field")
    try:
        capture = json.loads(content)
    except ValueError as e:
        raise BadRequest(f"Invalid page content JSON: {e}") from e
    if not isinstance(capture, dict):
        raise BadRequest("Page content must be a JSON object")
    return capture


async def save_handler(request: web.Request) -> web.Response:
    """Handle POST /save."""
    try:
        payload = await request.json()
    except web.HTTPRequestEntityTooLarge as e:
        logger.warning(f"Rejected oversized request: {e.text}")
        return api_response(False, error="Request body too large", status=413)
    except ValueError as e:
        return api_response(False, error=f"Invalid JSON body: {e}", status=400)

    try:
        capture = parse_capture(payload)
    except BadRequest as e:
        logger.warning(f"Bad save request: {e}")
        return api_response(False, error=str(e), status=400)

    app = request.app
    loop = asyncio.get_running_loop()
    try:
        path = await loop.run_in_executor(None, partial(
            save_page,
            capture,
            sentence_count=app[SENTENCE_COUNT_KEY],
            tokenizer=app[TOKENIZER_KEY],
            data_dir=app[DATA_DIR_KEY],
        ))
    except PageStoreError as e:
        logger.error(f"Failed to save {capture.get('url')!r}: {e}")
        return api_response(False, error=str(e), status=500)

    return api_response(True, path=path)


def create_app(data_dir: Optional[str] = None, sentence_count: Optional[int] = None,
               tokenizer: Optional[Tokenizer] = None, max_body_size: Optional[int] = None) -> web.Application:
    """Build the aiohttp application.

    Args:
        data_dir (Optional[str]): Directory for monthly databases
        sentence_count (Optional[int]): Summary length in sentences
        tokenizer (Optional[Tokenizer]): Tokenizer to use, the shared one if None
        max_body_size (Optional[int]): Maximum request body size in bytes

    Returns:
        web.Application: The configured application
    """
    app = web.Application(
        client_max_size=max_body_size if max_body_size is not None else get_max_body_size(),
        middlewares=[cors_middleware],
    )
    app[DATA_DIR_KEY] = data_dir or get_data_dir()
    app[SENTENCE_COUNT_KEY] = sentence_count if sentence_count is not None else get_summary_sentences()

    if tokenizer is None:
        # Loading the dictionary here makes a broken dictionary fatal at startup
        tokenizer = get_tokenizer()
    else:
        tokenizer.initialize()
    app[TOKENIZER_KEY] = tokenizer

    app.router.add_post('/save', save_handler)
    return app


def run_server(host: str, port: int, data_dir: Optional[str] = None,
               sentence_count: Optional[int] = None) -> None:
    """Serve until interrupted."""
    app = create_app(data_dir=data_dir, sentence_count=sentence_count)
    logger.info(f"Server running on http://{host}:{port}")
    web.run_app(app, host=host, port=port, print=None)
