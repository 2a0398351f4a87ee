#!/usr/bin/env python3

import sys
import os
import argparse
from typing import Dict, Any

# Add the parent directory to the path so we can import our modules
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from page_collector.config import configure_logging, get_host, get_port, get_data_dir
from page_collector.config import get_server_url, get_summary_sentences
from page_collector.db import get_recent_pages, list_databases, PageStoreError
from page_collector.pipeline import digest_page
from page_collector.collector import collect_url, CollectorError
from page_collector.tokenizer import TokenizerError


def format_page(page: Dict[str, Any]) -> str:
    """Format a stored page for console output.

    Args:
        page (Dict[str, Any]): Page row from the database

    Returns:
        str: Formatted page string
    """
    title = page.get('title') or 'No title'
    output = f"\n{title}\n"
    output += f"ID: {page.get('id', 'unknown')} | Saved: {page.get('created_at', 'unknown')}"
    if page.get('html_length') is not None:
        output += f" | HTML: {page['html_length']} chars"
    output += "\n"
    if page.get('url'):
        output += f"URL: {page['url']}\n"
    if page.get('summary'):
        output += f"Summary: {page['summary']}\n"
    return output


def cmd_serve(args: argparse.Namespace) -> int:
    """Handle the 'serve' subcommand."""
    # Imported here so the other commands don't need aiohttp loaded
    from page_collector.server import run_server

    print(f"Storing pages in {args.data_dir}")
    run_server(args.host, args.port, data_dir=args.data_dir, sentence_count=args.sentences)
    return 0


def cmd_digest(args: argparse.Namespace) -> int:
    """Handle the 'digest' subcommand."""
    if args.file and args.file != '-':
        with open(args.file, 'r', encoding='utf-8') as f:
            html = f.read()
    else:
        html = sys.stdin.read()

    digest = digest_page(html, sentence_count=args.sentences)

    if args.summary_only:
        print(digest.summary)
        return 0

    print(f"Text ({len(digest.text)} chars):")
    print(digest.text)
    print(f"\nSummary ({args.sentences} sentences max):")
    print(digest.summary)
    return 0


def cmd_collect(args: argparse.Namespace) -> int:
    """Handle the 'collect' subcommand."""
    print(f"Collecting {args.url}...")
    path = collect_url(args.url, server_url=args.server_url)
    if path is None:
        print("URL host is whitelisted, nothing was sent.")
    else:
        print(f"Done! Page stored in {path}")
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    """Handle the 'show' subcommand."""
    pages = get_recent_pages(limit=args.limit, year=args.year, month=args.month, data_dir=args.data_dir)
    if not pages:
        print("No pages stored for that month.")
        databases = list_databases(args.data_dir)
        if databases:
            print("Available databases:")
            for path in databases:
                print(f"  {path}")
        return 0

    print(f"Showing {len(pages)} most recent pages:")
    for page in pages:
        print(format_page(page))
    return 0


def main() -> int:
    """Main entry point for the program.

    Returns:
        int: Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        description='Web page collector with extractive summaries',
        epilog='Run "serve" to accept pages from the browser extension'
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Common arguments
    storage_parser = argparse.ArgumentParser(add_help=False)
    storage_parser.add_argument('--data-dir', type=str, default=get_data_dir(),
                                help='Directory holding the monthly page databases')

    summary_parser = argparse.ArgumentParser(add_help=False)
    summary_parser.add_argument('--sentences', type=int, default=get_summary_sentences(),
                                help='Number of sentences in a summary (default: %(default)s)')

    # 'serve' command
    serve_parser = subparsers.add_parser('serve', parents=[storage_parser, summary_parser],
                                         help='Run the page saving HTTP server')
    serve_parser.add_argument('--host', type=str, default=get_host(),
                              help='Address to bind (default: %(default)s)')
    serve_parser.add_argument('--port', type=int, default=get_port(),
                              help='Port to listen on (default: %(default)s)')
    serve_parser.set_defaults(func=cmd_serve)

    # 'digest' command
    digest_parser = subparsers.add_parser('digest', parents=[summary_parser],
                                          help='Print the main text and summary of an HTML file')
    digest_parser.add_argument('file', nargs='?',
                               help='HTML file to read (default: stdin)')
    digest_parser.add_argument('--summary-only', action='store_true',
                               help='Only print the summary')
    digest_parser.set_defaults(func=cmd_digest)

    # 'collect' command
    collect_parser = subparsers.add_parser('collect',
                                           help='Fetch a URL and send it to the server')
    collect_parser.add_argument('url', type=str, help='URL of the page to collect')
    collect_parser.add_argument('--server-url', type=str, default=get_server_url(),
                                help='Save endpoint (default: %(default)s)')
    collect_parser.set_defaults(func=cmd_collect)

    # 'show' command
    show_parser = subparsers.add_parser('show', parents=[storage_parser],
                                        help='List recently stored pages')
    show_parser.add_argument('--limit', type=int, default=20,
                             help='Maximum number of pages to list (default: 20)')
    show_parser.add_argument('--year', type=int,
                             help='Year of the database to read (default: current)')
    show_parser.add_argument('--month', type=int, choices=range(1, 13), metavar='MONTH',
                             help='Month of the database to read (default: current)')
    show_parser.set_defaults(func=cmd_show)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    if getattr(args, 'sentences', 0) < 0:
        print("Error: --sentences must be zero or more")
        return 1

    configure_logging()

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.")
        return 1
    except (CollectorError, PageStoreError, TokenizerError, OSError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
