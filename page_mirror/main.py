#!/usr/bin/env python3
"""
Page Mirror - save a single web page and its images for offline viewing.

Fetches one page, downloads every image it references, rewrites the
image references to the local copies and stores everything under
<output>/<host>/.

Usage:
    python -m page_mirror.main https://example.com/docs/index.html
    python -m page_mirror.main example.com --output ./mirrors -v
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import List, Optional

from page_mirror.mirror import PageMirror, MirrorResult, MirrorState
from page_mirror.utils.constants import (
    DEFAULT_CONCURRENCY,
    DEFAULT_STORAGE_ROOT,
    DEFAULT_TIMEOUT,
    DEFAULT_USER_AGENT,
)
from page_mirror.utils.log import (
    setup_logger,
    print_error,
    print_info,
    print_success,
    print_warning,
)


def build_parser() -> argparse.ArgumentParser:
    """
    Build the command line parser.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog='page-mirror',
        description='Save a web page and its images for offline viewing',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s https://example.com/about.html
    %(prog)s example.com --output ./mirrors
    %(prog)s https://example.com -c 4 --timeout 10 -v
        """
    )

    parser.add_argument(
        'url',
        nargs='?',
        help='URL or host name of the page to save (e.g., example.com)'
    )

    parser.add_argument(
        '--output', '-o',
        type=str,
        default=DEFAULT_STORAGE_ROOT,
        help=f'Root folder for saved sites (default: {DEFAULT_STORAGE_ROOT})'
    )

    parser.add_argument(
        '--timeout', '-t',
        type=int,
        default=DEFAULT_TIMEOUT,
        help=f'Request timeout in seconds (default: {DEFAULT_TIMEOUT})'
    )

    parser.add_argument(
        '--concurrency', '-c',
        type=int,
        default=DEFAULT_CONCURRENCY,
        help=f'Maximum concurrent image downloads (default: {DEFAULT_CONCURRENCY})'
    )

    parser.add_argument(
        '--user-agent',
        type=str,
        default=DEFAULT_USER_AGENT,
        help='User agent sent with every request'
    )

    parser.add_argument(
        '--log-file',
        type=str,
        default=None,
        help='Also write log messages to this file'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Suppress output except errors'
    )

    return parser


def print_summary(result: MirrorResult) -> None:
    """
    Print the mirror summary.

    Args:
        result: MirrorResult object
    """
    print("\n" + "=" * 60)
    print_success("MIRROR SUMMARY")
    print("=" * 60)
    print(f"  Page:            {result.page_path}")
    print(f"  Images found:    {result.images_found}")
    print(f"  Images saved:    {result.images_saved}")
    print(f"  Images failed:   {len(result.failures)}")
    print(f"  Duration:        {result.duration_seconds:.1f} seconds")
    print("=" * 60 + "\n")


async def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the page mirror.

    Args:
        argv: Command line arguments (default: sys.argv[1:])

    Returns:
        Exit code (0 for success or usage, 1 for error)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.url is None:
        parser.print_usage()
        return 0

    log_level = logging.DEBUG if args.verbose else (logging.WARNING if args.quiet else logging.INFO)
    setup_logger(level=log_level, log_file=args.log_file)

    if not args.quiet:
        print_info(f"Target: {args.url}")
        print_info(f"Output: {os.path.abspath(args.output)}")

    mirror = PageMirror(
        storage_root=args.output,
        timeout=args.timeout,
        concurrency=args.concurrency,
        user_agent=args.user_agent
    )

    try:
        result = await mirror.mirror(args.url)
    except KeyboardInterrupt:
        print_error("\nMirror interrupted by user")
        return 1

    if not result.ok:
        if result.failed_stage is MirrorState.VALIDATING:
            print_error(f"Invalid input: {result.error.cause} ({args.url})")
        else:
            print_error(f"Mirror failed while {result.failed_stage.value}: {result.error.cause}")
        return 1

    if not args.quiet:
        print_summary(result)
        for failure in result.failures:
            print_warning(f"Image not saved: {failure.target}")

    print_success(f"{result.target.page_name} is saved to folder {os.path.abspath(result.target.host_folder)}")

    return 0


def run() -> None:
    """Entry point wrapper for running as module."""
    sys.exit(asyncio.run(main()))


if __name__ == '__main__':
    run()
