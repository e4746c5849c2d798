#!/usr/bin/env python3
"""
Command-line interface for HN Thread.
"""

import asyncio
import sys
from typing import Optional

import fire  # type: ignore

from hn_thread.config import load_config
from hn_thread.context import HNContextProvider
from hn_thread.errors import HNThreadError
from hn_thread.logging_config import configure_logging
from hn_thread.request import error_response, handle_story_request


def fetch_story(
    story_id: str,
    depth: Optional[int] = None,
    limit: Optional[int] = None,
    config_path: str = "",
    log_level: str = "",
) -> None:
    """
    Print a Hacker News story and its comment trees as JSON.

    Args:
        story_id: The ID of the Hacker News story
        depth: Reply levels below each top-level comment (default 10)
        limit: Maximum number of top-level comments (default unlimited)
        config_path: Path to the TOML configuration file
        log_level: Overrides the configured log level
    """
    config = load_config(config_path)
    configure_logging(log_level or config["logging"]["level"])

    try:
        options = HNContextProvider.get_options_from_config(config)
        context = HNContextProvider.get_context_from_config(config)
    except HNThreadError as e:
        _, body = error_response(e)
        print(body)
        sys.exit(1)

    params = {}
    if depth is not None:
        params["depth"] = str(depth)
    if limit is not None:
        params["limit"] = str(limit)

    try:
        status, body = asyncio.run(
            handle_story_request(str(story_id), params, context, options)
        )
    finally:
        context.close()

    print(body)
    if status != 200:
        sys.exit(1)


def main() -> None:
    fire.Fire(fetch_story)


if __name__ == "__main__":
    main()
