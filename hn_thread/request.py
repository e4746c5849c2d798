"""
Request surface: turns a raw story request into an aggregate call and its
result (or error) into a JSON response body.
"""

import json
from dataclasses import dataclass
from typing import Mapping, Optional

from hn_thread.errors import HNThreadError, InvalidInputError
from hn_thread.hn import HNContext
from hn_thread.workflow import AggregateOptions, StoryAggregator


@dataclass(frozen=True)
class StoryRequest:
    story_id: int
    depth: Optional[int] = None
    limit: Optional[int] = None


def _parse_non_negative(value: Optional[str]) -> Optional[int]:
    if value is None or not (value.isascii() and value.isdigit()):
        return None
    return int(value)


def parse_story_request(story_id: str, params: Optional[Mapping[str, str]] = None) -> StoryRequest:
    """
    Validate a story id and read the optional depth and limit parameters.

    Unparseable depth or limit values are ignored so the defaults apply.

    Raises:
        InvalidInputError: story_id is not a string of digits
    """
    story_id = story_id.strip()
    if not (story_id.isascii() and story_id.isdigit()):
        raise InvalidInputError(f"Invalid story ID: {story_id!r}")
    params = params or {}
    return StoryRequest(
        story_id=int(story_id),
        depth=_parse_non_negative(params.get("depth")),
        limit=_parse_non_negative(params.get("limit")),
    )


def error_response(error: HNThreadError) -> tuple[int, str]:
    """Map an error to its status code and JSON body."""
    body = {
        "error": error.category,
        "message": str(error),
        "item_id": error.item_id,
    }
    return error.status, json.dumps(body)


async def handle_story_request(
    story_id: str,
    params: Optional[Mapping[str, str]],
    context: HNContext,
    options: Optional[AggregateOptions] = None,
) -> tuple[int, str]:
    """
    Serve one story request.

    Returns:
        The status code and JSON body; 200 with the aggregate on success
    """
    try:
        request = parse_story_request(story_id, params)
        result = await StoryAggregator(context, options).aggregate(
            request.story_id, request.depth, request.limit
        )
    except HNThreadError as e:
        return error_response(e)
    return 200, result.model_dump_json()
