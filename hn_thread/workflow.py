"""
Workflow module for assembling a story and its comment trees from
individually fetched Hacker News items.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

from hn_thread.errors import (
    AggregateTimeoutError,
    InvalidInputError,
    UpstreamError,
    WrongKindError,
)
from hn_thread.hn import FetchBudget, HackerNewsAPI, HNContext
from hn_thread.logging_config import get_logger
from hn_thread.models import CommentNode, StoryWithComments

logger = get_logger(__name__)

DEFAULT_DEPTH = 10


@dataclass(frozen=True)
class AggregateOptions:
    """
    Defaults applied when the caller leaves depth or limit unset.

    Attributes:
        depth: Reply levels resolved below each top-level comment
        limit: Maximum number of top-level comments (None means unlimited)
        timeout: Seconds allowed for the whole aggregate (None means no timeout)
        max_fetches: Ceiling on item fetches per aggregate (None means unlimited)
    """

    depth: int = DEFAULT_DEPTH
    limit: Optional[int] = None
    timeout: Optional[float] = 300.0
    max_fetches: Optional[int] = None


class CommentTreeAssembler:
    """
    Resolves comment ids into CommentNode trees, fetching every level
    of replies concurrently.
    """

    def __init__(self, hn_api: HackerNewsAPI):
        self.hn_api = hn_api

    async def resolve_comment(self, comment_id: int, remaining_depth: int = DEFAULT_DEPTH) -> CommentNode:
        """
        Fetch a comment and, while depth remains, all of its replies.

        Args:
            comment_id: The ID of the comment to resolve
            remaining_depth: Further reply levels to resolve; 0 yields a leaf

        Returns:
            The comment with its surviving replies in upstream order

        Raises:
            UpstreamError: the comment itself could not be fetched
        """
        comment = await self.hn_api.fetch_item(comment_id)

        # Replies of a comment without text are never shown
        replies: list[CommentNode] = []
        if remaining_depth > 0 and comment.kids and comment.text is not None:
            replies = await self.resolve_children(comment.kids, remaining_depth - 1)

        return CommentNode(
            id=comment_id,
            by=comment.by,
            time=comment.time,
            text=comment.text,
            replies=replies,
        )

    async def resolve_children(self, child_ids: list[int], remaining_depth: int) -> list[CommentNode]:
        """
        Resolve sibling comments concurrently.

        A sibling that fails to fetch is dropped without affecting the
        others, as is any sibling without text. Output keeps the order of
        child_ids regardless of which fetch finishes first.
        """
        outcomes = await asyncio.gather(
            *(self.resolve_comment(child_id, remaining_depth) for child_id in child_ids),
            return_exceptions=True,
        )

        nodes = []
        for child_id, outcome in zip(child_ids, outcomes):
            if isinstance(outcome, UpstreamError):
                logger.debug(
                    "dropping branch",
                    item_id=child_id,
                    error=outcome.category,
                    reason=str(outcome),
                )
                continue
            if isinstance(outcome, BaseException):
                raise outcome
            if outcome.text is None:
                continue
            nodes.append(outcome)
        return nodes


class StoryAggregator:
    """
    Coordinates fetching a story and assembling its top-level comment trees.
    """

    def __init__(self, context: HNContext, options: Optional[AggregateOptions] = None):
        """
        Initialize the aggregator.

        Args:
            context: The HN context containing all dependencies
            options: Defaults for depth, limit, timeout and fetch ceiling
        """
        self.context = context
        self.options = options or AggregateOptions()

    async def aggregate(
        self,
        story_id: int,
        max_depth: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> StoryWithComments:
        """
        Fetch a story with its comment trees, bounded by the request timeout.

        Args:
            story_id: The ID of the HN story
            max_depth: Reply levels below each top-level comment (default from options)
            limit: Maximum number of top-level comments (default from options)

        Returns:
            The story and its top-level comments in upstream order

        Raises:
            WrongKindError: the item is not a story
            UpstreamError: the story itself could not be fetched
            AggregateTimeoutError: the request ran past its timeout
        """
        timeout = self.options.timeout
        try:
            return await asyncio.wait_for(self._aggregate(story_id, max_depth, limit), timeout)
        except asyncio.TimeoutError as e:
            raise AggregateTimeoutError(story_id, timeout) from e

    async def _aggregate(
        self,
        story_id: int,
        max_depth: Optional[int],
        limit: Optional[int],
    ) -> StoryWithComments:
        depth = self.options.depth if max_depth is None else max_depth
        if limit is None:
            limit = self.options.limit
        if depth < 0:
            raise InvalidInputError(f"depth must be non-negative, got {depth}", story_id)
        if limit is not None and limit < 0:
            raise InvalidInputError(f"limit must be non-negative, got {limit}", story_id)

        hn_api = HackerNewsAPI(self.context, FetchBudget(self.options.max_fetches))
        story = await hn_api.fetch_item(story_id)
        if story.type != "story":
            raise WrongKindError(story_id, story.type)

        kid_ids = story.kids or []
        if limit is not None:
            kid_ids = kid_ids[:limit]

        assembler = CommentTreeAssembler(hn_api)
        comments = await assembler.resolve_children(kid_ids, depth)

        logger.info(
            "aggregated story",
            story_id=story_id,
            comments=len(comments),
            fetches=hn_api.budget.count,
        )
        return StoryWithComments(story=story, comments=comments)


def get_story_with_comments(
    story_id: int,
    max_depth: Optional[int] = None,
    limit: Optional[int] = None,
    context: Optional[HNContext] = None,
    options: Optional[AggregateOptions] = None,
) -> StoryWithComments:
    """
    Convenience function to aggregate a story from synchronous code.

    Args:
        story_id: The ID of the HN story
        max_depth: Reply levels below each top-level comment
        limit: Maximum number of top-level comments
        context: Context containing dependencies
        options: Defaults for depth, limit, timeout and fetch ceiling

    Returns:
        The story and its top-level comments
    """
    aggregator = StoryAggregator(context or HNContext(), options)
    return asyncio.run(aggregator.aggregate(story_id, max_depth, limit))
