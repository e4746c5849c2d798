from typing import Optional

from pydantic import BaseModel


class Item(BaseModel):
    """A Hacker News item: story, comment, job, poll or poll option."""

    id: int
    type: str
    deleted: Optional[bool] = None
    by: Optional[str] = None
    time: Optional[int] = None
    text: Optional[str] = None
    dead: Optional[bool] = None
    parent: Optional[int] = None
    poll: Optional[int] = None
    kids: Optional[list[int]] = None
    url: Optional[str] = None
    score: Optional[int] = None
    title: Optional[str] = None
    parts: Optional[list[int]] = None
    descendants: Optional[int] = None


class CommentNode(BaseModel):
    """A comment together with its resolved replies."""

    id: int
    by: Optional[str] = None
    time: Optional[int] = None
    text: Optional[str] = None
    replies: list["CommentNode"] = []


class StoryWithComments(BaseModel):
    """A story and its top-level comment trees."""

    story: Item
    comments: list[CommentNode] = []
