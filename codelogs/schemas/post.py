"""Post schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from codelogs.schemas.common import Envelope, Pagination


class PostResponse(BaseModel):
    """A stored post."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    code: str
    language: str
    author: str
    author_id: int
    file_url: str | None
    file_name: str | None
    file_size: int | None
    created_at: datetime


class PostCreated(Envelope):
    """Post creation result."""

    content_id: int
    title: str
    author: str
    file_uploaded: bool
    file_url: str | None


class ContentSearchResponse(Envelope):
    """Post search results."""

    search_query: str
    language: str
    count: int
    contents: list[PostResponse]


class FeedResponse(Pagination):
    """One page of the caller's feed."""

    contents: list[PostResponse]


class UserPostsResponse(Pagination):
    """One page of a user's own posts."""

    username: str
    posts: list[PostResponse]


class PostDetail(Envelope):
    """A single post."""

    post: PostResponse
