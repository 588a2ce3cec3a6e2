"""Comment and vote schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, StrictBool

from codelogs.models.enums import VoteAction, VoteDirection
from codelogs.schemas.common import Envelope


class CommentCreate(BaseModel):
    """New comment body. Blank text is rejected by the service."""

    text: str | None = None


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    post_id: int
    author: str
    user_id: int
    text: str
    created_at: datetime


class CommentCreated(Envelope):
    comment: CommentResponse


class CommentsResponse(Envelope):
    post_id: int
    count: int
    comments: list[CommentResponse]


class VoteRequest(BaseModel):
    """True to like, False to dislike."""

    is_like: StrictBool


class VoteResponse(Envelope):
    action: VoteAction
    is_like: bool


class VoteCounts(Envelope):
    post_id: int
    like_count: int
    dislike_count: int
    user_vote: VoteDirection | None = None
