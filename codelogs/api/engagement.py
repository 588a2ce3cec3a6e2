"""Comment and vote endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from codelogs.api.dependencies import get_current_user, get_engagement_service, get_optional_user
from codelogs.config import get_settings
from codelogs.models.enums import VoteAction
from codelogs.models.user import User
from codelogs.schemas.common import Envelope
from codelogs.schemas.engagement import (
    CommentCreate,
    CommentCreated,
    CommentResponse,
    CommentsResponse,
    VoteCounts,
    VoteRequest,
    VoteResponse,
)
from codelogs.services.engagement_service import EngagementService

settings = get_settings()

router = APIRouter(prefix=f"/{settings.api_namespace}", tags=["engagement"])

VOTE_MESSAGES = {
    (VoteAction.CREATED, True): "Post liked.",
    (VoteAction.CREATED, False): "Post disliked.",
    (VoteAction.UPDATED, True): "Changed to like.",
    (VoteAction.UPDATED, False): "Changed to dislike.",
    (VoteAction.REMOVED, True): "Like removed.",
    (VoteAction.REMOVED, False): "Dislike removed.",
}


@router.post(
    "/posts/{post_id}/comments",
    response_model=CommentCreated,
    status_code=status.HTTP_201_CREATED,
)
def add_comment(
    post_id: int,
    data: CommentCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    engagement: Annotated[EngagementService, Depends(get_engagement_service)],
):
    """Comment on a post."""
    comment = engagement.add_comment(post_id, current_user, data.text)
    return CommentCreated(
        message="Comment added successfully.",
        comment=CommentResponse.model_validate(comment),
    )


@router.get("/posts/{post_id}/comments", response_model=CommentsResponse)
def list_comments(
    post_id: int,
    engagement: Annotated[EngagementService, Depends(get_engagement_service)],
):
    """List a post's comments, newest first."""
    comments = engagement.list_comments(post_id)
    return CommentsResponse(
        post_id=post_id,
        count=len(comments),
        comments=[CommentResponse.model_validate(c) for c in comments],
    )


@router.delete("/comments/{comment_id}", response_model=Envelope)
def delete_comment(
    comment_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    engagement: Annotated[EngagementService, Depends(get_engagement_service)],
):
    """Delete one of your own comments."""
    engagement.delete_comment(comment_id, current_user)
    return Envelope(message="Comment deleted successfully.")


@router.post("/posts/{post_id}/like", response_model=VoteResponse)
def vote(
    post_id: int,
    data: VoteRequest,
    response: Response,
    current_user: Annotated[User, Depends(get_current_user)],
    engagement: Annotated[EngagementService, Depends(get_engagement_service)],
):
    """Like or dislike a post. Repeating a vote removes it."""
    outcome = engagement.vote(post_id, current_user, data.is_like)
    if outcome.action == VoteAction.CREATED:
        response.status_code = status.HTTP_201_CREATED
    return VoteResponse(
        message=VOTE_MESSAGES[(outcome.action, outcome.is_like)],
        action=outcome.action,
        is_like=outcome.is_like,
    )


@router.get("/posts/{post_id}/likes", response_model=VoteCounts)
def vote_counts(
    post_id: int,
    engagement: Annotated[EngagementService, Depends(get_engagement_service)],
    viewer: Annotated[User | None, Depends(get_optional_user)],
):
    """Like and dislike totals, plus the caller's own vote when logged in."""
    counts = engagement.vote_counts(post_id, viewer.username if viewer else None)
    return VoteCounts(post_id=post_id, **counts)
