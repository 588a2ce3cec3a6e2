"""Follow and unfollow endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from codelogs.api.dependencies import get_current_user, get_social_service
from codelogs.config import get_settings
from codelogs.models.user import User
from codelogs.schemas.social import FollowRequest, FollowResponse, UnfollowResponse
from codelogs.services.social_service import SocialGraphService

settings = get_settings()

router = APIRouter(prefix=f"/{settings.api_namespace}", tags=["follows"])


@router.post("/follow", response_model=FollowResponse)
def follow_user(
    data: FollowRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    social: Annotated[SocialGraphService, Depends(get_social_service)],
):
    """Follow another user."""
    edge = social.follow(current_user, data.username)
    return FollowResponse(
        message=f"You are now following {edge.following}.", following=edge.following
    )


@router.delete("/follow", response_model=UnfollowResponse)
def unfollow_user(
    data: FollowRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    social: Annotated[SocialGraphService, Depends(get_social_service)],
):
    """Stop following a user."""
    social.unfollow(current_user, data.username)
    return UnfollowResponse(
        message=f"You have unfollowed {data.username}.", unfollowed=data.username
    )
