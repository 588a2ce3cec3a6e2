"""User registration, search and profile endpoints."""

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session

from codelogs.api.dependencies import (
    get_content_service,
    get_current_user,
    get_optional_user,
    get_social_service,
    get_storage,
)
from codelogs.config import get_settings
from codelogs.database import get_db
from codelogs.models.user import User
from codelogs.schemas.auth import (
    ProfilePictureResponse,
    RegisterResponse,
    UserRegister,
    UserSearchResponse,
    UserSearchResult,
)
from codelogs.schemas.post import PostResponse, UserPostsResponse
from codelogs.schemas.social import (
    FollowersResponse,
    FollowingResponse,
    ProfileResponse,
    StatsResponse,
)
from codelogs.services.auth import create_user, search_users
from codelogs.services.content_service import DEFAULT_LIMIT, DEFAULT_PAGE, ContentService
from codelogs.services.social_service import SocialGraphService
from codelogs.services.storage import IMAGE_EXTENSIONS, UploadStorage

settings = get_settings()

router = APIRouter(prefix=f"/{settings.api_namespace}", tags=["users"])


@router.post("/users", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    db: Annotated[Session, Depends(get_db)],
):
    """Register a new user."""
    user = create_user(db, user_data)
    return RegisterResponse(
        message="User registered successfully.", user_id=user.id, username=user.username
    )


@router.get("/users", response_model=UserSearchResponse)
def find_users(
    db: Annotated[Session, Depends(get_db)],
    q: str = Query(default="", max_length=50),
):
    """Search users by username."""
    users = search_users(db, q)
    return UserSearchResponse(
        message="User search completed successfully.",
        search_query=q,
        count=len(users),
        users=[UserSearchResult.model_validate(u) for u in users],
    )


@router.get("/users/{username}/profile", response_model=ProfileResponse)
def get_profile(
    username: str,
    social: Annotated[SocialGraphService, Depends(get_social_service)],
    viewer: Annotated[User | None, Depends(get_optional_user)],
):
    """Get a user's public profile."""
    profile = social.profile(username, viewer.username if viewer else None)
    return ProfileResponse(profile=profile)


@router.get("/users/{username}/posts", response_model=UserPostsResponse)
def get_user_posts(
    username: str,
    content: Annotated[ContentService, Depends(get_content_service)],
    page: int = Query(default=DEFAULT_PAGE),
    limit: int = Query(default=DEFAULT_LIMIT),
):
    """Get a user's posts, newest first."""
    result = content.list_by_author(username, page, limit)
    return UserPostsResponse(
        username=username,
        page=result.page,
        limit=result.limit,
        total_count=result.total_count,
        total_pages=result.total_pages,
        count=len(result.items),
        posts=[PostResponse.model_validate(p) for p in result.items],
    )


@router.get("/users/{username}/followers", response_model=FollowersResponse)
def get_followers(
    username: str,
    social: Annotated[SocialGraphService, Depends(get_social_service)],
):
    """Get the users following ``username``."""
    followers = social.followers(username)
    return FollowersResponse(username=username, count=len(followers), followers=followers)


@router.get("/users/{username}/following", response_model=FollowingResponse)
def get_following(
    username: str,
    social: Annotated[SocialGraphService, Depends(get_social_service)],
):
    """Get the users ``username`` follows."""
    following = social.following(username)
    return FollowingResponse(username=username, count=len(following), following=following)


@router.get("/users/{username}/stats", response_model=StatsResponse)
def get_stats(
    username: str,
    social: Annotated[SocialGraphService, Depends(get_social_service)],
):
    """Get post, follower and following counts."""
    return StatsResponse(username=username, stats=social.stats(username))


@router.post("/upload/profile-picture", response_model=ProfilePictureResponse)
def upload_profile_picture(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[UploadStorage, Depends(get_storage)],
    profile_picture: UploadFile = File(...),
):
    """Replace the current user's profile picture. Images only."""
    stored = storage.save(profile_picture, IMAGE_EXTENSIONS, image_only=True)
    previous = current_user.profile_picture

    current_user.profile_picture = stored.url
    current_user.profile_picture_updated_at = datetime.now(UTC)
    try:
        db.commit()
    except Exception:
        db.rollback()
        storage.delete(stored)
        raise
    db.refresh(current_user)

    if previous != stored.url:
        storage.delete_url(previous)

    return ProfilePictureResponse(
        message="Profile picture uploaded successfully.",
        profile_picture_url=stored.url,
        updated_at=current_user.profile_picture_updated_at,
    )
