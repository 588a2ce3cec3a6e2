"""Post creation, search and feed endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from codelogs.api.dependencies import get_content_service, get_current_user
from codelogs.config import get_settings
from codelogs.models.user import User
from codelogs.schemas.post import (
    ContentSearchResponse,
    FeedResponse,
    PostCreated,
    PostDetail,
    PostResponse,
)
from codelogs.services.content_service import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    ContentService,
    normalize_page,
)

settings = get_settings()

router = APIRouter(prefix=f"/{settings.api_namespace}", tags=["contents"])

EMPTY_FEED_MESSAGE = "Your feed is empty. Follow users to see their posts."


@router.post("/contents", response_model=PostCreated, status_code=status.HTTP_201_CREATED)
def create_content(
    current_user: Annotated[User, Depends(get_current_user)],
    content: Annotated[ContentService, Depends(get_content_service)],
    title: str | None = Form(None),
    description: str | None = Form(None),
    code: str | None = Form(None),
    language: str | None = Form(None),
    file: UploadFile | None = File(None),
):
    """Create a post from a multipart form with an optional attachment."""
    post = content.create(
        current_user,
        title=title,
        code=code,
        language=language,
        description=description,
        upload=file,
    )
    return PostCreated(
        message="Content created successfully.",
        content_id=post.id,
        title=post.title,
        author=post.author,
        file_uploaded=post.file_url is not None,
        file_url=post.file_url,
    )


@router.get("/contents", response_model=ContentSearchResponse)
def search_contents(
    content: Annotated[ContentService, Depends(get_content_service)],
    q: str = Query(default=""),
    language: str = Query(default=""),
):
    """Search posts by text and/or exact language."""
    posts = content.search(q, language)
    return ContentSearchResponse(
        message="Content search completed successfully.",
        search_query=q.strip(),
        language=language.strip(),
        count=len(posts),
        contents=[PostResponse.model_validate(p) for p in posts],
    )


@router.get("/contents/{post_id}", response_model=PostDetail)
def get_content(
    post_id: int,
    content: Annotated[ContentService, Depends(get_content_service)],
):
    """Get one post by id."""
    return PostDetail(post=PostResponse.model_validate(content.get(post_id)))


@router.get("/feed", response_model=FeedResponse)
def get_feed(
    current_user: Annotated[User, Depends(get_current_user)],
    content: Annotated[ContentService, Depends(get_content_service)],
    page: int = Query(default=DEFAULT_PAGE),
    limit: int = Query(default=DEFAULT_LIMIT),
):
    """Get posts from followed users, newest first."""
    result = content.feed(current_user.username, page, limit)

    if result is None:
        page, limit = normalize_page(page, limit)
        return FeedResponse(
            message=EMPTY_FEED_MESSAGE,
            page=page,
            limit=limit,
            total_count=0,
            total_pages=0,
            count=0,
            contents=[],
        )

    return FeedResponse(
        message="Feed retrieved successfully.",
        page=result.page,
        limit=result.limit,
        total_count=result.total_count,
        total_pages=result.total_pages,
        count=len(result.items),
        contents=[PostResponse.model_validate(p) for p in result.items],
    )
