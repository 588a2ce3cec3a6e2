"""FastAPI dependencies for sessions, services and the database."""

from typing import Annotated

from fastapi import Depends, HTTPException, Response, status
from fastapi.security import APIKeyCookie
from sqlalchemy.orm import Session

from codelogs.config import get_settings
from codelogs.database import get_db
from codelogs.models.user import User
from codelogs.services.auth import get_session_user
from codelogs.services.content_service import ContentService
from codelogs.services.engagement_service import EngagementService
from codelogs.services.gist_service import GistService
from codelogs.services.social_service import SocialGraphService
from codelogs.services.storage import UploadStorage, get_upload_storage

settings = get_settings()

session_cookie = APIKeyCookie(name=settings.session_cookie_name, auto_error=False)


def get_session_token(token: Annotated[str | None, Depends(session_cookie)]) -> str | None:
    """The raw session token from the cookie, if any."""
    return token


def set_session_cookie(response: Response, token: str) -> None:
    """Issue the session cookie with a full time-to-live."""
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_ttl_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )


def get_optional_user(
    response: Response,
    token: Annotated[str | None, Depends(get_session_token)],
    db: Annotated[Session, Depends(get_db)],
) -> User | None:
    """The logged-in user, or None for anonymous callers.

    With sliding sessions the cookie is re-issued so the browser keeps it as
    long as the server-side session lives.
    """
    user = get_session_user(db, token)
    if user is not None and settings.session_sliding:
        set_session_cookie(response, token)
    return user


def get_current_user(
    user: Annotated[User | None, Depends(get_optional_user)],
) -> User:
    """The logged-in user; 401 when there is no live session."""
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Please login to continue.",
        )
    return user


def get_storage() -> UploadStorage:
    """Get upload storage instance."""
    return get_upload_storage()


def get_content_service(
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[UploadStorage, Depends(get_storage)],
) -> ContentService:
    """Get content service with dependencies."""
    return ContentService(db, storage)


def get_social_service(
    db: Annotated[Session, Depends(get_db)],
) -> SocialGraphService:
    """Get social graph service with dependencies."""
    return SocialGraphService(db)


def get_engagement_service(
    db: Annotated[Session, Depends(get_db)],
) -> EngagementService:
    """Get engagement service with dependencies."""
    return EngagementService(db)


def get_gist_service() -> GistService:
    """Get gist service instance."""
    return GistService()
