"""Content repository: post creation, search, author listings and feeds."""

import logging
import math
from dataclasses import dataclass

from fastapi import HTTPException, UploadFile, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Query, Session

from codelogs.models.follow import Follow
from codelogs.models.post import Post
from codelogs.models.user import User
from codelogs.services.auth import escape_like, get_user_by_username
from codelogs.services.storage import ATTACHMENT_EXTENSIONS, StoredFile, UploadStorage

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100

TITLE_MAX_LENGTH = 255
LANGUAGE_MAX_LENGTH = 50


@dataclass
class PageResult:
    """One page of posts plus the size of the whole result."""

    items: list[Post]
    total_count: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.limit)


def normalize_page(page: int | None, limit: int | None) -> tuple[int, int]:
    """Fall back to defaults for missing or non-positive values and cap the limit."""
    page = page if page and page > 0 else DEFAULT_PAGE
    limit = limit if limit and limit > 0 else DEFAULT_LIMIT
    return page, min(limit, MAX_LIMIT)


def newest_first(query: Query) -> Query:
    return query.order_by(Post.created_at.desc(), Post.id.desc())


class ContentService:
    """Service for post-related operations."""

    def __init__(self, db: Session, storage: UploadStorage | None = None):
        self.db = db
        self.storage = storage

    def create(
        self,
        author: User,
        title: str | None,
        code: str | None,
        language: str | None,
        description: str | None = None,
        upload: UploadFile | None = None,
    ) -> Post:
        """Create a post, storing the attachment first when one is given."""
        if not all(value and value.strip() for value in (title, code, language)):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Title, code, and language are required fields.",
            )
        if len(title.strip()) > TITLE_MAX_LENGTH:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Title must be at most {TITLE_MAX_LENGTH} characters.",
            )
        if len(language.strip()) > LANGUAGE_MAX_LENGTH:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Language must be at most {LANGUAGE_MAX_LENGTH} characters.",
            )

        stored: StoredFile | None = None
        if upload is not None and upload.filename:
            if self.storage is None:
                raise RuntimeError("ContentService needs storage to accept attachments")
            stored = self.storage.save(upload, ATTACHMENT_EXTENSIONS)

        post = Post(
            title=title.strip(),
            description=(description or "").strip(),
            code=code,
            language=language.strip(),
            author=author.username,
            author_id=author.id,
            file_url=stored.url if stored else None,
            file_name=stored.original_name if stored else None,
            file_size=stored.size if stored else None,
        )
        self.db.add(post)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            if stored:
                self.storage.delete(stored)
            raise
        self.db.refresh(post)

        logger.info(f"User {author.username} created post {post.id} ({post.language})")
        return post

    def get(self, post_id: int) -> Post:
        """Get a post or raise 404."""
        post = self.db.query(Post).filter(Post.id == post_id).first()
        if not post:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found.")
        return post

    def search(self, query: str = "", language: str = "") -> list[Post]:
        """Search posts newest first.

        A non-blank ``query`` matches title, description or language as a
        case-insensitive substring; ``language`` must match exactly, ignoring
        case. Both blank returns every post.
        """
        query = (query or "").strip()
        language = (language or "").strip()

        q = self.db.query(Post)
        if query:
            pattern = f"%{escape_like(query)}%"
            q = q.filter(
                or_(
                    Post.title.ilike(pattern, escape="\\"),
                    Post.description.ilike(pattern, escape="\\"),
                    Post.language.ilike(pattern, escape="\\"),
                )
            )
        if language:
            q = q.filter(func.lower(Post.language) == language.lower())

        return newest_first(q).all()

    def list_by_author(self, username: str, page: int, limit: int) -> PageResult:
        """Paginated posts by one author; 404 if the user does not exist."""
        if get_user_by_username(self.db, username) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
        return self._paginate(self.db.query(Post).filter(Post.author == username), page, limit)

    def feed(self, username: str, page: int, limit: int) -> PageResult | None:
        """Paginated posts from accounts ``username`` follows.

        Returns None when the user follows nobody, which is not an error.
        """
        followed = [
            following
            for (following,) in self.db.query(Follow.following)
            .filter(Follow.follower == username)
            .all()
        ]
        if not followed:
            return None
        return self._paginate(self.db.query(Post).filter(Post.author.in_(followed)), page, limit)

    def _paginate(self, query: Query, page: int, limit: int) -> PageResult:
        page, limit = normalize_page(page, limit)
        total_count = query.count()
        items = newest_first(query).offset((page - 1) * limit).limit(limit).all()
        return PageResult(items=items, total_count=total_count, page=page, limit=limit)
