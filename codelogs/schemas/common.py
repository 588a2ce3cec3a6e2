"""Response envelope shared by every endpoint."""

from pydantic import BaseModel


class Envelope(BaseModel):
    """Base response: every body carries a success flag and optional message."""

    success: bool = True
    message: str | None = None


class Pagination(Envelope):
    """Paginated response metadata."""

    page: int
    limit: int
    total_count: int
    total_pages: int
    count: int
