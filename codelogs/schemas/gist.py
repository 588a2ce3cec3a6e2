"""GitHub gist discovery schemas."""

from pydantic import BaseModel

from codelogs.schemas.common import Envelope


class Gist(BaseModel):
    id: str
    description: str
    url: str
    author: str
    author_url: str | None = None
    author_avatar: str | None = None
    files: list[str]
    file_count: int
    created_at: str | None = None
    updated_at: str | None = None


class GistsResponse(Envelope):
    language: str
    count: int
    source: str = "GitHub Gists API"
    gists: list[Gist]
