"""GitHub public gist discovery, proxied through the API."""

import logging
from typing import Any

import httpx
from fastapi import HTTPException, status

from codelogs.config import get_settings

logger = logging.getLogger(__name__)

USER_AGENT = "CodeLogs-App"  # GitHub rejects requests without a User-Agent


class GistService:
    """Fetches public gists and filters them by language."""

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.settings = get_settings()
        self.base_url = self.settings.github_api_url
        self.limit = self.settings.gists_limit
        self.timeout = 15.0
        self.transport = transport

    async def fetch_public_gists(self) -> list[dict[str, Any]]:
        """Fetch the raw public gist listing."""
        async with httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self.transport
        ) as client:
            response = await client.get(
                "/gists/public",
                headers={"Accept": "application/vnd.github+json", "User-Agent": USER_AGENT},
            )
            response.raise_for_status()
            return response.json()

    async def trending(self, language: str) -> list[dict[str, Any]]:
        """Up to ``limit`` gists containing a file in ``language``."""
        try:
            gists = await self.fetch_public_gists()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"GitHub gists request failed: {e}")
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Failed to fetch trending gists from GitHub.",
            ) from e

        if not isinstance(gists, list):
            logger.error(f"GitHub gists response was {type(gists).__name__}, expected a list")
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Failed to fetch trending gists from GitHub.",
            )

        wanted = language.lower()
        matches = [
            gist
            for gist in gists
            if isinstance(gist, dict)
            and "id" in gist
            and any(
                (f.get("language") or "").lower() == wanted
                for f in (gist.get("files") or {}).values()
            )
        ]
        return [self._summarize(gist) for gist in matches[: self.limit]]

    @staticmethod
    def _summarize(gist: dict[str, Any]) -> dict[str, Any]:
        owner = gist.get("owner") or {}
        files = list((gist.get("files") or {}).keys())
        return {
            "id": gist["id"],
            "description": gist.get("description") or "No description provided",
            "url": gist.get("html_url", ""),
            "author": owner.get("login", "anonymous"),
            "author_url": owner.get("html_url"),
            "author_avatar": owner.get("avatar_url"),
            "files": files,
            "file_count": len(files),
            "created_at": gist.get("created_at"),
            "updated_at": gist.get("updated_at"),
        }
