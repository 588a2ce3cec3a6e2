"""Trending gist discovery endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from codelogs.api.dependencies import get_gist_service
from codelogs.config import get_settings
from codelogs.schemas.gist import GistsResponse
from codelogs.services.gist_service import GistService

settings = get_settings()

router = APIRouter(prefix=f"/{settings.api_namespace}", tags=["gists"])


@router.get("/trending-gists", response_model=GistsResponse)
async def trending_gists(
    gists: Annotated[GistService, Depends(get_gist_service)],
    language: str = Query(default="javascript", max_length=50),
):
    """Recent public GitHub gists written in ``language``."""
    results = await gists.trending(language)
    return GistsResponse(
        message="Trending gists retrieved successfully from GitHub.",
        language=language,
        count=len(results),
        gists=results,
    )
