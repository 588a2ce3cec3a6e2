"""Tests for the GitHub gist proxy."""

import httpx
import pytest
from conftest import API
from fastapi import HTTPException

from codelogs.api.dependencies import get_gist_service
from codelogs.main import app
from codelogs.services.gist_service import GistService


def make_gist(gist_id: str, *languages: str, description: str | None = "A gist") -> dict:
    return {
        "id": gist_id,
        "description": description,
        "html_url": f"https://gist.github.com/{gist_id}",
        "created_at": "2024-01-01T00:00:00Z",
        "updated_at": "2024-01-02T00:00:00Z",
        "owner": {
            "login": "octocat",
            "html_url": "https://github.com/octocat",
            "avatar_url": "https://avatars.githubusercontent.com/u/1",
        },
        "files": {
            f"file{i}.{lang.lower()}": {"filename": f"file{i}", "language": lang}
            for i, lang in enumerate(languages)
        },
    }


def service_returning(payload, status_code: int = 200, seen: list | None = None) -> GistService:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=payload)

    return GistService(transport=httpx.MockTransport(handler))


class TestGistService:
    """Tests for GistService filtering and mapping."""

    @pytest.mark.asyncio
    async def test_filters_by_language_case_insensitively(self):
        payload = [
            make_gist("1", "Python"),
            make_gist("2", "JavaScript"),
            make_gist("3", "Markdown", "python"),
        ]
        results = await service_returning(payload).trending("PYTHON")
        assert [g["id"] for g in results] == ["1", "3"]

    @pytest.mark.asyncio
    async def test_limits_results(self):
        payload = [make_gist(str(i), "Python") for i in range(10)]
        results = await service_returning(payload).trending("python")
        assert len(results) == 6
        assert results[0]["id"] == "0"

    @pytest.mark.asyncio
    async def test_summary_fields(self):
        payload = [make_gist("abc", "Go", "Go", description=None)]
        (gist,) = await service_returning(payload).trending("go")

        assert gist["description"] == "No description provided"
        assert gist["url"] == "https://gist.github.com/abc"
        assert gist["author"] == "octocat"
        assert gist["file_count"] == 2
        assert gist["files"] == ["file0.go", "file1.go"]

    @pytest.mark.asyncio
    async def test_sends_user_agent(self):
        seen = []
        await service_returning([], seen=seen).trending("python")

        assert seen[0].url.path == "/gists/public"
        assert seen[0].headers["User-Agent"] == "CodeLogs-App"

    @pytest.mark.asyncio
    async def test_upstream_error_is_bad_gateway(self):
        with pytest.raises(HTTPException) as exc_info:
            await service_returning({"message": "boom"}, status_code=500).trending("python")
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_network_error_is_bad_gateway(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        service = GistService(transport=httpx.MockTransport(handler))
        with pytest.raises(HTTPException) as exc_info:
            await service.trending("python")
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_non_list_body_is_bad_gateway(self):
        with pytest.raises(HTTPException) as exc_info:
            await service_returning({"message": "API rate limit exceeded"}).trending("python")
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_skips_malformed_entries(self):
        payload = ["junk", {"files": {"a.py": {"language": "Python"}}}, make_gist("ok", "Python")]
        results = await service_returning(payload).trending("python")
        assert [g["id"] for g in results] == ["ok"]


def test_trending_gists_endpoint(client):
    payload = [make_gist("1", "JavaScript"), make_gist("2", "Python")]
    app.dependency_overrides[get_gist_service] = lambda: service_returning(payload)

    response = client.get(f"{API}/trending-gists")
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["language"] == "javascript"
    assert data["count"] == 1
    assert data["gists"][0]["id"] == "1"

    response = client.get(f"{API}/trending-gists", params={"language": "python"})
    assert [g["id"] for g in response.json()["gists"]] == ["2"]


def test_trending_gists_upstream_failure(client):
    app.dependency_overrides[get_gist_service] = lambda: service_returning({}, status_code=503)

    response = client.get(f"{API}/trending-gists")
    assert response.status_code == 502
    assert response.json() == {
        "success": False,
        "message": "Failed to fetch trending gists from GitHub.",
    }


def test_trending_gists_unexpected_body(client):
    app.dependency_overrides[get_gist_service] = lambda: service_returning({"gists": []})

    response = client.get(f"{API}/trending-gists")
    assert response.status_code == 502
    assert response.json()["success"] is False
