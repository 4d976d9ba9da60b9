"""News API client tests."""
import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from ingestion.gnews import GNewsClient, NewsResults
from shared.errors import UpstreamUnavailableError


GNEWS_PAYLOAD = {
    "totalArticles": 54,
    "articles": [
        {
            "title": "Markets rally",
            "description": "<p>Stocks <b>rose</b> sharply</p>",
            "content": "Stocks rose sharply on Monday... [1234 chars]",
            "url": "https://news.example.com/markets-rally",
            "image": "https://news.example.com/img.jpg",
            "publishedAt": "2024-02-04T09:00:00Z",
            "source": {"name": "Example News", "url": "https://news.example.com"}
        }
    ]
}


def mock_session(status=200, payload=None, text=""):
    """Build a patched aiohttp.ClientSession returning one response."""
    response = MagicMock()
    response.status = status
    response.json = AsyncMock(return_value=payload)
    response.text = AsyncMock(return_value=text)

    request_cm = MagicMock()
    request_cm.__aenter__ = AsyncMock(return_value=response)
    request_cm.__aexit__ = AsyncMock(return_value=False)

    session = MagicMock()
    session.get = MagicMock(return_value=request_cm)

    session_cm = MagicMock()
    session_cm.__aenter__ = AsyncMock(return_value=session)
    session_cm.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=session_cm), session


class TestGNewsClient:
    """Tests for GNewsClient class."""

    @pytest.fixture
    def client(self):
        return GNewsClient(api_key="test-key", base_url="https://gnews.test/api/v4/", timeout=5)

    def test_client_initialization(self, client):
        assert client.base_url == "https://gnews.test/api/v4"
        assert client.timeout == 5
        assert client.language == "en"

    def test_parse_payload(self, client):
        results = client._parse_payload(GNEWS_PAYLOAD)

        assert results.total_articles == 54
        article = results.articles[0]
        assert article["title"] == "Markets rally"
        assert article["description"] == "Stocks rose sharply"
        assert article["source"] == {"name": "Example News", "url": "https://news.example.com"}
        assert article["publishedAt"] == "2024-02-04T09:00:00Z"

    def test_parse_payload_without_articles(self, client):
        assert client._parse_payload({"totalArticles": 0}) == NewsResults(total_articles=0)
        assert client._parse_payload(None).articles == []

    def test_clean_text_leaves_plain_text(self, client):
        assert client._clean_text("  Plain headline ") == "Plain headline"
        assert client._clean_text(None) is None

    @pytest.mark.asyncio
    async def test_top_headlines_sends_category(self, client):
        session_factory, session = mock_session(payload=GNEWS_PAYLOAD)
        with patch("ingestion.gnews.aiohttp.ClientSession", session_factory):
            results = await client.top_headlines("technology")

        assert len(results.articles) == 1
        url = session.get.call_args.args[0]
        params = session.get.call_args.kwargs["params"]
        assert url == "https://gnews.test/api/v4/top-headlines"
        assert params["category"] == "technology"
        assert params["token"] == "test-key"

    @pytest.mark.asyncio
    async def test_general_headlines_omit_category(self, client):
        session_factory, session = mock_session(payload=GNEWS_PAYLOAD)
        with patch("ingestion.gnews.aiohttp.ClientSession", session_factory):
            await client.top_headlines("general")

        assert "category" not in session.get.call_args.kwargs["params"]

    @pytest.mark.asyncio
    async def test_search_sends_pagination(self, client):
        session_factory, session = mock_session(payload=GNEWS_PAYLOAD)
        with patch("ingestion.gnews.aiohttp.ClientSession", session_factory):
            await client.search("elections", max_results=5, page=2)

        params = session.get.call_args.kwargs["params"]
        assert session.get.call_args.args[0].endswith("/search")
        assert params["q"] == "elections"
        assert params["max"] == 5
        assert params["page"] == 2

    @pytest.mark.asyncio
    async def test_http_error_raises_upstream_unavailable(self, client):
        session_factory, _ = mock_session(status=403, text="Forbidden")
        with patch("ingestion.gnews.aiohttp.ClientSession", session_factory):
            with pytest.raises(UpstreamUnavailableError) as exc_info:
                await client.top_headlines()

        assert "403" in exc_info.value.error

    @pytest.mark.asyncio
    async def test_timeout_raises_upstream_unavailable(self, client):
        session_factory, session = mock_session()
        session.get.side_effect = asyncio.TimeoutError()
        with patch("ingestion.gnews.aiohttp.ClientSession", session_factory):
            with pytest.raises(UpstreamUnavailableError) as exc_info:
                await client.top_headlines()

        assert "Timeout" in exc_info.value.error

    @pytest.mark.asyncio
    async def test_network_error_raises_upstream_unavailable(self, client):
        session_factory, session = mock_session()
        session.get.side_effect = aiohttp.ClientConnectionError("connection refused")
        with patch("ingestion.gnews.aiohttp.ClientSession", session_factory):
            with pytest.raises(UpstreamUnavailableError) as exc_info:
                await client.search("anything")

        assert "Network error" in exc_info.value.error
