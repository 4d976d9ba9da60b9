"""Client for the GNews article API."""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import aiohttp
from bs4 import BeautifulSoup
from shared.config import settings
from shared.errors import UpstreamUnavailableError

logger = logging.getLogger(__name__)


@dataclass
class NewsResults:
    """Articles returned by one news API call."""
    total_articles: int
    articles: List[Dict[str, Any]] = field(default_factory=list)


class GNewsClient:
    """Fetches top headlines and search results from GNews."""

    def __init__(
        self,
        api_key: str = None,
        base_url: str = None,
        language: str = None,
        timeout: int = None
    ):
        self.api_key = api_key or settings.gnews_api_key
        self.base_url = (base_url or settings.gnews_base_url).rstrip("/")
        self.language = language or settings.gnews_language
        self.timeout = timeout or settings.gnews_timeout
        self.headers = {"Accept": "application/json"}

    async def top_headlines(self, category: str = "general") -> NewsResults:
        """Fetch the current top headlines, optionally for one category."""
        params = {"token": self.api_key, "lang": self.language}
        if category and category != "general":
            params["category"] = category
        return await self._get("top-headlines", params)

    async def search(self, query: str, max_results: int = 10, page: int = 1) -> NewsResults:
        """Search articles by keyword."""
        params = {
            "q": query,
            "token": self.api_key,
            "lang": self.language,
            "max": max_results,
            "page": page
        }
        return await self._get("search", params)

    async def _get(self, endpoint: str, params: Dict[str, Any]) -> NewsResults:
        url = f"{self.base_url}/{endpoint}"
        try:
            async with aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers=self.headers
            ) as session:
                async with session.get(url, params=params) as response:
                    if response.status >= 400:
                        body = await response.text()
                        raise UpstreamUnavailableError(
                            "Error fetching news",
                            error=f"HTTP Error {response.status}: {body[:200]}"
                        )
                    payload = await response.json(content_type=None)
        except asyncio.TimeoutError as e:
            raise UpstreamUnavailableError(
                "Error fetching news",
                error=f"Timeout after {self.timeout} seconds"
            ) from e
        except aiohttp.ClientError as e:
            raise UpstreamUnavailableError(
                "Error fetching news",
                error=f"Network error: {str(e)}"
            ) from e

        return self._parse_payload(payload)

    def _parse_payload(self, payload: Optional[Dict[str, Any]]) -> NewsResults:
        """Normalize a GNews response body."""
        if not payload or not payload.get("articles"):
            return NewsResults(total_articles=0)

        articles = [self._parse_article(raw) for raw in payload["articles"]]
        total = payload.get("totalArticles") or len(articles)
        return NewsResults(total_articles=total, articles=articles)

    def _parse_article(self, raw: Dict[str, Any]) -> Dict[str, Any]:
        source = raw.get("source") or {}
        return {
            "title": self._clean_text(raw.get("title")),
            "description": self._clean_text(raw.get("description")),
            "content": self._clean_text(raw.get("content")),
            "url": raw.get("url"),
            "image": raw.get("image"),
            "publishedAt": raw.get("publishedAt"),
            "source": {"name": source.get("name"), "url": source.get("url")}
        }

    def _clean_text(self, text: Optional[str]) -> Optional[str]:
        """Strip HTML markup some publishers leave in feed text."""
        if not text:
            return text
        if "<" not in text:
            return text.strip()
        return BeautifulSoup(text, "html.parser").get_text(separator=" ", strip=True)
