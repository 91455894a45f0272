"""Fetch candidate ESG articles from NewsAPI."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime

import httpx
from bs4 import BeautifulSoup
from dateutil import parser as dateparser
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from esgpulse.config import Settings
from esgpulse.errors import ConfigurationError, NewsError

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100

SAMPLE_COMPANIES = [
    {"name": "Tesla", "ticker": "TSLA", "keywords": ["Tesla", "Elon Musk", "electric vehicles"]},
    {"name": "Apple", "ticker": "AAPL", "keywords": ["Apple Inc", "Tim Cook", "Apple sustainability"]},
    {"name": "Microsoft", "ticker": "MSFT", "keywords": ["Microsoft", "Satya Nadella", "Microsoft carbon"]},
    {"name": "Amazon", "ticker": "AMZN", "keywords": ["Amazon", "AWS", "Amazon climate"]},
    {"name": "Google", "ticker": "GOOGL", "keywords": ["Google", "Alphabet", "Google sustainability"]},
    {"name": "BP", "ticker": "BP", "keywords": ["BP", "British Petroleum", "BP energy transition"]},
    {"name": "Unilever", "ticker": "UL", "keywords": ["Unilever", "sustainable living", "Unilever ESG"]},
    {"name": "Patagonia", "ticker": "PATA", "keywords": ["Patagonia", "outdoor clothing", "Patagonia environment"]},
    {"name": "Nike", "ticker": "NKE", "keywords": ["Nike", "Nike sustainability", "Nike labor"]},
    {"name": "Nestlé", "ticker": "NSRGY", "keywords": ["Nestlé", "Nestle", "Nestlé water"]},
    {"name": "Walmart", "ticker": "WMT", "keywords": ["Walmart", "Walmart sustainability", "Walmart supply chain"]},
]

ESG_TERMS = [
    "ESG", "sustainability", "climate change", "carbon emissions",
    "renewable energy", "diversity inclusion", "corporate governance",
    "environmental impact", "social responsibility", "green energy",
    "net zero", "carbon neutral", "human rights", "labor practices",
]

DEFAULT_ESG_QUERY = 'ESG OR "environmental social governance"'

TOPIC_QUERIES = {
    "environmental": "climate change OR carbon emissions OR renewable energy OR sustainability",
    "social": "diversity inclusion OR labor rights OR human rights OR social responsibility",
    "governance": "corporate governance OR board diversity OR executive compensation OR transparency",
}

# NewsAPI appends "… [+1234 chars]" to truncated content
_TRUNCATION_MARKER = re.compile(r"\s*\[\+\d+ chars\]\s*$")


def sample_companies() -> list[dict]:
    """Name and ticker of every company with a curated query."""
    return [{"name": c["name"], "ticker": c["ticker"]} for c in SAMPLE_COMPANIES]


def find_company(name_or_ticker: str) -> dict | None:
    needle = name_or_ticker.lower()
    for company in SAMPLE_COMPANIES:
        if company["name"].lower() == needle or company["ticker"].lower() == needle:
            return company
    return None


def is_esg_relevant(text: str) -> bool:
    lowered = text.lower()
    return any(term.lower() in lowered for term in ESG_TERMS)


@dataclass
class NewsArticle:
    """A news search hit, ready to be fed to the analyzer."""

    title: str
    content: str
    url: str
    source: str
    published: datetime | None
    description: str = ""
    author: str = "Unknown"
    image_url: str | None = None
    company: str | None = None


@dataclass
class NewsPage:
    articles: list[NewsArticle] = field(default_factory=list)
    total_results: int = 0
    page: int = 1
    page_size: int = 10


def _is_retryable(exc: BaseException) -> bool:
    """Retry rate limits, server errors and dropped connections only."""
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return status == 429 or status >= 500
    return isinstance(exc, httpx.TransportError)


class NewsClient:
    """Thin NewsAPI wrapper with retry on transient failures."""

    def __init__(self, settings: Settings) -> None:
        self._api_key = settings.news_api_key
        self._client = httpx.Client(
            base_url=settings.news_api_base_url,
            headers={"User-Agent": "esgpulse/0.1"},
            timeout=settings.news_timeout,
        )

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    def fetch_company_news(
        self, company: str, page_size: int = 10, page: int = 1
    ) -> NewsPage:
        """Recent ESG coverage for one company (name or ticker)."""
        known = find_company(company)
        if known:
            query = (
                f"({' OR '.join(known['keywords'])}) "
                "AND (ESG OR sustainability OR climate OR governance OR environmental)"
            )
        else:
            query = f"{company} AND (ESG OR sustainability OR climate OR governance)"

        return self._everything(
            query, page_size=page_size, page=page, sort_by="publishedAt", company=company
        )

    def fetch_esg_news(
        self, page_size: int = 10, page: int = 1, topic: str | None = None
    ) -> NewsPage:
        """General ESG news, optionally narrowed to one dimension."""
        query = DEFAULT_ESG_QUERY
        if topic:
            query = TOPIC_QUERIES.get(topic.lower(), DEFAULT_ESG_QUERY)
        return self._everything(query, page_size=page_size, page=page, sort_by="publishedAt")

    def search(
        self,
        query: str,
        page_size: int = 10,
        page: int = 1,
        from_date: str | None = None,
        to_date: str | None = None,
    ) -> NewsPage:
        """Free-text search ranked by relevancy."""
        extra = {}
        if from_date:
            extra["from"] = from_date
        if to_date:
            extra["to"] = to_date
        return self._everything(
            query, page_size=page_size, page=page, sort_by="relevancy", **extra
        )

    def fetch_top_headlines(
        self, country: str = "us", category: str = "business", page_size: int = 10
    ) -> NewsPage:
        """Top headlines, keeping only the ones that mention an ESG term."""
        data = self._request(
            "/top-headlines",
            {"country": country, "category": category, "pageSize": min(page_size, MAX_PAGE_SIZE)},
        )
        relevant = [
            a for a in data.get("articles", [])
            if is_esg_relevant(f"{a.get('title') or ''} {a.get('description') or ''}")
        ]
        return NewsPage(
            articles=[self._format(a) for a in relevant],
            total_results=len(relevant),
            page=1,
            page_size=page_size,
        )

    def _everything(
        self,
        query: str,
        *,
        page_size: int,
        page: int,
        sort_by: str,
        company: str | None = None,
        **extra: str,
    ) -> NewsPage:
        params = {
            "q": query,
            "language": "en",
            "sortBy": sort_by,
            "pageSize": min(page_size, MAX_PAGE_SIZE),
            "page": page,
            **extra,
        }
        data = self._request("/everything", params)
        return NewsPage(
            articles=[self._format(a, company) for a in data.get("articles", [])],
            total_results=data.get("totalResults", 0),
            page=page,
            page_size=page_size,
        )

    def _request(self, path: str, params: dict) -> dict:
        if not self._api_key:
            raise ConfigurationError(
                "NEWS_API_KEY is not configured. Please add it to your .env file."
            )
        logger.debug("NewsAPI %s q=%r", path, params.get("q"))
        try:
            data = self._get(path, {**params, "apiKey": self._api_key})
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            if status == 401:
                raise ConfigurationError("Invalid NEWS_API_KEY. Please check your API key.") from exc
            if status == 429:
                raise NewsError("API rate limit exceeded. Please try again later.") from exc
            raise NewsError(f"Failed to fetch news: HTTP {status}") from exc
        except httpx.HTTPError as exc:
            raise NewsError(f"Failed to fetch news: {exc}") from exc

        if data.get("status") != "ok":
            raise NewsError(data.get("message") or "Failed to fetch news")
        return data

    @retry(
        retry=retry_if_exception(_is_retryable),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=30),
        reraise=True,
    )
    def _get(self, path: str, params: dict) -> dict:
        resp = self._client.get(path, params=params)
        resp.raise_for_status()
        return resp.json()

    @classmethod
    def _format(cls, raw: dict, company: str | None = None) -> NewsArticle:
        description = cls._clean(raw.get("description") or "")
        content = _TRUNCATION_MARKER.sub("", cls._clean(raw.get("content") or "")) or description
        source = raw.get("source") or {}
        return NewsArticle(
            title=raw.get("title") or "Untitled",
            content=content,
            description=description,
            url=raw.get("url") or "",
            source=source.get("name") or "Unknown",
            author=raw.get("author") or "Unknown",
            published=cls._parse_date(raw.get("publishedAt")),
            image_url=raw.get("urlToImage"),
            company=company,
        )

    @staticmethod
    def _clean(html: str) -> str:
        if not html:
            return ""
        return BeautifulSoup(html, "html.parser").get_text(" ", strip=True)

    @staticmethod
    def _parse_date(date_str: str | None) -> datetime | None:
        if not date_str:
            return None
        try:
            return dateparser.parse(date_str)
        except (ValueError, TypeError, OverflowError):
            return None

    def close(self) -> None:
        self._client.close()
