"""Tests for the NewsAPI client."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import httpx
import pytest

from esgpulse.config import Settings
from esgpulse.errors import ConfigurationError, NewsError
from esgpulse.news.client import (
    NewsClient,
    find_company,
    is_esg_relevant,
    sample_companies,
)

RAW_ARTICLE = {
    "source": {"id": None, "name": "Reuters"},
    "author": "Jane Doe",
    "title": "Tesla expands battery recycling",
    "description": "<p>Tesla said on <b>Monday</b> it will expand recycling.</p>",
    "url": "https://example.com/tesla-recycling",
    "urlToImage": "https://example.com/img.jpg",
    "publishedAt": "2026-10-18T09:30:00Z",
    "content": "Tesla said on Monday it will expand battery recycling across its plants… [+2150 chars]",
}


def _status_error(status: int) -> httpx.HTTPStatusError:
    return httpx.HTTPStatusError(
        f"HTTP {status}", request=MagicMock(), response=MagicMock(status_code=status)
    )


def _ok_response(articles: list[dict], total: int | None = None) -> MagicMock:
    resp = MagicMock()
    resp.json.return_value = {
        "status": "ok",
        "totalResults": len(articles) if total is None else total,
        "articles": articles,
    }
    return resp


@pytest.fixture
def news_client(settings: Settings) -> NewsClient:
    with patch("esgpulse.news.client.httpx.Client"):
        client = NewsClient(settings)
    client._client = MagicMock()
    return client


class TestNewsClient:
    """Tests for NewsClient queries and response handling."""

    def test_company_news_uses_curated_keywords(self, news_client: NewsClient) -> None:
        news_client._client.get.return_value = _ok_response([RAW_ARTICLE], total=42)

        page = news_client.fetch_company_news("tsla", page_size=250)

        call_args = news_client._client.get.call_args
        assert call_args.args[0] == "/everything"
        params = call_args.kwargs["params"]
        assert params["q"].startswith("(Tesla OR Elon Musk OR electric vehicles) AND (ESG")
        assert params["pageSize"] == 100
        assert params["sortBy"] == "publishedAt"
        assert params["apiKey"] == "test-news-key"
        assert page.total_results == 42
        assert page.articles[0].company == "tsla"

    def test_unknown_company_query(self, news_client: NewsClient) -> None:
        news_client._client.get.return_value = _ok_response([])
        news_client.fetch_company_news("Acme")
        params = news_client._client.get.call_args.kwargs["params"]
        assert params["q"] == "Acme AND (ESG OR sustainability OR climate OR governance)"

    def test_article_formatting(self, news_client: NewsClient) -> None:
        news_client._client.get.return_value = _ok_response([RAW_ARTICLE])

        article = news_client.fetch_esg_news().articles[0]

        assert article.title == "Tesla expands battery recycling"
        assert article.source == "Reuters"
        assert article.author == "Jane Doe"
        assert article.description == "Tesla said on Monday it will expand recycling."
        assert article.content.endswith("across its plants…")
        assert article.published is not None
        assert article.published.year == 2026
        assert article.image_url == "https://example.com/img.jpg"

    def test_missing_fields_get_defaults(self, news_client: NewsClient) -> None:
        news_client._client.get.return_value = _ok_response(
            [{"description": "Only a description.", "publishedAt": "not a date"}]
        )
        article = news_client.fetch_esg_news().articles[0]
        assert article.title == "Untitled"
        assert article.source == "Unknown"
        assert article.content == "Only a description."
        assert article.published is None

    def test_topic_query(self, news_client: NewsClient) -> None:
        news_client._client.get.return_value = _ok_response([])
        news_client.fetch_esg_news(topic="Governance")
        params = news_client._client.get.call_args.kwargs["params"]
        assert params["q"].startswith("corporate governance")

    def test_search_passes_date_range(self, news_client: NewsClient) -> None:
        news_client._client.get.return_value = _ok_response([])
        news_client.search("net zero", from_date="2026-10-01", to_date="2026-10-18")
        params = news_client._client.get.call_args.kwargs["params"]
        assert params["q"] == "net zero"
        assert params["sortBy"] == "relevancy"
        assert params["from"] == "2026-10-01"
        assert params["to"] == "2026-10-18"

    def test_headlines_filtered_to_esg(self, news_client: NewsClient) -> None:
        off_topic = {**RAW_ARTICLE, "title": "Stocks rally", "description": "Markets up."}
        on_topic = {**RAW_ARTICLE, "title": "Firm hits net zero target", "description": ""}
        news_client._client.get.return_value = _ok_response([off_topic, on_topic])

        page = news_client.fetch_top_headlines()

        assert news_client._client.get.call_args.args[0] == "/top-headlines"
        assert [a.title for a in page.articles] == ["Firm hits net zero target"]
        assert page.total_results == 1

    def test_missing_key_raises_without_request(self, settings: Settings) -> None:
        settings.news_api_key = ""
        with patch("esgpulse.news.client.httpx.Client"):
            client = NewsClient(settings)
        client._client = MagicMock()

        assert not client.configured
        with pytest.raises(ConfigurationError):
            client.fetch_esg_news()
        client._client.get.assert_not_called()

    def test_invalid_key_is_configuration_error(self, news_client: NewsClient) -> None:
        resp = MagicMock()
        resp.raise_for_status.side_effect = _status_error(401)
        news_client._client.get.return_value = resp

        with pytest.raises(ConfigurationError):
            news_client.fetch_esg_news()
        news_client._client.get.assert_called_once()

    def test_rate_limit_retried_then_raised(self, news_client: NewsClient) -> None:
        resp = MagicMock()
        resp.raise_for_status.side_effect = _status_error(429)
        news_client._client.get.return_value = resp

        with patch("time.sleep"), pytest.raises(NewsError, match="rate limit"):
            news_client.fetch_esg_news()
        assert news_client._client.get.call_count == 3

    def test_transient_error_recovers(self, news_client: NewsClient) -> None:
        failing = MagicMock()
        failing.raise_for_status.side_effect = _status_error(503)
        news_client._client.get.side_effect = [failing, _ok_response([RAW_ARTICLE])]

        with patch("time.sleep"):
            page = news_client.fetch_esg_news()
        assert len(page.articles) == 1

    def test_error_status_in_body(self, news_client: NewsClient) -> None:
        resp = MagicMock()
        resp.json.return_value = {"status": "error", "message": "parameterInvalid"}
        news_client._client.get.return_value = resp

        with pytest.raises(NewsError, match="parameterInvalid"):
            news_client.fetch_esg_news()


def test_is_esg_relevant() -> None:
    assert is_esg_relevant("Company pledges to reach NET ZERO by 2040")
    assert not is_esg_relevant("Quarterly earnings beat expectations")


def test_sample_companies_and_lookup() -> None:
    names = [c["name"] for c in sample_companies()]
    assert "Patagonia" in names
    assert set(sample_companies()[0]) == {"name", "ticker"}
    assert find_company("WMT")["name"] == "Walmart"
    assert find_company("nobody") is None
