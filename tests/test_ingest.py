"""Tests for validation, de-duplication and batch ingestion."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from esgpulse.analysis.engine import ArticleAnalyzer
from esgpulse.errors import AnalysisFailure, ConfigurationError, ValidationError
from esgpulse.ingest import Ingestor, validate_article
from esgpulse.news.client import NewsArticle
from esgpulse.storage.store import ArticleStore
from tests.conftest import make_result

CONTENT = (
    "The utility committed to renewable energy targets and published a detailed "
    "climate disclosure for shareholders."
)


def _news(title: str, content: str = CONTENT, url: str = "") -> NewsArticle:
    return NewsArticle(title=title, content=content, url=url, source="Reuters", published=None)


@pytest.fixture
def analyzer() -> MagicMock:
    mock = MagicMock(spec=ArticleAnalyzer)
    mock.analyze.return_value = make_result()
    return mock


@pytest.mark.parametrize(
    ("title", "content", "message"),
    [
        ("", CONTENT, "required"),
        ("Solar boom", "", "required"),
        ("Sun", CONTENT, "Title"),
        ("Solar boom", "Too short to analyze.", "Content"),
    ],
)
def test_validate_article_rejects(title: str, content: str, message: str) -> None:
    with pytest.raises(ValidationError, match=message):
        validate_article(title, content)


def test_validate_article_accepts_minimums() -> None:
    validate_article("Title", "x" * 50)


def test_ingest_analyzes_and_stores(analyzer: MagicMock, store: ArticleStore) -> None:
    outcome = Ingestor(analyzer, store).ingest(
        "Solar boom", CONTENT, url="https://e.com/solar", source="Reuters"
    )

    assert not outcome.already_exists
    assert outcome.record.id is not None
    assert outcome.record.source == "Reuters"
    analyzer.analyze.assert_called_once_with("Solar boom", CONTENT)


def test_ingest_skips_known_article(analyzer: MagicMock, store: ArticleStore) -> None:
    ingestor = Ingestor(analyzer, store)
    first = ingestor.ingest("Solar boom", CONTENT, url="https://e.com/solar")
    second = ingestor.ingest("Solar boom, updated", CONTENT, url="https://e.com/solar")

    assert second.already_exists
    assert second.record.id == first.record.id
    analyzer.analyze.assert_called_once()


def test_ingest_does_not_store_invalid_article(analyzer: MagicMock, store: ArticleStore) -> None:
    with pytest.raises(ValidationError):
        Ingestor(analyzer, store).ingest("Sun", CONTENT)
    analyzer.analyze.assert_not_called()
    assert store.list().total == 0


def test_batch_report(analyzer: MagicMock, store: ArticleStore) -> None:
    store.add("Already here", CONTENT, make_result(), url="https://e.com/known")
    articles = [
        _news("Solar boom", url="https://e.com/solar"),
        _news("Stub", content="Too short."),
        _news("Hi", url="https://e.com/hi"),
        _news("Repeat title", url="https://e.com/known"),
    ]

    report = Ingestor(analyzer, store).ingest_batch(articles)

    assert report.skipped == ["Stub"]
    assert [t for t, _ in report.errors] == ["Hi"]
    assert len(report.ingested) == 2
    assert report.new_count == 1


def test_batch_collects_analysis_failures(analyzer: MagicMock, store: ArticleStore) -> None:
    analyzer.analyze.side_effect = [AnalysisFailure(), make_result()]
    report = Ingestor(analyzer, store).ingest_batch([_news("First one"), _news("Second one")])

    assert report.errors == [("First one", "Failed to analyze article. Please try again.")]
    assert report.new_count == 1


def test_batch_stops_on_configuration_error(analyzer: MagicMock, store: ArticleStore) -> None:
    analyzer.analyze.side_effect = ConfigurationError("Invalid token")
    with pytest.raises(ConfigurationError):
        Ingestor(analyzer, store).ingest_batch([_news("First one"), _news("Second one")])


def test_ingest_with_local_analyzer(store: ArticleStore) -> None:
    outcome = Ingestor(ArticleAnalyzer.local_only(), store).ingest("Utility pledge", CONTENT)
    assert outcome.record.provider == "local"
    assert outcome.record.category in {"Environmental", "Social", "Governance", "Multiple", "Other"}
