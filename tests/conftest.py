"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from esgpulse.analysis.models import AnalysisResult, EsgResult, Provider, SentimentResult
from esgpulse.analysis.remote import InferenceClient
from esgpulse.config import Settings
from esgpulse.storage.database import get_session
from esgpulse.storage.store import ArticleStore


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Create test settings with temporary paths."""
    return Settings(
        huggingface_token="test-token-not-real",
        news_api_key="test-news-key",
        db_path=tmp_path / "test.db",
    )


@pytest.fixture
def mock_inference_client(settings: Settings) -> InferenceClient:
    """Create an InferenceClient whose HTTP client is a mock."""
    with patch("esgpulse.analysis.remote.httpx.Client"):
        client = InferenceClient(settings)
    client._client = MagicMock()
    return client


@pytest.fixture
def store(tmp_path: Path):
    """ArticleStore backed by a fresh SQLite file."""
    with get_session(tmp_path / "store.db") as session:
        yield ArticleStore(session)


def make_mock_response(data: object, status_code: int = 200) -> MagicMock:
    """Helper to create a mock httpx response."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = data
    return resp


def make_result(
    score: float = 0.5,
    scores: tuple[float, float, float] = (0.8, 0.1, 0.1),
    keywords: tuple[str, ...] = ("carbon",),
    summary: str = "A summary of the article.",
) -> AnalysisResult:
    """Build an AnalysisResult without running any analysis."""
    return AnalysisResult.assemble(
        sentiment=SentimentResult.from_score(score),
        esg=EsgResult.from_scores(*scores, relevance_threshold=0.25),
        keywords=list(keywords),
        summary=summary,
        provider=Provider.LOCAL,
    )
