"""Validate, de-duplicate, analyze and persist incoming articles."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from esgpulse.analysis.engine import ArticleAnalyzer
from esgpulse.errors import ConfigurationError, EsgPulseError, ValidationError
from esgpulse.news.client import NewsArticle
from esgpulse.storage.models import ArticleRecord
from esgpulse.storage.store import ArticleStore

logger = logging.getLogger(__name__)

MIN_TITLE_LENGTH = 5
MIN_CONTENT_LENGTH = 50


def validate_article(title: str, content: str) -> None:
    """Raise ValidationError unless the article is long enough to analyze."""
    if not title or not content:
        raise ValidationError("Both title and content are required")
    if len(title) < MIN_TITLE_LENGTH:
        raise ValidationError(f"Title must be at least {MIN_TITLE_LENGTH} characters")
    if len(content) < MIN_CONTENT_LENGTH:
        raise ValidationError(
            f"Content must be at least {MIN_CONTENT_LENGTH} characters for accurate analysis"
        )


@dataclass
class IngestOutcome:
    record: ArticleRecord
    already_exists: bool = False


@dataclass
class BatchReport:
    ingested: list[IngestOutcome] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    errors: list[tuple[str, str]] = field(default_factory=list)

    @property
    def new_count(self) -> int:
        return sum(1 for o in self.ingested if not o.already_exists)


class Ingestor:
    """Feeds articles through the analyzer into the store."""

    def __init__(self, analyzer: ArticleAnalyzer, store: ArticleStore) -> None:
        self._analyzer = analyzer
        self._store = store

    def ingest(
        self, title: str, content: str, *, url: str = "", source: str = ""
    ) -> IngestOutcome:
        """Store one article, reusing the stored copy if it was seen before."""
        validate_article(title, content)

        existing = self._store.find_existing(url, title)
        if existing is not None:
            logger.debug("Skipping known article %s", existing.id)
            return IngestOutcome(record=existing, already_exists=True)

        logger.info("Analyzing article: %s...", title[:50])
        result = self._analyzer.analyze(title, content)
        record = self._store.add(title, content, result, url=url, source=source)
        logger.info("Article saved with ID: %s", record.id)
        return IngestOutcome(record=record)

    def ingest_batch(self, articles: list[NewsArticle]) -> BatchReport:
        """Ingest search results; one bad article does not stop the rest."""
        report = BatchReport()
        for article in articles:
            if not article.content or len(article.content) < MIN_CONTENT_LENGTH:
                report.skipped.append(article.title)
                continue
            try:
                report.ingested.append(
                    self.ingest(
                        article.title,
                        article.content,
                        url=article.url,
                        source=article.source,
                    )
                )
            except ConfigurationError:
                raise
            except EsgPulseError as exc:
                logger.warning("Could not ingest %r: %s", article.title, exc)
                report.errors.append((article.title, str(exc)))
        return report
