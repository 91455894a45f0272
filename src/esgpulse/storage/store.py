"""Queries over analyzed articles: lookup, listing and aggregate statistics."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from sqlmodel import Session, col, func, or_, select

from esgpulse.analysis.models import AnalysisResult, EsgCategory
from esgpulse.storage.models import ArticleRecord

SORTABLE_FIELDS = ("analyzed_at", "sentiment_score", "title", "category", "sentiment")
RECENT_DAYS = 7


@dataclass
class ArticlePage:
    records: list[ArticleRecord]
    total: int
    limit: int
    skip: int

    @property
    def has_more(self) -> bool:
        return self.total > self.skip + self.limit


@dataclass
class CategoryStats:
    count: int = 0
    avg_sentiment: float = 0.0


@dataclass
class ArticleStats:
    total_articles: int = 0
    recent_articles: int = 0
    average_sentiment: float = 0.0
    sentiment_distribution: dict[str, int] = field(default_factory=dict)
    category_distribution: dict[str, CategoryStats] = field(default_factory=dict)


@dataclass
class TrendPoint:
    """Article counts and mean sentiment per category for one day."""

    date: str
    categories: dict[str, CategoryStats] = field(
        default_factory=lambda: {c.value: CategoryStats() for c in EsgCategory}
    )


class ArticleStore:
    """Repository for ``ArticleRecord`` rows bound to one session."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def add(
        self,
        title: str,
        content: str,
        result: AnalysisResult,
        *,
        url: str = "",
        source: str = "",
    ) -> ArticleRecord:
        record = ArticleRecord(
            title=title.strip(),
            content=content,
            url=url.strip(),
            source=source,
            sentiment=result.sentiment.value,
            sentiment_score=result.sentiment_score,
            category=result.category.value,
            environmental_score=result.esg_scores.environmental,
            social_score=result.esg_scores.social,
            governance_score=result.esg_scores.governance,
            keywords_json=json.dumps(list(result.keywords)),
            summary=result.summary.strip(),
            provider=result.provider.value,
        )
        self._session.add(record)
        self._session.commit()
        self._session.refresh(record)
        return record

    def get(self, article_id: int) -> ArticleRecord | None:
        return self._session.get(ArticleRecord, article_id)

    def delete(self, article_id: int) -> bool:
        record = self.get(article_id)
        if record is None:
            return False
        self._session.delete(record)
        self._session.commit()
        return True

    def find_existing(self, url: str, title: str) -> ArticleRecord | None:
        """Return an already stored article with the same URL or title.

        An empty URL never counts as a match.
        """
        conditions = [ArticleRecord.title == title.strip()]
        if url.strip():
            conditions.append(ArticleRecord.url == url.strip())
        return self._session.exec(select(ArticleRecord).where(or_(*conditions))).first()

    def list(
        self,
        *,
        sentiment: str | None = None,
        category: str | None = None,
        limit: int = 20,
        skip: int = 0,
        sort_by: str = "analyzed_at",
        order: str = "desc",
    ) -> ArticlePage:
        if sort_by not in SORTABLE_FIELDS:
            raise ValueError(f"Cannot sort by {sort_by!r}; choose from {', '.join(SORTABLE_FIELDS)}")

        filters = []
        if sentiment:
            filters.append(ArticleRecord.sentiment == sentiment)
        if category:
            filters.append(ArticleRecord.category == category)

        sort_col = col(getattr(ArticleRecord, sort_by))
        query = (
            select(ArticleRecord)
            .where(*filters)
            .order_by(sort_col.desc() if order == "desc" else sort_col.asc())
            .offset(skip)
            .limit(limit)
        )
        records = list(self._session.exec(query).all())
        total = self._session.exec(
            select(func.count(ArticleRecord.id)).where(*filters)
        ).one()
        return ArticlePage(records=records, total=total, limit=limit, skip=skip)

    def stats(self, now: datetime | None = None) -> ArticleStats:
        now = now or datetime.now(timezone.utc)
        session = self._session

        total = session.exec(select(func.count(ArticleRecord.id))).one()
        recent = session.exec(
            select(func.count(ArticleRecord.id)).where(
                ArticleRecord.analyzed_at >= now - timedelta(days=RECENT_DAYS)
            )
        ).one()
        average = session.exec(select(func.avg(ArticleRecord.sentiment_score))).one()

        by_sentiment = session.exec(
            select(ArticleRecord.sentiment, func.count(ArticleRecord.id))
            .group_by(ArticleRecord.sentiment)
        ).all()
        by_category = session.exec(
            select(
                ArticleRecord.category,
                func.count(ArticleRecord.id),
                func.avg(ArticleRecord.sentiment_score),
            ).group_by(ArticleRecord.category)
        ).all()

        return ArticleStats(
            total_articles=total,
            recent_articles=recent,
            average_sentiment=average or 0.0,
            sentiment_distribution={label: count for label, count in by_sentiment},
            category_distribution={
                cat: CategoryStats(count=count, avg_sentiment=avg or 0.0)
                for cat, count, avg in by_category
            },
        )

    def trends(self, days: int = 30, now: datetime | None = None) -> list[TrendPoint]:
        """Daily per-category activity over the last ``days`` days, oldest first."""
        now = now or datetime.now(timezone.utc)
        day = func.date(ArticleRecord.analyzed_at)
        rows = self._session.exec(
            select(
                day,
                ArticleRecord.category,
                func.count(ArticleRecord.id),
                func.avg(ArticleRecord.sentiment_score),
            )
            .where(ArticleRecord.analyzed_at >= now - timedelta(days=days))
            .group_by(day, ArticleRecord.category)
            .order_by(day)
        ).all()

        points: dict[str, TrendPoint] = {}
        for date, category, count, avg in rows:
            point = points.setdefault(date, TrendPoint(date=date))
            point.categories[category] = CategoryStats(count=count, avg_sentiment=avg or 0.0)
        return list(points.values())
