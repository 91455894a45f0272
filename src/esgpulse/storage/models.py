"""SQLModel database models."""

from __future__ import annotations

import json
from datetime import datetime, timezone

from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ArticleRecord(SQLModel, table=True):
    """Persisted article together with its analysis."""

    id: int | None = Field(default=None, primary_key=True)
    title: str
    content: str
    url: str = Field(default="", index=True)
    source: str = ""
    sentiment: str = Field(index=True)  # positive | negative | neutral
    sentiment_score: float = 0.0
    category: str = Field(index=True)  # Environmental | Social | Governance | Multiple | Other
    environmental_score: float = 0.0
    social_score: float = 0.0
    governance_score: float = 0.0
    keywords_json: str = "[]"
    summary: str = ""
    provider: str = "local"  # remote | local
    analyzed_at: datetime = Field(default_factory=_utcnow, index=True)
    created_at: datetime = Field(default_factory=_utcnow)

    @property
    def keywords(self) -> list[str]:
        return json.loads(self.keywords_json or "[]")

    def to_dict(self, *, include_content: bool = False) -> dict:
        data = {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "source": self.source,
            "sentiment": self.sentiment,
            "sentimentScore": self.sentiment_score,
            "category": self.category,
            "esgScores": {
                "environmental": self.environmental_score,
                "social": self.social_score,
                "governance": self.governance_score,
            },
            "keywords": self.keywords,
            "summary": self.summary,
            "analyzedAt": self.analyzed_at.isoformat(),
        }
        if include_content:
            data["content"] = self.content
        return data
