"""Immutable result values produced by the analysis engine."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Scores inside (-0.15, 0.15) are too weak to call either way
SENTIMENT_THRESHOLD = 0.15

# A single dimension must exceed this share to win outright
CATEGORY_THRESHOLD = 0.4
# "Multiple" only applies while no dimension reaches this share
DOMINANCE_CEILING = 0.6

LOCAL_RELEVANCE_THRESHOLD = 0.25
REMOTE_RELEVANCE_THRESHOLD = 0.35


class SentimentLabel(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class EsgCategory(str, Enum):
    ENVIRONMENTAL = "Environmental"
    SOCIAL = "Social"
    GOVERNANCE = "Governance"
    MULTIPLE = "Multiple"
    OTHER = "Other"


class Provider(str, Enum):
    REMOTE = "remote"
    LOCAL = "local"


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def label_for_score(score: float) -> SentimentLabel:
    if score > SENTIMENT_THRESHOLD:
        return SentimentLabel.POSITIVE
    if score < -SENTIMENT_THRESHOLD:
        return SentimentLabel.NEGATIVE
    return SentimentLabel.NEUTRAL


def categorize(
    environmental: float,
    social: float,
    governance: float,
    relevance_threshold: float,
) -> EsgCategory:
    """Pick the ESG category for a set of dimension scores.

    A dimension above ``CATEGORY_THRESHOLD`` wins, with ties going to
    environmental, then social, then governance. If more than one dimension
    is above ``relevance_threshold`` and none reaches ``DOMINANCE_CEILING``,
    the article is ``Multiple`` regardless of the winner.
    """
    # Insertion order is the tie-break priority
    scores = {
        EsgCategory.ENVIRONMENTAL: environmental,
        EsgCategory.SOCIAL: social,
        EsgCategory.GOVERNANCE: governance,
    }
    max_score = max(scores.values())

    category = EsgCategory.OTHER
    if max_score > CATEGORY_THRESHOLD:
        category = next(c for c, s in scores.items() if s == max_score)

    relevant = [s for s in scores.values() if s > relevance_threshold]
    if len(relevant) > 1 and max_score < DOMINANCE_CEILING:
        category = EsgCategory.MULTIPLE

    return category


class SentimentResult(BaseModel):
    """Sentiment polarity; the label is always derived from the score."""

    model_config = ConfigDict(frozen=True)

    label: SentimentLabel
    score: float = Field(ge=-1.0, le=1.0)

    @classmethod
    def from_score(cls, score: float) -> SentimentResult:
        score = clamp(float(score), -1.0, 1.0)
        return cls(label=label_for_score(score), score=score)

    @classmethod
    def neutral(cls) -> SentimentResult:
        return cls(label=SentimentLabel.NEUTRAL, score=0.0)


class EsgScores(BaseModel):
    model_config = ConfigDict(frozen=True)

    environmental: float = Field(ge=0.0, le=1.0)
    social: float = Field(ge=0.0, le=1.0)
    governance: float = Field(ge=0.0, le=1.0)


class EsgResult(BaseModel):
    """Per-dimension ESG confidences and the category derived from them."""

    model_config = ConfigDict(frozen=True)

    scores: EsgScores
    category: EsgCategory

    @classmethod
    def from_scores(
        cls,
        environmental: float,
        social: float,
        governance: float,
        relevance_threshold: float,
    ) -> EsgResult:
        env = clamp(float(environmental), 0.0, 1.0)
        soc = clamp(float(social), 0.0, 1.0)
        gov = clamp(float(governance), 0.0, 1.0)
        return cls(
            scores=EsgScores(environmental=env, social=soc, governance=gov),
            category=categorize(env, soc, gov, relevance_threshold),
        )


class AnalysisResult(BaseModel):
    """Everything ``ArticleAnalyzer.analyze`` returns for one article."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    sentiment: SentimentLabel
    sentiment_score: float = Field(ge=-1.0, le=1.0)
    esg_scores: EsgScores
    category: EsgCategory
    keywords: tuple[str, ...] = Field(min_length=1, max_length=7)
    summary: str = Field(min_length=1)
    provider: Provider = Provider.LOCAL

    @classmethod
    def assemble(
        cls,
        sentiment: SentimentResult,
        esg: EsgResult,
        keywords: list[str],
        summary: str,
        provider: Provider,
    ) -> AnalysisResult:
        return cls(
            sentiment=sentiment.label,
            sentiment_score=sentiment.score,
            esg_scores=esg.scores,
            category=esg.category,
            keywords=tuple(keywords),
            summary=summary,
            provider=provider,
        )

    def to_dict(self) -> dict:
        """Serialize to the camelCase shape consumers expect."""
        return self.model_dump(by_alias=True, mode="json", exclude={"provider"})
