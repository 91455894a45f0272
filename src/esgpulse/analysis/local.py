"""Lexicon-based sentiment and ESG scoring; needs no network access."""

from __future__ import annotations

import re

from esgpulse.analysis.models import (
    LOCAL_RELEVANCE_THRESHOLD,
    EsgResult,
    SentimentResult,
)
from esgpulse.lexicon import DEFAULT_LEXICON, Lexicon

_NON_WORD = re.compile(r"\W+")


class LocalAnalyzer:
    """Deterministic fallback for both classification tasks."""

    def __init__(self, lexicon: Lexicon = DEFAULT_LEXICON) -> None:
        self._lexicon = lexicon

    def sentiment(self, text: str) -> SentimentResult:
        """Score polarity as (positive - negative) / (positive + negative).

        A token found in both term lists counts towards both sides.
        """
        positive = 0
        negative = 0
        for token in _NON_WORD.split(text.lower()):
            if token in self._lexicon.positive:
                positive += 1
            if token in self._lexicon.negative:
                negative += 1

        total = positive + negative
        if total == 0:
            return SentimentResult.neutral()
        return SentimentResult.from_score((positive - negative) / total)

    def esg(self, text: str) -> EsgResult:
        """Share of ESG term hits that fall in each dimension.

        Terms are counted as plain substrings of the lowercased text, so
        "eco" also matches inside "economy" and repeated terms add up.
        """
        lowered = text.lower()
        env, soc, gov = (
            sum(lowered.count(term) for term in terms)
            for terms in self._lexicon.dimensions
        )
        total = (env + soc + gov) or 1
        return EsgResult.from_scores(
            env / total,
            soc / total,
            gov / total,
            relevance_threshold=LOCAL_RELEVANCE_THRESHOLD,
        )
