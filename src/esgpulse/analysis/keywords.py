"""Rank the words of an article, preferring ESG vocabulary."""

from __future__ import annotations

import re
from collections import Counter

from esgpulse.lexicon import DEFAULT_LEXICON, Lexicon

MAX_KEYWORDS = 7
MIN_TOKEN_LENGTH = 4
# Non-ESG words must appear more often than this to qualify
MIN_FREQUENCY = 2
DEFAULT_KEYWORDS = ("esg", "news", "analysis")

_PUNCTUATION = re.compile(r"[^\w\s]")


def extract_keywords(
    text: str,
    lexicon: Lexicon = DEFAULT_LEXICON,
    limit: int = MAX_KEYWORDS,
) -> list[str]:
    """Return up to ``limit`` keywords, ESG terms first, then by frequency.

    Never returns an empty list; ``DEFAULT_KEYWORDS`` stands in when nothing
    qualifies.
    """
    words = _PUNCTUATION.sub(" ", text.lower()).split()
    freq = Counter(w for w in words if len(w) >= MIN_TOKEN_LENGTH)

    esg_terms = lexicon.esg_terms
    candidates = [
        word for word, count in freq.items()
        if word in esg_terms or count > MIN_FREQUENCY
    ]
    # Stable sort keeps first-seen order among equal keys
    candidates.sort(key=lambda w: (w not in esg_terms, -freq[w]))

    return candidates[:limit] or list(DEFAULT_KEYWORDS)
