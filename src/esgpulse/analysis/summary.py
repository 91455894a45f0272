"""Extractive summaries built from the leading sentences of an article."""

from __future__ import annotations

import re

MAX_SENTENCES = 3
MAX_SUMMARY_LENGTH = 250
MIN_SENTENCE_LENGTH = 20
PLACEHOLDER = "No summary available."

_SENTENCE_BREAK = re.compile(r"(?<=[.!?])\s+")


def split_sentences(text: str) -> list[str]:
    """Split on terminal punctuation followed by whitespace, dropping fragments."""
    return [
        s for s in _SENTENCE_BREAK.split(text)
        if len(s.strip()) > MIN_SENTENCE_LENGTH
    ]


def summarize(text: str) -> str:
    """Join up to three leading sentences while staying within the length cap.

    A sentence that would overflow the cap ends the summary; it is never cut.
    """
    summary = ""
    for sentence in split_sentences(text)[:MAX_SENTENCES]:
        if len(summary + sentence) > MAX_SUMMARY_LENGTH:
            break
        summary += sentence.strip() + " "

    return summary.strip() or PLACEHOLDER
