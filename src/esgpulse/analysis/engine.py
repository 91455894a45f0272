"""Article analysis entry point: remote inference with a local fallback."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, wait

from esgpulse.analysis.keywords import extract_keywords
from esgpulse.analysis.local import LocalAnalyzer
from esgpulse.analysis.models import (
    AnalysisResult,
    EsgResult,
    Provider,
    SentimentResult,
)
from esgpulse.analysis.remote import InferenceClient
from esgpulse.analysis.summary import summarize
from esgpulse.config import Settings
from esgpulse.errors import AnalysisFailure, ConfigurationError, RemoteUnavailable
from esgpulse.lexicon import DEFAULT_LEXICON, Lexicon

logger = logging.getLogger(__name__)

DEFAULT_REMOTE_TEXT_LIMIT = 512
DEFAULT_REMOTE_TIMEOUT = 15.0


class ArticleAnalyzer:
    """Produce sentiment, ESG category, keywords and summary for an article.

    Sentiment and ESG come from the remote models when both calls succeed,
    otherwise both are recomputed locally. The two sources are never mixed
    within one result. Keywords and summary are always computed locally.
    """

    def __init__(
        self,
        remote: InferenceClient | None = None,
        lexicon: Lexicon = DEFAULT_LEXICON,
        remote_text_limit: int = DEFAULT_REMOTE_TEXT_LIMIT,
        remote_timeout: float = DEFAULT_REMOTE_TIMEOUT,
    ) -> None:
        self._remote = remote
        self._lexicon = lexicon
        self._local = LocalAnalyzer(lexicon)
        self._remote_text_limit = remote_text_limit
        self._remote_timeout = remote_timeout

    @classmethod
    def from_settings(cls, settings: Settings, lexicon: Lexicon = DEFAULT_LEXICON) -> ArticleAnalyzer:
        """Build an analyzer backed by the inference API.

        Raises ConfigurationError when no inference token is configured.
        """
        return cls(
            remote=InferenceClient(settings),
            lexicon=lexicon,
            remote_text_limit=settings.remote_text_limit,
            remote_timeout=settings.inference_timeout,
        )

    @classmethod
    def local_only(cls, lexicon: Lexicon = DEFAULT_LEXICON) -> ArticleAnalyzer:
        return cls(remote=None, lexicon=lexicon)

    @property
    def has_remote(self) -> bool:
        return self._remote is not None

    def analyze(self, title: str, content: str) -> AnalysisResult:
        """Analyze one article.

        Raises ConfigurationError if the inference provider rejects our
        credentials, and AnalysisFailure for anything else that goes wrong.
        Remote outages never surface here; they trigger the local path.
        """
        full_text = f"{title}. {content}"
        try:
            sentiment, esg, provider = self._classify(full_text)
            return AnalysisResult.assemble(
                sentiment=sentiment,
                esg=esg,
                keywords=extract_keywords(full_text, self._lexicon),
                summary=summarize(full_text),
                provider=provider,
            )
        except ConfigurationError:
            raise
        except Exception:
            logger.exception("Analysis failed for %r", title[:50])
            raise AnalysisFailure() from None

    def _classify(self, full_text: str) -> tuple[SentimentResult, EsgResult, Provider]:
        if self._remote is not None:
            try:
                sentiment, esg = self._classify_remote(full_text[: self._remote_text_limit])
                return sentiment, esg, Provider.REMOTE
            except RemoteUnavailable as exc:
                logger.info("Remote inference unavailable, using local analysis: %s", exc)

        return self._local.sentiment(full_text), self._local.esg(full_text), Provider.LOCAL

    def _classify_remote(self, text: str) -> tuple[SentimentResult, EsgResult]:
        """Run both remote classifiers concurrently as a single unit.

        Waits for both calls to settle, but no longer than the remote
        timeout in total. Any failure of either call, or a call still running
        at the deadline, fails the pair with RemoteUnavailable, except a
        credentials problem which is re-raised as ConfigurationError.
        """
        pool = ThreadPoolExecutor(max_workers=2, thread_name_prefix="inference")
        try:
            futures = [
                pool.submit(self._remote.classify_sentiment, text),
                pool.submit(self._remote.classify_esg, text),
            ]
            _, pending = wait(futures, timeout=self._remote_timeout)
        finally:
            # Abandon stragglers; their results are discarded
            pool.shutdown(wait=False, cancel_futures=True)

        settled = [f for f in futures if f not in pending and not f.cancelled()]
        errors = [f.exception() for f in settled if f.exception() is not None]
        for error in errors:
            if isinstance(error, ConfigurationError):
                raise error
        if pending:
            raise RemoteUnavailable(
                f"inference did not finish within {self._remote_timeout:g}s"
            )
        if errors:
            raise RemoteUnavailable(str(errors[0])) from errors[0]

        sentiment_future, esg_future = futures
        return sentiment_future.result(), esg_future.result()

    def close(self) -> None:
        if self._remote is not None:
            self._remote.close()
