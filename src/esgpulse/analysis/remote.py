"""Client for the hosted sentiment and zero-shot topic models."""

from __future__ import annotations

import httpx

from esgpulse.analysis.models import (
    REMOTE_RELEVANCE_THRESHOLD,
    EsgResult,
    SentimentResult,
)
from esgpulse.config import Settings
from esgpulse.errors import ConfigurationError, RemoteUnavailable

# Zero-shot label descriptions, in (environmental, social, governance) order
ESG_CANDIDATE_LABELS = [
    "environmental sustainability climate carbon emissions",
    "social responsibility human rights labor diversity",
    "corporate governance ethics compliance transparency",
]

# Used when the model returns a label without a confidence
_DEFAULT_CONFIDENCE = 0.5

_SCORE_SUM_TOLERANCE = 1e-6


class InferenceClient:
    """Wrapper around the inference API for both classification tasks.

    No retries: any failure is reported as ``RemoteUnavailable`` and the
    caller decides what to do with it.
    """

    def __init__(self, settings: Settings) -> None:
        if not settings.huggingface_token:
            raise ConfigurationError(
                "HUGGINGFACE_TOKEN is not configured. Add it to your .env file."
            )
        self._sentiment_model = settings.sentiment_model
        self._topic_model = settings.topic_model
        self._client = httpx.Client(
            base_url=settings.inference_base_url,
            headers={
                "Authorization": f"Bearer {settings.huggingface_token}",
                "Content-Type": "application/json",
            },
            timeout=settings.inference_timeout,
        )

    def classify_sentiment(self, text: str) -> SentimentResult:
        """Run the binary sentiment model.

        Returns +confidence for POSITIVE, -confidence for NEGATIVE and a
        neutral zero for any other label.
        """
        data = self._post(self._sentiment_model, {"inputs": text})

        if not isinstance(data, list) or not data:
            raise RemoteUnavailable("Invalid sentiment response")
        top = data[0]
        # Some deployments wrap the ranked predictions in another list
        if isinstance(top, list):
            if not top:
                raise RemoteUnavailable("Invalid sentiment response")
            top = top[0]
        if not isinstance(top, dict):
            raise RemoteUnavailable("Invalid sentiment response")

        label = str(top.get("label") or "").lower()
        try:
            score = top.get("score")
            confidence = _DEFAULT_CONFIDENCE if score is None else float(score)
        except (TypeError, ValueError) as exc:
            raise RemoteUnavailable("Invalid sentiment response") from exc
        if label == "positive":
            return SentimentResult.from_score(confidence)
        if label == "negative":
            return SentimentResult.from_score(-confidence)
        return SentimentResult.neutral()

    def classify_esg(self, text: str) -> EsgResult:
        """Run the zero-shot model against the three ESG label descriptions."""
        data = self._post(
            self._topic_model,
            {"inputs": text, "parameters": {"candidate_labels": ESG_CANDIDATE_LABELS}},
        )

        if not isinstance(data, dict) or not isinstance(data.get("scores"), list):
            raise RemoteUnavailable("Invalid topic response")
        scores = data["scores"]
        labels = data.get("labels")
        # The pipeline ranks labels by score; put them back in request order
        if isinstance(labels, list) and sorted(labels) == sorted(ESG_CANDIDATE_LABELS):
            by_label = dict(zip(labels, scores))
            scores = [by_label[label] for label in ESG_CANDIDATE_LABELS]
        if len(scores) < len(ESG_CANDIDATE_LABELS):
            raise RemoteUnavailable("Invalid topic response")

        try:
            env, soc, gov = (float(s or 0) for s in scores[:3])
        except (TypeError, ValueError) as exc:
            raise RemoteUnavailable("Invalid topic response") from exc
        # Single-label zero-shot scores are a distribution over the three labels
        if env + soc + gov > 1.0 + _SCORE_SUM_TOLERANCE:
            raise RemoteUnavailable("Invalid topic response: scores sum above 1")
        return EsgResult.from_scores(
            env, soc, gov, relevance_threshold=REMOTE_RELEVANCE_THRESHOLD
        )

    def _post(self, model: str, payload: dict) -> object:
        try:
            resp = self._client.post(f"/{model}", json=payload)
        except httpx.HTTPError as exc:
            # Covers timeouts as well as connection errors
            raise RemoteUnavailable(f"{model}: {exc}") from exc

        if resp.status_code in (401, 403):
            raise ConfigurationError("Invalid HUGGINGFACE_TOKEN. Please check your token.")
        if resp.status_code >= 400:
            raise RemoteUnavailable(f"{model}: HTTP {resp.status_code}")
        try:
            return resp.json()
        except ValueError as exc:
            raise RemoteUnavailable(f"{model}: response is not JSON") from exc

    def close(self) -> None:
        self._client.close()
