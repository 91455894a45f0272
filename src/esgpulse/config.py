"""Configuration loading from environment variables with validation."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Anchor all paths to the project root (two levels up from this file)
_PROJECT_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ESGPULSE_",
        case_sensitive=False,
    )

    # Hugging Face inference (loaded separately, no prefix)
    huggingface_token: str = ""

    # NewsAPI (loaded separately, no prefix)
    news_api_key: str = ""

    # Remote inference
    inference_base_url: str = "https://api-inference.huggingface.co/models"
    sentiment_model: str = "distilbert-base-uncased-finetuned-sst-2-english"
    topic_model: str = "facebook/bart-large-mnli"
    inference_timeout: float = 15.0
    remote_text_limit: int = 512

    # News search
    news_api_base_url: str = "https://newsapi.org/v2"
    news_timeout: float = 10.0

    # Storage (absolute, anchored to the project root)
    db_path: Path = _PROJECT_DIR / "data" / "esgpulse.db"

    # Logging
    log_level: str = "INFO"


def get_settings() -> Settings:
    """Load settings from environment and .env file."""
    # Load .env from the project root regardless of cwd
    load_dotenv(_PROJECT_DIR / ".env")
    token = os.getenv("HUGGINGFACE_TOKEN", "")
    news_key = os.getenv("NEWS_API_KEY", "")
    return Settings(huggingface_token=token, news_api_key=news_key)
