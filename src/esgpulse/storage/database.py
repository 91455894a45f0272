"""SQLite engine cache and session factory."""

from __future__ import annotations

from pathlib import Path

from sqlmodel import Session, SQLModel, create_engine

# Import models so SQLModel registers them
from esgpulse.storage import models as _models  # noqa: F401

_engines: dict[str, object] = {}


def get_engine(db_path: Path):
    """Get or create a SQLAlchemy engine, creating tables on first use."""
    key = str(db_path)
    if key not in _engines:
        db_path.parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(f"sqlite:///{db_path}", echo=False)
        SQLModel.metadata.create_all(engine)
        _engines[key] = engine
    return _engines[key]


def get_session(db_path: Path) -> Session:
    """Create a new database session."""
    return Session(get_engine(db_path))
