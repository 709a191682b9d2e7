from __future__ import annotations

from collections.abc import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from arbtracker.config import get_settings

settings = get_settings()

engine = create_engine(settings.database_url, echo=settings.sql_echo, pool_pre_ping=True, future=True)
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True)


def get_db() -> Iterator[Session]:
    with SessionLocal() as session:
        yield session
