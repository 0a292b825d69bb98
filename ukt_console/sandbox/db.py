from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from ukt_console.app.core.settings import get_settings

settings = get_settings()


def _engine_options(url: str) -> dict:
    if not url.startswith("sqlite"):
        return {}
    options = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # One shared connection so every request sees the same in-memory database.
        options["poolclass"] = StaticPool
    return options


engine = create_engine(settings.sandbox_database_url, **_engine_options(settings.sandbox_database_url))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables():
    from ukt_console.sandbox import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
