from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .config import settings


def _sqlite_url(path) -> str:
    path.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{(path / 'channels.db').resolve()}"


def _create_engine(url: str):
    return create_engine(
        url,
        connect_args={"check_same_thread": False},
        pool_pre_ping=True,
    )


DATABASE_URL = _sqlite_url(settings.db_path)
engine = _create_engine(DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)

Base = declarative_base()


def configure(url: str) -> None:
    """Point the session factory at another database (tests, alternate paths)."""
    global engine
    engine = _create_engine(url)
    SessionLocal.configure(bind=engine)


def init_db() -> None:
    Base.metadata.create_all(bind=engine)


@contextmanager
def get_session() -> Iterator[Session]:
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
