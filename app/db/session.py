from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from app.core.settings import get_settings

_engine = None
_session_factory = None


def get_engine():
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = create_engine(settings.database_url, pool_pre_ping=True)
    return _engine


def get_session_factory():
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(
            bind=get_engine(),
            autocommit=False,
            autoflush=False,
            class_=Session,
        )
    return _session_factory


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """Commit *db* when the block exits cleanly, roll back on anything else.

    ``BaseException`` is caught so that cancellation (``KeyboardInterrupt``,
    ``asyncio.CancelledError``) also rolls back before propagating.
    """
    try:
        yield db
        db.commit()
    except BaseException:
        db.rollback()
        raise
