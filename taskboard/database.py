import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool, StaticPool
from sqlmodel import Session, SQLModel, create_engine

from .config import DATABASE_URL
from .errors import InternalFailure

# Import all models to ensure they are registered with SQLModel metadata
from .models import Notification, Task, TaskAssignee, User, UserTaskRef  # noqa: F401

logger = logging.getLogger(__name__)


def _create_engine(url: str) -> Engine:
    if url == "sqlite://" or url == "sqlite:///:memory:":
        # One shared connection so every session sees the same in-memory db
        return create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    if url.startswith("sqlite"):
        return create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False},
        )

    # Neon/Postgres: disable pooling for serverless and enable pre-ping
    return create_engine(
        url,
        echo=False,
        pool_pre_ping=True,
        poolclass=NullPool,
    )


class Database:
    """Store client owned by the application.

    Created once at startup, handed to request handlers through
    ``get_db`` and disposed on shutdown.
    """

    def __init__(self, url: str = DATABASE_URL, engine: Optional[Engine] = None):
        self.url = url
        self.engine = engine if engine is not None else _create_engine(url)
        self._session_factory = sessionmaker(
            bind=self.engine,
            class_=Session,
            autoflush=False,
            expire_on_commit=False,
        )

    def create_tables(self) -> None:
        """Create all database tables."""
        SQLModel.metadata.create_all(bind=self.engine)

    def new_session(self) -> Session:
        return self._session_factory()

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Get a database session (context manager style).

        Usage:
            with database.session() as session:
                # do something with session
        """
        session = self.new_session()
        try:
            yield session
        finally:
            session.close()

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Iterator[Session]:
    """Dependency to get a session from the application's store client."""
    database: Database = request.app.state.database
    with database.session() as session:
        yield session


@contextmanager
def atomic(session: Session, failure_message: str) -> Iterator[Session]:
    """Run the enclosed writes as one transaction.

    Commits when the block exits normally. Any exception rolls the whole
    transaction back; store errors are re-raised as ``InternalFailure``
    carrying ``failure_message``.
    """
    try:
        yield session
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("Transaction rolled back: %s", failure_message)
        raise InternalFailure(failure_message) from exc
    except Exception:
        session.rollback()
        raise
