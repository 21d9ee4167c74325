"""Database configuration and session management."""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from tavrezsi.core.config import settings
from tavrezsi.core.exceptions import ConflictError, DependencyError

_connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

# Create SQLAlchemy engine
engine = create_engine(settings.DATABASE_URL, connect_args=_connect_args)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Base class for models
class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


def get_db():
    """Dependency for getting database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """Run a unit of work that commits on success and rolls back on any error.

    Constraint violations surface as ``ConflictError`` and other database
    failures as ``DependencyError``, so callers never see a half-applied
    change. Domain errors raised inside the block propagate unchanged after
    the rollback.
    """
    try:
        yield db
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("The change conflicts with existing data") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise DependencyError("Database operation failed") from exc
    except Exception:
        db.rollback()
        raise
