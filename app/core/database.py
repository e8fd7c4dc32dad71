"""Database configuration."""

import functools
import logging
from datetime import datetime

from sqlalchemy import DateTime, Integer
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from app.core.config import settings
from app.core.exceptions import StorageError

logger = logging.getLogger(__name__)

engine = create_async_engine(settings.DATABASE_URL, echo=settings.DEBUG)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class BaseModel(Base):
    """Base model with common fields: id, created_at."""

    __abstract__ = True

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.now,
        nullable=False,
    )


async def get_db() -> AsyncSession:
    """Dependency for getting database session."""
    async with async_session_maker() as session:
        yield session


async def init_db() -> None:
    """Create all tables if they do not exist yet."""
    # Register models on the metadata
    import app.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


def storage_operation(func):
    """
    Translate SQLAlchemy failures inside a service call into StorageError.

    The wrapped coroutine must take the session as its first argument; the
    session is rolled back before the error propagates.
    """

    @functools.wraps(func)
    async def wrapper(db: AsyncSession, *args, **kwargs):
        try:
            return await func(db, *args, **kwargs)
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.exception("Storage operation %s failed", func.__name__)
            raise StorageError(f"Storage operation {func.__name__} failed: {exc}") from exc

    return wrapper
