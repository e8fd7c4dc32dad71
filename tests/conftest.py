"""Test configuration and fixtures."""

from collections.abc import AsyncGenerator
from datetime import date

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

import app.models  # noqa: F401
from app.core.database import Base, get_db
from app.models.lesson import Lesson, LessonStatus
from app.models.settings import AppSettings
from app.models.student import Student
from app.services.settings import initialize_settings
from main import app


@pytest_asyncio.fixture(scope="function")
async def test_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Fresh SQLite file per test."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        echo=False,
        poolclass=NullPool,  # Use NullPool for tests to avoid connection issues
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def setup_database(test_engine: AsyncEngine) -> AsyncGenerator[async_sessionmaker, None]:
    """Point the app's database dependency at the test database."""
    test_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        """Override database dependency for tests."""
        async with test_session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield test_session_maker

    # Clean up override
    app.dependency_overrides.pop(get_db, None)


@pytest_asyncio.fixture
async def db(setup_database: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    """Get database session for tests."""
    async with setup_database() as session:
        yield session


@pytest_asyncio.fixture
async def client(setup_database: async_sessionmaker) -> AsyncGenerator[AsyncClient, None]:
    """Get async HTTP client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def app_settings(db: AsyncSession) -> AppSettings:
    """Default settings record."""
    return await initialize_settings(db)


@pytest_asyncio.fixture
async def student(db: AsyncSession) -> Student:
    """Create a test student."""
    student = Student(
        name="Анна Петрова",
        phone="+79001234567",
        email="anna@example.com",
        subjects=["english"],
        level="Средний",
        default_price=2000,
        color="#3b82f6",
    )
    db.add(student)
    await db.commit()
    await db.refresh(student)
    return student


async def add_lesson(db: AsyncSession, student_id: int, **fields) -> Lesson:
    """Insert a lesson with sensible defaults."""
    values = {
        "subject": "english",
        "date": date(2026, 3, 10),
        "start_time": "10:00",
        "duration": 60,
        "price": 1000,
        "status": LessonStatus.SCHEDULED.value,
    }
    values.update(fields)
    lesson = Lesson(student_id=student_id, **values)
    db.add(lesson)
    await db.commit()
    await db.refresh(lesson)
    return lesson
