"""Dependencies for FastAPI routes."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models.settings import AppSettings
from app.services import settings as settings_service


async def get_app_settings(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AppSettings:
    """Load the tutor's settings, creating defaults on first use."""
    return await settings_service.initialize_settings(db)


# Common dependency aliases
DbSession = Annotated[AsyncSession, Depends(get_db)]
CurrentSettings = Annotated[AppSettings, Depends(get_app_settings)]
