"""Repository dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from agentsites.infrastructure.persistence.database import get_db
from agentsites.infrastructure.persistence.repositories import UserRoleRepository


def get_user_role_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserRoleRepository:
    return UserRoleRepository(db)
