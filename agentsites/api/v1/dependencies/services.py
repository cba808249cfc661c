"""Application service and use case dependencies (composition root).

Write variants build every repository on the request transaction so a
role change and its audit entry commit or roll back together.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from agentsites.application.services import (
    PropagationService,
    RoleAuthorizationService,
    SiteService,
)
from agentsites.application.use_cases.propagation import PushUpdateUseCase
from agentsites.core.config import get_settings
from agentsites.domain.enums import PropagationEntityType
from agentsites.infrastructure.persistence.database import (
    get_db,
    get_db_transactional,
    get_session_factory,
)
from agentsites.infrastructure.persistence.repositories import (
    PropagationRepository,
    RoleAuditRepository,
    SiteRepository,
    UserRoleRepository,
    site_entity_repo_for,
)


def _role_authorization_service(db: AsyncSession) -> RoleAuthorizationService:
    settings = get_settings()
    return RoleAuthorizationService(
        UserRoleRepository(db),
        RoleAuditRepository(db),
        SiteRepository(db),
        audit_default_limit=settings.role_audit_default_limit,
        audit_max_limit=settings.role_audit_max_limit,
    )


def get_role_authorization_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> RoleAuthorizationService:
    return _role_authorization_service(db)


def get_role_authorization_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> RoleAuthorizationService:
    return _role_authorization_service(db)


def get_propagation_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PropagationService:
    return PropagationService(PropagationRepository(db), SiteRepository(db))


def get_propagation_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> PropagationService:
    return PropagationService(PropagationRepository(db), SiteRepository(db))


def _site_service(db: AsyncSession) -> SiteService:
    def entity_repo(entity_type: PropagationEntityType):
        return site_entity_repo_for(entity_type, db)

    return SiteService(
        SiteRepository(db),
        UserRoleRepository(db),
        RoleAuditRepository(db),
        entity_repo,
    )


def get_site_service(db: Annotated[AsyncSession, Depends(get_db)]) -> SiteService:
    return _site_service(db)


def get_site_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> SiteService:
    return _site_service(db)


def get_push_update_use_case(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    session_factory: Annotated[
        async_sessionmaker[AsyncSession], Depends(get_session_factory)
    ],
) -> PushUpdateUseCase:
    """Push use case: record updates on the request transaction, site writes on their own."""
    settings = get_settings()
    return PushUpdateUseCase(
        PropagationRepository(db),
        SiteRepository(db),
        session_factory,
        site_entity_repo_for,
        max_concurrency=settings.propagation_max_concurrency,
        site_timeout_seconds=settings.propagation_site_timeout_seconds,
    )
