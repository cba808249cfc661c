"""Grant (or list) system-wide Uber Admin assignments.

Usage:
    uv run python -m scripts.grant_uber_admin <user_id>
    uv run python -m scripts.grant_uber_admin --list
Requires DATABASE_URL. The grant is written with its role audit entry in one
transaction; the actor is recorded as "system".
"""

import asyncio
import sys

from agentsites.core.config import get_settings
from agentsites.domain.enums import RoleAuditAction, SiteRole
from agentsites.domain.exceptions import DuplicateAssignmentException
from agentsites.infrastructure.persistence.database import get_session_factory
from agentsites.infrastructure.persistence.repositories import (
    RoleAuditRepository,
    UserRoleRepository,
)

SYSTEM_ACTOR = "system"


async def main() -> None:
    """Grant uber_admin to the given user id."""
    if len(sys.argv) < 2:
        print(
            "Usage: uv run python -m scripts.grant_uber_admin <user_id> | --list",
            file=sys.stderr,
        )
        sys.exit(1)
    arg = sys.argv[1]

    settings = get_settings()
    factory = get_session_factory()

    if arg == "--list":
        for email in sorted(settings.uber_admin_email_set):
            print(f"{email} (allow-list)")
        async with factory() as session:
            for user_id in await UserRoleRepository(session).list_system_uber_admins():
                print(user_id)
        return

    async with factory() as session:
        async with session.begin():
            user_roles = UserRoleRepository(session)
            try:
                await user_roles.assign(
                    arg, SiteRole.UBER_ADMIN.value, None, created_by=SYSTEM_ACTOR
                )
            except DuplicateAssignmentException:
                print(f"User {arg} is already an Uber Admin")
                return
            await RoleAuditRepository(session).append(
                target_user_id=arg,
                action=RoleAuditAction.ASSIGNED,
                role=SiteRole.UBER_ADMIN.value,
                site_id=None,
                actor_id=SYSTEM_ACTOR,
            )
    print(f"Granted uber_admin to {arg}")


if __name__ == "__main__":
    asyncio.run(main())
