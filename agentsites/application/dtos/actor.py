"""Authenticated actor (who is making the request)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Actor:
    """Caller identity resolved from the bearer token.

    is_uber_admin is resolved once per request: bootstrap email allow-list or a
    stored system-wide uber_admin assignment.
    """

    user_id: str
    email: str | None = None
    is_uber_admin: bool = False
