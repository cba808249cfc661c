"""Bearer token encoding and verification (python-jose, HS256 by default).

Tokens are issued by the identity provider and signed with SECRET_KEY.
create_access_token exists for operator scripts and tests.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, cast

from jose import ExpiredSignatureError, JWTError, jwt

from agentsites.core.config import get_settings
from agentsites.shared.utils.datetime import utc_now


@dataclass(frozen=True)
class TokenClaims:
    """Claims the platform relies on: subject (user id) and optional email."""

    user_id: str
    email: str | None = None

    @property
    def normalized_email(self) -> str | None:
        """Lower-cased, stripped email used for allow-list comparison."""
        return self.email.strip().lower() if self.email else None


def create_access_token(
    user_id: str,
    email: str | None = None,
    expires_delta: timedelta | None = None,
    **extra_claims: Any,
) -> str:
    """Sign a token for user_id.

    Args:
        user_id: Value of the sub claim.
        email: Optional email claim.
        expires_delta: Optional TTL; else settings.access_token_expire_minutes.
    """
    settings = get_settings()
    ttl = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims: dict[str, Any] = {**extra_claims, "sub": user_id, "exp": utc_now() + ttl}
    if email:
        claims["email"] = email
    encoded = jwt.encode(
        claims,
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    return cast(str, encoded)


def verify_token(token: str) -> TokenClaims:
    """Verify signature and expiry, then return the claims.

    Raises:
        ValueError: If the token is malformed, expired, or missing sub/exp.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except ExpiredSignatureError:
        raise ValueError("Token expired") from None
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    sub = payload.get("sub")
    if not sub:
        raise ValueError("Token missing required claim: sub")
    email = payload.get("email")
    return TokenClaims(
        user_id=str(sub), email=email if isinstance(email, str) and email else None
    )
