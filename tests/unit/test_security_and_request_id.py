"""Bearer token round trip and request id sanitizing."""

from datetime import timedelta

import pytest
from jose import jwt

from agentsites.core.config import get_settings
from agentsites.infrastructure.security.jwt import create_access_token, verify_token
from agentsites.middleware.request_id import sanitize_request_id


def test_token_claims() -> None:
    claims = verify_token(create_access_token("user-7", " Root@AgentSites.test "))
    assert claims.user_id == "user-7"
    assert claims.normalized_email == "root@agentsites.test"


def test_token_without_email() -> None:
    claims = verify_token(create_access_token("user-7"))
    assert claims.email is None
    assert claims.normalized_email is None


def test_expired_token_is_rejected() -> None:
    token = create_access_token("user-7", expires_delta=timedelta(seconds=-5))
    with pytest.raises(ValueError, match="expired"):
        verify_token(token)


def test_token_signed_with_other_key_is_rejected() -> None:
    token = jwt.encode({"sub": "user-7", "exp": 4102444800}, "other-key", algorithm="HS256")
    with pytest.raises(ValueError, match="Invalid token"):
        verify_token(token)


def test_token_without_sub_is_rejected() -> None:
    settings = get_settings()
    token = jwt.encode(
        {"exp": 4102444800},
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    with pytest.raises(ValueError):
        verify_token(token)


@pytest.mark.parametrize("raw", ["abc-123", "A_b-C", "x" * 64])
def test_safe_request_ids_are_kept(raw: str) -> None:
    assert sanitize_request_id(raw) == raw


@pytest.mark.parametrize("raw", [None, "", "has space", "new\nline", "x" * 65])
def test_unsafe_request_ids_are_replaced(raw: str | None) -> None:
    replaced = sanitize_request_id(raw)
    assert replaced != raw
    assert len(replaced) == 36
