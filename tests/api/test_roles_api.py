"""Role hierarchy and role assignment API tests (SQLite-backed app)."""

from httpx import AsyncClient


async def test_role_hierarchy(client: AsyncClient, uber_headers) -> None:
    response = await client.get("/api/v1/roles/hierarchy", headers=uber_headers)
    assert response.status_code == 200
    data = response.json()
    assert [r["role"] for r in data] == [
        "uber_admin",
        "super_admin",
        "content_admin",
        "social_admin",
        "moderator",
    ]
    assert data[0]["rank"] == 100
    assert data[1]["title"] == "Super Admin (Site Owner)"


async def test_me_reports_allow_listed_uber_admin(client: AsyncClient, uber_headers) -> None:
    response = await client.get("/api/v1/me", headers=uber_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == "uber-1"
    assert data["is_uber_admin"] is True
    assert data["roles"] == []


async def test_stored_uber_admin_row_grants_status(
    client: AsyncClient, headers_for, make_role
) -> None:
    await make_role("carol", "uber_admin", None)
    response = await client.get("/api/v1/me", headers=headers_for("carol"))
    assert response.json()["is_uber_admin"] is True


async def test_assignable_roles_for_super_admin(
    client: AsyncClient, headers_for, make_site, make_role
) -> None:
    site_id = await make_site("Branch")
    await make_role("alice", "super_admin", site_id)

    response = await client.get(
        f"/api/v1/sites/{site_id}/roles/assignable", headers=headers_for("alice")
    )

    assert response.status_code == 200
    data = response.json()
    assert data["actor_rank"] == 50
    assert data["roles"] == ["content_admin", "social_admin", "moderator"]


async def test_assign_then_revoke_writes_audit(
    client: AsyncClient, headers_for, make_site, make_role
) -> None:
    site_id = await make_site("Branch")
    await make_role("alice", "super_admin", site_id)
    alice = headers_for("alice")

    created = await client.post(
        "/api/v1/users/bob/roles",
        headers=alice,
        json={"role": "content_admin", "site_id": site_id},
    )
    assert created.status_code == 201
    assert created.json()["created_by"] == "alice"

    duplicate = await client.post(
        "/api/v1/users/bob/roles",
        headers=alice,
        json={"role": "content_admin", "site_id": site_id},
    )
    assert duplicate.status_code == 409
    assert duplicate.json()["error"] == "DUPLICATE_ASSIGNMENT"

    removed = await client.delete(
        "/api/v1/users/bob/roles/content_admin",
        headers=alice,
        params={"site_id": site_id},
    )
    assert removed.status_code == 204

    audit = await client.get("/api/v1/users/bob/role-audit", headers=headers_for("bob"))
    assert audit.status_code == 200
    assert {e["action"] for e in audit.json()} == {"assigned", "removed"}
    assert all(e["actor_id"] == "alice" for e in audit.json())


async def test_insufficient_rank_returns_403_and_writes_nothing(
    client: AsyncClient, headers_for, uber_headers, make_site, make_role
) -> None:
    site_id = await make_site("Branch")
    await make_role("alice", "content_admin", site_id)

    response = await client.post(
        "/api/v1/users/bob/roles",
        headers=headers_for("alice"),
        json={"role": "super_admin", "site_id": site_id},
    )

    assert response.status_code == 403
    assert response.json()["error"] == "PERMISSION_DENIED"
    roles = await client.get("/api/v1/users/bob/roles", headers=uber_headers)
    assert roles.json() == []
    audit = await client.get("/api/v1/users/bob/role-audit", headers=uber_headers)
    assert audit.json() == []


async def test_uber_admin_scope_validation(client: AsyncClient, uber_headers, make_site) -> None:
    site_id = await make_site("Branch")
    response = await client.post(
        "/api/v1/users/carol/roles",
        headers=uber_headers,
        json={"role": "uber_admin", "site_id": site_id},
    )
    assert response.status_code == 400

    response = await client.post(
        "/api/v1/users/carol/roles", headers=uber_headers, json={"role": "uber_admin"}
    )
    assert response.status_code == 201
    assert response.json()["site_id"] is None


async def test_unknown_role_in_body_is_422(client: AsyncClient, uber_headers) -> None:
    response = await client.post(
        "/api/v1/users/bob/roles", headers=uber_headers, json={"role": "janitor"}
    )
    assert response.status_code == 422


async def test_other_users_audit_is_forbidden(client: AsyncClient, headers_for) -> None:
    response = await client.get("/api/v1/users/bob/role-audit", headers=headers_for("alice"))
    assert response.status_code == 403


async def test_site_users_listing(
    client: AsyncClient, headers_for, make_site, make_role
) -> None:
    site_id = await make_site("Branch")
    await make_role("alice", "super_admin", site_id)
    await make_role("bob", "moderator", site_id)

    response = await client.get(f"/api/v1/sites/{site_id}/users", headers=headers_for("bob"))
    assert response.status_code == 200
    assert response.json() == [
        {"user_id": "alice", "roles": ["super_admin"]},
        {"user_id": "bob", "roles": ["moderator"]},
    ]

    outsider = await client.get(
        f"/api/v1/sites/{site_id}/users", headers=headers_for("mallory")
    )
    assert outsider.status_code == 403
