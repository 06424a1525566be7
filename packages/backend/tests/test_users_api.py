"""Org user listing/creation and the caller's own profile + theme."""

import pytest

from conftest import DEFAULT_PASSWORD


# ═══════════════════════════════════════════════════════════
# Organization users
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_list_users_org_scoped(member_client, admin, factory):
    await factory.user("x@other.test", org=await factory.org("Other"))
    r = await member_client.get("/api/users")
    assert r.status_code == 200
    assert [u["email"] for u in r.json()] == ["admin@acme.test", "member@acme.test"]


@pytest.mark.asyncio
async def test_admin_creates_user_in_own_org(admin_client, org, client):
    r = await admin_client.post(
        "/api/users",
        json={"email": "hire@acme.test", "name": "Hire", "password": "welcome-aboard", "role": "VIEWER"},
    )
    assert r.status_code == 201
    user = r.json()
    assert user["orgId"] == str(org.id)
    assert user["role"] == "VIEWER"

    r = await client.post(
        "/api/auth/signin", json={"email": "hire@acme.test", "password": "welcome-aboard"}
    )
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_member_cannot_create_users(member_client):
    r = await member_client.post(
        "/api/users",
        json={"email": "hire@acme.test", "name": "Hire", "password": "welcome-aboard"},
    )
    assert r.status_code == 403
    assert r.json() == {"detail": "Forbidden"}


# ═══════════════════════════════════════════════════════════
# Profile
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_get_profile(member_client, member):
    r = await member_client.get("/api/user/profile")
    assert r.status_code == 200
    assert r.json()["email"] == "member@acme.test"
    assert r.json()["role"] == "MEMBER"


@pytest.mark.asyncio
async def test_orgless_user_can_edit_profile(client_for, orgless):
    c = await client_for(orgless)
    r = await c.put("/api/user/profile", json={"name": "Nora Renamed"})
    assert r.status_code == 200
    assert r.json()["name"] == "Nora Renamed"


@pytest.mark.asyncio
async def test_password_change_requires_current(member_client):
    r = await member_client.put("/api/user/profile", json={"newPassword": "next-password"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Current password is required"

    r = await member_client.put(
        "/api/user/profile",
        json={"currentPassword": "nope-nope", "newPassword": "next-password"},
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "Current password is incorrect"


@pytest.mark.asyncio
async def test_password_change(member_client, client):
    r = await member_client.put(
        "/api/user/profile",
        json={"currentPassword": DEFAULT_PASSWORD, "newPassword": "next-password"},
    )
    assert r.status_code == 200
    r = await client.post(
        "/api/auth/signin", json={"email": "member@acme.test", "password": "next-password"}
    )
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_email_change_conflict(member_client, admin):
    r = await member_client.put("/api/user/profile", json={"email": "admin@acme.test"})
    assert r.status_code == 409


# ═══════════════════════════════════════════════════════════
# Theme
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_theme_defaults_and_update(member_client):
    r = await member_client.get("/api/user/theme")
    assert r.json() == {"theme": "system", "accentColor": "blue"}

    r = await member_client.put("/api/user/theme", json={"theme": "dark", "accentColor": "green"})
    assert r.status_code == 200
    assert (await member_client.get("/api/user/theme")).json() == {
        "theme": "dark",
        "accentColor": "green",
    }


@pytest.mark.asyncio
async def test_theme_rejects_unknown_values(member_client):
    r = await member_client.put("/api/user/theme", json={"theme": "neon", "accentColor": "blue"})
    assert r.status_code == 422
