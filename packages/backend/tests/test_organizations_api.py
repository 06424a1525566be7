"""Organization API tests: creation links the caller atomically."""

import pytest
from sqlalchemy import select

from productiveflow.db.models import Organization, User


@pytest.mark.asyncio
async def test_create_org_links_caller_as_admin(client_for, orgless, db_session):
    c = await client_for(orgless)
    r = await c.post("/api/organizations", json={"name": "Globex"})
    assert r.status_code == 201
    org = r.json()
    assert org["name"] == "Globex"
    assert "createdAt" in org

    user = await db_session.get(User, orgless.id)
    assert str(user.org_id) == org["id"]
    assert user.role == "ADMIN"

    # Same cookie, fresh org: pages open without re-signing in
    page = await c.get("/dashboard")
    assert page.status_code == 200


@pytest.mark.asyncio
async def test_create_second_org_conflicts(member_client, db_session):
    r = await member_client.post("/api/organizations", json={"name": "Second"})
    assert r.status_code == 409

    orgs = (await db_session.execute(select(Organization))).scalars().all()
    assert [o.name for o in orgs] == ["Acme"]


@pytest.mark.asyncio
async def test_create_org_validates_name(client_for, orgless):
    c = await client_for(orgless)
    r = await c.post("/api/organizations", json={"name": ""})
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_get_org_without_membership_is_null(client_for, orgless):
    c = await client_for(orgless)
    r = await c.get("/api/organizations")
    assert r.status_code == 200
    assert r.json() is None


@pytest.mark.asyncio
async def test_get_org_detail(member_client, factory, org, member, admin):
    project = await factory.project(org, members=[member], name="Launch")
    await factory.task(project, status="COMPLETED")
    await factory.task(project, status="TODO")

    r = await member_client.get("/api/organizations")
    assert r.status_code == 200
    detail = r.json()
    assert detail["id"] == str(org.id)
    assert {u["email"] for u in detail["users"]} == {"member@acme.test", "admin@acme.test"}
    assert detail["projects"][0]["name"] == "Launch"
    assert sorted(t["status"] for t in detail["projects"][0]["tasks"]) == ["COMPLETED", "TODO"]
