"""Project API tests: org-wide listing, membership-gated detail."""

import pytest

PROJECT = {
    "name": "Mobile App",
    "description": "iOS + Android",
    "startDate": "2026-01-01T00:00:00Z",
    "endDate": "2026-06-30T00:00:00Z",
    "priority": "HIGH",
}


@pytest.mark.asyncio
async def test_create_project_adds_creator(member_client, member):
    r = await member_client.post("/api/projects", json=PROJECT)
    assert r.status_code == 201
    project = r.json()
    assert project["name"] == "Mobile App"
    assert project["status"] == "ACTIVE"
    assert project["priority"] == "HIGH"
    assert [u["id"] for u in project["users"]] == [str(member.id)]


@pytest.mark.asyncio
async def test_create_project_requires_dates(member_client):
    r = await member_client.post("/api/projects", json={"name": "No dates"})
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_create_project_rejects_unknown_status(member_client):
    r = await member_client.post("/api/projects", json={**PROJECT, "status": "ARCHIVED"})
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_list_projects_is_org_scoped(member_client, factory, org, admin):
    await factory.project(org, members=[admin], name="Ours")
    other = await factory.org("Other")
    await factory.project(other, name="Theirs")

    r = await member_client.get("/api/projects")
    assert r.status_code == 200
    assert [p["name"] for p in r.json()] == ["Ours"]


@pytest.mark.asyncio
async def test_get_project_requires_membership(member_client, factory, org, admin, member):
    not_mine = await factory.project(org, members=[admin], name="Admin only")
    mine = await factory.project(org, members=[member], name="Mine")

    assert (await member_client.get(f"/api/projects/{not_mine.id}")).status_code == 404
    r = await member_client.get(f"/api/projects/{mine.id}")
    assert r.status_code == 200
    assert r.json()["name"] == "Mine"


@pytest.mark.asyncio
async def test_patch_project(member_client, factory, org, member):
    project = await factory.project(org, members=[member], name="Old")
    r = await member_client.patch(
        f"/api/projects/{project.id}", json={"name": "New", "status": "ON_HOLD"}
    )
    assert r.status_code == 200
    assert r.json()["name"] == "New"
    assert r.json()["status"] == "ON_HOLD"


@pytest.mark.asyncio
async def test_patch_other_org_project_is_404(member_client, factory):
    other = await factory.org("Other")
    outsider = await factory.user("x@other.test", org=other)
    project = await factory.project(other, members=[outsider])

    r = await member_client.patch(f"/api/projects/{project.id}", json={"name": "Hijack"})
    assert r.status_code == 404
