import pytest


@pytest.mark.asyncio
async def test_create_and_list_tags(member_client):
    r = await member_client.post("/api/tags", json={"name": "urgent", "color": "#ff8800"})
    assert r.status_code == 201
    assert r.json()["name"] == "urgent"

    r = await member_client.get("/api/tags")
    assert [t["name"] for t in r.json()] == ["urgent"]


@pytest.mark.asyncio
async def test_tag_color_must_be_hex(member_client):
    r = await member_client.post("/api/tags", json={"name": "x", "color": "orange"})
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_delete_tag_unlinks_tasks(member_client, factory, org, member):
    tag = await factory.tag(org)
    project = await factory.project(org, members=[member])
    r = await member_client.post(
        "/api/tasks",
        json={"title": "Tagged", "projectId": str(project.id), "tagIds": [str(tag.id)]},
    )
    task_id = r.json()["id"]

    assert (await member_client.delete(f"/api/tags/{tag.id}")).status_code == 200
    r = await member_client.get(f"/api/tasks/{task_id}")
    assert r.json()["tags"] == []


@pytest.mark.asyncio
async def test_delete_other_org_tag_is_404(member_client, factory):
    other = await factory.org("Other")
    tag = await factory.tag(other)
    assert (await member_client.delete(f"/api/tags/{tag.id}")).status_code == 404
