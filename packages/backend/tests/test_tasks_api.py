"""Task API tests: visibility, org ownership of links, PUT vs PATCH."""

import pytest


@pytest.fixture
async def project(factory, org, member):
    return await factory.project(org, members=[member], name="Website")


@pytest.mark.asyncio
async def test_create_task_with_tags_and_assignee(member_client, project, factory, org, admin):
    bug = await factory.tag(org, "bug", "#f00")
    r = await member_client.post(
        "/api/tasks",
        json={
            "title": "Fix login",
            "projectId": str(project.id),
            "assigneeId": str(admin.id),
            "priority": "HIGH",
            "dueDate": "2026-05-01T17:00:00Z",
            "tagIds": [str(bug.id)],
        },
    )
    assert r.status_code == 201
    task = r.json()
    assert task["title"] == "Fix login"
    assert task["status"] == "TODO"
    assert task["project"] == {"id": str(project.id), "name": "Website"}
    assert task["assignee"]["email"] == "admin@acme.test"
    assert [t["name"] for t in task["tags"]] == ["bug"]


@pytest.mark.asyncio
async def test_create_task_in_other_org_project_is_404(member_client, factory):
    other = await factory.org("Other")
    theirs = await factory.project(other)
    r = await member_client.post(
        "/api/tasks", json={"title": "Sneaky", "projectId": str(theirs.id)}
    )
    assert r.status_code == 404
    assert r.json()["detail"] == "Project not found"


@pytest.mark.asyncio
async def test_create_task_rejects_foreign_assignee_and_tag(member_client, project, factory):
    other = await factory.org("Other")
    outsider = await factory.user("x@other.test", org=other)
    foreign_tag = await factory.tag(other, "theirs")

    r = await member_client.post(
        "/api/tasks",
        json={"title": "A", "projectId": str(project.id), "assigneeId": str(outsider.id)},
    )
    assert r.status_code == 404
    assert r.json()["detail"] == "Assignee not found"

    r = await member_client.post(
        "/api/tasks",
        json={"title": "B", "projectId": str(project.id), "tagIds": [str(foreign_tag.id)]},
    )
    assert r.status_code == 404
    assert r.json()["detail"] == "Tag not found"


@pytest.mark.asyncio
async def test_list_tasks_visibility(member_client, factory, org, member, admin, project):
    """Own-project tasks and tasks assigned to me; nothing else."""
    admin_project = await factory.project(org, members=[admin], name="Admin stuff")
    await factory.task(project, title="In my project")
    await factory.task(admin_project, title="Assigned to me", assignee=member)
    await factory.task(admin_project, title="Not mine")

    r = await member_client.get("/api/tasks")
    assert r.status_code == 200
    assert sorted(t["title"] for t in r.json()) == ["Assigned to me", "In my project"]

    r = await member_client.get("/api/tasks", params={"projectId": str(project.id)})
    assert [t["title"] for t in r.json()] == ["In my project"]


@pytest.mark.asyncio
async def test_patch_only_touches_given_fields(member_client, project, factory, member):
    task = await factory.task(project, title="Draft", assignee=member, priority="LOW")
    r = await member_client.patch(f"/api/tasks/{task.id}", json={"status": "IN_PROGRESS"})
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "IN_PROGRESS"
    assert body["title"] == "Draft"
    assert body["priority"] == "LOW"
    assert body["assignee"]["id"] == str(member.id)


@pytest.mark.asyncio
async def test_put_replaces_task(member_client, project, factory, member):
    task = await factory.task(project, title="Draft", assignee=member)
    r = await member_client.put(
        f"/api/tasks/{task.id}",
        json={"title": "Final", "projectId": str(project.id), "status": "REVIEW"},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["title"] == "Final"
    assert body["status"] == "REVIEW"
    assert body["assignee"] is None  # omitted on PUT → cleared


@pytest.mark.asyncio
async def test_patch_rejects_bad_status(member_client, project, factory):
    task = await factory.task(project)
    r = await member_client.patch(f"/api/tasks/{task.id}", json={"status": "DONE"})
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_delete_task(member_client, project, factory):
    task = await factory.task(project)
    r = await member_client.delete(f"/api/tasks/{task.id}")
    assert r.status_code == 200
    assert (await member_client.get(f"/api/tasks/{task.id}")).status_code == 404


@pytest.mark.asyncio
async def test_other_org_task_is_404(member_client, factory):
    other = await factory.org("Other")
    task = await factory.task(await factory.project(other))
    assert (await member_client.get(f"/api/tasks/{task.id}")).status_code == 404
    assert (await member_client.delete(f"/api/tasks/{task.id}")).status_code == 404
