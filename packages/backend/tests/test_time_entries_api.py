"""Time entry API tests: timers, durations, ownership."""

import pytest


@pytest.fixture
async def task(factory, org, member):
    project = await factory.project(org, members=[member])
    return await factory.task(project, title="Write docs")


@pytest.mark.asyncio
async def test_log_finished_span(member_client, task):
    r = await member_client.post(
        "/api/time-entries",
        json={
            "taskId": str(task.id),
            "startTime": "2026-04-01T09:00:00Z",
            "endTime": "2026-04-01T10:30:00Z",
            "description": "first draft",
        },
    )
    assert r.status_code == 201
    entry = r.json()
    assert entry["duration"] == 5400
    assert entry["projectId"] == str(task.project_id)
    assert entry["task"]["title"] == "Write docs"


@pytest.mark.asyncio
async def test_start_then_stop_timer(member_client, task):
    r = await member_client.post(
        "/api/time-entries",
        json={"taskId": str(task.id), "startTime": "2026-04-01T09:00:00Z"},
    )
    entry = r.json()
    assert entry["endTime"] is None
    assert entry["duration"] is None

    running = await member_client.get("/api/time-entries", params={"status": "in-progress"})
    assert [e["id"] for e in running.json()] == [entry["id"]]

    r = await member_client.put(
        "/api/time-entries",
        json={"id": entry["id"], "endTime": "2026-04-01T09:15:00Z"},
    )
    assert r.status_code == 200
    assert r.json()["duration"] == 900

    running = await member_client.get("/api/time-entries", params={"status": "in-progress"})
    assert running.json() == []


@pytest.mark.asyncio
async def test_end_before_start_rejected(member_client, task):
    r = await member_client.post(
        "/api/time-entries",
        json={
            "taskId": str(task.id),
            "startTime": "2026-04-01T10:00:00Z",
            "endTime": "2026-04-01T09:00:00Z",
        },
    )
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_filter_by_task(member_client, task, factory, org, member):
    other_task = await factory.task(await factory.project(org, members=[member], name="Other"))
    await factory.time_entry(task, member)
    await factory.time_entry(other_task, member)

    r = await member_client.get("/api/time-entries", params={"taskId": str(task.id)})
    assert [e["taskId"] for e in r.json()] == [str(task.id)]


@pytest.mark.asyncio
async def test_cannot_stop_someone_elses_timer(client_for, task, factory, org, member):
    colleague = await factory.user("col@acme.test", org=org)
    entry = await factory.time_entry(task, member)

    c = await client_for(colleague)
    r = await c.put("/api/time-entries", json={"id": str(entry.id), "endTime": None})
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_other_org_entry_is_not_found(client_for, task, factory, member):
    other_org = await factory.org("Other")
    outsider = await factory.user("out@other.test", org=other_org)
    entry = await factory.time_entry(task, member)

    c = await client_for(outsider)
    r = await c.put("/api/time-entries", json={"id": str(entry.id), "endTime": None})
    assert r.status_code == 404
    assert r.json() == {"detail": "Time entry not found"}
