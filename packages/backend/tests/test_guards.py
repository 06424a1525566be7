"""Request gatekeeper + organization guard tests.

Learn: organization_guard is a pure function, tested directly. The
gatekeeper is tested through real page routes, since its outcome is an
HTTP redirect (307) rather than a return value.
"""

from datetime import datetime, timedelta, timezone

import pytest

from productiveflow.auth import identity as identity_module
from productiveflow.auth.guards import organization_guard
from productiveflow.auth.identity import ResolvedIdentity

WITH_ORG = ResolvedIdentity(id="u1", email="a@b.c", name=None, org_id="o1", role="MEMBER")
NO_ORG = ResolvedIdentity(id="u2", email="d@e.f", name=None, org_id=None, role="MEMBER")


# ═══════════════════════════════════════════════════════════
# Organization guard
# ═══════════════════════════════════════════════════════════


def test_guard_no_identity_has_no_verdict():
    assert organization_guard(None, "/dashboard") is None


def test_guard_passes_member_with_org():
    assert organization_guard(WITH_ORG, "/dashboard") is None
    assert organization_guard(WITH_ORG, "/settings") is None


@pytest.mark.parametrize("path", ["/", "/dashboard", "/dashboard/projects", "/settings", "/profile"])
def test_guard_redirects_orgless_user(path):
    assert organization_guard(NO_ORG, path) == "/dashboard/organization/new"


@pytest.mark.parametrize("path", ["/dashboard/organization/new", "/dashboard/organization/new/step-2"])
def test_guard_allows_org_creation_path(path):
    assert organization_guard(NO_ORG, path) is None


# ═══════════════════════════════════════════════════════════
# Gatekeeper (through pages)
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/", "/dashboard", "/dashboard/tasks", "/settings", "/profile"])
async def test_no_cookie_redirects_to_signin(client, path):
    r = await client.get(path)
    assert r.status_code == 307
    assert r.headers["location"] == "/auth/signin"


@pytest.mark.asyncio
async def test_signin_page_is_public(client):
    r = await client.get("/auth/signin")
    assert r.status_code == 200
    assert "Sign in" in r.text


@pytest.mark.asyncio
async def test_member_reaches_dashboard(member_client):
    r = await member_client.get("/dashboard")
    assert r.status_code == 200
    assert "Mel Member" in r.text


@pytest.mark.asyncio
async def test_page_resolves_session_once(member_client, monkeypatch):
    calls = []
    real_get_session = identity_module.get_session

    async def counting_get_session(request, db):
        calls.append(request.url.path)
        return await real_get_session(request, db)

    monkeypatch.setattr(identity_module, "get_session", counting_get_session)

    r = await member_client.get("/settings")
    assert r.status_code == 200
    assert calls == ["/settings"]


@pytest.mark.asyncio
async def test_root_redirects_signed_in_user_to_dashboard(member_client):
    r = await member_client.get("/")
    assert r.status_code == 307
    assert r.headers["location"] == "/dashboard"


@pytest.mark.asyncio
async def test_expired_cookie_redirects_and_clears(client_for, member):
    long_ago = datetime.now(timezone.utc) - timedelta(days=2)
    c = await client_for(member, now=long_ago)
    r = await c.get("/dashboard")
    assert r.status_code == 307
    assert r.headers["location"] == "/auth/signin"
    assert "Max-Age=0" in r.headers["set-cookie"]


@pytest.mark.asyncio
async def test_forged_cookie_redirects(client_for, member):
    c = await client_for(member, secret="not-the-server-secret")
    r = await c.get("/settings")
    assert r.status_code == 307
    assert r.headers["location"] == "/auth/signin"


@pytest.mark.asyncio
async def test_deleted_user_is_treated_as_signed_out(client_for, member, db_session):
    from productiveflow.db.models import User

    c = await client_for(member)
    user = await db_session.get(User, member.id)
    await db_session.delete(user)
    await db_session.commit()

    r = await c.get("/dashboard")
    assert r.status_code == 307
    assert r.headers["location"] == "/auth/signin"


@pytest.mark.asyncio
async def test_orgless_user_sent_to_org_creation(client_for, orgless):
    c = await client_for(orgless)
    r = await c.get("/dashboard")
    assert r.status_code == 307
    assert r.headers["location"] == "/dashboard/organization/new"
    assert "set-cookie" not in r.headers


@pytest.mark.asyncio
async def test_orgless_user_can_open_org_creation(client_for, orgless):
    c = await client_for(orgless)
    r = await c.get("/dashboard/organization/new")
    assert r.status_code == 200
    assert "Create organization" in r.text


@pytest.mark.asyncio
async def test_org_comes_from_database_not_token(client_for, orgless, org, db_session):
    """A token minted before the user joined an org still lets them in."""
    from productiveflow.db.models import User

    c = await client_for(orgless)
    user = await db_session.get(User, orgless.id)
    user.org_id = org.id
    await db_session.commit()

    r = await c.get("/dashboard")
    assert r.status_code == 200


# ═══════════════════════════════════════════════════════════
# require_auth
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_require_auth_redirects_anonymous():
    from productiveflow.auth.identity import RedirectRequired, require_auth

    with pytest.raises(RedirectRequired) as exc:
        await require_auth(None)
    assert exc.value.location == "/auth/signin"
    assert exc.value.clear_session is False


@pytest.mark.asyncio
async def test_require_auth_passes_identity_through():
    from productiveflow.auth.identity import require_auth

    assert await require_auth(WITH_ORG) is WITH_ORG
