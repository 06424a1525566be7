"""Server-rendered pages.

Learn: The page bodies are placeholders for the browser client; what
matters here is routing. Every protected page sits on `protected_router`,
which is included with dependencies=[Depends(page_gatekeeper)], so the
gatekeeper and organization guard run before any handler. Handlers that
render the caller take it from require_auth, which shares the
gatekeeper's per-request `auth` result. Failures come back as
RedirectRequired and main.py turns them into 307s.
"""

from html import escape

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, RedirectResponse

from productiveflow.auth.identity import ResolvedIdentity, require_auth

public_router = APIRouter()
protected_router = APIRouter()


def _page(title: str, body: str = "") -> HTMLResponse:
    return HTMLResponse(
        "<!doctype html><html><head><meta charset=\"utf-8\">"
        f"<title>{escape(title)} · ProductiveFlow</title></head>"
        f"<body><main data-page=\"{escape(title.lower())}\">{body}</main></body></html>"
    )


def _greeting(identity: ResolvedIdentity) -> str:
    return f"<p>Signed in as {escape(identity.name or identity.email)}</p>"


# ─── Public ─────────────────────────────────────────────


@public_router.get("/auth/signin", response_class=HTMLResponse)
async def signin_page():
    return _page(
        "Sign in",
        '<form method="post" action="/api/auth/signin">'
        '<input name="email" type="email"><input name="password" type="password">'
        '<label><input name="remember" type="checkbox"> Remember me</label>'
        "<button>Sign in</button></form>",
    )


# ─── Protected ──────────────────────────────────────────


@protected_router.get("/")
async def home():
    return RedirectResponse("/dashboard", status_code=307)


@protected_router.get("/dashboard", response_class=HTMLResponse)
async def dashboard_page(identity: ResolvedIdentity = Depends(require_auth)):
    return _page("Dashboard", _greeting(identity))


@protected_router.get("/dashboard/organization/new", response_class=HTMLResponse)
async def new_organization_page(identity: ResolvedIdentity = Depends(require_auth)):
    return _page(
        "New organization",
        _greeting(identity)
        + '<form method="post" action="/api/organizations">'
        '<input name="name"><button>Create organization</button></form>',
    )


@protected_router.get("/dashboard/{path:path}", response_class=HTMLResponse)
async def dashboard_section_page(
    path: str, identity: ResolvedIdentity = Depends(require_auth)
):
    return _page(path.split("/")[0].capitalize() or "Dashboard", _greeting(identity))


@protected_router.get("/settings", response_class=HTMLResponse)
@protected_router.get("/settings/{path:path}", response_class=HTMLResponse)
async def settings_page(identity: ResolvedIdentity = Depends(require_auth)):
    return _page("Settings", _greeting(identity))


@protected_router.get("/profile", response_class=HTMLResponse)
@protected_router.get("/profile/{path:path}", response_class=HTMLResponse)
async def profile_page(identity: ResolvedIdentity = Depends(require_auth)):
    return _page("Profile", _greeting(identity))
