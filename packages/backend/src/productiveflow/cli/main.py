"""ProductiveFlow CLI: run the server, prepare the database, poke a deployment.

Usage:
    productiveflow serve --reload                 # Run the API with uvicorn
    productiveflow init-db                        # Create all tables
    productiveflow gen-secret                     # Print a fresh session secret
    productiveflow health                         # GET /api/health
    productiveflow whoami -e me@example.com       # Sign in and show the session

Server-side commands import settings lazily: gen-secret has to work
before any secret exists.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import json
import os
import secrets
import sys
from typing import Optional

import click
import httpx

from productiveflow import __version__

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:8000"


def _api_url() -> str:
    return os.environ.get("PRODUCTIVEFLOW_API_URL", DEFAULT_API_URL).rstrip("/")


def _client() -> httpx.AsyncClient:
    """Async HTTP client pointed at the backend. Keeps cookies between calls."""
    return httpx.AsyncClient(base_url=_api_url(), timeout=30.0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from a synchronous Click handler.

    Handles nested event loops (e.g. Click's CliRunner inside an async
    test) by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, default=str)


def generate_secret(nbytes: int = 48) -> str:
    return secrets.token_urlsafe(nbytes)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="productiveflow")
def main():
    """ProductiveFlow: multi-tenant project and task management backend."""


# ---------------------------------------------------------------------------
# Server-side commands
# ---------------------------------------------------------------------------


@main.command()
@click.option("--host", default=None, help="Bind address (default: settings.host)")
@click.option("--port", type=int, default=None, help="Port (default: settings.port)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server."""
    import uvicorn

    from productiveflow.config import settings

    uvicorn.run(
        "productiveflow.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.log_level,
    )


@main.command("init-db")
def init_db():
    """Create every table that does not exist yet."""
    _run(_init_db_impl())


async def _init_db_impl():
    from productiveflow.config import settings
    from productiveflow.db.engine import Database
    from productiveflow.db.models import Base

    database = Database(settings.database_url, echo=settings.database_echo)
    engine = await database.acquire()
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    finally:
        await database.shutdown()
    click.secho("Database initialized.", fg="green")


@main.command("gen-secret")
@click.option("--bytes", "nbytes", default=48, show_default=True, help="Random bytes")
def gen_secret(nbytes: int):
    """Print a random value for PRODUCTIVEFLOW_SESSION_SECRET."""
    click.echo(generate_secret(nbytes))


# ---------------------------------------------------------------------------
# HTTP commands
# ---------------------------------------------------------------------------


@main.command()
def health():
    """Check a running server's /api/health."""
    _run(_health_impl())


async def _health_impl():
    async with _client() as c:
        try:
            r = await c.get("/api/health")
        except httpx.HTTPError as e:
            click.secho(f"Cannot reach {_api_url()}: {e}", fg="red", err=True)
            sys.exit(1)

        data = r.json()
        color = "green" if data.get("status") == "healthy" else "yellow"
        click.secho(f"{data.get('status', 'unknown')}  ({_api_url()})", fg=color, bold=True)
        for key, value in data.items():
            if key != "status":
                click.echo(f"  {key:10s}  {value}")


@main.command()
@click.option("--email", "-e", required=True, help="Account email")
@click.option("--password", "-p", prompt=True, hide_input=True, help="Account password")
def whoami(email: str, password: str):
    """Sign in and print what the server thinks of the session."""
    _run(_whoami_impl(email, password))


async def _whoami_impl(email: str, password: str):
    async with _client() as c:
        r = await c.post("/api/auth/signin", json={"email": email, "password": password})
        if r.status_code == 401:
            click.secho("Invalid credentials.", fg="red", err=True)
            sys.exit(1)
        r.raise_for_status()

        r = await c.get("/api/auth/check")
        data = r.json()
        if not data.get("authorized"):
            click.secho("Signed in, but the session was not accepted.", fg="red", err=True)
            sys.exit(1)
        if data.get("needsOrg"):
            click.secho("Signed in. No organization yet.", fg="yellow")
            return
        click.echo(_pretty_json(data["user"]))


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    main()
