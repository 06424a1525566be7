"""Health check endpoint.

Learn: Reports the server as up and probes its dependencies. The
database is required ("degraded" if unreachable); Redis only backs rate
limiting, so its absence is reported but does not degrade the status.
"""

from fastapi import APIRouter, Request
from sqlalchemy import text

from productiveflow import __version__
from productiveflow.redis_pool import get_redis

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """Check server health and dependency connectivity."""
    checks = {"server": "ok", "version": __version__}

    try:
        async with request.app.state.database.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"error: {e}"

    try:
        await get_redis().ping()
        checks["redis"] = "ok"
    except Exception as e:
        checks["redis"] = f"unavailable: {e}"

    status = "healthy" if checks["database"] == "ok" else "degraded"
    return {"status": status, **checks}
