"""Dashboard and analytics routes.

Learn: The dashboard is per-user, so it is cacheable only by the
browser (private) and briefly; analytics is org-wide and uncached.
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from productiveflow.api.cache import set_cache_headers
from productiveflow.auth.dependencies import OrgContext, org_member
from productiveflow.db.engine import get_db
from productiveflow.schemas.dashboard import AnalyticsRead, DashboardRead
from productiveflow.services.dashboard_service import DashboardService

router = APIRouter()


def _svc(db: AsyncSession = Depends(get_db)) -> DashboardService:
    return DashboardService(db)


@router.get("/dashboard", response_model=DashboardRead)
async def get_dashboard(
    response: Response,
    ctx: OrgContext = Depends(org_member),
    svc: DashboardService = Depends(_svc),
):
    set_cache_headers(response, public=False, max_age=60, stale_while_revalidate=30)
    return await svc.build(ctx)


@router.get("/analytics", response_model=AnalyticsRead)
async def get_analytics(
    ctx: OrgContext = Depends(org_member),
    svc: DashboardService = Depends(_svc),
):
    return await svc.analytics(ctx.org_id)
