"""
Statistics Router

Endpoints:
- GET /api/statistics/dashboard - Admin dashboard aggregates (admin)
"""

from fastapi import APIRouter

from foodmenu.routers.deps import AdminOnly, StorageDep
from foodmenu.schemas import DashboardStats
from foodmenu.services.statistics import get_dashboard_stats

router = APIRouter()


@router.get("/dashboard", response_model=DashboardStats, summary="Dashboard statistics")
async def dashboard_stats(storage: StorageDep, admin: AdminOnly) -> DashboardStats:
    return await get_dashboard_stats(storage)
