# deploy_platform/api/routes/dashboard.py
"""Dashboard API routes."""

from fastapi import APIRouter, Depends

from deploy_platform.api.container import get_reporting_service

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("")
def dashboard(service=Depends(get_reporting_service)):
    return {"success": True, "data": service.dashboard()}


@router.get("/quick-stats")
def quick_stats(service=Depends(get_reporting_service)):
    return {"success": True, "data": service.quick_stats()}


@router.get("/activity")
def activity_feed(limit: int = 20, page: int = 1, service=Depends(get_reporting_service)):
    return {"success": True, "data": service.activity_feed(page=page, limit=limit)}
