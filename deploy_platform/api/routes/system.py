# deploy_platform/api/routes/system.py
"""System logs, host status and service restart routes."""

from typing import Optional

from fastapi import APIRouter, Depends

from deploy_platform.api.container import get_log_service, get_system_service, parse_id
from deploy_platform.api.schemas.system import LogCreateRequest, LogResolveRequest

router = APIRouter(prefix="/api/system", tags=["system"])


@router.get("/logs")
def list_logs(
    level: Optional[str] = None,
    source: Optional[str] = None,
    resolved: Optional[bool] = None,
    limit: int = 100,
    page: int = 1,
    service=Depends(get_log_service),
):
    result = service.list_logs(level=level, source=source, resolved=resolved, page=page, limit=limit)
    return {
        "success": True,
        "count": result["count"],
        "total": result["total"],
        "page": result["page"],
        "pages": result["pages"],
        "data": service.present(result["logs"]),
    }


@router.post("/logs", status_code=201)
def create_log(request: LogCreateRequest, service=Depends(get_log_service)):
    log = service.create_log(
        level=request.level,
        source=request.source,
        message=request.message,
        details=request.details,
        user_id=request.user_id,
        network_id=request.network_id,
    )
    return {"success": True, "data": service.present([log])[0]}


@router.put("/logs/{log_id}/resolve")
def resolve_log(
    log_id: str,
    request: Optional[LogResolveRequest] = None,
    service=Depends(get_log_service),
):
    request = request or LogResolveRequest()
    log = service.resolve_log(
        parse_id(log_id, "Log not found"),
        user_id=request.user_id,
        action=request.action,
    )
    return {"success": True, "data": service.present([log])[0]}


@router.get("/status")
def system_status(service=Depends(get_system_service)):
    return {"success": True, "data": service.get_system_status()}


@router.post("/restart/{service_name}")
def restart_service(service_name: str, service=Depends(get_system_service)):
    result = service.restart_service(service_name)
    return {
        "success": True,
        "message": f"{service_name} service(s) restarted successfully",
        "data": result,
    }
