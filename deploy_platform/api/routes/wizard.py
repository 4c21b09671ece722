# deploy_platform/api/routes/wizard.py
"""
Network creation wizard routes.

Configs travel in the same snake_case shape ``/defaults`` returns.
"""

from typing import Any, Dict

from fastapi import APIRouter, Body

from deploy_platform.wizard import (
    NetworkFormState, ReviewOrchestrator, catalog, default_network_config,
)

router = APIRouter(prefix="/api/wizard", tags=["wizard"])


@router.get("/defaults")
def defaults():
    return {
        "success": True,
        "data": {"config": default_network_config(), "catalog": catalog()},
    }


@router.post("/validate")
def validate(config: Dict[str, Any] = Body(...)):
    form = NetworkFormState(config)
    errors = form.validate_all()
    return {
        "success": True,
        "data": {"valid": not errors, "errors": errors, "charts": form.charts()},
    }


@router.post("/estimate")
def estimate(config: Dict[str, Any] = Body(...)):
    review = ReviewOrchestrator(NetworkFormState(config))
    return {"success": True, "data": review.summary()}
