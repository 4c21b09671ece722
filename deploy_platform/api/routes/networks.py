# deploy_platform/api/routes/networks.py
"""Network management API routes."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder

from deploy_platform.api.container import get_network_service, get_reporting_service, parse_id
from deploy_platform.api.schemas.networks import (
    NetworkCreateRequest, NetworkStatusRequest, NetworkUpdateRequest, ValidatorRequest,
)
from deploy_platform.core.patches import NetworkPatch
from deploy_platform.core.schemas import ValidatorOut

router = APIRouter(prefix="/api/networks", tags=["networks"])


def _section(model):
    return model.model_dump() if model is not None else None


@router.get("")
def list_networks(service=Depends(get_network_service)):
    networks = service.present(service.list_networks())
    return {"success": True, "count": len(networks), "data": networks}


@router.get("/stats/summary")
def network_stats(reporting=Depends(get_reporting_service)):
    return {"success": True, "data": reporting.network_stats()}


@router.get("/{network_id}")
def get_network(network_id: str, service=Depends(get_network_service)):
    network = service.get_network(parse_id(network_id, "Network not found"))
    return {"success": True, "data": service.present([network])[0]}


@router.post("", status_code=201)
def create_network(request: NetworkCreateRequest, service=Depends(get_network_service)):
    network = service.create_network(
        name=request.name,
        chain_id=request.chain_id,
        owner_id=request.owner,
        description=request.description,
        node_count=request.node_count,
        deployment_type=request.deployment_type,
        validators=[v.model_dump() for v in request.validators or []],
        modules=[m.model_dump() for m in request.modules or []],
        tokenomics=_section(request.tokenomics),
        governance=_section(request.governance),
        deployment=_section(request.deployment),
    )
    return {"success": True, "data": service.present([network])[0]}


@router.put("/{network_id}")
def update_network(network_id: str, request: NetworkUpdateRequest, service=Depends(get_network_service)):
    network = service.update_network(
        parse_id(network_id, "Network not found"),
        NetworkPatch.from_dict(request.provided()),
    )
    return {"success": True, "data": service.present([network])[0]}


@router.delete("/{network_id}")
def delete_network(network_id: str, service=Depends(get_network_service)):
    service.delete_network(parse_id(network_id, "Network not found"))
    return {"success": True, "data": {}}


@router.put("/{network_id}/status")
def update_network_status(network_id: str, request: NetworkStatusRequest, service=Depends(get_network_service)):
    network = service.update_status(parse_id(network_id, "Network not found"), request.status)
    return {"success": True, "data": service.present([network])[0]}


@router.post("/{network_id}/validators")
def manage_validator(network_id: str, request: ValidatorRequest, service=Depends(get_network_service)):
    """Adds a validator (201) or updates the one named by ``validatorId`` (200)."""
    validator, created = service.manage_validator(
        parse_id(network_id, "Network not found"),
        request.provided(),
    )
    return JSONResponse(
        status_code=201 if created else 200,
        content=jsonable_encoder({"success": True, "data": ValidatorOut.from_domain(validator)}),
    )


@router.delete("/{network_id}/validators/{validator_id}")
def remove_validator(network_id: str, validator_id: str, service=Depends(get_network_service)):
    service.remove_validator(parse_id(network_id, "Network not found"), validator_id)
    return {"success": True, "data": {}}
