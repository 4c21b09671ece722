# deploy_platform/api/routes/users.py
"""User management API routes."""

from fastapi import APIRouter, Depends

from deploy_platform.api.container import get_user_service, parse_id
from deploy_platform.api.schemas.users import (
    PasswordResetRequest, UserCreateRequest, UserUpdateRequest,
)
from deploy_platform.core.patches import UserPatch
from deploy_platform.core.schemas import UserOut

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("")
def list_users(service=Depends(get_user_service)):
    users = service.list_users()
    return {
        "success": True,
        "count": len(users),
        "data": [UserOut.from_domain(user) for user in users],
    }


@router.get("/{user_id}")
def get_user(user_id: str, service=Depends(get_user_service)):
    user = service.get_user(parse_id(user_id, "User not found"))
    return {"success": True, "data": UserOut.from_domain(user)}


@router.post("", status_code=201)
def create_user(request: UserCreateRequest, service=Depends(get_user_service)):
    user = service.create_user(
        name=request.name,
        email=request.email,
        password=request.password,
        role=request.role,
        company=request.company,
    )
    return {"success": True, "data": UserOut.from_domain(user)}


@router.put("/{user_id}")
def update_user(user_id: str, request: UserUpdateRequest, service=Depends(get_user_service)):
    user = service.update_user(
        parse_id(user_id, "User not found"),
        UserPatch.from_dict(request.provided()),
    )
    return {"success": True, "data": UserOut.from_domain(user)}


@router.delete("/{user_id}")
def delete_user(user_id: str, service=Depends(get_user_service)):
    service.delete_user(parse_id(user_id, "User not found"))
    return {"success": True, "data": {}}


@router.post("/{user_id}/reset-password")
def reset_password(user_id: str, request: PasswordResetRequest, service=Depends(get_user_service)):
    service.reset_password(parse_id(user_id, "User not found"), request.password)
    return {"success": True, "message": "Password reset successful"}
