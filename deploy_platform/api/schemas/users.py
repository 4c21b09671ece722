from typing import Optional

from deploy_platform.api.schemas.common import CamelModel


class UserCreateRequest(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None
    company: Optional[str] = None


class UserUpdateRequest(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    company: Optional[str] = None
    is_active: Optional[bool] = None


class PasswordResetRequest(CamelModel):
    password: Optional[str] = None
