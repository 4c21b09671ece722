from typing import Any, Optional
from uuid import UUID

from deploy_platform.api.schemas.common import CamelModel


class LogCreateRequest(CamelModel):
    level: Optional[str] = None
    source: Optional[str] = None
    message: Optional[str] = None
    details: Any = None
    user_id: Optional[UUID] = None
    network_id: Optional[UUID] = None


class LogResolveRequest(CamelModel):
    user_id: Optional[UUID] = None
    action: Optional[str] = None
