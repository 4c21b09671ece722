"""Pydantic response views (camelCase on the wire)."""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from deploy_platform.core.models import (
    DeploymentSpec, LogAction, Network, NetworkValidator, SystemLog, User, runtime_to_dict,
)


class _View(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ============================================
# References
# ============================================

class UserRef(_View):
    """Populated user reference."""

    id: UUID
    name: str
    email: str

    @classmethod
    def from_domain(cls, user: Optional[User]) -> Optional["UserRef"]:
        if user is None:
            return None
        return cls(id=user.user_id, name=user.name, email=user.email)


class NetworkRef(_View):
    """Populated network reference."""

    id: UUID
    name: str
    chain_id: str

    @classmethod
    def from_domain(cls, network: Optional[Network]) -> Optional["NetworkRef"]:
        if network is None:
            return None
        return cls(id=network.network_id, name=network.name, chain_id=network.chain_id)


# ============================================
# Users
# ============================================

class UserOut(_View):
    """User without credentials."""

    id: UUID
    name: str
    email: str
    role: str
    company: str
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, user: User) -> "UserOut":
        return cls(
            id=user.user_id,
            name=user.name,
            email=user.email,
            role=user.role.value,
            company=user.company,
            is_active=user.is_active,
            last_login=user.last_login,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class UserActivityOut(_View):
    id: UUID
    name: str
    email: str
    last_login: Optional[datetime] = None

    @classmethod
    def from_domain(cls, user: User) -> "UserActivityOut":
        return cls(id=user.user_id, name=user.name, email=user.email, last_login=user.last_login)


# ============================================
# Networks
# ============================================

class ValidatorOut(_View):
    id: str
    name: str
    power: float
    address: str
    pub_key: str
    status: str

    @classmethod
    def from_domain(cls, validator: NetworkValidator) -> "ValidatorOut":
        return cls(
            id=validator.validator_id,
            name=validator.name,
            power=validator.power,
            address=validator.address,
            pub_key=validator.pub_key,
            status=validator.status.value,
        )


class ModuleOut(_View):
    name: str
    enabled: bool
    version: str
    config: Dict[str, Any]


class TokenomicsOut(_View):
    denom: str
    symbol: str
    display: str
    initial_supply: Optional[float] = None
    max_supply: Optional[float] = None


class GovernanceOut(_View):
    voting_period: Optional[float] = None
    min_deposit: Optional[float] = None
    quorum: Optional[float] = None
    threshold: Optional[float] = None


class DeploymentOut(_View):
    provider: str
    region: str
    resources: Dict[str, Any]
    endpoints: Dict[str, str]
    runtime: Optional[Dict[str, Any]] = None

    @classmethod
    def from_domain(cls, deployment: DeploymentSpec) -> "DeploymentOut":
        runtime = runtime_to_dict(deployment.runtime)
        return cls(
            provider=deployment.provider.value,
            region=deployment.region,
            resources=deployment.resources,
            endpoints=deployment.endpoints,
            runtime={to_camel(key): value for key, value in runtime.items()} if runtime else None,
        )


class NetworkOut(_View):
    """Network with its owner populated."""

    id: UUID
    name: str
    chain_id: str
    description: str
    owner: Optional[UserRef] = None
    status: str
    deployment_type: str
    node_count: int
    validators: List[ValidatorOut]
    modules: List[ModuleOut]
    tokenomics: TokenomicsOut
    governance: GovernanceOut
    deployment: DeploymentOut
    created_at: datetime
    updated_at: datetime
    deployed_at: Optional[datetime] = None
    last_active_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, network: Network, owner: Optional[User] = None) -> "NetworkOut":
        return cls(
            id=network.network_id,
            name=network.name,
            chain_id=network.chain_id,
            description=network.description,
            owner=UserRef.from_domain(owner),
            status=network.status.value,
            deployment_type=network.deployment_type.value,
            node_count=network.node_count,
            validators=[ValidatorOut.from_domain(v) for v in network.validators],
            modules=[ModuleOut(**m.to_dict()) for m in network.modules],
            tokenomics=TokenomicsOut(**network.tokenomics.to_dict()),
            governance=GovernanceOut(**network.governance.to_dict()),
            deployment=DeploymentOut.from_domain(network.deployment),
            created_at=network.created_at,
            updated_at=network.updated_at,
            deployed_at=network.deployed_at,
            last_active_at=network.last_active_at,
        )


# ============================================
# System logs
# ============================================

class LogActionOut(_View):
    action: str
    timestamp: datetime
    user_id: Optional[UUID] = None
    result: Any = None

    @classmethod
    def from_domain(cls, action: LogAction) -> "LogActionOut":
        return cls(
            action=action.action,
            timestamp=action.timestamp,
            user_id=action.user_id,
            result=action.result,
        )


class SystemLogOut(_View):
    """
    Log entry. ``user``, ``network`` and ``resolver`` carry the populated
    references when they could be resolved.
    """

    id: UUID
    level: str
    source: str
    message: str
    details: Any = None
    user_id: Optional[UUID] = None
    network_id: Optional[UUID] = None
    user: Optional[UserRef] = None
    network: Optional[NetworkRef] = None
    timestamp: datetime
    resolved: bool
    resolved_by: Optional[UUID] = None
    resolver: Optional[UserRef] = None
    resolved_at: Optional[datetime] = None
    actions: List[LogActionOut]

    @classmethod
    def from_domain(
        cls,
        log: SystemLog,
        users: Optional[Dict[UUID, User]] = None,
        networks: Optional[Dict[UUID, Network]] = None,
    ) -> "SystemLogOut":
        users = users or {}
        networks = networks or {}
        return cls(
            id=log.log_id,
            level=log.level.value,
            source=log.source,
            message=log.message,
            details=log.details,
            user_id=log.user_id,
            network_id=log.network_id,
            user=UserRef.from_domain(users.get(log.user_id)),
            network=NetworkRef.from_domain(networks.get(log.network_id)),
            timestamp=log.timestamp,
            resolved=log.resolved,
            resolved_by=log.resolved_by,
            resolver=UserRef.from_domain(users.get(log.resolved_by)),
            resolved_at=log.resolved_at,
            actions=[LogActionOut.from_domain(a) for a in log.actions],
        )
