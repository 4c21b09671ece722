"""Core domain models for users, networks and system logs."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union
from uuid import UUID, uuid4

from deploy_platform.core.errors import PlatformValidationError


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive timestamps (SQLite drops the offset)."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ============================================
# ENUMS
# ============================================

class UserRole(Enum):
    USER = "user"
    ADMIN = "admin"
    MANAGER = "manager"


class NetworkStatus(Enum):
    """Network lifecycle status."""
    PLANNED = "planned"
    DEPLOYING = "deploying"
    ACTIVE = "active"
    ERROR = "error"
    STOPPED = "stopped"
    TERMINATED = "terminated"


class DeploymentType(Enum):
    LOCAL = "local"
    TESTNET = "testnet"
    MAINNET = "mainnet"
    PRIVATE = "private"


class ValidatorStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    JAILED = "jailed"


class CloudProvider(Enum):
    """Hosting provider recorded on a network's deployment section."""
    AWS = "aws"
    GCP = "gcp"
    AZURE = "azure"
    DIGITALOCEAN = "digitalocean"
    LOCAL = "local"


class LogLevel(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


ERROR_LEVELS = (LogLevel.ERROR, LogLevel.CRITICAL)


def parse_enum(enum_cls, value, message: str):
    """Coerce a raw value into ``enum_cls`` or raise a validation error."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise PlatformValidationError(message)


# ============================================
# USER
# ============================================

@dataclass
class User:
    """Platform user managed from the admin panel."""

    user_id: UUID
    name: str
    email: str
    password_hash: str
    role: UserRole = UserRole.USER
    company: str = ""
    is_active: bool = True
    last_login: Optional[datetime] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def touch(self) -> None:
        self.updated_at = utcnow()


# ============================================
# NETWORK (embedded documents)
# ============================================

@dataclass
class NetworkValidator:
    """Validator embedded in a network record."""

    name: str
    power: float
    address: str = ""
    pub_key: str = ""
    status: ValidatorStatus = ValidatorStatus.ACTIVE
    validator_id: str = field(default_factory=lambda: uuid4().hex)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "validator_id": self.validator_id,
            "name": self.name,
            "power": self.power,
            "address": self.address,
            "pub_key": self.pub_key,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NetworkValidator":
        return cls(
            validator_id=data.get("validator_id") or uuid4().hex,
            name=data.get("name", ""),
            power=data.get("power", 0),
            address=data.get("address", ""),
            pub_key=data.get("pub_key", ""),
            status=ValidatorStatus(data.get("status", ValidatorStatus.ACTIVE.value)),
        )


@dataclass
class NetworkModule:
    """Chain module toggle. ``config`` is an opaque JSON object."""

    name: str
    enabled: bool = True
    version: str = ""
    config: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "enabled": self.enabled,
            "version": self.version,
            "config": self.config,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NetworkModule":
        return cls(
            name=data.get("name", ""),
            enabled=data.get("enabled", True),
            version=data.get("version", ""),
            config=data.get("config") or {},
        )


@dataclass
class Tokenomics:
    denom: str = ""
    symbol: str = ""
    display: str = ""
    initial_supply: Optional[float] = None
    max_supply: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "denom": self.denom,
            "symbol": self.symbol,
            "display": self.display,
            "initial_supply": self.initial_supply,
            "max_supply": self.max_supply,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Tokenomics":
        return cls(
            denom=data.get("denom") or "",
            symbol=data.get("symbol") or "",
            display=data.get("display") or "",
            initial_supply=data.get("initial_supply"),
            max_supply=data.get("max_supply"),
        )


@dataclass
class GovernanceParams:
    voting_period: Optional[float] = None
    min_deposit: Optional[float] = None
    quorum: Optional[float] = None
    threshold: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "voting_period": self.voting_period,
            "min_deposit": self.min_deposit,
            "quorum": self.quorum,
            "threshold": self.threshold,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GovernanceParams":
        return cls(
            voting_period=data.get("voting_period"),
            min_deposit=data.get("min_deposit"),
            quorum=data.get("quorum"),
            threshold=data.get("threshold"),
        )


# -------------------------
# Runtime config variants
# -------------------------

@dataclass
class KubernetesRuntime:
    """Kubernetes placement for the network's nodes."""
    cluster: str = ""
    namespace: str = "default"
    replicas: int = 1
    storage_class: Optional[str] = None

    kind = "kubernetes"


@dataclass
class DockerRuntime:
    """Plain Docker placement for the network's nodes."""
    image: str = ""
    network: Optional[str] = None
    ports: Dict[str, int] = field(default_factory=dict)
    environment: Dict[str, str] = field(default_factory=dict)

    kind = "docker"


RuntimeConfig = Union[KubernetesRuntime, DockerRuntime]

RUNTIME_KINDS = {
    KubernetesRuntime.kind: KubernetesRuntime,
    DockerRuntime.kind: DockerRuntime,
}


def runtime_to_dict(runtime: Optional[RuntimeConfig]) -> Optional[Dict[str, Any]]:
    if runtime is None:
        return None
    data = dict(runtime.__dict__)
    data["kind"] = runtime.kind
    return data


def runtime_from_dict(data: Optional[Dict[str, Any]]) -> Optional[RuntimeConfig]:
    if not data:
        return None
    payload = dict(data)
    kind = payload.pop("kind", None)
    runtime_cls = RUNTIME_KINDS.get(kind)
    if runtime_cls is None:
        raise PlatformValidationError(f"Unknown runtime kind: {kind}")
    return runtime_cls(**payload)


@dataclass
class DeploymentSpec:
    """Where and how a network is hosted."""

    provider: CloudProvider = CloudProvider.LOCAL
    region: str = ""
    resources: Dict[str, float] = field(default_factory=dict)  # cpu, memory, storage
    endpoints: Dict[str, str] = field(default_factory=dict)  # rpc, api, explorer
    runtime: Optional[RuntimeConfig] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "provider": self.provider.value,
            "region": self.region,
            "resources": self.resources,
            "endpoints": self.endpoints,
            "runtime": runtime_to_dict(self.runtime),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeploymentSpec":
        return cls(
            provider=CloudProvider(data.get("provider", CloudProvider.LOCAL.value)),
            region=data.get("region") or "",
            resources=data.get("resources") or {},
            endpoints=data.get("endpoints") or {},
            runtime=runtime_from_dict(data.get("runtime")),
        )


# ============================================
# NETWORK
# ============================================

@dataclass
class Network:
    """Configured blockchain network."""

    network_id: UUID
    name: str
    chain_id: str
    owner_id: Optional[UUID]
    description: str = ""
    status: NetworkStatus = NetworkStatus.PLANNED
    deployment_type: DeploymentType = DeploymentType.TESTNET
    node_count: int = 1

    validators: List[NetworkValidator] = field(default_factory=list)
    modules: List[NetworkModule] = field(default_factory=list)
    tokenomics: Tokenomics = field(default_factory=Tokenomics)
    governance: GovernanceParams = field(default_factory=GovernanceParams)
    deployment: DeploymentSpec = field(default_factory=DeploymentSpec)

    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    deployed_at: Optional[datetime] = None
    last_active_at: Optional[datetime] = None

    def find_validator(self, validator_id: str) -> int:
        """Index of the validator with ``validator_id``, or -1."""
        for index, validator in enumerate(self.validators):
            if validator.validator_id == validator_id:
                return index
        return -1

    def touch(self) -> None:
        self.updated_at = utcnow()


# ============================================
# SYSTEM LOG
# ============================================

@dataclass
class LogAction:
    action: str
    timestamp: datetime = field(default_factory=utcnow)
    user_id: Optional[UUID] = None
    result: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": self.action,
            "timestamp": self.timestamp.isoformat(),
            "user_id": str(self.user_id) if self.user_id else None,
            "result": self.result,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LogAction":
        return cls(
            action=data["action"],
            timestamp=datetime.fromisoformat(data["timestamp"]),
            user_id=UUID(data["user_id"]) if data.get("user_id") else None,
            result=data.get("result"),
        )


@dataclass
class SystemLog:
    """Audit / operational log entry."""

    log_id: UUID
    level: LogLevel
    source: str
    message: str
    details: Any = None
    user_id: Optional[UUID] = None
    network_id: Optional[UUID] = None
    timestamp: datetime = field(default_factory=utcnow)

    resolved: bool = False
    resolved_by: Optional[UUID] = None
    resolved_at: Optional[datetime] = None
    actions: List[LogAction] = field(default_factory=list)

    def resolve(
        self,
        user_id: Optional[UUID] = None,
        action: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
    ) -> None:
        """Mark resolved; records an action entry only when one is given."""
        now = now or utcnow()

        self.resolved = True
        self.resolved_by = user_id
        self.resolved_at = now

        if action:
            self.actions.append(
                LogAction(
                    action=action,
                    timestamp=now,
                    user_id=user_id,
                    result="Log marked as resolved",
                )
            )
