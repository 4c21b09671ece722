from typing import Annotated, Any, Dict, List, Literal, Optional, Union
from uuid import UUID

from pydantic import Field

from deploy_platform.api.schemas.common import CamelModel


# ============================================
# Embedded sections
# ============================================

class ValidatorRequest(CamelModel):
    """Add (no ``validatorId``) or update a validator."""
    validator_id: Optional[str] = None
    name: Optional[str] = None
    power: Optional[float] = None
    address: Optional[str] = None
    pub_key: Optional[str] = None
    status: Optional[str] = None


class ModuleRequest(CamelModel):
    name: Optional[str] = None
    enabled: bool = True
    version: str = ""
    config: Dict[str, Any] = Field(default_factory=dict)


class TokenomicsRequest(CamelModel):
    denom: Optional[str] = None
    symbol: Optional[str] = None
    display: Optional[str] = None
    initial_supply: Optional[float] = None
    max_supply: Optional[float] = None


class GovernanceRequest(CamelModel):
    voting_period: Optional[float] = None
    min_deposit: Optional[float] = None
    quorum: Optional[float] = None
    threshold: Optional[float] = None


class KubernetesRuntimeRequest(CamelModel):
    kind: Literal["kubernetes"]
    cluster: str = ""
    namespace: str = "default"
    replicas: int = 1
    storage_class: Optional[str] = None


class DockerRuntimeRequest(CamelModel):
    kind: Literal["docker"]
    image: str = ""
    network: Optional[str] = None
    ports: Dict[str, int] = Field(default_factory=dict)
    environment: Dict[str, str] = Field(default_factory=dict)


RuntimeRequest = Annotated[
    Union[KubernetesRuntimeRequest, DockerRuntimeRequest],
    Field(discriminator="kind"),
]


class DeploymentRequest(CamelModel):
    provider: Optional[str] = None
    region: Optional[str] = None
    resources: Dict[str, float] = Field(default_factory=dict)
    endpoints: Dict[str, str] = Field(default_factory=dict)
    runtime: Optional[RuntimeRequest] = None


# ============================================
# Network bodies
# ============================================

class NetworkCreateRequest(CamelModel):
    name: Optional[str] = None
    chain_id: Optional[str] = None
    description: Optional[str] = None
    owner: Optional[UUID] = None
    node_count: Optional[int] = None
    deployment_type: Optional[str] = None

    validators: Optional[List[ValidatorRequest]] = None
    modules: Optional[List[ModuleRequest]] = None
    tokenomics: Optional[TokenomicsRequest] = None
    governance: Optional[GovernanceRequest] = None
    deployment: Optional[DeploymentRequest] = None


class NetworkUpdateRequest(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    node_count: Optional[int] = None
    deployment_type: Optional[str] = None


class NetworkStatusRequest(CamelModel):
    status: Optional[str] = None
