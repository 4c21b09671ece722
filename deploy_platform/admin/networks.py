# deploy_platform/admin/networks.py
"""Network management service."""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple
from uuid import UUID, uuid4

from deploy_platform.core.errors import EntityNotFound, PlatformValidationError
from deploy_platform.core.events_model import AuditEvent
from deploy_platform.core.models import (
    DeploymentSpec, DeploymentType, GovernanceParams, Network, NetworkModule,
    NetworkStatus, NetworkValidator, Tokenomics, ValidatorStatus, parse_enum,
)
from deploy_platform.core.patches import UNSET, NetworkPatch, ValidatorPatch
from deploy_platform.core.repository import NetworkRepository, UserRepository
from deploy_platform.core.schemas import NetworkOut
from deploy_platform.core.state_machine import NetworkStateMachine
from deploy_platform.wizard.rules import governance_rule, to_number


logger = logging.getLogger(__name__)


GOVERNANCE_CHECKED_FIELDS = ("voting_period", "min_deposit", "quorum", "threshold")


def present_networks(networks: Iterable[Network], user_repo: UserRepository) -> List[NetworkOut]:
    """Views with the owner reference populated (one bulk lookup)."""
    networks = list(networks)
    owners = user_repo.list_by_ids({n.owner_id for n in networks if n.owner_id})
    return [NetworkOut.from_domain(n, owners.get(n.owner_id)) for n in networks]


class NetworkService:
    """Network CRUD, status transitions and embedded validators."""

    def __init__(
        self,
        network_repo: NetworkRepository,
        user_repo: UserRepository,
        event_emitters,
    ):
        self._repo = network_repo
        self._user_repo = user_repo
        self._emitters = event_emitters

    # ============================================
    # READ
    # ============================================

    def list_networks(self) -> List[Network]:
        """Newest first."""
        return self._repo.list_all()

    def get_network(self, network_id: UUID) -> Network:
        network = self._repo.get(network_id)
        if not network:
            raise EntityNotFound("Network not found")
        return network

    def present(self, networks: Iterable[Network]) -> List[NetworkOut]:
        return present_networks(networks, self._user_repo)

    # ============================================
    # CREATE
    # ============================================

    def create_network(
        self,
        name: Optional[str],
        chain_id: Optional[str],
        owner_id: Optional[UUID],
        description: Optional[str] = None,
        node_count: Optional[int] = None,
        deployment_type: Optional[str] = None,
        *,
        validators: Optional[List[Dict[str, Any]]] = None,
        modules: Optional[List[Dict[str, Any]]] = None,
        tokenomics: Optional[Dict[str, Any]] = None,
        governance: Optional[Dict[str, Any]] = None,
        deployment: Optional[Dict[str, Any]] = None,
    ) -> Network:
        """
        Create a network in ``planned`` status.

        The owner must exist and the chain id must be unused. Optional
        sections are validated before anything is written.
        """
        name = self._clean_name(name)
        chain_id = (chain_id or "").strip()
        if not chain_id:
            raise PlatformValidationError("Please provide a chain ID")

        if not owner_id or not self._user_repo.get(owner_id):
            raise PlatformValidationError("Owner user not found")

        if self._repo.get_by_chain_id(chain_id):
            raise PlatformValidationError("Chain ID already in use")

        network = Network(
            network_id=uuid4(),
            name=name,
            chain_id=chain_id,
            owner_id=owner_id,
            description=description or "",
            status=NetworkStatus.PLANNED,
            deployment_type=parse_enum(
                DeploymentType,
                deployment_type or DeploymentType.TESTNET.value,
                "Invalid deployment type",
            ),
            node_count=self._clean_node_count(node_count if node_count is not None else 1),
            validators=[self._build_validator(v) for v in validators or []],
            modules=[self._build_module(m) for m in modules or []],
            tokenomics=Tokenomics.from_dict(tokenomics or {}),
            governance=self._build_governance(governance or {}),
            deployment=self._build_deployment(deployment or {}),
        )

        self._repo.create(network)

        logger.info(f"[networks] created network {network.network_id} ({network.chain_id})")
        self._emit([AuditEvent.network_created(network)])
        return network

    # ============================================
    # UPDATE
    # ============================================

    def update_network(self, network_id: UUID, patch: NetworkPatch) -> Network:
        """
        Apply a partial update.

        A status change runs through NetworkStateMachine and writes its own
        status audit entry next to the update entry.
        """
        network = self.get_network(network_id)
        provided = patch.provided()

        if "name" in provided:
            patch.name = self._clean_name(patch.name)
        if "description" in provided and not isinstance(patch.description, str):
            raise PlatformValidationError("Description must be a string")
        if "node_count" in provided:
            patch.node_count = self._clean_node_count(patch.node_count)
        if "deployment_type" in provided:
            patch.deployment_type = parse_enum(DeploymentType, patch.deployment_type, "Invalid deployment type")

        new_status = UNSET
        if "status" in provided:
            new_status = parse_enum(NetworkStatus, patch.status, "Invalid status")
            patch.status = UNSET

        changed = patch.apply(network)

        previous = None
        if new_status is not UNSET and new_status != network.status:
            previous = NetworkStateMachine.transition(network, new_status)
            changed.append("status")

        network.touch()
        self._repo.update(network)

        logger.info(f"[networks] updated network {network.network_id}: {changed}")

        events = [AuditEvent.network_updated(network, changed)]
        if previous is not None:
            events.append(AuditEvent.network_status_changed(network, previous))
        self._emit(events)
        return network

    def update_status(self, network_id: UUID, status: Optional[str]) -> Network:
        if not status:
            raise PlatformValidationError("Please provide a status")
        new_status = parse_enum(NetworkStatus, status, "Invalid status")

        network = self.get_network(network_id)
        previous = NetworkStateMachine.transition(network, new_status)
        self._repo.update(network)

        logger.info(
            f"[networks] network {network.network_id} status "
            f"{previous.value} -> {network.status.value}"
        )
        self._emit([AuditEvent.network_status_changed(network, previous)])
        return network

    def delete_network(self, network_id: UUID) -> None:
        network = self.get_network(network_id)

        if not self._repo.delete(network_id):
            raise EntityNotFound("Network not found")

        logger.info(f"[networks] deleted network {network_id}")
        self._emit([AuditEvent.network_deleted(network)])

    # ============================================
    # VALIDATORS
    # ============================================

    def manage_validator(self, network_id: UUID, data: Dict[str, Any]) -> Tuple[NetworkValidator, bool]:
        """
        Add a validator, or update one when ``validator_id`` is given.

        Returns ``(validator, created)``.
        """
        network = self.get_network(network_id)
        validator_id = data.get("validator_id")

        if validator_id:
            index = network.find_validator(validator_id)
            if index == -1:
                raise EntityNotFound("Validator not found")

            validator = network.validators[index]
            patch = ValidatorPatch.from_dict(data)
            provided = patch.provided()

            if "name" in provided:
                patch.name = self._clean_validator_name(patch.name)
            if "power" in provided:
                patch.power = self._clean_power(patch.power)
            if "status" in provided:
                patch.status = parse_enum(ValidatorStatus, patch.status, "Invalid validator status")

            patch.apply(validator)
            created = False
        else:
            validator = self._build_validator(data)
            network.validators.append(validator)
            created = True

        network.touch()
        self._repo.update(network)

        self._emit([AuditEvent.validator_saved(network, validator, created)])
        return validator, created

    def remove_validator(self, network_id: UUID, validator_id: str) -> None:
        network = self.get_network(network_id)

        index = network.find_validator(validator_id)
        if index == -1:
            raise EntityNotFound("Validator not found")

        validator = network.validators.pop(index)
        network.touch()
        self._repo.update(network)

        self._emit([AuditEvent.validator_removed(network, validator)])

    # ============================================
    # INTERNAL
    # ============================================

    @staticmethod
    def _clean_name(name: Optional[str]) -> str:
        if not isinstance(name, str) or not name.strip():
            raise PlatformValidationError("Please provide a network name")
        return name.strip()

    @staticmethod
    def _clean_node_count(value: Any) -> int:
        number = to_number(value)
        if number is None or number != int(number) or number < 1:
            raise PlatformValidationError("Node count must be a whole number of at least 1")
        return int(number)

    @staticmethod
    def _clean_validator_name(name: Any) -> str:
        if not isinstance(name, str) or not name.strip():
            raise PlatformValidationError("Validator name cannot be empty")
        return name.strip()

    @staticmethod
    def _clean_power(power: Any) -> float:
        number = to_number(power)
        if number is None or number <= 0:
            raise PlatformValidationError("Validator power must be a positive number")
        return number

    def _build_validator(self, data: Dict[str, Any]) -> NetworkValidator:
        if not data.get("name") or to_number(data.get("power")) in (None, 0):
            raise PlatformValidationError("Validator name and power are required")

        return NetworkValidator(
            name=self._clean_validator_name(data["name"]),
            power=self._clean_power(data["power"]),
            address=data.get("address") or "",
            pub_key=data.get("pub_key") or "",
            status=parse_enum(
                ValidatorStatus,
                data.get("status") or ValidatorStatus.ACTIVE.value,
                "Invalid validator status",
            ),
        )

    @staticmethod
    def _build_module(data: Dict[str, Any]) -> NetworkModule:
        if not data.get("name"):
            raise PlatformValidationError("Module name is required")
        if not isinstance(data.get("config") or {}, dict):
            raise PlatformValidationError("Module config must be an object")
        return NetworkModule.from_dict(data)

    @staticmethod
    def _build_governance(data: Dict[str, Any]) -> GovernanceParams:
        for field in GOVERNANCE_CHECKED_FIELDS:
            if data.get(field) is None:
                continue
            message = governance_rule(field, data[field], data)
            if message:
                raise PlatformValidationError(message)
        return GovernanceParams.from_dict({
            field: to_number(data.get(field)) for field in GOVERNANCE_CHECKED_FIELDS
        })

    @staticmethod
    def _build_deployment(data: Dict[str, Any]) -> DeploymentSpec:
        try:
            return DeploymentSpec.from_dict({k: v for k, v in data.items() if v is not None})
        except ValueError:
            raise PlatformValidationError("Invalid deployment provider")
        except TypeError:
            raise PlatformValidationError("Invalid runtime configuration")

    def _emit(self, events):
        self._emitters.emit(events)
