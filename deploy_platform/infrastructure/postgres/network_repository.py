"""Network repository."""

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from deploy_platform.core.errors import DuplicateKeyError, EntityNotFound, PersistenceError
from deploy_platform.core.models import (
    DeploymentSpec, GovernanceParams, Network, NetworkModule, NetworkStatus,
    NetworkValidator, Tokenomics, ValidatorStatus, as_utc,
)
from deploy_platform.core.repository import NetworkRepository
from deploy_platform.infrastructure.postgres.models import NetworkORM


logger = logging.getLogger(__name__)


# ============================================
# Mapping Functions
# ============================================

def network_to_orm(network: Network) -> NetworkORM:
    """Convert network domain model to ORM."""
    orm = NetworkORM(network_id=network.network_id, created_at=network.created_at)
    _copy_onto(orm, network)
    return orm


def _copy_onto(orm: NetworkORM, network: Network) -> None:
    orm.name = network.name
    orm.chain_id = network.chain_id
    orm.description = network.description
    orm.owner_id = network.owner_id
    orm.status = network.status
    orm.deployment_type = network.deployment_type
    orm.node_count = network.node_count
    orm.validators = [v.to_dict() for v in network.validators]
    orm.modules = [m.to_dict() for m in network.modules]
    orm.tokenomics = network.tokenomics.to_dict()
    orm.governance = network.governance.to_dict()
    orm.deployment = network.deployment.to_dict()
    orm.updated_at = network.updated_at
    orm.deployed_at = network.deployed_at
    orm.last_active_at = network.last_active_at


def orm_to_network(orm: NetworkORM) -> Network:
    """Convert ORM to network domain model."""
    return Network(
        network_id=orm.network_id,
        name=orm.name,
        chain_id=orm.chain_id,
        owner_id=orm.owner_id,
        description=orm.description or "",
        status=orm.status,
        deployment_type=orm.deployment_type,
        node_count=orm.node_count,
        validators=[NetworkValidator.from_dict(v) for v in (orm.validators or [])],
        modules=[NetworkModule.from_dict(m) for m in (orm.modules or [])],
        tokenomics=Tokenomics.from_dict(orm.tokenomics or {}),
        governance=GovernanceParams.from_dict(orm.governance or {}),
        deployment=DeploymentSpec.from_dict(orm.deployment or {}),
        created_at=as_utc(orm.created_at),
        updated_at=as_utc(orm.updated_at),
        deployed_at=as_utc(orm.deployed_at),
        last_active_at=as_utc(orm.last_active_at),
    )


# ============================================
# Repository Implementation
# ============================================

class SqlNetworkRepository(NetworkRepository):
    """Repository for configured networks."""

    def __init__(self, session_factory):
        self._session_factory = session_factory

    def _get_session(self):
        return self._session_factory()

    # -------------------------
    # CREATE
    # -------------------------

    def create(self, network: Network) -> None:
        session = self._get_session()
        try:
            session.add(network_to_orm(network))
            session.commit()
            logger.debug(f"[repo] created network {network.network_id} ({network.chain_id})")
        except IntegrityError as e:
            session.rollback()
            raise DuplicateKeyError("Chain ID already in use") from e
        except SQLAlchemyError as e:
            session.rollback()
            raise PersistenceError(f"Failed to create network: {e}") from e
        finally:
            session.close()

    # -------------------------
    # READ
    # -------------------------

    def get(self, network_id: UUID) -> Optional[Network]:
        session = self._get_session()
        try:
            orm = session.get(NetworkORM, network_id)
            if not orm:
                return None
            return orm_to_network(orm)
        finally:
            session.close()

    def get_by_chain_id(self, chain_id: str) -> Optional[Network]:
        session = self._get_session()
        try:
            orm = session.query(NetworkORM).filter(
                NetworkORM.chain_id == chain_id
            ).first()
            if not orm:
                return None
            return orm_to_network(orm)
        finally:
            session.close()

    def list_all(self) -> List[Network]:
        session = self._get_session()
        try:
            orms = session.query(NetworkORM).order_by(NetworkORM.created_at.desc()).all()
            return [orm_to_network(orm) for orm in orms]
        finally:
            session.close()

    def list_by_ids(self, network_ids: Iterable[UUID]) -> Dict[UUID, Network]:
        ids = {network_id for network_id in network_ids if network_id is not None}
        if not ids:
            return {}
        session = self._get_session()
        try:
            orms = session.query(NetworkORM).filter(NetworkORM.network_id.in_(ids)).all()
            return {orm.network_id: orm_to_network(orm) for orm in orms}
        finally:
            session.close()

    def list_recent(self, limit: int) -> List[Network]:
        session = self._get_session()
        try:
            orms = session.query(NetworkORM).order_by(
                NetworkORM.created_at.desc()
            ).limit(limit).all()
            return [orm_to_network(orm) for orm in orms]
        finally:
            session.close()

    def list_deployed_since(self, since: datetime, limit: int) -> List[Network]:
        session = self._get_session()
        try:
            orms = session.query(NetworkORM).filter(
                NetworkORM.deployed_at.isnot(None),
                NetworkORM.deployed_at >= since,
            ).order_by(NetworkORM.deployed_at.desc()).limit(limit).all()
            return [orm_to_network(orm) for orm in orms]
        finally:
            session.close()

    # -------------------------
    # UPDATE / DELETE
    # -------------------------

    def update(self, network: Network) -> None:
        session = self._get_session()
        try:
            orm = session.get(NetworkORM, network.network_id)
            if not orm:
                raise EntityNotFound("Network not found")

            _copy_onto(orm, network)

            session.commit()
            logger.debug(f"[repo] updated network {network.network_id} -> {network.status.value}")
        except IntegrityError as e:
            session.rollback()
            raise DuplicateKeyError("Chain ID already in use") from e
        except SQLAlchemyError as e:
            session.rollback()
            raise PersistenceError(f"Failed to update network: {e}") from e
        finally:
            session.close()

    def delete(self, network_id: UUID) -> bool:
        session = self._get_session()
        try:
            orm = session.get(NetworkORM, network_id)
            if not orm:
                return False
            session.delete(orm)
            session.commit()
            logger.debug(f"[repo] deleted network {network_id}")
            return True
        except SQLAlchemyError as e:
            session.rollback()
            raise PersistenceError(f"Failed to delete network: {e}") from e
        finally:
            session.close()

    # -------------------------
    # AGGREGATES
    # -------------------------

    def count(self, status: Optional[NetworkStatus] = None) -> int:
        session = self._get_session()
        try:
            query = session.query(func.count(NetworkORM.network_id))
            if status is not None:
                query = query.filter(NetworkORM.status == status)
            return query.scalar() or 0
        finally:
            session.close()

    def count_by_status(self) -> Dict[str, int]:
        session = self._get_session()
        try:
            rows = session.query(
                NetworkORM.status, func.count(NetworkORM.network_id)
            ).group_by(NetworkORM.status).all()
            return {status.value: count for status, count in rows}
        finally:
            session.close()

    def count_by_deployment_type(self) -> Dict[str, int]:
        session = self._get_session()
        try:
            rows = session.query(
                NetworkORM.deployment_type, func.count(NetworkORM.network_id)
            ).group_by(NetworkORM.deployment_type).all()
            return {deployment_type.value: count for deployment_type, count in rows}
        finally:
            session.close()

    def _all_validators(self) -> List[dict]:
        session = self._get_session()
        try:
            rows = session.query(NetworkORM.validators).all()
            return [validator for (validators,) in rows for validator in (validators or [])]
        finally:
            session.close()

    def validator_stats(self) -> Dict[str, Dict[str, float]]:
        """
        Group embedded validators by status.

        Done in Python - JSON unwinding differs between PostgreSQL and SQLite.
        """
        stats: Dict[str, Dict[str, float]] = {}
        for validator in self._all_validators():
            status = validator.get("status", ValidatorStatus.ACTIVE.value)
            entry = stats.setdefault(status, {"count": 0, "totalPower": 0})
            entry["count"] += 1
            entry["totalPower"] += validator.get("power") or 0
        return stats

    def count_active_validators(self) -> int:
        return sum(
            1 for validator in self._all_validators()
            if validator.get("status", ValidatorStatus.ACTIVE.value) == ValidatorStatus.ACTIVE.value
        )
