# deploy_platform/core/repository.py

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from deploy_platform.core.models import (
    LogLevel, Network, NetworkStatus, SystemLog, User,
)


class UserRepository(ABC):
    """
    Persistence contract for users.
    """

    @abstractmethod
    def create(self, user: User) -> None:
        """
        Persist a new user.
        Must fail with DuplicateKeyError if the email is taken.
        """
        raise NotImplementedError

    @abstractmethod
    def get(self, user_id: UUID) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> List[User]:
        raise NotImplementedError

    @abstractmethod
    def list_by_ids(self, user_ids: Iterable[UUID]) -> Dict[UUID, User]:
        """Bulk lookup used to resolve references."""
        raise NotImplementedError

    @abstractmethod
    def update(self, user: User) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, user_id: UUID) -> bool:
        raise NotImplementedError

    @abstractmethod
    def count(self, is_active: Optional[bool] = None) -> int:
        raise NotImplementedError

    @abstractmethod
    def count_by_role(self) -> Dict[str, int]:
        raise NotImplementedError

    @abstractmethod
    def list_recent_logins(self, limit: int) -> List[User]:
        raise NotImplementedError


class NetworkRepository(ABC):
    """
    Persistence contract for networks.
    """

    @abstractmethod
    def create(self, network: Network) -> None:
        """
        Persist a new network.
        Must fail with DuplicateKeyError if the chain id is taken.
        """
        raise NotImplementedError

    @abstractmethod
    def get(self, network_id: UUID) -> Optional[Network]:
        raise NotImplementedError

    @abstractmethod
    def get_by_chain_id(self, chain_id: str) -> Optional[Network]:
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> List[Network]:
        raise NotImplementedError

    @abstractmethod
    def list_by_ids(self, network_ids: Iterable[UUID]) -> Dict[UUID, Network]:
        raise NotImplementedError

    @abstractmethod
    def update(self, network: Network) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, network_id: UUID) -> bool:
        raise NotImplementedError

    @abstractmethod
    def count(self, status: Optional[NetworkStatus] = None) -> int:
        raise NotImplementedError

    @abstractmethod
    def count_by_status(self) -> Dict[str, int]:
        raise NotImplementedError

    @abstractmethod
    def count_by_deployment_type(self) -> Dict[str, int]:
        raise NotImplementedError

    @abstractmethod
    def list_recent(self, limit: int) -> List[Network]:
        raise NotImplementedError

    @abstractmethod
    def list_deployed_since(self, since: datetime, limit: int) -> List[Network]:
        raise NotImplementedError

    @abstractmethod
    def validator_stats(self) -> Dict[str, Dict[str, float]]:
        """Per validator status: {"count": n, "totalPower": p}."""
        raise NotImplementedError

    @abstractmethod
    def count_active_validators(self) -> int:
        raise NotImplementedError


class SystemLogRepository(ABC):
    """
    Persistence contract for system logs.
    """

    @abstractmethod
    def create(self, log: SystemLog) -> None:
        raise NotImplementedError

    @abstractmethod
    def get(self, log_id: UUID) -> Optional[SystemLog]:
        raise NotImplementedError

    @abstractmethod
    def update(self, log: SystemLog) -> None:
        raise NotImplementedError

    @abstractmethod
    def list(
        self,
        *,
        level: Optional[LogLevel] = None,
        source: Optional[str] = None,
        resolved: Optional[bool] = None,
        levels: Optional[Iterable[LogLevel]] = None,
        offset: int = 0,
        limit: int = 100,
    ) -> List[SystemLog]:
        """Newest first."""
        raise NotImplementedError

    @abstractmethod
    def count(
        self,
        *,
        level: Optional[LogLevel] = None,
        source: Optional[str] = None,
        resolved: Optional[bool] = None,
        levels: Optional[Iterable[LogLevel]] = None,
        since: Optional[datetime] = None,
    ) -> int:
        raise NotImplementedError

    @abstractmethod
    def count_errors(
        self,
        *,
        unresolved_only: bool = False,
        since: Optional[datetime] = None,
    ) -> int:
        """Count error and critical entries."""
        raise NotImplementedError
