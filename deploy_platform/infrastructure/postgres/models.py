"""SQLAlchemy ORM models for database tables."""

from uuid import uuid4

from sqlalchemy import (
    Boolean, Column, DateTime, Enum as SQLEnum, ForeignKey, Index, Integer, JSON, String, Text, Uuid,
)

from deploy_platform.core.models import (
    DeploymentType, LogLevel, NetworkStatus, UserRole, utcnow,
)
from deploy_platform.infrastructure.postgres.database import Base


# ============================================
# USERS
# ============================================

class UserORM(Base):
    """User table."""

    __tablename__ = "users"

    user_id = Column(Uuid, primary_key=True, default=uuid4)

    name = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)

    role = Column(SQLEnum(UserRole, name="user_role"), nullable=False, default=UserRole.USER)
    company = Column(String(255), nullable=False, default="")
    is_active = Column(Boolean, nullable=False, default=True)

    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index('ix_users_role', 'role'),
        Index('ix_users_last_login', 'last_login'),
    )

    def __repr__(self) -> str:
        return f"<UserORM(user_id={self.user_id}, email={self.email})>"


# ============================================
# NETWORKS
# ============================================

class NetworkORM(Base):
    """
    Network table.

    Validators, modules, tokenomics, governance and deployment are embedded
    JSON documents owned by the row.
    """

    __tablename__ = "networks"

    network_id = Column(Uuid, primary_key=True, default=uuid4)

    name = Column(String(255), nullable=False)
    chain_id = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=False, default="")

    owner_id = Column(Uuid, ForeignKey('users.user_id', ondelete="SET NULL"), nullable=True, index=True)

    status = Column(
        SQLEnum(NetworkStatus, name="network_status"),
        nullable=False,
        default=NetworkStatus.PLANNED,
        index=True
    )
    deployment_type = Column(
        SQLEnum(DeploymentType, name="deployment_type"),
        nullable=False,
        default=DeploymentType.TESTNET
    )
    node_count = Column(Integer, nullable=False, default=1)

    validators = Column(JSON, nullable=False, default=list)
    modules = Column(JSON, nullable=False, default=list)
    tokenomics = Column(JSON, nullable=False, default=dict)
    governance = Column(JSON, nullable=False, default=dict)
    deployment = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    deployed_at = Column(DateTime(timezone=True), nullable=True, index=True)
    last_active_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index('ix_networks_deployment_type', 'deployment_type'),
    )

    def __repr__(self) -> str:
        return (
            f"<NetworkORM(network_id={self.network_id}, "
            f"chain_id={self.chain_id}, "
            f"status={self.status.value})>"
        )


# ============================================
# SYSTEM LOGS
# ============================================

class SystemLogORM(Base):
    """System log table."""

    __tablename__ = "system_logs"

    log_id = Column(Uuid, primary_key=True, default=uuid4)

    level = Column(SQLEnum(LogLevel, name="log_level"), nullable=False, default=LogLevel.INFO)
    source = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    details = Column(JSON, nullable=True)

    user_id = Column(Uuid, ForeignKey('users.user_id', ondelete="SET NULL"), nullable=True)
    network_id = Column(Uuid, ForeignKey('networks.network_id', ondelete="SET NULL"), nullable=True)

    timestamp = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    resolved = Column(Boolean, nullable=False, default=False)
    resolved_by = Column(Uuid, ForeignKey('users.user_id', ondelete="SET NULL"), nullable=True)
    resolved_at = Column(DateTime(timezone=True), nullable=True)

    actions = Column(JSON, nullable=False, default=list)

    __table_args__ = (
        Index('ix_system_logs_timestamp', 'timestamp'),
        Index('ix_system_logs_level_resolved', 'level', 'resolved'),
        Index('ix_system_logs_source', 'source'),
    )

    def __repr__(self) -> str:
        return f"<SystemLogORM(log_id={self.log_id}, level={self.level.value})>"
