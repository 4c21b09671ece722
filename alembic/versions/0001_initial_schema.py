"""initial schema: users, networks, system_logs

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


user_role = sa.Enum("USER", "ADMIN", "MANAGER", name="user_role")
network_status = sa.Enum(
    "PLANNED", "DEPLOYING", "ACTIVE", "ERROR", "STOPPED", "TERMINATED", name="network_status"
)
deployment_type = sa.Enum("LOCAL", "TESTNET", "MAINNET", "PRIVATE", name="deployment_type")
log_level = sa.Enum("INFO", "WARNING", "ERROR", "CRITICAL", name="log_level")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("user_id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", user_role, nullable=False),
        sa.Column("company", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"])
    op.create_index("ix_users_last_login", "users", ["last_login"])

    op.create_table(
        "networks",
        sa.Column("network_id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("chain_id", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column(
            "owner_id", sa.Uuid(),
            sa.ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("status", network_status, nullable=False),
        sa.Column("deployment_type", deployment_type, nullable=False),
        sa.Column("node_count", sa.Integer(), nullable=False),
        sa.Column("validators", sa.JSON(), nullable=False),
        sa.Column("modules", sa.JSON(), nullable=False),
        sa.Column("tokenomics", sa.JSON(), nullable=False),
        sa.Column("governance", sa.JSON(), nullable=False),
        sa.Column("deployment", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deployed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_active_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_networks_chain_id", "networks", ["chain_id"], unique=True)
    op.create_index("ix_networks_owner_id", "networks", ["owner_id"])
    op.create_index("ix_networks_status", "networks", ["status"])
    op.create_index("ix_networks_created_at", "networks", ["created_at"])
    op.create_index("ix_networks_deployed_at", "networks", ["deployed_at"])
    op.create_index("ix_networks_deployment_type", "networks", ["deployment_type"])

    op.create_table(
        "system_logs",
        sa.Column("log_id", sa.Uuid(), primary_key=True),
        sa.Column("level", log_level, nullable=False),
        sa.Column("source", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("details", sa.JSON(), nullable=True),
        sa.Column(
            "user_id", sa.Uuid(),
            sa.ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column(
            "network_id", sa.Uuid(),
            sa.ForeignKey("networks.network_id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("resolved", sa.Boolean(), nullable=False),
        sa.Column(
            "resolved_by", sa.Uuid(),
            sa.ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("actions", sa.JSON(), nullable=False),
    )
    op.create_index("ix_system_logs_timestamp", "system_logs", ["timestamp"])
    op.create_index("ix_system_logs_level_resolved", "system_logs", ["level", "resolved"])
    op.create_index("ix_system_logs_source", "system_logs", ["source"])


def downgrade() -> None:
    op.drop_table("system_logs")
    op.drop_table("networks")
    op.drop_table("users")

    bind = op.get_bind()
    for enum in (log_level, deployment_type, network_status, user_role):
        enum.drop(bind, checkfirst=True)
