"""Initial schema - users, roles, permissions, delegations, audit log.

Revision ID: 001
Revises:
Create Date: 2026-10-17

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

ADMIN_PERMISSIONS = [
    ("role:read", "ROLE", "READ"),
    ("role:manage", "ROLE", "MANAGE"),
    ("permission:read", "PERMISSION", "READ"),
    ("permission:manage", "PERMISSION", "MANAGE"),
    ("user:read", "USER", "READ"),
    ("user:manage", "USER", "MANAGE"),
    ("delegation:read", "DELEGATION", "READ"),
    ("delegation:manage", "DELEGATION", "MANAGE"),
    ("audit_log:read", "AUDIT_LOG", "READ"),
    ("report:read", "REPORT", "READ"),
    ("system:evaluate", "SYSTEM", "EVALUATE"),
]


def upgrade() -> None:
    op.create_table(
        "app_user",
        sa.Column("id", sa.String(255), primary_key=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("display_name", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "role",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_role_name", "role", ["name"], unique=True)

    op.create_table(
        "permission",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("resource_type", sa.String(50), nullable=False),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("description", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_permission_name", "permission", ["name"], unique=True)
    op.create_index("ix_permission_resource_action", "permission", ["resource_type", "action"])

    op.create_table(
        "role_permission",
        sa.Column("role_id", sa.UUID(), sa.ForeignKey("role.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("permission_id", sa.UUID(), sa.ForeignKey("permission.id", ondelete="RESTRICT"), primary_key=True),
    )

    op.create_table(
        "user_role",
        sa.Column("user_id", sa.String(255), sa.ForeignKey("app_user.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("role_id", sa.UUID(), sa.ForeignKey("role.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("assigned_by", sa.String(255), nullable=True),
    )

    op.create_table(
        "permission_delegation",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("delegator_id", sa.String(255), sa.ForeignKey("app_user.id"), nullable=False),
        sa.Column("delegatee_id", sa.String(255), sa.ForeignKey("app_user.id"), nullable=False),
        sa.Column("role_id", sa.UUID(), sa.ForeignKey("role.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("revoked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_reason", sa.String(20), nullable=True),
        sa.CheckConstraint("expires_at > created_at", name="ck_delegation_expiry_after_creation"),
        sa.CheckConstraint("delegator_id <> delegatee_id", name="ck_delegation_not_self"),
        sa.CheckConstraint(
            "end_reason IS NULL OR end_reason IN ('revoked', 'expired')",
            name="ck_delegation_end_reason",
        ),
    )
    op.create_index(
        "ix_delegation_delegatee_unrevoked",
        "permission_delegation",
        ["delegatee_id"],
        postgresql_where=sa.text("revoked_at IS NULL"),
    )
    op.create_index("ix_delegation_delegator", "permission_delegation", ["delegator_id"])

    op.create_table(
        "audit_log",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("actor_id", sa.String(255), nullable=False),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("resource_type", sa.String(50), nullable=False),
        sa.Column("resource_id", sa.String(255), nullable=False),
        sa.Column("result", sa.String(10), nullable=False),
        sa.Column("details", postgresql.JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("ip_address", sa.String(64), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
    )
    op.create_index("ix_audit_log_timestamp", "audit_log", ["timestamp"])
    op.create_index("ix_audit_log_actor_timestamp", "audit_log", ["actor_id", "timestamp"])
    op.create_index(
        "ix_audit_log_resource_timestamp",
        "audit_log",
        ["resource_type", "resource_id", "timestamp"],
    )

    # Append-only
    op.execute("""
        CREATE FUNCTION audit_log_reject_change() RETURNS trigger AS $$
        BEGIN
            RAISE EXCEPTION 'audit_log is append-only';
        END;
        $$ LANGUAGE plpgsql
    """)
    op.execute("""
        CREATE TRIGGER audit_log_append_only
        BEFORE UPDATE OR DELETE ON audit_log
        FOR EACH ROW EXECUTE FUNCTION audit_log_reject_change()
    """)

    # Seed admin role with the permissions the API checks
    op.execute("""
        INSERT INTO role (id, name, description) VALUES
        (gen_random_uuid(), 'admin', 'Manage roles, permissions, delegations; read audit log')
    """)
    for name, resource_type, action in ADMIN_PERMISSIONS:
        op.execute(
            sa.text(
                "INSERT INTO permission (id, name, resource_type, action) "
                "VALUES (gen_random_uuid(), :name, :resource_type, :action)"
            ).bindparams(name=name, resource_type=resource_type, action=action)
        )
    op.execute("""
        INSERT INTO role_permission (role_id, permission_id)
        SELECT r.id, p.id FROM role r CROSS JOIN permission p WHERE r.name = 'admin'
    """)


def downgrade() -> None:
    op.execute("DROP TRIGGER IF EXISTS audit_log_append_only ON audit_log")
    op.execute("DROP FUNCTION IF EXISTS audit_log_reject_change()")
    op.drop_table("audit_log")
    op.drop_table("permission_delegation")
    op.drop_table("user_role")
    op.drop_table("role_permission")
    op.drop_table("permission")
    op.drop_table("role")
    op.drop_table("app_user")
