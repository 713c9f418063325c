"""initial schema: materials, processes, purchases, period balances

Revision ID: 0001
Revises:
Create Date: 2025-01-06 09:00:00

"""
from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def _qty(name, nullable=False):
    return sa.Column(
        name, sa.Numeric(18, 3), nullable=nullable, server_default=sa.text("0")
    )


def upgrade() -> None:
    op.create_table(
        "user_account",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(80), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(120)),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column(
            "role",
            sa.Enum("ADMIN", "STOREKEEPER", "PRODUCTION", "VIEWER", name="userrole"),
            nullable=False,
        ),
    )
    op.create_index(
        "ix_user_account_username", "user_account", ["username"], unique=True
    )

    op.create_table(
        "raw_materials",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("category", sa.String(100)),
        sa.Column("unit", sa.String(32)),
        _qty("current_stock", nullable=True),
        _qty("min_stock", nullable=True),
    )
    op.create_index("ix_raw_materials_name", "raw_materials", ["name"])

    op.create_table(
        "processes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(120), nullable=False, unique=True),
        sa.Column(
            "type",
            sa.Enum("PRE_PRODUCTION", "PRODUCTION", name="processtype"),
            nullable=False,
        ),
    )

    op.create_table(
        "stock_purchases",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("vendor", sa.String(255), nullable=False),
        sa.Column(
            "raw_material_id",
            sa.Integer(),
            sa.ForeignKey("raw_materials.id"),
            nullable=False,
        ),
        sa.Column("quantity", sa.Numeric(18, 3), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime()),
    )
    op.create_index(
        "ix_stock_purchases_raw_material_id", "stock_purchases", ["raw_material_id"]
    )
    op.create_index("ix_stock_purchases_date", "stock_purchases", ["date"])

    op.create_table(
        "stock_status",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "raw_material_id",
            sa.Integer(),
            sa.ForeignKey("raw_materials.id"),
            nullable=False,
        ),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        _qty("opening_balance"),
        sa.Column(
            "opening_manual",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
        _qty("purchases"),
        _qty("utilized"),
        _qty("adjustment"),
        _qty("closing_balance"),
        _qty("min_level", nullable=True),
        sa.Column("updated_at", sa.DateTime()),
        sa.UniqueConstraint(
            "raw_material_id", "year", "month", name="uq_stock_status_period"
        ),
    )
    op.create_index(
        "ix_stock_status_raw_material_id", "stock_status", ["raw_material_id"]
    )

    op.create_table(
        "production_status",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "raw_material_id",
            sa.Integer(),
            sa.ForeignKey("raw_materials.id"),
            nullable=False,
        ),
        sa.Column(
            "process_id", sa.Integer(), sa.ForeignKey("processes.id"), nullable=False
        ),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        _qty("opening_balance"),
        _qty("purchases"),
        _qty("assigned"),
        _qty("completed"),
        _qty("wastage"),
        _qty("pending"),
        _qty("adjustment"),
        _qty("closing_balance"),
        _qty("min_level", nullable=True),
        sa.Column("updated_at", sa.DateTime()),
        sa.UniqueConstraint(
            "raw_material_id",
            "process_id",
            "year",
            "month",
            name="uq_production_status_period",
        ),
    )
    op.create_index(
        "ix_production_status_raw_material_id",
        "production_status",
        ["raw_material_id"],
    )
    op.create_index(
        "ix_production_status_process_id", "production_status", ["process_id"]
    )


def downgrade() -> None:
    op.drop_table("production_status")
    op.drop_table("stock_status")
    op.drop_table("stock_purchases")
    op.drop_table("processes")
    op.drop_index("ix_raw_materials_name", table_name="raw_materials")
    op.drop_table("raw_materials")
    op.drop_index("ix_user_account_username", table_name="user_account")
    op.drop_table("user_account")
    sa.Enum(name="processtype").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="userrole").drop(op.get_bind(), checkfirst=True)
