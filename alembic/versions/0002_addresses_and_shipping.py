"""saved addresses, order shipping cost and item name snapshot

Revision ID: 0002_addresses_and_shipping
Revises: 0001_initial_schema
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

revision = "0002_addresses_and_shipping"
down_revision = "0001_initial_schema"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "addresses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("street_address", sa.String(length=255), nullable=False),
        sa.Column("city", sa.String(length=100), nullable=False),
        sa.Column("state", sa.String(length=100), nullable=True),
        sa.Column("zip_code", sa.String(length=20), nullable=True),
        sa.Column("country", sa.String(length=100), nullable=False, server_default="Lebanon"),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_addresses_user_id", "addresses", ["user_id"])

    with op.batch_alter_table("orders") as batch_op:
        batch_op.add_column(sa.Column("shipping_cost", sa.Numeric(10, 2), nullable=False, server_default="5.00"))
        batch_op.add_column(sa.Column("address_id", sa.Integer(), nullable=True))
        batch_op.create_foreign_key(
            "fk_orders_address_id", "addresses", ["address_id"], ["id"], ondelete="SET NULL"
        )

    with op.batch_alter_table("order_items") as batch_op:
        batch_op.add_column(sa.Column("product_name", sa.String(length=255), nullable=True))


def downgrade() -> None:
    with op.batch_alter_table("order_items") as batch_op:
        batch_op.drop_column("product_name")

    with op.batch_alter_table("orders") as batch_op:
        batch_op.drop_constraint("fk_orders_address_id", type_="foreignkey")
        batch_op.drop_column("address_id")
        batch_op.drop_column("shipping_cost")

    op.drop_index("ix_addresses_user_id", table_name="addresses")
    op.drop_table("addresses")
