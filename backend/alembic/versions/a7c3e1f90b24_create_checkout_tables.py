"""create storefront checkout tables

Revision ID: a7c3e1f90b24
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


revision = "a7c3e1f90b24"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade():
    op.create_table(
        "affiliates",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("referral_code", sa.String(), nullable=False),
        sa.Column("commission_type", sa.String(), nullable=False, server_default="percentage"),
        sa.Column("commission_value", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("status", sa.String(), nullable=False, server_default="active"),
        sa.Column("wallet_balance", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("total_orders", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_sales", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("total_commission", sa.Numeric(12, 2), nullable=False, server_default="0"),
        *_timestamps(),
        sa.UniqueConstraint("referral_code", name="uq_affiliates_referral_code"),
    )
    op.create_index("ix_affiliates_status", "affiliates", ["status"])

    op.create_table(
        "shopper_profiles",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("full_name", sa.String(), nullable=True),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("affiliate_id", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["affiliate_id"], ["affiliates.id"], ondelete="SET NULL"),
        sa.UniqueConstraint("email", name="uq_shopper_profiles_email"),
    )

    op.create_table(
        "affiliate_coupons",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("affiliate_id", sa.Integer(), nullable=False),
        sa.Column("coupon_code", sa.String(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.ForeignKeyConstraint(["affiliate_id"], ["affiliates.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("coupon_code", name="uq_affiliate_coupons_code"),
    )
    op.create_index("ix_affiliate_coupons_affiliate", "affiliate_coupons", ["affiliate_id"])

    op.create_table(
        "orders",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("order_number", sa.String(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("customer_name", sa.String(), nullable=False),
        sa.Column("customer_email", sa.String(), nullable=True),
        sa.Column("customer_phone", sa.String(), nullable=False),
        sa.Column("shipping_address_line1", sa.String(), nullable=False),
        sa.Column("shipping_address_line2", sa.String(), nullable=True),
        sa.Column("shipping_city", sa.String(), nullable=False),
        sa.Column("shipping_state", sa.String(), nullable=False),
        sa.Column("shipping_zip", sa.String(), nullable=False),
        sa.Column("shipping_country", sa.String(), nullable=False, server_default="India"),
        sa.Column("subtotal", sa.Numeric(12, 2), nullable=False),
        sa.Column("shipping_cost", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("discount_amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("coupon_discount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("wallet_amount_used", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("loyalty_coins_used", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("loyalty_coins_value", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("coins_to_earn", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("payment_method", sa.String(), nullable=False, server_default="cod"),
        sa.Column("payment_status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("coupon_code", sa.String(), nullable=True),
        sa.Column("affiliate_id", sa.Integer(), nullable=True),
        sa.Column("attribution_source", sa.String(), nullable=True),
        sa.Column("commission_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("commission_status", sa.String(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["shopper_profiles.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["affiliate_id"], ["affiliates.id"], ondelete="SET NULL"),
        sa.UniqueConstraint("order_number", name="uq_orders_order_number"),
    )
    op.create_index("ix_orders_user_status", "orders", ["user_id", "status"])
    op.create_index("ix_orders_affiliate", "orders", ["affiliate_id"])

    op.create_table(
        "order_items",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("order_id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.String(), nullable=False),
        sa.Column("product_name", sa.String(), nullable=False),
        sa.Column("product_image", sa.String(), nullable=True),
        sa.Column("sku", sa.String(), nullable=True),
        sa.Column("size", sa.String(), nullable=True),
        sa.Column("color", sa.String(), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_price", sa.Numeric(12, 2), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["order_id"], ["orders.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_order_items_order_id", "order_items", ["order_id"])
    op.create_index("ix_order_items_product_id", "order_items", ["product_id"])

    op.create_table(
        "shipments",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("order_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("carrier", sa.String(), nullable=True),
        sa.Column("tracking_number", sa.String(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["order_id"], ["orders.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("order_id", name="uq_shipments_order"),
    )

    op.create_table(
        "affiliate_commissions",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("affiliate_id", sa.Integer(), nullable=False),
        sa.Column("order_id", sa.Integer(), nullable=False),
        sa.Column("commission_type", sa.String(), nullable=False),
        sa.Column("commission_rate", sa.Numeric(10, 2), nullable=False),
        sa.Column("order_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("commission_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["affiliate_id"], ["affiliates.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["order_id"], ["orders.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("order_id", name="uq_affiliate_commissions_order"),
    )
    op.create_index("ix_affiliate_commissions_affiliate", "affiliate_commissions", ["affiliate_id"])
    op.create_index("ix_affiliate_commissions_status", "affiliate_commissions", ["status"])

    op.create_table(
        "affiliate_orders",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("affiliate_id", sa.Integer(), nullable=False),
        sa.Column("order_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("product_id", sa.String(), nullable=True),
        sa.Column("attribution_source", sa.String(), nullable=False),
        sa.Column("order_total", sa.Numeric(12, 2), nullable=False),
        sa.Column("commission_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("commission_status", sa.String(), nullable=False, server_default="pending"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["affiliate_id"], ["affiliates.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["order_id"], ["orders.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["shopper_profiles.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_affiliate_orders_affiliate", "affiliate_orders", ["affiliate_id"])
    op.create_index("ix_affiliate_orders_order", "affiliate_orders", ["order_id"])

    op.create_table(
        "loyalty_wallets",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("available_balance", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_earned", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_redeemed", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["shopper_profiles.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", name="uq_loyalty_wallets_user"),
        sa.CheckConstraint("available_balance >= 0", name="ck_loyalty_wallets_available_non_negative"),
    )

    op.create_table(
        "loyalty_transactions",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("order_id", sa.Integer(), nullable=True),
        sa.Column("type", sa.String(), nullable=False, server_default="redeem"),
        sa.Column("coins", sa.Integer(), nullable=False),
        sa.Column("coins_value", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("balance_before", sa.Integer(), nullable=False),
        sa.Column("balance_after", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["shopper_profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["order_id"], ["orders.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_loyalty_transactions_user_created", "loyalty_transactions", ["user_id", "created_at"])
    op.create_index("ix_loyalty_transactions_order", "loyalty_transactions", ["order_id"])

    op.create_table(
        "referral_states",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("device_id", sa.String(), nullable=False),
        sa.Column("referral_code", sa.String(), nullable=False),
        sa.Column("captured_at", sa.DateTime(), nullable=False),
        sa.Column("product_id", sa.String(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("device_id", name="uq_referral_states_device"),
    )


def downgrade():
    op.drop_table("referral_states")
    op.drop_index("ix_loyalty_transactions_order", table_name="loyalty_transactions")
    op.drop_index("ix_loyalty_transactions_user_created", table_name="loyalty_transactions")
    op.drop_table("loyalty_transactions")
    op.drop_table("loyalty_wallets")
    op.drop_index("ix_affiliate_orders_order", table_name="affiliate_orders")
    op.drop_index("ix_affiliate_orders_affiliate", table_name="affiliate_orders")
    op.drop_table("affiliate_orders")
    op.drop_index("ix_affiliate_commissions_status", table_name="affiliate_commissions")
    op.drop_index("ix_affiliate_commissions_affiliate", table_name="affiliate_commissions")
    op.drop_table("affiliate_commissions")
    op.drop_table("shipments")
    op.drop_index("ix_order_items_product_id", table_name="order_items")
    op.drop_index("ix_order_items_order_id", table_name="order_items")
    op.drop_table("order_items")
    op.drop_index("ix_orders_affiliate", table_name="orders")
    op.drop_index("ix_orders_user_status", table_name="orders")
    op.drop_table("orders")
    op.drop_index("ix_affiliate_coupons_affiliate", table_name="affiliate_coupons")
    op.drop_table("affiliate_coupons")
    op.drop_table("shopper_profiles")
    op.drop_index("ix_affiliates_status", table_name="affiliates")
    op.drop_table("affiliates")
