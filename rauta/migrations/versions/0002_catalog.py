"""Catalog tables – categories, product_tags, products

Revision ID: 0002_catalog
Revises: 0001_initial
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

revision = "0002_catalog"
down_revision = "0001_initial"
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    # -- categories -----------------------------------------------------
    op.create_table(
        "categories",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(255), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("parent_id", sa.String(64), nullable=True),
        *_timestamps(),
    )
    op.create_index("idx_categories_parent_id", "categories", ["parent_id"])

    # -- product_tags ---------------------------------------------------
    op.create_table(
        "product_tags",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(255), nullable=False),
        sa.Column("category_id", sa.String(64), nullable=False),
        *_timestamps(),
    )
    op.create_index("idx_product_tags_category_id", "product_tags", ["category_id"])

    # -- products -------------------------------------------------------
    op.create_table(
        "products",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        # cents
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("category_id", sa.String(64), nullable=False),
        sa.Column("tag_id", sa.String(64), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("custom_message", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        *_timestamps(),
    )
    op.create_index("idx_products_category_id", "products", ["category_id"])
    op.create_index("idx_products_tag_id", "products", ["tag_id"])


def downgrade() -> None:
    op.drop_index("idx_products_tag_id", table_name="products")
    op.drop_index("idx_products_category_id", table_name="products")
    op.drop_table("products")
    op.drop_index("idx_product_tags_category_id", table_name="product_tags")
    op.drop_table("product_tags")
    op.drop_index("idx_categories_parent_id", table_name="categories")
    op.drop_table("categories")
