"""initial catalog schema

Revision ID: 3a7c1e9d2b40
Revises:
Create Date: 2026-10-19 10:12:31.104512

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3a7c1e9d2b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        "vertical",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
    )
    op.create_table(
        "category",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False, index=True),
    )
    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False, index=True),
        sa.Column("key_name", sa.String(), nullable=False, unique=True, index=True),
        sa.Column("image", sa.Text(), nullable=True),
        sa.Column("highlights", sa.JSON(), nullable=True),
        sa.Column("specifications", sa.JSON(), nullable=True),
        sa.Column("storage", sa.String(), nullable=True),
        sa.Column("ram", sa.String(), nullable=True),
        sa.Column("colour", sa.String(), nullable=True),
        sa.Column("vertical_id", sa.Integer(), sa.ForeignKey("vertical.id"), nullable=True, index=True),
        sa.Column("parent_category_id", sa.Integer(), sa.ForeignKey("category.id"), nullable=True, index=True),
        sa.Column("sub_category_id", sa.Integer(), sa.ForeignKey("category.id"), nullable=True),
        sa.Column("mrp", sa.Float(), nullable=True),
        sa.Column("rating", sa.Float(), nullable=True),
        sa.Column("rating_count", sa.Integer(), nullable=True, server_default="0"),
        sa.Column("review_count", sa.Integer(), nullable=True, server_default="0"),
    )
    op.create_table(
        "store",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("image", sa.Text(), nullable=True),
        sa.Column("rating", sa.Float(), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("city", sa.String(), nullable=True),
    )
    op.create_table(
        "store_product_mapping",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("store_id", sa.Integer(), sa.ForeignKey("store.id"), nullable=False, index=True),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id"), nullable=False, index=True),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("offers", sa.Text(), nullable=True),
        sa.Column("affiliate_link", sa.Text(), nullable=True),
    )
    op.create_table(
        "entity",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("page", sa.String(), nullable=False, index=True),
        sa.Column("entity_type", sa.String(), nullable=False, index=True),
        sa.Column("header", sa.String(), nullable=False),
        sa.Column("rank", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_table(
        "entity_product_mapping",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("entity_id", sa.Integer(), sa.ForeignKey("entity.id"), nullable=False, index=True),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id"), nullable=False, index=True),
    )
    op.create_table(
        "entity_image",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("entity_type", sa.String(), nullable=False),
        sa.Column("entity_id", sa.Integer(), nullable=False, index=True),
        sa.Column("image_type", sa.String(), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=False),
    )
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("user_image", sa.Text(), nullable=True),
    )
    op.create_table(
        "ratings_reviews",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("entity_type", sa.String(), nullable=False, server_default="product"),
        sa.Column("entity_id", sa.Integer(), nullable=False, index=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("review", sa.Text(), nullable=True),
        sa.Column("rating", sa.Float(), nullable=True),
        sa.Column("images", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
    )


def downgrade():
    for table in (
        "ratings_reviews",
        "users",
        "entity_image",
        "entity_product_mapping",
        "entity",
        "store_product_mapping",
        "store",
        "products",
        "category",
        "vertical",
    ):
        op.drop_table(table)
