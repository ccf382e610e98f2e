"""listings, reviews and users tables

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-19 09:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "a1b2c3d4e5f6"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    bind = op.get_bind()
    insp = sa.inspect(bind)

    if not insp.has_table("users"):
        op.create_table(
            "users",
            sa.Column("id", sa.String(length=32), nullable=False),
            sa.Column("username", sa.String(length=64), nullable=False),
            sa.Column("email", sa.String(length=255), nullable=False),
            sa.Column("password_hash", sa.String(length=255), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_users_username", "users", ["username"], unique=True)
        op.create_index("ix_users_email", "users", ["email"], unique=False)

    if not insp.has_table("listings"):
        op.create_table(
            "listings",
            sa.Column("id", sa.String(length=32), nullable=False),
            sa.Column("title", sa.String(length=200), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("image_filename", sa.String(length=255), nullable=False),
            sa.Column("image_url", sa.String(length=1024), nullable=False),
            sa.Column("price", sa.Float(), nullable=True),
            sa.Column("location", sa.String(length=200), nullable=True),
            sa.Column("country", sa.String(length=120), nullable=True),
            sa.Column("owner_id", sa.String(length=32), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(["owner_id"], ["users.id"]),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_listings_owner_id", "listings", ["owner_id"], unique=False)

    if not insp.has_table("reviews"):
        op.create_table(
            "reviews",
            sa.Column("id", sa.String(length=32), nullable=False),
            sa.Column("comment", sa.Text(), nullable=False),
            sa.Column("rating", sa.Integer(), nullable=False),
            sa.Column("listing_id", sa.String(length=32), nullable=True),
            sa.Column("author_id", sa.String(length=32), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(["listing_id"], ["listings.id"]),
            sa.ForeignKeyConstraint(["author_id"], ["users.id"]),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_reviews_listing_id", "reviews", ["listing_id"], unique=False)
        op.create_index("ix_reviews_author_id", "reviews", ["author_id"], unique=False)


def downgrade() -> None:
    bind = op.get_bind()
    insp = sa.inspect(bind)
    for table_name in ("reviews", "listings", "users"):
        if insp.has_table(table_name):
            op.drop_table(table_name)
