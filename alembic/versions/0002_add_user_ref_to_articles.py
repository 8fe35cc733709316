"""add user reference to articles

Revision ID: 0002
Revises: 0001
Create Date: 2019-06-26 12:53:03

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0002"
down_revision: Union[str, None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    with op.batch_alter_table("articles") as batch_op:
        batch_op.add_column(sa.Column("user_id", sa.Integer(), nullable=True))
        batch_op.create_index("ix_articles_user_id", ["user_id"])
        batch_op.create_foreign_key(
            "fk_articles_user_id_users", "users", ["user_id"], ["id"], ondelete="SET NULL"
        )


def downgrade() -> None:
    with op.batch_alter_table("articles") as batch_op:
        batch_op.drop_constraint("fk_articles_user_id_users", type_="foreignkey")
        batch_op.drop_index("ix_articles_user_id")
        batch_op.drop_column("user_id")
