"""Create lesson_sessions table for per-user navigation state."""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20251104_0002"
down_revision: Union[str, None] = "20251104_0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "lesson_sessions",
        sa.Column("user_id", sa.BigInteger(), primary_key=True, autoincrement=False, nullable=False),
        sa.Column("folder", sa.String(length=64), nullable=False),
        sa.Column("category", sa.String(length=64), nullable=False),
        sa.Column("current_index", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("language_to", sa.String(length=16), nullable=False),
        sa.Column("lesson_active", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("translation_revealed", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("last_message_id", sa.BigInteger(), nullable=True),
        sa.Column("last_message_has_audio", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("last_folder", sa.String(length=64), nullable=True),
        sa.Column("last_category", sa.String(length=64), nullable=True),
        sa.Column("favourite_index", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            server_onupdate=sa.func.now(),
            nullable=False,
        ),
    )


def downgrade() -> None:
    op.drop_table("lesson_sessions")
