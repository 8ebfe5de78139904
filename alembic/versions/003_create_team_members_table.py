"""create team_members table

Revision ID: 003
Revises: 002
Create Date: 2026-10-18 10:10:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "team_members",
        sa.Column("team_id", sa.Text(), nullable=False),
        sa.Column("volunteer_email", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("team_id", "volunteer_email"),
        sa.ForeignKeyConstraint(["team_id"], ["teams.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["volunteer_email"], ["volunteers.email"], ondelete="CASCADE"
        ),
    )


def downgrade() -> None:
    op.drop_table("team_members")
