import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "3c1e7a9b2d40"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "generated_programs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("program_data", sa.JSON(), nullable=False),
        sa.Column("scientific_metadata", sa.JSON(), nullable=False),
        sa.Column("periodization_model", sa.String(length=64), nullable=False),
        sa.Column("validation_tier", sa.String(length=16), nullable=False),
        sa.Column("attempts", sa.Integer(), nullable=False, server_default="1"),
    )
    op.create_index("ix_generated_programs_user_id", "generated_programs", ["user_id"])
    op.create_index("ix_generated_programs_user_active", "generated_programs", ["user_id", "is_active"])


def downgrade() -> None:
    op.drop_index("ix_generated_programs_user_active", table_name="generated_programs")
    op.drop_index("ix_generated_programs_user_id", table_name="generated_programs")
    op.drop_table("generated_programs")
