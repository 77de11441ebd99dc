"""create ledger tables

Revision ID: 0001_create_ledger_tables
Revises:
Create Date: 2026-10-19 09:00:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001_create_ledger_tables"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ENTRY_TYPES = ("CREATE", "DEPOSIT", "WITHDRAW", "TRANSFER")
ENTRY_STATUSES = ("SUCCESS", "FAILED")


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("account_number", sa.String(length=20), nullable=False),
        sa.Column("owner_name", sa.String(length=100), nullable=False),
        sa.Column("balance", sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("balance >= 0", name="ck_accounts_balance_non_negative"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_accounts_account_number", "accounts", ["account_number"], unique=True
    )

    op.create_table(
        "ledger_entries",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column(
            "entry_type",
            sa.Enum(*ENTRY_TYPES, name="entry_type_enum", create_constraint=True),
            nullable=False,
        ),
        sa.Column("source_account", sa.String(length=20), nullable=True),
        sa.Column("destination_account", sa.String(length=20), nullable=True),
        sa.Column("amount", sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column("balance_before_source", sa.Numeric(precision=15, scale=2), nullable=True),
        sa.Column("balance_after_source", sa.Numeric(precision=15, scale=2), nullable=True),
        sa.Column("balance_before_destination", sa.Numeric(precision=15, scale=2), nullable=True),
        sa.Column("balance_after_destination", sa.Numeric(precision=15, scale=2), nullable=True),
        sa.Column("description", sa.String(length=255), nullable=False),
        sa.Column(
            "status",
            sa.Enum(*ENTRY_STATUSES, name="entry_status_enum", create_constraint=True),
            nullable=False,
        ),
        sa.Column("failure_reason", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("amount > 0", name="ck_ledger_entries_amount_positive"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_ledger_entries_source_account", "ledger_entries", ["source_account"]
    )
    op.create_index(
        "ix_ledger_entries_destination_account", "ledger_entries", ["destination_account"]
    )
    op.create_index(
        "ix_ledger_entries_created_at", "ledger_entries", ["created_at"]
    )


def downgrade() -> None:
    op.drop_index("ix_ledger_entries_created_at", table_name="ledger_entries")
    op.drop_index("ix_ledger_entries_destination_account", table_name="ledger_entries")
    op.drop_index("ix_ledger_entries_source_account", table_name="ledger_entries")
    op.drop_table("ledger_entries")
    op.drop_index("ix_accounts_account_number", table_name="accounts")
    op.drop_table("accounts")
    sa.Enum(name="entry_status_enum").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="entry_type_enum").drop(op.get_bind(), checkfirst=True)
