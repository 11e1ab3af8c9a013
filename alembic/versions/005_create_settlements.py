"""005: create settlements table

Revision ID: 005
Revises: 004
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE settlements (
            id                  VARCHAR(64)     PRIMARY KEY,
            source              VARCHAR(32)     NOT NULL,
            reference_id        VARCHAR(64)     NOT NULL,
            payee_id            VARCHAR(64)     NOT NULL,
            gross_cents         BIGINT          NOT NULL,
            commission_cents    BIGINT          NOT NULL,
            platform_cents      BIGINT          NOT NULL,
            operator_cents      BIGINT          NOT NULL,
            bonus_fund_cents    BIGINT          NOT NULL,
            payout_cents        BIGINT          NOT NULL,
            commission_rate_bps INT             NOT NULL DEFAULT 0,
            operator_id         VARCHAR(64),
            status              VARCHAR(16)     NOT NULL DEFAULT 'PENDING',
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_settlements_reference UNIQUE (source, reference_id),
            CONSTRAINT ck_settlements_source CHECK (
                source IN ('CHALLENGE_COMMISSION', 'POT_PAYOUT', 'ESCROW_FEE', 'MEMBERSHIP_DUES')
            ),
            CONSTRAINT ck_settlements_status CHECK (status IN ('PENDING', 'PAID')),
            CONSTRAINT ck_settlements_conservation CHECK (payout_cents + commission_cents = gross_cents),
            CONSTRAINT ck_settlements_split CHECK (
                platform_cents + operator_cents + bonus_fund_cents = commission_cents
            ),
            CONSTRAINT ck_settlements_dues_operator CHECK (
                source <> 'MEMBERSHIP_DUES' OR operator_id IS NOT NULL
            )
        );
    """)
    op.execute("CREATE INDEX idx_settlements_status ON settlements (status);")
    op.execute(
        "CREATE INDEX idx_settlements_operator_created "
        "ON settlements (operator_id, created_at) WHERE operator_id IS NOT NULL;"
    )
    op.execute("COMMENT ON TABLE settlements IS 'Payment hand-off rows; amounts in cents';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS settlements CASCADE;")
