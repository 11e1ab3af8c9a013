"""003: create challenges table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE challenges (
            id                      VARCHAR(64)     PRIMARY KEY,
            kind                    VARCHAR(16)     NOT NULL,
            challenger_id           VARCHAR(64)     NOT NULL,
            challenger_members      TEXT[]          NOT NULL DEFAULT '{}',
            opponent_id             VARCHAR(64),
            opponent_members        TEXT[]          NOT NULL DEFAULT '{}',
            stake_cents             BIGINT          NOT NULL,
            status                  VARCHAR(16)     NOT NULL DEFAULT 'OPEN',
            operator_id             VARCHAR(64),
            requires_pro_membership BOOLEAN         NOT NULL DEFAULT FALSE,
            winner_id               VARCHAR(64),
            cancel_reason           VARCHAR(16),
            voided_by               VARCHAR(64),
            version                 BIGINT          NOT NULL DEFAULT 0,
            created_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            accepted_at             TIMESTAMPTZ,
            started_at              TIMESTAMPTZ,
            completed_at            TIMESTAMPTZ,
            cancelled_at            TIMESTAMPTZ,
            updated_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_challenges_stake_gt_0 CHECK (stake_cents > 0),
            CONSTRAINT ck_challenges_kind CHECK (kind IN ('INDIVIDUAL', 'TEAM', 'HALL')),
            CONSTRAINT ck_challenges_status CHECK (
                status IN ('OPEN', 'ACCEPTED', 'IN_PROGRESS', 'COMPLETED', 'CANCELLED')
            ),
            CONSTRAINT ck_challenges_cancel_reason CHECK (
                cancel_reason IS NULL OR cancel_reason IN ('WITHDRAWN', 'TIMEOUT', 'ADMIN')
            ),
            CONSTRAINT ck_challenges_not_self CHECK (opponent_id IS NULL OR opponent_id <> challenger_id),
            CONSTRAINT ck_challenges_winner CHECK ((winner_id IS NOT NULL) = (status = 'COMPLETED')),
            CONSTRAINT ck_challenges_winner_is_side CHECK (
                winner_id IS NULL OR winner_id = challenger_id OR winner_id = opponent_id
            )
        );
    """)
    op.execute("CREATE INDEX idx_challenges_status ON challenges (status);")
    op.execute("CREATE INDEX idx_challenges_challenger ON challenges (challenger_id);")
    op.execute("CREATE INDEX idx_challenges_opponent ON challenges (opponent_id);")
    op.execute("""
        CREATE TRIGGER trg_challenges_updated_at
            BEFORE UPDATE ON challenges
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS challenges CASCADE;")
