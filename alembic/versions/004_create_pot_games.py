"""004: create pot_games table

Revision ID: 004
Revises: 003
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # seats holds one entry per seat; '' marks an open seat. The pot is never stored.
    op.execute("""
        CREATE TABLE pot_games (
            id                  VARCHAR(64)     PRIMARY KEY,
            name                VARCHAR(100)    NOT NULL DEFAULT '',
            max_seats           SMALLINT        NOT NULL,
            entry_fee_cents     BIGINT          NOT NULL,
            seats               TEXT[]          NOT NULL,
            status              VARCHAR(16)     NOT NULL DEFAULT 'OPEN',
            winner_seat         SMALLINT,
            version             BIGINT          NOT NULL DEFAULT 0,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            activated_at        TIMESTAMPTZ,
            completed_at        TIMESTAMPTZ,
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_pot_games_fee_gt_0    CHECK (entry_fee_cents > 0),
            CONSTRAINT ck_pot_games_seat_bounds CHECK (max_seats BETWEEN 2 AND 15),
            CONSTRAINT ck_pot_games_seat_count  CHECK (cardinality(seats) = max_seats),
            CONSTRAINT ck_pot_games_status CHECK (status IN ('OPEN', 'ACTIVE', 'COMPLETED')),
            CONSTRAINT ck_pot_games_open_has_seat CHECK ((status = 'OPEN') = ('' = ANY(seats))),
            CONSTRAINT ck_pot_games_winner CHECK (
                (winner_seat IS NULL) = (status <> 'COMPLETED')
                AND (winner_seat IS NULL OR winner_seat BETWEEN 1 AND max_seats)
            )
        );
    """)
    op.execute("CREATE INDEX idx_pot_games_status ON pot_games (status);")
    op.execute("""
        CREATE TRIGGER trg_pot_games_updated_at
            BEFORE UPDATE ON pot_games
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS pot_games CASCADE;")
