"""001: create timestamp trigger function and players table

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE OR REPLACE FUNCTION fn_touch_updated_at()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)
    op.execute("""
        CREATE TABLE players (
            id                  VARCHAR(64)     PRIMARY KEY,
            name                VARCHAR(120)    NOT NULL DEFAULT '',
            rating              INT             NOT NULL,
            points              INT             NOT NULL DEFAULT 0,
            streak              INT             NOT NULL DEFAULT 0,
            respect_points      INT             NOT NULL DEFAULT 0,
            membership_tier     VARCHAR(10)     NOT NULL DEFAULT 'NONE',
            version             BIGINT          NOT NULL DEFAULT 0,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_players_rating_gte_0  CHECK (rating >= 0),
            CONSTRAINT ck_players_streak_gte_0  CHECK (streak >= 0),
            CONSTRAINT ck_players_tier CHECK (membership_tier IN ('NONE', 'BASIC', 'PRO'))
        );
    """)
    # Division is derived: rating >= 600 is HIGH
    op.execute("CREATE INDEX idx_players_division_points ON players ((rating >= 600), points DESC);")
    op.execute("""
        CREATE TRIGGER trg_players_updated_at
            BEFORE UPDATE ON players
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)
    op.execute("COMMENT ON TABLE players IS 'Ladder players; points may go negative after a dethroning';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS players CASCADE;")
    op.execute("DROP FUNCTION IF EXISTS fn_touch_updated_at();")
