"""002: create venues table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE venues (
            id                  VARCHAR(64)     PRIMARY KEY,
            name                VARCHAR(200)    NOT NULL,
            wins                INT             NOT NULL DEFAULT 0,
            losses              INT             NOT NULL DEFAULT 0,
            points              INT             NOT NULL DEFAULT 0,
            battles_unlocked    BOOLEAN         NOT NULL DEFAULT FALSE,
            unlocked_by         VARCHAR(64),
            unlocked_at         TIMESTAMPTZ,
            version             BIGINT          NOT NULL DEFAULT 0,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_venues_record_gte_0 CHECK (wins >= 0 AND losses >= 0 AND points >= 0),
            CONSTRAINT ck_venues_unlock_audit CHECK (
                (battles_unlocked AND unlocked_by IS NOT NULL AND unlocked_at IS NOT NULL)
                OR (NOT battles_unlocked AND unlocked_by IS NULL AND unlocked_at IS NULL)
            )
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_venues_updated_at
            BEFORE UPDATE ON venues
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS venues CASCADE;")
