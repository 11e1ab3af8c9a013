"""ChallengeRepository — concrete implementation of ChallengeRepositoryProtocol.

Every transition is one CAS UPDATE keyed on (id, version). The domain
snapshot passed to update_challenge still carries the version it was
read at; the row comes back with version + 1.
asyncpg NULL parameter pattern: CAST(:param AS TYPE) for nullable columns.
"""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pl_challenge.domain.models import Challenge
from src.pl_common.enums import CancelReason, ChallengeKind, ChallengeStatus
from src.pl_common.errors import ConcurrentModificationError, InternalError

logger = logging.getLogger(__name__)

_COLUMNS = """
    id, kind, challenger_id, stake_cents, challenger_members,
    opponent_id, opponent_members, status, operator_id,
    requires_pro_membership, winner_id, cancel_reason, voided_by, version,
    created_at, accepted_at, started_at, completed_at, cancelled_at
"""

_GET_CHALLENGE_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM challenges
    WHERE id = :challenge_id
""")

_INSERT_CHALLENGE_SQL = text(f"""
    INSERT INTO challenges
        (id, kind, challenger_id, stake_cents, challenger_members,
         opponent_id, opponent_members, status, operator_id,
         requires_pro_membership, created_at)
    VALUES
        (:id, :kind, :challenger_id, :stake_cents, CAST(:challenger_members AS TEXT[]),
         CAST(:opponent_id AS TEXT), CAST(:opponent_members AS TEXT[]), :status,
         CAST(:operator_id AS TEXT), :requires_pro_membership, :created_at)
    RETURNING {_COLUMNS}
""")

_UPDATE_CHALLENGE_SQL = text(f"""
    UPDATE challenges
    SET stake_cents = :stake_cents,
        opponent_id = CAST(:opponent_id AS TEXT),
        opponent_members = CAST(:opponent_members AS TEXT[]),
        status = :status,
        winner_id = CAST(:winner_id AS TEXT),
        cancel_reason = CAST(:cancel_reason AS TEXT),
        voided_by = CAST(:voided_by AS TEXT),
        accepted_at = CAST(:accepted_at AS TIMESTAMPTZ),
        started_at = CAST(:started_at AS TIMESTAMPTZ),
        completed_at = CAST(:completed_at AS TIMESTAMPTZ),
        cancelled_at = CAST(:cancelled_at AS TIMESTAMPTZ),
        version = version + 1,
        updated_at = NOW()
    WHERE id = :challenge_id AND version = :expected_version
    RETURNING {_COLUMNS}
""")


def _row_to_challenge(row: object) -> Challenge:
    cancel_reason = row.cancel_reason  # type: ignore[attr-defined]
    return Challenge(
        id=row.id,  # type: ignore[attr-defined]
        kind=ChallengeKind(row.kind),  # type: ignore[attr-defined]
        challenger_id=row.challenger_id,  # type: ignore[attr-defined]
        stake_cents=row.stake_cents,  # type: ignore[attr-defined]
        challenger_members=tuple(row.challenger_members or ()),  # type: ignore[attr-defined]
        opponent_id=row.opponent_id,  # type: ignore[attr-defined]
        opponent_members=tuple(row.opponent_members or ()),  # type: ignore[attr-defined]
        status=ChallengeStatus(row.status),  # type: ignore[attr-defined]
        operator_id=row.operator_id,  # type: ignore[attr-defined]
        requires_pro_membership=row.requires_pro_membership,  # type: ignore[attr-defined]
        winner_id=row.winner_id,  # type: ignore[attr-defined]
        cancel_reason=CancelReason(cancel_reason) if cancel_reason else None,
        voided_by=row.voided_by,  # type: ignore[attr-defined]
        version=row.version,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        accepted_at=row.accepted_at,  # type: ignore[attr-defined]
        started_at=row.started_at,  # type: ignore[attr-defined]
        completed_at=row.completed_at,  # type: ignore[attr-defined]
        cancelled_at=row.cancelled_at,  # type: ignore[attr-defined]
    )


class ChallengeRepository:
    async def get_challenge(
        self, db: AsyncSession, challenge_id: str
    ) -> Challenge | None:
        result = await db.execute(_GET_CHALLENGE_SQL, {"challenge_id": challenge_id})
        row = result.fetchone()
        return _row_to_challenge(row) if row else None

    async def insert_challenge(self, db: AsyncSession, challenge: Challenge) -> Challenge:
        result = await db.execute(
            _INSERT_CHALLENGE_SQL,
            {
                "id": challenge.id,
                "kind": challenge.kind.value,
                "challenger_id": challenge.challenger_id,
                "stake_cents": challenge.stake_cents,
                "challenger_members": list(challenge.challenger_members),
                "opponent_id": challenge.opponent_id,
                "opponent_members": list(challenge.opponent_members),
                "status": challenge.status.value,
                "operator_id": challenge.operator_id,
                "requires_pro_membership": challenge.requires_pro_membership,
                "created_at": challenge.created_at,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Challenge insert returned no rows")
        return _row_to_challenge(row)

    async def update_challenge(self, db: AsyncSession, challenge: Challenge) -> Challenge:
        result = await db.execute(
            _UPDATE_CHALLENGE_SQL,
            {
                "challenge_id": challenge.id,
                "stake_cents": challenge.stake_cents,
                "opponent_id": challenge.opponent_id,
                "opponent_members": list(challenge.opponent_members),
                "status": challenge.status.value,
                "winner_id": challenge.winner_id,
                "cancel_reason": challenge.cancel_reason.value if challenge.cancel_reason else None,
                "voided_by": challenge.voided_by,
                "accepted_at": challenge.accepted_at,
                "started_at": challenge.started_at,
                "completed_at": challenge.completed_at,
                "cancelled_at": challenge.cancelled_at,
                "expected_version": challenge.version,
            },
        )
        row = result.fetchone()
        if row is None:
            logger.warning(
                "Challenge CAS conflict: challenge=%s version=%d", challenge.id, challenge.version
            )
            raise ConcurrentModificationError("Challenge", challenge.id)
        return _row_to_challenge(row)
