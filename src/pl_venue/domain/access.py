"""Hall-battle access control and hall records.

Unlocking and locking are privileged, audited operations. Both stamp or
clear the (unlocked_by, unlocked_at) pair in a single replace().
"""

import logging
from dataclasses import replace
from datetime import datetime

from src.pl_common.actor import Actor
from src.pl_common.errors import AdminRequiredError, VenueLockedError
from src.pl_venue.domain.models import Venue

audit_logger = logging.getLogger("pl.audit")


def ensure_battles_unlocked(venue: Venue) -> None:
    if not venue.battles_unlocked:
        raise VenueLockedError(venue.id)


def unlock_battles(venue: Venue, actor: Actor, now: datetime) -> Venue:
    if not actor.is_privileged:
        raise AdminRequiredError(actor.id)
    unlocked = replace(venue, battles_unlocked=True, unlocked_by=actor.id, unlocked_at=now)
    audit_logger.info(
        "Hall battles unlocked: venue=%s by=%s at=%s", venue.id, actor.id, now.isoformat()
    )
    return unlocked


def lock_battles(venue: Venue, actor: Actor, now: datetime) -> Venue:
    if not actor.is_privileged:
        raise AdminRequiredError(actor.id)
    locked = replace(venue, battles_unlocked=False, unlocked_by=None, unlocked_at=None)
    audit_logger.info(
        "Hall battles locked: venue=%s by=%s at=%s", venue.id, actor.id, now.isoformat()
    )
    return locked


def record_hall_result(winner: Venue, loser: Venue, win_points: int) -> tuple[Venue, Venue]:
    return (
        replace(winner, wins=winner.wins + 1, points=winner.points + win_points),
        replace(loser, losses=loser.losses + 1),
    )
