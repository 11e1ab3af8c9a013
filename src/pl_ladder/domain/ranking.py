"""Ladder ranking: standings, challenge window, king's rule and streak bonus.

Official rank uses points only. Ties share a position (competition
ranking: 1, 2, 2, 4); any secondary ordering such as respect points is a
display concern left to the caller. Sorting is stable, so tied players
keep the order the caller supplied.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import replace

from src.pl_common.enums import Division
from src.pl_common.errors import IneligibleChallengeError, PlayerNotFoundError
from src.pl_ladder.domain.models import (
    KING_DROP_MAX,
    LadderOutcome,
    LadderPolicy,
    Player,
    PlayerDelta,
    Standing,
)

logger = logging.getLogger(__name__)

DEFAULT_LADDER_POLICY = LadderPolicy()


def rank(players: Iterable[Player]) -> list[Player]:
    """Points descending; stable for ties."""
    return sorted(players, key=lambda p: p.points, reverse=True)


def standings(players: Iterable[Player], division: Division | None = None) -> list[Standing]:
    ordered = rank(p for p in players if division is None or p.division == division)
    rows: list[Standing] = []
    for index, player in enumerate(ordered):
        if index > 0 and player.points == ordered[index - 1].points:
            position = rows[-1].position
        else:
            position = index + 1
        rows.append(Standing(player=player, position=position))
    return rows


def position_of(table: Sequence[Standing], player_id: str) -> int:
    for row in table:
        if row.player.id == player_id:
            return row.position
    raise PlayerNotFoundError(player_id)


def check_challenge_eligibility(
    challenger: Player, opponent: Player, players: Iterable[Player]
) -> None:
    """Allow only the same position or the next position group above, same division."""
    if challenger.id == opponent.id:
        raise IneligibleChallengeError("a player cannot challenge themselves")
    if challenger.division != opponent.division:
        raise IneligibleChallengeError(
            f"{challenger.id} ({challenger.division.value}) and "
            f"{opponent.id} ({opponent.division.value}) are in different divisions"
        )
    table = standings(_with(players, challenger, opponent), challenger.division)
    own = position_of(table, challenger.id)
    target = position_of(table, opponent.id)
    if target == own:
        return
    above = [row.position for row in table if row.position < own]
    if above and target == max(above):
        return
    raise IneligibleChallengeError(
        f"position {target} is outside the window for a challenger at position {own}"
    )


def apply_result(
    winner: Player,
    loser: Player,
    players: Iterable[Player],
    policy: LadderPolicy = DEFAULT_LADDER_POLICY,
) -> LadderOutcome:
    """Score a completed match against the loser's division standings."""
    roster = _with(players, winner, loser)
    before = standings(roster)

    streak_after = winner.streak + 1
    bonus = streak_after % policy.streak_bonus_every == 0
    winner_delta = policy.win_points + (policy.streak_bonus_points if bonus else 0)
    winner_after = replace(winner, points=winner.points + winner_delta, streak=streak_after)

    king_dethroned = position_of(before, loser.id) == 1 and len(roster) > 1
    if king_dethroned:
        others = rank(winner_after if p.id == winner.id else p for p in roster if p.id != loser.id)
        loser_points = _king_landing_points(others, policy.king_drop)
    else:
        loser_points = loser.points - policy.loss_points
    loser_after = replace(loser, points=loser_points, streak=0)

    after = standings(
        winner_after if p.id == winner.id else loser_after if p.id == loser.id else p
        for p in roster
    )
    return LadderOutcome(
        winner=PlayerDelta(
            player_id=winner.id,
            points_delta=winner_delta,
            streak_after=streak_after,
            streak_bonus_awarded=bonus,
            position_before=position_of(before, winner.id),
            position_after=position_of(after, winner.id),
        ),
        loser=PlayerDelta(
            player_id=loser.id,
            points_delta=loser_points - loser.points,
            streak_after=0,
            streak_bonus_awarded=False,
            position_before=position_of(before, loser.id),
            position_after=position_of(after, loser.id),
        ),
        winner_after=winner_after,
        loser_after=loser_after,
        king_dethroned=king_dethroned,
    )


def _king_landing_points(others: list[Player], drop: int) -> int:
    """Points that put a dethroned king exactly `landing` positions down.

    Landing one point under others[landing - 1] gives the king position
    landing + 1, provided others[landing - 1] is strictly ahead of
    others[landing]. The first such boundary at or after `drop` is used.
    """
    last = len(others)
    if last <= drop:
        return others[-1].points - 1
    for landing in range(drop, last + 1):
        if landing == last or others[landing - 1].points > others[landing].points:
            if landing > KING_DROP_MAX:
                logger.warning(
                    "King drop extended to %d by a points tie spanning the landing window",
                    landing,
                )
            return others[landing - 1].points - 1
    return others[-1].points - 1


def _with(players: Iterable[Player], *current: Player) -> list[Player]:
    """Roster with the given players' current snapshots substituted in place."""
    by_id = {p.id: p for p in current}
    roster = [by_id.pop(p.id, p) for p in players]
    roster.extend(by_id.values())
    return roster
