"""LadderApplicationService — read-side standings and the challenge window.

Ladder writes happen only through challenge completion; see
pl_challenge.application.service.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import Settings, settings
from src.pl_common.enums import Division
from src.pl_common.errors import PlayerNotFoundError
from src.pl_ladder.application.schemas import StandingOut, StandingsResponse
from src.pl_ladder.domain.models import LadderPolicy, Player
from src.pl_ladder.domain.ranking import check_challenge_eligibility, standings
from src.pl_ladder.domain.repository import PlayerRepositoryProtocol
from src.pl_ladder.infrastructure.persistence import PlayerRepository


def ladder_policy_from_settings(cfg: Settings = settings) -> LadderPolicy:
    return LadderPolicy(
        win_points=cfg.LADDER_WIN_POINTS,
        loss_points=cfg.LADDER_LOSS_POINTS,
        streak_bonus_points=cfg.LADDER_STREAK_BONUS_POINTS,
        streak_bonus_every=cfg.LADDER_STREAK_BONUS_EVERY,
        king_drop=cfg.LADDER_KING_DROP,
    )


class LadderApplicationService:
    def __init__(self, repo: PlayerRepositoryProtocol | None = None) -> None:
        self._repo: PlayerRepositoryProtocol = repo or PlayerRepository()

    async def get_standings(self, db: AsyncSession, division: Division) -> StandingsResponse:
        players = await self._repo.list_division(db, division)
        return StandingsResponse(
            division=division.value,
            standings=[StandingOut.from_domain(row) for row in standings(players, division)],
        )

    async def get_player(self, db: AsyncSession, player_id: str) -> Player:
        player = await self._repo.get_player(db, player_id)
        if player is None:
            raise PlayerNotFoundError(player_id)
        return player

    async def check_eligibility(
        self, db: AsyncSession, challenger_id: str, opponent_id: str
    ) -> None:
        """Raise IneligibleChallengeError unless opponent is inside the challenger's window."""
        challenger = await self.get_player(db, challenger_id)
        opponent = await self.get_player(db, opponent_id)
        division = await self._repo.list_division(db, challenger.division)
        check_challenge_eligibility(challenger, opponent, division)
