"""Repository Protocol — dependency inversion for testability."""

from collections.abc import Sequence
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pl_common.enums import Division
from src.pl_ladder.domain.models import Player


class PlayerRepositoryProtocol(Protocol):
    async def get_player(self, db: AsyncSession, player_id: str) -> Player | None: ...

    async def get_players(
        self, db: AsyncSession, player_ids: Sequence[str]
    ) -> list[Player]: ...

    async def list_division(self, db: AsyncSession, division: Division) -> list[Player]: ...

    async def update_standing(self, db: AsyncSession, player: Player) -> Player: ...
