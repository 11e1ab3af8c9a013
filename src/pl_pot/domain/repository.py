"""Repository Protocol — dependency inversion for testability."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pl_pot.domain.models import SharedPotGame


class PotGameRepositoryProtocol(Protocol):
    async def get_game(self, db: AsyncSession, game_id: str) -> SharedPotGame | None: ...

    async def insert_game(self, db: AsyncSession, game: SharedPotGame) -> SharedPotGame: ...

    async def update_game(self, db: AsyncSession, game: SharedPotGame) -> SharedPotGame: ...
