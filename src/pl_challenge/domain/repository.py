"""Repository Protocol — dependency inversion for testability."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pl_challenge.domain.models import Challenge


class ChallengeRepositoryProtocol(Protocol):
    async def get_challenge(
        self, db: AsyncSession, challenge_id: str
    ) -> Challenge | None: ...

    async def insert_challenge(self, db: AsyncSession, challenge: Challenge) -> Challenge: ...

    async def update_challenge(self, db: AsyncSession, challenge: Challenge) -> Challenge: ...
