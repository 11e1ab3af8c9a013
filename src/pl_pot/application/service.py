"""PotGameApplicationService — shared-pot side games.

join and complete run under the per-game Redis lock and write with a
version check, so two callers can never both take the last seat.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.pl_common.actor import Actor
from src.pl_common.datetime_utils import utc_now
from src.pl_common.entity_lock import EntityLock, default_entity_lock
from src.pl_common.errors import PotGameNotFoundError
from src.pl_common.id_generator import generate_id
from src.pl_pot.application.schemas import (
    CompletePotGameRequest,
    CreatePotGameRequest,
    PotGameResponse,
    PotPayoutResponse,
)
from src.pl_pot.domain.game import complete_game, create_game, join_game
from src.pl_pot.domain.models import PotRules, SharedPotGame
from src.pl_pot.domain.repository import PotGameRepositoryProtocol
from src.pl_pot.infrastructure.persistence import PotGameRepository
from src.pl_settlement.application.schemas import SettlementRecordOut
from src.pl_settlement.domain.records import payout_record
from src.pl_settlement.domain.repository import SettlementRepositoryProtocol
from src.pl_settlement.infrastructure.persistence import SettlementRepository

logger = logging.getLogger(__name__)

_ENTITY = "pot_game"


class PotGameApplicationService:
    def __init__(
        self,
        repo: PotGameRepositoryProtocol | None = None,
        settlements: SettlementRepositoryProtocol | None = None,
        lock: EntityLock | None = None,
        rules: PotRules | None = None,
    ) -> None:
        self._repo: PotGameRepositoryProtocol = repo or PotGameRepository()
        self._settlements: SettlementRepositoryProtocol = settlements or SettlementRepository()
        self._lock = lock
        self._rules = rules or PotRules(
            min_seats=settings.POT_MIN_SEATS, max_seats=settings.POT_MAX_SEATS
        )

    async def _entity_lock(self) -> EntityLock:
        if self._lock is None:
            self._lock = await default_entity_lock()
        return self._lock

    async def _load(self, db: AsyncSession, game_id: str) -> SharedPotGame:
        game = await self._repo.get_game(db, game_id)
        if game is None:
            raise PotGameNotFoundError(game_id)
        return game

    async def get_game(self, db: AsyncSession, game_id: str) -> PotGameResponse:
        return PotGameResponse.from_domain(await self._load(db, game_id))

    async def create(
        self, db: AsyncSession, actor: Actor, req: CreatePotGameRequest
    ) -> PotGameResponse:
        game = create_game(
            generate_id("pot"),
            req.max_seats,
            req.entry_fee_cents,
            utc_now(),
            rules=self._rules,
            name=req.name,
        )
        try:
            saved = await self._repo.insert_game(db, game)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Pot game created: id=%s seats=%d fee=%d by=%s",
            saved.id,
            saved.max_seats,
            saved.entry_fee_cents,
            actor.id,
        )
        return PotGameResponse.from_domain(saved)

    async def join(self, db: AsyncSession, game_id: str, actor: Actor) -> PotGameResponse:
        lock = await self._entity_lock()
        async with lock.hold(_ENTITY, game_id):
            try:
                game = await self._load(db, game_id)
                saved = await self._repo.update_game(db, join_game(game, actor.id, utc_now()))
                await db.commit()
            except Exception:
                await db.rollback()
                raise
        return PotGameResponse.from_domain(saved)

    async def complete(
        self, db: AsyncSession, game_id: str, req: CompletePotGameRequest
    ) -> PotPayoutResponse:
        lock = await self._entity_lock()
        async with lock.hold(_ENTITY, game_id):
            try:
                game = await self._load(db, game_id)
                now = utc_now()
                payout = complete_game(game, req.winner_seat, now)
                saved = await self._repo.update_game(db, payout.game)
                record = await self._settlements.insert_settlement(
                    db,
                    payout_record(
                        generate_id("stl"), saved.id, payout.player_id, payout.amount_cents, now
                    ),
                )
                await db.commit()
            except Exception:
                await db.rollback()
                raise
        logger.info(
            "Pot paid out: game=%s seat=%d player=%s amount=%d settlement=%s",
            saved.id,
            payout.seat,
            payout.player_id,
            payout.amount_cents,
            record.id,
        )
        return PotPayoutResponse(
            game=PotGameResponse.from_domain(saved),
            seat=payout.seat,
            player_id=payout.player_id,
            settlement=SettlementRecordOut.from_domain(record),
        )
