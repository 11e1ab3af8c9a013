"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Actor/Membership
  2xxx: Money
  3xxx: Ladder
  4xxx: Challenge
  5xxx: Venue
  6xxx: Shared-pot game
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Actor/Membership ---

class AdminRequiredError(AppError):
    def __init__(self, actor_id: str) -> None:
        super().__init__(1001, f"Privileged role required: actor {actor_id}", 403)


class MembershipRequiredError(AppError):
    def __init__(self, player_id: str, required_tier: str) -> None:
        super().__init__(
            1002, f"Player {player_id} must hold {required_tier} membership", 403
        )


# --- 2xxx: Money ---

class InvalidAmountError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(2001, f"Invalid amount: {detail}", 422)


class InvalidPeriodError(AppError):
    def __init__(self, period_start: str, period_end: str) -> None:
        super().__init__(
            2002, f"Invalid payout period: {period_start} must be before {period_end}", 422
        )


# --- 3xxx: Ladder ---

class IneligibleChallengeError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(3001, f"Ineligible challenge: {detail}", 422)


class PlayerNotFoundError(AppError):
    def __init__(self, player_id: str) -> None:
        super().__init__(3002, f"Player not found: {player_id}", 404)


# --- 4xxx: Challenge ---

class InvalidTransitionError(AppError):
    def __init__(self, challenge_id: str, status: str, action: str) -> None:
        super().__init__(
            4001, f"Challenge {challenge_id} in status {status} cannot {action}", 409
        )


class AlreadyAcceptedError(InvalidTransitionError):
    def __init__(self, challenge_id: str) -> None:
        AppError.__init__(self, 4002, f"Challenge {challenge_id} was already accepted", 409)


class InvalidWinnerError(AppError):
    def __init__(self, challenge_id: str, winner_id: str) -> None:
        super().__init__(
            4003, f"Winner {winner_id} is not a participant of challenge {challenge_id}", 422
        )


class ChallengeNotFoundError(AppError):
    def __init__(self, challenge_id: str) -> None:
        super().__init__(4004, f"Challenge not found: {challenge_id}", 404)


class InvalidTeamSizeError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(4005, f"Invalid team size: {detail}", 422)


# --- 5xxx: Venue ---

class VenueLockedError(AppError):
    def __init__(self, venue_id: str) -> None:
        super().__init__(5001, f"Hall battles are locked for venue {venue_id}", 423)


class VenueNotFoundError(AppError):
    def __init__(self, venue_id: str) -> None:
        super().__init__(5002, f"Venue not found: {venue_id}", 404)


# --- 6xxx: Shared-pot game ---

class GameFullError(AppError):
    def __init__(self, game_id: str) -> None:
        super().__init__(6001, f"Pot game {game_id} is full", 409)


class PotGameNotFoundError(AppError):
    def __init__(self, game_id: str) -> None:
        super().__init__(6002, f"Pot game not found: {game_id}", 404)


class InvalidSeatError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(6003, f"Invalid seat: {detail}", 422)


class PotGameStateError(AppError):
    def __init__(self, game_id: str, status: str, action: str) -> None:
        super().__init__(6004, f"Pot game {game_id} in status {status} cannot {action}", 409)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class ConcurrentModificationError(AppError):
    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(9003, f"{entity} {entity_id} was modified concurrently", 409)


class EntityBusyError(AppError):
    def __init__(self, lock_key: str) -> None:
        super().__init__(9004, f"Another transition is in progress: {lock_key}", 409)
