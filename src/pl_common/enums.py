"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class MembershipTier(str, Enum):
    NONE = "NONE"
    BASIC = "BASIC"
    PRO = "PRO"


class Division(str, Enum):
    HIGH = "HIGH"
    LOW = "LOW"


class ChallengeKind(str, Enum):
    INDIVIDUAL = "INDIVIDUAL"
    TEAM = "TEAM"
    HALL = "HALL"


class ChallengeStatus(str, Enum):
    OPEN = "OPEN"
    ACCEPTED = "ACCEPTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class ChallengeAction(str, Enum):
    REVISE_STAKE = "REVISE_STAKE"
    ACCEPT = "ACCEPT"
    START = "START"
    COMPLETE = "COMPLETE"
    CANCEL = "CANCEL"
    VOID = "VOID"


class CancelReason(str, Enum):
    WITHDRAWN = "WITHDRAWN"
    TIMEOUT = "TIMEOUT"
    ADMIN = "ADMIN"


class PotGameStatus(str, Enum):
    OPEN = "OPEN"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"


class ActorRole(str, Enum):
    OWNER = "OWNER"
    STAFF = "STAFF"
    OPERATOR = "OPERATOR"
    CREATOR = "CREATOR"
    PLAYER = "PLAYER"


class SettlementSource(str, Enum):
    CHALLENGE_COMMISSION = "CHALLENGE_COMMISSION"
    POT_PAYOUT = "POT_PAYOUT"
    ESCROW_FEE = "ESCROW_FEE"
    MEMBERSHIP_DUES = "MEMBERSHIP_DUES"


class SettlementStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"


class Stakeholder(str, Enum):
    """Commission recipients; the first listed keeps any split remainder."""
    PLATFORM = "PLATFORM"
    OPERATOR = "OPERATOR"
    BONUS_FUND = "BONUS_FUND"
