"""Tests for pl_common.errors and pl_common.response."""

from src.pl_common.errors import (
    AlreadyAcceptedError,
    AppError,
    ConcurrentModificationError,
    EntityBusyError,
    GameFullError,
    InvalidAmountError,
    InvalidPeriodError,
    InvalidTransitionError,
    MembershipRequiredError,
    VenueLockedError,
)
from src.pl_common.response import ApiResponse, error_response, success_response


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500

    def test_is_exception(self) -> None:
        assert isinstance(AppError(code=1, message="x"), Exception)


class TestSpecificErrors:
    def test_invalid_amount(self) -> None:
        err = InvalidAmountError("stake 0")
        assert err.code == 2001
        assert err.http_status == 422
        assert "stake 0" in err.message

    def test_invalid_period(self) -> None:
        err = InvalidPeriodError("2026-04-01", "2026-03-01")
        assert err.code == 2002
        assert err.http_status == 422
        assert "2026-04-01" in err.message

    def test_membership_required(self) -> None:
        err = MembershipRequiredError("p1", "PRO")
        assert err.code == 1002
        assert err.http_status == 403
        assert "p1" in err.message and "PRO" in err.message

    def test_invalid_transition(self) -> None:
        err = InvalidTransitionError("chl_1", "COMPLETED", "cancel")
        assert err.code == 4001
        assert err.http_status == 409
        assert "COMPLETED" in err.message

    def test_already_accepted_is_invalid_transition(self) -> None:
        err = AlreadyAcceptedError("chl_1")
        assert isinstance(err, InvalidTransitionError)
        assert err.code == 4002
        assert err.http_status == 409

    def test_venue_locked(self) -> None:
        err = VenueLockedError("v1")
        assert err.code == 5001
        assert err.http_status == 423

    def test_game_full(self) -> None:
        err = GameFullError("pot_1")
        assert err.code == 6001
        assert err.http_status == 409

    def test_concurrency_errors(self) -> None:
        assert ConcurrentModificationError("Challenge", "chl_1").code == 9003
        assert EntityBusyError("lock:challenge:chl_1").code == 9004


class TestApiResponse:
    def test_success(self) -> None:
        resp = success_response({"a": 1})
        assert resp.code == 0
        assert resp.message == "success"
        assert resp.data == {"a": 1}
        assert resp.request_id.startswith("req_")

    def test_error(self) -> None:
        resp = error_response(4001, "bad transition")
        assert isinstance(resp, ApiResponse)
        assert resp.code == 4001
        assert resp.data is None
