"""Tests for pl_common.id_generator and pl_common.datetime_utils."""

from datetime import UTC, datetime

import pytest

from src.pl_common.datetime_utils import utc_now
from src.pl_common.id_generator import SnowflakeIdGenerator, generate_id


class TestSnowflakeIdGenerator:
    def test_unique_ids(self) -> None:
        gen = SnowflakeIdGenerator(worker_id=1)
        ids = {gen.next_int() for _ in range(1000)}
        assert len(ids) == 1000

    def test_monotonically_increasing(self) -> None:
        gen = SnowflakeIdGenerator(worker_id=1)
        prev = gen.next_int()
        for _ in range(100):
            current = gen.next_int()
            assert current > prev
            prev = current

    def test_worker_id_out_of_range(self) -> None:
        with pytest.raises(ValueError):
            SnowflakeIdGenerator(worker_id=1024)


class TestGenerateId:
    def test_prefixed(self) -> None:
        challenge_id = generate_id("chl")
        assert challenge_id.startswith("chl_")
        assert challenge_id.split("_", 1)[1].isdigit()


class TestUtcNow:
    def test_returns_aware_datetime(self) -> None:
        now = utc_now()
        assert isinstance(now, datetime)
        assert now.tzinfo == UTC
