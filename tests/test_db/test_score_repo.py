"""
Tests for energy_readiness/db/repositories/score_repo.py.

What we test
------------
ReadinessScoreRepository:
  - Empty slot reads as None; a stored 0 reads as 0.0 (not None).
  - Last write wins; only one row ever exists.
  - Whole numbers are stored without a decimal part.
  - Unparsable or non-finite stored text reads as None.
  - clear() empties the slot and reports whether anything was removed.
"""

from __future__ import annotations

import pytest

from energy_readiness.db.repositories.score_repo import (
    ReadinessScoreRepository,
    decode_score,
    encode_score,
)
from energy_readiness.db.schema import SLOT_TABLE


@pytest.fixture
def repo(in_memory_db):
    return ReadinessScoreRepository(in_memory_db)


def _raw_text(conn) -> str | None:
    row = conn.execute(f"SELECT score_text FROM {SLOT_TABLE};").fetchone()
    return None if row is None else row["score_text"]


class TestGetSet:
    def test_empty_slot_is_none(self, repo):
        assert repo.get() is None

    def test_round_trip(self, repo):
        repo.set(80)
        assert repo.get() == 80.0

    def test_zero_is_a_score(self, repo):
        repo.set(0)
        assert repo.get() == 0.0
        assert repo.get() is not None

    def test_last_write_wins(self, repo, in_memory_db):
        repo.set(55)
        repo.set(91)
        assert repo.get() == 91.0
        count = in_memory_db.execute(f"SELECT COUNT(*) FROM {SLOT_TABLE};").fetchone()[0]
        assert count == 1

    def test_integer_stored_without_decimal(self, repo, in_memory_db):
        repo.set(68.0)
        assert _raw_text(in_memory_db) == "68"

    def test_fractional_score_kept(self, repo, in_memory_db):
        repo.set(72.5)
        assert _raw_text(in_memory_db) == "72.5"
        assert repo.get() == 72.5

    @pytest.mark.parametrize("text", ["abc", "", "nan", "inf"])
    def test_unreadable_text_is_none(self, repo, in_memory_db, text):
        in_memory_db.execute(
            f"INSERT INTO {SLOT_TABLE} (slot_id, score_text) VALUES (1, ?);", (text,)
        )
        assert repo.get() is None


class TestClear:
    def test_clear_removes_score(self, repo):
        repo.set(40)
        assert repo.clear() is True
        assert repo.get() is None

    def test_clear_empty_slot(self, repo):
        assert repo.clear() is False


class TestEncoding:
    @pytest.mark.parametrize("score,text", [(80, "80"), (0, "0"), (68.0, "68"), (72.5, "72.5")])
    def test_encode(self, score, text):
        assert encode_score(score) == text

    @pytest.mark.parametrize("text,value", [("80", 80.0), ("0", 0.0), (" 12.5 ", 12.5)])
    def test_decode(self, text, value):
        assert decode_score(text) == value

    @pytest.mark.parametrize("text", ["", "abc", "nan", "-inf", None])
    def test_decode_unreadable(self, text):
        assert decode_score(text) is None
