"""Tests for half-life score decay."""

import pytest

from driftguard.inference.score_decay import decay_score


class TestDecayScore:
    def test_one_half_life_halves(self):
        assert decay_score(8.0, 30.0) == pytest.approx(4.0)

    def test_decay_interval(self):
        assert decay_score(10.0, 10.0) == pytest.approx(10.0 * 0.5 ** (1 / 3))

    def test_zero_elapsed_is_identity(self):
        assert decay_score(6.0, 0.0) == 6.0

    def test_negative_elapsed_is_ignored(self):
        assert decay_score(6.0, -5.0) == 6.0

    def test_never_negative(self):
        assert decay_score(0.0, 100.0) == 0.0

    def test_half_life_must_be_positive(self):
        with pytest.raises(ValueError):
            decay_score(5.0, 1.0, half_life_s=0)
