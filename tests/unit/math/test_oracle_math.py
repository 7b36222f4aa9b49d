"""Tests for OracleLibrary mean tick and quote-at-tick."""

import pytest

from buyback.math import MAX_TICK, MIN_TICK, DivisionByZero, arithmetic_mean_tick, get_quote_at_tick

TOKEN0 = "0x1111111111111111111111111111111111111111"
TOKEN1 = "0x2222222222222222222222222222222222222222"


class TestArithmeticMeanTick:
    def test_positive_delta_truncates(self):
        assert arithmetic_mean_tick([0, 7], 2) == 3

    def test_negative_delta_exact(self):
        assert arithmetic_mean_tick([0, -6], 2) == -3

    def test_negative_delta_rounds_toward_negative_infinity(self):
        assert arithmetic_mean_tick([0, -7], 2) == -4

    def test_uses_difference_of_cumulatives(self):
        assert arithmetic_mean_tick([1_000, 1_000 + 600 * 42], 600) == 42

    def test_zero_window(self):
        with pytest.raises(DivisionByZero):
            arithmetic_mean_tick([0, 0], 0)

    def test_needs_two_observations(self):
        with pytest.raises(ValueError, match="two tick cumulatives"):
            arithmetic_mean_tick([0], 60)


class TestGetQuoteAtTick:
    def test_tick_zero_is_one_to_one(self):
        amount = 123 * 10**18
        assert get_quote_at_tick(0, amount, TOKEN0, TOKEN1) == amount
        assert get_quote_at_tick(0, amount, TOKEN1, TOKEN0) == amount

    def test_positive_tick_favors_token0_base(self):
        """Price is token1 per token0: at a positive tick token0 buys more token1."""
        amount = 10**18
        tick = 23_027  # ~10x
        token0_in = get_quote_at_tick(tick, amount, TOKEN0, TOKEN1)
        token1_in = get_quote_at_tick(tick, amount, TOKEN1, TOKEN0)
        assert 9 * amount < token0_in < 11 * amount
        assert amount // 11 < token1_in < amount // 9

    def test_zero_amount(self):
        assert get_quote_at_tick(1000, 0, TOKEN0, TOKEN1) == 0

    def test_extreme_ticks_use_wide_ratio_path(self):
        """Above uint128 the sqrt ratio is squared via the X128 path without overflowing."""
        assert get_quote_at_tick(MAX_TICK, 1, TOKEN0, TOKEN1) > 10**38
        assert get_quote_at_tick(MAX_TICK, 1, TOKEN1, TOKEN0) == 0
        assert get_quote_at_tick(MIN_TICK, 1, TOKEN0, TOKEN1) == 0

    def test_amount_above_uint128(self):
        with pytest.raises(ValueError, match="uint128"):
            get_quote_at_tick(0, 2**128, TOKEN0, TOKEN1)
