"""
Tests for v4lp.math.ticks module.

Covers:
    - price_to_tick / tick_to_price (float, только для отображения)
    - tick_to_sqrt_price_x96 (Decimal, точная граница)
    - price_to_sqrt_price_x96 / sqrt_price_x96_to_price
    - nearest_usable_tick / align_tick_to_spacing
    - min_usable_tick / max_usable_tick
"""

import pytest

from v4lp.exceptions import InvalidConfiguration
from v4lp.math.ticks import (
    price_to_tick,
    tick_to_price,
    tick_to_sqrt_price_x96,
    price_to_sqrt_price_x96,
    sqrt_price_x96_to_price,
    nearest_usable_tick,
    align_tick_to_spacing,
    min_usable_tick,
    max_usable_tick,
    get_price_range_for_tick_range,
    Q96,
    MIN_TICK,
    MAX_TICK,
    MIN_SQRT_RATIO,
    MAX_SQRT_RATIO,
)


# ===================================================================
# price_to_tick / tick_to_price
# ===================================================================
class TestPriceToTick:
    """Tests for price_to_tick(price, invert)."""

    def test_price_one_gives_tick_zero(self):
        assert price_to_tick(1.0) == 0

    def test_price_1_0001_gives_tick_one(self):
        assert price_to_tick(1.0001) == 1

    def test_exact_power(self):
        assert price_to_tick(1.0001 ** 100) == 100

    def test_price_below_one_gives_negative_tick(self):
        assert price_to_tick(0.5) < 0

    def test_invert_flips_sign(self):
        assert price_to_tick(2.0, invert=True) == -price_to_tick(2.0)

    @pytest.mark.parametrize("price", [0, -1.0])
    def test_non_positive_price_raises(self, price):
        with pytest.raises(ValueError, match="positive"):
            price_to_tick(price)


class TestTickToPrice:
    """Tests for tick_to_price(tick, invert)."""

    def test_tick_zero(self):
        assert tick_to_price(0) == 1.0

    def test_positive_tick(self):
        assert tick_to_price(100) == pytest.approx(1.0001 ** 100)

    def test_invert(self):
        assert tick_to_price(100, invert=True) == pytest.approx(1 / 1.0001 ** 100)

    def test_price_range_for_tick_range(self):
        low, high = get_price_range_for_tick_range(-600, 600)
        assert low < 1.0 < high
        assert low * high == pytest.approx(1.0)


class TestRoundTrip:
    """price_to_tick(tick_to_price(t)) == t с допуском ±1 тик из-за float."""

    SAMPLE = list(range(-880000, 880001, 40000)) + [MIN_TICK, MAX_TICK, -1, 1, 167890]

    def test_round_trip_within_one_tick(self):
        for tick in self.SAMPLE:
            recovered = price_to_tick(tick_to_price(tick))
            assert abs(recovered - tick) <= 1, f"tick {tick} -> {recovered}"

    def test_small_ticks_round_trip_exactly(self):
        for tick in range(-50, 51):
            assert price_to_tick(tick_to_price(tick)) == tick


# ===================================================================
# tick_to_sqrt_price_x96
# ===================================================================
class TestTickToSqrtPriceX96:
    """Tests for tick_to_sqrt_price_x96(tick)."""

    def test_tick_zero_is_q96(self):
        assert tick_to_sqrt_price_x96(0) == Q96

    def test_returns_int(self):
        assert isinstance(tick_to_sqrt_price_x96(12345), int)

    def test_monotonic(self):
        ticks = list(range(-887000, 887001, 17000)) + [MIN_TICK, MAX_TICK]
        ticks.sort()
        values = [tick_to_sqrt_price_x96(t) for t in ticks]
        assert values == sorted(values)

    def test_adjacent_ticks_non_decreasing(self):
        for tick in range(-5, 5):
            assert tick_to_sqrt_price_x96(tick) <= tick_to_sqrt_price_x96(tick + 1)

    def test_min_tick_close_to_min_sqrt_ratio(self):
        value = tick_to_sqrt_price_x96(MIN_TICK)
        assert abs(value - MIN_SQRT_RATIO) <= MIN_SQRT_RATIO // 10 ** 8

    def test_max_tick_close_to_max_sqrt_ratio(self):
        value = tick_to_sqrt_price_x96(MAX_TICK)
        assert abs(value - MAX_SQRT_RATIO) <= MAX_SQRT_RATIO // 10 ** 8

    def test_symmetry(self):
        """sqrt(p(t)) * sqrt(p(-t)) == 1 в пределах округления."""
        product = tick_to_sqrt_price_x96(6000) * tick_to_sqrt_price_x96(-6000)
        assert abs(product - Q96 * Q96) <= 3 * Q96


# ===================================================================
# price_to_sqrt_price_x96 / sqrt_price_x96_to_price
# ===================================================================
class TestSqrtPriceConversions:

    def test_price_one(self):
        assert price_to_sqrt_price_x96(1.0) == Q96

    def test_price_four(self):
        assert price_to_sqrt_price_x96(4.0) == 2 * Q96

    def test_tiny_price_clamped_to_min(self):
        assert price_to_sqrt_price_x96(1e-60) == MIN_SQRT_RATIO

    def test_huge_price_clamped_to_max(self):
        assert price_to_sqrt_price_x96(1e60) == MAX_SQRT_RATIO

    def test_zero_price_raises(self):
        with pytest.raises(ValueError):
            price_to_sqrt_price_x96(0)

    def test_sqrt_price_to_price_one(self):
        assert sqrt_price_x96_to_price(Q96) == pytest.approx(1.0)

    def test_sqrt_price_to_price_with_decimals(self):
        # token0 18 decimals, token1 6 decimals
        assert sqrt_price_x96_to_price(Q96, 18, 6) == pytest.approx(1e12)


# ===================================================================
# nearest_usable_tick / align_tick_to_spacing
# ===================================================================
class TestNearestUsableTick:
    """Tests for nearest_usable_tick(tick, spacing)."""

    @pytest.mark.parametrize("tick, spacing", [
        (0, 1), (200, 200), (-200, 200), (887200, 200), (-887220, 60), (600, 60),
    ])
    def test_multiples_unchanged(self, tick, spacing):
        assert nearest_usable_tick(tick, spacing) == tick

    @pytest.mark.parametrize("tick, spacing, expected", [
        (99, 200, 0),
        (101, 200, 200),
        (-99, 200, 0),
        (-101, 200, -200),
        (167890, 200, 167800),
        (127890, 200, 127800),
        (207890, 200, 207800),
        (-100, 60, -120),
        (29, 60, 0),
    ])
    def test_rounds_to_nearest(self, tick, spacing, expected):
        assert nearest_usable_tick(tick, spacing) == expected

    def test_half_rounds_away_from_zero(self):
        assert nearest_usable_tick(100, 200) == 200
        assert nearest_usable_tick(-100, 200) == -200

    def test_result_is_multiple(self):
        for tick in range(-1000, 1000, 37):
            assert nearest_usable_tick(tick, 60) % 60 == 0

    @pytest.mark.parametrize("spacing", [0, -10])
    def test_invalid_spacing_raises(self, spacing):
        with pytest.raises(InvalidConfiguration):
            nearest_usable_tick(100, spacing)


class TestAlignTickToSpacing:

    def test_round_down(self):
        assert align_tick_to_spacing(-50, 60) == -60
        assert align_tick_to_spacing(50, 60) == 0

    def test_round_up(self):
        assert align_tick_to_spacing(-50, 60, round_down=False) == 0
        assert align_tick_to_spacing(50, 60, round_down=False) == 60

    def test_already_aligned(self):
        assert align_tick_to_spacing(120, 60) == 120
        assert align_tick_to_spacing(120, 60, round_down=False) == 120


class TestUsableBounds:

    @pytest.mark.parametrize("spacing, expected", [(1, 887272), (60, 887220), (200, 887200)])
    def test_max_usable_tick(self, spacing, expected):
        assert max_usable_tick(spacing) == expected

    @pytest.mark.parametrize("spacing, expected", [(1, -887272), (60, -887220), (200, -887200)])
    def test_min_usable_tick(self, spacing, expected):
        assert min_usable_tick(spacing) == expected
