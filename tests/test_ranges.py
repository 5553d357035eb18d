"""
Tests for v4lp.math.ranges: TickRange и resolve_range.
"""

import pytest

from v4lp.exceptions import DegenerateRange, InvalidConfiguration
from v4lp.math.ranges import (
    RangePreset,
    TickRange,
    resolve_range,
    PRESET_TICK_OFFSETS,
    CUSTOM_DEFAULT_OFFSET,
)
from v4lp.math.ticks import nearest_usable_tick


CLAWD_SPACING = 200
CLAWD_TICK = 167890


class TestTickRange:

    def test_valid_range(self):
        tr = TickRange(-600, 600)
        assert tr.width == 1200

    @pytest.mark.parametrize("lower, upper", [(600, 600), (600, -600)])
    def test_degenerate_raises(self, lower, upper):
        with pytest.raises(DegenerateRange):
            TickRange(lower, upper)

    def test_contains_is_half_open(self):
        tr = TickRange(-600, 600)
        assert tr.contains(-600)
        assert tr.contains(0)
        assert not tr.contains(600)

    def test_is_usable(self):
        assert TickRange(-600, 600).is_usable(60)
        assert not TickRange(-610, 600).is_usable(60)

    def test_price_bounds(self):
        low, high = TickRange(-600, 600).price_bounds()
        assert low < 1.0 < high

    def test_frozen(self):
        tr = TickRange(-600, 600)
        with pytest.raises(AttributeError):
            tr.tick_lower = 0


class TestResolveRangePresets:

    def test_wide_clawd_scenario(self):
        tr = resolve_range("wide", CLAWD_TICK, CLAWD_SPACING)
        assert tr.tick_lower == nearest_usable_tick(CLAWD_TICK - 40000, CLAWD_SPACING)
        assert tr.tick_upper == nearest_usable_tick(CLAWD_TICK + 40000, CLAWD_SPACING)
        assert (tr.tick_lower, tr.tick_upper) == (127800, 207800)
        assert tr.tick_lower % CLAWD_SPACING == 0
        assert tr.tick_upper % CLAWD_SPACING == 0
        assert tr.tick_lower < tr.tick_upper

    def test_narrow_clawd_scenario(self):
        tr = resolve_range("narrow", CLAWD_TICK, CLAWD_SPACING)
        assert (tr.tick_lower, tr.tick_upper) == (163800, 171800)

    def test_full_at_zero_covers_usable_range(self):
        tr = resolve_range("full", 0, CLAWD_SPACING)
        assert (tr.tick_lower, tr.tick_upper) == (-887200, 887200)

    def test_full_is_clamped_to_usable_bounds(self):
        tr = resolve_range("full", CLAWD_TICK, CLAWD_SPACING)
        assert tr.tick_lower == -719400
        assert tr.tick_upper == 887200

    def test_full_with_spacing_60(self):
        tr = resolve_range("full", 0, 60)
        assert (tr.tick_lower, tr.tick_upper) == (-887220, 887220)

    def test_accepts_enum(self):
        assert resolve_range(RangePreset.WIDE, CLAWD_TICK, CLAWD_SPACING) == \
            resolve_range("wide", CLAWD_TICK, CLAWD_SPACING)

    def test_preset_offsets(self):
        assert PRESET_TICK_OFFSETS[RangePreset.FULL] == 887200
        assert PRESET_TICK_OFFSETS[RangePreset.WIDE] == 40000
        assert PRESET_TICK_OFFSETS[RangePreset.NARROW] == 4000

    @pytest.mark.parametrize("preset", ["full", "wide", "narrow"])
    @pytest.mark.parametrize("current_tick", [-500000, -1, 0, 12345, CLAWD_TICK])
    def test_bounds_are_usable(self, preset, current_tick):
        tr = resolve_range(preset, current_tick, CLAWD_SPACING)
        assert tr.is_usable(CLAWD_SPACING)
        assert -887272 <= tr.tick_lower < tr.tick_upper <= 887272


class TestResolveRangeCustom:

    def test_explicit_bounds_are_snapped(self):
        tr = resolve_range("custom", 0, 60, custom_lower=-100, custom_upper=100)
        assert (tr.tick_lower, tr.tick_upper) == (-120, 120)

    def test_default_bounds(self):
        tr = resolve_range("custom", 0, CLAWD_SPACING)
        assert (tr.tick_lower, tr.tick_upper) == (-CUSTOM_DEFAULT_OFFSET, CUSTOM_DEFAULT_OFFSET)

    def test_only_lower_given(self):
        tr = resolve_range("custom", 0, CLAWD_SPACING, custom_lower=-2000)
        assert (tr.tick_lower, tr.tick_upper) == (-2000, CUSTOM_DEFAULT_OFFSET)

    def test_collapsed_range_raises(self):
        with pytest.raises(DegenerateRange):
            resolve_range("custom", 0, CLAWD_SPACING, custom_lower=10, custom_upper=20)

    def test_inverted_range_raises(self):
        with pytest.raises(DegenerateRange):
            resolve_range("custom", 0, CLAWD_SPACING, custom_lower=2000, custom_upper=-2000)

    def test_out_of_bounds_custom_tick_raises(self):
        with pytest.raises(InvalidConfiguration):
            resolve_range("custom", 0, CLAWD_SPACING, custom_lower=-900000, custom_upper=0)


class TestResolveRangeValidation:

    @pytest.mark.parametrize("spacing", [0, -200])
    def test_bad_spacing(self, spacing):
        with pytest.raises(InvalidConfiguration):
            resolve_range("wide", 0, spacing)

    def test_unknown_preset(self):
        with pytest.raises(InvalidConfiguration, match="Unknown range preset"):
            resolve_range("medium", 0, 60)

    @pytest.mark.parametrize("current_tick", [-887273, 900000])
    def test_current_tick_out_of_bounds(self, current_tick):
        with pytest.raises(InvalidConfiguration):
            resolve_range("wide", current_tick, 60)
