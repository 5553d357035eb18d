"""
Выбор диапазона тиков для новой позиции.

Пресеты (смещение от текущего тика в обе стороны):
- full   -> ±887200 (фактически весь диапазон, обрезается до usable границ)
- wide   -> ±40000
- narrow -> ±4000
- custom -> заданные границы, по умолчанию current ∓ 10000

Обе границы всегда проходят через nearest_usable_tick.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from ..exceptions import DegenerateRange, InvalidConfiguration
from .ticks import (
    MIN_TICK,
    MAX_TICK,
    nearest_usable_tick,
    min_usable_tick,
    max_usable_tick,
    get_price_range_for_tick_range,
)

logger = logging.getLogger(__name__)


class RangePreset(str, Enum):
    """Пресеты ширины диапазона."""
    FULL = "full"
    WIDE = "wide"
    NARROW = "narrow"
    CUSTOM = "custom"


PRESET_TICK_OFFSETS = {
    RangePreset.FULL: 887200,
    RangePreset.WIDE: 40000,
    RangePreset.NARROW: 4000,
}

CUSTOM_DEFAULT_OFFSET = 10000


@dataclass(frozen=True)
class TickRange:
    """Упорядоченная пара тиков, tick_lower < tick_upper."""
    tick_lower: int
    tick_upper: int

    def __post_init__(self):
        if self.tick_lower >= self.tick_upper:
            raise DegenerateRange(
                f"tick_lower ({self.tick_lower}) must be < tick_upper ({self.tick_upper})"
            )

    @property
    def width(self) -> int:
        return self.tick_upper - self.tick_lower

    def contains(self, tick: int) -> bool:
        return self.tick_lower <= tick < self.tick_upper

    def is_usable(self, tick_spacing: int) -> bool:
        return self.tick_lower % tick_spacing == 0 and self.tick_upper % tick_spacing == 0

    def price_bounds(self) -> tuple[float, float]:
        """(price_lower, price_upper) в raw единицах token1/token0."""
        return get_price_range_for_tick_range(self.tick_lower, self.tick_upper)


def _check_tick_bounds(name: str, tick: int):
    if not MIN_TICK <= tick <= MAX_TICK:
        raise InvalidConfiguration(
            f"{name}={tick} is outside the protocol range [{MIN_TICK}, {MAX_TICK}]"
        )


def _parse_preset(preset: Union[RangePreset, str]) -> RangePreset:
    try:
        return RangePreset(preset)
    except ValueError:
        valid = [p.value for p in RangePreset]
        raise InvalidConfiguration(f"Unknown range preset: {preset!r}. Valid presets: {valid}")


def resolve_range(
    preset: Union[RangePreset, str],
    current_tick: int,
    tick_spacing: int,
    custom_lower: Optional[int] = None,
    custom_upper: Optional[int] = None
) -> TickRange:
    """
    Диапазон тиков по пресету или явным границам.

    Args:
        preset: "full" / "wide" / "narrow" / "custom" (или RangePreset)
        current_tick: Текущий тик пула
        tick_spacing: Шаг тиков пула
        custom_lower: Нижняя граница для custom (по умолчанию current - 10000)
        custom_upper: Верхняя граница для custom (по умолчанию current + 10000)

    Returns:
        TickRange из usable тиков

    Raises:
        InvalidConfiguration: tick_spacing <= 0, неизвестный пресет,
            тики вне [MIN_TICK, MAX_TICK]
        DegenerateRange: после округления диапазон схлопнулся
    """
    if tick_spacing <= 0:
        raise InvalidConfiguration(f"tick_spacing must be positive, got {tick_spacing}")

    preset = _parse_preset(preset)
    _check_tick_bounds("current_tick", current_tick)

    if preset == RangePreset.CUSTOM:
        lower = custom_lower if custom_lower is not None else current_tick - CUSTOM_DEFAULT_OFFSET
        upper = custom_upper if custom_upper is not None else current_tick + CUSTOM_DEFAULT_OFFSET
        _check_tick_bounds("custom_lower", lower)
        _check_tick_bounds("custom_upper", upper)
        tick_lower = nearest_usable_tick(lower, tick_spacing)
        tick_upper = nearest_usable_tick(upper, tick_spacing)
    else:
        offset = PRESET_TICK_OFFSETS[preset]
        tick_lower = nearest_usable_tick(current_tick - offset, tick_spacing)
        tick_upper = nearest_usable_tick(current_tick + offset, tick_spacing)

    # Округление может вывести за протокольные границы - прижимаем к usable
    tick_lower = max(tick_lower, min_usable_tick(tick_spacing))
    tick_upper = min(tick_upper, max_usable_tick(tick_spacing))

    if tick_lower >= tick_upper:
        raise DegenerateRange(
            f"Range collapsed after snapping to tick_spacing={tick_spacing}: "
            f"lower={tick_lower}, upper={tick_upper} (preset={preset.value}, current={current_tick})"
        )

    logger.debug(f"[RANGE] {preset.value}: current={current_tick}, ticks={tick_lower}/{tick_upper}")
    return TickRange(tick_lower=tick_lower, tick_upper=tick_upper)
