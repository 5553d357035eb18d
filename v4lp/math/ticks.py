"""
Uniswap V4 Tick Mathematics

Основные формулы:
- price(i) = 1.0001^i
- sqrtPriceX96 = sqrt(price) * 2^96

Граница float / integer:
- tick -> sqrtPriceX96 считается через Decimal (50 знаков), это единственное
  место с нецелой арифметикой. Дальше (liquidity.py) только целые числа,
  как и в on-chain математике.
- price_to_tick / tick_to_price работают во float и нужны только для
  отображения. price_to_tick(tick_to_price(t)) может отличаться от t на 1
  тик из-за округления float - это известное приближение, а не баг.

Границы тиков здесь НЕ проверяются: вызывающий код (ranges.py) обязан
валидировать тики до вызова.
"""

import math
from decimal import Decimal, localcontext

from ..exceptions import InvalidConfiguration

# Константы
Q96 = 2 ** 96
MIN_TICK = -887272
MAX_TICK = 887272
MIN_SQRT_RATIO = 4295128739
MAX_SQRT_RATIO = 1461446703485210103287273052203988822378723970342

TICK_BASE = 1.0001
_DECIMAL_PRECISION = 50


def price_to_tick(price: float, invert: bool = False) -> int:
    """
    Конвертация цены в тик.

    i = round(log(price) / log(1.0001))

    Args:
        price: Цена token1/token0 в raw единицах (без учёта decimals)
        invert: Если True, сначала берётся 1/price (цена token0/token1)

    Returns:
        Ближайший тик. Приближённая обратная функция к tick_to_price:
        результат может отличаться на ±1 из-за float.

    Example:
        tick = price_to_tick(1.0001 ** 100)  # 100
    """
    if price <= 0:
        raise ValueError("Price must be positive")

    if invert:
        price = 1.0 / price

    return round(math.log(price) / math.log(TICK_BASE))


def tick_to_price(tick: int, invert: bool = False) -> float:
    """
    Конвертация тика в цену.

    Args:
        tick: Номер тика
        invert: Если True, возвращает цену token0/token1

    Returns:
        1.0001^tick (token1 за token0, raw единицы)
    """
    pool_price = TICK_BASE ** tick
    if invert:
        return 1.0 / pool_price
    return pool_price


def tick_to_sqrt_price_x96(tick: int) -> int:
    """
    Конвертация тика в sqrtPriceX96.

    floor(sqrt(1.0001^tick) * 2^96), промежуточные значения в Decimal
    с точностью 50 знаков, чтобы не было систематического смещения
    на больших |tick|.
    """
    with localcontext() as ctx:
        ctx.prec = _DECIMAL_PRECISION
        sqrt_price = (Decimal("1.0001") ** tick).sqrt()
        return int(sqrt_price * Q96)


def price_to_sqrt_price_x96(price: float) -> int:
    """
    Конвертация цены в sqrtPriceX96.

    sqrtPriceX96 = sqrt(price) * 2^96, с ограничением MIN/MAX_SQRT_RATIO.
    """
    if price <= 0:
        raise ValueError("Price must be positive")

    with localcontext() as ctx:
        ctx.prec = _DECIMAL_PRECISION
        sqrt_price_x96 = int(Decimal(str(price)).sqrt() * Q96)

    return max(MIN_SQRT_RATIO, min(MAX_SQRT_RATIO, sqrt_price_x96))


def sqrt_price_x96_to_price(
    sqrt_price_x96: int,
    decimals0: int = 18,
    decimals1: int = 18
) -> float:
    """
    Конвертация sqrtPriceX96 в человекочитаемую цену.

    price = (sqrtPriceX96 / 2^96)^2 * 10^(decimals0 - decimals1)

    Args:
        sqrt_price_x96: sqrtPriceX96 из slot0
        decimals0: Decimals token0
        decimals1: Decimals token1

    Returns:
        Цена token1 в единицах token0 с учётом decimals
    """
    sqrt_price = sqrt_price_x96 / Q96
    return sqrt_price ** 2 * 10 ** (decimals0 - decimals1)


def _check_spacing(tick_spacing: int):
    if tick_spacing <= 0:
        raise InvalidConfiguration(f"tick_spacing must be positive, got {tick_spacing}")


def nearest_usable_tick(tick: int, tick_spacing: int) -> int:
    """
    Округление тика до ближайшего кратного tick_spacing.

    Половина округляется от нуля: nearest_usable_tick(-100, 200) == -200.
    Целочисленная арифметика, без float.
    """
    _check_spacing(tick_spacing)

    sign = -1 if tick < 0 else 1
    quotient, remainder = divmod(abs(tick), tick_spacing)
    if remainder * 2 >= tick_spacing:
        quotient += 1
    return sign * quotient * tick_spacing


def align_tick_to_spacing(tick: int, tick_spacing: int, round_down: bool = True) -> int:
    """
    Выравнивание тика к tick_spacing в заданную сторону.

    Args:
        tick: Исходный тик
        tick_spacing: Шаг тиков пула
        round_down: True = к -∞, False = к +∞

    Returns:
        Выровненный тик
    """
    _check_spacing(tick_spacing)

    if tick % tick_spacing == 0:
        return tick

    if round_down:
        return (tick // tick_spacing) * tick_spacing
    return ((tick // tick_spacing) + 1) * tick_spacing


def min_usable_tick(tick_spacing: int) -> int:
    """Минимальный тик, кратный tick_spacing и не меньше MIN_TICK."""
    return align_tick_to_spacing(MIN_TICK, tick_spacing, round_down=False)


def max_usable_tick(tick_spacing: int) -> int:
    """Максимальный тик, кратный tick_spacing и не больше MAX_TICK."""
    return align_tick_to_spacing(MAX_TICK, tick_spacing, round_down=True)


def get_price_range_for_tick_range(tick_lower: int, tick_upper: int) -> tuple[float, float]:
    """(price_lower, price_upper) для диапазона тиков."""
    return tick_to_price(tick_lower), tick_to_price(tick_upper)
