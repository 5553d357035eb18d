"""
Uniswap V4 Liquidity Mathematics

Формулы из whitepaper (sqrt цены в формате Q64.96):
- L = amount0 * sqrtA * sqrtB / (Q96 * (sqrtB - sqrtA))
- L = amount1 * Q96 / (sqrtB - sqrtA)

Три случая относительно текущей цены:
1. current <= lower: позиция полностью в token0
2. lower < current < upper: оба токена, берём минимум из двух L
3. current >= upper: позиция полностью в token1

Вся арифметика после получения sqrtPriceX96 - целочисленная (floor).
"""

from dataclasses import dataclass

from ..exceptions import InsufficientLiquidity
from .ticks import Q96, tick_to_sqrt_price_x96


@dataclass
class LiquidityAmounts:
    """Результат расчёта количества токенов."""
    amount0: int  # В wei/smallest unit
    amount1: int  # В wei/smallest unit
    liquidity: int


def _sorted_bounds(sqrt_price_a_x96: int, sqrt_price_b_x96: int) -> tuple[int, int]:
    if sqrt_price_a_x96 > sqrt_price_b_x96:
        return sqrt_price_b_x96, sqrt_price_a_x96
    return sqrt_price_a_x96, sqrt_price_b_x96


def get_liquidity_for_amount0(sqrt_price_a_x96: int, sqrt_price_b_x96: int, amount0: int) -> int:
    """
    Liquidity по количеству token0.

    Порядок границ не важен: меньшая всегда вычитается из большей.
    Для границ одинаковой цены возвращает 0.
    """
    sqrt_lower, sqrt_upper = _sorted_bounds(sqrt_price_a_x96, sqrt_price_b_x96)
    if sqrt_upper == sqrt_lower:
        return 0
    return (amount0 * sqrt_lower * sqrt_upper) // (Q96 * (sqrt_upper - sqrt_lower))


def get_liquidity_for_amount1(sqrt_price_a_x96: int, sqrt_price_b_x96: int, amount1: int) -> int:
    """Liquidity по количеству token1."""
    sqrt_lower, sqrt_upper = _sorted_bounds(sqrt_price_a_x96, sqrt_price_b_x96)
    if sqrt_upper == sqrt_lower:
        return 0
    return (amount1 * Q96) // (sqrt_upper - sqrt_lower)


def get_amount0_for_liquidity(sqrt_price_a_x96: int, sqrt_price_b_x96: int, liquidity: int) -> int:
    """
    Количество token0 для заданной liquidity.

    amount0 = L * Q96 * (sqrtB - sqrtA) / (sqrtB * sqrtA)
    """
    sqrt_lower, sqrt_upper = _sorted_bounds(sqrt_price_a_x96, sqrt_price_b_x96)
    if sqrt_lower == 0:
        raise ValueError("sqrt price bound must be positive")
    return (liquidity * Q96 * (sqrt_upper - sqrt_lower)) // (sqrt_upper * sqrt_lower)


def get_amount1_for_liquidity(sqrt_price_a_x96: int, sqrt_price_b_x96: int, liquidity: int) -> int:
    """
    Количество token1 для заданной liquidity.

    amount1 = L * (sqrtB - sqrtA) / Q96
    """
    sqrt_lower, sqrt_upper = _sorted_bounds(sqrt_price_a_x96, sqrt_price_b_x96)
    return (liquidity * (sqrt_upper - sqrt_lower)) // Q96


def _range_bounds(tick_lower: int, tick_upper: int) -> tuple[int, int]:
    return _sorted_bounds(
        tick_to_sqrt_price_x96(tick_lower),
        tick_to_sqrt_price_x96(tick_upper)
    )


def liquidity_from_amounts(
    sqrt_price_current: int,
    tick_lower: int,
    tick_upper: int,
    amount0: int,
    amount1: int
) -> int:
    """
    Максимальная liquidity, которую можно получить из amount0/amount1.

    Args:
        sqrt_price_current: Текущий sqrtPriceX96 пула
        tick_lower: Нижний тик диапазона
        tick_upper: Верхний тик диапазона
        amount0: Доступное количество token0 (raw)
        amount1: Доступное количество token1 (raw)

    Returns:
        Liquidity (L). 0 означает, что сумм недостаточно - такую позицию
        отправлять нельзя (см. ensure_liquidity).
    """
    if amount0 < 0 or amount1 < 0:
        raise ValueError("Amounts must be non-negative")

    sqrt_lower, sqrt_upper = _range_bounds(tick_lower, tick_upper)

    # Случай 1: цена ниже диапазона -> нужен только token0
    if sqrt_price_current <= sqrt_lower:
        return get_liquidity_for_amount0(sqrt_lower, sqrt_upper, amount0)

    # Случай 2: цена в диапазоне -> лимитирующий фактор = минимум
    if sqrt_price_current < sqrt_upper:
        liquidity0 = get_liquidity_for_amount0(sqrt_price_current, sqrt_upper, amount0)
        liquidity1 = get_liquidity_for_amount1(sqrt_lower, sqrt_price_current, amount1)
        return min(liquidity0, liquidity1)

    # Случай 3: цена выше диапазона -> нужен только token1
    return get_liquidity_for_amount1(sqrt_lower, sqrt_upper, amount1)


def amounts_from_liquidity(
    sqrt_price_current: int,
    tick_lower: int,
    tick_upper: int,
    liquidity: int
) -> LiquidityAmounts:
    """
    Количество обоих токенов для заданной liquidity.

    Те же три случая, что и в liquidity_from_amounts; токен, не активный
    в данном случае, остаётся 0.
    """
    if liquidity < 0:
        raise ValueError("Liquidity must be non-negative")

    sqrt_lower, sqrt_upper = _range_bounds(tick_lower, tick_upper)
    amount0 = 0
    amount1 = 0

    if sqrt_price_current <= sqrt_lower:
        amount0 = get_amount0_for_liquidity(sqrt_lower, sqrt_upper, liquidity)
    elif sqrt_price_current < sqrt_upper:
        amount0 = get_amount0_for_liquidity(sqrt_price_current, sqrt_upper, liquidity)
        amount1 = get_amount1_for_liquidity(sqrt_lower, sqrt_price_current, liquidity)
    else:
        amount1 = get_amount1_for_liquidity(sqrt_lower, sqrt_upper, liquidity)

    return LiquidityAmounts(amount0=amount0, amount1=amount1, liquidity=liquidity)


def ensure_liquidity(liquidity: int, amount0: int, amount1: int) -> int:
    """
    Проверка перед отправкой: нулевая liquidity при ненулевых суммах
    это InsufficientLiquidity, а не "пустая" позиция.
    """
    if liquidity <= 0 and (amount0 > 0 or amount1 > 0):
        raise InsufficientLiquidity(amount0, amount1)
    return liquidity
