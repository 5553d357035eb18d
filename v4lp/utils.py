"""
Utility helpers for amounts, slippage and deadlines.

Includes:
- to_raw_amount / format_token_amount: human <-> raw (wei) amounts
- apply_slippage / max_amount_with_slippage: amount0Max/amount1Max buffers
- liquidity_portion: доля liquidity для частичного вывода
- compute_deadline: deadline для modifyLiquidities
"""

import time
from decimal import Decimal, ROUND_DOWN

from config import DEFAULT_DEADLINE_SECONDS, DEFAULT_SLIPPAGE_PERCENT

MAX_UINT128 = 2 ** 128 - 1


def to_raw_amount(amount: float | str | Decimal, decimals: int) -> int:
    """
    Точное преобразование суммы в raw единицы токена через Decimal.

    Example:
        >>> to_raw_amount("1.5", 18)
        1500000000000000000
        >>> to_raw_amount(0.000001, 18)
        1000000000000
    """
    amount_decimal = Decimal(str(amount))
    if amount_decimal < 0:
        raise ValueError("Amount must be non-negative")
    result = amount_decimal * (Decimal(10) ** decimals)
    # Truncate to integer (floor towards zero)
    return int(result.to_integral_value(rounding=ROUND_DOWN))


def format_token_amount(raw: int, decimals: int = 18, display_decimals: int = 4) -> str:
    """
    Форматирование raw суммы: 1234567800000000000000 -> "1,234.5678".

    Дробная часть обрезается, не округляется.
    """
    whole, frac = divmod(raw, 10 ** decimals)
    if display_decimals <= 0:
        return f"{whole:,}"
    frac_str = str(frac).rjust(decimals, "0")[:display_decimals].ljust(display_decimals, "0")
    return f"{whole:,}.{frac_str}"


def apply_slippage(amount: int, slippage_percent: float = DEFAULT_SLIPPAGE_PERCENT) -> int:
    """
    amount + slippage% (целочисленно, в basis points).

    apply_slippage(100, 5) == 105
    """
    if amount < 0:
        raise ValueError("Amount must be non-negative")
    if slippage_percent < 0:
        raise ValueError("Slippage must be non-negative")
    bps = round(slippage_percent * 100)
    return amount * (10000 + bps) // 10000


def max_amount_with_slippage(amount: int, slippage_percent: float = DEFAULT_SLIPPAGE_PERCENT) -> int:
    """
    amount0Max/amount1Max для минта.

    Нулевая сумма означает "этот токен не ограничен" -> MAX_UINT128.
    Результат всегда влезает в uint128.
    """
    if amount == 0:
        return MAX_UINT128
    return min(apply_slippage(amount, slippage_percent), MAX_UINT128)


def min_amount_with_slippage(amount: int, slippage_percent: float = DEFAULT_SLIPPAGE_PERCENT) -> int:
    """amount0Min/amount1Min для вывода: amount - slippage%."""
    if amount < 0:
        raise ValueError("Amount must be non-negative")
    bps = round(slippage_percent * 100)
    if not 0 <= bps <= 10000:
        raise ValueError("Slippage must be in [0, 100]")
    return amount * (10000 - bps) // 10000


def liquidity_portion(liquidity: int, percent: int) -> int:
    """Доля liquidity для частичного вывода (percent от 1 до 100)."""
    if not 0 < percent <= 100:
        raise ValueError(f"Percent must be in (0, 100], got {percent}")
    return liquidity * percent // 100


def compute_deadline(seconds: int = DEFAULT_DEADLINE_SECONDS) -> int:
    """Unix timestamp now + seconds."""
    return int(time.time()) + seconds
