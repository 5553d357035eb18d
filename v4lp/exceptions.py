"""
Исключения v4lp.

Все ошибки наследуются от ValueError, поэтому код, который ловит
ValueError (как и раньше), продолжает работать.
"""


class V4LiquidityError(ValueError):
    """Базовая ошибка библиотеки."""


class InvalidConfiguration(V4LiquidityError):
    """Некорректные входные параметры: tick_spacing <= 0, порядок валют в PoolKey и т.п."""


class DegenerateRange(V4LiquidityError):
    """Диапазон тиков нулевой или отрицательной ширины."""


class ProtocolEncodingError(V4LiquidityError):
    """Параметры action не совпадают со схемой или число tags != числу params."""


class UnknownActionTag(ProtocolEncodingError):
    """Код action вне известного перечисления."""

    def __init__(self, tag):
        self.tag = tag
        super().__init__(f"Unknown action tag: {tag!r}")


class InsufficientLiquidity(V4LiquidityError):
    """Liquidity = 0 при ненулевых суммах (суммы слишком малы или вне диапазона)."""

    def __init__(self, amount0: int, amount1: int):
        self.amount0 = amount0
        self.amount1 = amount1
        super().__init__(
            f"Computed liquidity is zero for amount0={amount0}, amount1={amount1}. "
            "Increase amounts or check the range against the current price."
        )
