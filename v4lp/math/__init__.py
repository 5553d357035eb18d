from .ticks import (
    price_to_tick,
    tick_to_price,
    tick_to_sqrt_price_x96,
    sqrt_price_x96_to_price,
    nearest_usable_tick,
)
from .liquidity import (
    liquidity_from_amounts,
    amounts_from_liquidity,
    ensure_liquidity,
    LiquidityAmounts,
)
from .ranges import resolve_range, RangePreset, TickRange
