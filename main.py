"""
Uniswap V4 Liquidity Position Calculator

Интерактивный предпросмотр новой позиции:
- Текущее состояние пула (из StateView или вручную)
- Диапазон тиков по пресету (full / wide / narrow / custom)
- Liquidity из сумм токенов и amount0Max/amount1Max со slippage
- Готовый unlockData для modifyLiquidities (без подписи и отправки)
"""

import logging
import os

from dotenv import load_dotenv
from web3 import Web3

from config import (
    BASE,
    CLAWD_WETH_POOL,
    DEFAULT_RANGE_PRESET,
    DEFAULT_SLIPPAGE_PERCENT,
    get_token_decimals,
)
from v4lp.exceptions import V4LiquidityError
from v4lp.math import (
    amounts_from_liquidity,
    ensure_liquidity,
    liquidity_from_amounts,
    resolve_range,
    tick_to_sqrt_price_x96,
)
from v4lp.contracts.v4 import PoolKey, V4PoolManager, V4PositionManager
from v4lp.utils import format_token_amount, max_amount_with_slippage, to_raw_amount

load_dotenv()

logger = logging.getLogger(__name__)

PRESETS = {"1": "full", "2": "wide", "3": "narrow", "4": "custom"}


def default_pool_key() -> PoolKey:
    """PoolKey пула по умолчанию из config."""
    return PoolKey(
        currency0=CLAWD_WETH_POOL.token0,
        currency1=CLAWD_WETH_POOL.token1,
        fee=CLAWD_WETH_POOL.fee,
        tick_spacing=CLAWD_WETH_POOL.tick_spacing,
        hooks=CLAWD_WETH_POOL.hooks,
    )


def read_pool_state(pool_key: PoolKey):
    """
    (tick, sqrtPriceX96) пула: из RPC, если задан RPC_URL, иначе вручную.
    """
    rpc_url = os.getenv("RPC_URL", "")
    if rpc_url:
        w3 = Web3(Web3.HTTPProvider(rpc_url))
        state = V4PoolManager(w3, chain_id=BASE.chain_id, state_view_address=BASE.state_view).get_pool_state(pool_key)
        if not state.initialized:
            raise V4LiquidityError(f"Pool 0x{pool_key.pool_id.hex()} is not initialized")
        print(f"\nТекущий тик: {state.tick}, sqrtPriceX96: {state.sqrt_price_x96}")
        return state.tick, state.sqrt_price_x96

    print("\nRPC_URL не задан, введите состояние пула вручную")
    while True:
        try:
            tick = int(input("Текущий тик пула: "))
            return tick, tick_to_sqrt_price_x96(tick)
        except ValueError:
            print("Введите целое число")


def ask_amount(prompt: str, decimals: int) -> int:
    while True:
        try:
            return to_raw_amount(input(prompt).strip() or "0", decimals)
        except (ValueError, ArithmeticError):
            print("Введите неотрицательное число")


def interactive_calculator():
    """
    Интерактивный калькулятор позиции.
    Ничего не подписывает и не отправляет.
    """
    print("\n" + "=" * 70)
    print(f"V4 POSITION CALCULATOR: {CLAWD_WETH_POOL.name}")
    print("=" * 70)

    pool_key = default_pool_key()
    print(f"Pool ID: 0x{pool_key.pool_id.hex()}")

    current_tick, sqrt_price_x96 = read_pool_state(pool_key)

    print("\nДиапазон:")
    print("1. full   - весь диапазон")
    print("2. wide   - ±40000 тиков")
    print("3. narrow - ±4000 тиков")
    print("4. custom - свои границы")
    default_choice = {v: k for k, v in PRESETS.items()}.get(DEFAULT_RANGE_PRESET, "2")
    preset = PRESETS.get(input(f"Выбор (1-4) [{default_choice}]: ").strip() or default_choice, DEFAULT_RANGE_PRESET)

    custom_lower = custom_upper = None
    if preset == "custom":
        while True:
            try:
                custom_lower = int(input("Нижний тик: "))
                custom_upper = int(input("Верхний тик: "))
                break
            except ValueError:
                print("Введите целое число")

    decimals0 = get_token_decimals(pool_key.currency0)
    decimals1 = get_token_decimals(pool_key.currency1)
    amount0 = ask_amount("\nСумма token0 (WETH) [0]: ", decimals0)
    amount1 = ask_amount("Сумма token1 (CLAWD) [0]: ", decimals1)

    try:
        tick_range = resolve_range(
            preset, current_tick, pool_key.tick_spacing, custom_lower, custom_upper
        )
        liquidity = ensure_liquidity(
            liquidity_from_amounts(
                sqrt_price_x96, tick_range.tick_lower, tick_range.tick_upper, amount0, amount1
            ),
            amount0,
            amount1,
        )
    except V4LiquidityError as e:
        print(f"\nОшибка: {e}")
        return

    used = amounts_from_liquidity(sqrt_price_x96, tick_range.tick_lower, tick_range.tick_upper, liquidity)
    amount0_max = max_amount_with_slippage(used.amount0)
    amount1_max = max_amount_with_slippage(used.amount1)

    print("\n" + "=" * 70)
    print("РЕЗУЛЬТАТ")
    print("=" * 70)
    price_lower, price_upper = tick_range.price_bounds()
    print(f"Тики: {tick_range.tick_lower} / {tick_range.tick_upper} (ширина {tick_range.width})")
    print(f"Цены (raw token1/token0): {price_lower:.6g} - {price_upper:.6g}")
    print(f"Liquidity: {liquidity}")
    print(f"token0: {format_token_amount(used.amount0, decimals0)} "
          f"(max с {DEFAULT_SLIPPAGE_PERCENT}%: {amount0_max})")
    print(f"token1: {format_token_amount(used.amount1, decimals1)} "
          f"(max с {DEFAULT_SLIPPAGE_PERCENT}%: {amount1_max})")

    recipient = os.getenv("RECIPIENT")
    if not recipient:
        print("\nRECIPIENT не задан в .env, payload не собирается")
        return

    # Payload собирается офлайн, контракт нужен только для кодирования
    pm = V4PositionManager(Web3(), chain_id=BASE.chain_id, position_manager_address=BASE.position_manager)
    payload = pm.build_mint_payload(
        pool_key, tick_range, liquidity, amount0_max, amount1_max, recipient
    )
    print(f"\nunlockData ({len(payload)} bytes):")
    print("0x" + payload.hex())
    print("\nCalldata modifyLiquidities:")
    print(pm.encode_modify_liquidities(payload))


def main():
    logging.basicConfig(
        level=logging.DEBUG if os.getenv("DEBUG") else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )

    print("=" * 70)
    print("UNISWAP V4 LIQUIDITY TOOLKIT")
    print("=" * 70)
    print(f"Сеть: Base ({BASE.chain_id})")
    print(f"PoolManager: {BASE.pool_manager}, PositionManager: {BASE.position_manager}")

    while True:
        interactive_calculator()
        again = input("\nПосчитать ещё раз? (y/n): ")
        if again.lower() != "y":
            break


if __name__ == "__main__":
    main()
