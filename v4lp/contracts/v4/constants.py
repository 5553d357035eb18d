"""
V4 Constants and Contract Addresses
"""

from dataclasses import dataclass
from typing import Optional

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

MAX_UINT256 = 2 ** 256 - 1


@dataclass(frozen=True)
class V4Addresses:
    """V4 contract addresses for a specific chain."""
    pool_manager: str
    position_manager: str
    state_view: Optional[str] = None  # StateView for reading pool state


# Uniswap V4 Addresses
UNISWAP_V4_ADDRESSES = {
    # Base Mainnet (8453)
    8453: V4Addresses(
        pool_manager="0x498581ff718922c3f8e6a244956af099b2652b2b",
        position_manager="0x7c5f5a4bbd8fd63184577525326123b519429bdc",
        state_view="0xa3c0c9b65bad0b08107aa264b0f3db444b867a71",
    ),
    # Ethereum Mainnet (1)
    1: V4Addresses(
        pool_manager="0x000000000004444c5dc75cb358380d2e3de08a90",
        position_manager="0xbd216513d74c8cf14cf4747e6aaa6420ff64ee9e",
        state_view="0x7ffe42c4a5deea5b0fec41c94c136cf115597227",
    ),
}


def get_v4_addresses(chain_id: int) -> Optional[V4Addresses]:
    """Get Uniswap V4 addresses for a specific chain."""
    return UNISWAP_V4_ADDRESSES.get(chain_id)


# V4 Fee Constants
# In V4, fee is specified in hundredths of a bip (1/1,000,000)
# So 3000 = 0.30%, 10000 = 1.00%
MAX_V4_FEE = 1_000_000  # 100%
DYNAMIC_FEE_FLAG = 0x800000


def suggest_tick_spacing(fee_percent: float) -> int:
    """
    Calculate tick spacing based on fee using Uniswap V4 formula.

    Formula: tick_spacing = fee_percent × 200

    Example: 0.3% fee → tick_spacing = 60
             1.0% fee → tick_spacing = 200

    Minimum tick_spacing is 1.
    """
    tick_spacing = round(fee_percent * 200)
    return max(1, tick_spacing)
