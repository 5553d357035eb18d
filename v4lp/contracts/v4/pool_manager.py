"""
V4 PoolKey and pool state reader

PoolKey - неизменяемая идентичность пула, передаётся явно в каждую функцию.
V4PoolManager читает состояние пула через StateView.
"""

import logging
from dataclasses import dataclass
from typing import Optional
from web3 import Web3
from eth_abi import encode

from ...exceptions import InvalidConfiguration
from ...math.ticks import sqrt_price_x96_to_price
from .abis import V4_STATE_VIEW_ABI
from .constants import (
    ZERO_ADDRESS,
    MAX_V4_FEE,
    DYNAMIC_FEE_FLAG,
    get_v4_addresses,
    suggest_tick_spacing,
)

logger = logging.getLogger(__name__)

MAX_TICK_SPACING = 32767
POOL_KEY_ABI_TYPES = ['address', 'address', 'uint24', 'int24', 'address']


@dataclass(frozen=True)
class PoolKey:
    """
    V4 Pool Key - uniquely identifies a pool.

    Два PoolKey описывают один пул тогда и только тогда, когда совпадают
    все пять полей. Адреса приводятся к checksum при создании.
    """
    currency0: str  # Token address (lower address)
    currency1: str  # Token address (higher address)
    fee: int        # Fee in hundredths of a bip (0-1,000,000)
    tick_spacing: int
    hooks: str = ZERO_ADDRESS

    def __post_init__(self):
        for name in ('currency0', 'currency1', 'hooks'):
            value = getattr(self, name)
            if not Web3.is_address(value):
                raise InvalidConfiguration(f"{name} is not a valid address: {value!r}")
            object.__setattr__(self, name, Web3.to_checksum_address(value))

        if int(self.currency0, 16) >= int(self.currency1, 16):
            raise InvalidConfiguration(
                f"currency0 must be < currency1: {self.currency0} >= {self.currency1}. "
                "Use PoolKey.from_tokens() to sort automatically."
            )
        if not 0 < self.tick_spacing <= MAX_TICK_SPACING:
            raise InvalidConfiguration(
                f"tick_spacing must be in [1, {MAX_TICK_SPACING}], got {self.tick_spacing}"
            )
        if self.fee != DYNAMIC_FEE_FLAG and not 0 <= self.fee <= MAX_V4_FEE:
            raise InvalidConfiguration(f"fee must be in [0, {MAX_V4_FEE}], got {self.fee}")

    def to_tuple(self) -> tuple:
        """Convert to tuple for contract calls."""
        return (self.currency0, self.currency1, self.fee, self.tick_spacing, self.hooks)

    @property
    def pool_id(self) -> bytes:
        """Pool ID = keccak256(abi.encode(PoolKey))."""
        return bytes(Web3.keccak(encode(POOL_KEY_ABI_TYPES, list(self.to_tuple()))))

    @classmethod
    def from_tokens(
        cls,
        token0: str,
        token1: str,
        fee: int,
        tick_spacing: int = None,
        hooks: str = None
    ) -> 'PoolKey':
        """
        Create PoolKey from token addresses.

        Automatically sorts tokens by address (required for V4).
        """
        addr0 = Web3.to_checksum_address(token0)
        addr1 = Web3.to_checksum_address(token1)

        # Ensure correct order (lower address first)
        if int(addr0, 16) > int(addr1, 16):
            addr0, addr1 = addr1, addr0

        if tick_spacing is None:
            tick_spacing = suggest_tick_spacing(fee / 10000)

        return cls(
            currency0=addr0,
            currency1=addr1,
            fee=fee,
            tick_spacing=tick_spacing,
            hooks=hooks or ZERO_ADDRESS
        )


@dataclass
class V4PoolState:
    """V4 Pool state information."""
    pool_id: bytes
    sqrt_price_x96: int
    tick: int
    liquidity: int
    protocol_fee: int
    lp_fee: int
    initialized: bool


class V4PoolManager:
    """
    Чтение состояния V4 пула через StateView.

    Значения не кэшируются: перед каждым расчётом liquidity нужно читать заново.
    """

    def __init__(
        self,
        w3: Web3,
        chain_id: int = 8453,
        state_view_address: str = None
    ):
        self.w3 = w3
        self.chain_id = chain_id

        if state_view_address is None:
            addresses = get_v4_addresses(chain_id)
            if not addresses or not addresses.state_view:
                raise InvalidConfiguration(f"No V4 StateView address found for chain {chain_id}")
            state_view_address = addresses.state_view

        self.state_view_address = Web3.to_checksum_address(state_view_address)
        self.contract = w3.eth.contract(
            address=self.state_view_address,
            abi=V4_STATE_VIEW_ABI
        )

    def get_pool_state(self, pool_key: PoolKey) -> V4PoolState:
        """Get pool state for a pool key."""
        return self.get_pool_state_by_id(pool_key.pool_id)

    def get_pool_state_by_id(self, pool_id: bytes) -> V4PoolState:
        """
        Get pool state by pool ID directly.

        Args:
            pool_id: The pool ID (bytes32)

        Returns:
            V4PoolState with current pool state
        """
        logger.debug(f"[V4] Pool ID: 0x{pool_id.hex()}")
        try:
            slot0 = self.contract.functions.getSlot0(pool_id).call()
            liquidity = self.contract.functions.getLiquidity(pool_id).call()
        except Exception as e:
            logger.error(f"[V4] StateView query failed for pool 0x{pool_id.hex()}: {e}")
            raise

        sqrt_price_x96, tick, protocol_fee, lp_fee = slot0[0], slot0[1], slot0[2], slot0[3]
        logger.debug(f"[V4] slot0: sqrtPriceX96={sqrt_price_x96}, tick={tick}, liquidity={liquidity}")

        return V4PoolState(
            pool_id=pool_id,
            sqrt_price_x96=sqrt_price_x96,
            tick=tick,
            liquidity=liquidity,
            protocol_fee=protocol_fee,
            lp_fee=lp_fee,
            initialized=sqrt_price_x96 > 0
        )

    def is_pool_initialized(self, pool_key: PoolKey) -> bool:
        """Check if a pool is initialized."""
        return self.get_pool_state(pool_key).initialized

    def get_current_price(
        self,
        pool_key: PoolKey,
        decimals0: int = 18,
        decimals1: int = 18
    ) -> Optional[float]:
        """
        Get current pool price in human-readable format.

        Returns:
            Price or None if pool not initialized
        """
        state = self.get_pool_state(pool_key)
        if not state.initialized:
            return None
        return sqrt_price_x96_to_price(state.sqrt_price_x96, decimals0, decimals1)
