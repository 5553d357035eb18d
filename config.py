"""
Configuration for Uniswap V4 Liquidity Toolkit

Конфигурация сетей, токенов и пулов Uniswap V4.
Основной пул по умолчанию - CLAWD/WETH 1% на Base.
"""

from dataclasses import dataclass
from typing import Dict


@dataclass
class ChainConfig:
    """Сеть и адреса контрактов V4 (RPC задается через RPC_URL в .env)."""
    chain_id: int
    pool_manager: str
    position_manager: str
    state_view: str


@dataclass
class TokenConfig:
    """Конфигурация токена."""
    address: str
    symbol: str
    decimals: int


@dataclass
class PoolConfig:
    """Параметры V4 пула (поля PoolKey + символы для отображения)."""
    name: str
    token0: str  # currency0 (меньший адрес)
    token1: str  # currency1 (больший адрес)
    fee: int     # в сотых долях bip: 10000 = 1%
    tick_spacing: int
    hooks: str = "0x0000000000000000000000000000000000000000"


# ============================================================
# CHAIN CONFIGURATIONS
# ============================================================

# Base Mainnet
BASE = ChainConfig(
    chain_id=8453,
    pool_manager="0x498581ff718922c3f8e6a244956af099b2652b2b",
    position_manager="0x7c5f5a4bbd8fd63184577525326123b519429bdc",
    state_view="0xa3c0c9b65bad0b08107aa264b0f3db444b867a71",
)

# ============================================================
# TOKEN CONFIGURATIONS (Base)
# ============================================================

TOKENS_BASE: Dict[str, TokenConfig] = {
    "WETH": TokenConfig(
        address="0x4200000000000000000000000000000000000006",
        symbol="WETH",
        decimals=18
    ),
    "CLAWD": TokenConfig(
        address="0x9f86dB9fc6f7c9408e8Fda3Ff8ce4e78ac7a6b07",
        symbol="CLAWD",
        decimals=18
    ),
    "USDC": TokenConfig(
        address="0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913",
        symbol="USDC",
        decimals=6  # USDC on Base has 6 decimals
    ),
}

# ============================================================
# POOL CONFIGURATIONS
# ============================================================

# CLAWD > WETH по адресу, поэтому currency0 = WETH, currency1 = CLAWD
CLAWD_WETH_POOL = PoolConfig(
    name="CLAWD/WETH 1%",
    token0=TOKENS_BASE["WETH"].address,
    token1=TOKENS_BASE["CLAWD"].address,
    fee=10000,
    tick_spacing=200,
)

POOLS: Dict[str, PoolConfig] = {
    "CLAWD/WETH": CLAWD_WETH_POOL,
}

# ============================================================
# DEFAULT SETTINGS
# ============================================================

DEFAULT_SLIPPAGE_PERCENT = 5.0   # буфер для amount0Max/amount1Max и approve
DEFAULT_DEADLINE_SECONDS = 1800  # 30 минут
DEFAULT_RANGE_PRESET = "wide"


# ============================================================
# HELPER FUNCTIONS
# ============================================================

def get_token(symbol: str) -> TokenConfig:
    """Получение токена Base по символу."""
    if symbol not in TOKENS_BASE:
        raise ValueError(f"Unknown token: {symbol}")
    return TOKENS_BASE[symbol]


def get_pool_config(name: str) -> PoolConfig:
    """Получение пула по имени ("CLAWD/WETH")."""
    if name not in POOLS:
        raise ValueError(f"Unknown pool: {name}. Known pools: {sorted(POOLS)}")
    return POOLS[name]


def get_token_decimals(address: str, default: int = 18) -> int:
    """Decimals известного токена по адресу (без RPC)."""
    for token in TOKENS_BASE.values():
        if token.address.lower() == address.lower():
            return token.decimals
    return default
