"""
Shared fixtures for all tests.
"""

import pytest
from unittest.mock import MagicMock

from v4lp.contracts.v4.pool_manager import PoolKey


class MockWeb3:
    """Переиспользуемый мок Web3 для тестов (без RPC)."""

    def __init__(self, chain_id: int = 8453):
        self.eth = MagicMock()
        self.eth.chain_id = chain_id
        self.eth.block_number = 20_000_000
        self.eth.contract = MagicMock()


@pytest.fixture
def mock_w3():
    """Мок Web3 instance."""
    return MockWeb3()


# Тестовые адреса (отсортированы: TOKEN_A < TOKEN_B по числовому значению)
TOKEN_A = "0x1111111111111111111111111111111111111111"
TOKEN_B = "0x9999999999999999999999999999999999999999"
HOOKS_ZERO = "0x0000000000000000000000000000000000000000"
WALLET_ADDR = "0x1234567890123456789012345678901234567890"

WETH_BASE = "0x4200000000000000000000000000000000000006"
CLAWD_BASE = "0x9f86dB9fc6f7c9408e8Fda3Ff8ce4e78ac7a6b07"
USDC_BASE = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"


def make_pool_key(
    currency0=TOKEN_A,
    currency1=TOKEN_B,
    fee=3000,
    tick_spacing=60,
    hooks=HOOKS_ZERO,
):
    """Хелпер: создать PoolKey с дефолтными значениями."""
    return PoolKey(
        currency0=currency0,
        currency1=currency1,
        fee=fee,
        tick_spacing=tick_spacing,
        hooks=hooks,
    )


@pytest.fixture
def pool_key():
    """Тестовый пул 0.3% / spacing 60."""
    return make_pool_key()


@pytest.fixture
def clawd_weth_key():
    """CLAWD/WETH 1% на Base."""
    return make_pool_key(currency0=WETH_BASE, currency1=CLAWD_BASE, fee=10000, tick_spacing=200)
