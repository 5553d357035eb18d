"""
Tests for config.py module.

Covers dataclasses, data constants, and helper functions:
- ChainConfig, TokenConfig, PoolConfig dataclasses
- BASE chain configuration
- TOKENS_BASE, CLAWD_WETH_POOL, defaults
- get_token(), get_pool_config(), get_token_decimals()
"""

import pytest
from web3 import Web3

from config import (
    ChainConfig,
    TokenConfig,
    PoolConfig,
    BASE,
    TOKENS_BASE,
    CLAWD_WETH_POOL,
    POOLS,
    DEFAULT_SLIPPAGE_PERCENT,
    DEFAULT_DEADLINE_SECONDS,
    DEFAULT_RANGE_PRESET,
    get_token,
    get_pool_config,
    get_token_decimals,
)
from v4lp.contracts.v4 import PoolKey, get_v4_addresses
from v4lp.math.ranges import RangePreset


class TestDataclasses:

    def test_create_chain_config(self):
        cfg = ChainConfig(
            chain_id=999,
            pool_manager="0x" + "11" * 20,
            position_manager="0x" + "22" * 20,
            state_view="0x" + "33" * 20,
        )
        assert cfg.chain_id == 999
        assert cfg.state_view == "0x" + "33" * 20

    def test_create_token_config(self):
        tok = TokenConfig(address="0x" + "ab" * 20, symbol="TST", decimals=8)
        assert tok.decimals == 8

    def test_pool_config_default_hooks(self):
        pool = PoolConfig(name="X", token0="0x" + "11" * 20, token1="0x" + "22" * 20, fee=3000, tick_spacing=60)
        assert int(pool.hooks, 16) == 0


class TestChainConfigData:

    def test_base_chain_id(self):
        assert BASE.chain_id == 8453

    def test_addresses_match_v4_table(self):
        addresses = get_v4_addresses(BASE.chain_id)
        assert BASE.pool_manager.lower() == addresses.pool_manager.lower()
        assert BASE.position_manager.lower() == addresses.position_manager.lower()
        assert BASE.state_view.lower() == addresses.state_view.lower()


class TestTokensBase:

    def test_expected_tokens(self):
        assert set(TOKENS_BASE) == {"WETH", "CLAWD", "USDC"}

    def test_symbol_matches_key(self):
        for key, token in TOKENS_BASE.items():
            assert token.symbol == key

    def test_addresses_are_valid(self):
        for token in TOKENS_BASE.values():
            assert Web3.is_address(token.address)

    def test_usdc_has_6_decimals(self):
        assert TOKENS_BASE["USDC"].decimals == 6


class TestClawdWethPool:

    def test_parameters(self):
        assert CLAWD_WETH_POOL.fee == 10000
        assert CLAWD_WETH_POOL.tick_spacing == 200
        assert int(CLAWD_WETH_POOL.hooks, 16) == 0

    def test_weth_is_currency0(self):
        assert CLAWD_WETH_POOL.token0 == TOKENS_BASE["WETH"].address
        assert int(CLAWD_WETH_POOL.token0, 16) < int(CLAWD_WETH_POOL.token1, 16)

    def test_builds_valid_pool_key(self):
        key = PoolKey(
            currency0=CLAWD_WETH_POOL.token0,
            currency1=CLAWD_WETH_POOL.token1,
            fee=CLAWD_WETH_POOL.fee,
            tick_spacing=CLAWD_WETH_POOL.tick_spacing,
            hooks=CLAWD_WETH_POOL.hooks,
        )
        assert len(key.pool_id) == 32

    def test_registered(self):
        assert POOLS["CLAWD/WETH"] is CLAWD_WETH_POOL


class TestDefaults:

    def test_slippage(self):
        assert DEFAULT_SLIPPAGE_PERCENT == 5.0

    def test_deadline(self):
        assert DEFAULT_DEADLINE_SECONDS == 1800

    def test_range_preset_is_valid(self):
        assert RangePreset(DEFAULT_RANGE_PRESET) == RangePreset.WIDE


class TestHelpers:

    def test_get_token(self):
        assert get_token("CLAWD").decimals == 18

    def test_get_token_unknown(self):
        with pytest.raises(ValueError):
            get_token("DOGE")

    def test_get_pool_config(self):
        assert get_pool_config("CLAWD/WETH") is CLAWD_WETH_POOL

    def test_get_pool_config_unknown(self):
        with pytest.raises(ValueError, match="Unknown pool"):
            get_pool_config("PEPE/WETH")

    def test_get_token_decimals(self):
        assert get_token_decimals(TOKENS_BASE["USDC"].address.lower()) == 6
        assert get_token_decimals("0x" + "77" * 20) == 18
