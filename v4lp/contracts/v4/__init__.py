"""
Uniswap V4 Contracts Module

V4 uses singleton PoolManager and action-based PositionManager.
"""

from .pool_manager import PoolKey, V4PoolManager, V4PoolState
from .position_manager import V4PositionManager, V4Position
from .actions import (
    V4Actions,
    ActionStreamBuilder,
    PositionInfo,
    encode_action,
    encode_action_stream,
    decode_action_stream,
    decode_position_info,
)
from .constants import UNISWAP_V4_ADDRESSES, get_v4_addresses

__all__ = [
    'PoolKey',
    'V4PoolManager',
    'V4PoolState',
    'V4PositionManager',
    'V4Position',
    'V4Actions',
    'ActionStreamBuilder',
    'PositionInfo',
    'encode_action',
    'encode_action_stream',
    'decode_action_stream',
    'decode_position_info',
    'UNISWAP_V4_ADDRESSES',
    'get_v4_addresses',
]
