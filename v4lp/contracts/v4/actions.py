"""
V4 PositionManager action encoding

modifyLiquidities(unlockData, deadline) принимает:
    unlockData = abi.encode(bytes actions, bytes[] params)
где
- actions: packed bytes, по одному байту кода на каждое действие
- params: ABI-encoded параметры каждого действия, в том же порядке

Порядок действий = порядок исполнения в контракте, поэтому он
сохраняется как есть. Схема параметров для каждого кода фиксирована.
"""

import logging
from enum import IntEnum
from typing import Iterable, List, NamedTuple, Sequence, Tuple, Union
from eth_abi import encode, decode
from eth_abi.exceptions import DecodingError, EncodingError

from ...exceptions import ProtocolEncodingError, UnknownActionTag
from .constants import MAX_UINT256

logger = logging.getLogger(__name__)


# Коды совпадают с Actions.sol задеплоенного PositionManager; другая
# нумерация даст на контракте другое действие.
class V4Actions(IntEnum):
    """V4 Position Manager action codes (Uniswap V4 periphery Actions.sol)."""
    # Liquidity modification
    INCREASE_LIQUIDITY = 0x00
    DECREASE_LIQUIDITY = 0x01
    MINT_POSITION = 0x02
    BURN_POSITION = 0x03

    # Settlements
    SETTLE_PAIR = 0x0d
    TAKE_PAIR = 0x11

    # Closing
    CLOSE_CURRENCY = 0x12
    CLEAR_OR_TAKE = 0x13
    SWEEP = 0x14


POOL_KEY_TYPE = '(address,address,uint24,int24,address)'

# Схема параметров: порядок и ширина полей должны совпадать с контрактом
ACTION_PARAM_TYPES = {
    V4Actions.MINT_POSITION: [
        POOL_KEY_TYPE,  # poolKey
        'int24',        # tickLower
        'int24',        # tickUpper
        'uint256',      # liquidity
        'uint128',      # amount0Max
        'uint128',      # amount1Max
        'address',      # owner
        'bytes',        # hookData
    ],
    V4Actions.INCREASE_LIQUIDITY: ['uint256', 'uint256', 'uint128', 'uint128', 'bytes'],
    V4Actions.DECREASE_LIQUIDITY: ['uint256', 'uint256', 'uint128', 'uint128', 'bytes'],
    V4Actions.BURN_POSITION: ['uint256', 'uint128', 'uint128', 'bytes'],
    V4Actions.SETTLE_PAIR: ['address', 'address'],
    V4Actions.TAKE_PAIR: ['address', 'address', 'address'],
    V4Actions.CLOSE_CURRENCY: ['address'],
    V4Actions.CLEAR_OR_TAKE: ['address', 'uint256'],  # currency, amountMax
    V4Actions.SWEEP: ['address', 'address'],
}


class Action(NamedTuple):
    """Одно действие: код + закодированные параметры."""
    tag: V4Actions
    params: bytes


def to_action_tag(tag: Union[V4Actions, int, str]) -> V4Actions:
    """
    Привести код действия к V4Actions.

    Принимает V4Actions, int (0x02) или имя ("MINT_POSITION", "mint-position").
    Всё остальное - UnknownActionTag.
    """
    if isinstance(tag, V4Actions):
        return tag
    if isinstance(tag, str):
        try:
            return V4Actions[tag.strip().upper().replace('-', '_')]
        except KeyError:
            raise UnknownActionTag(tag) from None
    if isinstance(tag, bool) or not isinstance(tag, int):
        raise UnknownActionTag(tag)
    try:
        return V4Actions(tag)
    except ValueError:
        raise UnknownActionTag(tag) from None


def _encode_params(tag: V4Actions, values: list) -> bytes:
    try:
        return encode(ACTION_PARAM_TYPES[tag], values)
    except EncodingError as e:
        raise ProtocolEncodingError(f"Cannot encode {tag.name} params: {e}") from e


# ============================================================
# PER-ACTION PARAMS
# ============================================================

def encode_mint_position_params(
    pool_key,
    tick_lower: int,
    tick_upper: int,
    liquidity: int,
    amount0_max: int,
    amount1_max: int,
    owner: str,
    hook_data: bytes = b''
) -> bytes:
    """
    MINT_POSITION params.

    pool_key: PoolKey или готовый tuple (currency0, currency1, fee, tickSpacing, hooks)
    """
    key_tuple = pool_key.to_tuple() if hasattr(pool_key, 'to_tuple') else tuple(pool_key)

    logger.debug(f"[V4 MINT] PoolKey: {key_tuple[0]}/{key_tuple[1]} fee={key_tuple[2]} ts={key_tuple[3]}")
    logger.debug(f"[V4 MINT] tick_lower={tick_lower}, tick_upper={tick_upper}, liquidity={liquidity}")
    logger.debug(f"[V4 MINT] amount0_max={amount0_max}, amount1_max={amount1_max}, owner={owner}")

    return _encode_params(
        V4Actions.MINT_POSITION,
        [key_tuple, tick_lower, tick_upper, liquidity, amount0_max, amount1_max, owner, hook_data]
    )


def encode_increase_liquidity_params(
    token_id: int,
    liquidity: int,
    amount0_max: int,
    amount1_max: int,
    hook_data: bytes = b''
) -> bytes:
    """INCREASE_LIQUIDITY params."""
    return _encode_params(
        V4Actions.INCREASE_LIQUIDITY,
        [token_id, liquidity, amount0_max, amount1_max, hook_data]
    )


def encode_decrease_liquidity_params(
    token_id: int,
    liquidity: int,
    amount0_min: int,
    amount1_min: int,
    hook_data: bytes = b''
) -> bytes:
    """DECREASE_LIQUIDITY params."""
    return _encode_params(
        V4Actions.DECREASE_LIQUIDITY,
        [token_id, liquidity, amount0_min, amount1_min, hook_data]
    )


def encode_burn_position_params(
    token_id: int,
    amount0_min: int,
    amount1_min: int,
    hook_data: bytes = b''
) -> bytes:
    """BURN_POSITION params."""
    return _encode_params(
        V4Actions.BURN_POSITION,
        [token_id, amount0_min, amount1_min, hook_data]
    )


def encode_settle_pair_params(currency0: str, currency1: str) -> bytes:
    return _encode_params(V4Actions.SETTLE_PAIR, [currency0, currency1])


def encode_take_pair_params(currency0: str, currency1: str, recipient: str) -> bytes:
    return _encode_params(V4Actions.TAKE_PAIR, [currency0, currency1, recipient])


def encode_close_currency_params(currency: str) -> bytes:
    return _encode_params(V4Actions.CLOSE_CURRENCY, [currency])


def encode_clear_or_take_params(currency: str, amount_max: int) -> bytes:
    return _encode_params(V4Actions.CLEAR_OR_TAKE, [currency, amount_max])


def encode_sweep_params(currency: str, recipient: str) -> bytes:
    return _encode_params(V4Actions.SWEEP, [currency, recipient])


# ============================================================
# ACTION STREAM
# ============================================================

def validate_action_params(tag: V4Actions, params: bytes) -> bytes:
    """
    Проверить, что params - это ровно схема данного кода.

    Параметры декодируются и кодируются обратно: любые лишние или
    недостающие байты дают ProtocolEncodingError.
    """
    if not isinstance(params, (bytes, bytearray)):
        raise ProtocolEncodingError(f"{tag.name} params must be bytes, got {type(params).__name__}")

    types = ACTION_PARAM_TYPES[tag]
    params = bytes(params)
    try:
        values = decode(types, params)
    except (DecodingError, ValueError) as e:
        raise ProtocolEncodingError(f"{tag.name} params do not match schema {types}: {e}") from e

    if encode(types, list(values)) != params:
        raise ProtocolEncodingError(
            f"{tag.name} params length mismatch: got {len(params)} bytes, "
            f"schema {types} encodes to a different layout"
        )
    return params


def encode_action(tag: Union[V4Actions, int, str], params: bytes) -> Action:
    """Проверить код и params, вернуть пару (tag, params)."""
    action_tag = to_action_tag(tag)
    return Action(action_tag, validate_action_params(action_tag, params))


def encode_unlock_data(tags: Sequence[Union[V4Actions, int, str]], params: Sequence[bytes]) -> bytes:
    """
    abi.encode(bytes actions, bytes[] params) из двух параллельных списков.

    Число кодов и число params обязано совпадать.
    """
    tags = list(tags)
    params = list(params)
    if len(tags) != len(params):
        raise ProtocolEncodingError(
            f"Action count mismatch: {len(tags)} tags vs {len(params)} params"
        )
    return encode_action_stream(zip(tags, params))


def encode_action_stream(actions: Iterable[Tuple[Union[V4Actions, int, str], bytes]]) -> bytes:
    """
    Закодировать последовательность (tag, params) в unlockData.

    Returns:
        abi.encode(bytes, bytes[]): один байт на действие + массив params
    """
    validated = [encode_action(tag, params) for tag, params in actions]
    if not validated:
        raise ProtocolEncodingError("Action stream is empty")

    action_ids = bytes(a.tag for a in validated)
    params_list = [a.params for a in validated]

    logger.debug(f"[V4] Encoding {len(validated)} actions: {[a.tag.name for a in validated]}")
    return encode(['bytes', 'bytes[]'], [action_ids, params_list])


def decode_action_stream(unlock_data: bytes) -> List[Action]:
    """
    Обратная операция к encode_action_stream.

    Raises:
        ProtocolEncodingError: данные не декодируются или число кодов != числу params
        UnknownActionTag: неизвестный код действия
    """
    try:
        action_ids, params_list = decode(['bytes', 'bytes[]'], bytes(unlock_data))
    except (DecodingError, ValueError) as e:
        raise ProtocolEncodingError(f"Cannot decode action stream: {e}") from e

    if len(action_ids) != len(params_list):
        raise ProtocolEncodingError(
            f"Action count mismatch: {len(action_ids)} tags vs {len(params_list)} params"
        )
    return [encode_action(tag, params) for tag, params in zip(action_ids, params_list)]


class ActionStreamBuilder:
    """
    Упорядоченный список действий для одного вызова modifyLiquidities.

    Usage:
        builder = ActionStreamBuilder()
        builder.mint_position(pool_key, -600, 600, liquidity, a0_max, a1_max, owner)
        builder.settle_pair(pool_key.currency0, pool_key.currency1)
        unlock_data = builder.encode()
    """

    def __init__(self):
        self._actions: List[Action] = []

    def __len__(self) -> int:
        return len(self._actions)

    @property
    def actions(self) -> List[Action]:
        return list(self._actions)

    @property
    def tags(self) -> bytes:
        return bytes(a.tag for a in self._actions)

    def add(self, tag: Union[V4Actions, int, str], params: bytes) -> 'ActionStreamBuilder':
        """Добавить уже закодированные params (проверяются сразу)."""
        self._actions.append(encode_action(tag, params))
        return self

    def mint_position(
        self,
        pool_key,
        tick_lower: int,
        tick_upper: int,
        liquidity: int,
        amount0_max: int,
        amount1_max: int,
        owner: str,
        hook_data: bytes = b''
    ) -> 'ActionStreamBuilder':
        return self.add(V4Actions.MINT_POSITION, encode_mint_position_params(
            pool_key, tick_lower, tick_upper, liquidity, amount0_max, amount1_max, owner, hook_data
        ))

    def increase_liquidity(
        self,
        token_id: int,
        liquidity: int,
        amount0_max: int,
        amount1_max: int,
        hook_data: bytes = b''
    ) -> 'ActionStreamBuilder':
        return self.add(V4Actions.INCREASE_LIQUIDITY, encode_increase_liquidity_params(
            token_id, liquidity, amount0_max, amount1_max, hook_data
        ))

    def decrease_liquidity(
        self,
        token_id: int,
        liquidity: int,
        amount0_min: int = 0,
        amount1_min: int = 0,
        hook_data: bytes = b''
    ) -> 'ActionStreamBuilder':
        return self.add(V4Actions.DECREASE_LIQUIDITY, encode_decrease_liquidity_params(
            token_id, liquidity, amount0_min, amount1_min, hook_data
        ))

    def burn_position(
        self,
        token_id: int,
        amount0_min: int = 0,
        amount1_min: int = 0,
        hook_data: bytes = b''
    ) -> 'ActionStreamBuilder':
        return self.add(V4Actions.BURN_POSITION, encode_burn_position_params(
            token_id, amount0_min, amount1_min, hook_data
        ))

    def settle_pair(self, currency0: str, currency1: str) -> 'ActionStreamBuilder':
        return self.add(V4Actions.SETTLE_PAIR, encode_settle_pair_params(currency0, currency1))

    def take_pair(self, currency0: str, currency1: str, recipient: str) -> 'ActionStreamBuilder':
        return self.add(V4Actions.TAKE_PAIR, encode_take_pair_params(currency0, currency1, recipient))

    def close_currency(self, currency: str) -> 'ActionStreamBuilder':
        return self.add(V4Actions.CLOSE_CURRENCY, encode_close_currency_params(currency))

    def clear_or_take(self, currency: str, amount_max: int) -> 'ActionStreamBuilder':
        return self.add(V4Actions.CLEAR_OR_TAKE, encode_clear_or_take_params(currency, amount_max))

    def sweep(self, currency: str, recipient: str) -> 'ActionStreamBuilder':
        return self.add(V4Actions.SWEEP, encode_sweep_params(currency, recipient))

    def encode(self) -> bytes:
        """unlockData для modifyLiquidities."""
        return encode_action_stream(self._actions)


# ============================================================
# POSITION INFO
# ============================================================

class PositionInfo(NamedTuple):
    """Распакованный PositionInfo."""
    tick_lower: int
    tick_upper: int
    has_subscriber: bool


class PositionInfoLayout(NamedTuple):
    """Битовая раскладка PositionInfo (смещения от младшего бита)."""
    subscriber_bits: int
    tick_lower_offset: int
    tick_upper_offset: int
    pool_id_offset: int


# bit 0 = hasSubscriber, [1:25) tickLower, [25:49) tickUpper, выше - poolId
PACKED_LAYOUT = PositionInfoLayout(
    subscriber_bits=1, tick_lower_offset=1, tick_upper_offset=25, pool_id_offset=49
)
# v4-periphery PositionInfoLibrary: байт флагов, int24, int24, bytes25 poolId
PERIPHERY_LAYOUT = PositionInfoLayout(
    subscriber_bits=8, tick_lower_offset=8, tick_upper_offset=32, pool_id_offset=56
)

_INT24_MASK = 0xFFFFFF
_INT24_SIGN = 0x800000


def _sign_extend_int24(raw: int) -> int:
    if raw >= _INT24_SIGN:
        raw -= 0x1000000
    return raw


def _to_uint24(tick: int) -> int:
    if not -_INT24_SIGN <= tick < _INT24_SIGN:
        raise ProtocolEncodingError(f"Tick {tick} does not fit into int24")
    return tick & _INT24_MASK


def decode_position_info(
    info: Union[int, bytes],
    layout: PositionInfoLayout = PACKED_LAYOUT
) -> PositionInfo:
    """
    Распаковать PositionInfo в (tick_lower, tick_upper, has_subscriber).

    Тики - 24-битные числа в дополнительном коде: значение >= 2^23
    уменьшается на 2^24. Усечённый poolId в старших битах игнорируется.

    Args:
        info: uint256 или 32 байта big-endian
        layout: PACKED_LAYOUT (по умолчанию) или PERIPHERY_LAYOUT
    """
    if isinstance(info, (bytes, bytearray)):
        if len(info) != 32:
            raise ProtocolEncodingError(f"PositionInfo must be 32 bytes, got {len(info)}")
        info = int.from_bytes(info, 'big')

    if isinstance(info, bool) or not isinstance(info, int):
        raise ProtocolEncodingError(f"Unexpected PositionInfo type: {type(info).__name__}")
    if not 0 <= info <= MAX_UINT256:
        raise ProtocolEncodingError(f"PositionInfo is not a uint256: {info}")

    has_subscriber = (info & ((1 << layout.subscriber_bits) - 1)) != 0
    tick_lower = _sign_extend_int24((info >> layout.tick_lower_offset) & _INT24_MASK)
    tick_upper = _sign_extend_int24((info >> layout.tick_upper_offset) & _INT24_MASK)

    logger.debug(f"[V4] PositionInfo 0x{info:064x}: ticks={tick_lower}/{tick_upper}, subscriber={has_subscriber}")
    return PositionInfo(tick_lower, tick_upper, has_subscriber)


def encode_position_info(
    tick_lower: int,
    tick_upper: int,
    has_subscriber: bool = False,
    pool_id: bytes = b'',
    layout: PositionInfoLayout = PACKED_LAYOUT
) -> int:
    """
    Упаковать PositionInfo (обратная к decode_position_info).

    pool_id усекается до старших (256 - pool_id_offset) бит.
    """
    word = (1 if has_subscriber else 0)
    word |= _to_uint24(tick_lower) << layout.tick_lower_offset
    word |= _to_uint24(tick_upper) << layout.tick_upper_offset

    if pool_id:
        if len(pool_id) != 32:
            raise ProtocolEncodingError(f"pool_id must be 32 bytes, got {len(pool_id)}")
        width = 256 - layout.pool_id_offset
        word |= (int.from_bytes(pool_id, 'big') >> (256 - width)) << layout.pool_id_offset

    return word
