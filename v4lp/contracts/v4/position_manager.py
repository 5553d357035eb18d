"""
V4 PositionManager Wrapper

Чтение позиций и сборка payload для modifyLiquidities.
Транзакции возвращаются неподписанными: подпись и отправка - на стороне
вызывающего кода (кошелька).
"""

import logging
from dataclasses import dataclass
from typing import List, Optional
from web3 import Web3

from ...exceptions import InsufficientLiquidity, InvalidConfiguration, V4LiquidityError
from ...math.liquidity import amounts_from_liquidity
from ...math.ranges import TickRange
from ...utils import compute_deadline
from .abis import V4_POSITION_MANAGER_ABI
from .actions import ActionStreamBuilder, PERIPHERY_LAYOUT, PositionInfoLayout, decode_position_info
from .constants import get_v4_addresses
from .pool_manager import PoolKey

logger = logging.getLogger(__name__)


@dataclass
class V4Position:
    """V4 Position information (собирается заново при каждом запросе)."""
    token_id: int
    pool_key: PoolKey
    tick_range: TickRange
    liquidity: int
    has_subscriber: bool = False
    amount0: int = 0
    amount1: int = 0

    @property
    def tick_lower(self) -> int:
        return self.tick_range.tick_lower

    @property
    def tick_upper(self) -> int:
        return self.tick_range.tick_upper


class V4PositionManager:
    """
    V4 PositionManager wrapper.

    V4 uses action-based encoding for batching operations.

    PositionInfo из getPoolAndPositionInfo читается в раскладке
    задеплоенного PositionManager (PERIPHERY_LAYOUT).
    """

    def __init__(
        self,
        w3: Web3,
        chain_id: int = 8453,
        position_manager_address: str = None,
        info_layout: PositionInfoLayout = PERIPHERY_LAYOUT
    ):
        self.w3 = w3
        self.chain_id = chain_id
        self.info_layout = info_layout

        if position_manager_address:
            self.position_manager_address = Web3.to_checksum_address(position_manager_address)
        else:
            addresses = get_v4_addresses(chain_id)
            if not addresses:
                raise InvalidConfiguration(f"No V4 addresses found for chain {chain_id}")
            self.position_manager_address = Web3.to_checksum_address(addresses.position_manager)

        self.contract = w3.eth.contract(
            address=self.position_manager_address,
            abi=V4_POSITION_MANAGER_ABI
        )

    # ============================================================
    # READS
    # ============================================================

    def get_position(self, token_id: int, sqrt_price_x96: Optional[int] = None) -> V4Position:
        """
        Get position information.

        Args:
            token_id: NFT token ID
            sqrt_price_x96: Текущая цена пула; если задана, считаются amount0/amount1

        Returns:
            V4Position with position details
        """
        try:
            pool_key_tuple, info = self.contract.functions.getPoolAndPositionInfo(token_id).call()
            liquidity = self.contract.functions.getPositionLiquidity(token_id).call()
        except Exception as e:
            logger.error(f"[V4] Failed to read position {token_id}: {e}")
            raise

        position_info = decode_position_info(info, self.info_layout)
        pool_key = PoolKey(
            currency0=pool_key_tuple[0],
            currency1=pool_key_tuple[1],
            fee=pool_key_tuple[2],
            tick_spacing=pool_key_tuple[3],
            hooks=pool_key_tuple[4]
        )
        tick_range = TickRange(position_info.tick_lower, position_info.tick_upper)

        amount0 = amount1 = 0
        if sqrt_price_x96:
            amounts = amounts_from_liquidity(
                sqrt_price_x96, tick_range.tick_lower, tick_range.tick_upper, liquidity
            )
            amount0, amount1 = amounts.amount0, amounts.amount1

        logger.debug(f"[V4] Position {token_id}: {pool_key.currency0}/{pool_key.currency1}")
        logger.debug(f"[V4] Ticks: {tick_range.tick_lower}/{tick_range.tick_upper}, Liquidity: {liquidity}")

        return V4Position(
            token_id=token_id,
            pool_key=pool_key,
            tick_range=tick_range,
            liquidity=liquidity,
            has_subscriber=position_info.has_subscriber,
            amount0=amount0,
            amount1=amount1
        )

    def get_owned_token_ids(self, owner: str) -> List[int]:
        """Token IDs позиций владельца (ERC721Enumerable)."""
        owner = Web3.to_checksum_address(owner)
        balance = self.contract.functions.balanceOf(owner).call()
        token_ids = [
            self.contract.functions.tokenOfOwnerByIndex(owner, index).call()
            for index in range(balance)
        ]
        logger.debug(f"[V4] {owner} owns {balance} positions: {token_ids}")
        return token_ids

    def get_positions(self, owner: str, sqrt_price_x96: Optional[int] = None) -> List[V4Position]:
        """
        Все позиции владельца с ненулевой liquidity.

        Позиция, которую не удалось разобрать, пропускается с warning;
        ошибки RPC пробрасываются.
        """
        positions = []
        for token_id in self.get_owned_token_ids(owner):
            try:
                position = self.get_position(token_id, sqrt_price_x96)
            except V4LiquidityError as e:
                logger.warning(f"[V4] Skipping position {token_id}: {e}")
                continue
            if position.liquidity > 0:
                positions.append(position)
        return positions

    # ============================================================
    # PAYLOADS
    # ============================================================

    def build_mint_payload(
        self,
        pool_key: PoolKey,
        tick_range: TickRange,
        liquidity: int,
        amount0_max: int,
        amount1_max: int,
        recipient: str,
        hook_data: bytes = b''
    ) -> bytes:
        """
        Payload для минта ОДНОЙ позиции.

        Actions: MINT_POSITION, CLOSE_CURRENCY x2, SWEEP x2.
        CLOSE_CURRENCY рассчитывает каждый токен, SWEEP возвращает остаток.
        """
        if liquidity <= 0:
            raise InsufficientLiquidity(amount0_max, amount1_max)
        if not tick_range.is_usable(pool_key.tick_spacing):
            raise InvalidConfiguration(
                f"Ticks {tick_range.tick_lower}/{tick_range.tick_upper} are not multiples "
                f"of tick_spacing={pool_key.tick_spacing}"
            )

        builder = ActionStreamBuilder()
        builder.mint_position(
            pool_key,
            tick_range.tick_lower,
            tick_range.tick_upper,
            liquidity,
            amount0_max,
            amount1_max,
            recipient,
            hook_data
        )
        builder.close_currency(pool_key.currency0)
        builder.close_currency(pool_key.currency1)
        builder.sweep(pool_key.currency0, recipient)
        builder.sweep(pool_key.currency1, recipient)

        logger.info(f"[V4] Mint payload: ticks={tick_range.tick_lower}/{tick_range.tick_upper}, liquidity={liquidity}")
        return builder.encode()

    def build_increase_payload(
        self,
        token_id: int,
        pool_key: PoolKey,
        liquidity: int,
        amount0_max: int,
        amount1_max: int,
        recipient: str
    ) -> bytes:
        """Payload для добавления liquidity в существующую позицию."""
        if liquidity <= 0:
            raise InsufficientLiquidity(amount0_max, amount1_max)

        builder = ActionStreamBuilder()
        builder.increase_liquidity(token_id, liquidity, amount0_max, amount1_max)
        builder.close_currency(pool_key.currency0)
        builder.close_currency(pool_key.currency1)
        builder.sweep(pool_key.currency0, recipient)
        builder.sweep(pool_key.currency1, recipient)
        return builder.encode()

    def build_decrease_payload(
        self,
        token_id: int,
        liquidity: int,
        currency0: str,
        currency1: str,
        recipient: str,
        amount0_min: int = 0,
        amount1_min: int = 0,
        burn: bool = False
    ) -> bytes:
        """
        Payload для вывода liquidity из ОДНОЙ позиции.

        Actions: DECREASE_LIQUIDITY, TAKE_PAIR (+ BURN_POSITION если burn=True).
        """
        builder = ActionStreamBuilder()
        builder.decrease_liquidity(token_id, liquidity, amount0_min, amount1_min)
        builder.take_pair(currency0, currency1, recipient)
        if burn:
            builder.burn_position(token_id)

        logger.info(f"[V4] Decrease payload: token_id={token_id}, liquidity={liquidity}, burn={burn}")
        return builder.encode()

    def build_batch_close_payload(
        self,
        positions: List[V4Position],
        recipient: str,
        burn: bool = False
    ) -> bytes:
        """
        Payload для закрытия НЕСКОЛЬКИХ позиций в ОДНОЙ транзакции.

        Для каждой позиции DECREASE_LIQUIDITY (+ BURN_POSITION), затем
        один TAKE_PAIR на каждую уникальную пару токенов.
        """
        builder = ActionStreamBuilder()
        token_pairs = []

        for position in positions:
            builder.decrease_liquidity(position.token_id, position.liquidity)
            if burn:
                builder.burn_position(position.token_id)

            pair = (position.pool_key.currency0, position.pool_key.currency1)
            if pair not in token_pairs:
                token_pairs.append(pair)

        for currency0, currency1 in token_pairs:
            builder.take_pair(currency0, currency1, recipient)

        logger.info(f"[V4] Batch close: {len(positions)} positions, {len(token_pairs)} unique pairs, {len(builder)} total actions")
        return builder.encode()

    # ============================================================
    # TRANSACTIONS (unsigned)
    # ============================================================

    def encode_modify_liquidities(self, payload: bytes, deadline: int = None) -> str:
        """Calldata для modifyLiquidities(unlockData, deadline)."""
        if deadline is None:
            deadline = compute_deadline()
        return self.contract.functions.modifyLiquidities(payload, deadline)._encode_transaction_data()

    def build_modify_liquidities_tx(
        self,
        payload: bytes,
        sender: str,
        deadline: int = None,
        value: int = 0,
        gas: int = None
    ) -> dict:
        """
        Неподписанная транзакция modifyLiquidities.

        Args:
            payload: unlockData из build_*_payload
            sender: Адрес отправителя
            deadline: Unix timestamp (по умолчанию now + 30 минут)
            value: Native ETH для пулов с currency0 = 0x0
            gas: Gas limit (None = оценка нодой)
        """
        if deadline is None:
            deadline = compute_deadline()

        tx_params = {
            'from': Web3.to_checksum_address(sender),
            'value': value,
        }
        if gas is not None:
            tx_params['gas'] = gas

        return self.contract.functions.modifyLiquidities(payload, deadline).build_transaction(tx_params)

    def parse_minted_token_id(self, receipt) -> Optional[int]:
        """Token ID из Transfer(from=0x0) в receipt минта."""
        events = self.contract.events.Transfer().process_receipt(receipt)
        for event in events:
            if int(event['args']['from'], 16) == 0:
                return event['args']['tokenId']
        return None
