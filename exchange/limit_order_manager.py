from common.abi import LIMIT_ORDER_ABI, ERC20_ABI
from common.helpers import setup_logging
from common.units import to_raw, validate_address
from exchange.allowance_guard import ensure_allowance
from exchange.limit_order import LimitOrder

import logging
from typing import Tuple


setup_logging()


class LimitOrderManager:
    '''
    Thin client over the limit-order contract. No local precondition checks: whether an
    order can be filled or cancelled (price, expiry, ownership) is decided by the contract,
    and its revert is surfaced as is
    '''
    def __init__(self, ctx):
        self.ctx = ctx
        self.address = validate_address(ctx.config.limit_order_address, 'limit')

    def _read(self, function_name, *args):
        return self.ctx.ledger.read(self.address, LIMIT_ORDER_ABI, function_name, *args)

    def _write(self, function_name, *args) -> str:
        return self.ctx.ledger.write(self.address, LIMIT_ORDER_ABI, function_name, *args)

    def create_order(self, token_in: str, token_out: str, amount_human, min_out_human, expire_at_unix=0) -> str:
        '''
        Returns the createOrder txn hash. The assigned id is not known until the txn is mined,
        see create_order_and_wait
        '''
        token_in = validate_address(token_in, 'tokenIn')
        token_out = validate_address(token_out, 'tokenOut')

        decimals_in = self.ctx.ledger.read(token_in, ERC20_ABI, 'decimals')
        decimals_out = self.ctx.ledger.read(token_out, ERC20_ABI, 'decimals')
        amount_in = to_raw(amount_human, decimals_in)
        min_out = to_raw(min_out_human, decimals_out)

        ensure_allowance(self.ctx, token_in, self.address, amount_in)

        return self._write('createOrder', token_in, token_out, amount_in, min_out, int(expire_at_unix or 0))

    def create_order_and_wait(self, token_in: str, token_out: str, amount_human, min_out_human,
                              expire_at_unix=0) -> Tuple[int, str]:
        """
        Returns (order id, txn hash). The id is read from the contract's nextOrderId() right after
        confirmation, so an order created by someone else in the same block can be picked up instead
        """
        txn_hash = self.create_order(token_in, token_out, amount_human, min_out_human, expire_at_unix)
        self.ctx.ledger.confirm(txn_hash)
        order_id = self.next_order_id()
        logging.info(f'Order {order_id} created by txn {txn_hash}')
        return order_id, txn_hash

    def read_order(self, order_id) -> LimitOrder:
        return LimitOrder.create_from_tuple(self._read('orders', int(order_id)))

    def next_order_id(self) -> int:
        return int(self._read('nextOrderId'))

    def is_fillable(self, order_id) -> Tuple[bool, int]:
        fillable, amount_out = self._read('isFillable', int(order_id))
        return bool(fillable), int(amount_out)

    def fill_order(self, order_id) -> str:
        return self._write('fillOrder', int(order_id))

    def cancel_order(self, order_id) -> str:
        return self._write('cancelOrder', int(order_id))

    def fill_order_and_wait(self, order_id) -> LimitOrder:
        self.ctx.ledger.confirm(self.fill_order(order_id))
        return self.read_order(order_id)

    def cancel_order_and_wait(self, order_id) -> LimitOrder:
        self.ctx.ledger.confirm(self.cancel_order(order_id))
        return self.read_order(order_id)
