from common.enums import OrderStatus

from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class LimitOrder:
    '''
    Snapshot of the tuple returned by the limit-order contract's orders(id).
    Status only changes on-chain, through fillOrder / cancelOrder
    '''
    id: int
    token_in: str
    token_out: str
    amount_in: int # raw
    min_out: int # raw
    expire_at: int # unix timestamp, 0 means no expiry
    maker: str
    status: OrderStatus

    @staticmethod
    def create_from_tuple(values: Sequence):
        order_id, token_in, token_out, amount_in, min_out, expire_at, maker, status = values
        return LimitOrder(
            id=int(order_id),
            token_in=token_in,
            token_out=token_out,
            amount_in=int(amount_in),
            min_out=int(min_out),
            expire_at=int(expire_at),
            maker=maker,
            status=OrderStatus(int(status)),
        )

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal
