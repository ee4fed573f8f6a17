"""
Shared fixtures: an in-memory ledger that plays the part of the factory, router,
ERC20 tokens and the limit-order book, so no node is needed.
"""

from __future__ import annotations

import itertools

import pytest
from web3 import Web3
from web3.exceptions import ContractLogicError

from common.config import Config
from common.enums import OrderStatus
from common.exceptions import TransactionFailed
from common.units import ZERO_ADDRESS
from exchange.context import DexContext
from moneta.token_registry import TokenDescriptor, TokenRegistry


def addr(n: int) -> str:
    """Deterministic checksummed test address."""
    return Web3.to_checksum_address(f"0x{n:040x}")


OWNER = addr(0xA11CE)
FACTORY = addr(0xFAC)
ROUTER = addr(0x1207)
LIMIT = addr(0x11A17)
PAIR = addr(0x9A12)
TOKEN_A = addr(0xA)
TOKEN_B = addr(0xB)
TOKEN_X = addr(0x1)
TOKEN_Y = addr(0x2)
TOKEN_Z = addr(0x3)


class FakeLedger:
    """Implements LedgerClient's read/write/deploy/receipt contract in memory."""

    def __init__(self, address: str = OWNER):
        self.address = address
        self.factory_address = FACTORY
        self.pairs: set[frozenset] = set()
        self.decimals: dict[str, int] = {}
        self.names: dict[str, str] = {}
        self.symbols: dict[str, str] = {}
        self.balances: dict[str, int] = {}
        self.allowances: dict[tuple[str, str], int] = {}
        self.amounts_out = lambda amount_in, path: [amount_in] * len(path)

        self.orders: dict[int, list] = {}
        self.last_order_id = 0
        self.fillable: dict[int, tuple[bool, int]] = {}

        self.deploy_address: str | None = addr(0xD3)
        self.deploys: list[tuple] = []
        self.reverting: set[str] = set()

        self.reads: list[tuple] = []
        self.writes: list[tuple] = []
        self.receipts: dict[str, dict] = {}
        self._hashes = itertools.count(1)

    # pairs / tokens setup
    def add_pair(self, a: str, b: str) -> None:
        self.pairs.add(frozenset((a.lower(), b.lower())))

    def add_token(self, token: str, decimals: int, name: str = "", symbol: str = "") -> None:
        self.decimals[token.lower()] = decimals
        self.names[token.lower()] = name
        self.symbols[token.lower()] = symbol

    def pair_checks(self) -> list[tuple[str, str]]:
        return [(a.lower(), b.lower()) for _, fn, (a, b) in self.reads if fn == "getPair"]

    def writes_named(self, function_name: str) -> list[tuple]:
        return [w for w in self.writes if w[1] == function_name]

    # ledger contract
    def read(self, address, abi, function_name, *args):
        self.reads.append((address.lower(), function_name, args))
        return getattr(self, f"_read_{function_name}")(address, *args)

    def write(self, address, abi, function_name, *args) -> str:
        txn_hash = self._next_hash()
        self.writes.append((address.lower(), function_name, args))
        status = 0 if function_name in self.reverting else 1
        if status == 1:
            getattr(self, f"_write_{function_name}", lambda *a: None)(address, *args)
        self.receipts[txn_hash] = {"status": status, "transactionHash": txn_hash}
        return txn_hash

    def deploy(self, abi, bytecode, *args) -> str:
        txn_hash = self._next_hash()
        self.deploys.append((bytecode, args))
        receipt = {"status": 1, "transactionHash": txn_hash}
        if self.deploy_address is not None:
            receipt["contractAddress"] = self.deploy_address
        self.receipts[txn_hash] = receipt
        return txn_hash

    def wait_for_receipt(self, txn_hash):
        return self.receipts[txn_hash]

    def confirm(self, txn_hash):
        receipt = self.wait_for_receipt(txn_hash)
        if receipt.get("status") == 0:
            raise TransactionFailed(txn_hash, receipt)
        return receipt

    def _next_hash(self) -> str:
        return f"0x{next(self._hashes):064x}"

    # reads
    def _read_factory(self, router):
        return self.factory_address

    def _read_getPair(self, factory, a, b):
        return PAIR if frozenset((a.lower(), b.lower())) in self.pairs else ZERO_ADDRESS

    def _read_decimals(self, token):
        return self.decimals[token.lower()]

    def _read_name(self, token):
        return self.names[token.lower()]

    def _read_symbol(self, token):
        return self.symbols[token.lower()]

    def _read_balanceOf(self, token, account):
        return self.balances[token.lower()]

    def _read_allowance(self, token, owner, spender):
        return self.allowances.get((token.lower(), spender.lower()), 0)

    def _read_getAmountsOut(self, router, amount_in, path):
        return self.amounts_out(amount_in, path)

    def _read_orders(self, limit, order_id):
        return tuple(self.orders[order_id])

    def _read_nextOrderId(self, limit):
        return self.last_order_id

    def _read_isFillable(self, limit, order_id):
        return self.fillable.get(order_id, (False, 0))

    # writes
    def _write_approve(self, token, spender, amount):
        self.allowances[(token.lower(), spender.lower())] = amount

    def _write_createOrder(self, limit, token_in, token_out, amount_in, min_out, expire_at):
        self.last_order_id += 1
        self.orders[self.last_order_id] = [
            self.last_order_id, token_in, token_out, amount_in, min_out, expire_at, self.address,
            int(OrderStatus.OPEN),
        ]

    def _settle(self, order_id, status):
        order = self.orders.get(order_id)
        if order is None or order[7] != int(OrderStatus.OPEN):
            raise ContractLogicError("execution reverted: order not open")
        order[7] = int(status)

    def _write_fillOrder(self, limit, order_id):
        self._settle(order_id, OrderStatus.FILLED)

    def _write_cancelOrder(self, limit, order_id):
        self._settle(order_id, OrderStatus.CANCELLED)


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture
def config(tmp_path) -> Config:
    return Config(
        rpc_endpoint="http://127.0.0.1:8545",
        chain_id=31337,
        signing_key="0x" + "11" * 32,
        factory_address=FACTORY,
        router_address=ROUTER,
        limit_order_address=LIMIT,
        tokens_path=str(tmp_path / "tokens.json"),
    )


@pytest.fixture
def registry(config) -> TokenRegistry:
    return TokenRegistry(config.tokens_path)


@pytest.fixture
def ctx(config, ledger, registry) -> DexContext:
    return DexContext(config=config, ledger=ledger, registry=registry)


def register(registry: TokenRegistry, *tokens: str) -> None:
    for i, token in enumerate(tokens):
        registry.upsert(TokenDescriptor(address=token, symbol=f"T{i}", name=f"Token {i}", decimals=18))
