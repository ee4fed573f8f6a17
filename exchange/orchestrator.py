from common.abi import ERC20_ABI, ROUTER_ABI
from common.config import ConfigStore
from common.helpers import setup_logging
from common.units import to_human, to_raw, validate_address
from exchange.allowance_guard import ensure_allowance
from exchange.context import DexContext
from smart_order_router.sor import MAX_HOPS, resolve_path

from dataclasses import dataclass
import logging
import sys
from typing import Tuple


setup_logging()


@dataclass(frozen=True)
class Quote:
    path: Tuple[str, ...]
    amount_in: int # raw, input token decimals
    amount_out: int # raw, output token decimals
    out_human: str


def decimals_of(ctx, token: str) -> int:
    # Read fresh on every call, never cached
    return ctx.ledger.read(token, ERC20_ABI, 'decimals')


def router_address(ctx) -> str:
    return validate_address(ctx.config.router_address, 'router')


def quote(ctx, token_in: str, token_out: str, amount_human) -> Quote:
    path = resolve_path(ctx, token_in, token_out, MAX_HOPS)

    decimals_in = decimals_of(ctx, path[0])
    decimals_out = decimals_of(ctx, path[-1])
    amount_in = to_raw(amount_human, decimals_in)

    amounts = ctx.ledger.read(router_address(ctx), ROUTER_ABI, 'getAmountsOut', amount_in, list(path))
    amount_out = amounts[-1]
    return Quote(path=path, amount_in=amount_in, amount_out=amount_out, out_human=to_human(amount_out, decimals_out))


def swap(ctx, token_in: str, token_out: str, amount_human, min_out_human, to: str) -> str:
    '''
    Returns the swap txn hash without waiting for it to be mined. min_out is the only
    protection against the pool moving between quote and execution
    '''
    to = validate_address(to, 'to')
    router = router_address(ctx)
    path = resolve_path(ctx, token_in, token_out, MAX_HOPS)

    decimals_in = decimals_of(ctx, path[0])
    decimals_out = decimals_of(ctx, path[-1])
    amount_in = to_raw(amount_human, decimals_in)
    min_out = to_raw(min_out_human, decimals_out)

    ensure_allowance(ctx, path[0], router, amount_in)

    return ctx.ledger.write(router, ROUTER_ABI, 'swapExactTokensForTokens', amount_in, min_out, list(path), to)


def add_liquidity(ctx, token_a: str, token_b: str, amount_a_human, amount_b_human,
                  min_a_human, min_b_human) -> str:
    token_a = validate_address(token_a, 'tokenA')
    token_b = validate_address(token_b, 'tokenB')
    router = router_address(ctx)

    # Each side is scaled by its own token's decimals
    decimals_a = decimals_of(ctx, token_a)
    decimals_b = decimals_of(ctx, token_b)
    amount_a = to_raw(amount_a_human, decimals_a)
    amount_b = to_raw(amount_b_human, decimals_b)
    min_a = to_raw(min_a_human, decimals_a)
    min_b = to_raw(min_b_human, decimals_b)

    # Sequential: a failed approval for A raises before B is touched
    ensure_allowance(ctx, token_a, router, amount_a)
    ensure_allowance(ctx, token_b, router, amount_b)

    return ctx.ledger.write(router, ROUTER_ABI, 'addLiquidity', token_a, token_b, amount_a, amount_b, min_a, min_b)


if __name__ == '__main__':
    # python -m exchange.orchestrator quote <tokenIn> <tokenOut> <amountIn> [cfg.yaml]
    command, token_in, token_out, amount = sys.argv[1:5]
    if command != 'quote':
        raise ValueError(f'Unknown command {command}: only "quote" is supported')
    config_path = sys.argv[5] if len(sys.argv) > 5 else 'cfg.yaml'
    ctx = DexContext.create_from_config(ConfigStore(config_path).load())
    q = quote(ctx, token_in, token_out, amount)
    logging.info(f'Path: {" -> ".join(q.path)}')
    logging.info(f'Quoted out: {q.out_human}')
