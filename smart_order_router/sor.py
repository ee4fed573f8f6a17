from common.abi import FACTORY_ABI, ROUTER_ABI
from common.exceptions import NoRouteFound
from common.helpers import setup_logging
from common.units import is_zero_address, validate_address

import logging
from timer import timer
from typing import List, Tuple


setup_logging()
timer.set_level(logging.DEBUG)

MAX_HOPS = 3

"""
Greedy first-match routing over registry tokens: a direct pair always wins, then the
first 2-hop path in registry order, then the first 3-hop path. Paths are NOT compared by
price. Every pair check is a fresh getPair call against the factory (no caching), so the
3-hop search costs O(n^2) calls in registry size n
"""

def get_factory_address(ctx) -> str:
    if not is_zero_address(ctx.config.factory_address):
        return validate_address(ctx.config.factory_address, 'factory')
    router = validate_address(ctx.config.router_address, 'router')
    return validate_address(ctx.ledger.read(router, ROUTER_ABI, 'factory'), 'factory')


def pair_exists(ctx, factory: str, token_a: str, token_b: str) -> bool:
    pair = ctx.ledger.read(factory, FACTORY_ABI, 'getPair', token_a, token_b)
    return not is_zero_address(pair)


def candidate_mids(ctx, token_in: str, token_out: str) -> List[str]:
    return [validate_address(a, 'token') for a in ctx.registry.candidate_addresses(exclude=(token_in, token_out))]


@timer
def resolve_path(ctx, token_in: str, token_out: str, max_hops: int = MAX_HOPS) -> Tuple[str, ...]:
    token_in = validate_address(token_in, 'tokenIn')
    token_out = validate_address(token_out, 'tokenOut')

    factory = get_factory_address(ctx)

    def has_pair(a, b):
        return pair_exists(ctx, factory, a, b)

    if has_pair(token_in, token_out):
        return _found((token_in, token_out))

    mids = candidate_mids(ctx, token_in, token_out)

    if max_hops >= 2:
        for mid in mids:
            if has_pair(token_in, mid) and has_pair(mid, token_out):
                return _found((token_in, mid, token_out))

    if max_hops >= 3:
        for mid1 in mids:
            if not has_pair(token_in, mid1):
                continue
            for mid2 in mids:
                if mid2.lower() == mid1.lower():
                    continue
                if has_pair(mid1, mid2) and has_pair(mid2, token_out):
                    return _found((token_in, mid1, mid2, token_out))

    raise NoRouteFound(token_in, token_out, max_hops)


def _found(path: Tuple[str, ...]) -> Tuple[str, ...]:
    logging.info(f'Resolved route: {" -> ".join(path)}')
    return path
