from common.abi import ERC20_ABI
from common.exceptions import DeployFailed
from common.helpers import load_artifact, setup_logging
from common.units import to_human, to_raw, validate_address, validate_decimals
from moneta.token_registry import TokenDescriptor

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
import logging
from timer import timer
from typing import Any, Dict, List, Union


setup_logging()
timer.set_level(logging.DEBUG)


@dataclass(frozen=True)
class TokenBalance:
    raw: int
    human: str
    decimals: int


@dataclass(frozen=True)
class Deployment:
    address: str
    txn_hash: str


def token_meta(ctx, token_address: str) -> Dict[str, Any]:
    '''
    name, symbol and decimals have no data dependency, so they are read concurrently and joined
    '''
    token_address = validate_address(token_address, 'token')
    with ThreadPoolExecutor(max_workers=3) as pool:
        futures = {
            field: pool.submit(ctx.ledger.read, token_address, ERC20_ABI, field)
            for field in ('name', 'symbol', 'decimals')
        }
        return {field: future.result() for field, future in futures.items()}


def get_token_balance(ctx, token_address: str) -> TokenBalance:
    token_address = validate_address(token_address, 'token')
    decimals = ctx.ledger.read(token_address, ERC20_ABI, 'decimals')
    balance = ctx.ledger.read(token_address, ERC20_ABI, 'balanceOf', ctx.account_address)
    return TokenBalance(raw=balance, human=to_human(balance, decimals), decimals=decimals)


def get_all_token_balances(ctx) -> List[Dict[str, Any]]:
    """
    One row per registered token. A token whose reads fail shows balance 'ERR' rather than
    aborting the whole listing
    """
    results = []
    for token in ctx.registry.list():
        row = {'address': token.address, 'symbol': token.symbol or '?', 'name': token.name}
        try:
            row['balance'] = get_token_balance(ctx, token.address).human
        except Exception as e:
            logging.error(f'Could not read balance of {token}: {e}')
            row['balance'] = 'ERR'
        results.append(row)
    return results


@timer
def deploy_token(ctx, name: str, symbol: str, supply_human, decimals: Union[int, str], to: str) -> Deployment:
    '''
    Deploys the token template, waits for the receipt and registers the new token.
    Nothing is registered unless the receipt carries a contract address
    '''
    to = validate_address(to, 'to')
    decimals = validate_decimals(decimals)
    supply = to_raw(supply_human, decimals)

    abi, bytecode = load_artifact(ctx.config.artifact('token'))
    txn_hash = ctx.ledger.deploy(abi, bytecode, name, symbol, supply, to)
    receipt = ctx.ledger.confirm(txn_hash)
    contract_address = receipt.get('contractAddress')
    if not contract_address:
        raise DeployFailed('Token', txn_hash)

    ctx.registry.upsert(TokenDescriptor(address=contract_address, symbol=symbol, name=name, decimals=decimals))
    logging.warning(f'Deployed token {symbol} at {contract_address} (txn {txn_hash})')
    return Deployment(address=contract_address, txn_hash=txn_hash)
