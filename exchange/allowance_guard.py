from common.abi import ERC20_ABI
from common.helpers import setup_logging
from common.units import validate_address

import logging
from typing import Optional


setup_logging()


def approve_if_needed(ctx, token: str, spender: str, needed_raw: int) -> Optional[str]:
    '''
    Returns None if the current allowance already covers needed_raw, else the hash of an
    approval txn for exactly needed_raw (never unlimited). The approval is NOT awaited.

    Read-then-submit is not atomic: an approval changed by someone else in between can
    lead to a redundant approval or a short allowance when the dependent txn executes.
    '''
    token = validate_address(token, 'token')
    spender = validate_address(spender, 'spender')

    allowance = ctx.ledger.read(token, ERC20_ABI, 'allowance', ctx.account_address, spender)
    if allowance >= needed_raw:
        logging.info(f'Allowance {allowance} of {token} for {spender} covers {needed_raw}, not approving')
        return None
    logging.info(f'Allowance {allowance} of {token} for {spender} is below {needed_raw}, approving')
    return ctx.ledger.write(token, ERC20_ABI, 'approve', spender, needed_raw)


def ensure_allowance(ctx, token: str, spender: str, needed_raw: int) -> Optional[str]:
    """
    approve_if_needed, then wait for the approval to be mined so a dependent txn can follow.
    Raises TransactionFailed if the approval reverted
    """
    txn_hash = approve_if_needed(ctx, token, spender, needed_raw)
    if txn_hash is not None:
        ctx.ledger.confirm(txn_hash)
    return txn_hash
