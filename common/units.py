from common.exceptions import InvalidAddress, InvalidAmount

import re
from typing import Optional, Union
from web3 import Web3


ZERO_ADDRESS = '0x' + '0' * 40
_ADDRESS_REGEX = re.compile(r'^0x[0-9a-fA-F]{40}$')
MAX_DECIMALS = 255
MAX_UINT256 = 2 ** 256 - 1

# Digits with at most one decimal point. Sign and exponent forms are rejected
_HUMAN_AMOUNT_REGEX = re.compile(r'^([0-9]*)(?:\.([0-9]*))?$')


def validate_address(x, label='address') -> str:
    '''
    Returns the checksummed form of x. Mixed-case input must carry a valid checksum
    '''
    if not isinstance(x, str) or _ADDRESS_REGEX.fullmatch(x) is None:
        raise InvalidAddress(label, x)
    body = x[2:]
    if body != body.lower() and body != body.upper() and not Web3.is_checksum_address(x):
        raise InvalidAddress(label, x)
    return Web3.to_checksum_address(x)


def is_zero_address(x: Optional[str]) -> bool:
    """
    An unset contract address may be stored as None, '', '0x' or the zero address
    """
    return not x or x == '0x' or x.lower() == ZERO_ADDRESS


def validate_decimals(decimals) -> int:
    try:
        dec = int(decimals)
    except (TypeError, ValueError):
        raise InvalidAmount(f'decimals invalid: {decimals!r}')
    if isinstance(decimals, float) and not decimals.is_integer():
        raise InvalidAmount(f'decimals invalid: {decimals!r}')
    if dec < 0 or dec > MAX_DECIMALS:
        raise InvalidAmount(f'decimals invalid: {decimals!r} must be within 0-{MAX_DECIMALS}')
    return dec


def to_raw(amount_human: Union[str, int], decimals: int) -> int:
    """
    "1.5" with 6 decimals -> 1500000. More fractional digits than decimals is an error, never truncated
    """
    decimals = validate_decimals(decimals)
    s = str(amount_human).strip()
    if s.startswith('-'):
        raise InvalidAmount(f'amount must not be negative: {amount_human!r}')
    match = _HUMAN_AMOUNT_REGEX.match(s)
    if match is None or not (match.group(1) or match.group(2)):
        raise InvalidAmount(f'amount is not a decimal number: {amount_human!r}')
    whole, frac = match.group(1) or '0', match.group(2) or ''
    if len(frac) > decimals:
        raise InvalidAmount(f'amount {amount_human!r} has {len(frac)} fractional digits '
                            f'but the token only supports {decimals}')
    try:
        raw = int(whole) * 10 ** decimals + int(frac.ljust(decimals, '0') or '0')
    except ValueError:
        # int() refuses strings beyond the interpreter's digit limit
        raise InvalidAmount(f'amount is too long: {len(s)} characters')
    if raw > MAX_UINT256:
        raise InvalidAmount(f'amount {amount_human!r} does not fit in uint256')
    return raw


def to_human(raw: int, decimals: int) -> str:
    decimals = validate_decimals(decimals)
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0 or raw > MAX_UINT256:
        raise InvalidAmount(f'raw amount must be an integer within 0 and 2**256-1: {raw!r}')
    whole, frac = divmod(raw, 10 ** decimals)
    frac_str = str(frac).rjust(decimals, '0').rstrip('0') if decimals > 0 else ''
    return f'{whole}.{frac_str}' if frac_str else str(whole)
