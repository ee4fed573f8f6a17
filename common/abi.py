'''
Minimal call interfaces of the published contracts. Only the functions this client
calls are listed; deployment uses the full compiled artifacts instead
'''
from typing import Dict, List


def _fn(name, inputs, outputs, mutability='view'):
    return {
        'type': 'function',
        'name': name,
        'stateMutability': mutability,
        'inputs': [{'name': n, 'type': t} for n, t in inputs],
        'outputs': [{'name': n, 'type': t} for n, t in outputs],
    }


ERC20_ABI: List[Dict] = [
    _fn('name', [], [('', 'string')]),
    _fn('symbol', [], [('', 'string')]),
    _fn('decimals', [], [('', 'uint8')]),
    _fn('balanceOf', [('account', 'address')], [('', 'uint256')]),
    _fn('allowance', [('owner', 'address'), ('spender', 'address')], [('', 'uint256')]),
    _fn('approve', [('spender', 'address'), ('amount', 'uint256')], [('', 'bool')], 'nonpayable'),
]

FACTORY_ABI: List[Dict] = [
    _fn('getPair', [('tokenA', 'address'), ('tokenB', 'address')], [('pair', 'address')]),
]

ROUTER_ABI: List[Dict] = [
    _fn('factory', [], [('', 'address')]),
    _fn('getAmountsOut', [('amountIn', 'uint256'), ('path', 'address[]')], [('amounts', 'uint256[]')]),
    _fn('addLiquidity', [
        ('tokenA', 'address'),
        ('tokenB', 'address'),
        ('amountADesired', 'uint256'),
        ('amountBDesired', 'uint256'),
        ('amountAMin', 'uint256'),
        ('amountBMin', 'uint256'),
    ], [('amountA', 'uint256'), ('amountB', 'uint256'), ('liquidity', 'uint256')], 'nonpayable'),
    _fn('swapExactTokensForTokens', [
        ('amountIn', 'uint256'),
        ('amountOutMin', 'uint256'),
        ('path', 'address[]'),
        ('to', 'address'),
    ], [('amounts', 'uint256[]')], 'nonpayable'),
]

LIMIT_ORDER_ABI: List[Dict] = [
    _fn('createOrder', [
        ('tokenIn', 'address'),
        ('tokenOut', 'address'),
        ('amountIn', 'uint256'),
        ('minOut', 'uint256'),
        ('expireAt', 'uint256'),
    ], [('id', 'uint256')], 'nonpayable'),
    _fn('orders', [('id', 'uint256')], [
        ('id', 'uint256'),
        ('tokenIn', 'address'),
        ('tokenOut', 'address'),
        ('amountIn', 'uint256'),
        ('minOut', 'uint256'),
        ('expireAt', 'uint256'),
        ('maker', 'address'),
        ('status', 'uint8'),
    ]),
    _fn('fillOrder', [('id', 'uint256')], [], 'nonpayable'),
    _fn('cancelOrder', [('id', 'uint256')], [], 'nonpayable'),
    _fn('nextOrderId', [], [('', 'uint256')]),
    _fn('isFillable', [('id', 'uint256')], [('fillable', 'bool'), ('amountOut', 'uint256')]),
]
