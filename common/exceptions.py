class DexError(Exception):
    pass


class InvalidAddress(DexError, ValueError):
    def __init__(self, label, value):
        self.label = label
        self.value = value
        super().__init__(f'{label} invalid: {value!r} is not a 20-byte hex address')


class InvalidAmount(DexError, ValueError):
    pass


class ConfigError(DexError, ValueError):
    pass


class NoRouteFound(DexError):
    def __init__(self, token_in, token_out, max_hops):
        self.token_in = token_in
        self.token_out = token_out
        self.max_hops = max_hops
        super().__init__(f'No route found from {token_in} to {token_out} within {max_hops} hops. '
                         f'Create liquidity for the direct pair or register intermediate tokens with liquidity.')


class DeployFailed(DexError):
    def __init__(self, what, txn_hash):
        self.txn_hash = txn_hash
        super().__init__(f'{what} deploy failed: receipt for {txn_hash} has no contractAddress')


class TransactionFailed(DexError):
    '''
    The transaction was mined but the receipt reports status 0 (reverted)
    '''
    def __init__(self, txn_hash, receipt=None):
        self.txn_hash = txn_hash
        self.receipt = receipt
        super().__init__(f'Transaction {txn_hash} was mined but reverted')


class RegistryCorrupt(DexError):
    def __init__(self, tokens_path, reason):
        self.tokens_path = tokens_path
        super().__init__(f'Token registry {tokens_path} is unreadable ({reason})')
