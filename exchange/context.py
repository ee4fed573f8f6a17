from common.config import Config
from ledger.ledger_client import LedgerClient
from moneta.token_registry import TokenRegistry

from dataclasses import dataclass


'''
Everything an operation needs is carried here and passed in explicitly, so routing,
allowance and order logic can run against a fake ledger in tests
'''
@dataclass(frozen=True)
class DexContext:
    config: Config
    ledger: LedgerClient
    registry: TokenRegistry

    @staticmethod
    def create_from_config(config: Config):
        return DexContext(
            config=config,
            ledger=LedgerClient.create_from_config(config),
            registry=TokenRegistry(config.tokens_path),
        )

    @property
    def account_address(self) -> str:
        return self.ledger.address

    def with_config(self, config: Config):
        return DexContext(config=config, ledger=self.ledger, registry=self.registry)
