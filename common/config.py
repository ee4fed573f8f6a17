from common.exceptions import ConfigError
from common.helpers import setup_logging
from common.units import validate_address

from dataclasses import asdict, dataclass, field, fields, replace
import logging
import os
from typing import Any, Dict, Optional
import yaml


setup_logging()

ADDRESS_FIELDS = ('factory_address', 'router_address', 'limit_order_address')


@dataclass(frozen=True)
class Config:
    rpc_endpoint: str
    chain_id: int
    signing_key: Optional[str] = None
    factory_address: Optional[str] = None
    router_address: Optional[str] = None
    limit_order_address: Optional[str] = None

    tokens_path: str = 'tokens.json'
    # contract name ('token', 'factory', 'router', 'limit_order') -> compiled artifact JSON
    artifact_path: Dict[str, str] = field(default_factory=dict)
    receipt_timeout_seconds: int = 300
    max_fee_per_gas_gwei: Optional[float] = None
    max_priority_fee_per_gas_gwei: Optional[float] = None

    @staticmethod
    def create_from_dict(d: Dict[str, Any]):
        known = {f.name for f in fields(Config)}
        unknown = set(d) - known
        if len(unknown) > 0:
            logging.warning(f'Ignoring unknown config keys: {sorted(unknown)}')
        values = {k: v for k, v in d.items() if k in known}
        if values.get('signing_key') is None:
            values['signing_key'] = os.environ.get('PRIVATE_KEY')
        if 'chain_id' in values and values['chain_id'] is not None:
            values['chain_id'] = int(values['chain_id'])
        try:
            return Config(**values)
        except TypeError as e:
            raise ConfigError(f'Config is missing required keys: {e}')

    def validate(self):
        if not self.rpc_endpoint:
            raise ConfigError('config.rpc_endpoint missing')
        if not self.chain_id:
            raise ConfigError('config.chain_id missing')
        if not self.signing_key or not self.signing_key.startswith('0x') or len(self.signing_key) < 10:
            raise ConfigError('config.signing_key missing (set it in the config file or the PRIVATE_KEY '
                              'environment variable); it must start with the 0x hex prefix')
        return self

    def artifact(self, name) -> str:
        if name not in self.artifact_path:
            raise ConfigError(f'config.artifact_path.{name} missing')
        return self.artifact_path[name]

    def dump(self) -> Dict[str, Any]:
        return asdict(self)

    def __repr__(self):
        # Never print the signing key
        shown = {k: v for k, v in self.dump().items() if k != 'signing_key'}
        return 'Config[ ' + ', '.join([f'{k}={v}' for k, v in shown.items()]) + ' ]'


class ConfigStore:
    '''
    YAML-backed persistence for the process-wide Config. Every mutation is saved immediately
    '''
    def __init__(self, filename='cfg.yaml'):
        self.filename = filename

    def load(self) -> Config:
        with open(self.filename, 'r') as f:
            config = yaml.safe_load(f) or {}
        return Config.create_from_dict(config)

    def save(self, config: Config):
        with open(self.filename, 'w') as outfile:
            yaml.safe_dump(config.dump(), outfile, sort_keys=False)
        logging.info(f'Saved config to {self.filename}')

    def edit(self, config: Config, **changes) -> Config:
        for name in ADDRESS_FIELDS:
            value = changes.get(name)
            if value is not None and value != '0x':
                changes[name] = validate_address(value, name)
        new_config = replace(config, **changes)
        self.save(new_config)
        return new_config
