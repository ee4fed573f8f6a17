from common.config import ConfigStore
from common.exceptions import DeployFailed
from common.helpers import load_artifact, setup_logging
from common.units import is_zero_address, validate_address

import logging
from timer import timer


setup_logging()
timer.set_level(logging.DEBUG)


def _deploy(ctx, what, artifact_name, *args) -> str:
    abi, bytecode = load_artifact(ctx.config.artifact(artifact_name))
    txn_hash = ctx.ledger.deploy(abi, bytecode, *args)
    contract_address = ctx.ledger.confirm(txn_hash).get('contractAddress')
    if not contract_address:
        raise DeployFailed(what, txn_hash)
    logging.warning(f'Deployed {what} at {contract_address} (txn {txn_hash})')
    return contract_address


def deploy_factory(ctx) -> str:
    return _deploy(ctx, 'Factory', 'factory')


def deploy_router(ctx, factory_address: str) -> str:
    return _deploy(ctx, 'Router', 'router', validate_address(factory_address, 'factory'))


def deploy_limit_order(ctx, router_address: str) -> str:
    return _deploy(ctx, 'LimitOrder', 'limit_order', validate_address(router_address, 'router'))


@timer
def ensure_core_deployed(ctx, config_store: ConfigStore):
    '''
    First-run setup: deploys whichever of factory, router and limit-order contract is unset,
    in dependency order, and saves the addresses. Returns a context bound to the new config
    '''
    cfg = ctx.config
    if not any(is_zero_address(a) for a in (cfg.factory_address, cfg.router_address, cfg.limit_order_address)):
        return ctx

    logging.info('Deploying missing core contracts...')
    factory = deploy_factory(ctx) if is_zero_address(cfg.factory_address) else cfg.factory_address
    router = deploy_router(ctx, factory) if is_zero_address(cfg.router_address) else cfg.router_address
    limit = deploy_limit_order(ctx, router) if is_zero_address(cfg.limit_order_address) else cfg.limit_order_address

    new_config = config_store.edit(cfg, factory_address=factory, router_address=router, limit_order_address=limit)
    return ctx.with_config(new_config)
