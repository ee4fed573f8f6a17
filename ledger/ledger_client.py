from common.config import Config
from common.exceptions import TransactionFailed
from common.helpers import setup_logging

import logging
from typing import Any, Dict, List
import web3 as w3
from eth_account import Account
from eth_account.signers.local import LocalAccount


setup_logging()


class LedgerClient:
    '''
    Reads, state-changing calls and contract creation against a single RPC endpoint,
    signed locally by one account. No retries here: transport errors and reverts
    propagate to the caller unmodified
    '''
    def __init__(self, web3, signing_key, chain_id, receipt_timeout_seconds=300,
                 max_fee_per_gas_gwei=None, max_priority_fee_per_gas_gwei=None):
        self.web3 = web3
        self.chain_id = int(chain_id)
        self.receipt_timeout_seconds = receipt_timeout_seconds
        self.max_fee_per_gas_gwei = max_fee_per_gas_gwei
        self.max_priority_fee_per_gas_gwei = max_priority_fee_per_gas_gwei

        assert signing_key is not None, 'You must set a signing key (config or PRIVATE_KEY environment variable)'
        assert signing_key.startswith('0x'), 'Private key must start with 0x hex prefix'
        self.account: LocalAccount = Account.from_key(signing_key)

    @staticmethod
    def create_from_config(config: Config):
        config.validate()
        web3 = w3.Web3(w3.Web3.HTTPProvider(config.rpc_endpoint))
        return LedgerClient(
            web3,
            config.signing_key,
            config.chain_id,
            receipt_timeout_seconds=config.receipt_timeout_seconds,
            max_fee_per_gas_gwei=config.max_fee_per_gas_gwei,
            max_priority_fee_per_gas_gwei=config.max_priority_fee_per_gas_gwei,
        )

    @property
    def address(self) -> str:
        return self.account.address

    def _function(self, address, abi, function_name, args):
        contract = self.web3.eth.contract(address=address, abi=abi)
        return getattr(contract.functions, function_name)(*args)

    def read(self, address: str, abi: List[Dict[str, Any]], function_name: str, *args) -> Any:
        logging.debug(f'Calling {function_name}{args} on {address}')
        return self._function(address, abi, function_name, args).call({'from': self.address})

    def write(self, address: str, abi: List[Dict[str, Any]], function_name: str, *args) -> str:
        txn = self._function(address, abi, function_name, args).build_transaction(self._txn_params())
        txn_hash = self._sign_and_send(txn)
        logging.warning(f'Sent {function_name} to {address}: txn {txn_hash}')
        return txn_hash

    def deploy(self, abi: List[Dict[str, Any]], bytecode: str, *args) -> str:
        contract = self.web3.eth.contract(abi=abi, bytecode=bytecode)
        txn = contract.constructor(*args).build_transaction(self._txn_params())
        txn_hash = self._sign_and_send(txn)
        logging.warning(f'Sent contract creation: txn {txn_hash}')
        return txn_hash

    def wait_for_receipt(self, txn_hash: str):
        '''
        Raises web3.exceptions.TimeExhausted if the txn is not mined within the timeout
        '''
        return self.web3.eth.wait_for_transaction_receipt(txn_hash, timeout=self.receipt_timeout_seconds)

    def confirm(self, txn_hash: str):
        receipt = self.wait_for_receipt(txn_hash)
        # Status == 0 -> failed txn, status == 1 -> successful txn
        if receipt.get('status') == 0:
            raise TransactionFailed(txn_hash, receipt)
        return receipt

    def _txn_params(self) -> Dict[str, Any]:
        # 'pending' so that a txn sent right after another unmined one gets the next nonce
        params = {
            'from': self.address,
            'nonce': self.web3.eth.get_transaction_count(self.address, 'pending'),
            'chainId': self.chain_id,
        }
        if self.max_fee_per_gas_gwei is not None:
            params['maxFeePerGas'] = int(self.max_fee_per_gas_gwei * 1e9)
            priority_gwei = self.max_priority_fee_per_gas_gwei
            params['maxPriorityFeePerGas'] = int((priority_gwei if priority_gwei is not None
                                                  else self.max_fee_per_gas_gwei) * 1e9)
        return params

    def _sign_and_send(self, txn: Dict[str, Any]) -> str:
        signed_txn = self.account.sign_transaction(txn)
        return w3.Web3.to_hex(self.web3.eth.send_raw_transaction(signed_txn.raw_transaction))
