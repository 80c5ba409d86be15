import time
from typing import Any, Dict, List, Tuple

from web3 import Web3

from medreview.transaction.interface import ReviewLedgerInterface

block_gas_limit = 10000000


class LocalLedger(ReviewLedgerInterface):
    """
    Deterministic in-process ledger.

    Accounts are derived from a counter, the clock only moves when advance_time is called.
    """

    def __init__(self, genesis_timestamp: int = None) -> None:
        super().__init__()
        self._block_number = 1
        self._timestamp = int(time.time()) if genesis_timestamp is None else genesis_timestamp
        self._accounts: List[bytes] = [self._derive_account(0)]
        self._deploy_nonces: Dict[bytes, int] = {}

    @classmethod
    def is_debug_backend(cls) -> bool:
        return True

    @staticmethod
    def _derive_account(idx: int) -> bytes:
        return bytes(Web3.keccak(b'medreview-account' + idx.to_bytes(32, byteorder='big')))[-20:]

    def mine(self):
        self._block_number += 1

    def _default_address(self) -> Any:
        return self._accounts[0]

    def _create_accounts(self, count: int) -> List[Any]:
        start = len(self._accounts)
        new_accounts = [self._derive_account(idx) for idx in range(start, start + count)]
        self._accounts += new_accounts
        return new_accounts

    def _new_contract_address(self, deployer: bytes) -> Any:
        nonce = self._deploy_nonces.get(deployer, 0)
        self._deploy_nonces[deployer] = nonce + 1
        return bytes(Web3.keccak(deployer + nonce.to_bytes(32, byteorder='big')))[-20:]

    def _current_block(self) -> Tuple[int, int]:
        return self._block_number, self._timestamp

    def _coinbase(self) -> Any:
        return self._accounts[0]

    def _gas_limit(self) -> int:
        return block_gas_limit

    def _advance_time(self, seconds: int):
        self._timestamp += seconds
