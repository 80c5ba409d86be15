from typing import Any, Dict, List, Tuple

from eth_tester import EthereumTester, PyEVMBackend
from web3 import Web3, EthereumTesterProvider

from medreview.config import mr_print
from medreview.transaction.interface import ReviewLedgerInterface, BlockChainError


class Web3TesterLedger(ReviewLedgerInterface):
    """Ledger backed by an in-memory eth-tester chain, block numbers and timestamps are taken from the chain."""

    def __init__(self) -> None:
        super().__init__()
        self.eth_tester = EthereumTester(backend=PyEVMBackend())
        self.w3 = Web3(EthereumTesterProvider(self.eth_tester))
        if not self.w3.is_connected():
            raise BlockChainError(f'Failed to connect to blockchain: {self.w3.provider}')
        self.next_acc_idx = 1
        self._deploy_nonces: Dict[bytes, int] = {}

    @classmethod
    def is_debug_backend(cls) -> bool:
        return True

    def mine(self):
        self.eth_tester.mine_blocks(1)

    def _default_address(self) -> Any:
        return self.w3.eth.accounts[0]

    def _create_accounts(self, count: int) -> List[Any]:
        accounts = self.w3.eth.accounts
        if len(accounts[self.next_acc_idx:]) < count:
            raise ValueError(f'Can have at most {len(accounts)-1} dummy accounts in total')
        dummy_accounts = list(accounts[self.next_acc_idx:self.next_acc_idx + count])
        self.next_acc_idx += count
        return dummy_accounts

    def _new_contract_address(self, deployer: bytes) -> Any:
        nonce = self._deploy_nonces.get(deployer, 0)
        self._deploy_nonces[deployer] = nonce + 1
        return bytes(Web3.keccak(deployer + nonce.to_bytes(32, byteorder='big')))[-20:]

    def _pending_block(self) -> Dict:
        return self.eth_tester.get_block_by_number('pending')

    def _current_block(self) -> Tuple[int, int]:
        block = self._pending_block()
        return block['number'], block['timestamp']

    def _coinbase(self) -> Any:
        return self._pending_block()['coinbase']

    def _gas_limit(self) -> int:
        return self._pending_block()['gas_limit']

    def _advance_time(self, seconds: int):
        if seconds == 0:
            return
        target = self.timestamp + seconds
        mr_print(f'Time travel to {target}', verbosity_level=2)
        self.eth_tester.time_travel(target)
