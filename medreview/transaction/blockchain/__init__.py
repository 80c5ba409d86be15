"""
This package contains the ledger backends

==========
Submodules
==========
* :py:mod:`.local`: Deterministic in-process ledger with a manually advanced clock.
* :py:mod:`.web3py`: Ledger backed by web3 and an eth-tester chain.
"""

from .local import LocalLedger
from .web3py import Web3TesterLedger
