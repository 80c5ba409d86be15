from typing import Dict

from medreview.transaction.interface import KeystoreInterface
from medreview.transaction.types import AddressValue, KeyPair, PrivateKeyValue, PublicKeyValue


class SimpleKeystore(KeystoreInterface):
    """In-memory key store, key pairs are (re-)loaded by the crypto backend on first use."""

    def __init__(self, crypto_params):
        super().__init__(crypto_params)
        self.local_key_pairs: Dict[AddressValue, KeyPair] = {}

    def add_keypair(self, address: AddressValue, key_pair: KeyPair):
        self.local_key_pairs[address] = key_pair

    def sk(self, address: AddressValue) -> PrivateKeyValue:
        return self.local_key_pairs[address].sk

    def pk(self, address: AddressValue) -> PublicKeyValue:
        return self.local_key_pairs[address].pk
