from typing import Tuple, List

from web3 import Web3

from medreview.transaction.crypto.meta import bn128_scalar_field
from medreview.transaction.crypto.params import CryptoParams
from medreview.transaction.interface import CryptoInterface
from medreview.transaction.types import PrivateKeyValue, PublicKeyValue, KeyPair


class DummyHomCrypto(CryptoInterface):
    """
    Insecure stand-in for Paillier, for tests and debugging.

    enc(m) = m * k + 1 over the bn128 scalar field, where k is derived from the owner address.
    Adding ciphers and subtracting 1 yields a cipher of the sum, like with a real additively homomorphic scheme.
    """
    params = CryptoParams('dummy-hom')

    def _generate_or_load_key_pair(self, address: str) -> KeyPair:
        digest = bytes(Web3.keccak(b'dummy-hom-key' + bytes.fromhex(address)))
        key = int.from_bytes(digest[-self.params.key_bytes:], byteorder='big') or 1
        return KeyPair(PublicKeyValue(self.serialize_pk(key, self.params.key_bytes), params=self.params),
                       PrivateKeyValue(key))

    def _enc(self, plain: int, target_pk: int) -> Tuple[List[int], List[int]]:
        cipher = (plain % bn128_scalar_field * target_pk + 1) % bn128_scalar_field
        return [cipher], [0] * self.params.randomness_len

    def _dec(self, cipher: Tuple[int, ...], sk: int) -> Tuple[int, List[int]]:
        plain = ((cipher[0] - 1) * pow(sk, -1, bn128_scalar_field)) % bn128_scalar_field
        if plain > bn128_scalar_field // 2:
            plain -= bn128_scalar_field
        return plain, [0] * self.params.randomness_len
