import json
import os
from functools import lru_cache
from math import gcd
from typing import Tuple, List

from Crypto.Math.Primality import generate_probable_prime
from Crypto.Random.random import getrandbits

from medreview import my_logging
from medreview.config import cfg, mr_print
from medreview.transaction.crypto.params import CryptoParams
from medreview.transaction.interface import CryptoInterface
from medreview.transaction.types import KeyPair, PublicKeyValue, PrivateKeyValue


@lru_cache(maxsize=8)
def _decryption_constants(p: int, q: int) -> Tuple[int, int, int, int]:
    """Return (n, n^2, lambda, mu) of the secret key (p, q)."""
    n = p * q
    lambda_ = (p - 1) * (q - 1)
    return n, n * n, lambda_, pow(lambda_, -1, n)


class PaillierCrypto(CryptoInterface):
    """
    Paillier encryption with generator n + 1.

    The gateway key pair is kept in data_dir/keys/paillier_<address>.json, so a gateway restarted with the same
    address can still decrypt the ciphers stored before.
    """
    params = CryptoParams('paillier')

    def _generate_or_load_key_pair(self, address: str) -> KeyPair:
        key_file = os.path.join(cfg.data_dir, 'keys', f'paillier_{address}.json')
        if os.path.exists(key_file):
            mr_print(f'Loading Paillier key from {key_file}', verbosity_level=2)
            p, q = self._read_key_pair(key_file)
        else:
            mr_print('Generating Paillier key pair for the decryption gateway...', verbosity_level=2)
            p, q = self._generate_primes()
            os.makedirs(os.path.dirname(key_file), exist_ok=True)
            self._write_key_pair(key_file, p, q)
            my_logging.info(f'Stored new Paillier key of {address} in {key_file}')

        pk = self.serialize_pk(p * q, self.params.key_bytes)
        sk = self.serialize_pk(p, self.params.key_bytes) + self.serialize_pk(q, self.params.key_bytes)
        return KeyPair(PublicKeyValue(pk, params=self.params), PrivateKeyValue(sk))

    def _write_key_pair(self, key_file: str, p: int, q: int):
        with open(key_file, 'w') as f:
            json.dump({'backend': self.params.crypto_name, 'key_bits': self.params.key_bits,
                       'p': hex(p), 'q': hex(q)}, f)

    def _read_key_pair(self, key_file: str) -> Tuple[int, int]:
        with open(key_file) as f:
            try:
                stored = json.load(f)
                if stored['backend'] != self.params.crypto_name or stored['key_bits'] != self.params.key_bits:
                    raise ValueError(f'key was generated for {stored["backend"]} with {stored["key_bits"]} bits')
                return int(stored['p'], 16), int(stored['q'], 16)
            except (KeyError, TypeError, ValueError) as e:
                raise ValueError(f'Corrupt key file {key_file}: {e}')

    def _generate_primes(self) -> Tuple[int, int]:
        n_bits = self.params.key_bits
        pq_bits = (n_bits + 1) // 2
        while True:
            p = int(generate_probable_prime(exact_bits=pq_bits))
            q = int(generate_probable_prime(exact_bits=pq_bits))
            if p != q and (p * q).bit_length() == n_bits:
                return p, q

    def _enc(self, plain: int, target_pk: int) -> Tuple[List[int], List[int]]:
        n = target_pk
        n_sqr = n * n
        while True:
            random = getrandbits(n.bit_length())
            if 0 < random < n and gcd(random, n) == 1:
                break

        # (n + 1)^m = 1 + m*n (mod n^2)
        cipher = ((n * (plain % n) + 1) * pow(random, n, n_sqr)) % n_sqr
        return (self.serialize_pk(cipher, self.params.cipher_bytes_payload),
                self.serialize_pk(random, self.params.rnd_bytes))

    def _dec(self, cipher: Tuple[int, ...], sk: List[int]) -> Tuple[int, List[int]]:
        p = self.deserialize_pk(sk[:self.params.key_len])
        q = self.deserialize_pk(sk[self.params.key_len:])
        n, n_sqr, lambda_, mu = _decryption_constants(p, q)

        # plain = L(c^lambda mod n^2) * mu mod n with L(x) = (x - 1) / n
        plain = ((pow(self.deserialize_pk(cipher), lambda_, n_sqr) - 1) // n * mu) % n
        if plain > n // 2:
            plain -= n

        # Randomness is not recovered, the gateway only releases plaintexts
        return plain, [0] * self.params.randomness_len
