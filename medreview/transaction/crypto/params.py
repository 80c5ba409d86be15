import math

from medreview.transaction.crypto.meta import cryptoparams


class CryptoParams:

    def __init__(self, crypto_name: str):
        if crypto_name not in cryptoparams:
            raise ValueError(f'Unknown crypto backend {crypto_name}')
        self.crypto_name = crypto_name

    def __eq__(self, other):
        return isinstance(other, CryptoParams) and self.crypto_name == other.crypto_name

    def __hash__(self):
        return self.crypto_name.__hash__()

    def __repr__(self):
        return f'CryptoParams({self.crypto_name!r})'

    @property
    def key_bits(self) -> int:
        return cryptoparams[self.crypto_name]['key_bits']

    @property
    def key_bytes(self) -> int:
        return self.key_bits // 8

    @property
    def key_len(self) -> int:
        return int(math.ceil(self.key_bytes / self.cipher_chunk_size))

    @property
    def rnd_bytes(self) -> int:
        return cryptoparams[self.crypto_name]['rnd_bytes']

    @property
    def rnd_chunk_size(self) -> int:
        return cryptoparams[self.crypto_name]['rnd_chunk_size']

    @property
    def randomness_len(self) -> int:
        return int(math.ceil(self.rnd_bytes / self.rnd_chunk_size))

    @property
    def cipher_bytes_payload(self) -> int:
        return cryptoparams[self.crypto_name]['cipher_payload_bytes']

    @property
    def cipher_len(self) -> int:
        return int(math.ceil(self.cipher_bytes_payload / self.cipher_chunk_size))

    @property
    def cipher_chunk_size(self) -> int:
        return cryptoparams[self.crypto_name]['cipher_chunk_size']
