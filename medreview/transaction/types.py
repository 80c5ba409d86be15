from typing import Optional, Collection, Any, Dict, List, Union

from web3 import Web3

from medreview.transaction.crypto.params import CryptoParams


class Value(tuple):
    def __new__(cls, contents: Collection):
        return super(Value, cls).__new__(cls, contents)

    def __str__(self):
        return f'{type(self).__name__}({super().__str__()})'

    def __eq__(self, other):
        return isinstance(other, type(self)) and super().__eq__(other)

    def __hash__(self):
        return self[:].__hash__()

    @staticmethod
    def unwrap_values(v: Union[int, bool, 'Value', List, Dict]) -> Union[int, List, Dict]:
        if isinstance(v, List):
            return list(map(Value.unwrap_values, v))
        elif isinstance(v, (AddressValue, HandleValue)):
            return str(v)
        elif isinstance(v, Dict):
            return {key: Value.unwrap_values(vals) for key, vals in v.items()}
        else:
            return list(v[:]) if isinstance(v, Value) else v


class CipherValue(Value):
    def __new__(cls, contents: Optional[Collection] = None, *, params: CryptoParams):
        content = [0] * params.cipher_len
        if contents:
            content[:len(contents)] = contents[:]
        return super(CipherValue, cls).__new__(cls, content)

    def __init__(self, contents: Optional[Collection] = None, *, params: CryptoParams):
        super().__init__()
        self.params = params

    def __eq__(self, other):
        return isinstance(other, CipherValue) and self.params == other.params and super().__eq__(other)

    def __hash__(self):
        return self[:].__hash__()


class PrivateKeyValue(Value):
    def __new__(cls, sk: Optional[Any] = None):
        return super(PrivateKeyValue, cls).__new__(cls, [sk])

    @property
    def val(self):
        return self[0]


class PublicKeyValue(Value):
    def __new__(cls, contents: Optional[Collection] = None, *, params: CryptoParams):
        if contents is None:
            return super(PublicKeyValue, cls).__new__(cls, [0] * params.key_len)
        else:
            assert len(contents) == params.key_len
            return super(PublicKeyValue, cls).__new__(cls, contents)

    def __init__(self, contents: Optional[Collection] = None, *, params: CryptoParams):
        super().__init__()
        self.params = params


class RandomnessValue(Value):
    def __new__(cls, contents: Optional[Collection] = None, *, params: CryptoParams):
        if contents is None:
            return super(RandomnessValue, cls).__new__(cls, [0] * params.randomness_len)
        else:
            assert len(contents) == params.randomness_len
            return super(RandomnessValue, cls).__new__(cls, contents)

    def __init__(self, contents: Optional[Collection] = None, *, params: CryptoParams):
        super().__init__()
        self.params = params


class AddressValue(Value):
    def __new__(cls, val: Union[str, int, bytes]):
        if not isinstance(val, bytes):
            if isinstance(val, str):
                val = int(val, 16)
            val = val.to_bytes(20, byteorder='big')
        if len(val) != 20:
            raise ValueError(f'Address must be 20 bytes long (got {len(val)})')
        return super(AddressValue, cls).__new__(cls, [val])

    @property
    def val(self) -> bytes:
        return self[0]

    @property
    def is_zero(self) -> bool:
        return not any(self.val)

    def __str__(self):
        return Web3.to_checksum_address(self.val)

    def __repr__(self):
        return f'AddressValue({self})'


ZERO_ADDRESS = AddressValue(0)


class HandleValue(Value):
    """Opaque reference to a ciphertext held by the decryption gateway."""

    def __new__(cls, val: Union[str, bytes]):
        if isinstance(val, str):
            val = bytes.fromhex(val[2:] if val.startswith('0x') else val)
        if len(val) != 32:
            raise ValueError(f'Handle must be 32 bytes long (got {len(val)})')
        return super(HandleValue, cls).__new__(cls, [val])

    @property
    def val(self) -> bytes:
        return self[0]

    def __str__(self):
        return '0x' + self.val.hex()

    def __repr__(self):
        return f'HandleValue({self})'


class KeyPair:
    def __init__(self, pk: PublicKeyValue, sk: PrivateKeyValue):
        self.pk = pk
        self.sk = sk


class MsgStruct:
    def __init__(self, sender: AddressValue, value: int = 0):
        super().__init__()
        self.__sender = sender
        self.__value = value

    @property
    def sender(self) -> AddressValue:
        return self.__sender

    @property
    def value(self) -> int:
        return self.__value


class BlockStruct:
    def __init__(self, coinbase: AddressValue, gaslimit: int, number: int, timestamp: int):
        self.__coinbase = coinbase
        self.__gaslimit = gaslimit
        self.__number = number
        self.__timestamp = timestamp

    @property
    def coinbase(self) -> AddressValue:
        return self.__coinbase

    @property
    def gaslimit(self) -> int:
        return self.__gaslimit

    @property
    def number(self) -> int:
        return self.__number

    @property
    def timestamp(self) -> int:
        return self.__timestamp
