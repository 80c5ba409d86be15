"""
This module defines the Runtime API, an abstraction layer which is used by the review contract.

It provides high level functions for

* ledger interaction (accounts, contract addresses, block context and time),
* cryptographic operations (encryption, decryption, key generation) and key management (local keystore)
* the encrypted value store / decryption oracle capability (handles, access control, batched decryption requests)
"""

from abc import ABCMeta, abstractmethod
from typing import Tuple, List, Any, Collection, Callable, Sequence

from medreview.config import mr_print
from medreview.errors.exceptions import MedReviewError
from medreview.transaction.crypto.params import CryptoParams
from medreview.transaction.types import AddressValue, MsgStruct, BlockStruct, PublicKeyValue, PrivateKeyValue, \
    CipherValue, RandomnessValue, KeyPair, HandleValue, Value


class BlockChainError(MedReviewError):
    """
    Exception which is raised when a ledger interaction fails for any reason.
    """
    pass


class GatewayError(MedReviewError):
    """Exception which is raised when the decryption gateway refuses an operation."""
    pass


class AccessDeniedError(GatewayError):
    """Raised when a principal uses a handle it was not granted access to."""

    def __init__(self, handle: HandleValue, principal: AddressValue):
        super().__init__(f'{principal} has no access to handle {handle}')
        self.handle = handle
        self.principal = principal


class UnknownHandleError(GatewayError):
    def __init__(self, handle: HandleValue):
        super().__init__(f'Unknown handle {handle}')
        self.handle = handle


class UnknownRequestError(GatewayError):
    def __init__(self, request_id: int):
        super().__init__(f'No pending decryption request with id {request_id}')
        self.request_id = request_id


DecryptionCallback = Callable[[int, bytes, bytes], Any]
"""Signature of the callbacks invoked by the gateway: (request_id, abi encoded cleartexts, proof)"""


class ReviewLedgerInterface(metaclass=ABCMeta):
    """
    API to interact with the ledger on which the review contract executes.

    The ledger executes one operation at a time. It hands out principals (accounts) and the block context
    (msg.sender, block.timestamp, ...) of the operation which is currently executed.
    """

    @property
    def default_address(self) -> AddressValue:
        """Return the address of the account which is used when no sender is specified explicitly."""
        return self.create_test_accounts(1)[0] if self._default_address() is None else AddressValue(self._default_address())

    def create_test_accounts(self, count: int) -> Tuple[AddressValue, ...]:
        """
        Create count unused accounts.

        :param count: how many accounts to create
        :raise ValueError: if not enough unused accounts are available
        """
        if count < 1:
            raise ValueError(f'Cannot create {count} accounts')
        return tuple(AddressValue(a) for a in self._create_accounts(count))

    def new_contract_address(self, deployer: AddressValue) -> AddressValue:
        """Return a fresh address for a contract deployed by deployer."""
        return AddressValue(self._new_contract_address(deployer.val))

    def get_special_variables(self, sender: AddressValue, wei_amount: int = 0) -> Tuple[MsgStruct, BlockStruct]:
        """Return message and block context for an operation issued by sender in the current block."""
        number, timestamp = self._current_block()
        mr_print(f'Current block timestamp: {timestamp}', verbosity_level=2)
        return MsgStruct(sender, wei_amount), BlockStruct(AddressValue(self._coinbase()), self._gas_limit(), number, timestamp)

    @property
    def timestamp(self) -> int:
        """Timestamp of the block in which the next operation executes."""
        return self._current_block()[1]

    def advance_time(self, seconds: int):
        """
        Move the ledger clock forward.

        :raise ValueError: if seconds is negative
        """
        if seconds < 0:
            raise ValueError('Time can only move forward')
        self._advance_time(seconds)

    @abstractmethod
    def mine(self):
        """Seal the current block, subsequent operations execute in a new block."""
        pass

    @classmethod
    def is_debug_backend(cls) -> bool:
        return False

    # Interface implementation

    @abstractmethod
    def _default_address(self) -> Any:
        pass

    @abstractmethod
    def _create_accounts(self, count: int) -> List[Any]:
        pass

    @abstractmethod
    def _new_contract_address(self, deployer: bytes) -> Any:
        pass

    @abstractmethod
    def _current_block(self) -> Tuple[int, int]:
        """Return (number, timestamp) of the block in which the next operation executes."""
        pass

    @abstractmethod
    def _coinbase(self) -> Any:
        pass

    @abstractmethod
    def _gas_limit(self) -> int:
        pass

    @abstractmethod
    def _advance_time(self, seconds: int):
        pass


class KeystoreInterface(metaclass=ABCMeta):
    """API to add and retrieve local key pairs."""

    def __init__(self, crypto_params: CryptoParams):
        self.crypto_params = crypto_params

    @abstractmethod
    def add_keypair(self, address: AddressValue, key_pair: KeyPair):
        pass

    def getPk(self, address: AddressValue) -> PublicKeyValue:
        """
        Return public key for address.

        :param address: address
        :raise KeyError: if no key pair is known for address
        :return: the public key
        """
        return self.pk(address)

    @abstractmethod
    def sk(self, address: AddressValue) -> PrivateKeyValue:
        """
        Return secret key for address from the local key store.

        :raise KeyError: if key not in local store
        """
        pass

    @abstractmethod
    def pk(self, address: AddressValue) -> PublicKeyValue:
        """
        Return public key for address from the local key store.

        :raise KeyError: if key not in local store
        """
        pass


class CryptoInterface(metaclass=ABCMeta):
    """API to generate cryptographic keys and perform encryption/decryption operations."""

    def __init__(self, keystore: KeystoreInterface):
        self.keystore = keystore

    @property
    @abstractmethod
    def params(self) -> CryptoParams:
        pass

    def generate_or_load_key_pair(self, address: AddressValue):
        """
        Store cryptographic keys for the account with the specified address in the keystore.

        If the pre-existing keys are found for this address, they are loaded from the filesystem, \
        otherwise new keys are generated.

        :param address: the address for which to generate keys
        """
        self.keystore.add_keypair(address, self._generate_or_load_key_pair(address.val.hex()))

    def enc(self, plain: int, target_addr: AddressValue) -> Tuple[CipherValue, RandomnessValue]:
        """
        Encrypt plain for receiver with target_addr.

        :param plain: plain text to encrypt
        :param target_addr: address of the receiver for whom to encrypt
        :return: (cipher, randomness which was used to encrypt plain)
        """
        assert not isinstance(plain, Value), f"Tried to encrypt value of type {type(plain).__name__}"
        assert isinstance(target_addr, AddressValue)
        mr_print(f'Encrypting value {plain} for destination "{target_addr}"', verbosity_level=2)

        pk = self.deserialize_pk(self.keystore.getPk(target_addr)[:])
        while True:
            # Retry until cipher text is not 0
            cipher, rnd = self._enc(int(plain), pk)
            cipher = CipherValue(cipher, params=self.params)
            rnd = RandomnessValue(rnd, params=self.params)
            if cipher != CipherValue(params=self.params):
                break

        return cipher, rnd

    def dec(self, cipher: CipherValue, my_addr: AddressValue) -> Tuple[int, RandomnessValue]:
        """
        Decrypt cipher encrypted for my_addr.

        :param cipher: encrypted value
        :param my_addr: cipher is encrypted for this address
        :return: (plain, randomness which was used to encrypt plain)
        """
        assert isinstance(cipher, CipherValue), f"Tried to decrypt value of type {type(cipher).__name__}"
        assert isinstance(my_addr, AddressValue)
        mr_print(f'Decrypting value {cipher} for {my_addr}', verbosity_level=2)

        if cipher == CipherValue(params=self.params):
            # Ciphertext is all zeros, i.e. uninitialized -> zero
            return 0, RandomnessValue(params=self.params)
        else:
            sk = self.keystore.sk(my_addr)
            plain, rnd = self._dec(cipher[:], sk.val)
            return plain, RandomnessValue(rnd, params=self.params)

    def serialize_pk(self, key: int, total_bytes: int) -> List[int]:
        """Serialize a large integer into an array of {params.cipher_chunk_size}-byte ints."""
        data = key.to_bytes(total_bytes, byteorder='big')
        return CryptoInterface.pack_byte_array(data, self.params.cipher_chunk_size)

    def deserialize_pk(self, arr: Collection[int]) -> int:
        """Deserialize an array of {params.cipher_chunk_size}-byte ints into a single large int"""
        data = CryptoInterface.unpack_to_byte_array(arr, self.params.cipher_chunk_size)
        return int.from_bytes(data, byteorder='big')

    @staticmethod
    def pack_byte_array(bin: bytes, chunk_size) -> List[int]:
        """Pack byte array into an array of {chunk_size}-byte ints (least significant chunk first)"""
        total_bytes = len(bin)
        first_chunk_size = total_bytes % chunk_size
        arr = [] if first_chunk_size == 0 else [int.from_bytes(bin[:first_chunk_size], byteorder='big')]
        for i in range(first_chunk_size, total_bytes, chunk_size):
            arr.append(int.from_bytes(bin[i:i + chunk_size], byteorder='big'))
        return list(reversed(arr))

    @staticmethod
    def unpack_to_byte_array(arr: Collection[int], chunk_size: int) -> bytes:
        """Unpack an array of {chunk_size}-byte ints into a byte array"""
        return b''.join(chunk.to_bytes(chunk_size, byteorder='big') for chunk in reversed(list(arr)))

    # Interface implementation

    @abstractmethod
    def _generate_or_load_key_pair(self, address: str) -> KeyPair:
        pass

    @abstractmethod
    def _enc(self, plain: int, target_pk: int) -> Tuple[List[int], List[int]]:
        pass

    @abstractmethod
    def _dec(self, cipher: Tuple[int, ...], sk: Any) -> Tuple[int, List[int]]:
        pass


class FheGatewayInterface(metaclass=ABCMeta):
    """
    API of the encrypted value store and its decryption oracle.

    Contracts only ever see opaque handles. Plaintexts are released either to principals which were granted access
    to a handle, or as a signed cleartext bundle delivered asynchronously to a decryption callback.
    """

    @property
    @abstractmethod
    def address(self) -> AddressValue:
        """Principal which relays decryption results."""
        pass

    @abstractmethod
    def encrypt(self, plain: int, owner: AddressValue) -> HandleValue:
        """
        Encrypt plain, store the cipher text and grant owner access to the resulting handle.

        :return: opaque handle referring to the cipher text
        """
        pass

    @abstractmethod
    def allow(self, handle: HandleValue, principal: AddressValue):
        """
        Grant principal access to handle (idempotent, additive).

        :raise UnknownHandleError: if handle does not exist
        """
        pass

    @abstractmethod
    def is_allowed(self, handle: HandleValue, principal: AddressValue) -> bool:
        pass

    @abstractmethod
    def request_decryption(self, handles: Sequence[HandleValue], callback: DecryptionCallback, requester: AddressValue) -> int:
        """
        Queue a batched decryption request.

        The callback is invoked later (never from within this call) with the cleartexts of all handles in order.

        :raise AccessDeniedError: if requester lacks access to any handle
        :return: request id
        """
        pass

    @abstractmethod
    def verify(self, request_id: int, cleartexts: bytes, proof: bytes) -> bool:
        """Return whether proof attests that cleartexts is the decryption result of request request_id."""
        pass

    @abstractmethod
    def cancel(self, request_id: int):
        """
        Drop a queued request without delivering it.

        :raise UnknownRequestError: if the request is not pending
        """
        pass
