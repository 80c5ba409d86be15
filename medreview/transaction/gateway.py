"""
Encrypted value store and decryption oracle.

The gateway keeps all cipher texts and hands out opaque handles instead. Access to a handle is tracked per principal.
Batched decryption requests are queued and later fulfilled by the oracle side (:py:meth:`DecryptionGateway.fulfill`),
which delivers the abi encoded cleartexts together with an ECDSA signature over (request id, cleartexts) to the
callback registered with the request.
"""

import threading
from collections import OrderedDict
from typing import Dict, List, NamedTuple, Sequence, Set, Tuple

from Crypto.Hash import SHA256
from Crypto.PublicKey import ECC
from Crypto.Signature import DSS
from eth_abi import encode
from web3 import Web3

from medreview import my_logging
from medreview.config import mr_print
from medreview.my_logging.log_context import log_context
from medreview.transaction.interface import FheGatewayInterface, CryptoInterface, ReviewLedgerInterface, \
    DecryptionCallback, AccessDeniedError, UnknownHandleError, UnknownRequestError
from medreview.transaction.types import AddressValue, HandleValue, CipherValue
from medreview.utils.timer import time_measure


class PendingDecryption(NamedTuple):
    request_id: int
    handles: Tuple[HandleValue, ...]
    callback: DecryptionCallback
    requester: AddressValue


class DecryptionGateway(FheGatewayInterface):
    def __init__(self, crypto: CryptoInterface, ledger: ReviewLedgerInterface) -> None:
        super().__init__()
        self.crypto = crypto
        self.__address = ledger.create_test_accounts(1)[0]
        self.crypto.generate_or_load_key_pair(self.__address)
        self.__signing_key = ECC.generate(curve='P-256')

        self.__ciphers: Dict[HandleValue, CipherValue] = {}
        self.__acl: Dict[HandleValue, Set[AddressValue]] = {}
        self.__pending: 'OrderedDict[int, PendingDecryption]' = OrderedDict()
        self.__next_request_id = 1
        self.__delivering: Set[int] = set()
        self.__handle_nonce = 0
        self._lock = threading.RLock()

    @property
    def address(self) -> AddressValue:
        return self.__address

    @property
    def public_key(self) -> ECC.EccKey:
        """Key which verifies decryption proofs."""
        return self.__signing_key.public_key()

    def encrypt(self, plain: int, owner: AddressValue) -> HandleValue:
        with self._lock:
            cipher, _ = self.crypto.enc(plain, self.__address)
            handle = self._new_handle(cipher)
            self.__ciphers[handle] = cipher
            self.__acl[handle] = {owner}
            mr_print(f'Stored cipher for handle {handle}', verbosity_level=2)
            return handle

    def allow(self, handle: HandleValue, principal: AddressValue):
        with self._lock:
            if handle not in self.__acl:
                raise UnknownHandleError(handle)
            self.__acl[handle].add(principal)

    def is_allowed(self, handle: HandleValue, principal: AddressValue) -> bool:
        return principal in self.__acl.get(handle, ())

    def user_decrypt(self, handle: HandleValue, principal: AddressValue) -> int:
        """
        Decrypt a single handle for a principal which was granted access to it.

        :raise UnknownHandleError: if handle does not exist
        :raise AccessDeniedError: if principal has no access to handle
        """
        with self._lock:
            self._check_access(handle, principal)
            plain, _ = self.crypto.dec(self.__ciphers[handle], self.__address)
            return plain

    def request_decryption(self, handles: Sequence[HandleValue], callback: DecryptionCallback, requester: AddressValue) -> int:
        with self._lock:
            if not handles:
                raise ValueError('Decryption request without handles')
            for handle in handles:
                self._check_access(handle, requester)

            request_id = self.__next_request_id
            self.__next_request_id += 1
            self.__pending[request_id] = PendingDecryption(request_id, tuple(handles), callback, requester)
            my_logging.info(f'Queued decryption request {request_id} for {len(handles)} handles from {requester}')
            return request_id

    def pending_requests(self) -> List[int]:
        return list(self.__pending.keys())

    def cancel(self, request_id: int):
        with self._lock:
            if request_id not in self.__pending:
                raise UnknownRequestError(request_id)
            del self.__pending[request_id]
            my_logging.info(f'Cancelled decryption request {request_id}')

    def fulfill(self, request_id: int):
        """
        Decrypt the handles of a pending request and deliver the signed result to its callback.

        The callback runs outside of the gateway lock. The request stays pending if the callback raises.

        :raise UnknownRequestError: if the request is not pending or its delivery is already running
        """
        with self._lock:
            pending = self.__pending.get(request_id)
            if pending is None or request_id in self.__delivering:
                raise UnknownRequestError(request_id)
            self.__delivering.add(request_id)
            ciphers = [self.__ciphers[h] for h in pending.handles]

        try:
            with time_measure('gateway_decrypt'):
                plains = [self.crypto.dec(c, self.__address)[0] for c in ciphers]
            cleartexts = encode(['uint256'] * len(plains), plains)
            proof = self.attest(request_id, cleartexts)

            with log_context('fulfill', f'request_{request_id}'):
                mr_print(f'Delivering decryption result for request {request_id}')
                pending.callback(request_id, cleartexts, proof)
            with self._lock:
                self.__pending.pop(request_id, None)
            my_logging.data('fulfilled_request', request_id)
        finally:
            with self._lock:
                self.__delivering.discard(request_id)

    def fulfill_pending(self) -> List[int]:
        """Fulfill all pending requests in the order in which they were issued."""
        delivered = []
        for request_id in self.pending_requests():
            self.fulfill(request_id)
            delivered.append(request_id)
        return delivered

    def attest(self, request_id: int, cleartexts: bytes) -> bytes:
        """Return the oracle signature over a decryption result."""
        return DSS.new(self.__signing_key, 'fips-186-3').sign(self._proof_digest(request_id, cleartexts))

    def verify(self, request_id: int, cleartexts: bytes, proof: bytes) -> bool:
        verifier = DSS.new(self.public_key, 'fips-186-3')
        try:
            verifier.verify(self._proof_digest(request_id, cleartexts), proof)
        except (ValueError, TypeError, OverflowError, AttributeError):
            return False
        return True

    def _check_access(self, handle: HandleValue, principal: AddressValue):
        if handle not in self.__acl:
            raise UnknownHandleError(handle)
        if principal not in self.__acl[handle]:
            raise AccessDeniedError(handle, principal)

    def _new_handle(self, cipher: CipherValue) -> HandleValue:
        self.__handle_nonce += 1
        data = self.__handle_nonce.to_bytes(32, byteorder='big')
        data += CryptoInterface.unpack_to_byte_array(cipher[:], cipher.params.cipher_chunk_size)
        return HandleValue(bytes(Web3.keccak(data)))

    @staticmethod
    def _proof_digest(request_id: int, cleartexts: bytes) -> SHA256.SHA256Hash:
        return SHA256.new(request_id.to_bytes(32, byteorder='big') + bytes(cleartexts))
