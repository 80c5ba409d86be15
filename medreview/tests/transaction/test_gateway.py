import os
import unittest

from eth_abi import decode

from medreview.tests.medreview_unit_test import MedReviewTestCase
from medreview.transaction.interface import AccessDeniedError, UnknownHandleError, UnknownRequestError
from medreview.transaction.runtime import Runtime


class Recorder:
    def __init__(self, fail_times: int = 0):
        self.calls = []
        self.fail_times = fail_times

    def __call__(self, request_id: int, cleartexts: bytes, proof: bytes):
        if self.fail_times > 0:
            self.fail_times -= 1
            raise RuntimeError('callback failed')
        self.calls.append((request_id, cleartexts, proof))


class GatewayTests:
    def setUp(self) -> None:
        super().setUp()
        self.gateway = Runtime.gateway()
        self.owner, self.other = Runtime.blockchain().create_test_accounts(2)

    def test_access_control(self):
        handle = self.gateway.encrypt(42, self.owner)
        self.assertTrue(self.gateway.is_allowed(handle, self.owner))
        self.assertFalse(self.gateway.is_allowed(handle, self.other))
        self.assertEqual(42, self.gateway.user_decrypt(handle, self.owner))
        with self.assertRaises(AccessDeniedError):
            self.gateway.user_decrypt(handle, self.other)

        self.gateway.allow(handle, self.other)
        self.gateway.allow(handle, self.other)
        self.assertTrue(self.gateway.is_allowed(handle, self.owner))
        self.assertEqual(42, self.gateway.user_decrypt(handle, self.other))

    def test_handles_are_unique(self):
        self.assertNotEqual(self.gateway.encrypt(1, self.owner), self.gateway.encrypt(1, self.owner))

    def test_unknown_handle(self):
        handle = self.gateway.encrypt(1, self.owner)
        unknown = type(handle)(bytes(32))
        self.assertFalse(self.gateway.is_allowed(unknown, self.owner))
        with self.assertRaises(UnknownHandleError):
            self.gateway.allow(unknown, self.owner)
        with self.assertRaises(UnknownHandleError):
            self.gateway.request_decryption([unknown], Recorder(), self.owner)

    def test_request_requires_access(self):
        handles = [self.gateway.encrypt(1, self.owner), self.gateway.encrypt(2, self.other)]
        with self.assertRaises(AccessDeniedError):
            self.gateway.request_decryption(handles, Recorder(), self.owner)
        with self.assertRaises(ValueError):
            self.gateway.request_decryption([], Recorder(), self.owner)
        self.assertEqual([], self.gateway.pending_requests())

    def test_fulfill(self):
        values = [5, 4, 3, 1, 2]
        handles = [self.gateway.encrypt(v, self.owner) for v in values]
        callback = Recorder()
        request_id = self.gateway.request_decryption(handles, callback, self.owner)
        self.assertEqual([], callback.calls)
        self.assertEqual([request_id], self.gateway.pending_requests())

        self.gateway.fulfill(request_id)
        self.assertEqual(1, len(callback.calls))
        delivered_id, cleartexts, proof = callback.calls[0]
        self.assertEqual(request_id, delivered_id)
        self.assertEqual(values, list(decode(['uint256'] * len(values), cleartexts)))
        self.assertTrue(self.gateway.verify(request_id, cleartexts, proof))
        self.assertFalse(self.gateway.verify(request_id + 1, cleartexts, proof))
        self.assertFalse(self.gateway.verify(request_id, cleartexts + b'\x00', proof))
        self.assertEqual([], self.gateway.pending_requests())
        with self.assertRaises(UnknownRequestError):
            self.gateway.fulfill(request_id)

    def test_fulfill_pending_in_order(self):
        handle = self.gateway.encrypt(3, self.owner)
        callback = Recorder()
        ids = [self.gateway.request_decryption([handle], callback, self.owner) for _ in range(3)]
        self.assertEqual(sorted(ids), ids)
        self.assertEqual(ids, self.gateway.fulfill_pending())
        self.assertEqual(ids, [c[0] for c in callback.calls])

    def test_failing_callback_keeps_request(self):
        callback = Recorder(fail_times=1)
        request_id = self.gateway.request_decryption([self.gateway.encrypt(3, self.owner)], callback, self.owner)
        with self.assertRaises(RuntimeError):
            self.gateway.fulfill(request_id)
        self.assertEqual([request_id], self.gateway.pending_requests())

        self.gateway.fulfill(request_id)
        self.assertEqual([request_id], [c[0] for c in callback.calls])
        self.assertEqual([], self.gateway.pending_requests())

    def test_cancel(self):
        callback = Recorder()
        request_id = self.gateway.request_decryption([self.gateway.encrypt(3, self.owner)], callback, self.owner)
        self.gateway.cancel(request_id)
        self.assertEqual([], self.gateway.fulfill_pending())
        self.assertEqual([], callback.calls)
        with self.assertRaises(UnknownRequestError):
            self.gateway.cancel(request_id)

    def test_verify_rejects_garbage(self):
        cleartexts = b'\x00' * 32
        proof = self.gateway.attest(1, cleartexts)
        self.assertTrue(self.gateway.verify(1, cleartexts, proof))
        for args in ((-1, cleartexts, proof), (1, cleartexts, b''), (1, cleartexts, None), (1, 'text', proof),
                     ('1', cleartexts, proof)):
            self.assertFalse(self.gateway.verify(*args))


class TestDummyHomGateway(GatewayTests, MedReviewTestCase):
    pass


class TestPaillierGateway(GatewayTests, MedReviewTestCase):
    crypto_backend = 'paillier'

    @unittest.skipIf('MEDREVIEW_SKIP_REAL_ENC_TESTS' in os.environ and os.environ['MEDREVIEW_SKIP_REAL_ENC_TESTS'] == '1', 'real encryption tests disabled')
    def setUp(self) -> None:
        super().setUp()
