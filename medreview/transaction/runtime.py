from medreview.config import cfg
from medreview.transaction.blockchain import LocalLedger, Web3TesterLedger
from medreview.transaction.crypto.dummy_hom import DummyHomCrypto
from medreview.transaction.crypto.paillier import PaillierCrypto
from medreview.transaction.gateway import DecryptionGateway
from medreview.transaction.interface import ReviewLedgerInterface, CryptoInterface, KeystoreInterface
from medreview.transaction.keystore import SimpleKeystore

_crypto_classes = {
    'dummy-hom': DummyHomCrypto,
    'paillier': PaillierCrypto
}

_blockchain_classes = {
    'local': LocalLedger,
    'w3-eth-tester': Web3TesterLedger
}


class Runtime:
    """
    Provides global access to singleton runtime API backend instances.
    See interface.py for more information.

    The global configuration in config.py determines which backends are made available via the Runtime class.
    """

    __blockchain = None
    __crypto = {}
    __keystore = {}
    __gateway = None

    @staticmethod
    def reset():
        """
        Reboot the runtime.

        When a new backend is selected in the configuration, it will only be loaded after a runtime reset.
        All encrypted values and pending decryption requests are dropped together with the gateway.
        """
        Runtime.__blockchain = None
        Runtime.__crypto = {}
        Runtime.__keystore = {}
        Runtime.__gateway = None

    @staticmethod
    def blockchain() -> ReviewLedgerInterface:
        """Return singleton object which implements ReviewLedgerInterface."""
        if Runtime.__blockchain is None:
            Runtime.__blockchain = _blockchain_classes[cfg.blockchain_backend]()
        return Runtime.__blockchain

    @staticmethod
    def keystore() -> KeystoreInterface:
        """Return object which implements KeystoreInterface for the configured crypto backend."""
        crypto_backend = cfg.crypto_backend
        if crypto_backend not in Runtime.__keystore:
            Runtime.__keystore[crypto_backend] = SimpleKeystore(_crypto_classes[crypto_backend].params)
        return Runtime.__keystore[crypto_backend]

    @staticmethod
    def crypto() -> CryptoInterface:
        """Return object which implements CryptoInterface for the configured crypto backend."""
        crypto_backend = cfg.crypto_backend
        if crypto_backend not in Runtime.__crypto:
            Runtime.__crypto[crypto_backend] = _crypto_classes[crypto_backend](Runtime.keystore())
        return Runtime.__crypto[crypto_backend]

    @staticmethod
    def gateway() -> DecryptionGateway:
        """Return the singleton decryption gateway, which encrypts with the configured crypto backend."""
        if Runtime.__gateway is None:
            Runtime.__gateway = DecryptionGateway(Runtime.crypto(), Runtime.blockchain())
        return Runtime.__gateway
