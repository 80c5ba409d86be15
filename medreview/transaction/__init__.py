"""
This package contains the runtime API, which the review contract uses to reach its environment.

==========
Submodules
==========
* :py:mod:`.interface`: Abstract interfaces of all runtime backends (ledger, crypto, keystore, decryption gateway).
* :py:mod:`.gateway`: Encrypted value store with access control and an asynchronous decryption oracle.
* :py:mod:`.runtime`: Singleton access to the backends selected in the configuration.
* :py:mod:`.types`: Wrapper types for addresses, handles, keys and cipher texts.

===========
Subpackages
===========
* :py:mod:`.blockchain`: Ledger backends
* :py:mod:`.crypto`: Encryption backends
* :py:mod:`.keystore`: Key store backends
"""
