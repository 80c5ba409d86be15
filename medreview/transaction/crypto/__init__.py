"""
This package contains the cryptography backends used by the decryption gateway.

==========
Submodules
==========
* :py:mod:`.dummy_hom`: Fast but insecure keys derived from the address (enc = plain * key + 1) for debugging
* :py:mod:`.paillier`: Additively homomorphic Paillier encryption
* :py:mod:`.meta`: Size parameters of all backends
* :py:mod:`.params`: Accessors for the size parameters
"""
