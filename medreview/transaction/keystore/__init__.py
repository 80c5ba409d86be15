"""
This package contains the keystore backends.

==========
Submodules
==========
* :py:mod:`.simple`: Basic key store implementation
"""

from .simple import SimpleKeystore
