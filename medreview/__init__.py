"""
The main medreview package.

==========
Submodules
==========
* :py:mod:`.__main__`: Command line interface
* :py:mod:`.config`: Global configuration (both user-configuration as well as internal configuration)

===========
Subpackages
===========
* :py:mod:`.contract`: The anonymous medical review contract
* :py:mod:`.errors`: Defines exceptions which may be raised by public medreview interfaces
* :py:mod:`.examples`: Transaction scenarios and their simulator
* :py:mod:`.my_logging`: Logging facilities
* :py:mod:`.transaction`: Runtime API (ledger, encryption and decryption gateway)
* :py:mod:`.utils`: Internal helper functionality
"""
