"""
This package contains the exceptions which may be raised by public medreview interfaces.

==========
Submodules
==========
* :py:mod:`.exceptions`: Exception hierarchy (authorization, validation, state-conflict and integrity errors)
"""
