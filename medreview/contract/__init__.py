"""
This package contains the anonymous medical review contract.

==========
Submodules
==========
* :py:mod:`.medical_review`: The contract: doctor registry, review submission and rating aggregation.
* :py:mod:`.state`: Records stored by the contract.
* :py:mod:`.events`: Events emitted by the contract and the event log.
* :py:mod:`.deployment`: Deployment on the configured runtime and deployment records.
"""
