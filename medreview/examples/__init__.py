"""
This package contains transaction scenarios for the review contract and the simulator which executes them.

==========
Submodules
==========
* :py:mod:`.scenario`: Builder for scenarios (transactions, oracle deliveries, time travel and state assertions)
* :py:mod:`.simulation`: Executes a scenario on the configured runtime backends
* :py:mod:`.example_scenarios`: Collects the built-in scenarios from the :py:mod:`.scenarios` package
"""
