"""
This module defines the medreview options which are configurable by the user via command line arguments.

The argument parser in :py:mod:`.__main__` uses the docstrings, type hints and _values for the help
 strings and the _values fields for autocompletion

WARNING: This is one of the only medreview modules that is imported before argcomplete.autocomplete is called. \
For performance reasons it should thus not have any import side-effects or perform any expensive operations during import.
"""
from typing import Any

from appdirs import AppDirs


def _check_is_one_of(val: str, legal_vals):
    if val not in legal_vals:
        raise ValueError(f'Invalid config value {val}, must be one of {legal_vals}')


def _type_check(val: Any, t):
    if not isinstance(val, t):
        raise ValueError(f'Value {val} has wrong type (expected {t})')


def _check_positive(val: int):
    _type_check(val, int)
    if isinstance(val, bool) or val <= 0:
        raise ValueError(f'Value {val} must be a positive integer')


class UserConfig:
    def __init__(self):
        self._appdirs = AppDirs('medreview', appauthor=False, version=None, roaming=True)

        # User configuration
        # Each attribute must have a type hint and a docstring for correct help strings in the commandline interface.
        # If 'Available Options: [...]' is specified, the options are used for autocomplete suggestions.

        self._crypto_backend: str = 'paillier'
        self._crypto_backend_values = ['dummy-hom', 'paillier']

        self._blockchain_backend: str = 'local'
        self._blockchain_backend_values = ['local', 'w3-eth-tester']

        self._aggregation_min_reviews: int = 3
        self._aggregation_cooldown: int = 7 * 24 * 60 * 60
        self._aggregation_request_timeout: int = 24 * 60 * 60
        self._max_comment_length: int = 500

        self._data_dir: str = self._appdirs.user_data_dir
        self._log_dir: str = self._appdirs.user_log_dir
        self._verbosity: int = 1

    @property
    def crypto_backend(self) -> str:
        """
        Additively homomorphic encryption backend used by the decryption gateway.

        Available Options: [dummy-hom, paillier]
        """
        return self._crypto_backend

    @crypto_backend.setter
    def crypto_backend(self, val: str):
        _check_is_one_of(val, self._crypto_backend_values)
        self._crypto_backend = val

    @property
    def blockchain_backend(self) -> str:
        """
        Backend which provides accounts and block context (timestamps) to the review contract.

        local         : deterministic in-process ledger
        w3-eth-tester : web3 connected to an in-memory eth-tester chain

        Available Options: [local, w3-eth-tester]
        """
        return self._blockchain_backend

    @blockchain_backend.setter
    def blockchain_backend(self, val: str):
        _check_is_one_of(val, self._blockchain_backend_values)
        self._blockchain_backend = val

    @property
    def aggregation_min_reviews(self) -> int:
        """Minimum number of reviews a doctor needs before an aggregation can be requested."""
        return self._aggregation_min_reviews

    @aggregation_min_reviews.setter
    def aggregation_min_reviews(self, val: int):
        _check_positive(val)
        self._aggregation_min_reviews = val

    @property
    def aggregation_cooldown(self) -> int:
        """Seconds which must pass after a rating was revealed before the same doctor can be aggregated again."""
        return self._aggregation_cooldown

    @aggregation_cooldown.setter
    def aggregation_cooldown(self, val: int):
        _type_check(val, int)
        if val < 0:
            raise ValueError(f'Value {val} must not be negative')
        self._aggregation_cooldown = val

    @property
    def aggregation_request_timeout(self) -> int:
        """
        Seconds after which an outstanding decryption request counts as expired.

        Expired requests keep blocking new aggregations until the operator abandons them.
        """
        return self._aggregation_request_timeout

    @aggregation_request_timeout.setter
    def aggregation_request_timeout(self, val: int):
        _check_positive(val)
        self._aggregation_request_timeout = val

    @property
    def max_comment_length(self) -> int:
        """Maximum number of characters of a review comment."""
        return self._max_comment_length

    @max_comment_length.setter
    def max_comment_length(self, val: int):
        _check_positive(val)
        self._max_comment_length = val

    @property
    def data_dir(self) -> str:
        """Path to directory where to store user data (e.g. generated gateway keys)."""
        return self._data_dir

    @data_dir.setter
    def data_dir(self, val: str):
        _type_check(val, str)
        import os
        if not os.path.exists(val):
            os.makedirs(val)
        self._data_dir = val

    @property
    def log_dir(self) -> str:
        """Path to default log directory."""
        return self._log_dir

    @log_dir.setter
    def log_dir(self, val: str):
        _type_check(val, str)
        import os
        if not os.path.exists(val):
            os.makedirs(val)
        self._log_dir = val

    @property
    def verbosity(self) -> int:
        """
        If 0, no output
        If 1, normal output
        If 2, verbose output

        This includes for example gateway encryption/decryption output and
        information about intermediate scenario steps.
        """
        return self._verbosity

    @verbosity.setter
    def verbosity(self, val: int):
        _type_check(val, int)
        self._verbosity = val
