import json
import os
from contextlib import contextmanager
from typing import Dict, Any, ContextManager, Tuple

from medreview.config_user import UserConfig
from medreview.config_version import Versions


def mr_print(*args, verbosity_level=1, **kwargs):
    if (verbosity_level <= cfg.verbosity) and not cfg.is_unit_test:
        print(*args, **kwargs)


def mr_print_banner(title: str):
    l = len(title) + 4
    mr_print(f'{"#"*l}\n# {title} #\n{"#"*l}\n')


class Config(UserConfig):
    def __init__(self):
        super().__init__()

        # Internal values

        self._is_unit_test = False

    def _load_cfg_file_if_exists(self, filename):
        if os.path.exists(filename):
            with open(filename) as conf:
                try:
                    self.override_defaults(json.load(conf))
                except ValueError as e:
                    raise ValueError(f'{e} (in file "{filename}")')

    def load_configuration_from_disk(self, local_cfg_file: str):
        # Load global configuration file
        global_config_dir = self._appdirs.site_config_dir
        global_cfg_file = os.path.join(global_config_dir, 'config.json')
        self._load_cfg_file_if_exists(global_cfg_file)

        # Load user configuration file
        user_config_dir = self._appdirs.user_config_dir
        user_cfg_file = os.path.join(user_config_dir, 'config.json')
        self._load_cfg_file_if_exists(user_cfg_file)

        # Load local configuration file
        self._load_cfg_file_if_exists(local_cfg_file)

    def override_defaults(self, overrides: Dict[str, Any]):
        for arg, val in overrides.items():
            if not hasattr(self, arg):
                raise ValueError(f'Tried to override non-existing config value {arg}')
            try:
                setattr(self, arg, val)
            except ValueError as e:
                raise ValueError(f'{e} (for entry "{arg}")')

    def export_settings(self) -> dict:
        """Return the user configurable options which influence contract behavior."""
        return {k: getattr(self, k) for k in ('crypto_backend', 'blockchain_backend', 'aggregation_min_reviews',
                                              'aggregation_cooldown', 'aggregation_request_timeout',
                                              'max_comment_length')}

    @contextmanager
    def override_ctx(self, **overrides) -> ContextManager:
        """Temporarily override configuration values (e.g. for a single scenario run)."""
        old = {k: getattr(self, k) for k in overrides}
        self.override_defaults(overrides)
        try:
            yield
        finally:
            for k, v in old.items():
                setattr(self, k, v)

    @property
    def medreview_version(self) -> str:
        """medreview version number"""
        return Versions.MEDREVIEW_VERSION

    @property
    def min_rating(self) -> int:
        return 1

    @property
    def max_rating(self) -> int:
        return 5

    @property
    def rating_dimensions(self) -> Tuple[str, ...]:
        """
        Names of the rated dimensions of a review.

        The order is fixed: decryption requests list the handles of every review in exactly this order.
        """
        return 'rating', 'professionalism', 'communication', 'wait_time'

    @property
    def cleartext_word_size(self) -> int:
        """Number of bytes per abi encoded cleartext value delivered by the decryption gateway."""
        return 32

    @property
    def is_unit_test(self) -> bool:
        return self._is_unit_test

    @is_unit_test.setter
    def is_unit_test(self, val: bool):
        self._is_unit_test = val


cfg = Config()
