"""
This package contains logging functionality.

==========
Submodules
==========
* :py:mod:`.log_context`: Per-thread stack of context keys attached to DATA records.
* :py:mod:`.logger`: Root logger configuration and the DATA log level
"""

from medreview.my_logging.logger import data, shutdown, prepare_logger, get_log_file
from logging import critical, error, exception, warning, info, debug
