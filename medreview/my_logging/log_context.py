import contextlib
import threading
from typing import List

_local = threading.local()


def current_log_context() -> List[str]:
    """Context keys of the calling thread, outermost first."""
    if not hasattr(_local, 'keys'):
        _local.keys = []
    return _local.keys


@contextlib.contextmanager
def log_context(*keys: str):
    ctx = current_log_context()
    ctx.extend(keys)
    try:
        yield
    finally:
        del ctx[len(ctx) - len(keys):]
