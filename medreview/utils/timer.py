import contextlib
import time

from medreview import my_logging
from medreview.config import mr_print


@contextlib.contextmanager
def time_measure(key, should_print=False, skip=False):
    start = time.time()
    yield
    end = time.time()
    elapsed = end - start

    if not skip:
        if should_print:
            mr_print(f"Took {elapsed} s")
        my_logging.data("time_" + key, elapsed)


class Timer(object):

    def __init__(self, key):
        self.key = key

    def __call__(self, method):
        def timed(*args, **kw):
            with time_measure(self.key):
                return method(*args, **kw)

        return timed
