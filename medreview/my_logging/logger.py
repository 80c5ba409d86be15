import datetime
import json
import logging.config
import os
from logging import addLevelName
from typing import Optional

from medreview.config import cfg
from medreview.my_logging.log_context import current_log_context

# process start, shared by all log files of one run
timestamp = '{:%Y-%m-%d_%H-%M-%S}'.format(datetime.datetime.now())

# Structured records (timings, events, revealed aggregates) are logged below DEBUG
DATA = 5
addLevelName(DATA, 'DATA')


def shutdown(handler_list=None):
    logging.shutdown([] if handler_list is None else handler_list)


def data(key, value):
    """
    Log (key, value) to log-level DATA, tagged with the log context of the calling thread.

    Values which are not json serializable (addresses, handles) are logged by their string representation.
    """
    d = {'key': key, 'value': value, 'context': list(current_log_context())}
    return logging.log(DATA, json.dumps(d, default=str))


def get_log_file(label: Optional[str] = 'default', parent_dir=None, filename='log', include_timestamp=True) -> str:
    """
    Return the path prefix for the log files of a run.

    The files are placed in parent_dir/label (cfg.log_dir if parent_dir is None), which is created if necessary.
    """
    log_dir = os.path.realpath(cfg.log_dir) if parent_dir is None else parent_dir
    if label is not None:
        log_dir = os.path.join(log_dir, label)
    os.makedirs(log_dir, exist_ok=True)

    if include_timestamp:
        filename += '_' + timestamp
    return os.path.join(log_dir, filename)


def _file_handler(filename: str, level: str, formatter: str, **kwargs) -> dict:
    return {'class': 'logging.FileHandler', 'filename': filename, 'mode': 'w', 'level': level,
            'formatter': formatter, **kwargs}


def prepare_logger(log_file: Optional[str] = None, silent=True):
    """
    (Re)configure the root logger.

    Warnings always go to the console. If log_file is given, info, debug and DATA records are additionally written to
    log_file_info.log, log_file_debug.log and log_file_data.log.
    """
    shutdown()

    handlers = {
        'default': {
            'level': 'WARNING',
            'formatter': 'standard',
            'class': 'logging.StreamHandler',
        },
    }
    if log_file is not None:
        if not silent:
            print(f'Saving logs to {log_file}*...')
        handlers['fileinfo'] = _file_handler(log_file + '_info.log', 'INFO', 'standard')
        handlers['filedebug'] = _file_handler(log_file + '_debug.log', 'DEBUG', 'standard')
        handlers['filedata'] = _file_handler(log_file + '_data.log', 'DATA', 'minimal', filters=['onlydata'])

    logging.config.dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': '%(asctime)s [%(levelname)s] (%(threadName)s): %(message)s',
                'datefmt': '%Y-%m-%d_%H-%M-%S'
            },
            'minimal': {
                'format': '%(message)s'
            },
        },
        'filters': {
            'onlydata': {
                '()': OnlyData
            }
        },
        'handlers': handlers,
        'loggers': {
            '': {
                'handlers': list(handlers),
                'level': 0
            }
        }
    })


class OnlyData(logging.Filter):

    def filter(self, record):
        return record.levelno == DATA


# console only until a run asks for log files
prepare_logger()
