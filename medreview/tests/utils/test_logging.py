import json
import os
import threading

from medreview import my_logging
from medreview.my_logging.log_context import log_context, current_log_context
from medreview.my_logging.logger import DATA
from medreview.tests.medreview_unit_test import MedReviewTestCase


class TestLogging(MedReviewTestCase):

    def test_data_records_carry_context(self):
        with self.assertLogs(level=DATA) as logs:
            with log_context('outer'):
                with log_context('inner', 'step'):
                    my_logging.data('answer', 42)
                my_logging.data('question', None)
        records = [json.loads(r.getMessage()) for r in logs.records if r.levelno == DATA]
        self.assertEqual({'key': 'answer', 'value': 42, 'context': ['outer', 'inner', 'step']}, records[0])
        self.assertEqual(['outer'], records[1]['context'])
        self.assertEqual([], current_log_context())

    def test_context_is_per_thread(self):
        seen = []

        def worker():
            with log_context('worker'):
                seen.append(list(current_log_context()))

        with log_context('main'):
            t = threading.Thread(target=worker)
            t.start()
            t.join()
            self.assertEqual(['main'], current_log_context())
        self.assertEqual([['worker']], seen)

    def test_context_is_restored_on_error(self):
        with self.assertRaises(RuntimeError):
            with log_context('failing'):
                raise RuntimeError()
        self.assertEqual([], current_log_context())

    def test_log_files(self):
        log_file = my_logging.get_log_file(label='run', parent_dir=self.tmp_dir.name, include_timestamp=False)
        self.assertEqual(os.path.join(self.tmp_dir.name, 'run', 'log'), log_file)
        try:
            my_logging.prepare_logger(log_file)
            my_logging.info('visible in info log')
            my_logging.data('timing', 1.5)
        finally:
            my_logging.prepare_logger()

        with open(log_file + '_info.log') as f:
            self.assertIn('visible in info log', f.read())
        with open(log_file + '_data.log') as f:
            self.assertEqual('timing', json.loads(f.read().strip())['key'])
