# ========================
# tests/test_utils.py
# ========================

import unittest
import tempfile
import json
import logging
import os
import sys
from unittest import mock

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.utils.config import Config
from src.utils.data_generator import DataGenerator
from src.utils.logging_setup import setup_logging
from src.utils.performance_monitor import PerformanceMonitor, monitor_performance
from src.climate_stats.parsing import RecordParser

class TestConfig(unittest.TestCase):

    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            config = Config()

        self.assertEqual(config.FIELD_DELIMITER, '\t')
        self.assertEqual(config.LOG_LEVEL, 'WARNING')
        self.assertIsNone(config.LOG_FILE)
        self.assertFalse(config.LOG_MALFORMED_LINES)
        self.assertTrue(all(config.validate_config().values()))

    def test_environment_overrides(self):
        env = {
            'CLIMATE_LOG_LEVEL': 'DEBUG',
            'CLIMATE_LOG_MALFORMED_LINES': 'true',
            'CLIMATE_PROGRESS_LOG_INTERVAL': '50'
        }
        with mock.patch.dict(os.environ, env, clear=True):
            config = Config()

        self.assertEqual(config.LOG_LEVEL, 'DEBUG')
        self.assertTrue(config.LOG_MALFORMED_LINES)
        self.assertEqual(config.PROGRESS_LOG_INTERVAL, 50)

    def test_dict_overrides_ignore_unknown_keys(self):
        config = Config({'log_level': 'ERROR', 'not_a_setting': 1})
        self.assertEqual(config.LOG_LEVEL, 'ERROR')
        self.assertFalse(hasattr(config, 'NOT_A_SETTING'))

    def test_validation_flags_bad_values(self):
        config = Config({'log_level': 'LOUD', 'field_delimiter': '', 'progress_log_interval': 0})
        validations = config.validate_config()

        self.assertFalse(validations['log_level'])
        self.assertFalse(validations['field_delimiter'])
        self.assertFalse(validations['progress_interval'])

    def test_load_from_file(self):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
            json.dump({'log_level': 'INFO', 'file_encoding': 'latin-1'}, f)
            temp_file_path = f.name

        try:
            config = Config.load_from_file(temp_file_path)
            self.assertEqual(config.LOG_LEVEL, 'INFO')
            self.assertEqual(config.FILE_ENCODING, 'latin-1')
            self.assertIn("FILE_ENCODING: 'latin-1'", str(config))
        finally:
            os.unlink(temp_file_path)

    def test_non_integer_interval_names_the_variable(self):
        with mock.patch.dict(os.environ, {'CLIMATE_PROGRESS_LOG_INTERVAL': '1e5'}, clear=True):
            with self.assertRaisesRegex(ValueError, 'CLIMATE_PROGRESS_LOG_INTERVAL'):
                Config()

    def test_load_from_file_requires_object(self):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
            json.dump(['log_level', 'INFO'], f)
            temp_file_path = f.name

        try:
            with self.assertRaises(ValueError):
                Config.load_from_file(temp_file_path)
        finally:
            os.unlink(temp_file_path)

class TestLoggingSetup(unittest.TestCase):

    def tearDown(self):
        root_logger = logging.getLogger()
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()

    def test_console_handler_on_stderr(self):
        setup_logging(log_level='ERROR')

        handlers = logging.getLogger().handlers
        self.assertEqual(len(handlers), 1)
        self.assertIs(handlers[0].stream, sys.stderr)
        self.assertEqual(handlers[0].level, logging.ERROR)

    def test_file_handler(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            log_dir = os.path.join(temp_dir, 'logs')
            setup_logging(log_level='WARNING', log_file='run.log', log_dir=log_dir)
            logging.getLogger('climate.test').debug("written to file only")

            for handler in logging.getLogger().handlers:
                handler.flush()
            with open(os.path.join(log_dir, 'run.log')) as f:
                self.assertIn("written to file only", f.read())

class TestPerformanceMonitor(unittest.TestCase):

    def test_counts_lines_and_files(self):
        with monitor_performance("test", progress_interval=2) as monitor:
            monitor.update_progress(3)
            monitor.file_completed("a.tdv")

        summary = monitor.summary
        self.assertEqual(summary['lines_processed'], 3)
        self.assertEqual(summary['files_processed'], 1)
        self.assertEqual(summary['checkpoints'][0]['name'], "file:a.tdv")
        self.assertGreater(summary['peak_memory_usage_mb'], 0)

    def test_progress_is_logged(self):
        monitor = PerformanceMonitor("progress", progress_interval=10)
        monitor.start_monitoring()

        with self.assertLogs('src.utils.performance_monitor', level='INFO') as captured:
            for _ in range(25):
                monitor.update_progress(1)

        progress_lines = [line for line in captured.output if "Progress:" in line]
        self.assertEqual(len(progress_lines), 2)
        self.assertEqual(monitor.get_current_stats()['lines_processed'], 25)

class TestDataGenerator(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_seeded_output_is_reproducible(self):
        path_a = os.path.join(self.temp_dir.name, 'a.tdv')
        path_b = os.path.join(self.temp_dir.name, 'b.tdv')

        DataGenerator(seed=1).generate_dataset(path_a, 50, error_rate=0.1)
        DataGenerator(seed=1).generate_dataset(path_b, 50, error_rate=0.1)

        with open(path_a) as a, open(path_b) as b:
            self.assertEqual(a.read(), b.read())

    def test_valid_lines_parse_and_errors_do_not(self):
        """
        Tests that every generated line is either a valid record or a rejected one, as tracked.
        """
        path = os.path.join(self.temp_dir.name, 'data.tdv')
        stats = DataGenerator(seed=3).generate_dataset(path, 300, states=["CA", "AK"], error_rate=0.3)

        parser = RecordParser()
        with open(path, newline='') as f:
            parsed = [obs for obs in map(parser.parse_line, f) if obs is not None]

        self.assertEqual(len(parsed), stats['valid_records'])
        self.assertEqual(parser.records_dropped, stats['records_with_errors'])
        self.assertEqual({obs.state_code for obs in parsed}, set(stats['state_counts']))
        self.assertEqual(sum(stats['error_types'].values()), stats['records_with_errors'])

    def test_unknown_state_rejected(self):
        with self.assertRaises(ValueError):
            DataGenerator().generate_dataset(os.path.join(self.temp_dir.name, 'x.tdv'), 1, states=["ZZ"])

if __name__ == '__main__':
    unittest.main()
