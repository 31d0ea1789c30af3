# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""Unit tests for logging_config module."""

import logging
import os
import sys
import tempfile
import unittest
from logging.handlers import RotatingFileHandler

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from config import EngineConfig, LoggingConfig
from logging_config import setup_logging, setup_logging_from_config


class TestSetupLogging(unittest.TestCase):
    """Tests for setup_logging."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = logging.getLogger()
        self.saved_handlers = list(self.root.handlers)
        self.saved_level = self.root.level

    def tearDown(self):
        for handler in list(self.root.handlers):
            self.root.removeHandler(handler)
            handler.close()
        for handler in self.saved_handlers:
            self.root.addHandler(handler)
        self.root.setLevel(self.saved_level)
        self.temp_dir.cleanup()

    def test_creates_log_file(self):
        """Test a timestamped log file is created and written."""
        log_path = setup_logging(self.temp_dir.name, enable_console=False)

        logging.getLogger('anagram_generator').debug('hello from test')
        for handler in self.root.handlers:
            handler.flush()

        self.assertTrue(os.path.basename(log_path).startswith('scramble_engine_'))
        with open(log_path, encoding='utf-8') as f:
            self.assertIn('hello from test', f.read())

    def test_handlers(self):
        """Test file and console handlers and their levels."""
        setup_logging(self.temp_dir.name, log_level='WARNING', enable_console=True)

        file_handlers = [h for h in self.root.handlers if isinstance(h, RotatingFileHandler)]
        console_handlers = [
            h for h in self.root.handlers if not isinstance(h, RotatingFileHandler)
        ]
        self.assertEqual(len(file_handlers), 1)
        self.assertEqual(file_handlers[0].level, logging.DEBUG)
        self.assertEqual(console_handlers[0].level, logging.WARNING)

    def test_repeat_setup_replaces_handlers(self):
        """Test calling setup twice does not duplicate handlers."""
        setup_logging(self.temp_dir.name, enable_console=False)
        setup_logging(self.temp_dir.name, enable_console=False)

        self.assertEqual(len(self.root.handlers), 1)

    def test_http_loggers_quieted(self):
        """Test HTTP client loggers stay at INFO even for a DEBUG console."""
        setup_logging(self.temp_dir.name, log_level='DEBUG', enable_console=False)

        self.assertEqual(logging.getLogger('aiohttp').level, logging.INFO)

    def test_from_config(self):
        """Test setup from an EngineConfig logging section."""
        config = EngineConfig(logging=LoggingConfig(
            directory=self.temp_dir.name, level='DEBUG', console=False
        ))

        log_path = setup_logging_from_config(config)

        self.assertEqual(os.path.dirname(log_path), self.temp_dir.name)


if __name__ == '__main__':
    unittest.main()
