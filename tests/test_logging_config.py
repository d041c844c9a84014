"""Unit tests for logging configuration."""

import unittest
import logging
import os
import shutil
import tempfile
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from traffic_camera_archiver import logging_config
from traffic_camera_archiver.logging_config import (
    ROOT_LOGGER_NAME, get_logger, log_performance, setup_logging
)


class TestLoggingConfig(unittest.TestCase):
    """Test cases for logging setup."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = tempfile.mkdtemp()
        self.previous_manager = logging_config.logging_manager
        logging_config.logging_manager = None

    def tearDown(self):
        """Clean up test fixtures."""
        for name in (ROOT_LOGGER_NAME, f"{ROOT_LOGGER_NAME}.performance"):
            logger = logging.getLogger(name)
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)
        logging_config.logging_manager = self.previous_manager
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_get_logger_namespace(self):
        """Test that component loggers live under the package logger."""
        self.assertEqual(get_logger("camera_client").name, "traffic_camera_archiver.camera_client")

    def test_log_performance_before_setup(self):
        """Test that performance logging is a no-op without setup."""
        log_performance("Tick completed", {"cameras": 1})

    def test_setup_creates_log_files(self):
        """Test that setup writes to the log directory."""
        setup_logging("DEBUG", self.test_dir)

        get_logger("test").error("something failed")
        log_performance("Tick completed", {"cameras": 2, "new": 1})
        for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
            handler.flush()
        for handler in logging.getLogger(f"{ROOT_LOGGER_NAME}.performance").handlers:
            handler.flush()

        self.assertTrue(os.path.exists(os.path.join(self.test_dir, "archiver.log")))
        with open(os.path.join(self.test_dir, "errors.log")) as f:
            self.assertIn("something failed", f.read())
        with open(os.path.join(self.test_dir, "performance.log")) as f:
            self.assertIn("cameras=2 | new=1", f.read())

    def test_setup_again_changes_level(self):
        """Test that repeated setup reuses the manager and applies the level."""
        manager = setup_logging("INFO", self.test_dir)
        again = setup_logging("WARNING", self.test_dir)

        self.assertIs(manager, again)
        self.assertEqual(logging.getLogger(ROOT_LOGGER_NAME).level, logging.WARNING)


if __name__ == '__main__':
    unittest.main()
