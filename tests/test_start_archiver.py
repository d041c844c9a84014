"""Unit tests for the archiver entry point."""

import unittest
import logging
import os
import shutil
import tempfile
from unittest.mock import Mock, patch
import sys

from botocore.exceptions import ClientError

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import start_archiver
from traffic_camera_archiver import logging_config
from traffic_camera_archiver.logging_config import ROOT_LOGGER_NAME


class TestStartArchiver(unittest.TestCase):
    """Test cases for main()."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = tempfile.mkdtemp()
        self.config_path = os.path.join(self.test_dir, "archiver_config.json")
        self.environ = {
            "TRAFIKVERKET_API_KEY": "secret-key",
            "S3_BUCKET": "camera-archive",
            "ARCHIVER_LOG_DIR": os.path.join(self.test_dir, "logs"),
        }
        self.previous_manager = logging_config.logging_manager

        self.s3_client = Mock()
        patches = [
            patch.object(start_archiver.boto3, "client", return_value=self.s3_client),
            patch.object(start_archiver, "PollScheduler"),
            patch.object(start_archiver, "ArchiverWebApp"),
        ]
        self.boto3_client, self.scheduler_class, self.web_app_class = [p.start() for p in patches]
        for p in patches:
            self.addCleanup(p.stop)

    def tearDown(self):
        """Clean up test fixtures."""
        logger = logging.getLogger(ROOT_LOGGER_NAME)
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        logging_config.logging_manager = self.previous_manager
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def run_main(self, environ):
        with patch.dict(os.environ, environ, clear=True):
            return start_archiver.main(self.config_path)

    def test_camera_list_failure_is_fatal(self):
        """Test that startup fails when config.json cannot be read."""
        self.s3_client.get_object.side_effect = ClientError(
            {"Error": {"Code": "NoSuchKey", "Message": "Not found"}}, "GetObject"
        )

        self.assertEqual(self.run_main(self.environ), 1)

        self.s3_client.get_object.assert_called_once_with(Bucket="camera-archive", Key="config.json")
        self.scheduler_class.assert_not_called()
        self.web_app_class.assert_not_called()

    def test_invalid_configuration_is_fatal(self):
        """Test that startup fails before touching S3 when settings are missing."""
        environ = dict(self.environ)
        del environ["TRAFIKVERKET_API_KEY"]

        self.assertEqual(self.run_main(environ), 1)

        self.boto3_client.assert_not_called()
        self.scheduler_class.assert_not_called()
        self.web_app_class.assert_not_called()

    def test_unreadable_config_file_is_fatal(self):
        """Test that a malformed config file stops startup."""
        with open(self.config_path, 'w') as f:
            f.write("{broken")

        self.assertEqual(self.run_main(self.environ), 1)
        self.boto3_client.assert_not_called()

    def test_successful_boot(self):
        """Test that a readable camera list starts polling and serving."""
        self.s3_client.get_object.return_value = {"Body": Mock(read=Mock(return_value=b'["A1", "B2"]'))}
        scheduler = self.scheduler_class.return_value
        web_app = self.web_app_class.return_value

        self.assertEqual(self.run_main(self.environ), 0)

        scheduler.run_tick.assert_called_once_with()
        scheduler.start.assert_called_once_with()
        web_app.run.assert_called_once_with(host="0.0.0.0", port=3000)
        scheduler.shutdown.assert_called_once_with()

    def test_shutdown_on_interrupt(self):
        """Test that the scheduler is shut down when serving is interrupted."""
        self.s3_client.get_object.return_value = {"Body": Mock(read=Mock(return_value=b'["A1"]'))}
        self.web_app_class.return_value.run.side_effect = KeyboardInterrupt

        self.assertEqual(self.run_main(self.environ), 0)
        self.scheduler_class.return_value.shutdown.assert_called_once_with()


if __name__ == '__main__':
    unittest.main()
