"""Unit tests for the error handler."""

import unittest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from traffic_camera_archiver.services.error_handler import (
    ErrorHandler, ErrorSeverity, ComponentStatus
)
from traffic_camera_archiver.services.errors import ProviderUnavailable, StorageUnavailable


class TestErrorHandler(unittest.TestCase):
    """Test cases for ErrorHandler."""

    def setUp(self):
        """Set up test fixtures."""
        self.error_handler = ErrorHandler(max_records=3)
        self.error_handler.register_component("camera_client")
        self.error_handler.register_component("archive_service")

    def test_register_component(self):
        """Test component registration."""
        health = self.error_handler.get_component_health()
        self.assertEqual(health["camera_client"], ComponentStatus.HEALTHY)
        self.assertEqual(self.error_handler.component_error_counts["archive_service"], 0)

    def test_handle_error_counts(self):
        """Test error counting per component."""
        self.error_handler.handle_error("camera_client", ProviderUnavailable("timeout"), ErrorSeverity.MEDIUM)
        self.error_handler.handle_error("camera_client", ProviderUnavailable("timeout"), ErrorSeverity.MEDIUM)

        self.assertEqual(self.error_handler.component_error_counts["camera_client"], 2)
        # Medium severity does not degrade a component
        self.assertEqual(self.error_handler.get_component_health()["camera_client"], ComponentStatus.HEALTHY)

    def test_severity_updates_status(self):
        """Test that high and critical errors change component status."""
        self.error_handler.handle_error("archive_service", StorageUnavailable("down"), ErrorSeverity.HIGH)
        self.assertEqual(self.error_handler.get_component_health()["archive_service"], ComponentStatus.DEGRADED)
        self.assertTrue(self.error_handler.get_error_stats()["degraded"])

        self.error_handler.handle_error("archive_service", StorageUnavailable("down"), ErrorSeverity.CRITICAL)
        self.assertEqual(self.error_handler.get_component_health()["archive_service"], ComponentStatus.FAILED)

    def test_mark_healthy(self):
        """Test recovery after a successful operation."""
        self.error_handler.handle_error("archive_service", StorageUnavailable("down"), ErrorSeverity.HIGH)
        self.error_handler.mark_healthy("archive_service")

        self.assertEqual(self.error_handler.get_component_health()["archive_service"], ComponentStatus.HEALTHY)
        self.assertFalse(self.error_handler.get_error_stats()["degraded"])

    def test_unregistered_component(self):
        """Test errors from a component that was never registered."""
        self.error_handler.handle_error("web", ValueError("bad"), ErrorSeverity.LOW)
        self.assertEqual(self.error_handler.component_error_counts["web"], 1)

    def test_records_are_bounded(self):
        """Test that old error records are discarded."""
        for i in range(5):
            self.error_handler.handle_error("camera_client", ProviderUnavailable(str(i)))

        self.assertEqual(len(self.error_handler.error_records), 3)
        self.assertEqual(str(self.error_handler.error_records[0].error), "2")
        self.assertEqual(self.error_handler.component_error_counts["camera_client"], 5)

    def test_record_context(self):
        """Test that context is kept on the record."""
        record = self.error_handler.handle_error("camera_client", ProviderUnavailable("x"), context="A1")
        self.assertEqual(record.context, "A1")
        self.assertEqual(record.severity, ErrorSeverity.MEDIUM)

    def test_error_stats(self):
        """Test error statistics."""
        self.error_handler.handle_error("archive_service", StorageUnavailable("down"), ErrorSeverity.HIGH)
        stats = self.error_handler.get_error_stats()

        self.assertEqual(stats["total_errors"], 1)
        self.assertEqual(stats["component_status"]["archive_service"], "degraded")
        self.assertTrue(stats["degraded"])

    def test_error_summary(self):
        """Test the time-windowed error summary."""
        self.error_handler.handle_error("camera_client", ProviderUnavailable("x"), ErrorSeverity.MEDIUM)
        self.error_handler.handle_error("archive_service", StorageUnavailable("y"), ErrorSeverity.HIGH)

        summary = self.error_handler.get_error_summary(hours=1)

        self.assertEqual(summary["total_errors"], 2)
        self.assertEqual(summary["component_counts"]["camera_client"], 1)
        self.assertEqual(summary["severity_counts"]["high"], 1)


if __name__ == '__main__':
    unittest.main()
