"""Error tracking for archiver components."""

import threading
import traceback
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Deque, Dict, Any, Optional

from ..logging_config import get_logger

logger = get_logger("error_handler")


class ErrorSeverity(Enum):
    """Error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ComponentStatus(Enum):
    """Component status levels."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    FAILED = "failed"
    UNKNOWN = "unknown"


@dataclass
class ErrorRecord:
    """Record of an error occurrence."""
    component_name: str
    error: Exception
    severity: ErrorSeverity
    timestamp: datetime = field(default_factory=datetime.now)
    traceback_str: str = ""
    context: Optional[str] = None


class ErrorHandler:
    """Records errors per component and tracks component health."""

    def __init__(self, max_records: int = 500):
        self.error_records: Deque[ErrorRecord] = deque(maxlen=max_records)
        self.component_error_counts: Dict[str, int] = {}
        self.component_status: Dict[str, ComponentStatus] = {}
        self._lock = threading.Lock()

    def register_component(self, component_name: str) -> None:
        """Register a component for error tracking."""
        with self._lock:
            self.component_error_counts.setdefault(component_name, 0)
            self.component_status.setdefault(component_name, ComponentStatus.HEALTHY)
        logger.debug(f"Component registered: {component_name}")

    def handle_error(self, component_name: str, error: Exception,
                     severity: ErrorSeverity = ErrorSeverity.MEDIUM,
                     context: Optional[str] = None) -> ErrorRecord:
        """Record and log an error from a component."""
        tb = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        error_record = ErrorRecord(
            component_name=component_name,
            error=error,
            severity=severity,
            traceback_str=tb,
            context=context
        )

        with self._lock:
            self.error_records.append(error_record)
            self.component_error_counts[component_name] = self.component_error_counts.get(component_name, 0) + 1

            if severity == ErrorSeverity.CRITICAL:
                self.component_status[component_name] = ComponentStatus.FAILED
            elif severity == ErrorSeverity.HIGH:
                self.component_status[component_name] = ComponentStatus.DEGRADED
            else:
                self.component_status.setdefault(component_name, ComponentStatus.HEALTHY)

        where = f" [{context}]" if context else ""
        message = f"Error in {component_name}{where}: {error} (Severity: {severity.value})"
        if severity in (ErrorSeverity.HIGH, ErrorSeverity.CRITICAL):
            logger.error(message)
        else:
            logger.warning(message)

        return error_record

    def mark_healthy(self, component_name: str) -> None:
        """Record a successful operation for a component."""
        with self._lock:
            if self.component_status.get(component_name) != ComponentStatus.HEALTHY:
                self.component_status[component_name] = ComponentStatus.HEALTHY
                logger.info(f"Component recovered: {component_name}")

    def get_component_health(self) -> Dict[str, ComponentStatus]:
        """Get health status of all registered components."""
        with self._lock:
            return dict(self.component_status)

    def get_error_stats(self) -> Dict[str, Any]:
        """Get error statistics."""
        with self._lock:
            return {
                "total_errors": sum(self.component_error_counts.values()),
                "component_error_counts": dict(self.component_error_counts),
                "component_status": {name: status.value for name, status in self.component_status.items()},
                "degraded": any(status != ComponentStatus.HEALTHY for status in self.component_status.values())
            }

    def get_error_summary(self, hours: int = 24) -> Dict[str, Any]:
        """Get summary of errors in the last N hours."""
        cutoff_time = datetime.now() - timedelta(hours=hours)

        with self._lock:
            recent_errors = [e for e in self.error_records if e.timestamp >= cutoff_time]

        component_counts: Dict[str, int] = {}
        severity_counts = {severity.value: 0 for severity in ErrorSeverity}

        for error in recent_errors:
            component_counts[error.component_name] = component_counts.get(error.component_name, 0) + 1
            severity_counts[error.severity.value] += 1

        return {
            "total_errors": len(recent_errors),
            "component_counts": component_counts,
            "severity_counts": severity_counts,
            "time_period_hours": hours
        }

