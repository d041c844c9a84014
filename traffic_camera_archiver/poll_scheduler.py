"""Fixed-interval poll loop that drives fetch, change detection and archival."""

import functools
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Set

from .logging_config import get_logger, log_performance
from .models.camera import CameraPollOutcome, TickResult, Verdict
from .services.error_handler import ErrorHandler, ErrorSeverity
from .services.errors import ArchiverError, ProviderUnavailable
from .services.interfaces import (
    ArchiveServiceInterface,
    CameraListSourceInterface,
    CameraProviderInterface,
    ImageCacheInterface
)

logger = get_logger("poll_scheduler")


class PollScheduler:
    """Runs one poll tick every ``poll_interval`` seconds.

    Each tick reads the camera list and runs one fetch/detect/archive chain per
    camera on a bounded worker pool. Ticks never overlap: firings that come due
    while a tick is still running are skipped and counted.
    """

    def __init__(self,
                 camera_client: CameraProviderInterface,
                 image_cache: ImageCacheInterface,
                 archive_service: ArchiveServiceInterface,
                 camera_list_source: CameraListSourceInterface,
                 poll_interval: float = 5.0,
                 max_poll_workers: int = 8,
                 max_archive_workers: int = 4,
                 error_handler: Optional[ErrorHandler] = None):
        self.camera_client = camera_client
        self.image_cache = image_cache
        self.archive_service = archive_service
        self.camera_list_source = camera_list_source
        self.poll_interval = poll_interval

        self.error_handler = error_handler or ErrorHandler()
        for component in ("camera_client", "archive_service", "camera_list_source", "poll_scheduler"):
            self.error_handler.register_component(component)

        self._poll_executor = ThreadPoolExecutor(max_workers=max_poll_workers,
                                                 thread_name_prefix="camera-poll")
        self._archive_executor = ThreadPoolExecutor(max_workers=max_archive_workers,
                                                    thread_name_prefix="archive")
        self._pending_archives: Set[Future] = set()
        self._archive_done = threading.Condition()

        # Scheduler state
        self.running = False
        self.scheduler_thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._tick_lock = threading.Lock()
        self.start_time: Optional[datetime] = None

        # Statistics
        self.tick_count = 0
        self.skipped_ticks = 0
        self.archived_count = 0
        self.archive_failures = 0
        self.last_tick: Optional[TickResult] = None

    def start(self) -> bool:
        """Start the poll loop."""
        if self.running:
            logger.warning("Poll scheduler is already running")
            return False

        self.running = True
        self.start_time = datetime.now(timezone.utc)
        self._stop_event.clear()
        self.scheduler_thread = threading.Thread(target=self._poll_loop, name="poll-scheduler", daemon=True)
        self.scheduler_thread.start()

        logger.info(f"Poll scheduler started with {self.poll_interval}s interval")
        return True

    def stop(self, timeout: float = 5.0) -> None:
        """Stop the poll loop and wait for in-flight archives."""
        logger.info("Stopping poll scheduler...")

        self.running = False
        self._stop_event.set()

        if self.scheduler_thread and self.scheduler_thread.is_alive():
            self.scheduler_thread.join(timeout=timeout)

        if not self.flush_archives(timeout):
            logger.warning("Some archive uploads were still running at shutdown")

        logger.info("Poll scheduler stopped")

    def shutdown(self, timeout: float = 5.0) -> None:
        """Stop and release the worker pools."""
        self.stop(timeout)

        # A tick can outlast the stop timeout; the pools must outlive it
        if self.scheduler_thread and self.scheduler_thread.is_alive():
            logger.info("Waiting for the running tick to finish")
            self.scheduler_thread.join()

        self._poll_executor.shutdown(wait=True)
        self._archive_executor.shutdown(wait=True)

    def _poll_loop(self) -> None:
        logger.info("Poll loop started")
        next_tick = time.monotonic()

        while not self._stop_event.is_set():
            try:
                self.run_tick()
            except Exception as e:
                self.error_handler.handle_error("poll_scheduler", e, ErrorSeverity.HIGH, context="tick")

            next_tick += self.poll_interval
            now = time.monotonic()
            if now > next_tick:
                missed = int((now - next_tick) // self.poll_interval) + 1
                self.skipped_ticks += missed
                next_tick += missed * self.poll_interval
                logger.warning(f"Tick overran the {self.poll_interval}s interval, skipped {missed} tick(s)")

            self._stop_event.wait(max(0.0, next_tick - time.monotonic()))

        logger.info("Poll loop ended")

    def run_tick(self) -> TickResult:
        """Poll every configured camera once."""
        with self._tick_lock:
            result = TickResult(started_at=datetime.now(timezone.utc))
            tick_start = time.monotonic()

            try:
                camera_ids = self.camera_list_source.get_camera_ids()
            except ArchiverError as e:
                self.error_handler.handle_error("camera_list_source", e, ErrorSeverity.HIGH)
                result.error = str(e)
                return self._finish_tick(result, tick_start)

            result.camera_count = len(camera_ids)
            futures = [self._poll_executor.submit(self.process_camera, camera_id) for camera_id in camera_ids]
            for future in as_completed(futures):
                result.record(future.result())

            return self._finish_tick(result, tick_start)

    def _finish_tick(self, result: TickResult, tick_start: float) -> TickResult:
        result.duration_seconds = time.monotonic() - tick_start
        self.tick_count += 1
        self.last_tick = result

        log_performance("Tick completed", {
            "cameras": result.camera_count,
            "new": result.new,
            "unchanged": result.unchanged,
            "not_found": result.not_found,
            "failed": result.failed,
            "duration_ms": f"{result.duration_seconds * 1000:.0f}"
        })
        return result

    def process_camera(self, camera_id: str) -> CameraPollOutcome:
        """Fetch, detect and archive for one camera; never raises."""
        try:
            snapshot = self.camera_client.fetch_by_id(camera_id)
            if snapshot is None:
                self.error_handler.mark_healthy("camera_client")
                logger.info(f"Camera {camera_id} not found, nothing to do this tick")
                return CameraPollOutcome.NOT_FOUND

            # Skip the photo download when the capture time is already cached
            if self.image_cache.has_timestamp(camera_id, snapshot.captured_at):
                self.error_handler.mark_healthy("camera_client")
                logger.debug(f"No new image for {camera_id}, timestamp unchanged")
                return CameraPollOutcome.UNCHANGED

            image_bytes = self.camera_client.download_photo(snapshot)
            self.error_handler.mark_healthy("camera_client")

            verdict = self.image_cache.evaluate(camera_id, snapshot, image_bytes)

        except ProviderUnavailable as e:
            self.error_handler.handle_error("camera_client", e, ErrorSeverity.MEDIUM, context=camera_id)
            return CameraPollOutcome.FAILED
        except Exception as e:
            self.error_handler.handle_error("poll_scheduler", e, ErrorSeverity.HIGH, context=camera_id)
            return CameraPollOutcome.FAILED

        if verdict is Verdict.NEW:
            self._submit_archive(camera_id, snapshot.captured_at, image_bytes)
            return CameraPollOutcome.NEW

        return CameraPollOutcome.UNCHANGED

    def _submit_archive(self, camera_id: str, timestamp: datetime, image_bytes: bytes) -> Optional[Future]:
        try:
            future = self._archive_executor.submit(self.archive_service.store, camera_id, timestamp, image_bytes)
        except RuntimeError as e:
            # Archive pool already shut down
            with self._archive_done:
                self.archive_failures += 1
            self.error_handler.handle_error("archive_service", e, ErrorSeverity.HIGH, context=camera_id)
            return None

        with self._archive_done:
            self._pending_archives.add(future)
        future.add_done_callback(functools.partial(self._on_archive_done, camera_id))
        return future

    def _on_archive_done(self, camera_id: str, future: Future) -> None:
        error = None
        try:
            if future.cancelled():
                logger.warning(f"Archive upload for {camera_id} was cancelled")
                return

            error = future.exception()
            if error is not None:
                self.error_handler.handle_error("archive_service", error, ErrorSeverity.HIGH, context=camera_id)
            else:
                self.error_handler.mark_healthy("archive_service")
        finally:
            # Only drop the future once its outcome is recorded
            with self._archive_done:
                if error is not None:
                    self.archive_failures += 1
                elif not future.cancelled():
                    self.archived_count += 1
                self._pending_archives.discard(future)
                self._archive_done.notify_all()

    def flush_archives(self, timeout: Optional[float] = None) -> bool:
        """Wait for in-flight archive uploads; True if all finished."""
        with self._archive_done:
            return self._archive_done.wait_for(lambda: not self._pending_archives, timeout=timeout)

    def pending_archive_count(self) -> int:
        with self._archive_done:
            return len(self._pending_archives)

    def get_status(self) -> Dict[str, Any]:
        """Get current scheduler status and statistics."""
        uptime = None
        if self.start_time:
            uptime = (datetime.now(timezone.utc) - self.start_time).total_seconds()

        return {
            "running": self.running,
            "poll_interval_seconds": self.poll_interval,
            "uptime_seconds": uptime,
            "tick_count": self.tick_count,
            "skipped_ticks": self.skipped_ticks,
            "last_tick": self.last_tick.to_dict() if self.last_tick else None,
            "cached_cameras": len(self.image_cache) if hasattr(self.image_cache, '__len__') else None,
            "archived_count": self.archived_count,
            "archive_failures": self.archive_failures,
            "pending_archives": self.pending_archive_count(),
            "archive": self.archive_service.get_archive_info(),
            "camera_list": self.camera_list_source.get_source_info(),
            "errors": self.error_handler.get_error_stats(),
            "recent_errors": self.error_handler.get_error_summary(hours=1)
        }
