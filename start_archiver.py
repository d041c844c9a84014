#!/usr/bin/env python3
"""Entry point for the Traffic Camera Archiver."""

import sys
from typing import Optional

import boto3

from traffic_camera_archiver.config_manager import ConfigManager
from traffic_camera_archiver.logging_config import get_logger, setup_logging
from traffic_camera_archiver.poll_scheduler import PollScheduler
from traffic_camera_archiver.services.archive_service import S3ArchiveService
from traffic_camera_archiver.services.camera_client import TrafficCameraClient
from traffic_camera_archiver.services.camera_list_source import S3CameraListSource
from traffic_camera_archiver.services.error_handler import ErrorHandler, ErrorSeverity
from traffic_camera_archiver.services.errors import ArchiverError
from traffic_camera_archiver.services.image_cache import ImageCache
from traffic_camera_archiver.web.app import ArchiverWebApp


def main(config_path: Optional[str] = None) -> int:
    """Main entry point for the archiver."""
    try:
        config_manager = ConfigManager(config_path)
    except ArchiverError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    config = config_manager.get_config()
    setup_logging(config.log_level, config.log_dir)

    logger = get_logger("start_archiver")
    logger.info("Starting Traffic Camera Archiver")
    logger.info(f"Python version: {sys.version}")

    problems = config_manager.validate_config()
    if problems:
        for problem in problems:
            logger.error(f"Invalid configuration: {problem}")
        return 1

    logger.debug(f"Effective configuration: {config_manager.to_dict()}")

    error_handler = ErrorHandler()
    s3_client = boto3.client("s3", region_name=config.s3_region)

    camera_list_source = S3CameraListSource(
        s3_client,
        bucket=config.s3_bucket,
        key=config.camera_list_key,
        refresh_seconds=config.camera_list_refresh_seconds,
        max_stale_seconds=config.camera_list_max_stale_seconds,
        error_handler=error_handler
    )

    # The camera set must be known before serving
    try:
        camera_ids = camera_list_source.load()
    except ArchiverError as e:
        error_handler.handle_error("camera_list_source", e, ErrorSeverity.CRITICAL)
        logger.error("Cannot start without a camera list")
        return 1
    logger.info(f"Polling {len(camera_ids)} camera(s): {', '.join(camera_ids)}")

    camera_client = TrafficCameraClient(
        api_key=config.provider_api_key,
        url=config.provider_url,
        schema_version=config.provider_schema_version,
        result_limit=config.provider_result_limit,
        photo_size_query=config.photo_size_query,
        timeout=config.request_timeout_seconds
    )
    image_cache = ImageCache()
    archive_service = S3ArchiveService(s3_client, config.s3_bucket, config.archive_prefix)

    scheduler = PollScheduler(
        camera_client,
        image_cache,
        archive_service,
        camera_list_source,
        poll_interval=config.poll_interval_seconds,
        max_poll_workers=config.max_poll_workers,
        max_archive_workers=config.max_archive_workers,
        error_handler=error_handler
    )

    # Fill the cache before accepting requests
    first_tick = scheduler.run_tick()
    logger.info(f"Initial tick: {first_tick.new} new, {first_tick.failed} failed "
                f"of {first_tick.camera_count} camera(s)")

    scheduler.start()
    web_app = ArchiverWebApp(image_cache, camera_client, scheduler)

    try:
        web_app.run(host=config.http_host, port=config.http_port)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        scheduler.shutdown()
        logger.info("Traffic Camera Archiver stopped")

    return 0


if __name__ == "__main__":
    sys.exit(main())
