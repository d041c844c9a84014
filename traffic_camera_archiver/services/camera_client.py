"""Client for the Trafikverket camera query API."""

import xml.etree.ElementTree as ET
from datetime import timedelta
from typing import Any, Dict, List, Optional

import requests

from ..config.defaults import PHOTO_TIME_CORRECTION, PROVIDER_CONSTANTS
from ..logging_config import get_logger
from ..models.camera import CameraSnapshot
from ..utils import apply_time_correction, parse_provider_time
from .errors import ProviderUnavailable
from .interfaces import CameraProviderInterface

logger = get_logger("camera_client")


class TrafficCameraClient(CameraProviderInterface):
    """Queries camera metadata and downloads photos from the provider."""

    def __init__(self,
                 api_key: str,
                 url: str = "https://api.trafikinfo.trafikverket.se/v2/data.json",
                 schema_version: str = "1",
                 result_limit: int = 10,
                 photo_size_query: str = "type=fullsize",
                 timeout: float = 10.0,
                 time_correction: timedelta = PHOTO_TIME_CORRECTION,
                 session: Optional[requests.Session] = None):
        """
        Initialize camera client.

        Args:
            api_key: Provider authentication key
            url: Query endpoint accepting XML request bodies
            schema_version: Camera object schema version
            result_limit: Maximum records returned per query
            photo_size_query: Query string selecting the photo rendition
            timeout: Per-request timeout in seconds
            time_correction: Subtracted from the provider's PhotoTime
            session: Optional requests session to reuse
        """
        self.api_key = api_key
        self.url = url
        self.schema_version = schema_version
        self.result_limit = result_limit
        self.photo_size_query = photo_size_query
        self.timeout = timeout
        self.time_correction = time_correction
        self.session = session or requests.Session()

    def build_query(self, field: str, value: str) -> str:
        """Build the XML request body filtering cameras on field == value."""
        request = ET.Element("REQUEST")
        ET.SubElement(request, "LOGIN", authenticationkey=self.api_key)
        query = ET.SubElement(request, "QUERY",
                              objecttype=PROVIDER_CONSTANTS["OBJECT_TYPE"],
                              schemaversion=str(self.schema_version),
                              limit=str(self.result_limit))
        filter_element = ET.SubElement(query, "FILTER")
        ET.SubElement(filter_element, "EQ", name=field, value=value)
        return ET.tostring(request, encoding="unicode")

    def fetch_by_id(self, camera_id: str) -> Optional[CameraSnapshot]:
        records = self._query(PROVIDER_CONSTANTS["ID_FIELD"], camera_id)
        if not records:
            logger.info(f"No camera found with id {camera_id}")
            return None
        return self._parse_record(records[0])

    def search_by_name(self, text: str) -> List[CameraSnapshot]:
        records = self._query(PROVIDER_CONSTANTS["NAME_FIELD"], text)
        if not records:
            logger.info(f"No camera found with name {text!r}")
        return [self._parse_record(record) for record in records]

    def photo_url_for(self, snapshot: CameraSnapshot) -> str:
        """Full-size rendition URL for a snapshot's photo."""
        if not self.photo_size_query:
            return snapshot.photo_url
        separator = "&" if "?" in snapshot.photo_url else "?"
        return f"{snapshot.photo_url}{separator}{self.photo_size_query}"

    def download_photo(self, snapshot: CameraSnapshot) -> bytes:
        url = self.photo_url_for(snapshot)
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise ProviderUnavailable(f"Photo download failed for camera {snapshot.id}: {e}") from e

        logger.debug(f"Downloaded {len(response.content)} bytes for camera {snapshot.id}")
        return response.content

    def _query(self, field: str, value: str) -> List[Dict[str, Any]]:
        """Send one query and return the raw camera records."""
        body = self.build_query(field, value)
        try:
            response = self.session.post(
                self.url,
                data=body.encode("utf-8"),
                headers={"Content-Type": PROVIDER_CONSTANTS["CONTENT_TYPE"]},
                timeout=self.timeout
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            raise ProviderUnavailable(f"Camera query {field}={value!r} failed: {e}") from e
        except ValueError as e:
            raise ProviderUnavailable(f"Camera query {field}={value!r} returned invalid JSON: {e}") from e

        return self._extract_records(payload)

    def _extract_records(self, payload: Any) -> List[Dict[str, Any]]:
        """Pull camera records out of RESPONSE.RESULT[].Camera[]."""
        try:
            results = payload["RESPONSE"]["RESULT"]
        except (KeyError, TypeError) as e:
            raise ProviderUnavailable(f"Unexpected provider response shape: missing {e}") from e

        records: List[Dict[str, Any]] = []
        for result in results or []:
            if not isinstance(result, dict):
                continue
            if "ERROR" in result:
                error = result["ERROR"] or {}
                raise ProviderUnavailable(
                    f"Provider error from {error.get('SOURCE', 'unknown')}: {error.get('MESSAGE', error)}"
                )
            records.extend(result.get("Camera") or [])
        return records

    def _parse_record(self, record: Dict[str, Any]) -> CameraSnapshot:
        """Convert one provider camera record into a snapshot."""
        try:
            camera_id = record["Id"]
            photo_time = record["PhotoTime"]
        except KeyError as e:
            raise ProviderUnavailable(f"Camera record missing field {e}") from e

        try:
            captured_at = parse_provider_time(photo_time)
        except (TypeError, ValueError) as e:
            raise ProviderUnavailable(f"Camera {camera_id} has invalid PhotoTime {photo_time!r}") from e

        return CameraSnapshot(
            id=str(camera_id),
            name=record.get("Name", ""),
            location=record.get("Location"),
            description=record.get("Description", ""),
            photo_url=record.get("PhotoUrl", ""),
            captured_at=apply_time_correction(captured_at, self.time_correction)
        )
