"""Async HTTP client for the detection-data service.

Every endpoint returns freshly fetched, normalized data. Any failure to obtain a
usable response is raised as DataSourceUnavailable; the client never retries and
never substitutes empty data.
"""

import logging
from dataclasses import dataclass
from types import TracebackType
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from birbs.analytics.models import HourlyCount
from birbs.config.models import DataSourceConfig
from birbs.detections.exceptions import DataSourceUnavailable
from birbs.detections.normalizer import NormalizationResult, normalize_records

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BirdFiles:
    """Recording files for one species plus its all-time detection count."""

    files: NormalizationResult
    total: int


def _with_common_name(rows: list[Any], common_name: str) -> list[Any]:
    return [{"common_name": common_name, **row} if isinstance(row, dict) else row for row in rows]


def species_slug(common_name: str) -> str:
    """URL path segment for a species."""
    return quote(common_name, safe="")


class DetectionDataClient:
    """Client for the detection-data service's JSON endpoints."""

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:3100",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Root URL of the detection-data service
            timeout: Request timeout in seconds
            transport: Optional transport, e.g. httpx.MockTransport in tests
        """
        self.base_url = base_url.rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    @classmethod
    def from_config(
        cls, config: DataSourceConfig, transport: httpx.AsyncBaseTransport | None = None
    ) -> "DetectionDataClient":
        return cls(config.base_url, config.timeout_seconds, transport=transport)

    async def __aenter__(self) -> "DetectionDataClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()

    def photo_url(self, common_name: str) -> str:
        """URL of the species photo served by the data service."""
        return f"{self.base_url}/{species_slug(common_name)}/photo.png"

    async def _get_json(self, path: str) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("Fetching %s", url)
        try:
            response = await self.client.get(path)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error("Data source returned %d for %s", e.response.status_code, url)
            raise DataSourceUnavailable(url, status_code=e.response.status_code) from e
        except httpx.RequestError as e:
            logger.error("Data source request failed for %s: %s", url, e)
            raise DataSourceUnavailable(url, reason=str(e)) from e
        except ValueError as e:
            logger.error("Data source sent invalid JSON for %s: %s", url, e)
            raise DataSourceUnavailable(url, reason="invalid JSON") from e

    async def _get_list(self, path: str, key: str | None = None) -> list[Any]:
        payload = await self._get_json(path)
        if key is not None and isinstance(payload, dict):
            payload = payload.get(key)
        if not isinstance(payload, list):
            raise DataSourceUnavailable(
                f"{self.base_url}{path}", reason="unexpected response shape"
            )
        return payload

    async def by_day_and_common_name(self) -> NormalizationResult:
        """Per-day, per-species totals with average confidence."""
        return normalize_records(await self._get_list("/by-day-and-common-name.json"))

    async def by_common_name(self) -> NormalizationResult:
        """All-time per-species totals, one row per species."""
        return normalize_records(await self._get_list("/by-common-name.json"))

    async def recently(self) -> NormalizationResult:
        """Individual detections from the service's recent window."""
        return normalize_records(await self._get_list("/recently.json", key="detections"))

    async def files_for(self, common_name: str) -> BirdFiles:
        """Recording files for a species and its total detection count."""
        path = f"/{species_slug(common_name)}/files.json"
        payload = await self._get_json(path)

        # Older services answer with the bare file list
        if isinstance(payload, list):
            rows, total = payload, len(payload)
        elif isinstance(payload, dict) and isinstance(payload.get("files"), list):
            rows = payload["files"]
            summary = payload.get("detections")
            total = summary.get("total", len(rows)) if isinstance(summary, dict) else len(rows)
        else:
            raise DataSourceUnavailable(
                f"{self.base_url}{path}", reason="unexpected response shape"
            )

        try:
            total = int(total)
        except (TypeError, ValueError) as e:
            raise DataSourceUnavailable(
                f"{self.base_url}{path}", reason="malformed detection total"
            ) from e

        # Per-file rows do not repeat the species
        rows = _with_common_name(rows, common_name)
        return BirdFiles(files=normalize_records(rows), total=total)

    async def hourly_for(self, common_name: str) -> list[HourlyCount]:
        """Detections per hour of day for a species."""
        path = f"/{species_slug(common_name)}/hourly.json"
        rows = await self._get_list(path)
        try:
            return [HourlyCount(hour=row["number"], detections=row["detections"]) for row in rows]
        except (KeyError, TypeError, ValidationError) as e:
            raise DataSourceUnavailable(
                f"{self.base_url}{path}", reason="malformed hourly rows"
            ) from e

    async def daily_for(self, common_name: str) -> NormalizationResult:
        """Detections per day for a species, one row per day with detections."""
        rows = await self._get_list(f"/{species_slug(common_name)}/daily.json")
        rows = _with_common_name(rows, common_name)
        return normalize_records(rows)

    async def common_name_to_scientific_name(self) -> dict[str, str]:
        """Mapping of every detected common name to its scientific name."""
        path = "/common-name-to-scientific-name.json"
        payload = await self._get_json(path)
        if not isinstance(payload, dict):
            raise DataSourceUnavailable(
                f"{self.base_url}{path}", reason="unexpected response shape"
            )
        return {str(k): str(v) for k, v in payload.items()}
