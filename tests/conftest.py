import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from birbs.config.models import BirbsConfig
from birbs.datasource.client import DetectionDataClient
from birbs.detections.models import Detection
from birbs.detections.normalizer import normalize_record
from birbs.system.path_resolver import PathResolver


@pytest.fixture
def path_resolver(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> PathResolver:
    """Provide a PathResolver rooted in a temporary data directory."""
    monkeypatch.setenv("BIRBS_DATA", str(tmp_path / "data"))
    monkeypatch.delenv("BIRBS_CONFIG", raising=False)
    return PathResolver()


@pytest.fixture
def test_config() -> BirbsConfig:
    """Provide a default configuration pointing at a fake data service."""
    return BirbsConfig.model_validate(
        {
            "data_source": {
                "base_url": "http://birds.test:3100",
                "media_base_url": "http://media.test",
            },
            "dashboard": {"recent_days": 31, "timezone": "UTC"},
        }
    )


@pytest.fixture
def raw_records() -> list[dict[str, Any]]:
    """Three raw detections: two Robins on one day, one Jay the next."""
    return [
        {"when": "2023-04-11T10:00", "common_name": "Robin", "confidence": 0.8},
        {"when": "2023-04-11T10:00", "common_name": "Robin", "confidence": 0.95},
        {"when": "2023-04-12T03:00", "common_name": "Jay", "confidence": 0.5},
    ]


@pytest.fixture
def make_detection() -> Callable[..., Detection]:
    """Build a normalized Detection from raw keyword fields."""

    def _make(when: str = "2023-04-11T10:00", common_name: str = "Robin", **fields) -> Detection:
        return normalize_record({"when": when, "common_name": common_name, **fields})

    return _make


@pytest.fixture
def routes() -> dict[str, Any]:
    """Path -> JSON body (or httpx.Response) served by the fake data service."""
    return {}


@pytest.fixture
def requested_paths() -> list[str]:
    return []


@pytest.fixture
def mock_transport(routes: dict[str, Any], requested_paths: list[str]) -> httpx.MockTransport:
    """Transport answering from ``routes``; unknown paths get a 404."""

    def handler(request: httpx.Request) -> httpx.Response:
        requested_paths.append(request.url.raw_path.decode())
        body = routes.get(request.url.raw_path.decode())
        if body is None:
            return httpx.Response(404, json={"error": "not found"})
        if isinstance(body, httpx.Response):
            return body
        return httpx.Response(200, content=json.dumps(body).encode())

    return httpx.MockTransport(handler)


@pytest.fixture
async def data_client(mock_transport: httpx.MockTransport, test_config: BirbsConfig):
    """DetectionDataClient wired to the mock transport."""
    client = DetectionDataClient.from_config(test_config.data_source, transport=mock_transport)
    yield client
    await client.close()
