"""Tests for the dashboard view builders."""

from datetime import date

import httpx
import pytest

from birbs.config.models import BirbsConfig
from birbs.dashboard.models import ViewState
from birbs.dashboard.service import DashboardService


@pytest.fixture
def service(data_client, test_config) -> DashboardService:
    return DashboardService(data_client, test_config)


class TestOverview:
    async def test_overview_ready(self, service, routes):
        routes["/by-day-and-common-name.json"] = [
            {"when": "2023-04-11T07:00:00Z", "common_name": "Robin", "total": 2,
             "average_confidence": 0.875},
            {"when": "2023-04-12T07:00:00Z", "common_name": "Jay", "total": 1,
             "average_confidence": 0.5},
            {"when": "2023-04-12T07:00:00Z", "common_name": "Crow", "total": 7,
             "average_confidence": 1234},
        ]
        result = await service.overview()

        assert result.state is ViewState.READY
        assert result.options.view == "overview"
        assert result.options.theme == "green"
        assert [d.date for d in result.data] == [date(2023, 4, 12), date(2023, 4, 11)]
        assert [b.common_name for b in result.data[0].birds] == ["Crow", "Jay"]
        assert result.data[0].birds[0].confidence_display == "1.2K"
        assert result.data[0].histogram_url == "http://media.test/Charts/Combo-2023-04-12.png"

    async def test_overview_limits_days(self, data_client, routes, test_config):
        config = test_config.model_copy(
            update={"dashboard": test_config.dashboard.model_copy(update={"recent_days": 2})}
        )
        routes["/by-day-and-common-name.json"] = [
            {"when": f"2023-04-{day:02d}", "common_name": "Robin", "total": 1}
            for day in range(1, 11)
        ]
        result = await DashboardService(data_client, config).overview()
        assert [d.date.day for d in result.data] == [10, 9]

    async def test_overview_uses_configured_timezone(self, data_client, routes):
        config = BirbsConfig.model_validate(
            {
                "data_source": {"base_url": "http://birds.test:3100"},
                "dashboard": {"timezone": "America/Los_Angeles"},
            }
        )
        routes["/by-day-and-common-name.json"] = [
            {"when": "2023-04-11T07:00:00Z", "common_name": "Robin", "total": 1}
        ]
        result = await DashboardService(data_client, config).overview()
        assert result.data[0].date == date(2023, 4, 11)

    async def test_overview_empty(self, service, routes):
        """Should report an empty state for a valid but empty snapshot."""
        routes["/by-day-and-common-name.json"] = []
        result = await service.overview()
        assert result.state is ViewState.EMPTY
        assert result.data == []
        assert result.error is None

    async def test_overview_error(self, service, routes):
        """Should report an error state, not an empty one, when the source fails."""
        routes["/by-day-and-common-name.json"] = httpx.Response(500)
        result = await service.overview()
        assert result.state is ViewState.ERROR
        assert result.data is None
        assert "HTTP 500" in result.error

    async def test_overview_error_on_row_without_name(self, service, routes):
        """Should report an error state when a row has no species name."""
        routes["/by-day-and-common-name.json"] = [
            {"when": "2023-04-11", "common_name": "Robin", "total": 1},
            {"when": "2023-04-11", "common_name": None, "total": 1},
        ]
        result = await service.overview()
        assert result.state is ViewState.ERROR
        assert result.data is None
        assert "common_name" in result.error

    async def test_overview_reports_skipped(self, service, routes):
        routes["/by-day-and-common-name.json"] = [
            {"when": "2023-04-11", "common_name": "Robin", "total": 1},
            {"when": "bogus", "common_name": "Robin", "total": 1},
        ]
        result = await service.overview()
        assert result.state is ViewState.READY
        assert result.skipped == 1


class TestToday:
    async def test_today_orders_by_window_total(self, service, routes, raw_records):
        routes["/recently.json"] = {
            "detections": [
                {"when": "2023-04-12T01:00", "common_name": "Jay", "confidence": 0.4},
                *raw_records,
            ]
        }
        result = await service.today()

        assert result.state is ViewState.READY
        assert [r.common_name for r in result.data.summarized] == ["Jay", "Robin"]
        robin = result.data.summarized[1]
        assert robin.total_in_window == 2
        assert robin.best.confidence == 0.95
        assert len(result.data.detections) == 4

    async def test_today_empty(self, service, routes):
        routes["/recently.json"] = {"detections": []}
        result = await service.today()
        assert result.state is ViewState.EMPTY
        assert result.data.summarized == []

    async def test_today_error(self, service):
        result = await service.today()
        assert result.state is ViewState.ERROR
        assert "HTTP 404" in result.error

    async def test_today_error_on_row_without_name(self, service, routes, raw_records):
        routes["/recently.json"] = {"detections": [*raw_records, {"when": "2023-04-12"}]}
        result = await service.today()
        assert result.state is ViewState.ERROR
        assert "common_name" in result.error


class TestSpecies:
    async def test_species_totals(self, service, routes):
        routes["/by-common-name.json"] = [
            {"common_name": "Jay", "total": 3, "average_confidence": 0.5,
             "last_detection": "2023-04-12T10:00:00Z"},
            {"common_name": "Robin", "total": 8, "average_confidence": 0.9,
             "last_detection": "2023-04-11T10:00:00Z"},
        ]
        result = await service.species()
        assert [s.common_name for s in result.data] == ["Robin", "Jay"]
        assert result.options.theme == "green"

    async def test_species_theme_is_configurable(self, data_client, routes, test_config):
        config = test_config.model_copy(
            update={
                "dashboard": test_config.dashboard.model_copy(update={"species_theme": "dark"})
            }
        )
        routes["/by-common-name.json"] = []
        result = await DashboardService(data_client, config).species()
        assert result.state is ViewState.EMPTY
        assert result.options.theme == "dark"


class TestBird:
    @pytest.fixture(autouse=True)
    def scientific_names(self, routes):
        routes["/common-name-to-scientific-name.json"] = {"Robin": "Turdus migratorius"}

    async def test_bird_page(self, service, routes):
        routes["/Robin/files.json"] = {
            "detections": {"total": 3},
            "files": [
                {"when": "2023-04-01T06:00:00Z", "confidence": 0.9, "file_name": "old.mp3"},
                {"when": "2023-04-03T06:00:00Z", "confidence": 0.5, "file_name": "new.mp3"},
            ],
        }
        routes["/Robin/hourly.json"] = [
            {"number": 6, "time": "06:00:00", "detections": 2},
            {"number": 18, "time": "18:00:00", "detections": 1},
        ]
        routes["/Robin/daily.json"] = [
            {"date": "2023-04-01", "detections": 2},
            {"date": "2023-04-03", "detections": 1},
        ]
        result = await service.bird("Robin")

        assert result.state is ViewState.READY
        page = result.data
        assert page.total == 3
        assert page.photo_url == "http://birds.test:3100/Robin/photo.png"
        assert [f.file_name for f in page.files] == ["new.mp3", "old.mp3"]
        assert len(page.hourly_distribution) == 24
        assert sum(page.hourly_distribution) == pytest.approx(1.0)
        assert page.peak_hour == 6
        assert [(d.date.day, d.detections) for d in page.daily] == [(1, 2), (2, 0), (3, 1)]
        assert page.scientific_name == "Turdus migratorius"
        assert {f.scientific_name for f in page.files} == {"Turdus migratorius"}

    async def test_bird_page_unknown_scientific_name(self, service, routes):
        routes["/common-name-to-scientific-name.json"] = {}
        routes["/Robin/files.json"] = [{"when": "2023-04-03", "scientific_name": "T. m."}]
        routes["/Robin/hourly.json"] = []
        routes["/Robin/daily.json"] = []
        result = await service.bird("Robin")
        assert result.state is ViewState.READY
        assert result.data.scientific_name is None
        assert result.data.files[0].scientific_name == "T. m."

    async def test_bird_page_empty(self, service, routes):
        routes["/Robin/files.json"] = {"detections": {"total": 0}, "files": []}
        routes["/Robin/hourly.json"] = []
        routes["/Robin/daily.json"] = []
        result = await service.bird("Robin")
        assert result.state is ViewState.EMPTY
        assert result.data.hourly_distribution == [0.0] * 24
        assert result.data.peak_hour is None
        assert result.data.daily == []

    async def test_bird_page_error_when_any_fetch_fails(self, service, routes):
        routes["/Robin/files.json"] = {"detections": {"total": 0}, "files": []}
        routes["/Robin/daily.json"] = []
        result = await service.bird("Robin")
        assert result.state is ViewState.ERROR
        assert "hourly.json" in result.error

    async def test_view_serializes_to_json(self, service, routes, raw_records):
        routes["/recently.json"] = {"detections": raw_records}
        result = await service.today()
        payload = result.model_dump(mode="json")
        assert payload["state"] == "ready"
        assert payload["data"]["summarized"][0]["last"]["when"].startswith("2023-04-11T10:00")
