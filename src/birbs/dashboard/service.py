"""Builds the dashboard's views from fetched snapshots.

Each call fetches a fresh snapshot, runs the pure aggregations over it and wraps
the outcome in a ViewResult. Nothing is cached between calls.
"""

import asyncio
import logging
from datetime import date

import pytz

from birbs.analytics.daily import aggregate_by_day
from birbs.analytics.date_range import daily_series
from birbs.analytics.files import order_files_for_display
from birbs.analytics.grouping import SortDirection, order_by
from birbs.analytics.hourly import counts_from_rows, histogram_from_counts, peak_hour
from birbs.analytics.models import DayBucket, SpeciesTotal
from birbs.analytics.summaries import summarize_recent, summarize_species
from birbs.config.models import BirbsConfig
from birbs.dashboard.models import BirdPage, RecentActivity, ViewOptions, ViewResult
from birbs.datasource.client import DetectionDataClient
from birbs.detections.exceptions import BirbsError

logger = logging.getLogger(__name__)


class DashboardService:
    """Assembles overview, today, species and bird views."""

    def __init__(self, client: DetectionDataClient, config: BirbsConfig):
        self.client = client
        self.config = config
        self.tz = pytz.timezone(config.dashboard.timezone)

    def histogram_url(self, day: date) -> str:
        """URL of the combined detection chart rendered for a day."""
        return f"{self.config.data_source.media_base_url}/Charts/Combo-{day:%Y-%m-%d}.png"

    async def overview(self) -> ViewResult[list[DayBucket]]:
        """Per-day species tables for the most recent days."""
        options = ViewOptions(view="overview", theme=self.config.dashboard.overview_theme)
        try:
            snapshot = await self.client.by_day_and_common_name()
        except BirbsError as e:
            logger.error("Overview unavailable: %s", e)
            return ViewResult.failed(options, e)

        days = aggregate_by_day(
            snapshot.detections,
            limit_days=self.config.dashboard.recent_days,
            tz=self.tz,
            histogram_url=self.histogram_url,
        )
        return ViewResult.built(options, days, empty=not days, skipped=snapshot.skipped)

    async def today(self) -> ViewResult[RecentActivity]:
        """Species rollups over the data service's recent window, busiest first."""
        options = ViewOptions(view="today", theme=self.config.dashboard.today_theme)
        try:
            snapshot = await self.client.recently()
        except BirbsError as e:
            logger.error("Recent activity unavailable: %s", e)
            return ViewResult.failed(options, e)

        rollups = order_by(
            summarize_recent(snapshot.detections),
            lambda rollup: rollup.total_in_window,
            SortDirection.DESC,
        )
        activity = RecentActivity(summarized=rollups, detections=list(snapshot.detections))
        return ViewResult.built(options, activity, empty=not rollups, skipped=snapshot.skipped)

    async def species(self) -> ViewResult[list[SpeciesTotal]]:
        """All-time totals per species, busiest first."""
        options = ViewOptions(view="species", theme=self.config.dashboard.species_theme)
        try:
            snapshot = await self.client.by_common_name()
        except BirbsError as e:
            logger.error("Species totals unavailable: %s", e)
            return ViewResult.failed(options, e)

        totals = summarize_species(snapshot.detections)
        return ViewResult.built(options, totals, empty=not totals, skipped=snapshot.skipped)

    async def bird(self, common_name: str) -> ViewResult[BirdPage]:
        """Files, hourly distribution, daily series and scientific name for one species."""
        options = ViewOptions(view="bird", theme=self.config.dashboard.bird_theme)
        try:
            bird_files, hourly_rows, daily_rows, scientific_names = await asyncio.gather(
                self.client.files_for(common_name),
                self.client.hourly_for(common_name),
                self.client.daily_for(common_name),
                self.client.common_name_to_scientific_name(),
            )
        except BirbsError as e:
            logger.error("Bird page for %s unavailable: %s", common_name, e)
            return ViewResult.failed(options, e)

        hourly = counts_from_rows(hourly_rows)
        scientific_name = scientific_names.get(common_name)
        files = [
            f if f.scientific_name else f.model_copy(update={"scientific_name": scientific_name})
            for f in order_files_for_display(bird_files.files.detections)
        ]
        page = BirdPage(
            common_name=common_name,
            scientific_name=scientific_name,
            photo_url=self.client.photo_url(common_name),
            total=bird_files.total,
            files=files,
            hourly_distribution=histogram_from_counts(hourly),
            peak_hour=peak_hour(hourly),
            daily=daily_series(daily_rows.detections, tz=self.tz),
        )
        return ViewResult.built(
            options,
            page,
            empty=page.total == 0 and not page.files,
            skipped=bird_files.files.skipped + daily_rows.skipped,
        )
