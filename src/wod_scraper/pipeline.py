"""
Daily scrape pipeline.

Fetches the WOD page for a date, extracts the workout, structures it
and files it onto the configured programming track and team schedule.
A run always produces a ScrapeResult; fetch and persistence problems
mark the result failed instead of raising.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum

from wod_scraper.config import Settings
from wod_scraper.core.exceptions import FetchError, StorageError
from wod_scraper.extraction.wod_extractor import WodDetails, WodExtractor
from wod_scraper.llm.models import Workout
from wod_scraper.llm.workout_generator import WorkoutGenerator, fallback_workout
from wod_scraper.scraper.fetcher import WodPageFetcher
from wod_scraper.storage.service import ProgrammingService
from wod_scraper.utils.logging import get_logger_with_context


class ScrapeStatus(str, Enum):
    """Outcome of a pipeline run."""

    COMPLETED = "completed"
    REST_DAY = "rest_day"
    NO_CONTENT = "no_content"
    FAILED = "failed"


@dataclass
class ScrapeResult:
    """Result of scraping one day."""

    date: date
    url: str
    status: ScrapeStatus
    wod_details: WodDetails | None = None
    workout: Workout | None = None
    workout_id: str | None = None
    track_workout_id: str | None = None
    scheduled_instance_id: str | None = None
    error: str | None = None

    @property
    def persisted(self) -> bool:
        """Whether the workout was stored and scheduled."""
        return self.scheduled_instance_id is not None

    def to_dict(self) -> dict:
        """Convert to a JSON-friendly dictionary."""
        return {
            "date": self.date.isoformat(),
            "url": self.url,
            "status": self.status.value,
            "wodDetails": self.wod_details.to_dict() if self.wod_details else None,
            "workout": self.workout.to_dict() if self.workout else None,
            "workoutId": self.workout_id,
            "trackWorkoutId": self.track_workout_id,
            "scheduledInstanceId": self.scheduled_instance_id,
            "error": self.error,
        }


class DailyScrapePipeline:
    """
    Scrapes, structures and schedules one day's WOD.

    The generator and service are optional: without a generator the
    workout is built from the text alone, and without a service nothing
    is stored (dry run).

    Example:
        >>> pipeline = DailyScrapePipeline(fetcher, generator, service, settings)
        >>> result = pipeline.run(date(2025, 1, 6))
        >>> print(result.status, result.scheduled_instance_id)
    """

    def __init__(
        self,
        fetcher: WodPageFetcher,
        generator: WorkoutGenerator | None = None,
        service: ProgrammingService | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.generator = generator
        self.service = service
        self.settings = settings or Settings()
        self.extractor = WodExtractor.from_settings(self.settings.extraction)

    def run(self, day: date) -> ScrapeResult:
        """
        Scrape the WOD for a date.

        Args:
            day: Calendar date of the workout

        Returns:
            ScrapeResult describing what happened
        """
        logger = get_logger_with_context(__name__, date=day.isoformat())
        url = self.fetcher.url_for(day)

        logger.info(f"Fetching page {url}")
        try:
            html = self.fetcher.fetch(url)
        except FetchError as e:
            logger.error(f"Fetch failed: {e}")
            return ScrapeResult(
                date=day, url=url, status=ScrapeStatus.FAILED, error=str(e))

        logger.info("Extracting WOD details")
        details = self.extractor.extract(html)

        if details.is_rest_day:
            logger.info("Rest day on the site; nothing to store")
            return ScrapeResult(
                date=day, url=url, status=ScrapeStatus.REST_DAY, wod_details=details)

        if not details.wod_text:
            logger.warning("Could not scrape WOD details")
            return ScrapeResult(
                date=day, url=url, status=ScrapeStatus.NO_CONTENT, wod_details=details)

        logger.info(f"Scraped WOD: {details.wod_text[:80]}...")
        workout = self._structure(details.wod_text)
        result = ScrapeResult(
            date=day,
            url=url,
            status=ScrapeStatus.COMPLETED,
            wod_details=details,
            workout=workout,
        )

        if self.service is None:
            logger.info("No storage configured; skipping persistence")
            return result

        try:
            self._persist(result)
        except StorageError as e:
            logger.error(f"Persisting workout failed: {e}")
            result.status = ScrapeStatus.FAILED
            result.error = str(e)
            result.workout_id = None
            result.track_workout_id = None
            result.scheduled_instance_id = None

        return result

    def _structure(self, wod_text: str) -> Workout:
        if self.generator is None:
            return fallback_workout(wod_text)
        return self.generator.generate_workout(wod_text)

    def _persist(self, result: ScrapeResult) -> None:
        """Store, file and schedule the workout in one transaction."""
        programming = self.settings.programming
        service = self.service

        # model slugs repeat across days, so stored workouts get generated IDs
        workout = result.workout.model_copy(update={"id": None})

        with service.db.transaction():
            if programming.create_track_if_missing:
                service.ensure_track(programming.track_id, programming.track_name)

            result.workout_id = service.insert_workout(
                workout,
                user_id=programming.user_id,
                source_track_id=programming.track_id,
            )
            result.track_workout_id = service.add_workout_to_track(
                result.workout_id, programming.track_id)
            result.scheduled_instance_id = service.schedule_workout_for_date(
                result.track_workout_id, programming.team_id, result.date)
