"""
Main entry point for MarkTrack.
"""

import argparse
import logging
import random
from typing import Optional

from .config import Settings, load_settings
from .core.entities import CourseCatalog
from .core.exceptions import ConfigurationError
from .core.identifiers import UniqueCodeGenerator
from .persistence import DatabaseFactory, DatabaseManager
from .services import CatalogService
from .api.rest_api import MarkTrackRestAPI


logger = logging.getLogger(__name__)


class MarkTrackApp:
    """Wires the database, catalog, service and REST API together.

    The app owns the one CourseCatalog; request handlers reach it only
    through the CatalogService.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or Settings()
        self._database: Optional[DatabaseManager] = None
        self._catalog: Optional[CourseCatalog] = None
        self._service: Optional[CatalogService] = None
        self._rest_api: Optional[MarkTrackRestAPI] = None

        self._initialize()

    def _initialize(self):
        """Initialize the app with all components."""
        settings = self._settings
        logger.info("Initializing MarkTrack...")

        self._database = DatabaseFactory.create_database(
            settings.database_type, database_path=settings.database_path
        )
        self._database.insert_sample_entry()
        logger.info("Database initialized: %s (%s)", settings.database_type, settings.database_path)

        rng = random.Random(settings.random_seed) if settings.random_seed is not None else None
        self._catalog = CourseCatalog(
            id_generator=UniqueCodeGenerator(length=settings.id_length, rng=rng),
            rng=rng
        )
        self._service = CatalogService(self._catalog)
        if settings.initial_courses:
            self._catalog.seed_random(settings.initial_courses)

        self._rest_api = MarkTrackRestAPI(self._service)
        logger.info("MarkTrack initialized with %d courses", len(self._catalog))

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def database(self) -> DatabaseManager:
        return self._database

    @property
    def catalog(self) -> CourseCatalog:
        return self._catalog

    @property
    def service(self) -> CatalogService:
        return self._service

    @property
    def app(self):
        """The FastAPI application."""
        return self._rest_api.app

    def serve(self, host: Optional[str] = None, port: Optional[int] = None):
        """Run the REST server until interrupted."""
        import uvicorn

        host = host or self._settings.host
        port = port or self._settings.port
        logger.info("REST API: http://%s:%d (docs at /docs)", host, port)
        uvicorn.run(self.app, host=host, port=port, log_level=self._settings.log_level.lower())

    def run_demo(self, course_count: int = 3):
        """Seed courses, revise one mark and print the resulting totals."""
        courses = self._service.seed_courses(course_count)
        for course in courses:
            print(f"{course.code} {course.name} [{course.id}]")
            for mark in course.marks:
                print(f"  {mark.name:<8} {mark.score:7.2f}/{mark.max_score:<7.2f} "
                      f"{mark.percentage:6.2f}%  w={mark.weightage:5.2f}  -> {mark.weighted:6.2f}")
            totals = self._service.get_totals(course.id)
            print(f"  Total Weightage: {totals.total_weightage_display}  "
                  f"Total Weighted: {totals.total_weighted_display}")

        if courses and courses[0].marks:
            course = courses[0]
            mark = course.marks[0]
            print(f"\nSetting weightage of {mark.name} in {course.code} to 30")
            self._service.update_mark(course.id, mark.id, weightage="30")
            totals = self._service.get_totals(course.id)
            print(f"  Total Weightage: {totals.total_weightage_display}  "
                  f"Total Weighted: {totals.total_weighted_display}")

        print(f"\nStatistics: {self._service.get_statistics()}")


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(description="MarkTrack course mark tracker")
    parser.add_argument("--host", type=str, help="REST server host")
    parser.add_argument("--port", type=int, help="REST server port")
    parser.add_argument("--config", type=str, help="Configuration file path")
    parser.add_argument("--log-level", type=str, help="Logging level")
    parser.add_argument("--demo", action="store_true", help="Run demo mode")

    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.config)
        if args.log_level:
            settings = Settings.from_mapping({**settings.to_dict(), "log_level": args.log_level})
    except ConfigurationError as e:
        parser.error(e.message)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    app = MarkTrackApp(settings)

    if args.demo:
        app.run_demo()
        return

    try:
        app.serve(args.host, args.port)
    except KeyboardInterrupt:
        logger.info("Shutting down...")


if __name__ == "__main__":
    main()
