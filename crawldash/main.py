import logging
import logging.config
from dataclasses import dataclass, field
from typing import List, Optional

import httpx

from crawldash.config import DashboardSettings, get_settings
from crawldash.services.api_client import CrawlerAPIClient
from crawldash.services.auth_flow import AuthFormController
from crawldash.services.job_details import JobDetailsController
from crawldash.services.job_list import JobListController
from crawldash.services.session import Session
from crawldash.services.storage import JSONFileStorage

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Send every record to stderr as one JSON object per line."""
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "format": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                },
            },
            "root": {"level": level.upper(), "handlers": ["console"]},
        }
    )


@dataclass
class Dashboard:
    """Everything one dashboard instance needs, wired together."""

    session: Session
    client: CrawlerAPIClient
    jobs: JobListController = field(init=False)
    details: JobDetailsController = field(init=False)
    auth: AuthFormController = field(init=False)
    routes: List[str] = field(default_factory=list)
    settings: Optional[DashboardSettings] = None

    def __post_init__(self) -> None:
        settings = self.settings or DashboardSettings()
        self.jobs = JobListController(
            self.client,
            self.navigate,
            page_size=settings.page_size,
            search_delay=settings.search_debounce_seconds,
            bulk_concurrency=settings.bulk_concurrency,
        )
        self.details = JobDetailsController(self.client, self.navigate)
        self.auth = AuthFormController(self.client, self.navigate)

    @property
    def current_route(self) -> Optional[str]:
        return self.routes[-1] if self.routes else None

    def navigate(self, route: str) -> None:
        logger.debug("Navigating to %s", route)
        self.routes.append(route)


def build_dashboard(
    settings: Optional[DashboardSettings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dashboard:
    settings = settings or get_settings()
    session = Session(JSONFileStorage(settings.storage_path), key=settings.token_storage_key)
    client = CrawlerAPIClient(
        session, settings.api_base_url, transport=transport, timeout=settings.request_timeout
    )
    logger.info("Dashboard configured against %s", settings.api_base_url)
    return Dashboard(session=session, client=client, settings=settings)
