"""State behind the single-job detail view."""

import logging
from typing import List, Optional, Tuple

from crawldash.errors import AuthenticationRequired
from crawldash.models.crawl_job import HEADING_LEVELS, CrawlJob
from crawldash.services.api_client import CrawlerAPIClient
from crawldash.services.job_list import LOGIN_ROUTE, Navigate
from crawldash.services.transform import transform_crawl_result

logger = logging.getLogger(__name__)


class JobDetailsController:
    def __init__(self, client: CrawlerAPIClient, navigate: Navigate) -> None:
        self.client = client
        self.navigate = navigate
        self.job: Optional[CrawlJob] = None
        self.loading = False
        self.last_error: Optional[BaseException] = None

    async def load(self, job_id: str) -> Optional[CrawlJob]:
        """Fetch one job with its broken links; ``None`` means not found."""
        self.loading = True
        self.job = None
        self.last_error = None
        try:
            if not self.client.is_authenticated():
                self.navigate(LOGIN_ROUTE)
                return None

            result = await self.client.get_crawl_result(job_id)
            self.job = transform_crawl_result(result)
        except AuthenticationRequired as exc:
            self.last_error = exc
            self.navigate(LOGIN_ROUTE)
        except Exception as exc:
            self.last_error = exc
            logger.error("Failed to fetch crawl job %s: %s", job_id, exc)
        finally:
            self.loading = False
        return self.job


def link_breakdown(job: CrawlJob) -> List[Tuple[str, int]]:
    return [
        ("Internal Links", job.internal_links),
        ("External Links", job.external_links),
        ("Broken Links", job.broken_links),
    ]


def heading_breakdown(job: CrawlJob) -> List[Tuple[str, int]]:
    """Non-zero heading counts in document order, labelled ``H1``..``H6``."""
    counts = job.heading_counts
    return [(level.upper(), counts[level]) for level in HEADING_LEVELS if counts.get(level, 0) > 0]
