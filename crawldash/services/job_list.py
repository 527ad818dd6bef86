"""State and actions behind the dashboard's job list view."""

import logging
from typing import Callable, List, Literal, Optional

from crawldash.errors import AuthenticationRequired, BulkActionFailed, InputValidationError
from crawldash.models.crawl_job import CrawlJob
from crawldash.services.api_client import CrawlerAPIClient
from crawldash.services.debounce import Debouncer
from crawldash.services.fanout import fan_out
from crawldash.services.table import Selection, SortState, sort_jobs
from crawldash.services.transform import transform_crawl_url
from crawldash.services.validation import validate_url

logger = logging.getLogger(__name__)

LOGIN_ROUTE = "/login"
HOME_ROUTE = "/"

BulkAction = Literal["start", "stop", "delete", "recrawl"]

Navigate = Callable[[str], None]


def detail_route(job_id: str) -> str:
    return f"/url/{job_id}"


class JobListController:
    """Drives fetching, searching, selecting and bulk-acting on crawl jobs.

    The controller runs on one event loop. State changes happen between
    awaits, so readers never see a half-replaced list. Failures never
    escape the public actions: they are logged, kept on ``last_error`` and
    the state is left as it was before the action.
    """

    def __init__(
        self,
        client: CrawlerAPIClient,
        navigate: Navigate,
        page_size: int = 100,
        search_delay: float = 0.5,
        bulk_concurrency: int = 5,
    ) -> None:
        self.client = client
        self.navigate = navigate
        self.page_size = page_size
        self.bulk_concurrency = bulk_concurrency

        self.jobs: List[CrawlJob] = []
        self.search_term = ""
        self.selection = Selection()
        self.sort = SortState()
        self.loading = False
        self.show_add_form = False
        self.form_error = ""
        self.last_error: Optional[BaseException] = None

        self._search_debouncer: Debouncer[str] = Debouncer(search_delay, self._on_search_settled)

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    async def mount(self) -> None:
        await self.fetch_jobs()

    async def fetch_jobs(self) -> None:
        """Replace ``jobs`` with page 1 of the server-side search results."""
        self.loading = True
        try:
            if not self.client.is_authenticated():
                self.navigate(LOGIN_ROUTE)
                return

            page = await self.client.get_crawl_urls(
                page=1, limit=self.page_size, search=self.search_term
            )
            self.jobs = [transform_crawl_url(record) for record in page.data]
            logger.debug("Fetched %d crawl jobs", len(self.jobs))
        except AuthenticationRequired as exc:
            self.last_error = exc
            self.navigate(LOGIN_ROUTE)
        except Exception as exc:
            self.last_error = exc
            logger.error("Failed to fetch crawl jobs: %s", exc)
        finally:
            self.loading = False

    def set_search_term(self, term: str) -> None:
        """Update the search box; re-fetch once typing pauses."""
        self.search_term = term
        self._search_debouncer.trigger(term)

    async def _on_search_settled(self, term: str) -> None:
        if self.loading:
            logger.debug("Search refresh for %r dropped – a fetch is already running", term)
            return
        await self.fetch_jobs()

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    @property
    def visible_jobs(self) -> List[CrawlJob]:
        """Jobs whose URL or title contains the search term, case-insensitively."""
        needle = self.search_term.lower()
        return [
            job for job in self.jobs if needle in job.url.lower() or needle in job.title.lower()
        ]

    @property
    def rows(self) -> List[CrawlJob]:
        return sort_jobs(self.visible_jobs, self.sort)

    def sort_by(self, field: str) -> None:
        self.sort.toggle(field)

    def toggle_select_all(self, checked: bool) -> None:
        self.selection.toggle_all([job.id for job in self.visible_jobs], checked)

    def toggle_select(self, job_id: str, checked: bool) -> None:
        self.selection.toggle(job_id, checked)

    # ------------------------------------------------------------------
    # Add URL overlay
    # ------------------------------------------------------------------

    def open_add_form(self) -> None:
        self.form_error = ""
        self.show_add_form = True

    def close_add_form(self) -> None:
        self.form_error = ""
        self.show_add_form = False

    async def submit_url(self, raw_url: str) -> bool:
        """Validate and submit a URL; close the overlay on success.

        Returns True when the backend accepted the URL.
        """
        try:
            url = validate_url(raw_url)
        except InputValidationError as exc:
            self.form_error = str(exc)
            return False

        try:
            await self.client.add_url(url)
        except AuthenticationRequired as exc:
            self.last_error = exc
            self.navigate(LOGIN_ROUTE)
            return False
        except Exception as exc:
            self.last_error = exc
            logger.error("Failed to add URL %s: %s", url, exc)
            return False

        await self.fetch_jobs()
        self.close_add_form()
        logger.info("URL added: %s", url)
        return True

    # ------------------------------------------------------------------
    # Bulk actions
    # ------------------------------------------------------------------

    async def bulk_action(self, action: BulkAction) -> bool:
        """Apply *action* to the selected jobs.

        On success the list is refreshed and the selection cleared. On
        failure both are left as they were. Returns True on success; an
        empty selection is a no-op that returns False.
        """
        if not self.selection:
            return False

        ids = self.selection.ids
        try:
            if action == "start":
                await self._start_all(ids)
                logger.info("Started crawl jobs: %s", ids)
            elif action == "stop":
                # TODO: call the stop endpoint once the backend exposes one.
                logger.info("Stopping crawl jobs: %s", ids)
            elif action == "delete":
                await self.client.delete_urls(ids)
                logger.info("Deleted crawl jobs: %s", ids)
            elif action == "recrawl":
                await self.client.recrawl_urls(ids)
                logger.info("Re-crawl requested for jobs: %s", ids)
            else:
                raise ValueError(f"Unknown bulk action {action!r}")
        except AuthenticationRequired as exc:
            self.last_error = exc
            self.navigate(LOGIN_ROUTE)
            return False
        except Exception as exc:
            self.last_error = exc
            logger.error("Failed to %s URLs: %s", action, exc)
            return False

        await self.fetch_jobs()
        self.selection.clear()
        return True

    async def _start_all(self, ids: List[str]) -> None:
        results = await fan_out(ids, self.client.start_crawl, concurrency=self.bulk_concurrency)
        failed = [result for result in results if not result.ok]
        if not failed:
            return
        for result in failed:
            if isinstance(result.error, AuthenticationRequired):
                raise result.error
        raise BulkActionFailed(
            "start", [result.item for result in failed], [result.error for result in failed]
        )

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def view_details(self, job_id: str) -> None:
        self.navigate(detail_route(job_id))

    def logout(self) -> None:
        self.client.logout()
        self.navigate(LOGIN_ROUTE)

    def close(self) -> None:
        """Drop any pending debounced refresh."""
        self._search_debouncer.cancel()
