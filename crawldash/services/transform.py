"""Backend → dashboard mapping for crawl records.

Both functions are pure: they read the wire model and build a fresh
:class:`CrawlJob` without touching session or storage state.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from pydantic import TypeAdapter, ValidationError

from crawldash.models.backend import BackendCrawlResult, BackendCrawlURL
from crawldash.models.crawl_job import BrokenLinkDetail, CrawlJob, JobStatus

_DATETIME = TypeAdapter(datetime)
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MILLISECOND = timedelta(milliseconds=1)


def parse_timestamp(raw: Optional[str]) -> Optional[datetime]:
    """Parse an RFC 3339 timestamp into an aware UTC datetime, or None."""
    if not raw:
        return None
    try:
        parsed = _DATETIME.validate_python(raw)
    except ValidationError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _epoch_ms(moment: datetime) -> int:
    return (moment - _EPOCH) // _MILLISECOND


def transform_crawl_url(record: BackendCrawlURL) -> CrawlJob:
    """Map one backend crawl record to a :class:`CrawlJob`.

    Counts default to 0, strings to ``""`` and ``has_login_form`` to False.
    ``duration`` is ``completed_at - created_at`` in milliseconds when both
    timestamps parse; an inverted pair yields a negative duration.
    """
    created_at = parse_timestamp(record.created_at)
    completed_at = parse_timestamp(record.last_crawled_at)

    duration = None
    if created_at is not None and completed_at is not None:
        duration = _epoch_ms(completed_at) - _epoch_ms(created_at)

    return CrawlJob(
        id=str(record.id),
        url=record.url,
        title=record.title or "",
        status=JobStatus.normalise(record.status),
        html_version=record.html_version or "",
        internal_links=record.internal_links_count or 0,
        external_links=record.external_links_count or 0,
        broken_links=record.inaccessible_links_count or 0,
        has_login_form=record.has_login_form or False,
        heading_counts={
            "h1": record.h1_count or 0,
            "h2": record.h2_count or 0,
            "h3": record.h3_count or 0,
            "h4": record.h4_count or 0,
            "h5": record.h5_count or 0,
            "h6": record.h6_count or 0,
        },
        created_at=created_at,
        completed_at=completed_at,
        duration=duration,
        error=record.error_message or None,
    )


def transform_crawl_result(result: BackendCrawlResult) -> CrawlJob:
    """Map a detail response to a :class:`CrawlJob` with ``broken_link_details``."""
    job = transform_crawl_url(result.crawl_url)
    details = [
        BrokenLinkDetail(
            id=link.id,
            url=link.url,
            status_code=link.status_code,
            error=link.error_message or None,
        )
        for link in result.broken_links
    ]
    return job.model_copy(update={"broken_link_details": details})
