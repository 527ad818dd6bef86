"""Client-side crawl job entity."""

import logging
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

HEADING_LEVELS = ("h1", "h2", "h3", "h4", "h5", "h6")


class JobStatus(str, Enum):
    """Closed status vocabulary of a crawl job.

    The backend writes ``queued``, ``running``, ``completed`` and ``error``.
    ``failed`` and ``stopped`` show up in older table code; they are folded
    into this enumeration by :meth:`normalise`.
    """

    QUEUED = "queued"
    RUNNING = "running"
    COMPLETED = "completed"
    ERROR = "error"

    @classmethod
    def normalise(cls, raw: Optional[str]) -> "JobStatus":
        value = (raw or "").strip().lower()
        if value in _STATUS_ALIASES:
            return _STATUS_ALIASES[value]
        try:
            return cls(value)
        except ValueError:
            if value:
                logger.warning("Unknown job status %r – treating as queued", raw)
            return cls.QUEUED


_STATUS_ALIASES = {
    "failed": JobStatus.ERROR,
    # a stopped job is idle and can be started again
    "stopped": JobStatus.QUEUED,
}


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BrokenLinkDetail(_CamelModel):
    id: int
    url: str
    status_code: int
    error: Optional[str] = None


class CrawlJob(_CamelModel):
    """Normalised crawl record as held in dashboard state.

    ``duration`` is in milliseconds and is always derived from
    ``created_at``/``completed_at``; it is never read from the wire.
    """

    id: str
    url: str
    title: str = ""
    status: JobStatus = JobStatus.QUEUED
    html_version: str = ""
    internal_links: int = 0
    external_links: int = 0
    broken_links: int = 0
    has_login_form: bool = False
    heading_counts: Dict[str, int] = Field(
        default_factory=lambda: {level: 0 for level in HEADING_LEVELS}
    )
    broken_link_details: Optional[List[BrokenLinkDetail]] = None
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    duration: Optional[int] = None
    error: Optional[str] = None
