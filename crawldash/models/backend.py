"""Wire models for the crawler backend's snake_case JSON payloads."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class BackendCrawlURL(BaseModel):
    """One crawl record as stored by the backend.

    Only ``id`` and ``url`` are required; every other column may be missing
    or null and is defaulted by the transformer. Timestamps are kept as raw
    strings so an unparseable value degrades to "absent" instead of
    rejecting the whole record.
    """

    model_config = ConfigDict(extra="ignore")

    id: int | str
    url: str
    status: Optional[str] = None
    title: Optional[str] = None
    html_version: Optional[str] = None
    h1_count: Optional[int] = None
    h2_count: Optional[int] = None
    h3_count: Optional[int] = None
    h4_count: Optional[int] = None
    h5_count: Optional[int] = None
    h6_count: Optional[int] = None
    internal_links_count: Optional[int] = None
    external_links_count: Optional[int] = None
    inaccessible_links_count: Optional[int] = None
    has_login_form: Optional[bool] = None
    error_message: Optional[str] = None
    last_crawled_at: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class BackendBrokenLink(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    crawl_url_id: Optional[int] = None
    url: str
    status_code: int = 0
    error_message: Optional[str] = None
    created_at: Optional[str] = None


class BackendCrawlResult(BaseModel):
    crawl_url: BackendCrawlURL
    broken_links: List[BackendBrokenLink] = Field(default_factory=list)


class Pagination(BaseModel):
    page: int = 1
    limit: int = 0
    total: int = 0
    pages: int = 0


class CrawlURLPage(BaseModel):
    """Response body of ``GET /crawler/urls``."""

    data: List[BackendCrawlURL] = Field(default_factory=list)
    pagination: Optional[Pagination] = None


class BulkAddResult(BaseModel):
    """Response body of ``POST /crawler/urls/bulk``.

    The backend reports per-URL failures in ``errors`` while still answering
    201 for the URLs it accepted.
    """

    data: List[BackendCrawlURL] = Field(default_factory=list)
    message: str = ""
    errors: List[str] = Field(default_factory=list)


class CrawlStats(BaseModel):
    total_urls: int = 0
    queued_urls: int = 0
    running_urls: int = 0
    completed_urls: int = 0
    error_urls: int = 0
