"""Authenticated client for the crawler backend's REST API.

All traffic to the backend goes through :class:`CrawlerAPIClient`. It
attaches the session's bearer token, turns HTTP 401 into
:class:`AuthenticationRequired` (clearing the session on the way) and
turns any other non-2xx answer into :class:`RequestFailed`.
"""

import logging
from typing import Any, Iterable, List, Optional

import httpx

from crawldash.errors import (
    LOGIN_FAILED_MESSAGE,
    REGISTRATION_FAILED_MESSAGE,
    REQUEST_FAILED_MESSAGE,
    AuthenticationRequired,
    RequestFailed,
)
from crawldash.models.auth import CreateUserRequest, LoginRequest, LoginResponse, RegisterResponse
from crawldash.models.backend import BackendCrawlResult, BulkAddResult, CrawlStats, CrawlURLPage
from crawldash.models.requests import AddURLRequest, BulkAddURLsRequest, CrawlURLsParams, IDsRequest
from crawldash.services.session import Session

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {"Content-Type": "application/json"}


def _error_message(response: httpx.Response, fallback: str) -> str:
    """Return the ``error`` field of a JSON error body, else *fallback*."""
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return fallback


def _wire_id(job_id: str) -> int | str:
    # The backend declares its id lists as integers.
    return int(job_id) if job_id.isdigit() else job_id


class CrawlerAPIClient:
    """Thin async wrapper over the backend endpoints.

    Args:
        session:   Token holder; read on every request, cleared on 401.
        base_url:  Backend origin including the ``/api`` prefix.
        transport: Optional httpx transport (tests pass a mock or ASGI one).
        timeout:   Per-request timeout in seconds; ``None`` imposes none.
    """

    def __init__(
        self,
        session: Session,
        base_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.session = session
        self.base_url = base_url.rstrip("/")
        self._transport = transport
        self._timeout = timeout

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            transport=self._transport,
            timeout=self._timeout,
            headers=DEFAULT_HEADERS,
        )

    # ------------------------------------------------------------------
    # Core request path
    # ------------------------------------------------------------------

    async def request(
        self,
        path: str,
        method: str = "GET",
        json: Any = None,
        params: Optional[dict] = None,
    ) -> Any:
        """Send an authenticated request and return the decoded JSON body.

        Raises:
            AuthenticationRequired: on HTTP 401, whatever the body says.
            RequestFailed: on any other non-2xx status.
            httpx.HTTPError: on transport failures.
            ValueError: when a 2xx body is not valid JSON.
        """
        headers = {}
        token = self.session.get()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        async with self._client() as client:
            response = await client.request(method, path, json=json, params=params, headers=headers)

        logger.debug("%s %s -> %d", method, path, response.status_code)

        if response.status_code == 401:
            logger.warning("Backend rejected the session token for %s %s", method, path)
            self.session.clear()
            raise AuthenticationRequired()

        if not response.is_success:
            message = _error_message(response, REQUEST_FAILED_MESSAGE)
            raise RequestFailed(message, status_code=response.status_code)

        return response.json()

    async def _post_anonymous(self, path: str, payload: dict, fallback: str) -> Any:
        async with self._client() as client:
            response = await client.post(path, json=payload)

        logger.debug("POST %s -> %d", path, response.status_code)

        if not response.is_success:
            raise RequestFailed(_error_message(response, fallback), status_code=response.status_code)
        return response.json()

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    async def login(self, email: str, password: str) -> LoginResponse:
        """Exchange credentials for a token and store it in the session."""
        payload = LoginRequest(email=email, password=password).model_dump()
        body = await self._post_anonymous("/login", payload, LOGIN_FAILED_MESSAGE)
        result = LoginResponse.model_validate(body)
        self.session.set(result.token)
        if result.user is not None:
            logger.info("Logged in as user %s", result.user.id)
        else:
            logger.info("Logged in")
        return result

    async def register(self, name: str, email: str, password: str) -> RegisterResponse:
        """Create an account. A returned token is *not* stored.

        The backend answers 201 with the new user wrapped as
        ``{"data": user, "message": ...}``; a ``{token, user}`` body is
        accepted too.
        """
        payload = CreateUserRequest(name=name, email=email, password=password).model_dump()
        body = await self._post_anonymous("/users", payload, REGISTRATION_FAILED_MESSAGE)
        if isinstance(body, dict) and "user" not in body and isinstance(body.get("data"), dict):
            body = {**body, "user": body["data"]}
        result = RegisterResponse.model_validate(body)
        if result.user is not None:
            logger.info("Registered user %s", result.user.id)
        return result

    def logout(self) -> None:
        self.session.clear()

    def is_authenticated(self) -> bool:
        return self.session.is_authenticated

    def set_auth_token(self, token: str) -> None:
        self.session.set(token)

    def get_auth_token(self) -> Optional[str]:
        return self.session.get()

    # ------------------------------------------------------------------
    # Crawler endpoints
    # ------------------------------------------------------------------

    async def add_url(self, url: str) -> Any:
        return await self.request(
            "/crawler/urls", method="POST", json=AddURLRequest(url=url).model_dump()
        )

    async def bulk_add_urls(self, urls: List[str]) -> BulkAddResult:
        body = await self.request(
            "/crawler/urls/bulk", method="POST", json=BulkAddURLsRequest(urls=urls).model_dump()
        )
        return BulkAddResult.model_validate(body)

    async def get_crawl_urls(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> CrawlURLPage:
        """List crawl records; unset or empty filters are left out of the query."""
        params = CrawlURLsParams(page=page, limit=limit, status=status, search=search).to_query()
        body = await self.request("/crawler/urls", params=params or None)
        return CrawlURLPage.model_validate(body)

    async def get_crawl_result(self, job_id: str) -> BackendCrawlResult:
        body = await self.request(f"/crawler/urls/{job_id}")
        # The backend wraps the result in {"data": ...}; accept the bare shape too.
        if isinstance(body, dict) and "crawl_url" not in body and "data" in body:
            body = body["data"]
        return BackendCrawlResult.model_validate(body)

    async def start_crawl(self, job_id: str) -> Any:
        return await self.request(f"/crawler/urls/{job_id}/crawl", method="POST")

    async def delete_urls(self, ids: Iterable[str]) -> Any:
        payload = IDsRequest(ids=[_wire_id(i) for i in ids]).model_dump()
        return await self.request("/crawler/urls", method="DELETE", json=payload)

    async def recrawl_urls(self, ids: Iterable[str]) -> Any:
        payload = IDsRequest(ids=[_wire_id(i) for i in ids]).model_dump()
        return await self.request("/crawler/urls/recrawl", method="POST", json=payload)

    async def get_stats(self) -> CrawlStats:
        body = await self.request("/crawler/stats")
        if isinstance(body, dict) and "data" in body:
            body = body["data"]
        return CrawlStats.model_validate(body)
