"""In-memory stand-in for the crawler backend, mounted via ``httpx.ASGITransport``.

Mirrors the endpoints, status codes and JSON bodies of the real service,
including its auth answers: login returns ``{token, message}`` and user
creation returns ``{data, message}``.
"""

import itertools
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

_T0 = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def _iso(moment: Optional[datetime]) -> Optional[str]:
    return moment.strftime("%Y-%m-%dT%H:%M:%SZ") if moment else None


class _Credentials(BaseModel):
    email: str
    password: str


class _NewUser(BaseModel):
    name: str
    email: str
    password: str


class _URLBody(BaseModel):
    url: str


class _BulkBody(BaseModel):
    urls: List[str]


class _IDsBody(BaseModel):
    ids: List[int]


class FakeBackend:
    def __init__(self) -> None:
        self.users: Dict[str, dict] = {}
        self.tokens: Dict[str, int] = {}
        self.records: Dict[int, dict] = {}
        self.broken_links: Dict[int, List[dict]] = {}
        self.started: List[int] = []
        self.failing_starts: set = set()
        self.requests: List[str] = []
        self._ids = itertools.count(1)
        self._user_ids = itertools.count(1)
        self._clock = itertools.count(0)

    def add_user(self, name: str, email: str, password: str) -> dict:
        user = {"id": next(self._user_ids), "name": name, "email": email, "password": password}
        self.users[email] = user
        return user

    def issue_token(self, email: str) -> str:
        user = self.users[email]
        token = f"token-{user['id']}-{len(self.tokens)}"
        self.tokens[token] = user["id"]
        return token

    def add_record(self, url: str, **fields) -> dict:
        record_id = next(self._ids)
        created = _T0 + timedelta(minutes=next(self._clock))
        record = {
            "id": record_id,
            "url": url,
            "status": "queued",
            "title": "",
            "html_version": "",
            "h1_count": 0,
            "h2_count": 0,
            "h3_count": 0,
            "h4_count": 0,
            "h5_count": 0,
            "h6_count": 0,
            "internal_links_count": 0,
            "external_links_count": 0,
            "inaccessible_links_count": 0,
            "has_login_form": False,
            "error_message": "",
            "last_crawled_at": None,
            "created_at": _iso(created),
            "updated_at": _iso(created),
        }
        record.update(fields)
        self.records[record_id] = record
        self.broken_links[record_id] = []
        return record


def create_app(backend: FakeBackend) -> FastAPI:
    app = FastAPI()

    @app.exception_handler(HTTPException)
    async def error_body(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.middleware("http")
    async def record_requests(request: Request, call_next):
        backend.requests.append(f"{request.method} {request.url.path}")
        return await call_next(request)

    def require_user(request: Request) -> int:
        header = request.headers.get("authorization", "")
        token = header[len("Bearer "):] if header.startswith("Bearer ") else ""
        if token not in backend.tokens:
            raise HTTPException(status_code=401, detail="Invalid or expired token")
        return backend.tokens[token]

    @app.post("/api/login")
    async def login(body: _Credentials) -> dict:
        user = backend.users.get(body.email)
        if user is None or user["password"] != body.password:
            raise HTTPException(status_code=401, detail="Authentication failed")
        return {"token": backend.issue_token(body.email), "message": "Login successful"}

    @app.post("/api/users", status_code=201)
    async def create_user(body: _NewUser) -> dict:
        if body.email in backend.users:
            raise HTTPException(status_code=500, detail="Could not create user")
        user = backend.add_user(body.name, body.email, body.password)
        public = {"id": user["id"], "name": user["name"], "email": user["email"]}
        return {"data": public, "message": "User created successfully"}

    @app.post("/api/crawler/urls", status_code=201)
    async def add_url(body: _URLBody, request: Request) -> dict:
        require_user(request)
        return {"data": backend.add_record(body.url), "message": "URL added successfully"}

    @app.post("/api/crawler/urls/bulk", status_code=201)
    async def bulk_add(body: _BulkBody, request: Request) -> dict:
        require_user(request)
        added = [backend.add_record(url.strip()) for url in body.urls if url.strip()]
        return {"data": added, "message": f"Added {len(added)} URLs successfully"}

    @app.get("/api/crawler/urls")
    async def list_urls(
        request: Request, page: int = 1, limit: int = 20, status: str = "", search: str = ""
    ) -> dict:
        require_user(request)
        rows = [
            r for r in backend.records.values()
            if (not status or r["status"] == status)
            and (not search or search in r["url"] or search in r["title"])
        ]
        start = (page - 1) * limit
        return {
            "data": rows[start:start + limit],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": len(rows),
                "pages": (len(rows) + limit - 1) // limit,
            },
        }

    @app.get("/api/crawler/stats")
    async def stats(request: Request) -> dict:
        require_user(request)
        by_status = [r["status"] for r in backend.records.values()]
        return {
            "data": {
                "total_urls": len(by_status),
                "queued_urls": by_status.count("queued"),
                "running_urls": by_status.count("running"),
                "completed_urls": by_status.count("completed"),
                "error_urls": by_status.count("error"),
            }
        }

    @app.post("/api/crawler/urls/recrawl")
    async def recrawl(body: _IDsBody, request: Request) -> dict:
        require_user(request)
        for record_id in body.ids:
            backend.records[record_id]["status"] = "queued"
        return {"message": "Re-crawl started for selected URLs"}

    @app.get("/api/crawler/urls/{record_id}")
    async def crawl_result(record_id: int, request: Request) -> dict:
        require_user(request)
        if record_id not in backend.records:
            raise HTTPException(status_code=404, detail="Crawl result not found")
        return {
            "data": {
                "crawl_url": backend.records[record_id],
                "broken_links": backend.broken_links[record_id],
            }
        }

    @app.post("/api/crawler/urls/{record_id}/crawl")
    async def start_crawl(record_id: int, request: Request) -> dict:
        require_user(request)
        if record_id in backend.failing_starts or record_id not in backend.records:
            raise HTTPException(status_code=500, detail="Failed to start crawl")
        backend.started.append(record_id)
        backend.records[record_id]["status"] = "running"
        return {"message": "Crawl started successfully"}

    @app.delete("/api/crawler/urls")
    async def delete_urls(body: _IDsBody, request: Request) -> dict:
        require_user(request)
        if not body.ids:
            raise HTTPException(status_code=400, detail="No IDs provided")
        for record_id in body.ids:
            backend.records.pop(record_id, None)
        return {"message": "Crawl URLs deleted successfully"}

    return app
