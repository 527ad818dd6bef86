import httpx
import pytest

from crawldash.services.api_client import CrawlerAPIClient
from crawldash.services.session import Session
from crawldash.services.storage import MemoryStorage
from fake_backend import FakeBackend, create_app

BASE_URL = "http://backend.test/api"


@pytest.fixture
def backend() -> FakeBackend:
    fake = FakeBackend()
    fake.add_user("Ada", "ada@example.com", "secret")
    return fake


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def session(storage) -> Session:
    return Session(storage)


@pytest.fixture
def client(backend, session) -> CrawlerAPIClient:
    transport = httpx.ASGITransport(app=create_app(backend))
    return CrawlerAPIClient(session, BASE_URL, transport=transport)


@pytest.fixture
def signed_in(backend, session) -> Session:
    session.set(backend.issue_token("ada@example.com"))
    return session
