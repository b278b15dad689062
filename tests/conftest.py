import httpx
import pytest
from fastapi.testclient import TestClient

from customer_demo.console.client import CustomerApiClient, get_api_client
from customer_demo.database import Base, dispose_engine, get_engine, get_session_local
from customer_demo.main import app


TARO = {
    "id": "C001",
    "username": "Taro",
    "email": "taro@example.com",
    "phoneNumber": "09012345678",
    "postCode": "1234567",
}


@pytest.fixture()
def db_url(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'test.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    monkeypatch.setenv("SKIP_DB_INIT", "1")
    dispose_engine()
    Base.metadata.create_all(bind=get_engine())
    yield url
    dispose_engine()


@pytest.fixture()
def db_session(db_url):
    Session = get_session_local()
    session = Session()
    yield session
    session.close()


@pytest.fixture()
def client(db_url):
    return TestClient(app)


@pytest.fixture()
def console(db_url):
    """Browser-side client whose console pages talk to the API in-process"""
    api_http = TestClient(app)
    app.dependency_overrides[get_api_client] = lambda: CustomerApiClient(api_http)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def offline_console():
    """Console whose Data Service cannot be reached"""

    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    http = httpx.Client(base_url="http://api.invalid", transport=httpx.MockTransport(refuse))
    app.dependency_overrides[get_api_client] = lambda: CustomerApiClient(http)
    yield TestClient(app)
    app.dependency_overrides.clear()
    http.close()
