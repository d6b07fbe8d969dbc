import pytest
from fastapi.testclient import TestClient

from dutch_legal_mcp.core.errors import HttpError, MappingError, NetworkError, ValidationError
from dutch_legal_mcp.main import app, get_collector
from dutch_legal_mcp.models.entities import CaseRecord


CASE = CaseRecord(ecli="ECLI:NL:GHARL:2022:5", title="ECLI:NL:GHARL:2022:5 - Gerechtshof", court="Gerechtshof")


class StubCollector:
    max_results_ceiling = 50

    def __init__(self, error=None):
        self.error = error
        self.criteria = None

    async def search(self, criteria):
        self.criteria = criteria
        if self.error:
            raise self.error
        return [CASE]

    async def get_details(self, ecli, base_url=None):
        if self.error:
            raise self.error
        if not ecli.strip():
            raise ValidationError("ECLI is required", field="ecli")
        return CASE


@pytest.fixture()
def stub():
    return StubCollector()


@pytest.fixture()
def client(stub):
    app.dependency_overrides[get_collector] = lambda: stub
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["checks"]["transport_clients"] == 0
    assert "X-Request-ID" in response.headers


def test_search_caps_requested_count(client, stub):
    response = client.post("/api/v1/cases/search", json={"query": "huur", "maxResults": 500})

    assert response.status_code == 200
    body = response.json()
    assert body["total_count"] == 1
    assert body["requested"] == 50
    assert body["results"][0]["ecli"] == CASE.ecli
    assert stub.criteria.max_results == 500


def test_search_rejects_bad_dates(client):
    response = client.post("/api/v1/cases/search", json={"query": "huur", "dateTo": "gisteren"})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "ValidationError"
    assert body["details"]["errors"][0]["loc"][-1] == "dateTo"


def test_case_detail(client):
    response = client.get(f"/api/v1/cases/{CASE.ecli}", headers={"X-Request-ID": "abc"})

    assert response.status_code == 200
    assert response.json()["case"]["court"] == "Gerechtshof"
    assert response.headers["X-Request-ID"] == "abc"


@pytest.mark.parametrize(
    "error, status, code",
    [
        (HttpError("Provider responded with HTTP 404", status=404), 404, "http_error"),
        (MappingError("Invalid content response format"), 404, "mapping_error"),
        (HttpError("Provider responded with HTTP 503", status=503), 502, "http_error"),
        (NetworkError("connection refused"), 502, "network_error"),
    ],
)
def test_upstream_errors_are_mapped(client, stub, error, status, code):
    stub.error = error

    response = client.get(f"/api/v1/cases/{CASE.ecli}")

    assert response.status_code == status
    assert response.json()["error"] == code
    assert response.json()["message"] == error.message
