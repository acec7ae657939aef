"""API test fixtures — TestClient over in-memory services."""

import pytest
from starlette.testclient import TestClient

from api.app import create_app


@pytest.fixture
def services(company_service, invoice_service, note_service):
    return {
        "company": company_service,
        "invoice": invoice_service,
        "note": note_service,
    }


@pytest.fixture
def app(services):
    return create_app(services)


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def act(client):
    """POST an action and return the response."""
    def _act(domain: str, action: str, data: dict | None = None):
        return client.post("/api/actions", json={"domain": domain, "action": action, "data": data or {}})
    return _act


@pytest.fixture
def api_company(act):
    response = act("company", "create", {"name": "Café Central", "tip_percentage": "10", "tip_enabled": True})
    assert response.status_code == 200
    return response.json()["data"]


@pytest.fixture
def api_invoice(act, api_company):
    response = act("invoice", "create", {
        "items": [{"description": "Coffee", "quantity": "2", "unit_price": {"amount": "1000", "currency": "COP"}}],
    })
    assert response.status_code == 200
    return response.json()["data"]
