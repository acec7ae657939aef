"""Tests for GET /api/data."""

from decimal import Decimal
from uuid import uuid4


class TestValidation:

    def test_type_required(self, client):
        response = client.get("/api/data")

        assert response.status_code == 400
        assert "'type' query parameter is required" in response.json()["error"]["message"]

    def test_unknown_type(self, client):
        response = client.get("/api/data", params={"type": "tickets"})

        assert response.status_code == 400

    def test_bad_uuid_is_422(self, client):
        response = client.get("/api/data", params={"type": "invoices", "id": "not-a-uuid"})

        assert response.status_code == 422


class TestCompany:

    def test_none_before_setup(self, client):
        body = client.get("/api/data", params={"type": "company"}).json()

        assert body["success"] is True
        assert body["data"] is None

    def test_returns_profile(self, client, api_company):
        data = client.get("/api/data", params={"type": "company"}).json()["data"]

        assert data["id"] == api_company["id"]
        assert data["name"] == "Café Central"


class TestInvoices:

    def test_by_id(self, client, api_invoice):
        data = client.get("/api/data", params={"type": "invoices", "id": api_invoice["id"]}).json()["data"]

        assert data["number"] == api_invoice["number"]

    def test_unknown_id_is_404(self, client):
        response = client.get("/api/data", params={"type": "invoices", "id": str(uuid4())})

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    def test_include_notes_and_balance(self, client, act, api_invoice):
        act("note", "create", {
            "type": "debit",
            "invoice_id": api_invoice["id"],
            "reason": "additional_charge",
            "reason_description": "Delivery",
            "items": [{"description": "Delivery", "quantity": 1, "unit_price": {"amount": "300", "currency": "COP"}}],
        })

        data = client.get("/api/data", params={
            "type": "invoices", "id": api_invoice["id"], "include": "notes,balance",
        }).json()["data"]

        assert len(data["notes_issued"]) == 1
        assert Decimal(data["balance"]["final_balance"]) == Decimal("2500")

    def test_list_and_status_filter(self, client, act, api_invoice):
        act("invoice", "update_status", {"id": api_invoice["id"], "status": "pending"})
        act("invoice", "create", {})

        everything = client.get("/api/data", params={"type": "invoices"}).json()["data"]
        pending = client.get("/api/data", params={"type": "invoices", "filter": "pending"}).json()["data"]

        assert len(everything) == 2
        assert [i["id"] for i in pending] == [api_invoice["id"]]

    def test_recent_limit(self, client, act, api_company):
        for _ in range(3):
            act("invoice", "create", {})

        recent = client.get("/api/data", params={"type": "invoices", "filter": "recent", "limit": 2}).json()["data"]

        assert len(recent) == 2

    def test_unknown_filter(self, client):
        response = client.get("/api/data", params={"type": "invoices", "filter": "unpaid"})

        assert response.status_code == 400

    def test_stats(self, client, act, api_invoice):
        act("invoice", "update_status", {"id": api_invoice["id"], "status": "completed"})

        stats = client.get("/api/data/invoices/stats").json()["data"]

        assert stats["total_invoices"] == 1
        assert stats["completed_invoices"] == 1
        assert Decimal(stats["total_revenue"]) == Decimal("2200")

    def test_balance_unknown_invoice(self, client):
        response = client.get(f"/api/data/invoices/{uuid4()}/balance")

        assert response.status_code == 404


class TestNotes:

    def _create(self, act, invoice_id, type):
        return act("note", "create", {
            "type": type,
            "invoice_id": invoice_id,
            "reason": "other",
            "reason_description": "Manual",
        }).json()["data"]

    def test_filters(self, client, act, api_invoice):
        credit = self._create(act, api_invoice["id"], "credit")
        debit = self._create(act, api_invoice["id"], "debit")

        by_invoice = client.get("/api/data", params={"type": "notes", "invoice_id": api_invoice["id"]}).json()["data"]
        credits = client.get("/api/data", params={"type": "notes", "filter": "credit"}).json()["data"]
        debits_for_invoice = client.get("/api/data", params={
            "type": "notes", "invoice_id": api_invoice["id"], "filter": "debit",
        }).json()["data"]

        assert {n["id"] for n in by_invoice} == {credit["id"], debit["id"]}
        assert [n["id"] for n in credits] == [credit["id"]]
        assert [n["id"] for n in debits_for_invoice] == [debit["id"]]

    def test_by_id(self, client, act, api_invoice):
        note = self._create(act, api_invoice["id"], "credit")

        data = client.get("/api/data", params={"type": "notes", "id": note["id"]}).json()["data"]

        assert data["reason_description"] == "Manual"

    def test_unknown_id(self, client):
        response = client.get("/api/data", params={"type": "notes", "id": str(uuid4())})

        assert response.status_code == 404
