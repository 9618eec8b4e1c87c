"""Tests for ticket dashboard API routes using FastAPI TestClient."""

from unittest.mock import patch

from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

from app.data import MOCK_TICKET_ROWS
from app.main import app
from app.schemas.tickets import TicketRecord
from app.services.data_source import DataSourceError

client = TestClient(app)

TICKETS = [TicketRecord.model_validate(r) for r in MOCK_TICKET_ROWS]


def _db_error() -> APIError:
    return APIError({"message": "connection error", "code": "PGRST301", "details": None, "hint": None})


# ── GET /api/stats ───────────────────────────────────────────────────


class TestGetStats:
    @patch("app.api.ticket_routes.load_tickets")
    def test_returns_dashboard(self, mock_load):
        mock_load.return_value = TICKETS
        resp = client.get("/api/stats")
        assert resp.status_code == 200
        body = resp.json()
        # the origination ticket is out of scope
        assert body["stats"]["total_tickets"] == 12
        assert body["stats"]["completion_rate"] == 50
        assert len(body["heatmaps"]["day_hour"]["data"]) == 168
        assert body["issues"][-1]["metric"] == "Avg Resolution"

    @patch("app.api.ticket_routes.load_tickets")
    def test_db_error_returns_502(self, mock_load):
        mock_load.side_effect = _db_error()
        resp = client.get("/api/stats")
        assert resp.status_code == 502
        assert resp.json()["detail"] == "Database error"

    @patch("app.api.ticket_routes.load_tickets")
    def test_missing_data_returns_503(self, mock_load):
        mock_load.side_effect = DataSourceError("tickets.json not found")
        resp = client.get("/api/stats")
        assert resp.status_code == 503

    @patch("app.api.ticket_routes.load_tickets")
    def test_unexpected_error_returns_500(self, mock_load):
        mock_load.side_effect = RuntimeError("boom")
        resp = client.get("/api/stats")
        assert resp.status_code == 500
        assert resp.json()["detail"] == "Failed to load stats"


# ── GET /api/tickets ─────────────────────────────────────────────────


class TestGetTickets:
    @patch("app.api.ticket_routes.load_tickets")
    def test_first_page(self, mock_load):
        mock_load.return_value = TICKETS
        resp = client.get("/api/tickets?limit=5")
        assert resp.status_code == 200
        body = resp.json()
        assert len(body["tickets"]) == 5
        assert body["pagination"] == {"page": 1, "limit": 5, "total": 12, "total_pages": 3}
        assert body["filter_options"]["statuses"][0] == "Request Complete"

    @patch("app.api.ticket_routes.load_tickets")
    def test_repeated_list_params(self, mock_load):
        mock_load.return_value = TICKETS
        resp = client.get("/api/tickets?status=New&status=Assigned&sortField=key&sortOrder=asc")
        assert resp.status_code == 200
        keys = [t["key"] for t in resp.json()["tickets"]]
        assert keys == ["CMG-50", "SEW-201", "SEW-202"]

    @patch("app.api.ticket_routes.load_tickets")
    def test_comma_joined_list_params(self, mock_load):
        mock_load.return_value = TICKETS
        resp = client.get("/api/tickets?status=New,Assigned&sortField=key&sortOrder=asc")
        assert resp.status_code == 200
        keys = [t["key"] for t in resp.json()["tickets"]]
        assert keys == ["CMG-50", "SEW-201", "SEW-202"]

    @patch("app.api.ticket_routes.load_tickets")
    def test_assignee_keeps_comma_in_name(self, mock_load):
        mock_load.return_value = TICKETS
        resp = client.get("/api/tickets", params={"assignee": "Chen, David", "priority": "Low"})
        assert resp.status_code == 200
        keys = {t["key"] for t in resp.json()["tickets"]}
        assert keys == {"SH-1003", "SAS-310", "CMG-51"}

    @patch("app.api.ticket_routes.load_tickets")
    def test_later_pages_omit_filter_options(self, mock_load):
        mock_load.return_value = TICKETS
        resp = client.get("/api/tickets?page=2&limit=5")
        assert resp.status_code == 200
        assert resp.json()["filter_options"] is None

    def test_limit_over_500_is_rejected(self):
        resp = client.get("/api/tickets?limit=501")
        assert resp.status_code == 422

    def test_unknown_sort_field_is_rejected(self):
        resp = client.get("/api/tickets?sortField=bogus")
        assert resp.status_code == 422

    @patch("app.api.ticket_routes.load_tickets")
    def test_db_error_returns_502(self, mock_load):
        mock_load.side_effect = _db_error()
        resp = client.get("/api/tickets")
        assert resp.status_code == 502


# ── POST /api/tickets/group ──────────────────────────────────────────


class TestGroupTickets:
    @patch("app.api.ticket_routes.load_tickets")
    def test_group_by_status(self, mock_load):
        mock_load.return_value = TICKETS
        resp = client.post("/api/tickets/group", json={"group_by": "status"})
        assert resp.status_code == 200
        first = resp.json()["groups"][0]
        assert first["name"] == "Request Complete"
        assert first["count"] == 4
        assert first["completion_rate"] == 100

    @patch("app.api.ticket_routes.load_tickets")
    def test_defaults_to_project(self, mock_load):
        mock_load.return_value = TICKETS
        resp = client.post("/api/tickets/group", json={})
        assert resp.status_code == 200
        assert resp.json()["groups"][0]["name"] == "Servicing Help"

    @patch("app.api.ticket_routes.load_tickets")
    def test_unexpected_error_returns_500(self, mock_load):
        mock_load.side_effect = RuntimeError("boom")
        resp = client.post("/api/tickets/group", json={"group_by": "priority"})
        assert resp.status_code == 500
        assert resp.json()["detail"] == "Failed to group tickets"


# ── GET /api/tickets/burndown ────────────────────────────────────────


class TestGetBurndown:
    @patch("app.api.ticket_routes.load_tickets")
    def test_returns_series_and_work(self, mock_load):
        mock_load.return_value = TICKETS
        resp = client.get("/api/tickets/burndown?days=60&priorities=Critical")
        assert resp.status_code == 200
        body = resp.json()
        assert body["series"]
        assert [t["key"] for t in body["open_tickets"]] == ["SEW-201", "SH-1004"]
        assert body["work"]["total_points"] == 16

    @patch("app.api.ticket_routes.load_tickets")
    def test_invalid_range_returns_400(self, mock_load):
        resp = client.get("/api/tickets/burndown?days=45")
        assert resp.status_code == 400
        mock_load.assert_not_called()

    @patch("app.api.ticket_routes.load_tickets")
    def test_missing_data_returns_503(self, mock_load):
        mock_load.side_effect = DataSourceError("unavailable")
        resp = client.get("/api/tickets/burndown")
        assert resp.status_code == 503


# ── GET /api/tickets/advanced ────────────────────────────────────────


class TestGetAdvancedCharts:
    @patch("app.api.ticket_routes.load_tickets")
    def test_returns_charts(self, mock_load):
        mock_load.return_value = TICKETS
        resp = client.get("/api/tickets/advanced")
        assert resp.status_code == 200
        body = resp.json()
        assert len(body["scatter"]) == 6
        assert body["assignee_radar"][0]["assignee"] == "Rivera"

    @patch("app.api.ticket_routes.load_tickets")
    def test_unexpected_error_returns_500(self, mock_load):
        mock_load.side_effect = RuntimeError("boom")
        resp = client.get("/api/tickets/advanced")
        assert resp.status_code == 500
        assert resp.json()["detail"] == "Failed to build charts"
