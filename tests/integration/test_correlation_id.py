import logging
import uuid
from datetime import date, timedelta

import pytest

from modules.core.middleware import resolve_request_id

pytestmark = pytest.mark.integration


def _messages(caplog, event):
    return [r.getMessage() for r in caplog.records if event in r.getMessage()]


class TestResolveRequestId:
    def test_keeps_safe_token(self):
        assert resolve_request_id("checkout-7f3a.retry_2") == "checkout-7f3a.retry_2"

    @pytest.mark.parametrize(
        "raw", [None, "", "x" * 65, "id with spaces", "evil\r\nX-Injected: 1"]
    )
    def test_replaces_unusable_value(self, raw):
        resolved = resolve_request_id(raw)
        assert resolved != raw
        assert str(uuid.UUID(resolved, version=4)) == resolved


class TestCorrelationIdMiddleware:
    def test_returns_provided_request_id(self, client):
        response = client.get("/health", HTTP_X_REQUEST_ID="print-job-123")
        assert response["X-Request-ID"] == "print-job-123"

    def test_oversized_request_id_is_replaced(self, client):
        response = client.get("/health", HTTP_X_REQUEST_ID="a" * 200)
        request_id = response["X-Request-ID"]
        assert str(uuid.UUID(request_id, version=4)) == request_id

    def test_finished_log_carries_duration(self, client, caplog):
        with caplog.at_level(logging.INFO):
            client.get("/health", HTTP_X_REQUEST_ID="timed-request")

        finished = _messages(caplog, "request_finished")
        assert finished
        assert "timed-request" in finished[-1]
        assert "duration_ms" in finished[-1]

    def test_order_logs_carry_request_and_tenant(self, admin_client, company, caplog):
        payload = {
            "client_name": "Sara Haddad",
            "email": "sara@example.com",
            "delivery_date": (date.today() + timedelta(days=3)).isoformat(),
            "delivery_method": "pickup",
            "items": [{"description": "Flyers", "quantity": 1, "unit_price": "20.00"}],
        }

        with caplog.at_level(logging.INFO):
            response = admin_client.post(
                "/api/v1/orders/",
                payload,
                format="json",
                HTTP_X_REQUEST_ID="order-intake-9",
            )

        assert response.status_code == 201
        created = _messages(caplog, "order.created")
        assert created
        assert "order-intake-9" in created[0]
        assert str(company.id) in created[0]
        assert "'role': 'admin'" in created[0]

    def test_request_id_header_is_exposed_to_browsers(self, client, settings):
        settings.CORS_ALLOWED_ORIGINS = ["http://localhost:3000"]

        response = client.get("/health", HTTP_ORIGIN="http://localhost:3000")

        assert "X-Request-ID" in response["Access-Control-Expose-Headers"]
