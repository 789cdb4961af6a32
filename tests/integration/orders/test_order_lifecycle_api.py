"""Integration tests for status transitions, payment and delivery over HTTP."""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.accounts.models import Role
from modules.core.models import OutboxEvent
from modules.orders.models import Order
from modules.statuses.models import OrderStatus

pytestmark = pytest.mark.integration


def _url(order, suffix=""):
    return f"/api/v1/orders/{order.id}/{suffix}"


@pytest.fixture()
def order(company, statuses, make_order):
    return make_order(company, unit_price="100.00")


class TestAdvanceStatus:
    def test_moves_to_any_registry_status(self, admin_client, order):
        response = admin_client.patch(
            _url(order), {"status": "Design Approval", "notes": "Proof sent"}, format="json"
        )

        assert response.status_code == 200
        assert response.data["status"] == "Design Approval"
        latest = response.data["status_history"][0]
        assert latest["old_status"] == "New"
        assert latest["new_status"] == "Design Approval"
        assert latest["notes"] == "Proof sent"
        assert OutboxEvent.objects.filter(event_type="OrderStatusChanged").count() == 1

    def test_unknown_status(self, admin_client, order):
        response = admin_client.patch(_url(order), {"status": "Lost"}, format="json")

        assert response.status_code == 404
        order.refresh_from_db()
        assert order.status == "New"

    def test_same_status_is_a_no_op(self, admin_client, order):
        response = admin_client.patch(_url(order), {"status": "New"}, format="json")

        assert response.status_code == 200
        assert len(response.data["status_history"]) == 1

    def test_delivered_with_balance_due_points_to_delivery(self, admin_client, order):
        response = admin_client.patch(_url(order), {"status": "Delivered"}, format="json")

        assert response.status_code == 409
        assert Decimal(response.data["remaining"]) == Decimal("100.00")
        order.refresh_from_db()
        assert order.status == "New"

    def test_detail_cache_is_dropped(self, admin_client, order):
        assert admin_client.get(_url(order)).data["status"] == "New"

        admin_client.patch(_url(order), {"status": "Shipping"}, format="json")

        assert admin_client.get(_url(order)).data["status"] == "Shipping"

    def test_accountant_cannot_advance(self, client_for, company, order):
        client = client_for(company, Role.ACCOUNTANT)

        response = client.patch(_url(order), {"status": "Shipping"}, format="json")

        assert response.status_code == 403


class TestConfirmPayment:
    def test_method_is_required(self, admin_client, order):
        response = admin_client.post(_url(order, "confirm-payment/"), {}, format="json")

        assert response.status_code == 400
        assert response.data["detail"] == "Payment method is required."

    def test_cash_pays_in_full_and_starts_production(self, client_for, company, order):
        client = client_for(company, Role.ACCOUNTANT)

        response = client.post(
            _url(order, "confirm-payment/"), {"payment_method": "cash"}, format="json"
        )

        assert response.status_code == 200
        assert response.data["status"] == "Ready for Production"
        assert response.data["payment_method"] == "cash"
        assert response.data["payment_status"] == "paid"
        assert Decimal(response.data["paid_amount"]) == Decimal("100.00")
        assert response.data["status_history"][0]["new_status"] == "Ready for Production"
        assert OutboxEvent.objects.filter(event_type="PaymentConfirmed").count() == 1

    def test_advanced_deposit(self, admin_client, order):
        response = admin_client.post(
            _url(order, "confirm-payment/"),
            {"payment_method": "advanced", "paid_amount": "40.00"},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["payment_status"] == "partial"
        assert Decimal(response.data["remaining_balance"]) == Decimal("60.00")

    def test_full_deposit_is_partial_until_delivery(self, admin_client, order):
        response = admin_client.post(
            _url(order, "confirm-payment/"),
            {
                "payment_method": "advanced",
                "payment_status": "partial",
                "paid_amount": "100.00",
            },
            format="json",
        )

        assert response.status_code == 200
        assert response.data["payment_status"] == "partial"
        assert Decimal(response.data["remaining_balance"]) == Decimal("0.00")

        response = admin_client.post(_url(order, "deliver/"), {}, format="json")

        assert response.status_code == 200
        assert response.data["status"] == "Delivered"
        assert response.data["payment_status"] == "paid"

    def test_deposit_above_total(self, admin_client, order):
        response = admin_client.post(
            _url(order, "confirm-payment/"),
            {"payment_method": "advanced", "paid_amount": "150.00"},
            format="json",
        )

        assert response.status_code == 400
        order.refresh_from_db()
        assert order.paid_amount == Decimal("0.00")

    def test_missing_ready_for_production_status(self, admin_client, order, company):
        OrderStatus.objects.filter(company=company, name="Ready for Production").delete()

        response = admin_client.post(
            _url(order, "confirm-payment/"), {"payment_method": "cash"}, format="json"
        )

        assert response.status_code == 400
        assert "Ready for Production" in response.data["detail"]

    def test_sales_cannot_confirm(self, client_for, company, order):
        client = client_for(company, Role.SALES)

        response = client.post(
            _url(order, "confirm-payment/"), {"payment_method": "cash"}, format="json"
        )

        assert response.status_code == 403


class TestDelivery:
    def _confirm_cod(self, client, order):
        client.post(_url(order, "confirm-payment/"), {"payment_method": "cod"}, format="json")

    def test_settlement_quote(self, admin_client, order):
        response = admin_client.get(_url(order, "settlement/"))

        assert response.status_code == 200
        assert Decimal(response.data["remaining"]) == Decimal("100.00")
        assert response.data["balance_due"] is True

    def test_balance_due_blocks_delivery(self, admin_client, order):
        self._confirm_cod(admin_client, order)

        response = admin_client.post(_url(order, "deliver/"), {}, format="json")

        assert response.status_code == 409
        assert Decimal(response.data["remaining"]) == Decimal("100.00")
        order.refresh_from_db()
        assert order.status == "Ready for Production"

    def test_collected_balance_settles_in_full(self, client_for, company, order):
        client = client_for(company, Role.PRODUCTION)
        self._confirm_cod(client_for(company, Role.ACCOUNTANT), order)

        response = client.post(
            _url(order, "deliver/"), {"collection_method": "card"}, format="json"
        )

        assert response.status_code == 200
        assert response.data["status"] == "Delivered"
        assert response.data["payment_status"] == "paid"
        assert Decimal(response.data["paid_amount"]) == Decimal("100.00")
        assert "card" in response.data["status_history"][0]["notes"]
        assert OutboxEvent.objects.filter(event_type="OrderDelivered").count() == 1

    def test_invalid_collection_method(self, admin_client, order):
        response = admin_client.post(
            _url(order, "deliver/"), {"collection_method": "cheque"}, format="json"
        )

        assert response.status_code == 400
        assert Order.objects.get(id=order.id).status == "New"

    def test_paid_order_delivers_without_method(self, admin_client, order):
        admin_client.post(
            _url(order, "confirm-payment/"), {"payment_method": "cash"}, format="json"
        )

        response = admin_client.post(_url(order, "deliver/"), {}, format="json")

        assert response.status_code == 200
        assert response.data["status"] == "Delivered"

    def test_designer_cannot_deliver(self, client_for, company, order):
        client = client_for(company, Role.DESIGNER)

        response = client.post(
            _url(order, "deliver/"), {"collection_method": "cash"}, format="json"
        )

        assert response.status_code == 403
