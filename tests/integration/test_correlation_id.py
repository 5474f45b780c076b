"""Integration tests for request correlation IDs.

Covers:
- the ``X-Request-ID`` header is echoed back, or generated when absent.
- API error responses carry the header too.
- log lines emitted by services during a request include the ID.
"""

import logging
import uuid

import pytest

pytestmark = pytest.mark.integration


class TestCorrelationIdHeader:
    def test_echoes_provided_id(self, api_client_with_correlation):
        client, cid = api_client_with_correlation

        response = client.get("/api/v1/products/")

        assert response["X-Request-ID"] == cid

    def test_generates_uuid4_when_absent(self, api_client):
        request_id = api_client.get("/health")["X-Request-ID"]

        assert str(uuid.UUID(request_id, version=4)) == request_id

    def test_present_on_error_responses(self, api_client_with_correlation):
        client, cid = api_client_with_correlation

        response = client.get("/api/v1/cart/")

        assert response.status_code == 401
        assert response["X-Request-ID"] == cid

    def test_ids_differ_between_requests(self, api_client):
        first = api_client.get("/health")["X-Request-ID"]
        second = api_client.get("/health")["X-Request-ID"]

        assert first != second


class TestCorrelationIdInLogs:
    def test_service_logs_carry_request_id(self, customer, make_product, caplog):
        from rest_framework.test import APIClient

        client = APIClient()
        client.force_authenticate(user=customer)
        product = make_product(stock=5)
        cid = "req-cart-add-0001"

        with caplog.at_level(logging.INFO):
            client.post(
                "/api/v1/cart/items/",
                {"product_id": str(product.id), "quantity": 1},
                format="json",
                HTTP_X_REQUEST_ID=cid,
            )

        messages = [record.getMessage() for record in caplog.records]
        assert any("cart.item_added" in m and cid in m for m in messages), messages
