"""Integration tests for the cart HTTP endpoints via TestClient."""

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from cart_service.adapters.inbound.web.fastapi_app import create_app
from cart_service.bootstrap import DEMO_CUSTOMER_ID, DEMO_PRODUCT_IDS, build_usecases
from cart_service.config import Settings
from cart_service.core.domain.model.customer import Customer, CustomerId
from cart_service.core.domain.model.money import Money

CUSTOMER = str(DEMO_CUSTOMER_ID)
NOTEBOOK, PEN = (str(p) for p in DEMO_PRODUCT_IDS)


@pytest.fixture()
def usecases():
    return build_usecases(Settings(seed_demo_data=True, operation_timeout_ms=5000))


@pytest.fixture()
def client(usecases):
    return TestClient(create_app(usecases.cart))


def _add_item(client, product_id=NOTEBOOK, quantity=1, customer_id=CUSTOMER):
    return client.post(
        f"/customers/{customer_id}/cart/items",
        json={"product_id": product_id, "quantity": quantity},
    )


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestCartEndpoints:
    def test_add_item_creates_cart(self, client):
        response = _add_item(client, quantity=2)

        assert response.status_code == 200
        body = response.json()
        assert body["customer_id"] == CUSTOMER
        assert body["items"] == [{"product_id": NOTEBOOK, "quantity": 2}]

    def test_get_cart(self, client):
        _add_item(client)
        _add_item(client, product_id=PEN, quantity=3)

        response = client.get(f"/customers/{CUSTOMER}/cart")

        assert response.status_code == 200
        assert [i["product_id"] for i in response.json()["items"]] == [NOTEBOOK, PEN]

    def test_remove_item(self, client):
        _add_item(client)
        _add_item(client, product_id=PEN)

        response = client.delete(f"/customers/{CUSTOMER}/cart/items/{NOTEBOOK}")

        assert response.status_code == 200
        assert response.json()["items"] == [{"product_id": PEN, "quantity": 1}]

    def test_missing_cart_is_404(self, client):
        response = client.get(f"/customers/{CUSTOMER}/cart")

        assert response.status_code == 404
        assert response.json()["type"] == "CartNotFound"

    def test_unknown_customer_is_404(self, client):
        response = _add_item(client, customer_id=str(uuid4()))

        assert response.status_code == 404
        assert response.json()["type"] == "CustomerNotFound"

    def test_unknown_product_is_404(self, client):
        response = _add_item(client, product_id=str(uuid4()))

        assert response.status_code == 404
        assert response.json()["type"] == "ProductNotFound"

    def test_malformed_id_is_400(self, client):
        response = client.get("/customers/not-a-uuid/cart")

        assert response.status_code == 400
        assert response.json()["type"] == "ValidationError"

    def test_invalid_body_is_400(self, client):
        response = _add_item(client, quantity=0)

        assert response.status_code == 400
        assert response.json()["type"] == "RequestValidationError"


class TestCheckoutEndpoint:
    def test_checkout(self, client):
        _add_item(client, quantity=2)

        response = client.post(f"/customers/{CUSTOMER}/cart/checkout")

        assert response.status_code == 200
        body = response.json()
        assert body["purchase_id"]
        assert body["issue"] is None
        # 2 x 1200.00 + 10% default tax
        assert body["total"] == "2640.00"
        assert body["currency"] == "JPY"

    def test_blocked_checkout_is_not_an_error(self, client, usecases):
        owing = Customer(
            customer_id=CustomerId.new(),
            name="Owing",
            country="JP",
            unpaid_balance=Money.of("10.00"),
        )
        usecases.stores.customers.seed(owing)
        owing_id = str(owing.customer_id.value)
        _add_item(client, customer_id=owing_id)

        response = client.post(f"/customers/{owing_id}/cart/checkout")

        assert response.status_code == 200
        body = response.json()
        assert body["issue"] == "unpaid_balance"
        assert body["purchase_id"] is None

    def test_commit_failure_is_500(self, client, usecases):
        _add_item(client)
        usecases.stores.unit_of_work.fail = True

        response = client.post(f"/customers/{CUSTOMER}/cart/checkout")

        assert response.status_code == 500
        assert response.json()["type"] == "PersistenceError"


class TestAsgiFactory:
    def test_factory_reads_settings_from_environment(self, monkeypatch):
        from cart_service.asgi import create_asgi_app

        monkeypatch.setenv("CART_SERVICE_ENVIRONMENT", "test")
        monkeypatch.setenv("CART_SERVICE_OPERATION_TIMEOUT_MS", "2500")

        client = TestClient(create_asgi_app())

        assert client.get("/health").status_code == 200
        assert _add_item(client).status_code == 200
