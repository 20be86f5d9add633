"""Tests for the Cart aggregate and the cart line factory."""

from decimal import Decimal

import pytest

from cart_service.core.domain.model.cart import (
    Cart,
    CartLine,
    CustomerCartSpec,
    create_cart_line,
)
from cart_service.core.domain.model.customer import Customer, CustomerId
from cart_service.core.domain.model.money import Money
from cart_service.core.domain.model.product import Product, ProductId
from cart_service.core.domain.service.tax_service import TaxService


def _customer(country="JP"):
    return Customer(customer_id=CustomerId.new(), name="Aiko", country=country)


def _product(price="100.00"):
    return Product(product_id=ProductId.new(), name="Widget", unit_price=Money.of(price))


def _line(product, quantity, tax="0.00"):
    return CartLine(
        product_id=product.product_id,
        quantity=quantity,
        unit_price=product.unit_price,
        tax=Money.of(tax),
    )


class TestCartCreation:
    def test_new_cart_belongs_to_customer_and_is_empty(self):
        customer = _customer()
        cart = Cart.create(customer)

        assert cart.customer_id == customer.customer_id
        assert cart.is_empty

    def test_each_cart_gets_its_own_id(self):
        customer = _customer()
        assert Cart.create(customer).cart_id != Cart.create(customer).cart_id


class TestCartLines:
    def test_add_appends_new_product(self):
        cart = Cart.create(_customer())
        a, b = _product(), _product()

        cart.add(_line(a, 1))
        cart.add(_line(b, 2))

        assert [ln.product_id for ln in cart.lines] == [a.product_id, b.product_id]

    def test_add_existing_product_sums_quantity_and_tax(self):
        cart = Cart.create(_customer())
        a, b = _product(), _product()
        cart.add(_line(a, 2, tax="20.00"))
        cart.add(_line(b, 1))

        cart.add(_line(a, 1, tax="10.00"))

        assert len(cart.lines) == 2
        merged = cart.lines[0]
        assert merged.product_id == a.product_id
        assert merged.quantity == 3
        assert merged.tax == Money.of("30.00")

    def test_remove_drops_line(self):
        cart = Cart.create(_customer())
        a = _product()
        cart.add(_line(a, 2))

        cart.remove(a.product_id)

        assert cart.is_empty

    def test_remove_missing_product_is_a_no_op(self):
        cart = Cart.create(_customer())
        a = _product()
        cart.add(_line(a, 2))

        cart.remove(ProductId.new())

        assert [ln.quantity for ln in cart.lines] == [2]

    def test_total_includes_tax(self):
        cart = Cart.create(_customer())
        cart.add(_line(_product("100.00"), 2, tax="20.00"))
        cart.add(_line(_product("50.00"), 1, tax="5.00"))

        assert cart.total() == Money.of("275.00")

    def test_clear(self):
        cart = Cart.create(_customer())
        cart.add(_line(_product(), 1))

        cart.clear()

        assert cart.is_empty

    def test_currency_follows_first_line(self):
        cart = Cart.create(_customer())
        assert cart.currency is None

        cart.add(_line(_product(), 1))

        assert cart.currency == "JPY"

    def test_rejects_line_in_another_currency(self):
        cart = Cart.create(_customer())
        cart.add(_line(_product(), 1))
        mug = Product(
            product_id=ProductId.new(), name="Mug", unit_price=Money.of("9.00", "USD")
        )

        with pytest.raises(ValueError, match="currency_mismatch"):
            cart.add(
                CartLine(
                    product_id=mug.product_id,
                    quantity=1,
                    unit_price=mug.unit_price,
                    tax=Money.of("0.90", "USD"),
                )
            )
        assert len(cart.lines) == 1


class TestCreateCartLine:
    def test_tax_is_attached_at_creation(self):
        customer = _customer()
        cart = Cart.create(customer)
        product = _product("200.00")

        line = create_cart_line(customer, cart, product, 3, TaxService(default_rate=Decimal("0.08")))

        assert line.quantity == 3
        assert line.unit_price == Money.of("200.00")
        assert line.tax == Money.of("48.00")

    def test_rejects_non_positive_quantity(self):
        customer = _customer()
        with pytest.raises(ValueError):
            create_cart_line(customer, Cart.create(customer), _product(), 0, TaxService())

    def test_rejects_cart_of_another_customer(self):
        owner, other = _customer(), _customer()
        with pytest.raises(ValueError):
            create_cart_line(other, Cart.create(owner), _product(), 1, TaxService())


class TestCustomerCartSpec:
    def test_matches_only_the_owners_cart(self):
        owner, other = _customer(), _customer()
        spec = CustomerCartSpec(owner.customer_id)

        assert spec.is_satisfied_by(Cart.create(owner))
        assert not spec.is_satisfied_by(Cart.create(other))
