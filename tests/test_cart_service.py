import pytest

from conftest import session_for
from ecobazaar.domain.errors import AuthenticationRequiredError, RecordNotFoundError
from ecobazaar.domain.schemas import SessionContext
from ecobazaar.services.cart_service import CartService, clamp_quantity


@pytest.fixture
def service(store):
    return CartService(store)


class TestGetCart:
    def test_totals_match_lines(self, service, shopper, make_product, put_in_cart):
        eco = make_product(price="20", carbon=1, eco=True)
        plain = make_product(price="10", carbon=5, eco=False)
        put_in_cart(shopper.id, eco, 2)
        put_in_cart(shopper.id, plain, 1)

        cart = service.get_cart(session_for(shopper))

        assert [i.product_id for i in cart.items] == [eco, plain]
        assert cart.items[0].product.price == 20
        assert cart.totals.total_price == 50
        assert cart.totals.total_carbon == 7
        assert cart.totals.eco_points == 20
        assert cart.item_count == 3

    def test_anonymous(self, service):
        with pytest.raises(AuthenticationRequiredError):
            service.get_cart(SessionContext())


class TestAdd:
    def test_new_product_starts_at_one(self, service, shopper, make_product):
        pid = make_product()
        service.add_product(session_for(shopper), pid)

        cart = service.get_cart(session_for(shopper))
        assert [(i.product_id, i.quantity) for i in cart.items] == [(pid, 1)]

    def test_existing_product_is_incremented(self, service, shopper, make_product):
        pid = make_product()
        service.add_product(session_for(shopper), pid)
        service.add_product(session_for(shopper), pid)

        cart = service.get_cart(session_for(shopper))
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 2

    def test_request_add_intercepts_high_carbon(self, service, shopper, make_product):
        skillet = make_product(name="Skillet", carbon=2, eco=True)
        pan = make_product(name="Pan", carbon=5, eco=False)

        recommendation = service.request_add(session_for(shopper), pan)

        assert recommendation is not None
        assert [p.id for p in recommendation.alternatives] == [skillet]
        # nothing added until the shopper decides
        assert service.get_cart(session_for(shopper)).items == []

    def test_request_add_low_carbon_goes_straight_in(self, service, shopper, make_product):
        make_product(name="Greener", carbon=0.2, eco=True)
        mug = make_product(name="Mug", carbon=1, eco=False)

        assert service.request_add(session_for(shopper), mug) is None
        assert [i.product_id for i in service.get_cart(session_for(shopper)).items] == [mug]

    def test_request_add_without_alternatives_adds(self, service, shopper, make_product):
        pan = make_product(name="Pan", carbon=5, eco=False)
        make_product(name="Shirt", carbon=1, eco=True, category="Clothing")

        assert service.request_add(session_for(shopper), pan) is None
        assert service.get_cart(session_for(shopper)).item_count == 1

    def test_request_add_unknown_product(self, service, shopper):
        with pytest.raises(RecordNotFoundError):
            service.request_add(session_for(shopper), "missing")

    def test_anonymous_add_writes_nothing(self, service, store, make_product):
        pid = make_product()
        with pytest.raises(AuthenticationRequiredError):
            service.add_product(SessionContext(), pid)
        assert store.select("cart_items") == []


class TestQuantity:
    def test_clamp(self):
        assert clamp_quantity(0) == 1
        assert clamp_quantity(-3) == 1
        assert clamp_quantity(4) == 4

    def test_zero_is_clamped_not_deleted(self, service, shopper, make_product, put_in_cart):
        item = put_in_cart(shopper.id, make_product(), 3)

        service.set_quantity(session_for(shopper), item, clamp_quantity(0))

        cart = service.get_cart(session_for(shopper))
        assert [(i.id, i.quantity) for i in cart.items] == [(item, 1)]

    def test_other_users_item_is_not_found(self, service, shopper, make_profile, make_product, put_in_cart):
        other = make_profile()
        item = put_in_cart(other.id, make_product(), 2)

        with pytest.raises(RecordNotFoundError):
            service.set_quantity(session_for(shopper), item, 5)
        with pytest.raises(RecordNotFoundError):
            service.remove_item(session_for(shopper), item)
        assert service.get_cart(session_for(other)).items[0].quantity == 2


class TestRemove:
    def test_remove(self, service, shopper, make_product, put_in_cart):
        keep = make_product()
        item = put_in_cart(shopper.id, make_product(), 1)
        put_in_cart(shopper.id, keep, 1)

        service.remove_item(session_for(shopper), item)

        assert [i.product_id for i in service.get_cart(session_for(shopper)).items] == [keep]
