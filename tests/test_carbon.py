from decimal import Decimal

from ecobazaar.domain.schemas import CartItem, Product
from ecobazaar.services import carbon


def _product(pid, price, carbon_footprint, eco):
    return Product(
        id=pid,
        name=pid,
        price=Decimal(price),
        carbon_footprint=carbon_footprint,
        is_eco_friendly=eco,
        category="Kitchen",
    )


def _line(product, quantity):
    return CartItem(
        id=f"ci-{product.id if product else 'x'}",
        user_id="u1",
        product_id=product.id if product else "gone",
        quantity=quantity,
        product=product,
    )


class TestCartTotals:
    def test_mixed_cart(self):
        lines = [
            _line(_product("eco", "20", 1, True), 2),
            _line(_product("plain", "10", 5, False), 1),
        ]

        assert carbon.total_price(lines) == Decimal("50")
        assert carbon.total_carbon(lines) == 7
        assert carbon.eco_points(lines) == 20

    def test_empty_cart_is_zero(self):
        assert carbon.total_price([]) == Decimal("0.00")
        assert carbon.total_carbon([]) == 0
        assert carbon.eco_points([]) == 0
        assert carbon.item_count([]) == 0

    def test_line_without_product_contributes_nothing(self):
        lines = [_line(None, 4), _line(_product("eco", "3.50", 0.5, True), 1)]

        totals = carbon.summarize(lines)
        assert totals.total_price == Decimal("3.50")
        assert totals.total_carbon == 0.5
        assert totals.eco_points == 10
        # quantity still counts for the badge
        assert carbon.item_count(lines) == 5

    def test_non_eco_lines_earn_no_points(self):
        assert carbon.eco_points([_line(_product("plain", "1", 9, False), 7)]) == 0

    def test_summarize_accepts_a_generator(self):
        lines = [_line(_product("eco", "2", 1, True), 3)]
        totals = carbon.summarize(line for line in lines)
        assert totals.total_price == Decimal("6")
        assert totals.eco_points == 30


class TestEcoLevel:
    def test_thresholds_are_strict(self):
        assert carbon.eco_level(0) == "Bronze"
        assert carbon.eco_level(200) == "Bronze"
        assert carbon.eco_level(201) == "Silver"
        assert carbon.eco_level(500) == "Silver"
        assert carbon.eco_level(501) == "Gold"


class TestSavings:
    def test_percent_and_price(self):
        pan = _product("pan", "34.50", 5, False)
        skillet = _product("skillet", "30.00", 2, True)

        assert carbon.carbon_savings_percent(pan, skillet) == 60
        assert carbon.price_saving(pan, skillet) == Decimal("4.50")

    def test_more_expensive_alternative_has_no_price_saving(self):
        pan = _product("pan", "10", 5, False)
        skillet = _product("skillet", "12", 2, True)
        assert carbon.price_saving(pan, skillet) is None

    def test_zero_footprint_candidate(self):
        assert carbon.carbon_savings_percent(_product("a", "1", 0, False), _product("b", "1", 0, True)) == 0
