from decimal import Decimal

from ecobazaar.domain.schemas import Product
from ecobazaar.services import recommendation_service as rec


def _product(pid, carbon_footprint, eco, category="Kitchen", price="10"):
    return Product(
        id=pid,
        name=pid,
        price=Decimal(price),
        carbon_footprint=carbon_footprint,
        is_eco_friendly=eco,
        category=category,
    )


class TestDecide:
    def test_single_kitchen_alternative(self):
        pan = _product("pan", 5, False)
        skillet = _product("skillet", 2, True)
        shirt = _product("shirt", 1, True, category="Clothing")

        result = rec.decide(pan, [pan, skillet, shirt])

        assert result is not None
        assert result.candidate.id == "pan"
        assert [p.id for p in result.alternatives] == ["skillet"]

    def test_below_threshold_never_intercepts(self):
        low = _product("low", 1, False)
        greener = _product("greener", 0.1, True)
        assert rec.decide(low, [low, greener]) is None

    def test_threshold_itself_does_not_intercept(self):
        edge = _product("edge", 3, False)
        assert rec.decide(edge, [edge, _product("g", 1, True)]) is None

    def test_eco_friendly_candidate_never_intercepts(self):
        heavy_eco = _product("heavy", 9, True)
        assert rec.decide(heavy_eco, [heavy_eco, _product("g", 1, True)]) is None

    def test_at_most_two_in_catalog_order(self):
        pan = _product("pan", 8, False)
        catalog = [pan] + [_product(f"alt{i}", i, True) for i in range(1, 5)]

        result = rec.decide(pan, catalog)

        assert [p.id for p in result.alternatives] == ["alt1", "alt2"]

    def test_alternatives_must_be_greener_and_eco_friendly(self):
        pan = _product("pan", 5, False)
        catalog = [
            pan,
            _product("same_carbon", 5, True),
            _product("plain", 1, False),
            _product("other_category", 1, True, category="Garden"),
        ]
        assert rec.decide(pan, catalog) is None

    def test_candidate_is_never_its_own_alternative(self):
        pan = _product("pan", 5, False)
        twin = pan.model_copy(update={"is_eco_friendly": True, "carbon_footprint": 1})
        # same id, even if the catalog row looks like a valid alternative
        assert rec.decide(pan, [twin]) is None

    def test_lowering_the_candidate_footprint_never_adds_alternatives(self):
        catalog = [_product("a", 1, True), _product("b", 3.5, True), _product("c", 4.5, True)]
        previous = None
        for footprint in (10, 6, 4, 3.2):
            result = rec.decide(_product("x", footprint, False), catalog)
            count = len(result.alternatives) if result else 0
            if previous is not None:
                assert count <= previous
            previous = count


class TestCatalogChanges:
    """Fixed candidate, growing or shrinking catalog."""

    def test_adding_alternatives_never_drops_one_below_the_cap(self):
        pan = _product("pan", 8, False)
        catalog = [pan]
        previous = []

        for i in range(1, 5):
            catalog.append(_product(f"alt{i}", i, True))
            current = [p.id for p in rec.decide(pan, catalog).alternatives]

            if len(previous) < rec.MAX_ALTERNATIVES:
                assert set(previous) <= set(current)
            assert len(current) == min(i, rec.MAX_ALTERNATIVES)
            previous = current

    def test_adding_non_qualifying_products_changes_nothing(self):
        pan = _product("pan", 5, False)
        skillet = _product("skillet", 2, True)
        catalog = [pan, skillet]
        before = rec.decide(pan, catalog)

        catalog += [_product("plain", 1, False), _product("heavier", 7, True), _product("shirt", 1, True, "Clothing")]

        assert rec.decide(pan, catalog) == before

    def test_removing_the_only_alternative_collapses_to_none(self):
        pan = _product("pan", 5, False)
        skillet = _product("skillet", 2, True)
        catalog = [pan, skillet, _product("plain", 1, False)]
        assert [p.id for p in rec.decide(pan, catalog).alternatives] == ["skillet"]

        catalog.remove(skillet)

        assert rec.decide(pan, catalog) is None

    def test_removing_one_of_two_keeps_the_other(self):
        pan = _product("pan", 5, False)
        first, second = _product("first", 1, True), _product("second", 2, True)

        assert [p.id for p in rec.decide(pan, [pan, first]).alternatives] == ["first"]
        assert [p.id for p in rec.decide(pan, [pan, second]).alternatives] == ["second"]
        assert [p.id for p in rec.decide(pan, [pan, first, second]).alternatives] == ["first", "second"]


class TestPresent:
    def test_savings_attached(self):
        pan = _product("pan", 5, False, price="40")
        skillet = _product("skillet", 2, True, price="30")

        out = rec.present(rec.decide(pan, [skillet]))

        assert out.candidate.id == "pan"
        assert out.alternatives[0].product.id == "skillet"
        assert out.alternatives[0].carbon_savings_percent == 60
        assert out.alternatives[0].price_saving == Decimal("10")
