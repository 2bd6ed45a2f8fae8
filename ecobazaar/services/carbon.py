"""
Carbon accounting over cart lines.

Pure functions, no I/O. A line is anything with ``quantity`` and an optional
``product`` (a joined ``Product`` or None); a missing product contributes
nothing. Callers that show totals and persist them must pass the same lines
to all three functions.
"""
import math
from decimal import Decimal
from typing import Iterable, Protocol

from ecobazaar.domain.schemas import CartTotals, Product

POINTS_PER_ECO_UNIT = 10

# eco level thresholds on the cumulative point balance (strictly greater than)
GOLD_THRESHOLD = 500
SILVER_THRESHOLD = 200


class Line(Protocol):
    quantity: int
    product: Product | None


def total_price(lines: Iterable[Line]) -> Decimal:
    return sum(
        (line.product.price * line.quantity for line in lines if line.product is not None),
        Decimal("0.00"),
    )


def total_carbon(lines: Iterable[Line]) -> float:
    return float(
        sum(line.product.carbon_footprint * line.quantity for line in lines if line.product is not None)
    )


def eco_points(lines: Iterable[Line]) -> int:
    points = sum(
        line.quantity * POINTS_PER_ECO_UNIT
        for line in lines
        if line.product is not None and line.product.is_eco_friendly
    )
    return max(0, math.floor(points))


def summarize(lines: Iterable[Line]) -> CartTotals:
    lines = list(lines)
    return CartTotals(
        total_price=total_price(lines),
        total_carbon=total_carbon(lines),
        eco_points=eco_points(lines),
    )


def item_count(lines: Iterable[Line]) -> int:
    return sum(line.quantity for line in lines)


def eco_level(carbon_points: int) -> str:
    if carbon_points > GOLD_THRESHOLD:
        return "Gold"
    if carbon_points > SILVER_THRESHOLD:
        return "Silver"
    return "Bronze"


def carbon_savings_percent(candidate: Product, alternative: Product) -> int:
    """How much lower the alternative's footprint is, as a whole percentage."""
    if candidate.carbon_footprint <= 0:
        return 0
    saving = (candidate.carbon_footprint - alternative.carbon_footprint) / candidate.carbon_footprint
    return int(round(saving * 100))


def price_saving(candidate: Product, alternative: Product) -> Decimal | None:
    """Price difference when the alternative is cheaper, else None."""
    if alternative.price < candidate.price:
        return candidate.price - alternative.price
    return None
