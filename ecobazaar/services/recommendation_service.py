# ecobazaar/services/recommendation_service.py
from typing import Sequence

from ecobazaar.domain.schemas import AlternativeOut, Product, Recommendation, RecommendationOut
from ecobazaar.services import carbon

# kg CO2e per unit above which a non eco-friendly product gets intercepted
CARBON_THRESHOLD = 3
MAX_ALTERNATIVES = 2


def should_intercept(candidate: Product) -> bool:
    return not candidate.is_eco_friendly and candidate.carbon_footprint > CARBON_THRESHOLD


def is_alternative(candidate: Product, product: Product) -> bool:
    return (
        product.id != candidate.id
        and product.category == candidate.category
        and product.carbon_footprint < candidate.carbon_footprint
        and product.is_eco_friendly
    )


def decide(candidate: Product, catalog: Sequence[Product]) -> Recommendation | None:
    """
    Decide whether adding ``candidate`` to the cart should be intercepted.

    Returns None when the candidate does not trigger (eco-friendly, or at most
    CARBON_THRESHOLD) or when no alternative qualifies; the caller then adds
    the candidate directly. Otherwise returns up to MAX_ALTERNATIVES
    alternatives in catalog order.
    """
    if not should_intercept(candidate):
        return None

    alternatives = [p for p in catalog if is_alternative(candidate, p)][:MAX_ALTERNATIVES]
    if not alternatives:
        return None

    return Recommendation(candidate=candidate, alternatives=alternatives)


def present(recommendation: Recommendation) -> RecommendationOut:
    """Attach savings figures for display."""
    candidate = recommendation.candidate
    return RecommendationOut(
        candidate=candidate,
        alternatives=[
            AlternativeOut(
                product=alt,
                carbon_savings_percent=carbon.carbon_savings_percent(candidate, alt),
                price_saving=carbon.price_saving(candidate, alt),
            )
            for alt in recommendation.alternatives
        ],
    )
