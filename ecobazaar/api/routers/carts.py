# ecobazaar/api/routers/carts.py
from fastapi import APIRouter, Depends

from ecobazaar.api.deps import get_session
from ecobazaar.api.errors import to_http_error
from ecobazaar.data.database import get_store
from ecobazaar.data.store import RecordStore
from ecobazaar.domain.errors import EcoBazaarError
from ecobazaar.domain.schemas import AddToCartOut, CartItemIn, CartView, QuantityIn, SessionContext
from ecobazaar.services import recommendation_service
from ecobazaar.services.cart_service import CartService, clamp_quantity

router = APIRouter(prefix="/carts", tags=["carts"])


def get_service(store: RecordStore):
    return CartService(store)


@router.get("", response_model=CartView)
def get_cart(
    session: SessionContext = Depends(get_session),
    store: RecordStore = Depends(get_store),
):
    try:
        return get_service(store).get_cart(session)
    except EcoBazaarError as e:
        raise to_http_error(e)


@router.post("/items", response_model=AddToCartOut)
def add_item(
    payload: CartItemIn,
    session: SessionContext = Depends(get_session),
    store: RecordStore = Depends(get_store),
):
    """
    Add-to-cart as clicked by the shopper. A high-carbon product with greener
    alternatives comes back as a recommendation and nothing is added; the
    shopper's choice then goes to ``/carts/items/direct``.
    """
    svc = get_service(store)
    try:
        recommendation = svc.request_add(session, payload.product_id)
        if recommendation is not None:
            return AddToCartOut(added=False, recommendation=recommendation_service.present(recommendation))
        return AddToCartOut(added=True, cart=svc.get_cart(session))
    except EcoBazaarError as e:
        raise to_http_error(e)


@router.post("/items/direct", response_model=CartView)
def add_item_direct(
    payload: CartItemIn,
    session: SessionContext = Depends(get_session),
    store: RecordStore = Depends(get_store),
):
    """Add without recommendation: the chosen alternative, or the original after a rejection."""
    svc = get_service(store)
    try:
        svc.add_product(session, payload.product_id)
        return svc.get_cart(session)
    except EcoBazaarError as e:
        raise to_http_error(e)


@router.patch("/items/{item_id}", response_model=CartView)
def set_quantity(
    item_id: str,
    payload: QuantityIn,
    session: SessionContext = Depends(get_session),
    store: RecordStore = Depends(get_store),
):
    svc = get_service(store)
    try:
        svc.set_quantity(session, item_id, clamp_quantity(payload.quantity))
        return svc.get_cart(session)
    except EcoBazaarError as e:
        raise to_http_error(e)


@router.delete("/items/{item_id}", response_model=CartView)
def remove_item(
    item_id: str,
    session: SessionContext = Depends(get_session),
    store: RecordStore = Depends(get_store),
):
    svc = get_service(store)
    try:
        svc.remove_item(session, item_id)
        return svc.get_cart(session)
    except EcoBazaarError as e:
        raise to_http_error(e)
