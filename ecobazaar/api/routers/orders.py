# ecobazaar/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, Header

from ecobazaar.api.deps import get_ledger, get_notifier, get_session
from ecobazaar.api.errors import to_http_error
from ecobazaar.data.database import get_store
from ecobazaar.data.store import RecordStore
from ecobazaar.domain.errors import EcoBazaarError
from ecobazaar.domain.schemas import CheckoutResult, Order, OrderItem, SessionContext
from ecobazaar.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(store: RecordStore, ledger, notifier=None):
    return OrderService(store, ledger, notifier)


@router.post("", response_model=CheckoutResult, status_code=201)
def place_order(
    session: SessionContext = Depends(get_session),
    store: RecordStore = Depends(get_store),
    ledger=Depends(get_ledger),
    notifier=Depends(get_notifier),
    idempotency_key: str | None = Header(None, alias="Idempotency-Key"),
):
    """
    Checkout the session's cart.

    Send the same Idempotency-Key when retrying; a finished checkout is
    answered again without new writes and a partial one is continued.
    """
    try:
        return get_service(store, ledger, notifier).place_order(session, idempotency_key)
    except EcoBazaarError as e:
        raise to_http_error(e)


@router.get("", response_model=List[Order])
def list_orders(
    session: SessionContext = Depends(get_session),
    store: RecordStore = Depends(get_store),
):
    #history reads never touch the checkout ledger
    try:
        return get_service(store, None).list_orders(session)
    except EcoBazaarError as e:
        raise to_http_error(e)


@router.get("/{order_id}/items", response_model=List[OrderItem])
def get_order_items(
    order_id: str,
    session: SessionContext = Depends(get_session),
    store: RecordStore = Depends(get_store),
):
    #history reads never touch the checkout ledger
    try:
        return get_service(store, None).get_order_items(session, order_id)
    except EcoBazaarError as e:
        raise to_http_error(e)
