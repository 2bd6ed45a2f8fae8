# ecobazaar/api/deps.py
from fastapi import Depends, Query

from ecobazaar.data.database import get_store
from ecobazaar.data.store import RecordStore
from ecobazaar.domain.schemas import SessionContext
from ecobazaar.services.checkout_ledger import RedisCheckoutLedger
from ecobazaar.services.notification_service import NotificationService
from ecobazaar.services.profile_service import ProfileService

_ledger = None


def get_ledger():
    global _ledger
    if _ledger is None:
        _ledger = RedisCheckoutLedger()
    return _ledger


def get_session(
    user_id: str | None = Query(None, description="Authenticated user id, set by the auth layer"),
    store: RecordStore = Depends(get_store),
) -> SessionContext:
    return ProfileService(store).load_session(user_id)


def get_notifier():
    return NotificationService()
