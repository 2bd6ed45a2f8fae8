# ecobazaar/api/routers/health.py
from fastapi import APIRouter, Depends

from ecobazaar.data.database import get_store
from ecobazaar.data.store import RecordStore

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
def health_check():
    """Service liveness, no external dependencies."""
    return {"message": "Healthy"}


@router.get("/store")
def health_store(store: RecordStore = Depends(get_store)):
    ok = store.ping()
    return {"store": "ok" if ok else "unreachable", "ok": ok}
