# ecobazaar/api/routers/admin.py
from fastapi import APIRouter, Depends

from ecobazaar.api.deps import get_session
from ecobazaar.api.errors import to_http_error
from ecobazaar.data.database import get_store
from ecobazaar.data.store import RecordStore
from ecobazaar.domain.errors import EcoBazaarError
from ecobazaar.domain.schemas import PlatformStats, SessionContext
from ecobazaar.services.admin_service import AdminService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/stats", response_model=PlatformStats)
def platform_stats(
    session: SessionContext = Depends(get_session),
    store: RecordStore = Depends(get_store),
):
    try:
        return AdminService(store).platform_stats(session)
    except EcoBazaarError as e:
        raise to_http_error(e)
