# ecobazaar/api/routers/profiles.py
from fastapi import APIRouter, Depends

from ecobazaar.api.deps import get_session
from ecobazaar.api.errors import to_http_error
from ecobazaar.data.database import get_store
from ecobazaar.data.store import RecordStore
from ecobazaar.domain.errors import EcoBazaarError
from ecobazaar.domain.schemas import Profile, ProfileSummary, RoleIn, SessionContext
from ecobazaar.services.profile_service import ProfileService

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("/me", response_model=ProfileSummary)
def get_profile(
    session: SessionContext = Depends(get_session),
    store: RecordStore = Depends(get_store),
):
    try:
        return ProfileService(store).get_summary(session)
    except EcoBazaarError as e:
        raise to_http_error(e)


@router.post("/me/role", response_model=Profile)
def select_role(
    payload: RoleIn,
    session: SessionContext = Depends(get_session),
    store: RecordStore = Depends(get_store),
):
    try:
        return ProfileService(store).select_role(session, payload.role)
    except EcoBazaarError as e:
        raise to_http_error(e)
