# ecobazaar/api/errors.py
from fastapi import HTTPException

from ecobazaar.domain.errors import (
    AuthenticationRequiredError,
    CheckoutInProgressError,
    EcoBazaarError,
    PartialOrderError,
    RecordNotFoundError,
    RoleError,
    StoreError,
    ValidationError,
)
from ecobazaar.utils.logging import get_logger

logger = get_logger(__name__)


def to_http_error(e: EcoBazaarError) -> HTTPException:
    """Map a service error onto the HTTP status the routers answer with."""
    if isinstance(e, AuthenticationRequiredError):
        return HTTPException(status_code=401, detail=str(e))
    if isinstance(e, ValidationError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, RoleError):
        return HTTPException(status_code=403, detail=str(e))
    if isinstance(e, RecordNotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, CheckoutInProgressError):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, PartialOrderError):
        # caller must not assume which steps happened beyond what is listed
        return HTTPException(
            status_code=500,
            detail={
                "message": str(e),
                "order_id": e.order_id,
                "checkout_key": e.checkout_key,
                "completed_steps": e.completed_steps,
                "failed_step": e.failed_step,
            },
        )
    if isinstance(e, StoreError):
        return HTTPException(status_code=502, detail=str(e))

    logger.error(f"Unmapped service error: {e!r}")
    return HTTPException(status_code=500, detail=str(e))
