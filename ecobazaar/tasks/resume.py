# ecobazaar/tasks/resume.py
from ecobazaar.celery_worker import celery_app
from ecobazaar.data.database import get_store
from ecobazaar.domain.errors import EcoBazaarError
from ecobazaar.services.checkout_ledger import RedisCheckoutLedger
from ecobazaar.services.order_service import OrderService
from ecobazaar.utils.logging import get_logger
from ecobazaar.utils.settings import CHECKOUT_STALL_SECONDS

logger = get_logger(__name__)


def resume_stalled_checkouts(service: OrderService, ledger, older_than: int = CHECKOUT_STALL_SECONDS) -> dict:
    keys = ledger.stalled(older_than)
    logger.info(f"Found {len(keys)} stalled checkout(s)")

    resumed, failed = [], []
    for key in keys:
        try:
            if service.resume(key) is not None:
                resumed.append(key)
        except EcoBazaarError as e:
            #stays in the ledger, the next run tries again
            logger.warning(f"Checkout {key} still incomplete: {e}")
            failed.append(key)

    return {"resumed": resumed, "failed": failed}


@celery_app.task(name="ecobazaar.tasks.resume.resume_stalled_checkouts_task")
def resume_stalled_checkouts_task():
    logger.info("Resume stalled checkouts task started")
    ledger = RedisCheckoutLedger()
    return resume_stalled_checkouts(OrderService(get_store(), ledger), ledger)
