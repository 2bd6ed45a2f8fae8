# ecobazaar/services/notification_service.py
from ecobazaar.celery_worker import celery_app
from ecobazaar.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Order notifications, delivered through Celery so checkout never waits on them.
    """

    @staticmethod
    def send_order_notification(user_id: str, order_id: str, points_earned: int):
        send_order_notification_task.delay(user_id, order_id, points_earned)


@celery_app.task(name="ecobazaar.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: str, order_id: str, points_earned: int):
    """
    Order confirmation. Only logged for now; a mail/push gateway plugs in here.
    """
    logger.info(
        f"[NOTIFICATION] User {user_id}: order {order_id} confirmed, "
        f"{points_earned} carbon points earned"
    )
    return {"user_id": user_id, "order_id": order_id, "points_earned": points_earned, "status": "sent"}
