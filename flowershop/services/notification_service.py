# flowershop/services/notification_service.py
from flowershop.celery_worker import celery_app
from flowershop.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysylania powiadomien.
    Uzywa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_order_notification(user_id: str, order_number: str):
        send_order_notification_task.delay(user_id, order_number)

    @staticmethod
    def send_password_reset(email: str, token: str):
        send_password_reset_task.delay(email, token)


@celery_app.task(name="flowershop.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: str, order_number: str):
    # w prawdziwym systemie email do klienta i do kwiaciarni
    logger.info(f"[NOTIFICATION] User {user_id}: order {order_number} created")
    return {"user_id": user_id, "order_number": order_number, "status": "sent"}


@celery_app.task(name="flowershop.services.notification_service.send_password_reset_task")
def send_password_reset_task(email: str, token: str):
    logger.info(f"[NOTIFICATION] Password reset link for {email} issued")
    return {"email": email, "status": "sent"}
