# flowershop/celery_worker.py
from celery import Celery

from flowershop.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND

celery_app = Celery(
    "flowershop",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# explicite importuj taski, zeby Celery je zarejestrowal
celery_app.conf.imports = (
    "flowershop.services.notification_service",
)

celery_app.conf.timezone = "UTC"
