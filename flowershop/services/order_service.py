# flowershop/services/order_service.py
import uuid
from datetime import datetime, timedelta, timezone
from typing import List, Tuple

from sqlalchemy.orm import Session

from flowershop.data.models.bouquet import CustomBouquetModel
from flowershop.data.models.order import OrderModel
from flowershop.domain.schemas import CheckoutIn
from flowershop.repos.bouquet_repo import BouquetRepo
from flowershop.repos.order_repo import OrderRepo
from flowershop.services.cart_service import CartConflictError, CartSession
from flowershop.services.notification_service import NotificationService
from flowershop.utils.logging import get_logger

logger = get_logger(__name__)

ORDER_STATUSES = ("pending", "processing", "ready", "shipped", "delivered", "cancelled")
PAYMENT_STATUSES = ("pending", "paid", "failed")
GUEST_USER_ID = "guest"
ORDER_NUMBER_PREFIX = "KS"


def _as_utc(value: datetime) -> datetime:
    # sqlite oddaje naive datetime
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class OrderService:
    """
    Serwis odpowiedzialny za domene zamowien.
    Pozycje zamowienia to snapshoty z koszyka (nazwa, cena), nigdy nie
    przeliczane z aktualnych produktow. Platnosc to tylko etykieta - brak bramki.
    """

    def __init__(self, db: Session, notification_service: NotificationService | None = None):
        self.repo = OrderRepo(db)
        self.bouquets = BouquetRepo(db)
        self.notification_service = notification_service or NotificationService()

    def create_order_from_cart(self, cart: CartSession, checkout: CheckoutIn, user_id: str | None) -> OrderModel:
        """
        Use Case: zamowienie z aktualnego koszyka.

        1. Snapshot pozycji i bukietow
        2. Total = koszyk + dostawa
        3. Zapis zamowienia, czyszczenie koszyka
        4. Powiadomienie (async)
        """
        if not cart.items:
            raise ValueError("Koszyk jest pusty")

        bouquets, bouquet_snapshots = self._collect_bouquets(checkout.custom_bouquet_ids, user_id)

        total = cart.get_total() + checkout.delivery.price
        order = OrderModel(
            id=uuid.uuid4().hex,
            order_number=self._generate_order_number(),
            user_id=user_id or GUEST_USER_ID,
            items=[
                {
                    "product_id": item.id,
                    "name": item.name,
                    "price": item.price,
                    "quantity": item.quantity,
                    "image_url": item.image_url,
                }
                for item in cart.items
            ],
            custom_bouquets=bouquet_snapshots or None,
            total_price=total,
            status="pending",
            payment_status="pending",
            payment_method=checkout.payment_method,
            shipping_address=checkout.shipping_address.model_dump() if checkout.shipping_address else None,
            delivery=checkout.delivery.model_dump(),
            customer_info=checkout.customer_info.model_dump(),
            delivery_date=checkout.delivery_date,
        )

        for bouquet in bouquets:
            bouquet.status = "ordered"

        #jeden commit dla zamowienia i statusow bukietow
        created = self.repo.create_order(order)
        logger.info(f"Order {created.order_number} created for {created.user_id}, total {total}")

        try:
            cart.clear_cart()
        except CartConflictError as e:
            # zamowienie juz zapisane, koszyk zmieniony rownolegle zostaje w bazie
            logger.error(f"Order {created.order_number}: nie wyczyszczono koszyka: {e}")
        self.notification_service.send_order_notification(created.user_id, created.order_number)
        return created

    def get_order(self, order_id: str, user_id: str, is_admin: bool = False) -> OrderModel:
        order = self.repo.get_order(order_id)

        if not order:
            raise ValueError("Zamowienie nie istnieje")

        if not is_admin and order.user_id != user_id:
            raise PermissionError("Brak dostepu do zamowienia")

        return order

    def get_user_orders(self, user_id: str) -> List[OrderModel]:
        return self.repo.get_user_orders(user_id)

    def get_all_orders(self) -> List[OrderModel]:
        return self.repo.get_all_orders()

    def update_order_status(self, order_id: str, status: str, payment_status: str | None = None) -> OrderModel:
        if status not in ORDER_STATUSES:
            raise ValueError(f"Nieznany status zamowienia: {status}")
        if payment_status is not None and payment_status not in PAYMENT_STATUSES:
            raise ValueError(f"Nieznany status platnosci: {payment_status}")

        order = self.repo.get_order(order_id)
        if not order:
            raise ValueError("Zamowienie nie istnieje")

        order.status = status
        if payment_status:
            order.payment_status = payment_status
        order.updated_at = datetime.now(timezone.utc)

        logger.info(f"Order {order.order_number}: status -> {status}")
        return self.repo.save(order)

    def get_order_stats(self, now: datetime | None = None) -> dict:
        """Liczniki per status i przychod (tylko dostarczone) za dzis/tydzien/miesiac."""
        now = now or datetime.now(timezone.utc)
        orders = self.repo.get_all_orders()

        start_of_today = now.replace(hour=0, minute=0, second=0, microsecond=0)
        # tydzien od niedzieli
        start_of_week = start_of_today - timedelta(days=(start_of_today.weekday() + 1) % 7)
        start_of_month = start_of_today.replace(day=1)

        delivered = [o for o in orders if o.status == "delivered"]

        def revenue(since: datetime | None = None) -> float:
            return sum(
                o.total_price or 0
                for o in delivered
                if since is None or _as_utc(o.created_at) >= since
            )

        def count(status: str) -> int:
            return sum(1 for o in orders if o.status == status)

        return {
            "total_orders": len(orders),
            "pending_orders": count("pending"),
            "processing_orders": count("processing"),
            "ready_orders": count("ready"),
            "shipped_orders": count("shipped"),
            "delivered_orders": len(delivered),
            "cancelled_orders": count("cancelled"),
            "total_revenue": revenue(),
            "today_revenue": revenue(start_of_today),
            "week_revenue": revenue(start_of_week),
            "month_revenue": revenue(start_of_month),
        }

    def _generate_order_number(self) -> str:
        # KS-YYYYMMDD-NNN, NNN = zamowienia z dzisiaj + 1
        now = datetime.now(timezone.utc)
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
        sequence = self.repo.count_created_since(start_of_day) + 1
        return f"{ORDER_NUMBER_PREFIX}-{now:%Y%m%d}-{sequence:03d}"

    def _collect_bouquets(
        self, bouquet_ids: List[str], user_id: str | None
    ) -> Tuple[List[CustomBouquetModel], List[dict]]:
        if not bouquet_ids:
            return [], []
        if not user_id:
            raise PermissionError("Bukiety dostepne tylko dla zalogowanych")

        bouquets = []
        for bouquet_id in bouquet_ids:
            bouquet = self.bouquets.get_bouquet(bouquet_id)
            if not bouquet:
                raise ValueError(f"Bukiet {bouquet_id} nie istnieje")
            if bouquet.user_id != user_id:
                raise PermissionError("Brak dostepu do bukietu")
            bouquets.append(bouquet)

        snapshots = [
            {
                "id": b.id,
                "flowers": b.flowers,
                "additions": b.additions,
                "wrapping_id": b.wrapping_id,
                "message": b.message,
                "total_price": b.total_price,
            }
            for b in bouquets
        ]
        return bouquets, snapshots
