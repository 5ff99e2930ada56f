import re
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from flowershop.data.models.order import OrderModel
from flowershop.domain.schemas import BouquetSelection, CheckoutIn, ComponentQty
from flowershop.services.bouquet_service import BouquetService
from flowershop.services.order_service import OrderService
from flowershop.services.product_service import ProductService


def checkout(**overrides):
    data = {
        "customer_info": {
            "first_name": "Jana",
            "last_name": "Novakova",
            "email": "jana@example.com",
            "phone": "+420600000000",
        },
        "shipping_address": {"street": "Vodickova 1", "city": "Praha", "postal_code": "11000"},
        "delivery": {"type": "delivery", "zone_id": "praha-1", "zone_name": "Praha 1", "price": 150},
        "payment_method": "cash",
    }
    data.update(overrides)
    return CheckoutIn.model_validate(data)


@pytest.fixture
def filled_cart(catalog, make_cart):
    products = ProductService(catalog)
    cart = make_cart().start()
    cart.add_item(products.cart_stub("red-roses"), 2)
    cart.add_item(products.cart_stub("orchid-pot"))
    return cart


def test_order_snapshots_cart_and_clears_it(catalog, filled_cart, notifications, guest_repo):
    svc = OrderService(catalog, notification_service=notifications)
    order = svc.create_order_from_cart(filled_cart, checkout(), user_id=None)

    assert order.user_id == "guest"
    assert re.fullmatch(r"KS-\d{8}-001", order.order_number)
    assert order.status == "pending"
    assert order.payment_status == "pending"
    assert order.total_price == 2 * 890 + 650 + 150
    assert [(i["product_id"], i["quantity"], i["price"]) for i in order.items] == [
        ("red-roses", 2, 890.0),
        ("orchid-pot", 1, 650.0),
    ]

    assert filled_cart.items == []
    assert guest_repo.load("guest-1") == []
    assert notifications.orders == [("guest", order.order_number)]


def test_order_numbers_increase_within_day(catalog, make_cart, notifications):
    products = ProductService(catalog)
    svc = OrderService(catalog, notification_service=notifications)

    numbers = []
    for _ in range(2):
        cart = make_cart().start()
        cart.add_item(products.cart_stub("spring-tulips"))
        numbers.append(svc.create_order_from_cart(cart, checkout(), None).order_number)

    assert numbers[0].endswith("-001")
    assert numbers[1].endswith("-002")


def test_order_keeps_price_after_catalog_change(catalog, filled_cart, notifications):
    svc = OrderService(catalog, notification_service=notifications)
    order = svc.create_order_from_cart(filled_cart, checkout(), None)

    product = ProductService(catalog).get_product("red-roses")
    product.price = 1500.0
    catalog.commit()

    assert svc.get_order(order.id, "guest").items[0]["price"] == 890.0


def test_empty_cart_rejected(catalog, make_cart, notifications):
    svc = OrderService(catalog, notification_service=notifications)
    with pytest.raises(ValueError):
        svc.create_order_from_cart(make_cart().start(), checkout(), None)
    assert notifications.orders == []


def test_bouquets_embedded_and_marked_ordered(catalog, make_cart, notifications):
    bouquets = BouquetService(catalog)
    chosen = BouquetSelection(flowers=[ComponentQty(id="rose", quantity=5)], wrapping_id="natural-paper")
    bouquet = bouquets.create_bouquet("user-1", chosen)

    cart = make_cart(guest_id=None).start("user-1")
    cart.add_item(bouquets.to_cart_item(chosen))

    svc = OrderService(catalog, notification_service=notifications)
    order = svc.create_order_from_cart(cart, checkout(custom_bouquet_ids=[bouquet.id]), "user-1")

    assert order.custom_bouquets[0]["id"] == bouquet.id
    assert order.custom_bouquets[0]["total_price"] == 5 * 35 + 50
    assert bouquets.repo.get_bouquet(bouquet.id).status == "ordered"


def test_foreign_bouquet_rejected(catalog, make_cart, notifications):
    bouquets = BouquetService(catalog)
    bouquet = bouquets.create_bouquet(
        "user-2", BouquetSelection(flowers=[ComponentQty(id="rose", quantity=1)])
    )
    cart = make_cart(guest_id=None).start("user-1")
    cart.add_item(ProductService(catalog).cart_stub("red-roses"))

    svc = OrderService(catalog, notification_service=notifications)
    with pytest.raises(PermissionError):
        svc.create_order_from_cart(cart, checkout(custom_bouquet_ids=[bouquet.id]), "user-1")

    # koszyk nietkniety
    assert len(cart.items) == 1


def test_get_order_checks_owner(catalog, filled_cart, notifications):
    svc = OrderService(catalog, notification_service=notifications)
    order = svc.create_order_from_cart(filled_cart, checkout(), "user-1")

    assert svc.get_order(order.id, "user-1").id == order.id
    assert svc.get_order(order.id, "admin-1", is_admin=True).id == order.id
    with pytest.raises(PermissionError):
        svc.get_order(order.id, "user-2")
    with pytest.raises(ValueError):
        svc.get_order("missing", "user-1")


def test_update_order_status(catalog, filled_cart, notifications):
    svc = OrderService(catalog, notification_service=notifications)
    order = svc.create_order_from_cart(filled_cart, checkout(), "user-1")

    updated = svc.update_order_status(order.id, "ready", "paid")
    assert (updated.status, updated.payment_status) == ("ready", "paid")
    assert updated.updated_at is not None

    with pytest.raises(ValueError):
        svc.update_order_status(order.id, "lost")
    with pytest.raises(ValueError):
        svc.update_order_status(order.id, "shipped", "refunded")


def test_order_stats(db, notifications):
    now = datetime(2026, 10, 21, 12, 0, tzinfo=timezone.utc)  # sroda

    def add(number, status, total, created_at):
        db.add(OrderModel(id=number, order_number=number, user_id="u", items=[], total_price=total,
                          status=status, payment_status="paid", created_at=created_at))

    add("1", "delivered", 100, now - timedelta(hours=1))
    add("2", "delivered", 200, now - timedelta(days=2))   # poniedzialek, ten tydzien
    add("3", "delivered", 400, now - timedelta(days=15))  # ten miesiac
    add("4", "delivered", 800, now - timedelta(days=40))
    add("5", "pending", 999, now)
    add("6", "cancelled", 999, now)
    add("7", "ready", 999, now)
    db.commit()

    stats = OrderService(db, notification_service=notifications).get_order_stats(now=now)

    assert stats["total_orders"] == 7
    assert stats["delivered_orders"] == 4
    assert stats["pending_orders"] == 1
    assert stats["ready_orders"] == 1
    assert stats["cancelled_orders"] == 1
    assert stats["total_revenue"] == 1500
    assert stats["today_revenue"] == 100
    assert stats["week_revenue"] == 300
    assert stats["month_revenue"] == 700


def test_delivery_requires_shipping_address():
    with pytest.raises(ValidationError):
        checkout(shipping_address=None)

    pickup = checkout(shipping_address=None, delivery={"type": "pickup", "zone_name": "Praha"})
    assert pickup.shipping_address is None


def test_checkout_survives_concurrent_cart_change(catalog, make_cart, cart_repo, notifications, caplog):
    products = ProductService(catalog)
    cart = make_cart(guest_id=None, strict=True).start("user-1")
    cart.add_item(products.cart_stub("red-roses"))

    # inna sesja zapisala koszyk po naszym odczycie
    cart_repo.save_items("user-1", [])

    order = OrderService(catalog, notification_service=notifications).create_order_from_cart(
        cart, checkout(), "user-1"
    )

    assert order.total_price == 890 + 150
    assert notifications.orders == [("user-1", order.order_number)]
    assert "nie wyczyszczono koszyka" in caplog.text
