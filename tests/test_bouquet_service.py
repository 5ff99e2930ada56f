import pytest

from flowershop.domain.schemas import BouquetSelection, ComponentQty
from flowershop.services.bouquet_service import CUSTOM_BOUQUET_PREFIX, BouquetService


def selection(flowers, wrapping_id=None, additions=()):
    return BouquetSelection(
        flowers=[ComponentQty(id=i, quantity=q) for i, q in flowers],
        wrapping_id=wrapping_id,
        additions=[ComponentQty(id=i, quantity=q) for i, q in additions],
    )


def test_two_roses_and_wrapping(catalog):
    svc = BouquetService(catalog)
    assert svc.price(selection([("rose", 2)], "natural-paper")) == 120


def test_additions_are_priced_per_quantity(catalog):
    svc = BouquetService(catalog)
    chosen = selection([("rose", 3), ("tulip", 2)], "gift-box", [("teddy-bear", 1), ("chocolate-box", 2)])
    # 3*35 + 2*25 + 120 + 200 + 2*150
    assert svc.price(chosen) == 775


def test_wrapping_is_optional(catalog):
    assert BouquetService(catalog).price(selection([("lily", 1)])) == 40


def test_unknown_component_rejected(catalog):
    with pytest.raises(ValueError):
        BouquetService(catalog).price(selection([("orchid", 1)]))


def test_component_of_wrong_type_rejected(catalog):
    with pytest.raises(ValueError):
        BouquetService(catalog).price(selection([("rose", 1)], wrapping_id="tulip"))


def test_bouquet_becomes_single_cart_line(catalog, make_cart):
    svc = BouquetService(catalog)
    cart = make_cart().start()

    cart.add_item(svc.to_cart_item(selection([("rose", 2)], "natural-paper")), 1)

    assert len(cart.items) == 1
    item = cart.items[0]
    assert item.id.startswith(CUSTOM_BOUQUET_PREFIX)
    assert item.price == 120
    assert item.quantity == 1
    assert item.image_url == "/images/rose.jpg"


def test_each_bouquet_gets_its_own_line(catalog, make_cart):
    svc = BouquetService(catalog)
    cart = make_cart().start()
    chosen = selection([("rose", 2)], "natural-paper")

    cart.add_item(svc.to_cart_item(chosen))
    cart.add_item(svc.to_cart_item(chosen))

    assert len(cart.items) == 2


def test_create_bouquet_stores_draft(catalog):
    svc = BouquetService(catalog)
    bouquet = svc.create_bouquet("user-1", selection([("peony", 3)], "luxury-paper"))

    assert bouquet.status == "draft"
    assert bouquet.total_price == 3 * 45 + 80
    assert bouquet.flowers == [{"id": "peony", "quantity": 3}]
    assert [b.id for b in svc.get_user_bouquets("user-1")] == [bouquet.id]
    assert svc.get_user_bouquets("user-2") == []


def test_update_status_validates(catalog):
    svc = BouquetService(catalog)
    bouquet = svc.create_bouquet("user-1", selection([("rose", 1)]))

    assert svc.update_status(bouquet.id, "completed").status == "completed"
    with pytest.raises(ValueError):
        svc.update_status(bouquet.id, "shipped")
    with pytest.raises(ValueError):
        svc.update_status("missing", "ordered")
