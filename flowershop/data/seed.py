# flowershop/data/seed.py
from sqlalchemy.orm import Session

from flowershop.data.database import SessionLocal
from flowershop.data.models.bouquet import BouquetItemModel
from flowershop.data.models.product import ProductModel
from flowershop.repos.bouquet_repo import BouquetRepo
from flowershop.repos.product_repo import ProductRepo
from flowershop.utils.logging import get_logger

logger = get_logger(__name__)

PRODUCTS = [
    {"id": "red-roses", "name": "Rudé růže", "price": 890.0, "category": "bouquets", "featured": True,
     "description": "Kytice 15 rudých růží", "image_url": "/images/red-roses.jpg", "tags": ["roses", "love"]},
    {"id": "spring-tulips", "name": "Jarní tulipány", "price": 490.0, "category": "bouquets",
     "description": "Mix barevných tulipánů", "image_url": "/images/tulips.jpg", "tags": ["spring"]},
    {"id": "peony-box", "name": "Pivoňky v krabici", "price": 1290.0, "category": "boxes", "featured": True,
     "description": "Růžové pivoňky v dárkové krabici", "image_url": "/images/peony-box.jpg"},
    {"id": "orchid-pot", "name": "Orchidej v květináči", "price": 650.0, "category": "plants",
     "description": "Bílá orchidej", "image_url": "/images/orchid.jpg"},
]

# ceny jak w konfiguratorze na froncie
BOUQUET_ITEMS = [
    ("rose", "Růže", "flower", 35.0),
    ("tulip", "Tulipán", "flower", 25.0),
    ("peony", "Pivoňka", "flower", 45.0),
    ("sunflower", "Slunečnice", "flower", 30.0),
    ("lily", "Lilie", "flower", 40.0),
    ("natural-paper", "Přírodní papír", "wrapping", 50.0),
    ("luxury-paper", "Luxusní papír", "wrapping", 80.0),
    ("gift-box", "Dárková krabice", "wrapping", 120.0),
    ("chocolate-box", "Čokoládový box", "addition", 150.0),
    ("teddy-bear", "Plyšový medvídek", "addition", 200.0),
]


def seed_catalog(db: Session) -> bool:
    """Wstawia katalog do pustej bazy. Zwraca False jesli produkty juz sa."""
    products = ProductRepo(db)
    # not forcing: only seed if empty
    if products.has_any():
        return False

    products.add_all([ProductModel(**data) for data in PRODUCTS])
    BouquetRepo(db).add_items([
        BouquetItemModel(id=item_id, name=name, item_type=item_type, price=price, image_url=f"/images/{item_id}.jpg")
        for item_id, name, item_type, price in BOUQUET_ITEMS
    ])
    logger.info(f"Seeded {len(PRODUCTS)} products and {len(BOUQUET_ITEMS)} bouquet items")
    return True


def seed():
    db = SessionLocal()
    try:
        seed_catalog(db)
    finally:
        db.close()


if __name__ == "__main__":
    seed()
