# flowershop/services/product_service.py
from typing import List

from sqlalchemy.orm import Session

from flowershop.data.models.product import ProductModel
from flowershop.domain.schemas import CartItemStub
from flowershop.repos.product_repo import ProductRepo


class ProductService:
    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    def get_product(self, product_id: str) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise ValueError("Produkt nie istnieje")
        return product

    def list_products(self, category: str | None = None, featured: bool | None = None) -> List[ProductModel]:
        return self.repo.list_products(category=category, featured=featured)

    def cart_stub(self, product_id: str) -> CartItemStub:
        # kopia nazwy/ceny/obrazka z chwili dodania, bez sprawdzania stanu magazynu
        product = self.get_product(product_id)
        return CartItemStub(
            id=product.id,
            name=product.name,
            price=product.price,
            image_url=product.image_url or "",
        )
