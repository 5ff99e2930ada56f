from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from flowershop.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: str) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def list_products(self, category: str | None = None, featured: bool | None = None) -> List[ProductModel]:
        stmt = select(ProductModel)
        if category is not None:
            stmt = stmt.where(ProductModel.category == category)
        if featured is not None:
            stmt = stmt.where(ProductModel.featured == featured)
        stmt = stmt.order_by(ProductModel.created_at.desc())
        return list(self.db.execute(stmt).scalars().all())

    def has_any(self) -> bool:
        return self.db.execute(select(ProductModel.id).limit(1)).first() is not None

    def add_all(self, products: List[ProductModel]) -> None:
        self.db.add_all(products)
        self.db.commit()
