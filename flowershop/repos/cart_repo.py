# flowershop/repos/cart_repo.py
from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy import update
from sqlalchemy.orm import Session

from flowershop.data.models.cart import CartModel


class CartRepo:
    """Rekord koszyka per uzytkownik w bazie."""

    def __init__(self, db: Session):
        self.db = db

    def get_cart(self, user_id: str) -> CartModel | None:
        return self.db.get(CartModel, user_id)

    def create_cart(self, user_id: str) -> CartModel:
        cart = CartModel(user_id=user_id, items=[], version=1)
        self.db.add(cart)
        self.db.commit()
        self.db.refresh(cart)
        return cart

    def save_items(self, user_id: str, items: List[Dict[str, Any]]) -> CartModel:
        #last write wins, bez sprawdzania wersji
        cart = self.get_cart(user_id)
        if cart is None:
            cart = CartModel(user_id=user_id, version=0)
            self.db.add(cart)

        cart.items = items
        cart.version = (cart.version or 0) + 1
        cart.updated_at = datetime.now(timezone.utc)
        self.db.commit()
        self.db.refresh(cart)
        return cart

    def update_cart_version(self, user_id: str, old_version: int, new_data: Dict[str, Any]) -> int:
        # UPDATE carts SET ... WHERE user_id = :id AND version = :old
        stmt = (
            update(CartModel)
            .where(CartModel.user_id == user_id, CartModel.version == old_version)
            .values(**new_data)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
