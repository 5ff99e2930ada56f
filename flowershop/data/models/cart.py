#flowershop/data/models/cart.py
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Integer, String

from flowershop.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class CartModel(Base):
    """Koszyk zalogowanego uzytkownika, jeden rekord na user_id.

    Pozycje trzymane jako lista dictow (snapshot nazwy/ceny/obrazka),
    bez relacji do produktow.
    """

    __tablename__ = "carts"

    user_id = Column(String, primary_key=True)
    items = Column(JSON, nullable=False, default=list)

    #podbijana przy kazdym zapisie, uzywana przez CAS w trybie strict
    version = Column(Integer, nullable=False, default=1)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)
