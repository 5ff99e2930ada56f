from sqlalchemy import JSON, Column, DateTime, Float, String
from datetime import datetime, timezone

from flowershop.data.database import Base


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(String, primary_key=True)
    order_number = Column(String, nullable=False, unique=True, index=True)
    # "guest" dla zamowien bez logowania
    user_id = Column(String, nullable=False, index=True)

    # snapshoty pozycji z momentu zamowienia, nie linki do produktow
    items = Column(JSON, nullable=False, default=list)
    custom_bouquets = Column(JSON, nullable=True)
    total_price = Column(Float, nullable=False)

    status = Column(String, nullable=False, default="pending")  # pending, processing, ready, shipped, delivered, cancelled
    payment_status = Column(String, nullable=False, default="pending")  # pending, paid, failed
    payment_method = Column(String, nullable=True)

    shipping_address = Column(JSON, nullable=True)
    delivery = Column(JSON, nullable=True)
    customer_info = Column(JSON, nullable=True)
    delivery_date = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc), index=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)
