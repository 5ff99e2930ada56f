from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, String, Text

from flowershop.data.database import Base


class BouquetItemModel(Base):
    """Skladnik bukietu w konfiguratorze: kwiat, owijka albo dodatek."""

    __tablename__ = "bouquet_items"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    item_type = Column(String, nullable=False, index=True)  # flower, wrapping, addition
    price = Column(Float, nullable=False)
    image_url = Column(String, nullable=True)
    color = Column(String, nullable=True)
    in_stock = Column(Boolean, nullable=False, default=True)


class CustomBouquetModel(Base):
    __tablename__ = "custom_bouquets"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, index=True)

    # [{"id": ..., "quantity": ...}]
    flowers = Column(JSON, nullable=False, default=list)
    additions = Column(JSON, nullable=True)
    wrapping_id = Column(String, nullable=True)
    message = Column(Text, nullable=True)

    total_price = Column(Float, nullable=False)
    status = Column(String, nullable=False, default="draft")  # draft, ordered, completed
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
