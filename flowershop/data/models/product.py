from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, String, Text

from flowershop.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    slug = Column(String, nullable=True, index=True)
    description = Column(Text, nullable=False, default="")
    price = Column(Float, nullable=False)
    image_url = Column(String, nullable=False, default="")

    # id kategorii, bez FK
    category = Column(String, nullable=False, index=True)
    tags = Column(JSON, nullable=True)
    featured = Column(Boolean, nullable=False, default=False)
    in_stock = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
