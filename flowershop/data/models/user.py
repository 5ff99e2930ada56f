from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, String

from flowershop.data.database import Base


class UserModel(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True)
    email = Column(String, nullable=False, unique=True, index=True)
    display_name = Column(String, nullable=True)

    # None dla kont google
    password_hash = Column(String, nullable=True)
    provider = Column(String, nullable=False, default="password")  # password, google
    role = Column(String, nullable=False, default="customer")  # customer, admin

    phone = Column(String, nullable=True)
    address = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
