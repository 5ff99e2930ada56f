# flowershop/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, model_validator
from typing import List, Literal, Optional
from datetime import datetime

OrderStatus = Literal["pending", "processing", "ready", "shipped", "delivered", "cancelled"]
PaymentStatus = Literal["pending", "paid", "failed"]
BouquetStatus = Literal["draft", "ordered", "completed"]


# =====================================================
# CART
# =====================================================
class CartItemStub(BaseModel):
    """Dane produktu potrzebne do dodania do koszyka (bez ilosci)."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    price: float = Field(..., ge=0)
    image_url: str = ""


class CartLineItem(CartItemStub):
    """Pozycja koszyka - niemutowalny snapshot, zmiany przez model_copy."""

    quantity: int = Field(..., ge=1)


class ItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: str = Field(..., min_length=1)
    quantity: int = Field(1, gt=0, description="Ilosc produktu (musi byc > 0)")


class QuantityIn(BaseModel):
    # <= 0 usuwa pozycje
    quantity: int


class CartOut(BaseModel):
    user_id: Optional[str] = None
    guest_id: Optional[str] = None
    loading: bool
    items: List[CartLineItem]
    total: float
    item_count: int


# =====================================================
# PRODUCTS
# =====================================================
class ProductOut(BaseModel):
    id: str
    name: str
    slug: Optional[str] = None
    description: str
    price: float
    image_url: str
    category: str
    tags: Optional[List[str]] = None
    featured: bool
    in_stock: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# =====================================================
# BOUQUETS
# =====================================================
class ComponentQty(BaseModel):
    id: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0)


class BouquetSelection(BaseModel):
    """Wybor w konfiguratorze bukietu."""

    flowers: List[ComponentQty] = Field(..., min_length=1)
    wrapping_id: Optional[str] = None
    additions: List[ComponentQty] = Field(default_factory=list)
    message: Optional[str] = Field(None, max_length=500)


class BouquetCreateIn(BouquetSelection):
    add_to_cart: bool = False


class BouquetQuoteOut(BaseModel):
    total_price: float


class BouquetOut(BaseModel):
    id: str
    user_id: str
    flowers: List[ComponentQty]
    additions: Optional[List[ComponentQty]] = None
    wrapping_id: Optional[str] = None
    message: Optional[str] = None
    total_price: float
    status: BouquetStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# =====================================================
# USERS / AUTH
# =====================================================
class RegisterIn(BaseModel):
    email: str = Field(..., min_length=3, max_length=254, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=6, max_length=128)
    display_name: Optional[str] = Field(None, max_length=100)


class LoginIn(BaseModel):
    email: str
    password: str


class GoogleLoginIn(BaseModel):
    id_token: str = Field(..., min_length=1)


class UserRead(BaseModel):
    id: str
    email: str
    display_name: Optional[str] = None
    provider: str
    role: str
    phone: Optional[str] = None
    address: Optional[dict] = None

    model_config = ConfigDict(from_attributes=True)


class SessionOut(BaseModel):
    token: str
    user: UserRead


class ProfileUpdate(BaseModel):
    display_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)
    address: Optional[dict] = None


class PasswordResetIn(BaseModel):
    email: str


class PasswordResetConfirmIn(BaseModel):
    token: str
    new_password: str = Field(..., min_length=6, max_length=128)


# =====================================================
# ORDERS
# =====================================================
class AddressIn(BaseModel):
    street: str
    city: str
    postal_code: str
    country: str = "Česká republika"


class DeliveryIn(BaseModel):
    type: Literal["delivery", "pickup"] = "delivery"
    zone_id: Optional[str] = None
    zone_name: str = ""
    price: float = Field(0, ge=0)


class CustomerInfoIn(BaseModel):
    first_name: str
    last_name: str
    email: str
    phone: str
    note: Optional[str] = None


class CheckoutIn(BaseModel):
    """Schema dla zlozenia zamowienia z aktualnego koszyka."""

    customer_info: CustomerInfoIn
    shipping_address: Optional[AddressIn] = None
    delivery: DeliveryIn = Field(default_factory=DeliveryIn)
    payment_method: str = Field(..., min_length=1)
    delivery_date: Optional[datetime] = None
    custom_bouquet_ids: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def require_address_for_delivery(self) -> "CheckoutIn":
        if self.delivery.type == "delivery" and self.shipping_address is None:
            raise ValueError("Adres dostawy jest wymagany dla dostawy kurierem")
        return self


class OrderItemOut(BaseModel):
    product_id: str
    name: str
    price: float
    quantity: int
    image_url: str = ""


class OrderOut(BaseModel):
    id: str
    order_number: str
    user_id: str
    items: List[OrderItemOut]
    custom_bouquets: Optional[List[dict]] = None
    total_price: float
    status: OrderStatus
    payment_status: PaymentStatus
    payment_method: Optional[str] = None
    shipping_address: Optional[dict] = None
    delivery: Optional[dict] = None
    customer_info: Optional[dict] = None
    delivery_date: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
    payment_status: Optional[PaymentStatus] = None


class OrderStatsOut(BaseModel):
    total_orders: int
    pending_orders: int
    processing_orders: int
    ready_orders: int
    shipped_orders: int
    delivered_orders: int
    cancelled_orders: int
    total_revenue: float
    today_revenue: float
    week_revenue: float
    month_revenue: float
