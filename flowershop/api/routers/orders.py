# flowershop/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from flowershop.api.deps import get_cart_session, get_current_user, get_optional_user, require_admin
from flowershop.data.database import get_db
from flowershop.data.models.user import UserModel
from flowershop.domain.schemas import CheckoutIn, OrderOut, OrderStatsOut, OrderStatusUpdate
from flowershop.services.cart_service import CartSession
from flowershop.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.post("", response_model=OrderOut, status_code=201)
def create_order(
    payload: CheckoutIn,
    cart: CartSession = Depends(get_cart_session),
    user: UserModel | None = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """
    Zamowienie z aktualnego koszyka, koszyk czyszczony po zapisie.
    Platnosc nie jest realizowana - status platnosci zostaje pending.
    """
    svc = get_service(db)
    try:
        return svc.create_order_from_cart(cart, payload, user.id if user else None)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("", response_model=List[OrderOut])
def list_my_orders(user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return get_service(db).get_user_orders(user.id)


@router.get("/admin/all", response_model=List[OrderOut])
def list_all_orders(_: UserModel = Depends(require_admin), db: Session = Depends(get_db)):
    return get_service(db).get_all_orders()


@router.get("/admin/stats", response_model=OrderStatsOut)
def order_stats(_: UserModel = Depends(require_admin), db: Session = Depends(get_db)):
    return get_service(db).get_order_stats()


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: str,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.get_order(order_id, user.id, is_admin=user.role == "admin")
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: str,
    payload: OrderStatusUpdate,
    _: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_order_status(order_id, payload.status, payload.payment_status)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
