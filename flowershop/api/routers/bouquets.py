# flowershop/api/routers/bouquets.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from flowershop.api.deps import get_cart_session, get_current_user
from flowershop.api.routers.carts import cart_out
from flowershop.data.database import get_db
from flowershop.data.models.user import UserModel
from flowershop.domain.schemas import (
    BouquetCreateIn,
    BouquetOut,
    BouquetQuoteOut,
    BouquetSelection,
    CartOut,
)
from flowershop.services.bouquet_service import BouquetService
from flowershop.services.cart_service import CartConflictError, CartSession

router = APIRouter(prefix="/bouquets", tags=["bouquets"])


@router.post("/quote", response_model=BouquetQuoteOut)
def quote(payload: BouquetSelection, db: Session = Depends(get_db)):
    try:
        return BouquetQuoteOut(total_price=BouquetService(db).price(payload))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/cart", response_model=CartOut)
def add_to_cart(
    payload: BouquetSelection,
    cart: CartSession = Depends(get_cart_session),
    db: Session = Depends(get_db),
):
    """Bukiet jako jedna pozycja koszyka, bez zapisu w kolekcji bukietow."""
    try:
        stub = BouquetService(db).to_cart_item(payload)
        cart.add_item(stub, 1)
    except CartConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return cart_out(cart)


@router.post("", response_model=BouquetOut, status_code=201)
def create_bouquet(
    payload: BouquetCreateIn,
    user: UserModel = Depends(get_current_user),
    cart: CartSession = Depends(get_cart_session),
    db: Session = Depends(get_db),
):
    svc = BouquetService(db)
    try:
        bouquet = svc.create_bouquet(user.id, payload)
        if payload.add_to_cart:
            cart.add_item(svc.to_cart_item(payload), 1)
    except CartConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return bouquet


@router.get("", response_model=List[BouquetOut])
def list_bouquets(user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return BouquetService(db).get_user_bouquets(user.id)
