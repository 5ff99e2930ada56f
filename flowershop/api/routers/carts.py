#flowershop/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from flowershop.api.deps import get_cart_session
from flowershop.data.database import get_db
from flowershop.domain.schemas import CartOut, ItemIn, QuantityIn
from flowershop.services.cart_service import CartConflictError, CartSession
from flowershop.services.product_service import ProductService

router = APIRouter(prefix="/cart", tags=["cart"])


def cart_out(cart: CartSession) -> CartOut:
    return CartOut(
        user_id=cart.user_id,
        guest_id=cart.guest_id,
        loading=cart.loading,
        items=cart.items,
        total=cart.get_total(),
        item_count=cart.get_item_count(),
    )


@router.get("", response_model=CartOut)
def get_cart(cart: CartSession = Depends(get_cart_session)):
    return cart_out(cart)


@router.post("/items", response_model=CartOut)
def add_item(
    payload: ItemIn,
    cart: CartSession = Depends(get_cart_session),
    db: Session = Depends(get_db),
):
    try:
        stub = ProductService(db).cart_stub(payload.product_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    try:
        cart.add_item(stub, payload.quantity)
    except CartConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return cart_out(cart)


@router.patch("/items/{product_id}", response_model=CartOut)
def update_item(
    product_id: str,
    payload: QuantityIn,
    cart: CartSession = Depends(get_cart_session),
):
    try:
        cart.update_quantity(product_id, payload.quantity)
    except CartConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return cart_out(cart)


@router.delete("/items/{product_id}", response_model=CartOut)
def remove_item(product_id: str, cart: CartSession = Depends(get_cart_session)):
    try:
        cart.remove_item(product_id)
    except CartConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return cart_out(cart)


@router.delete("", response_model=CartOut)
def clear_cart(cart: CartSession = Depends(get_cart_session)):
    try:
        cart.clear_cart()
    except CartConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return cart_out(cart)
