# flowershop/api/deps.py
from functools import lru_cache

import redis
from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from flowershop.data.database import get_db
from flowershop.data.models.user import UserModel
from flowershop.repos.cart_repo import CartRepo
from flowershop.repos.guest_cart_repo import GuestCartRepo
from flowershop.repos.session_repo import SessionRepo
from flowershop.services.auth_service import AuthService
from flowershop.services.cart_service import CartConflictError, CartSession
from flowershop.utils.settings import CART_STRICT_WRITES, REDIS_URL


@lru_cache
def get_redis() -> redis.Redis:
    # jeden klient (z pula polaczen) na proces
    return redis.Redis.from_url(REDIS_URL, decode_responses=True)


def get_auth_service(db: Session = Depends(get_db), client: redis.Redis = Depends(get_redis)) -> AuthService:
    return AuthService(db=db, sessions=SessionRepo(client))


def get_bearer_token(authorization: str | None = Header(None)) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(status_code=401, detail="Nieprawidlowy naglowek Authorization")
    return token


def get_optional_user(
    token: str | None = Depends(get_bearer_token),
    auth: AuthService = Depends(get_auth_service),
) -> UserModel | None:
    if not token:
        return None
    user = auth.current_user(token)
    if not user:
        raise HTTPException(status_code=401, detail="Sesja wygasla")
    return user


def get_current_user(user: UserModel | None = Depends(get_optional_user)) -> UserModel:
    if not user:
        raise HTTPException(status_code=401, detail="Wymagane logowanie")
    return user


def require_admin(user: UserModel = Depends(get_current_user)) -> UserModel:
    if user.role != "admin":
        raise HTTPException(status_code=403, detail="Brak uprawnien administratora")
    return user


def get_guest_id(x_guest_id: str | None = Header(None, alias="X-Guest-Id")) -> str | None:
    return x_guest_id or None


def new_cart_session(db: Session, client: redis.Redis, guest_id: str | None) -> CartSession:
    return CartSession(
        cart_repo=CartRepo(db),
        guest_repo=GuestCartRepo(client),
        guest_id=guest_id,
        strict=CART_STRICT_WRITES,
    )


def get_cart_session(
    db: Session = Depends(get_db),
    client: redis.Redis = Depends(get_redis),
    guest_id: str | None = Depends(get_guest_id),
    user: UserModel | None = Depends(get_optional_user),
):
    if not user and not guest_id:
        raise HTTPException(status_code=400, detail="Brak tozsamosci koszyka (X-Guest-Id albo logowanie)")

    cart = new_cart_session(db, client, guest_id)
    try:
        cart.start(user.id if user else None)
    except CartConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    try:
        yield cart
    finally:
        cart.close()
