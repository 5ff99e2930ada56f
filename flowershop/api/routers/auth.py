# flowershop/api/routers/auth.py
import redis
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from flowershop.api.deps import (
    get_auth_service,
    get_bearer_token,
    get_current_user,
    get_guest_id,
    get_redis,
    new_cart_session,
)
from flowershop.data.database import get_db
from flowershop.data.models.user import UserModel
from flowershop.domain.schemas import (
    GoogleLoginIn,
    LoginIn,
    PasswordResetConfirmIn,
    PasswordResetIn,
    ProfileUpdate,
    RegisterIn,
    SessionOut,
    UserRead,
)
from flowershop.services.auth_service import (
    AccountExistsError,
    AuthService,
    InvalidCredentialsError,
    TooManyAttemptsError,
)
from flowershop.services.cart_service import CartConflictError
from flowershop.services.google_client import GoogleTokenError
from flowershop.services.user_service import UserService
from flowershop.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _merge_guest_cart(db: Session, client: redis.Redis, guest_id: str | None, user_id: str) -> None:
    # przejscie gosc -> zalogowany, koszyk goscia trafia do koszyka uzytkownika
    if not guest_id:
        return
    cart = new_cart_session(db, client, guest_id)
    cart.start(None)
    try:
        cart.on_identity_changed(user_id)
    except CartConflictError as e:
        # logowanie sie udalo, koszyk goscia zostaje na nastepna probe
        logger.error(f"Scalenie koszyka przy logowaniu nieudane: {e}")
    finally:
        cart.close()


def _session_out(token: str, user: UserModel) -> SessionOut:
    return SessionOut(token=token, user=UserRead.model_validate(user))


@router.post("/register", response_model=SessionOut, status_code=201)
def register(
    payload: RegisterIn,
    auth: AuthService = Depends(get_auth_service),
    guest_id: str | None = Depends(get_guest_id),
    db: Session = Depends(get_db),
    client: redis.Redis = Depends(get_redis),
):
    try:
        token, user = auth.register(payload.email, payload.password, payload.display_name)
    except AccountExistsError as e:
        raise HTTPException(status_code=409, detail=str(e))

    _merge_guest_cart(db, client, guest_id, user.id)
    return _session_out(token, user)


@router.post("/login", response_model=SessionOut)
def login(
    payload: LoginIn,
    auth: AuthService = Depends(get_auth_service),
    guest_id: str | None = Depends(get_guest_id),
    db: Session = Depends(get_db),
    client: redis.Redis = Depends(get_redis),
):
    try:
        token, user = auth.login(payload.email, payload.password)
    except TooManyAttemptsError as e:
        raise HTTPException(status_code=429, detail=str(e))
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=401, detail=str(e))

    _merge_guest_cart(db, client, guest_id, user.id)
    return _session_out(token, user)


@router.post("/google", response_model=SessionOut)
def login_with_google(
    payload: GoogleLoginIn,
    auth: AuthService = Depends(get_auth_service),
    guest_id: str | None = Depends(get_guest_id),
    db: Session = Depends(get_db),
    client: redis.Redis = Depends(get_redis),
):
    try:
        token, user = auth.login_with_google(payload.id_token)
    except GoogleTokenError as e:
        raise HTTPException(status_code=401, detail=str(e))

    _merge_guest_cart(db, client, guest_id, user.id)
    return _session_out(token, user)


@router.post("/logout", status_code=204)
def logout(
    token: str | None = Depends(get_bearer_token),
    auth: AuthService = Depends(get_auth_service),
):
    if token:
        auth.logout(token)


@router.get("/me", response_model=UserRead)
def me(user: UserModel = Depends(get_current_user)):
    return user


@router.patch("/me", response_model=UserRead)
def update_me(
    payload: ProfileUpdate,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return UserService(db).update_profile(user.id, payload)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/password-reset", status_code=202)
def request_password_reset(payload: PasswordResetIn, auth: AuthService = Depends(get_auth_service)):
    auth.request_password_reset(payload.email)
    return {"status": "accepted"}


@router.post("/password-reset/confirm", status_code=204)
def confirm_password_reset(payload: PasswordResetConfirmIn, auth: AuthService = Depends(get_auth_service)):
    try:
        auth.confirm_password_reset(payload.token, payload.new_password)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=400, detail=str(e))
