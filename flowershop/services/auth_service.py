# flowershop/services/auth_service.py
import hashlib
import hmac
import secrets
import uuid
from typing import Tuple

from sqlalchemy.orm import Session

from flowershop.data.models.user import UserModel
from flowershop.repos.session_repo import SessionRepo
from flowershop.repos.user_repo import UserRepo
from flowershop.services.google_client import GoogleClient
from flowershop.services.notification_service import NotificationService
from flowershop.utils.logging import get_logger
from flowershop.utils.settings import (
    LOGIN_ATTEMPT_WINDOW_SECONDS,
    LOGIN_MAX_ATTEMPTS,
    PASSWORD_RESET_TTL_SECONDS,
    SESSION_TTL_SECONDS,
)

logger = get_logger(__name__)

_PBKDF2_ITERATIONS = 260_000
SESSION_KIND = "session"
RESET_KIND = "reset"


class AuthError(Exception):
    pass


class InvalidCredentialsError(AuthError):
    pass


class AccountExistsError(AuthError):
    pass


class TooManyAttemptsError(AuthError):
    pass


def hash_password(password: str, salt: str | None = None) -> str:
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), _PBKDF2_ITERATIONS)
    return f"pbkdf2_sha256${_PBKDF2_ITERATIONS}${salt}${digest.hex()}"


def verify_password(password: str, stored: str | None) -> bool:
    if not stored:
        return False
    try:
        _, iterations, salt, expected = stored.split("$")
    except ValueError:
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), int(iterations))
    return hmac.compare_digest(digest.hex(), expected)


class AuthService:
    """
    Logowanie email+haslo i przez google, tokeny sesji w redisie.
    Bledy logowane i rzucane dalej, komunikat dla uzytkownika robi router.
    """

    def __init__(
        self,
        db: Session,
        sessions: SessionRepo,
        google_client: GoogleClient | None = None,
        notification_service: NotificationService | None = None,
    ):
        self.users = UserRepo(db)
        self.sessions = sessions
        self.google_client = google_client or GoogleClient()
        self.notification_service = notification_service or NotificationService()

    def register(self, email: str, password: str, display_name: str | None = None) -> Tuple[str, UserModel]:
        email = email.strip().lower()
        if self.users.get_by_email(email):
            logger.error(f"Registration failed, account exists: {email}")
            raise AccountExistsError("Konto z tym adresem juz istnieje")

        user = self.users.create_user(
            UserModel(
                id=uuid.uuid4().hex,
                email=email,
                display_name=display_name,
                password_hash=hash_password(password),
                provider="password",
                role="customer",
            )
        )
        logger.info(f"Zarejestrowano uzytkownika {user.id}")
        return self._open_session(user), user

    def login(self, email: str, password: str) -> Tuple[str, UserModel]:
        email = email.strip().lower()

        if self.sessions.failed_attempts(email) >= LOGIN_MAX_ATTEMPTS:
            logger.error(f"Login throttled for {email}")
            raise TooManyAttemptsError("Zbyt wiele prob logowania, sprobuj pozniej")

        user = self.users.get_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            self.sessions.register_failure(email, LOGIN_ATTEMPT_WINDOW_SECONDS)
            logger.error(f"Login failed for {email}")
            raise InvalidCredentialsError("Nieprawidlowy email lub haslo")

        self.sessions.reset_failures(email)
        return self._open_session(user), user

    def login_with_google(self, id_token: str) -> Tuple[str, UserModel]:
        claims = self.google_client.verify_id_token(id_token)
        email = claims["email"].lower()

        user = self.users.get_by_email(email)
        if not user:
            user = self.users.create_user(
                UserModel(
                    id=uuid.uuid4().hex,
                    email=email,
                    display_name=claims.get("name"),
                    provider="google",
                    role="customer",
                )
            )
            logger.info(f"Utworzono uzytkownika {user.id} z konta Google")

        return self._open_session(user), user

    def logout(self, token: str) -> None:
        self.sessions.delete_token(SESSION_KIND, token)

    def current_user(self, token: str) -> UserModel | None:
        user_id = self.sessions.get_token(SESSION_KIND, token)
        if not user_id:
            return None
        return self.users.get_user(user_id)

    def request_password_reset(self, email: str) -> None:
        user = self.users.get_by_email(email.strip().lower())
        if not user:
            # nie zdradzamy czy konto istnieje
            logger.info("Password reset requested for unknown email")
            return

        token = secrets.token_urlsafe(32)
        self.sessions.put_token(RESET_KIND, token, user.id, PASSWORD_RESET_TTL_SECONDS)
        self.notification_service.send_password_reset(user.email, token)

    def confirm_password_reset(self, token: str, new_password: str) -> None:
        user_id = self.sessions.get_token(RESET_KIND, token)
        user = self.users.get_user(user_id) if user_id else None
        if not user:
            raise InvalidCredentialsError("Link do resetu hasla jest nieprawidlowy lub wygasl")

        user.password_hash = hash_password(new_password)
        self.users.save(user)
        self.sessions.delete_token(RESET_KIND, token)
        self.sessions.reset_failures(user.email)

    def _open_session(self, user: UserModel) -> str:
        token = secrets.token_urlsafe(32)
        self.sessions.put_token(SESSION_KIND, token, user.id, SESSION_TTL_SECONDS)
        return token
