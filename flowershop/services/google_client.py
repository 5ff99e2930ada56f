# flowershop/services/google_client.py
import requests

from flowershop.utils.retry import http_retry
from flowershop.utils.settings import GOOGLE_CLIENT_ID, GOOGLE_TOKENINFO_URL
from flowershop.utils.logging import get_logger

logger = get_logger(__name__)


class GoogleTokenError(ValueError):
    pass


class GoogleClient:
    """Weryfikacja google ID tokena przez endpoint tokeninfo."""

    def __init__(self, tokeninfo_url: str | None = None, client_id: str | None = None, timeout: int = 3):
        self.tokeninfo_url = tokeninfo_url or GOOGLE_TOKENINFO_URL
        self.client_id = GOOGLE_CLIENT_ID if client_id is None else client_id
        self.timeout = timeout

    @http_retry()
    def _fetch_tokeninfo(self, id_token: str) -> requests.Response:
        logger.info(f"GoogleClient GET {self.tokeninfo_url}")
        return requests.get(self.tokeninfo_url, params={"id_token": id_token}, timeout=self.timeout)

    def verify_id_token(self, id_token: str) -> dict:
        resp = self._fetch_tokeninfo(id_token)
        if resp.status_code == 400:
            raise GoogleTokenError("Nieprawidlowy token Google")
        resp.raise_for_status()

        claims = resp.json()
        if self.client_id and claims.get("aud") != self.client_id:
            raise GoogleTokenError("Token Google wydany dla innej aplikacji")
        if not claims.get("email"):
            raise GoogleTokenError("Token Google bez adresu email")

        return {
            "sub": claims.get("sub"),
            "email": claims["email"],
            "name": claims.get("name"),
        }
