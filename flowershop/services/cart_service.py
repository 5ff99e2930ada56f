# flowershop/services/cart_service.py
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List

from pydantic import ValidationError
from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError

from flowershop.domain.schemas import CartItemStub, CartLineItem
from flowershop.repos.cart_repo import CartRepo
from flowershop.repos.guest_cart_repo import GuestCartRepo
from flowershop.utils.logging import get_logger

logger = get_logger(__name__)

# bledy odczytu, ktore traktujemy jak pusty koszyk
_READ_ERRORS = (SQLAlchemyError, RedisError, ValueError, ValidationError)
_WRITE_ERRORS = (SQLAlchemyError, RedisError)


class CartState(str, Enum):
    UNINITIALIZED = "UNINITIALIZED"
    LOADING = "LOADING"
    MERGING = "MERGING"
    READY = "READY"


class CartConflictError(RuntimeError):
    """Rekord koszyka zmieniony przez inny zapis (tylko tryb strict)."""


def merge_cart_items(*sources: Iterable[CartLineItem]) -> List[CartLineItem]:
    """
    Laczy listy pozycji po id produktu, sumujac ilosci.
    Kolejnosc wg pierwszego wystapienia id.
    """
    merged: Dict[str, CartLineItem] = {}
    for source in sources:
        for item in source:
            existing = merged.get(item.id)
            if existing:
                merged[item.id] = existing.model_copy(
                    update={"quantity": existing.quantity + item.quantity}
                )
            else:
                merged[item.id] = item
    return list(merged.values())


def _parse_items(raw: List[Dict[str, Any]] | None) -> List[CartLineItem]:
    return [CartLineItem.model_validate(entry) for entry in (raw or [])]


def _dump_items(items: Iterable[CartLineItem]) -> List[Dict[str, Any]]:
    return [item.model_dump() for item in items]


class CartSession:
    """
    Stan koszyka jednej sesji przegladania (gosc albo zalogowany uzytkownik).

    Cykl zycia: UNINITIALIZED -> LOADING -> (MERGING) -> READY, close() wraca do
    UNINITIALIZED. Kazda mutacja najpierw zmienia stan w pamieci, potem zapisuje
    cala liste do magazynu odpowiadajacego tozsamosci (rekord w bazie dla
    uzytkownika, redis dla goscia).

    Trwalosc at-most-once: blad zapisu jest logowany, stan w pamieci zostaje.
    Przy rownoleglych zapisach wygrywa ostatni zakonczony - nie jest to
    linearyzowalne. Z strict=True zapis rekordu uzytkownika idzie przez
    compare-and-swap na kolumnie version i przegrany wyscig konczy sie
    CartConflictError.
    """

    def __init__(
        self,
        cart_repo: CartRepo,
        guest_repo: GuestCartRepo,
        guest_id: str | None = None,
        strict: bool = False,
    ):
        self.cart_repo = cart_repo
        self.guest_repo = guest_repo
        self.guest_id = guest_id
        self.strict = strict

        self.user_id: str | None = None
        self.items: List[CartLineItem] = []
        self.state = CartState.UNINITIALIZED
        self._version: int | None = None

    @property
    def loading(self) -> bool:
        return self.state != CartState.READY

    # =====================================================
    # LIFECYCLE
    # =====================================================
    def start(self, user_id: str | None = None) -> "CartSession":
        self.user_id = user_id
        self._load()
        return self

    def on_identity_changed(self, user_id: str | None) -> None:
        """Przejscie login/logout. Ta sama tozsamosc przy gotowym koszyku - nic."""
        if self.state == CartState.READY and user_id == self.user_id:
            return
        logger.info(f"Zmiana tozsamosci koszyka {self.user_id} -> {user_id}")
        self.user_id = user_id
        self._load()

    def close(self) -> None:
        self.items = []
        self.user_id = None
        self._version = None
        self.state = CartState.UNINITIALIZED

    def _load(self) -> None:
        self.state = CartState.LOADING
        try:
            if self.user_id:
                self._load_user_cart()
            else:
                self.items = self._load_guest_items()
        except _READ_ERRORS as e:
            #fail-open: nie blokujemy zakupow, koszyk pusty na te sesje
            logger.error(f"Blad ladowania koszyka (user={self.user_id}, guest={self.guest_id}): {e}")
            self._rollback_quietly()
            self.items = []
        finally:
            self.state = CartState.READY

    def _load_user_cart(self) -> None:
        record = self.cart_repo.get_cart(self.user_id)
        if record is None:
            #nowy uzytkownik - pusty rekord
            record = self.cart_repo.create_cart(self.user_id)
            logger.info(f"Utworzono pusty koszyk dla uzytkownika {self.user_id}")

        self.items = _parse_items(record.items)
        self._version = record.version

        guest_items = self._take_guest_items()
        if not guest_items:
            return

        #laczymy z rekordem swiezo pobranym z bazy, nie z poprzednim stanem w pamieci
        self.state = CartState.MERGING
        merged = merge_cart_items(self.items, guest_items)
        self.items = merged
        logger.info(
            f"Scalanie koszyka goscia {self.guest_id} z koszykiem uzytkownika {self.user_id}: "
            f"{len(guest_items)} pozycji goscia, {len(merged)} po scaleniu"
        )
        try:
            self._write_user_items()
        except (*_WRITE_ERRORS, CartConflictError):
            #wpis goscia juz pobrany - oddajemy go, scalenie przy nastepnym ladowaniu
            self._restore_guest_items(guest_items)
            raise

    def _load_guest_items(self) -> List[CartLineItem]:
        if not self.guest_id:
            return []
        return _parse_items(self.guest_repo.load(self.guest_id))

    def _take_guest_items(self) -> List[CartLineItem]:
        if not self.guest_id:
            return []
        try:
            return _parse_items(self.guest_repo.take(self.guest_id))
        except (RedisError, ValueError, ValidationError) as e:
            # koszyk uzytkownika zostaje, bez scalania
            logger.error(f"Nie mozna pobrac koszyka goscia {self.guest_id} do scalenia: {e}")
            return []

    def _restore_guest_items(self, guest_items: List[CartLineItem]) -> None:
        try:
            self.guest_repo.save(self.guest_id, _dump_items(guest_items))
        except RedisError as e:
            logger.error(f"Nie mozna przywrocic koszyka goscia {self.guest_id}: {e}")

    # =====================================================
    # QUERY
    # =====================================================
    def get_total(self) -> float:
        return sum(item.price * item.quantity for item in self.items)

    def get_item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def find(self, product_id: str) -> CartLineItem | None:
        return next((item for item in self.items if item.id == product_id), None)

    # =====================================================
    # COMMANDS
    # =====================================================
    def add_item(self, stub: CartItemStub, quantity: int = 1) -> None:
        self._ensure_started()
        if quantity <= 0:
            raise ValueError("Ilosc musi byc wieksza niz 0")

        existing = self.find(stub.id)
        if existing:
            self.items = [
                item.model_copy(update={"quantity": item.quantity + quantity}) if item.id == stub.id else item
                for item in self.items
            ]
        else:
            line = CartLineItem(
                id=stub.id,
                name=stub.name,
                price=stub.price,
                image_url=stub.image_url,
                quantity=quantity,
            )
            self.items = [*self.items, line]

        self.save()

    def remove_item(self, product_id: str) -> None:
        self._ensure_started()
        if not self.find(product_id):
            return
        self.items = [item for item in self.items if item.id != product_id]
        self.save()

    def update_quantity(self, product_id: str, quantity: int) -> None:
        self._ensure_started()
        if quantity <= 0:
            self.remove_item(product_id)
            return

        existing = self.find(product_id)
        if not existing or existing.quantity == quantity:
            return

        self.items = [
            item.model_copy(update={"quantity": quantity}) if item.id == product_id else item
            for item in self.items
        ]
        self.save()

    def clear_cart(self) -> None:
        self._ensure_started()
        self.items = []
        self.save()

    def save(self) -> None:
        """Zapis calej listy, bledy tylko logowane (bez rollbacku stanu w pamieci)."""
        try:
            if self.user_id:
                self._write_user_items()
            elif self.guest_id:
                self.guest_repo.save(self.guest_id, _dump_items(self.items))
            else:
                logger.warning("Koszyk bez tozsamosci i bez guest_id - nie zapisuje")
        except _WRITE_ERRORS as e:
            logger.error(f"Blad zapisu koszyka (user={self.user_id}, guest={self.guest_id}): {e}")
            self._rollback_quietly()

    def _write_user_items(self) -> None:
        payload = _dump_items(self.items)

        if not self.strict:
            record = self.cart_repo.save_items(self.user_id, payload)
            self._version = record.version
            return

        if self._version is None:
            #rekord nie wczytany (fail-open przy starcie), bierzemy wersje z bazy
            record = self.cart_repo.get_cart(self.user_id) or self.cart_repo.create_cart(self.user_id)
            self._version = record.version

        rowcount = self.cart_repo.update_cart_version(
            user_id=self.user_id,
            old_version=self._version,
            new_data={
                "items": payload,
                "version": self._version + 1,
                "updated_at": datetime.now(timezone.utc),
            },
        )
        if rowcount == 0:
            self.cart_repo.rollback()
            raise CartConflictError(
                f"Konflikt wspolbieznosci - koszyk {self.user_id} zostal zmodyfikowany przez inna operacje"
            )
        self.cart_repo.commit()
        self._version += 1

    def _ensure_started(self) -> None:
        if self.state == CartState.UNINITIALIZED:
            raise RuntimeError("Koszyk nie zostal zainicjalizowany")

    def _rollback_quietly(self) -> None:
        try:
            self.cart_repo.rollback()
        except SQLAlchemyError as e:
            logger.error(f"Rollback sesji koszyka nieudany: {e}")
