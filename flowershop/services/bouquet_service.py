# flowershop/services/bouquet_service.py
import uuid
from typing import List

from sqlalchemy.orm import Session

from flowershop.data.models.bouquet import BouquetItemModel, CustomBouquetModel
from flowershop.domain.schemas import BouquetSelection, CartItemStub
from flowershop.repos.bouquet_repo import BouquetRepo
from flowershop.utils.logging import get_logger

logger = get_logger(__name__)

BOUQUET_STATUSES = ("draft", "ordered", "completed")
CUSTOM_BOUQUET_PREFIX = "custom-bouquet-"
CUSTOM_BOUQUET_NAME = "Vlastní kytice"


class BouquetService:
    """
    Wycena i zapis bukietow z konfiguratora.
    Cena = kwiaty (cena x ilosc) + owijka + dodatki (cena x ilosc).
    """

    def __init__(self, db: Session):
        self.repo = BouquetRepo(db)

    # query
    def price(self, selection: BouquetSelection) -> float:
        total, _ = self._price_with_components(selection)
        return total

    def to_cart_item(self, selection: BouquetSelection) -> CartItemStub:
        """Bukiet splaszczony do jednej pozycji koszyka, bez powiazania ze skladnikami."""
        total, components = self._price_with_components(selection)

        #obrazek reprezentatywny - pierwszy kwiat ktory go ma
        image_url = next(
            (components[f.id].image_url for f in selection.flowers if components[f.id].image_url),
            "",
        )

        return CartItemStub(
            id=f"{CUSTOM_BOUQUET_PREFIX}{uuid.uuid4().hex[:12]}",
            name=CUSTOM_BOUQUET_NAME,
            price=total,
            image_url=image_url,
        )

    def get_user_bouquets(self, user_id: str) -> List[CustomBouquetModel]:
        return self.repo.get_user_bouquets(user_id)

    # commands
    def create_bouquet(self, user_id: str, selection: BouquetSelection) -> CustomBouquetModel:
        total = self.price(selection)

        bouquet = CustomBouquetModel(
            id=uuid.uuid4().hex,
            user_id=user_id,
            flowers=[f.model_dump() for f in selection.flowers],
            additions=[a.model_dump() for a in selection.additions] or None,
            wrapping_id=selection.wrapping_id,
            message=selection.message,
            total_price=total,
            status="draft",
        )
        created = self.repo.create_bouquet(bouquet)
        logger.info(f"Utworzono bukiet {created.id} dla uzytkownika {user_id}, cena {total}")
        return created

    def update_status(self, bouquet_id: str, status: str) -> CustomBouquetModel:
        if status not in BOUQUET_STATUSES:
            raise ValueError(f"Nieznany status bukietu: {status}")

        bouquet = self.repo.get_bouquet(bouquet_id)
        if not bouquet:
            raise ValueError("Bukiet nie istnieje")

        bouquet.status = status
        return self.repo.save(bouquet)

    def _price_with_components(self, selection: BouquetSelection) -> tuple[float, dict[str, BouquetItemModel]]:
        ids = [f.id for f in selection.flowers] + [a.id for a in selection.additions]
        if selection.wrapping_id:
            ids.append(selection.wrapping_id)
        components = self.repo.get_items(ids)

        def component(item_id: str, item_type: str) -> BouquetItemModel:
            item = components.get(item_id)
            if not item or item.item_type != item_type:
                raise ValueError(f"Nieznany skladnik bukietu ({item_type}): {item_id}")
            return item

        total = 0.0
        for selected in selection.flowers:
            total += component(selected.id, "flower").price * selected.quantity

        if selection.wrapping_id:
            total += component(selection.wrapping_id, "wrapping").price

        for selected in selection.additions:
            total += component(selected.id, "addition").price * selected.quantity

        return total, components
