from typing import Iterable, List

from sqlalchemy import select
from sqlalchemy.orm import Session

from flowershop.data.models.bouquet import BouquetItemModel, CustomBouquetModel


class BouquetRepo:
    def __init__(self, db: Session):
        self.db = db

    # skladniki
    def get_items(self, item_ids: Iterable[str]) -> dict[str, BouquetItemModel]:
        ids = set(item_ids)
        if not ids:
            return {}
        stmt = select(BouquetItemModel).where(BouquetItemModel.id.in_(ids))
        return {item.id: item for item in self.db.execute(stmt).scalars().all()}

    def add_items(self, items: List[BouquetItemModel]) -> None:
        self.db.add_all(items)
        self.db.commit()

    # bukiety uzytkownikow
    def create_bouquet(self, bouquet: CustomBouquetModel) -> CustomBouquetModel:
        self.db.add(bouquet)
        self.db.commit()
        self.db.refresh(bouquet)
        return bouquet

    def get_bouquet(self, bouquet_id: str) -> CustomBouquetModel | None:
        return self.db.get(CustomBouquetModel, bouquet_id)

    def get_user_bouquets(self, user_id: str) -> List[CustomBouquetModel]:
        stmt = (
            select(CustomBouquetModel)
            .where(CustomBouquetModel.user_id == user_id)
            .order_by(CustomBouquetModel.created_at.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def save(self, bouquet: CustomBouquetModel) -> CustomBouquetModel:
        self.db.commit()
        self.db.refresh(bouquet)
        return bouquet
