#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from flowershop.data.models.user import UserModel
from flowershop.data.models.cart import CartModel
from flowershop.data.models.order import OrderModel
from flowershop.data.models.product import ProductModel
from flowershop.data.models.bouquet import BouquetItemModel, CustomBouquetModel

__all__ = [
    "UserModel",
    "CartModel",
    "OrderModel",
    "ProductModel",
    "BouquetItemModel",
    "CustomBouquetModel",
]
