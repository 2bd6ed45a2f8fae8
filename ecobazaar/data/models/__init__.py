#import all models so SQLAlchemy registers them on Base.metadata

from ecobazaar.data.models.profile import ProfileModel
from ecobazaar.data.models.product import ProductModel
from ecobazaar.data.models.cart_item import CartItemModel
from ecobazaar.data.models.order import OrderModel, OrderItemModel

__all__ = ["ProfileModel", "ProductModel", "CartItemModel", "OrderModel", "OrderItemModel"]
