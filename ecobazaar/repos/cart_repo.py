# ecobazaar/repos/cart_repo.py
from typing import List

from ecobazaar.data.store import RecordStore
from ecobazaar.domain.schemas import CartItem

TABLE = "cart_items"


class CartRepo:
    def __init__(self, store: RecordStore):
        self.store = store

    def get_cart_items(self, user_id: str) -> List[CartItem]:
        rows = self.store.select(TABLE, filters={"user_id": user_id}, order="added_at.asc", embed="products")
        return [CartItem.model_validate(r) for r in rows]

    def get_cart_item(self, user_id: str, product_id: str) -> CartItem | None:
        rows = self.store.select(TABLE, filters={"user_id": user_id, "product_id": product_id})
        return CartItem.model_validate(rows[0]) if rows else None

    def add_cart_item(self, user_id: str, product_id: str, quantity: int = 1) -> None:
        self.store.insert(TABLE, [{"user_id": user_id, "product_id": product_id, "quantity": quantity}])

    def update_quantity(self, user_id: str, item_id: str, quantity: int) -> int:
        return self.store.update(TABLE, {"quantity": quantity}, filters={"id": item_id, "user_id": user_id})

    def delete_cart_item(self, user_id: str, item_id: str) -> int:
        return self.store.delete(TABLE, filters={"id": item_id, "user_id": user_id})

    def clear_cart(self, user_id: str) -> int:
        return self.store.delete(TABLE, filters={"user_id": user_id})
