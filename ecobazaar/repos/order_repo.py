# ecobazaar/repos/order_repo.py
from typing import Any, List, Mapping, Sequence

from ecobazaar.data.store import RecordStore
from ecobazaar.domain.schemas import Order, OrderItem


class OrderRepo:
    def __init__(self, store: RecordStore):
        self.store = store

    def create_order(self, values: Mapping[str, Any]) -> Order:
        created = self.store.insert("orders", [values])
        return Order.model_validate(created[0])

    def get_order(self, order_id: str) -> Order | None:
        rows = self.store.select("orders", filters={"id": order_id})
        return Order.model_validate(rows[0]) if rows else None

    def list_orders(self, user_id: str | None = None) -> List[Order]:
        filters = {"user_id": user_id} if user_id else None
        rows = self.store.select("orders", filters=filters, order="created_at.desc")
        return [Order.model_validate(r) for r in rows]

    def add_order_items(self, items: Sequence[Mapping[str, Any]]) -> List[OrderItem]:
        created = self.store.insert("order_items", items)
        return [OrderItem.model_validate(r) for r in created]

    def get_order_items(self, order_id: str) -> List[OrderItem]:
        rows = self.store.select("order_items", filters={"order_id": order_id})
        return [OrderItem.model_validate(r) for r in rows]
