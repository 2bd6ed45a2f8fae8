# ecobazaar/repos/product_repo.py
from typing import Any, List, Mapping

from ecobazaar.data.store import RecordStore
from ecobazaar.domain.schemas import Product

TABLE = "products"


class ProductRepo:
    def __init__(self, store: RecordStore):
        self.store = store

    def list_catalog(self) -> List[Product]:
        #newest first, this order breaks ties between recommendation candidates
        rows = self.store.select(TABLE, order="created_at.desc")
        return [Product.model_validate(r) for r in rows]

    def list_by_seller(self, seller_id: str) -> List[Product]:
        rows = self.store.select(TABLE, filters={"seller_id": seller_id}, order="created_at.desc")
        return [Product.model_validate(r) for r in rows]

    def get_product(self, product_id: str) -> Product | None:
        rows = self.store.select(TABLE, filters={"id": product_id})
        return Product.model_validate(rows[0]) if rows else None

    def create_product(self, values: Mapping[str, Any]) -> Product:
        created = self.store.insert(TABLE, [values])
        return Product.model_validate(created[0])

    def compare_and_set_stock(self, product_id: str, expected: int, new_stock: int) -> int:
        """Write ``new_stock`` only if the row still holds ``expected``; returns rows affected."""
        return self.store.update(
            TABLE,
            {"stock": new_stock},
            filters={"id": product_id, "stock": expected},
        )
