# ecobazaar/data/sql_store.py
import uuid
from typing import Any, List, Mapping, Sequence

from sqlalchemy import Table, delete, insert, select, text, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ecobazaar.data.database import Base
from ecobazaar.data.store import Filters, Record, RecordStore, parse_order
from ecobazaar.domain.errors import StoreError, ValidationError
from ecobazaar.utils.logging import get_logger

import ecobazaar.data.models  # noqa: F401

logger = get_logger(__name__)


class SqlRecordStore(RecordStore):
    """
    Record store over a direct SQL connection (Postgres in production,
    SQLite in tests). Each call runs in its own ``engine.begin()`` block.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    # =====================================================
    # helpers
    # =====================================================
    def _table(self, name: str) -> Table:
        table = Base.metadata.tables.get(name)
        if table is None:
            raise StoreError(f"Unknown table '{name}'")
        return table

    def _conditions(self, table: Table, filters: Filters | None):
        conditions = []
        for column, value in (filters or {}).items():
            if column not in table.c:
                raise StoreError(f"Unknown column '{table.name}.{column}'")
            col = table.c[column]
            if value is None:
                conditions.append(col.is_(None))
            elif isinstance(value, (list, tuple, set, frozenset)):
                conditions.append(col.in_(list(value)))
            else:
                conditions.append(col == value)
        return conditions

    @staticmethod
    def _embed_column(table: Table, related: Table) -> str:
        for fk in table.foreign_keys:
            if fk.column.table is related:
                return fk.parent.name
        raise StoreError(f"No foreign key from '{table.name}' to '{related.name}'")

    @staticmethod
    def _require_filters(action: str, table: str, filters: Filters | None) -> None:
        if not filters:
            raise ValidationError(f"Refusing unfiltered {action} on '{table}'")

    # =====================================================
    # RecordStore
    # =====================================================
    def insert(self, table: str, records: Sequence[Mapping[str, Any]]) -> List[Record]:
        t = self._table(table)
        rows = []
        for record in records:
            row = dict(record)
            if "id" in t.c and not row.get("id"):
                row["id"] = str(uuid.uuid4())
            rows.append(row)

        if not rows:
            return []

        ids = [r["id"] for r in rows]
        try:
            with self.engine.begin() as conn:
                conn.execute(insert(t), rows)
                stored = conn.execute(select(t).where(t.c.id.in_(ids))).mappings().all()
        except SQLAlchemyError as e:
            logger.error(f"insert into {table} failed: {e}")
            raise StoreError(f"insert into {table} failed: {e}") from e

        by_id = {r["id"]: dict(r) for r in stored}
        logger.info(f"Inserted {len(rows)} row(s) into {table}")
        return [by_id[i] for i in ids]

    def select(
        self,
        table: str,
        filters: Filters | None = None,
        order: str | None = None,
        embed: str | None = None,
    ) -> List[Record]:
        t = self._table(table)
        stmt = select(t).where(*self._conditions(t, filters))
        for column, descending in parse_order(order):
            if column not in t.c:
                raise StoreError(f"Unknown column '{table}.{column}'")
            stmt = stmt.order_by(t.c[column].desc() if descending else t.c[column].asc())

        try:
            with self.engine.connect() as conn:
                rows = [dict(r) for r in conn.execute(stmt).mappings()]

                if embed:
                    related = self._table(embed)
                    fk_column = self._embed_column(t, related)
                    wanted = {r[fk_column] for r in rows if r[fk_column] is not None}
                    found = {}
                    if wanted:
                        found = {
                            r["id"]: dict(r)
                            for r in conn.execute(
                                select(related).where(related.c.id.in_(list(wanted)))
                            ).mappings()
                        }
                    for r in rows:
                        r[embed] = found.get(r[fk_column])
        except SQLAlchemyError as e:
            logger.error(f"select from {table} failed: {e}")
            raise StoreError(f"select from {table} failed: {e}") from e

        return rows

    def update(self, table: str, patch: Mapping[str, Any], filters: Filters) -> int:
        self._require_filters("update", table, filters)
        t = self._table(table)
        stmt = update(t).where(*self._conditions(t, filters)).values(**dict(patch))
        try:
            with self.engine.begin() as conn:
                rowcount = conn.execute(stmt).rowcount
        except SQLAlchemyError as e:
            logger.error(f"update of {table} failed: {e}")
            raise StoreError(f"update of {table} failed: {e}") from e

        logger.info(f"Updated {rowcount} row(s) in {table} where {dict(filters)}")
        return rowcount

    def delete(self, table: str, filters: Filters) -> int:
        self._require_filters("delete", table, filters)
        t = self._table(table)
        stmt = delete(t).where(*self._conditions(t, filters))
        try:
            with self.engine.begin() as conn:
                rowcount = conn.execute(stmt).rowcount
        except SQLAlchemyError as e:
            logger.error(f"delete from {table} failed: {e}")
            raise StoreError(f"delete from {table} failed: {e}") from e

        logger.info(f"Deleted {rowcount} row(s) from {table} where {dict(filters)}")
        return rowcount

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning(f"SQL store ping failed: {e}")
            return False
