# ecobazaar/data/rest_store.py
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Mapping, Sequence

import requests
from requests import RequestException

from ecobazaar.data.store import Filters, Record, RecordStore
from ecobazaar.domain.errors import StoreError, ValidationError
from ecobazaar.utils.logging import get_logger
from ecobazaar.utils.retry import http_retry
from ecobazaar.utils.settings import STORE_TIMEOUT_SECONDS

logger = get_logger(__name__)


def _encode(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


def _encode_record(record: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: _encode(v) for k, v in record.items()}


def filter_params(filters: Filters | None) -> Dict[str, str]:
    """Translate equality filters into PostgREST query parameters."""
    params = {}
    for column, value in (filters or {}).items():
        if value is None:
            params[column] = "is.null"
        elif isinstance(value, (list, tuple, set, frozenset)):
            params[column] = "in.(" + ",".join(str(_encode(v)) for v in value) + ")"
        elif isinstance(value, bool):
            params[column] = f"eq.{str(value).lower()}"
        else:
            params[column] = f"eq.{_encode(value)}"
    return params


class RestRecordStore(RecordStore):
    """
    Record store over the Supabase PostgREST API (``/rest/v1/<table>``).

    Writes ask for ``return=representation`` so inserts come back with their
    generated ids and updates/deletes can be counted.
    """

    def __init__(
        self,
        base_url: str,
        key: str,
        timeout: float = STORE_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "apikey": key,
                "Authorization": f"Bearer {key}",
                "Content-Type": "application/json",
                "Prefer": "return=representation",
            }
        )

    @http_retry()
    def _send(self, method: str, table: str, params=None, json=None) -> requests.Response:
        url = f"{self.base_url}/rest/v1/{table}"
        logger.info(f"RecordStore {method} {url} params={params}")
        resp = self.session.request(method, url, params=params, json=json, timeout=self.timeout)
        resp.raise_for_status()
        return resp

    def _rows(self, method: str, table: str, params=None, json=None) -> List[Record]:
        try:
            resp = self._send(method, table, params=params, json=json)
        except RequestException as e:
            logger.error(f"{method} {table} failed: {e}")
            raise StoreError(f"{method} {table} failed: {e}") from e

        if not resp.content:
            return []
        body = resp.json()
        return body if isinstance(body, list) else [body]

    def insert(self, table: str, records: Sequence[Mapping[str, Any]]) -> List[Record]:
        if not records:
            return []
        rows = self._rows("POST", table, json=[_encode_record(r) for r in records])
        logger.info(f"Inserted {len(rows)} row(s) into {table}")
        return rows

    def select(
        self,
        table: str,
        filters: Filters | None = None,
        order: str | None = None,
        embed: str | None = None,
    ) -> List[Record]:
        params = {"select": f"*,{embed}(*)" if embed else "*"}
        params.update(filter_params(filters))
        if order:
            params["order"] = order
        return self._rows("GET", table, params=params)

    def update(self, table: str, patch: Mapping[str, Any], filters: Filters) -> int:
        if not filters:
            raise ValidationError(f"Refusing unfiltered update on '{table}'")
        rows = self._rows("PATCH", table, params=filter_params(filters), json=_encode_record(patch))
        logger.info(f"Updated {len(rows)} row(s) in {table} where {dict(filters)}")
        return len(rows)

    def delete(self, table: str, filters: Filters) -> int:
        if not filters:
            raise ValidationError(f"Refusing unfiltered delete on '{table}'")
        rows = self._rows("DELETE", table, params=filter_params(filters))
        logger.info(f"Deleted {len(rows)} row(s) from {table} where {dict(filters)}")
        return len(rows)

    def ping(self) -> bool:
        try:
            self._send("GET", "profiles", params={"select": "id", "limit": "1"})
            return True
        except RequestException as e:
            logger.warning(f"REST store ping failed: {e}")
            return False
