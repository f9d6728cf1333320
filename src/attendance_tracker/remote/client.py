"""HTTP client for the Airtable record-table API.

The client knows nothing about participants or attendance: it moves
``{id, fields}`` records in and out of named tables and turns non-success
responses into :class:`RemoteApiError`.
"""

from __future__ import annotations

import logging
import urllib.parse
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

import requests

from ..core.constants import BATCH_SIZE
from ..core.exceptions import RemoteApiError, ValidationError
from .model import RemoteRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AirtableConfig:
    api_key: str
    base_id: str
    api_url: str = "https://api.airtable.com/v0"
    timeout: Optional[float] = None


class TableClient:
    def __init__(self, config: AirtableConfig, session: Optional[requests.Session] = None):
        self._config = config
        self._session = session or requests.Session()

    def table_url(self, table: str) -> str:
        base = self._config.api_url.rstrip("/")
        return f"{base}/{self._config.base_id}/{urllib.parse.quote(table, safe='')}"

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._config.api_key}",
            "Content-Type": "application/json",
        }

    def _request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        try:
            resp = self._session.request(
                method,
                url,
                headers=self._headers(),
                params=params,
                json=json,
                timeout=self._config.timeout,
            )
        except requests.RequestException as e:
            logger.error("%s %s failed: %s", method, url, e)
            raise RemoteApiError(f"Airtable API request failed: {e}") from e

        if not resp.ok:
            logger.error("%s %s -> %s %s", method, url, resp.status_code, resp.reason)
            raise RemoteApiError(
                f"Airtable API error: {resp.status_code} {resp.reason or ''}".rstrip(),
                status_code=resp.status_code,
            )

        try:
            return resp.json() or {}
        except ValueError:
            return {}

    def list_all(self, table: str, *, formula: Optional[str] = None) -> List[RemoteRecord]:
        """Read every record of ``table``, following the ``offset`` cursor."""
        url = self.table_url(table)
        params: Dict[str, Any] = {}
        if formula:
            params["filterByFormula"] = formula

        records: List[RemoteRecord] = []
        while True:
            data = self._request("GET", url, params=dict(params))
            records.extend(RemoteRecord.from_api(r) for r in data.get("records") or [])
            offset = data.get("offset")
            if not offset:
                break
            params["offset"] = offset

        logger.debug("Fetched %d record(s) from %s", len(records), table)
        return records

    def list_filtered(self, table: str, formula: str) -> List[RemoteRecord]:
        return self.list_all(table, formula=formula)

    def create_batch(self, table: str, records: Sequence[Mapping[str, Any]]) -> List[RemoteRecord]:
        """POST up to ten ``{"fields": {...}}`` records."""
        return self._write_batch("POST", table, records)

    def update_batch(self, table: str, records: Sequence[Mapping[str, Any]]) -> List[RemoteRecord]:
        """PATCH up to ten ``{"id": ..., "fields": {...}}`` records."""
        for r in records:
            if not r.get("id"):
                raise ValidationError("Every record in an update batch needs an id")
        return self._write_batch("PATCH", table, records)

    def _write_batch(self, method: str, table: str, records: Sequence[Mapping[str, Any]]) -> List[RemoteRecord]:
        if not records:
            return []
        if len(records) > BATCH_SIZE:
            raise ValidationError(f"At most {BATCH_SIZE} records can be written per request")

        data = self._request(method, self.table_url(table), json={"records": [dict(r) for r in records]})
        return [RemoteRecord.from_api(r) for r in data.get("records") or []]

    def delete_one(self, table: str, record_id: str) -> str:
        if not record_id:
            raise ValidationError("Record id is required")
        url = f"{self.table_url(table)}/{urllib.parse.quote(record_id, safe='')}"
        data = self._request("DELETE", url)
        return str(data.get("id", record_id))
