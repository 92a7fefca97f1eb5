"""Supabase (PostgREST) implementation of the record-store abstraction."""

from __future__ import annotations

import logging
from typing import Any

import requests

from contextos_sync.config import settings
from contextos_sync.store.base import RecordStoreBase, StoreError

logger = logging.getLogger(__name__)


class SupabaseRecordStore(RecordStoreBase):
    """Upserts rows through the Supabase REST API.

    Every row is sent with all of its columns, so PostgREST's
    ``merge-duplicates`` resolution replaces the existing row completely.
    One row per request keeps each write atomic.

    Parameters
    ----------
    url:
        Supabase project URL.
    service_role_key:
        Key sent as both ``apikey`` and bearer token.
    timeout:
        Per-request timeout in seconds.
    session:
        Optional pre-configured :class:`requests.Session` (handy in tests).
    """

    def __init__(
        self,
        url: str = settings.supabase_url,
        service_role_key: str = settings.supabase_service_role_key,
        *,
        timeout: float = settings.store_timeout,
        session: requests.Session | None = None,
    ) -> None:
        if not url or not service_role_key:
            raise ValueError("Supabase url and service_role_key are required")
        self._rest_url = url.rstrip("/") + "/rest/v1"
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "apikey": service_role_key,
                "Authorization": f"Bearer {service_role_key}",
                "Content-Type": "application/json",
            }
        )

    # -- RecordStoreBase overrides --------------------------------------------

    def upsert(self, table: str, record: dict[str, Any], conflict_key: str) -> None:
        if not record.get(conflict_key):
            raise StoreError(f"Record for {table!r} has no value for {conflict_key!r}")
        try:
            resp = self._session.post(
                f"{self._rest_url}/{table}",
                params={"on_conflict": conflict_key},
                json=record,
                headers={"Prefer": "resolution=merge-duplicates,return=minimal"},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise StoreError(f"Supabase request failed: {exc}") from exc

        if not resp.ok:
            raise StoreError(f"Supabase upsert error ({resp.status_code}): {resp.text}")
        logger.debug("Upserted %s.%s=%s", table, conflict_key, record[conflict_key])

    def health_check(self) -> bool:
        try:
            resp = self._session.get(f"{self._rest_url}/", timeout=self._timeout)
            return resp.ok
        except requests.RequestException:
            logger.warning("Supabase health-check failed", exc_info=True)
            return False

    def get(self, table: str, key_field: str, key: str) -> dict[str, Any] | None:
        try:
            resp = self._session.get(
                f"{self._rest_url}/{table}",
                params={key_field: f"eq.{key}", "select": "*"},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise StoreError(f"Supabase request failed: {exc}") from exc
        if not resp.ok:
            raise StoreError(f"Supabase select error ({resp.status_code}): {resp.text}")
        rows = resp.json()
        return rows[0] if rows else None
