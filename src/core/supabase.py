from __future__ import annotations

import logging
from threading import Lock
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlencode

import httpx

from src.core.config import get_settings
from src.core.errors import StorageError

logger = logging.getLogger(__name__)


class SupabaseClient:
    _shared_client: httpx.Client | None = None
    _client_lock: Lock = Lock()

    def __init__(self) -> None:
        settings = get_settings()
        self.base_url = settings.supabase_url.rstrip("/") + "/rest/v1"
        self.api_key = settings.supabase_service_role_key or settings.supabase_anon_key
        if not self.api_key:
            raise ValueError("Supabase API key is required")
        self._client = self._get_shared_client(settings.supabase_timeout_seconds)

    @classmethod
    def _get_shared_client(cls, timeout_seconds: float) -> httpx.Client:
        if cls._shared_client is not None:
            return cls._shared_client
        with cls._client_lock:
            if cls._shared_client is None:
                cls._shared_client = httpx.Client(
                    timeout=timeout_seconds,
                    limits=httpx.Limits(max_keepalive_connections=20, max_connections=100),
                )
        return cls._shared_client

    def _headers(self, prefer: Optional[str] = None) -> Dict[str, str]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def select(
        self,
        table: str,
        select: str,
        filters: Optional[List[Tuple[str, str]]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        order: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        params: List[Tuple[str, str]] = [("select", select)]
        if filters:
            params.extend(filters)
        if limit is not None:
            params.append(("limit", str(limit)))
        if offset is not None:
            params.append(("offset", str(offset)))
        if order:
            params.append(("order", order))

        url = f"{self.base_url}/{table}?{urlencode(params, doseq=True)}"
        try:
            response = self._client.get(url, headers=self._headers())
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Supabase select failed table=%s filters=%s error=%s", table, filters, exc)
            raise StorageError(f"Could not read {table}") from exc
        data = response.json()
        return data if isinstance(data, list) else []

    def select_all(
        self,
        table: str,
        select: str,
        order: str,
        page_size: int,
        filters: Optional[List[Tuple[str, str]]] = None,
    ) -> List[Dict[str, Any]]:
        """Read every matching row, one ``limit``/``offset`` page at a time.

        Paging stops on an empty page rather than a short one, because the server
        may cap a page below ``page_size``. ``order`` must be a total order.
        """
        rows: List[Dict[str, Any]] = []
        while True:
            page = self.select(
                table=table,
                select=select,
                filters=filters,
                limit=page_size,
                offset=len(rows),
                order=order,
            )
            if not page:
                return rows
            rows.extend(page)

    def upsert(
        self,
        table: str,
        payload: List[Dict[str, Any]],
        on_conflict: str,
    ) -> List[Dict[str, Any]]:
        if not payload:
            return []
        url = f"{self.base_url}/{table}?{urlencode([('on_conflict', on_conflict)])}"
        headers = self._headers(prefer="resolution=merge-duplicates,return=representation")
        headers["Content-Type"] = "application/json"
        try:
            response = self._client.post(url, headers=headers, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error(
                "Supabase upsert failed table=%s rows=%d on_conflict=%s error=%s",
                table,
                len(payload),
                on_conflict,
                exc,
            )
            raise StorageError(f"Could not write {table}") from exc
        if not response.content:
            return []
        data = response.json()
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            return [data]
        return []
