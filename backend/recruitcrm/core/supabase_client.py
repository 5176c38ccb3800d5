"""Supabase REST API Client.

Thin async wrapper over Supabase's PostgREST endpoint using the service role
key. Transport and HTTP status failures surface as ``StorageError``.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from recruitcrm.config import get_settings
from recruitcrm.core.exceptions import StorageError

logger = logging.getLogger(__name__)

FILTER_OPERATORS = ("eq.", "neq.", "in.", "gt.", "gte.", "lt.", "lte.", "like.", "ilike.", "is.")


def build_filter_params(filters: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """Turn column=value filters into PostgREST query params.

    Values that already carry an operator prefix are passed through as-is,
    anything else becomes an ``eq.`` filter.
    """
    params: Dict[str, str] = {}
    if not filters:
        return params

    for key, value in filters.items():
        if isinstance(value, str) and value.startswith(FILTER_OPERATORS):
            params[key] = value
        else:
            params[key] = f"eq.{value}"
    return params


class SupabaseClient:
    """Client for Supabase REST API using the service role key."""

    def __init__(
        self,
        url: str,
        key: str,
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.url = url.rstrip("/")
        self.key = key
        self.timeout = timeout
        self.headers = {
            "apikey": self.key,
            "Authorization": f"Bearer {self.key}",
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        }
        self._http_client = http_client

    async def _request(
        self,
        method: str,
        table: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Send a request to ``/rest/v1/{table}`` and decode the JSON body."""
        url = f"{self.url}/rest/v1/{table}"
        try:
            if self._http_client is not None:
                response = await self._http_client.request(
                    method,
                    url,
                    headers=self.headers,
                    params=params,
                    json=json,
                    timeout=self.timeout,
                )
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.request(
                        method,
                        url,
                        headers=self.headers,
                        params=params,
                        json=json,
                        timeout=self.timeout,
                    )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Supabase {method} {table} failed: {e}")
            raise StorageError(
                f"Supabase {method} on '{table}' failed",
                details={"table": table, "error": str(e)},
            ) from e

        return response.json()

    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[Dict[str, Any]] = None,
        single: bool = False,
        order: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Optional[List[Dict[str, Any]] | Dict[str, Any]]:
        """Select rows from a table.

        Args:
            table: Table name
            columns: Columns to select (default: *)
            filters: Dict of column=value filters
            single: If True, return single row or None
            order: PostgREST order clause, e.g. ``created_at.asc``
            limit: Max rows to return

        Returns:
            List of rows or single row if single=True
        """
        params: Dict[str, Any] = {"select": columns, **build_filter_params(filters)}
        if order:
            params["order"] = order
        if limit:
            params["limit"] = limit

        data = await self._request("GET", table, params=params)

        if single:
            return data[0] if data else None
        return data

    async def insert(
        self,
        table: str,
        data: Dict[str, Any],
    ) -> Dict[str, Any]:
        """Insert a row into a table.

        Returns:
            Inserted row as stored by the database
        """
        result = await self._request("POST", table, json=data)
        if not result:
            raise StorageError(
                f"Insert into '{table}' returned no row",
                details={"table": table},
            )
        return result[0]

    async def update(
        self,
        table: str,
        data: Dict[str, Any],
        filters: Dict[str, Any],
    ) -> Optional[Dict[str, Any]]:
        """Update rows in a table.

        Returns:
            First updated row, or None when no row matched the filters
        """
        result = await self._request(
            "PATCH", table, params=build_filter_params(filters), json=data
        )
        return result[0] if result else None


def create_supabase_client(http_client: Optional[httpx.AsyncClient] = None) -> SupabaseClient:
    """Build a client from application settings."""
    settings = get_settings()
    return SupabaseClient(
        url=settings.supabase_url,
        key=settings.supabase_service_role_key,
        timeout=settings.supabase_timeout_seconds,
        http_client=http_client,
    )


# Singleton instance
_supabase_client: Optional[SupabaseClient] = None


def get_supabase_client() -> SupabaseClient:
    """Get the Supabase client singleton."""
    global _supabase_client
    if _supabase_client is None:
        _supabase_client = create_supabase_client()
    return _supabase_client
