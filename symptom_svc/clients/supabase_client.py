"""
HTTP client for the remote symptom store (Supabase / PostgREST).

Exposes the four calls the gateway needs against the `symptoms` table:
select-by-user, insert-returning, delete-by-id and a lightweight probe.
Every failure (network error, timeout, non-2xx, undecodable body) is raised
as RemoteUnavailableError; the client never retries.
"""
import logging
from typing import Any, Dict, List, Optional, Union

import httpx

from symptom_svc.core.exceptions import RemoteUnavailableError

logger = logging.getLogger(__name__)

RecordId = Union[int, str]


class SupabaseClient:
    """Client for the PostgREST endpoint of a single Supabase table."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        table: str = "symptoms",
        timeout: float = 15.0,
        probe_timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: Supabase project URL (e.g. https://xyz.supabase.co).
            api_key: Anon/public API key, sent as both apikey and bearer token.
            table: Table name.
            timeout: Timeout in seconds for select/insert/delete.
            probe_timeout: Timeout in seconds for probe().
            transport: Optional httpx transport (tests pass httpx.MockTransport).
        """
        if not base_url:
            raise ValueError("SUPABASE_URL must be set in config")
        if not api_key:
            raise ValueError("SUPABASE_ANON_KEY must be set in config")

        self.base_url = base_url.rstrip("/")
        self.table = table
        self.timeout = timeout
        self.probe_timeout = probe_timeout
        self._api_key = api_key
        self._transport = transport

    @property
    def table_url(self) -> str:
        return f"{self.base_url}/rest/v1/{self.table}"

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Accept": "application/json",
        }
        if extra:
            headers.update(extra)
        return headers

    async def _request(
        self,
        method: str,
        *,
        timeout: Optional[float] = None,
        headers: Optional[Dict[str, str]] = None,
        **kwargs: Any
    ) -> Any:
        """
        Make an HTTP request against the table endpoint.

        Returns:
            Decoded JSON body, or None for an empty body.

        Raises:
            RemoteUnavailableError: For any transport, status or decoding failure.
        """
        try:
            async with httpx.AsyncClient(
                timeout=timeout or self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    method, self.table_url, headers=self._headers(headers), **kwargs
                )
                response.raise_for_status()
                if not response.content:
                    return None
                return response.json()
        except httpx.HTTPStatusError as e:
            reason = f"HTTP {e.response.status_code}: {e.response.text}"
            logger.error(f"Store error on {method} {self.table}: {reason}")
            raise RemoteUnavailableError(reason=reason) from e
        except httpx.TimeoutException as e:
            logger.error(f"Store timeout on {method} {self.table}: {e!r}")
            raise RemoteUnavailableError(reason="request timed out") from e
        except httpx.RequestError as e:
            logger.error(f"Store request error on {method} {self.table}: {e}")
            raise RemoteUnavailableError(reason=f"request error: {e}") from e
        except ValueError as e:
            logger.error(f"Store returned an undecodable body on {method} {self.table}")
            raise RemoteUnavailableError(reason="invalid response body") from e

    async def select_by_user(self, user_name: str) -> List[Dict[str, Any]]:
        """
        Fetch all records of one user, most recent first.

        Ties on created_at are ordered by id so repeated loads are stable.
        """
        data = await self._request(
            "GET",
            params={
                "select": "*",
                "user_name": f"eq.{user_name}",
                "order": "created_at.desc,id.desc",
            },
        )
        if data is None:
            return []
        if not isinstance(data, list):
            raise RemoteUnavailableError(reason="unexpected response shape")
        return data

    async def insert(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert one record and return the stored row, including its id.
        """
        data = await self._request(
            "POST",
            json=[record],
            headers={"Content-Type": "application/json", "Prefer": "return=representation"},
        )
        if not isinstance(data, list) or not data:
            raise RemoteUnavailableError(reason="insert returned no row")
        return data[0]

    async def delete(self, record_id: RecordId) -> None:
        """Delete the record with the given id."""
        await self._request("DELETE", params={"id": f"eq.{record_id}"})

    async def probe(self) -> None:
        """
        Lightweight reachability check (select one id) under probe_timeout.

        Raises:
            RemoteUnavailableError: If the store cannot answer in time.
        """
        await self._request(
            "GET",
            params={"select": "id", "limit": "1"},
            timeout=self.probe_timeout,
        )
