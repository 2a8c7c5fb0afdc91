"""Horizon HTTP client for reading notarized transactions back from the ledger"""

import httpx
from typing import Any, Dict, List
from murabaha_gateway.domain.models import LedgerTransaction
from murabaha_gateway.domain.exceptions import LedgerAPIError, LedgerNotFoundError
from murabaha_gateway.config import settings


class HorizonClient:
    """Read-only client for the Stellar Horizon REST API"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.horizon_url).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    def _to_transaction(self, record: Dict[str, Any]) -> LedgerTransaction:
        return LedgerTransaction(
            hash=record["hash"],
            timestamp=record["created_at"],
            memo=record.get("memo"),
            memo_type=record.get("memo_type", "none"),
            explorer_link=f"{settings.explorer_base_url}/tx/{record['hash']}",
        )

    async def _get(self, path: str, params: Dict[str, Any] | None = None) -> Dict[str, Any]:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(f"{self.base_url}{path}", params=params)
                response.raise_for_status()
                return response.json()

            except httpx.TimeoutException as e:
                raise LedgerAPIError(f"Horizon timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                if e.response.status_code == 404:
                    raise LedgerNotFoundError(f"Not found on ledger: {path}") from e
                raise LedgerAPIError(f"Horizon error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise LedgerAPIError(f"Horizon unreachable: {e}") from e
            except ValueError as e:
                raise LedgerAPIError(f"Invalid JSON from Horizon: {e}") from e

    async def get_account_transactions(self, account_id: str, limit: int = 20) -> List[LedgerTransaction]:
        """
        Fetch recent transactions of an account, newest first.

        Raises:
            LedgerNotFoundError: Account does not exist (not funded)
            LedgerAPIError: On timeout, HTTP errors, or invalid response
        """
        data = await self._get(
            f"/accounts/{account_id}/transactions",
            params={"order": "desc", "limit": limit},
        )
        try:
            return [self._to_transaction(record) for record in data["_embedded"]["records"]]
        except (KeyError, TypeError) as e:
            raise LedgerAPIError(f"Invalid transaction data from Horizon: {e}") from e

    async def get_transaction(self, transaction_hash: str) -> LedgerTransaction:
        """Fetch a single transaction by hash"""
        data = await self._get(f"/transactions/{transaction_hash}")
        try:
            return self._to_transaction(data)
        except (KeyError, TypeError) as e:
            raise LedgerAPIError(f"Invalid transaction data from Horizon: {e}") from e
