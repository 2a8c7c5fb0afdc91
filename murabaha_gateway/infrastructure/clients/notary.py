"""Notary client - records contracts as memo transactions on the Stellar ledger"""

import asyncio
import logging
import httpx
from murabaha_gateway.config import settings
from murabaha_gateway.domain.exceptions import NotarizationError
from murabaha_gateway.domain.models import NotarizationReceipt
from murabaha_gateway.infrastructure.observability.metrics import notary_latency_histogram, notary_failure_counter

MEMO_TEXT_MAX_BYTES = 28

logger = logging.getLogger(__name__)


def build_memo(contract_id: int, amount: float) -> str:
    """Text memo for a contract, cut to the 28-byte Stellar limit"""
    full_memo = f"Murabaha-{contract_id}-{amount:.2f}"
    memo = full_memo.encode("utf-8")[:MEMO_TEXT_MAX_BYTES].decode("utf-8", errors="ignore")
    if memo != full_memo:
        logger.warning("Memo truncated", extra={"memo": full_memo, "truncated_to": memo})
    return memo


class NotaryClient:
    """
    Client for the notary service that signs and submits ledger transactions.

    The notary holds the treasury key; this gateway only sends the memo and
    contract metadata and receives the resulting transaction hash.
    """

    def __init__(
        self,
        notary_url: str | None = None,
        max_retries: int | None = None,
        backoff_base: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.notary_url = settings.notary_url if notary_url is None else notary_url
        self.max_retries = max(1, settings.notary_max_retries if max_retries is None else max_retries)
        self.backoff_base = settings.notary_backoff_base if backoff_base is None else backoff_base
        self.timeout = settings.http_timeout_seconds
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.notary_url)

    def explorer_link(self, transaction_hash: str) -> str:
        return f"{settings.explorer_base_url}/tx/{transaction_hash}"

    async def notarize(self, contract_id: int, asset_name: str, amount: float) -> NotarizationReceipt:
        """
        Record a contract on the ledger with retry logic.

        Retry strategy:
        - Exponential backoff: base, 2*base, 4*base, ...
        - Retries on 5xx errors and network failures; 4xx fails immediately

        Raises:
            NotarizationError: notary not configured, rejected the request,
                returned no hash, or kept failing after all retries
        """
        if not self.enabled:
            raise NotarizationError("Notary service is not configured (set NOTARY_URL)")

        memo = build_memo(contract_id, amount)
        payload = {
            "memo": memo,
            "contract_id": contract_id,
            "asset_name": asset_name,
            "amount": amount,
            "network": settings.stellar_network,
        }

        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            while True:
                try:
                    with notary_latency_histogram.time():
                        response = await client.post(self.notary_url, json=payload)
                        response.raise_for_status()
                    break

                except (httpx.HTTPStatusError, httpx.RequestError) as e:
                    attempt += 1
                    notary_failure_counter.inc()

                    client_error = isinstance(e, httpx.HTTPStatusError) and e.response.status_code < 500
                    if client_error or attempt >= self.max_retries:
                        raise NotarizationError(f"Notary request failed after {attempt} attempt(s): {e}") from e

                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    await asyncio.sleep(backoff)

        try:
            transaction_hash = response.json()["hash"]
        except (KeyError, ValueError, TypeError) as e:
            raise NotarizationError(f"Invalid notary response: {e}") from e

        return NotarizationReceipt(
            transaction_hash=transaction_hash,
            memo=memo,
            explorer_link=self.explorer_link(transaction_hash),
        )
