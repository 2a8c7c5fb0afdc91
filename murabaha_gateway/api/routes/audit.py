"""Audit trail and on-ledger transaction history"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from murabaha_gateway.api.routes.schemas import AuditLogItem, LedgerHistoryResponse, LedgerTransactionSchema
from murabaha_gateway.api.dependencies import get_horizon_client
from murabaha_gateway.config import settings
from murabaha_gateway.infrastructure.database.session import get_db
from murabaha_gateway.infrastructure.database.repositories import AuditLogRepository
from murabaha_gateway.infrastructure.clients.horizon import HorizonClient
from murabaha_gateway.domain.exceptions import LedgerAPIError, LedgerNotFoundError
from murabaha_gateway.infrastructure.observability.metrics import horizon_failures_counter

router = APIRouter()


@router.get("/audit_logs", response_model=List[AuditLogItem])
def list_audit_logs(limit: int = Query(50, ge=1, le=500), db: Session = Depends(get_db)):
    """Most recent user actions, newest first"""
    return AuditLogRepository(db).list_recent(limit=limit)


@router.get("/blockchain/transactions", response_model=LedgerHistoryResponse)
async def list_ledger_transactions(
    account_id: str | None = Query(None, description="Stellar account (default: treasury)"),
    limit: int = Query(20, ge=1, le=200),
    horizon: HorizonClient = Depends(get_horizon_client),
):
    """
    Notarization history of an account as recorded on the ledger.

    Returns:
        Transactions newest first, with memo and explorer link
    """
    account = account_id or settings.treasury_public_key
    if not account:
        raise HTTPException(status_code=400, detail="account_id is required (no treasury account configured)")

    try:
        transactions = await horizon.get_account_transactions(account, limit=limit)
    except LedgerNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except LedgerAPIError as e:
        horizon_failures_counter.inc()
        logging.error(f"Horizon error: {e}")
        raise HTTPException(status_code=503, detail="Ledger service unavailable")

    return LedgerHistoryResponse(
        account_id=account,
        transactions=[LedgerTransactionSchema.model_validate(tx, from_attributes=True) for tx in transactions],
    )


@router.get("/blockchain/transactions/{transaction_hash}", response_model=LedgerTransactionSchema)
async def get_ledger_transaction(transaction_hash: str, horizon: HorizonClient = Depends(get_horizon_client)):
    try:
        transaction = await horizon.get_transaction(transaction_hash)
    except LedgerNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except LedgerAPIError as e:
        horizon_failures_counter.inc()
        logging.error(f"Horizon error: {e}")
        raise HTTPException(status_code=503, detail="Ledger service unavailable")

    return LedgerTransactionSchema.model_validate(transaction, from_attributes=True)
