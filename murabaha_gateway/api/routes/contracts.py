"""Contract store endpoints - create, list, status workflow, documents"""

import logging
from datetime import date
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from murabaha_gateway.api.routes.schemas import (
    ContractCreateRequest,
    ContractCreateResponse,
    ContractResponse,
    DocumentResponse,
    StatusUpdateRequest,
    StatusUpdateResponse,
)
from murabaha_gateway.api.dependencies import get_notary_client, get_request_id
from murabaha_gateway.config import settings
from murabaha_gateway.infrastructure.database.session import get_db
from murabaha_gateway.infrastructure.database.repositories import (
    AuditLogRepository,
    ClientRepository,
    ContractRepository,
)
from murabaha_gateway.infrastructure.clients.notary import NotaryClient
from murabaha_gateway.domain.amortization import calculate
from murabaha_gateway.domain.documents import DOCUMENT_BUILDERS
from murabaha_gateway.domain.exceptions import (
    InvalidStatusError,
    InvalidTransitionError,
    NotarizationError,
    ValidationError,
)
from murabaha_gateway.domain.workflow import parse_status, validate_transition
from murabaha_gateway.infrastructure.observability.metrics import record_contract_created, status_transition_counter
from murabaha_gateway.infrastructure.observability.logging import log_contract_event

router = APIRouter()


@router.get("/contracts", response_model=List[ContractResponse])
def list_contracts(db: Session = Depends(get_db)):
    """All contracts with their schedules, newest first"""
    return ContractRepository(db).list_contracts()


@router.get("/contracts/{contract_id}", response_model=ContractResponse)
def get_contract(contract_id: int, db: Session = Depends(get_db)):
    contract = ContractRepository(db).get_contract(contract_id)
    if not contract:
        raise HTTPException(status_code=404, detail="Contract not found")
    return contract


@router.post("/contracts", response_model=ContractCreateResponse, status_code=201)
async def create_contract(
    request_body: ContractCreateRequest,
    request: Request,
    db: Session = Depends(get_db),
    notary: NotaryClient = Depends(get_notary_client),
):
    """
    Create a DRAFT contract and record it on the ledger.

    Flow:
    1. Resolve the client
    2. Recompute summary + schedule from the deal parameters
    3. Persist contract and commit
    4. Notarize; a notary failure keeps the contract and returns a warning
    """
    request_id = get_request_id(request)

    client = ClientRepository(db).get_client(request_body.client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")

    try:
        result = calculate(request_body.to_parameters())
    except ValidationError as e:
        logging.warning(f"Rejected deal parameters: {e}", extra={"request_id": request_id, "field": e.field})
        raise HTTPException(status_code=400, detail={"error": e.message, "field": e.field})

    contract_repo = ContractRepository(db)
    audit_repo = AuditLogRepository(db)

    try:
        contract = contract_repo.create_contract(
            client=client,
            asset_name=request_body.asset_name,
            result=result,
            contract_date=date.today(),
        )
        audit_repo.record(
            "CONTRACT_CREATED",
            {"contract_id": contract.id, "client_id": client.id, "total_cost": contract.total_cost},
        )
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Failed to persist contract: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Failed to create contract in database")

    log_contract_event(request_id, contract.id, "created", total_cost=contract.total_cost)

    receipt = None
    warning = None
    try:
        receipt = await notary.notarize(contract.id, contract.asset_name, contract.total_cost)
        contract_repo.set_stellar_hash(contract, receipt.transaction_hash)
        audit_repo.record(
            "CONTRACT_NOTARIZED",
            {"contract_id": contract.id, "transaction_hash": receipt.transaction_hash, "memo": receipt.memo},
        )
        log_contract_event(request_id, contract.id, "notarized", transaction_hash=receipt.transaction_hash)
    except NotarizationError as e:
        warning = f"Contract saved locally. Blockchain logging failed: {e}"
        audit_repo.record("NOTARIZATION_FAILED", {"contract_id": contract.id, "error": str(e)})
        logging.warning(f"Notarization failed: {e}", extra={"request_id": request_id, "contract_id": contract.id})

    try:
        db.commit()
    except Exception as e:
        # Contract row is already committed; only the ledger outcome is lost
        db.rollback()
        logging.error(
            f"Failed to store notarization result: {e}",
            extra={"request_id": request_id, "contract_id": contract.id},
        )
        if receipt:
            warning = (
                f"Contract saved locally. Ledger transaction {receipt.transaction_hash} "
                f"could not be stored: {e}"
            )
            receipt = None
        else:
            warning = f"{warning} (audit entry not stored)"

    record_contract_created(receipt is not None)

    response = ContractCreateResponse.model_validate(contract, from_attributes=True)
    if receipt:
        response.explorer_link = receipt.explorer_link
        response.message = "Contract created and logged to Stellar blockchain successfully"
    else:
        response.blockchain_warning = warning
    return response


@router.post("/update_status", response_model=StatusUpdateResponse)
def update_status(request_body: StatusUpdateRequest, request: Request, db: Session = Depends(get_db)):
    """
    Advance a contract along DRAFT → PROMISE → ASSET_OWNED → SALE_SIGNED.

    The schedule captured at creation is left untouched.
    """
    request_id = get_request_id(request)

    try:
        parse_status(request_body.status)
    except InvalidStatusError as e:
        raise HTTPException(status_code=400, detail=str(e))

    contract_repo = ContractRepository(db)
    contract = contract_repo.get_contract(request_body.contract_id)
    if not contract:
        raise HTTPException(status_code=404, detail="Contract not found")

    previous = contract.status
    try:
        new_status = validate_transition(previous, request_body.status)
    except InvalidTransitionError as e:
        logging.warning(f"Rejected status change: {e}", extra={"request_id": request_id, "contract_id": contract.id})
        raise HTTPException(status_code=409, detail=str(e))

    contract_repo.set_status(contract, new_status)
    AuditLogRepository(db).record(
        "STATUS_UPDATED",
        {"contract_id": contract.id, "from": previous, "to": new_status.value},
    )
    db.commit()

    status_transition_counter.labels(status=new_status.value).inc()
    log_contract_event(request_id, contract.id, "status_updated", previous_status=previous, status=new_status.value)

    return StatusUpdateResponse(
        message="Contract status updated successfully",
        status=contract.status,
        contract=ContractResponse.model_validate(contract, from_attributes=True),
    )


@router.get("/contracts/{contract_id}/documents/{kind}", response_model=DocumentResponse)
def get_contract_document(contract_id: int, kind: str, db: Session = Depends(get_db)):
    """Content of the Wa'd (`promise`) or the Murabaha sale contract (`sale`)"""
    builder = DOCUMENT_BUILDERS.get(kind)
    if builder is None:
        raise HTTPException(status_code=404, detail=f"Unknown document kind: {kind}")

    contract = ContractRepository(db).get_contract(contract_id)
    if not contract:
        raise HTTPException(status_code=404, detail="Contract not found")

    document = builder(
        contract,
        contract.client_name,
        bank_name=settings.bank_name,
        currency=settings.currency_symbol,
    )
    return DocumentResponse.model_validate(document, from_attributes=True)
