"""GET/POST /api/clients - Client registry"""

from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from murabaha_gateway.api.routes.schemas import ClientCreateRequest, ClientResponse
from murabaha_gateway.infrastructure.database.session import get_db
from murabaha_gateway.infrastructure.database.repositories import AuditLogRepository, ClientRepository

router = APIRouter()


@router.get("/clients", response_model=List[ClientResponse])
def list_clients(db: Session = Depends(get_db)):
    """All clients, newest first"""
    return ClientRepository(db).list_clients()


@router.post("/clients", response_model=ClientResponse, status_code=201)
def create_client(request_body: ClientCreateRequest, db: Session = Depends(get_db)):
    client = ClientRepository(db).create_client(
        name=request_body.name,
        email=request_body.email,
        credit_score=request_body.credit_score,
    )
    AuditLogRepository(db).record("CLIENT_CREATED", {"client_id": client.id, "name": client.name})
    db.commit()
    return client
