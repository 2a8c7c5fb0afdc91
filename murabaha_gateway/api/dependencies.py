"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from murabaha_gateway.infrastructure.clients.horizon import HorizonClient
from murabaha_gateway.infrastructure.clients.notary import NotaryClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_notary_client() -> NotaryClient:
    """Provide ledger notary client instance"""
    return NotaryClient()


def get_horizon_client() -> HorizonClient:
    """Provide Horizon read client instance"""
    return HorizonClient()
