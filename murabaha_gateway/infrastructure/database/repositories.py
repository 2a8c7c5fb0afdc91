"""Data access layer for clients, contracts and audit logs"""

from collections import OrderedDict
from datetime import date
from typing import Any, Dict, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from murabaha_gateway.infrastructure.database.models import AuditLog, Client, Contract
from murabaha_gateway.domain.models import CalculationResult, ScheduleRow
from murabaha_gateway.domain.workflow import ContractStatus

MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def schedule_row_to_dict(row: ScheduleRow) -> Dict[str, Any]:
    """JSON-safe representation of a schedule row"""
    return {
        "month": row.month,
        "due_date": row.due_date.isoformat(),
        "beginning_balance": float(row.beginning_balance),
        "principal_paid": float(row.principal_paid),
        "profit_portion": float(row.profit_portion),
        "installment_amount": float(row.installment_amount),
        "remaining_balance": float(row.remaining_balance),
    }


class ClientRepository:
    """Repository for clients"""

    def __init__(self, db: Session):
        self.db = db

    def create_client(self, name: str, email: Optional[str], credit_score: int = 0) -> Client:
        db_client = Client(name=name, email=email, credit_score=credit_score)
        self.db.add(db_client)
        self.db.flush()
        return db_client

    def get_client(self, client_id: int) -> Optional[Client]:
        return self.db.query(Client).filter(Client.id == client_id).first()

    def list_clients(self) -> List[Client]:
        """All clients, newest first"""
        return self.db.query(Client).order_by(Client.id.desc()).all()


class ContractRepository:
    """Repository for Murabaha contracts"""

    def __init__(self, db: Session):
        self.db = db

    def create_contract(
        self,
        client: Client,
        asset_name: str,
        result: CalculationResult,
        contract_date: date,
    ) -> Contract:
        """Persist a DRAFT contract with its summary and schedule"""
        summary = result.summary
        db_contract = Contract(
            client_id=client.id,
            client_name=client.name,
            asset_name=asset_name,
            contract_date=contract_date.isoformat(),
            status=ContractStatus.DRAFT.value,
            asset_price=float(summary.asset_price),
            annual_profit_rate=float(summary.annual_profit_rate),
            duration_months=summary.duration_months,
            down_payment_percentage=float(summary.down_payment_percentage),
            security_deposit=float(summary.security_deposit),
            total_down_payment=float(summary.down_payment),
            financed_amount=float(summary.financed_amount),
            total_profit=float(summary.total_profit),
            total_cost=float(summary.total_cost),
            monthly_installment=float(summary.monthly_installment),
            schedule=[schedule_row_to_dict(row) for row in result.schedule],
        )
        self.db.add(db_contract)
        self.db.flush()  # Get ID without committing
        return db_contract

    def get_contract(self, contract_id: int) -> Optional[Contract]:
        return self.db.query(Contract).filter(Contract.id == contract_id).first()

    def list_contracts(self) -> List[Contract]:
        """All contracts, newest first"""
        return self.db.query(Contract).order_by(Contract.id.desc()).all()

    def set_status(self, contract: Contract, status: ContractStatus) -> Contract:
        contract.status = status.value
        self.db.flush()
        return contract

    def set_stellar_hash(self, contract: Contract, transaction_hash: str) -> Contract:
        contract.stellar_hash = transaction_hash
        self.db.flush()
        return contract

    def dashboard_totals(self, year: int) -> Dict[str, Any]:
        """
        Portfolio KPIs for the dashboard.

        Returns:
            volume (total cost of all contracts), active_deals (not yet
            SALE_SIGNED), profit_ytd and per-month volume for `year`
        """
        volume = self.db.query(func.coalesce(func.sum(Contract.total_cost), 0.0)).scalar()
        active_deals = (
            self.db.query(func.count(Contract.id))
            .filter(Contract.status != ContractStatus.SALE_SIGNED.value)
            .scalar()
        )

        year_contracts = (
            self.db.query(Contract.contract_date, Contract.total_cost, Contract.total_profit)
            .filter(Contract.contract_date.like(f"{year}-%"))
            .all()
        )

        monthly_volume: "OrderedDict[str, float]" = OrderedDict((name, 0.0) for name in MONTH_NAMES)
        profit_ytd = 0.0
        for contract_date, total_cost, total_profit in year_contracts:
            month_index = int(contract_date[5:7]) - 1
            monthly_volume[MONTH_NAMES[month_index]] += total_cost
            profit_ytd += total_profit

        return {
            "volume": float(volume),
            "active_deals": active_deals,
            "profit_ytd": profit_ytd,
            "chart_data": [{"name": name, "value": value} for name, value in monthly_volume.items()],
        }


class AuditLogRepository:
    """Repository for the audit trail"""

    def __init__(self, db: Session):
        self.db = db

    def record(self, user_action: str, details: Optional[Dict[str, Any]] = None) -> AuditLog:
        entry = AuditLog(user_action=user_action, details=details)
        self.db.add(entry)
        self.db.flush()
        return entry

    def list_recent(self, limit: int = 50) -> List[AuditLog]:
        return self.db.query(AuditLog).order_by(AuditLog.id.desc()).limit(limit).all()
