"""Pydantic schemas for API request/response validation"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from murabaha_gateway.domain.models import CalculationResult, DealParameters


class CalculateRequest(BaseModel):
    """
    Request body for POST /api/calculate.

    Deal fields are passed through untyped. The amortization engine does the
    type and range checks, so every rejection is a 400 naming its field.
    """

    asset_price: Any = None
    annual_profit_rate: Any = Field(None, description="Fraction (0.05) or percent (5)")
    duration_months: Any = None
    down_payment_percentage: Any = Field(Decimal("0"), description="Fraction of asset price")
    security_deposit: Any = Field(Decimal("0"), description="Hamish Jiddiyyah")

    def to_parameters(self) -> DealParameters:
        return DealParameters(
            asset_price=self.asset_price,
            annual_profit_rate=self.annual_profit_rate,
            duration_months=self.duration_months,
            down_payment_percentage=self.down_payment_percentage,
            security_deposit=self.security_deposit,
        )


class SummarySchema(BaseModel):
    """Deal totals"""

    asset_price: float
    annual_profit_rate: float
    duration_months: int
    down_payment_percentage: float
    security_deposit: float
    down_payment: float
    financed_amount: float
    total_profit: float
    total_cost: float
    monthly_installment: float


class ScheduleRowSchema(BaseModel):
    """Single installment in a repayment schedule"""

    month: int
    due_date: date
    beginning_balance: float
    principal_paid: float
    profit_portion: float
    installment_amount: float
    remaining_balance: float


class CalculationResponse(BaseModel):
    """Response for POST /api/calculate"""

    summary: SummarySchema
    schedule: List[ScheduleRowSchema]

    @classmethod
    def from_result(cls, result: CalculationResult) -> "CalculationResponse":
        s = result.summary
        return cls(
            summary=SummarySchema(
                asset_price=float(s.asset_price),
                annual_profit_rate=float(s.annual_profit_rate),
                duration_months=s.duration_months,
                down_payment_percentage=float(s.down_payment_percentage),
                security_deposit=float(s.security_deposit),
                down_payment=float(s.down_payment),
                financed_amount=float(s.financed_amount),
                total_profit=float(s.total_profit),
                total_cost=float(s.total_cost),
                monthly_installment=float(s.monthly_installment),
            ),
            schedule=[
                ScheduleRowSchema(
                    month=row.month,
                    due_date=row.due_date,
                    beginning_balance=float(row.beginning_balance),
                    principal_paid=float(row.principal_paid),
                    profit_portion=float(row.profit_portion),
                    installment_amount=float(row.installment_amount),
                    remaining_balance=float(row.remaining_balance),
                )
                for row in result.schedule
            ],
        )


class ClientCreateRequest(BaseModel):
    """Request body for POST /api/clients"""

    name: str = Field(..., min_length=1, description="Client name")
    email: Optional[str] = None
    credit_score: int = 0


class ClientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: Optional[str] = None
    credit_score: int
    created_at: Optional[datetime] = None


class ContractCreateRequest(CalculateRequest):
    """Request body for POST /api/contracts"""

    client_id: int = Field(..., description="Existing client identifier")
    asset_name: str = Field(..., min_length=1)


class ContractResponse(BaseModel):
    """Persisted contract"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    client_id: int
    client_name: str
    asset_name: str
    contract_date: str
    status: str
    stellar_hash: Optional[str] = None
    asset_price: float
    annual_profit_rate: float
    duration_months: int
    down_payment_percentage: float
    security_deposit: float
    total_down_payment: float
    financed_amount: float
    total_profit: float
    total_cost: float
    monthly_installment: float
    schedule: List[ScheduleRowSchema]
    created_at: Optional[datetime] = None


class ContractCreateResponse(ContractResponse):
    """Response for POST /api/contracts"""

    explorer_link: Optional[str] = None
    message: Optional[str] = None
    blockchain_warning: Optional[str] = None


class StatusUpdateRequest(BaseModel):
    """Request body for POST /api/update_status"""

    contract_id: int
    status: str = Field(..., min_length=1)


class StatusUpdateResponse(BaseModel):
    message: str
    status: str
    contract: ContractResponse


class DocumentTableSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    title: str
    header: List[str]
    rows: List[List[str]]


class DocumentResponse(BaseModel):
    """Content of a promise-to-purchase or sale contract document"""

    model_config = ConfigDict(from_attributes=True)

    kind: str
    title: str
    reference: str
    issued_on: date
    parties: List[str]
    paragraphs: List[str]
    tables: List[DocumentTableSchema]
    signatures: List[str]


class KPISchema(BaseModel):
    volume: float
    active_deals: int
    profit_ytd: float


class ChartPoint(BaseModel):
    name: str
    value: float


class DashboardResponse(BaseModel):
    """Response for GET /api/dashboard"""

    kpi: KPISchema
    chart_data: List[ChartPoint]


class AuditLogItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    timestamp: Optional[datetime] = None
    user_action: str
    details: Optional[Dict[str, Any]] = None


class LedgerTransactionSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    hash: str
    timestamp: str
    memo: Optional[str] = None
    memo_type: str
    explorer_link: str


class LedgerHistoryResponse(BaseModel):
    """Response for GET /api/blockchain/transactions"""

    account_id: str
    transactions: List[LedgerTransactionSchema]
