"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, List, Optional, Tuple


@dataclass(frozen=True)
class DealParameters:
    """Inputs of a single Murabaha calculation"""

    asset_price: Any
    annual_profit_rate: Any
    duration_months: Any
    down_payment_percentage: Any = 0
    security_deposit: Any = 0


@dataclass(frozen=True)
class DealSummary:
    """Totals derived from validated deal parameters"""

    asset_price: Decimal
    annual_profit_rate: Decimal  # normalized fraction
    duration_months: int
    down_payment_percentage: Decimal
    security_deposit: Decimal
    down_payment: Decimal  # percentage part + security deposit
    financed_amount: Decimal
    total_profit: Decimal
    total_cost: Decimal
    monthly_installment: Decimal


@dataclass(frozen=True)
class ScheduleRow:
    """Single installment in a repayment schedule"""

    month: int
    due_date: date
    beginning_balance: Decimal
    principal_paid: Decimal
    profit_portion: Decimal
    installment_amount: Decimal
    remaining_balance: Decimal


@dataclass(frozen=True)
class CalculationResult:
    """Output of the amortization engine"""

    summary: DealSummary
    schedule: Tuple[ScheduleRow, ...]


@dataclass(frozen=True)
class NotarizationReceipt:
    """Proof that a contract was recorded on the ledger"""

    transaction_hash: str
    memo: str
    explorer_link: str


@dataclass
class LedgerTransaction:
    """Transaction read back from Horizon"""

    hash: str
    timestamp: str
    memo: Optional[str]
    memo_type: str
    explorer_link: str


@dataclass
class DocumentTable:
    """Tabular block within a contract document"""

    title: str
    header: List[str]
    rows: List[List[str]]


@dataclass
class ContractDocument:
    """Rendered content of a promise-to-purchase or sale contract"""

    kind: str
    title: str
    reference: str
    issued_on: date
    parties: List[str]
    paragraphs: List[str] = field(default_factory=list)
    tables: List[DocumentTable] = field(default_factory=list)
    signatures: List[str] = field(default_factory=list)
