"""Contract document content for the Wa'd and the Murabaha sale"""

from datetime import date
from typing import Any, Callable, Dict

from murabaha_gateway.domain.models import ContractDocument, DocumentTable

PROMISE = "promise"
SALE = "sale"


def format_money(value: Any, currency: str = "$") -> str:
    return f"{currency}{float(value or 0):,.2f}"


def format_percent(fraction: Any) -> str:
    return f"{float(fraction or 0) * 100:.2f}%"


def contract_reference(contract_id: int) -> str:
    return f"MZN-{contract_id:06d}"


def build_promise_to_purchase(
    contract: Any,
    client_name: str,
    bank_name: str = "Mizan Bank",
    currency: str = "$",
    issued_on: date | None = None,
) -> ContractDocument:
    """
    Undertaking to Purchase (Wa'd) signed before the bank acquires the asset.

    `contract` is a persisted contract record; the security deposit paragraph
    states the Hamish Jiddiyyah held against breach of the promise.
    """
    client = client_name or "[Client Name]"
    deposit = format_money(contract.security_deposit, currency)

    paragraphs = [
        f"I, the undersigned {client}, hereby request {bank_name} to purchase the asset described below: "
        f"{contract.asset_name}.",
        "I solemnly promise and undertake that upon the Bank acquiring the said asset, I shall purchase it "
        "from the Bank through a Murabaha Sale Contract for the total cost plus the agreed profit margin.",
        f'I acknowledge that the "Hamish Jiddiyyah" (Security Deposit) of {deposit} provided herewith is to '
        "ensure the seriousness of this order. In case of my breach of this promise, the Bank is authorized "
        "to deduct actual damages from this deposit.",
    ]

    details = DocumentTable(
        title="Asset Details",
        header=["Asset Details", "Values"],
        rows=[
            ["Asset Cost (Principal)", format_money(contract.asset_price, currency)],
            ["Down Payment %", format_percent(contract.down_payment_percentage)],
            ["Security Deposit", deposit],
            ["Tenure", f"{contract.duration_months} Months"],
            ["Anticipated Profit Rate", f"{format_percent(contract.annual_profit_rate)} p.a."],
        ],
    )

    return ContractDocument(
        kind=PROMISE,
        title="UNDERTAKING TO PURCHASE (WA'D)",
        reference=contract_reference(contract.id),
        issued_on=issued_on or date.today(),
        parties=[bank_name, client],
        paragraphs=paragraphs,
        tables=[details],
        signatures=["Client Signature", "Bank Officer"],
    )


def build_sale_contract(
    contract: Any,
    client_name: str,
    bank_name: str = "Mizan Bank",
    currency: str = "$",
    issued_on: date | None = None,
) -> ContractDocument:
    """Murabaha sale contract with financial breakdown and full payment schedule"""
    client = client_name or "[Client Name]"

    intro = (
        f"This Murabaha Agreement is executed between {bank_name} (The Seller) and {client} (The Buyer). "
        f"The Seller hereby sells the Asset ({contract.asset_name}) to the Buyer for the Total Murabaha "
        "Price specified below, to be paid in deferred installments."
    )

    breakdown = DocumentTable(
        title="Financial Breakdown",
        header=["Financial Breakdown", "Amount"],
        rows=[
            ["Cost of Asset", format_money(contract.asset_price, currency)],
            ["Total Down Payment (Incl. Deposit)", format_money(contract.total_down_payment, currency)],
            ["Financed Amount", format_money(contract.financed_amount, currency)],
            ["Total Profit", format_money(contract.total_profit, currency)],
            ["Total Contract Value (Murabaha Price)", format_money(contract.total_cost, currency)],
        ],
    )

    schedule = DocumentTable(
        title="Payment Schedule",
        header=["#", "Date", "Installment", "Principal", "Profit", "Balance"],
        rows=[
            [
                str(row["month"]),
                row["due_date"],
                format_money(row["installment_amount"], currency),
                format_money(row["principal_paid"], currency),
                format_money(row["profit_portion"], currency),
                format_money(row["remaining_balance"], currency),
            ]
            for row in (contract.schedule or [])
        ],
    )

    return ContractDocument(
        kind=SALE,
        title="MURABAHA SALE CONTRACT",
        reference=contract_reference(contract.id),
        issued_on=issued_on or date.today(),
        parties=[f"{bank_name} (The Seller)", f"{client} (The Buyer)"],
        paragraphs=[intro],
        tables=[breakdown, schedule],
        signatures=["Buyer (Client)", "Seller (Bank)"],
    )


DOCUMENT_BUILDERS: Dict[str, Callable[..., ContractDocument]] = {
    PROMISE: build_promise_to_purchase,
    SALE: build_sale_contract,
}
