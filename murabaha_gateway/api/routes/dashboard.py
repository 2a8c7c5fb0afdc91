"""GET /api/dashboard - Portfolio KPIs"""

from datetime import date
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from murabaha_gateway.api.routes.schemas import DashboardResponse, KPISchema, ChartPoint
from murabaha_gateway.infrastructure.database.session import get_db
from murabaha_gateway.infrastructure.database.repositories import ContractRepository

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(db: Session = Depends(get_db)):
    """
    Financing volume, open deals and year-to-date profit.

    Returns:
        KPIs plus contract volume per month of the current year
    """
    totals = ContractRepository(db).dashboard_totals(date.today().year)

    return DashboardResponse(
        kpi=KPISchema(
            volume=totals["volume"],
            active_deals=totals["active_deals"],
            profit_ytd=totals["profit_ytd"],
        ),
        chart_data=[ChartPoint(**point) for point in totals["chart_data"]],
    )
