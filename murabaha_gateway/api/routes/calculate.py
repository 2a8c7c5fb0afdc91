"""POST /api/calculate - Murabaha amortization calculator"""

import time
import logging
from fastapi import APIRouter, HTTPException, Request

from murabaha_gateway.api.routes.schemas import CalculateRequest, CalculationResponse
from murabaha_gateway.api.dependencies import get_request_id
from murabaha_gateway.domain.amortization import calculate
from murabaha_gateway.domain.exceptions import ValidationError
from murabaha_gateway.infrastructure.observability.metrics import record_calculation
from murabaha_gateway.infrastructure.observability.logging import log_calculation

router = APIRouter()


@router.post("/calculate", response_model=CalculationResponse)
def calculate_deal(request_body: CalculateRequest, request: Request):
    """
    Compute deal summary and installment schedule.

    Rates above 1 are read as percentages (5 == 0.05). The first installment
    falls due one calendar month from today.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        result = calculate(request_body.to_parameters())
    except ValidationError as e:
        record_calculation(False)
        logging.warning(f"Rejected deal parameters: {e}", extra={"request_id": request_id, "field": e.field})
        raise HTTPException(status_code=400, detail={"error": e.message, "field": e.field})

    duration_ms = (time.time() - start_time) * 1000
    record_calculation(True)
    log_calculation(request_id, result.summary.duration_months, float(result.summary.total_cost), duration_ms)

    return CalculationResponse.from_result(result)
