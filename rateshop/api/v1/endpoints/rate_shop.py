"""
Rate Shop API Endpoints.

Covers:
1. Best carrier decision for a shipment
2. Full quote listing (all priced carrier services)
3. Route serviceability check
4. Counter snapshot
"""
import logging
import time
from typing import Dict

from fastapi import APIRouter, Depends, HTTPException, Response, status

from rateshop.api.deps import (
    get_rate_shop_service,
    get_serviceability_service,
    get_metrics_service,
)
from rateshop.schemas.rate_shop import RateShopRequest, RateShopResult, RateShopQuotesResponse
from rateshop.schemas.serviceability import ServiceabilityCheckRequest, ServiceabilityResult
from rateshop.services.metrics_service import MetricsService
from rateshop.services.rate_shop_service import RateShopService
from rateshop.services.reference_data import ReferenceDataError
from rateshop.services.serviceability_service import ServiceabilityService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Rate Shop"])


def _unavailable(e: ReferenceDataError) -> HTTPException:
    logger.error(f"Reference data unavailable: {e}")
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Reference data unavailable, please retry",
    )


@router.post(
    "/rate-shop/decision",
    response_model=RateShopResult,
    summary="Get best carrier decision",
    description="""
    Select the best carrier service for a shipment.

    Returns status DECIDED with the decision, or NOT_SERVICEABLE / NO_CANDIDATES
    when no decision is possible. Response includes an X-Response-Time header.
    """
)
async def rate_shop_decision(
    request: RateShopRequest,
    response: Response,
    service: RateShopService = Depends(get_rate_shop_service),
):
    start_time = time.time()
    try:
        result = await service.shop(request)
    except ReferenceDataError as e:
        raise _unavailable(e)
    response.headers["X-Response-Time"] = f"{(time.time() - start_time) * 1000:.2f}ms"
    return result


@router.post(
    "/rate-shop/quotes",
    response_model=RateShopQuotesResponse,
    summary="List priced carrier services",
)
async def rate_shop_quotes(
    request: RateShopRequest,
    service: RateShopService = Depends(get_rate_shop_service),
):
    """All priced carrier services for a shipment, best first."""
    try:
        return await service.quote(request)
    except ReferenceDataError as e:
        raise _unavailable(e)


@router.post(
    "/serviceability/check",
    response_model=ServiceabilityResult,
    summary="Check route serviceability",
)
async def check_serviceability(
    request: ServiceabilityCheckRequest,
    service: ServiceabilityService = Depends(get_serviceability_service),
):
    try:
        return await service.check(
            request.origin_pincode,
            request.destination_pincode,
            request.warehouse_id,
        )
    except ReferenceDataError as e:
        raise _unavailable(e)


@router.get("/metrics", response_model=Dict[str, int], summary="Counter snapshot")
async def metrics_snapshot(
    metrics: MetricsService = Depends(get_metrics_service),
):
    return metrics.snapshot()
