"""
Rate Shop Service.

Sequences a rate shop call:
1. Serviceability check (zones + warehouse coverage)
2. Chargeable weight
3. Candidate gathering
4. Surcharge application per candidate
5. Scoring and winner selection
"""
import logging
from typing import List, Optional, Tuple

from rateshop.config import settings
from rateshop.schemas.rate_shop import (
    RateShopRequest,
    RateShopDecision,
    RateShopResult,
    RateShopStatus,
    RateShopQuotesResponse,
    QuoteOption,
)
from rateshop.schemas.serviceability import ServiceabilityResult
from rateshop.services.metrics_service import MetricsSink
from rateshop.services.pricing_engine import PricingEngine, CandidatePrice
from rateshop.services.reference_data import ReferenceDataSource, RateCandidateSource
from rateshop.services.serviceability_service import ServiceabilityService

logger = logging.getLogger(__name__)

DECISION_METRIC = "rate_shop_decisions"


class RateShopService:
    """Picks the best carrier service for a shipment. Read-only."""

    def __init__(
        self,
        serviceability: ServiceabilityService,
        candidates: RateCandidateSource,
        metrics: Optional[MetricsSink] = None,
        pricing_engine: Optional[PricingEngine] = None,
    ):
        self.serviceability = serviceability
        self.candidates = candidates
        self.metrics = metrics
        self.pricing_engine = pricing_engine or PricingEngine()

    @classmethod
    def from_source(
        cls,
        source: ReferenceDataSource,
        metrics: Optional[MetricsSink] = None,
        pricing_engine: Optional[PricingEngine] = None,
    ) -> "RateShopService":
        """Build the service on top of a single data store."""
        return cls(
            serviceability=ServiceabilityService(zones=source, coverage=source),
            candidates=source,
            metrics=metrics,
            pricing_engine=pricing_engine,
        )

    async def shop(self, request: RateShopRequest) -> RateShopResult:
        """
        Select the best carrier service for a shipment.

        Returns NOT_SERVICEABLE or NO_CANDIDATES instead of raising when no
        decision is possible. Reference data failures propagate.
        """
        outcome, priced, chargeable_kg, serviceability = await self._price(request)
        if outcome is not None:
            return outcome

        best = self.pricing_engine.select_best(
            priced,
            coverage_tat=serviceability.coverage_tat,
            preferences=request.preferences,
        )
        decision = RateShopDecision(
            carrier_id=best.candidate.carrier_id,
            carrier_name=best.candidate.carrier_name,
            rate_id=best.candidate.rate_id,
            service_name=best.candidate.service_name,
            price=best.price,
            eta_days=best.sla_days,
            score=best.score,
        )
        logger.info(
            f"Rate shop {request.origin_pincode} -> {request.destination_pincode}: "
            f"{decision.carrier_name}/{decision.service_name} price={decision.price} "
            f"eta={decision.eta_days}d score={decision.score:.4f}"
        )
        self._emit(DECISION_METRIC)

        return RateShopResult(
            status=RateShopStatus.DECIDED,
            message="Carrier selected",
            decision=decision,
            chargeable_weight_kg=chargeable_kg,
            serviceability=serviceability,
        )

    async def quote(self, request: RateShopRequest) -> RateShopQuotesResponse:
        """All scored candidates for a shipment, best first."""
        outcome, priced, chargeable_kg, serviceability = await self._price(request)
        if outcome is not None:
            return RateShopQuotesResponse(
                status=outcome.status,
                message=outcome.message,
                chargeable_weight_kg=outcome.chargeable_weight_kg,
            )

        ranked = self.pricing_engine.score_candidates(
            priced,
            coverage_tat=serviceability.coverage_tat,
            preferences=request.preferences,
        )
        quotes = [QuoteOption(**entry.to_dict()) for entry in ranked]
        return RateShopQuotesResponse(
            status=RateShopStatus.DECIDED,
            message=f"{len(quotes)} carrier services priced",
            chargeable_weight_kg=chargeable_kg,
            recommended=quotes[0],
            quotes=quotes,
        )

    async def _price(
        self,
        request: RateShopRequest
    ) -> Tuple[Optional[RateShopResult], List[CandidatePrice], Optional[float], Optional[ServiceabilityResult]]:
        serviceability = await self.serviceability.check(
            request.origin_pincode,
            request.destination_pincode,
            request.warehouse_id,
        )
        if not serviceability.serviceable:
            return (
                RateShopResult(
                    status=RateShopStatus.NOT_SERVICEABLE,
                    message="Route not serviceable",
                    serviceability=serviceability,
                ),
                [], None, serviceability,
            )

        engine = self.pricing_engine
        chargeable_kg = engine.get_chargeable_weight(
            request.weight_grams,
            request.length_cm,
            request.width_cm,
            request.height_cm,
        )

        candidates = await self.candidates.list_active_rate_candidates()
        if not candidates:
            logger.info("Rate shop: no rate candidates configured")
            return (
                RateShopResult(
                    status=RateShopStatus.NO_CANDIDATES,
                    message="No shipping rates available",
                    chargeable_weight_kg=chargeable_kg,
                    serviceability=serviceability,
                ),
                [], chargeable_kg, serviceability,
            )

        priced = [
            engine.price_candidate(
                candidate,
                chargeable_kg,
                serviceability.is_oda_destination,
                serviceability.oda_fee,
            )
            for candidate in candidates
        ]
        return None, priced, chargeable_kg, serviceability

    def _emit(self, name: str) -> None:
        if self.metrics is None or not settings.METRICS_ENABLED:
            return
        try:
            self.metrics.inc(name)
        except Exception as e:
            logger.warning(f"Failed to emit metric {name}: {e}")
