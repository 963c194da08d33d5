"""
Serviceability Service.

Handles:
1. Resolving origin and destination pincode zones
2. Resolving the warehouse coverage override for the destination
3. Final serviceability = origin zone known AND destination zone known

The verdict also carries the ODA flag, ODA fee and TAT override that
pricing and scoring rely on.
"""
import asyncio
import logging
from typing import Optional

from rateshop.schemas.serviceability import ServiceabilityResult
from rateshop.services.reference_data import ZoneLookup, CoverageLookup

logger = logging.getLogger(__name__)


class ServiceabilityService:
    """Service for checking route serviceability."""

    def __init__(self, zones: ZoneLookup, coverage: CoverageLookup):
        self.zones = zones
        self.coverage = coverage

    async def check(
        self,
        origin_pincode: str,
        destination_pincode: str,
        warehouse_id: Optional[int] = None
    ) -> ServiceabilityResult:
        """
        Check if a route is serviceable.

        Origin zone, destination zone and warehouse coverage are independent
        reads and are resolved concurrently. Lookup failures propagate.
        """
        if not origin_pincode or not destination_pincode:
            return ServiceabilityResult(serviceable=False)

        origin_zone, destination_zone, coverage = await asyncio.gather(
            self.zones.get_zone(origin_pincode),
            self.zones.get_zone(destination_pincode),
            self._get_coverage(warehouse_id, destination_pincode),
        )

        serviceable = origin_zone is not None and destination_zone is not None
        if not serviceable:
            logger.info(
                f"Route {origin_pincode} -> {destination_pincode} not serviceable "
                f"(origin found={origin_zone is not None}, destination found={destination_zone is not None})"
            )

        return ServiceabilityResult(
            serviceable=serviceable,
            origin_zone=origin_zone,
            destination_zone=destination_zone,
            warehouse_coverage=coverage,
        )

    async def is_serviceable(
        self,
        origin_pincode: str,
        destination_pincode: str,
        warehouse_id: Optional[int] = None
    ) -> bool:
        result = await self.check(origin_pincode, destination_pincode, warehouse_id)
        return result.serviceable

    async def _get_coverage(self, warehouse_id: Optional[int], pincode: str):
        if not warehouse_id:
            return None
        return await self.coverage.get_warehouse_coverage(warehouse_id, pincode)
