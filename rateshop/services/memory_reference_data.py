"""
In-memory implementation of the reference data interfaces.

Holds a read-only snapshot of zones, coverage rows, carriers, rates and
surcharges. Useful for tests and for callers that load reference data from
files instead of a database.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from rateshop.schemas.serviceability import PincodeZoneInfo, WarehouseCoverageInfo
from rateshop.schemas.rate_shop import RateCandidate, SurchargeRule
from rateshop.services.reference_data import ReferenceDataSource


@dataclass(frozen=True)
class CarrierRecord:
    id: int
    name: str


@dataclass(frozen=True)
class ShippingRateRecord:
    id: int
    carrier_id: int
    service_name: str
    rate: Decimal
    estimated_delivery_days: int


@dataclass(frozen=True)
class RateSurchargeRecord:
    carrier_id: int
    name: str
    percent: Optional[Decimal] = None
    flat: Optional[Decimal] = None
    active: bool = True


class InMemoryReferenceData(ReferenceDataSource):
    """Reference data held in process memory. Rates keep insertion order."""

    def __init__(
        self,
        zones: Iterable[PincodeZoneInfo] = (),
        coverages: Iterable[WarehouseCoverageInfo] = (),
        carriers: Iterable[CarrierRecord] = (),
        rates: Iterable[ShippingRateRecord] = (),
        surcharges: Iterable[RateSurchargeRecord] = (),
    ):
        self._zones: Dict[str, PincodeZoneInfo] = {z.pincode: z for z in zones}
        self._coverages: Dict[Tuple[int, str], WarehouseCoverageInfo] = {
            (c.warehouse_id, c.pincode): c for c in coverages
        }
        self._carriers: Dict[int, CarrierRecord] = {c.id: c for c in carriers}
        self._rates: List[ShippingRateRecord] = list(rates)
        self._surcharges: List[RateSurchargeRecord] = list(surcharges)

    async def get_zone(self, pincode: str) -> Optional[PincodeZoneInfo]:
        return self._zones.get(pincode)

    async def get_warehouse_coverage(
        self,
        warehouse_id: int,
        pincode: str
    ) -> Optional[WarehouseCoverageInfo]:
        return self._coverages.get((warehouse_id, pincode))

    async def list_active_rate_candidates(self) -> List[RateCandidate]:
        candidates = []
        for rate in self._rates:
            carrier = self._carriers.get(rate.carrier_id)
            if carrier is None:
                continue

            surcharges = [
                SurchargeRule(name=s.name, percent=s.percent, flat=s.flat)
                for s in self._surcharges
                if s.carrier_id == carrier.id and s.active
            ]
            candidates.append(RateCandidate(
                carrier_id=carrier.id,
                carrier_name=carrier.name,
                rate_id=rate.id,
                service_name=rate.service_name,
                base_rate=rate.rate,
                estimated_delivery_days=rate.estimated_delivery_days,
                surcharges=surcharges,
            ))
        return candidates
