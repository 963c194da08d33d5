"""
Serviceability Schemas.

Covers:
1. PincodeZoneInfo / WarehouseCoverageInfo - read-only reference snapshots
2. Serviceability Check - API request
3. ServiceabilityResult - verdict plus the ODA/TAT context derived from it
"""
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, computed_field

from rateshop.schemas.base import BaseResponseSchema, BaseCreateSchema


# ==================== Reference Snapshots ====================

class PincodeZoneInfo(BaseResponseSchema):
    """Zone metadata for a pincode."""
    pincode: str
    zone: Optional[str] = None
    oda: bool = False


class WarehouseCoverageInfo(BaseResponseSchema):
    """Warehouse/pincode override row."""
    warehouse_id: int
    pincode: str
    tat_days: Optional[int] = None
    is_oda: bool = False
    oda_fee: Optional[Decimal] = Field(None, ge=0)
    min_weight_grams: Optional[int] = Field(None, ge=0)
    max_weight_grams: Optional[int] = Field(None, ge=0)


# ==================== Serviceability Check ====================

class ServiceabilityCheckRequest(BaseCreateSchema):
    """Request schema for a route serviceability check."""
    origin_pincode: str = Field(..., description="Pickup pincode")
    destination_pincode: str = Field(..., description="Delivery pincode")
    warehouse_id: Optional[int] = Field(None, gt=0)


class ServiceabilityResult(BaseModel):
    """
    Serviceability verdict for an origin/destination pair.

    Zone and coverage data are populated whenever they were found, even if the
    route is not serviceable, so callers can tell which side failed.
    """
    serviceable: bool
    origin_zone: Optional[PincodeZoneInfo] = None
    destination_zone: Optional[PincodeZoneInfo] = None
    warehouse_coverage: Optional[WarehouseCoverageInfo] = None

    @computed_field
    @property
    def is_oda_destination(self) -> bool:
        """True if either the destination zone or the warehouse override flags ODA."""
        zone_oda = bool(self.destination_zone and self.destination_zone.oda)
        coverage_oda = bool(self.warehouse_coverage and self.warehouse_coverage.is_oda)
        return zone_oda or coverage_oda

    @computed_field
    @property
    def oda_fee(self) -> Decimal:
        if self.warehouse_coverage and self.warehouse_coverage.oda_fee is not None:
            return self.warehouse_coverage.oda_fee
        return Decimal("0")

    @computed_field
    @property
    def coverage_tat(self) -> Optional[int]:
        if self.warehouse_coverage:
            return self.warehouse_coverage.tat_days
        return None
