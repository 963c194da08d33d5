"""
Rate Shop Schemas.

Covers:
1. RateCandidate / SurchargeRule - what the candidate source hands the engine
2. RateShopRequest - shipment parameters and caller preferences
3. RateShopDecision / RateShopResult - the winning carrier or a "no decision" outcome
4. Quote listing - all scored candidates, best first
"""
from decimal import Decimal
from enum import Enum
from typing import Optional, List

from pydantic import BaseModel, Field

from rateshop.schemas.base import BaseCreateSchema
from rateshop.schemas.serviceability import ServiceabilityResult


# ==================== Enums ====================

class RateShopStatus(str, Enum):
    """Outcome of a rate shop call."""
    DECIDED = "DECIDED"                    # A carrier was selected
    NOT_SERVICEABLE = "NOT_SERVICEABLE"    # Origin or destination zone unknown
    NO_CANDIDATES = "NO_CANDIDATES"        # Route ok, but no rates configured


# ==================== Candidates ====================

class SurchargeRule(BaseModel):
    """Active surcharge rule attached to a candidate."""
    name: str = ""
    percent: Optional[Decimal] = Field(None, ge=0, description="Percent of running price")
    flat: Optional[Decimal] = Field(None, ge=0, description="Flat amount")

    @property
    def is_oda(self) -> bool:
        return "oda" in (self.name or "").lower()


class RateCandidate(BaseModel):
    """One carrier service offering with its carrier's active surcharges."""
    carrier_id: int
    carrier_name: str
    rate_id: int
    service_name: str
    base_rate: Decimal = Field(..., ge=0, description="Price per chargeable kg")
    estimated_delivery_days: int = Field(..., ge=1)
    surcharges: List[SurchargeRule] = Field(default_factory=list)


# ==================== Request ====================

class RateShopPreferences(BaseModel):
    """Caller tuning of the cost/SLA tradeoff."""
    weight_cost: Optional[float] = Field(None, ge=0, description="Weight on price")
    weight_sla: Optional[float] = Field(None, ge=0, description="Weight on delivery days")
    preferred_carriers: Optional[List[str]] = Field(None, description="Carrier names that get a score bonus")


class RateShopRequest(BaseCreateSchema):
    """Shipment parameters for a rate shop call."""
    origin_pincode: str
    destination_pincode: str
    weight_grams: int = Field(..., ge=0)
    length_cm: Optional[float] = Field(None, gt=0)
    width_cm: Optional[float] = Field(None, gt=0)
    height_cm: Optional[float] = Field(None, gt=0)
    warehouse_id: Optional[int] = Field(None, gt=0)
    preferences: Optional[RateShopPreferences] = None


# ==================== Response ====================

class RateShopDecision(BaseModel):
    """Winning carrier/service for a shipment."""
    carrier_id: int
    carrier_name: str
    rate_id: int
    service_name: str
    price: Decimal
    eta_days: int
    score: float


class RateShopResult(BaseModel):
    """Either a full decision or one of the two "no decision" outcomes."""
    status: RateShopStatus
    message: str
    decision: Optional[RateShopDecision] = None
    chargeable_weight_kg: Optional[float] = None
    serviceability: Optional[ServiceabilityResult] = None


class QuoteOption(BaseModel):
    """Scored candidate in a quote listing."""
    carrier_id: int
    carrier_name: str
    rate_id: int
    service_name: str
    base_price: Decimal
    price: Decimal
    oda_handled: bool
    oda_fee_applied: bool
    eta_days: int
    score: float


class RateShopQuotesResponse(BaseModel):
    """All scored candidates, best first."""
    status: RateShopStatus
    message: str
    chargeable_weight_kg: Optional[float] = None
    recommended: Optional[QuoteOption] = None
    quotes: List[QuoteOption] = Field(default_factory=list)
