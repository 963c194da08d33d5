"""
Shared fixtures for the rate shop test suite.

Run with: pytest -v
"""
from decimal import Decimal

import pytest

from rateshop.schemas.rate_shop import RateCandidate, SurchargeRule
from rateshop.schemas.serviceability import PincodeZoneInfo, WarehouseCoverageInfo
from rateshop.services.memory_reference_data import (
    InMemoryReferenceData,
    CarrierRecord,
    ShippingRateRecord,
    RateSurchargeRecord,
)
from rateshop.services.metrics_service import MetricsService
from rateshop.services.pricing_engine import PricingEngine


ORIGIN = "400001"          # Mumbai
DESTINATION = "110001"     # Delhi
ODA_DESTINATION = "791001"  # Itanagar, out of delivery area


# =============================================================================
# BUILDERS
# =============================================================================

def make_candidate(
    base_rate="100",
    eta=3,
    surcharges=(),
    carrier_id=1,
    carrier_name="Delhivery",
    rate_id=1,
    service_name="Surface",
) -> RateCandidate:
    """Candidate with sensible defaults; surcharges as (name, percent, flat) tuples."""
    return RateCandidate(
        carrier_id=carrier_id,
        carrier_name=carrier_name,
        rate_id=rate_id,
        service_name=service_name,
        base_rate=Decimal(base_rate),
        estimated_delivery_days=eta,
        surcharges=[
            SurchargeRule(
                name=name,
                percent=Decimal(percent) if percent is not None else None,
                flat=Decimal(flat) if flat is not None else None,
            )
            for name, percent, flat in surcharges
        ],
    )


def make_source(
    carriers=(),
    rates=(),
    surcharges=(),
    coverages=(),
    destination_oda=False,
    zones=None,
) -> InMemoryReferenceData:
    """In-memory reference data with Mumbai, Delhi and ODA zones loaded."""
    if zones is None:
        zones = [
            PincodeZoneInfo(pincode=ORIGIN, zone="WEST", oda=False),
            PincodeZoneInfo(pincode=DESTINATION, zone="NORTH", oda=destination_oda),
            PincodeZoneInfo(pincode=ODA_DESTINATION, zone="NE", oda=True),
        ]
    return InMemoryReferenceData(
        zones=zones,
        coverages=coverages,
        carriers=carriers,
        rates=rates,
        surcharges=surcharges,
    )


def single_carrier_source(surcharges=(), **kwargs) -> InMemoryReferenceData:
    """One carrier, one service at 100/kg with a 3 day ETA."""
    return make_source(
        carriers=[CarrierRecord(id=1, name="Delhivery")],
        rates=[ShippingRateRecord(
            id=1,
            carrier_id=1,
            service_name="Surface",
            rate=Decimal("100"),
            estimated_delivery_days=3,
        )],
        surcharges=surcharges,
        **kwargs,
    )


def coverage(warehouse_id=7, pincode=DESTINATION, **kwargs) -> WarehouseCoverageInfo:
    return WarehouseCoverageInfo(warehouse_id=warehouse_id, pincode=pincode, **kwargs)


def oda_rule(name="ODA Fee", percent=None, flat=None) -> RateSurchargeRecord:
    return RateSurchargeRecord(
        carrier_id=1,
        name=name,
        percent=Decimal(percent) if percent is not None else None,
        flat=Decimal(flat) if flat is not None else None,
    )


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def engine():
    """Pricing engine with the standard constants."""
    return PricingEngine(
        volumetric_divisor=5000,
        default_weight_cost=0.6,
        default_weight_sla=0.4,
        preferred_carrier_bonus=0.9,
    )


@pytest.fixture
def metrics():
    return MetricsService()
