# Services module
from rateshop.services.reference_data import (
    ReferenceDataError,
    ReferenceDataSource,
    ZoneLookup,
    CoverageLookup,
    RateCandidateSource,
)
from rateshop.services.sql_reference_data import SqlAlchemyReferenceData
from rateshop.services.memory_reference_data import InMemoryReferenceData
from rateshop.services.serviceability_service import ServiceabilityService
from rateshop.services.pricing_engine import PricingEngine, CandidatePrice
from rateshop.services.metrics_service import MetricsService, MetricsSink, get_metrics
from rateshop.services.rate_shop_service import RateShopService

__all__ = [
    "ReferenceDataError",
    "ReferenceDataSource",
    "ZoneLookup",
    "CoverageLookup",
    "RateCandidateSource",
    "SqlAlchemyReferenceData",
    "InMemoryReferenceData",
    "ServiceabilityService",
    "PricingEngine",
    "CandidatePrice",
    "MetricsService",
    "MetricsSink",
    "get_metrics",
    "RateShopService",
]
