from fastapi import Depends

from rateshop.database import async_session_factory
from rateshop.services.metrics_service import MetricsService, get_metrics
from rateshop.services.reference_data import ReferenceDataSource
from rateshop.services.sql_reference_data import SqlAlchemyReferenceData
from rateshop.services.serviceability_service import ServiceabilityService
from rateshop.services.rate_shop_service import RateShopService


def get_reference_data() -> ReferenceDataSource:
    """Dependency providing the database-backed reference data source."""
    return SqlAlchemyReferenceData(async_session_factory)


def get_metrics_service() -> MetricsService:
    return get_metrics()


def get_serviceability_service(
    source: ReferenceDataSource = Depends(get_reference_data),
) -> ServiceabilityService:
    return ServiceabilityService(zones=source, coverage=source)


def get_rate_shop_service(
    source: ReferenceDataSource = Depends(get_reference_data),
    metrics: MetricsService = Depends(get_metrics_service),
) -> RateShopService:
    return RateShopService.from_source(source, metrics=metrics)
