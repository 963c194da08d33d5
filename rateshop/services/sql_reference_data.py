"""Async SQLAlchemy implementation of the reference data interfaces."""
import logging
from collections import defaultdict
from typing import List, Optional, Dict

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import joinedload

from rateshop.models.serviceability import PincodeZone, WarehouseCoverage
from rateshop.models.carrier import ShippingRate, RateSurcharge
from rateshop.schemas.serviceability import PincodeZoneInfo, WarehouseCoverageInfo
from rateshop.schemas.rate_shop import RateCandidate, SurchargeRule
from rateshop.services.reference_data import ReferenceDataSource, ReferenceDataError

logger = logging.getLogger(__name__)


class SqlAlchemyReferenceData(ReferenceDataSource):
    """
    Reads zones, coverage and rate candidates from the database.

    Every lookup opens its own session so the serviceability lookups can run
    concurrently (an AsyncSession must not execute statements concurrently).
    Query failures and rows that do not map onto the schemas both surface as
    ReferenceDataError.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def get_zone(self, pincode: str) -> Optional[PincodeZoneInfo]:
        stmt = select(PincodeZone).where(PincodeZone.pincode == pincode)
        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                zone = result.scalar_one_or_none()
                if zone is None:
                    return None
                return PincodeZoneInfo.model_validate(zone)
        except (SQLAlchemyError, ValidationError) as e:
            logger.error(f"Zone lookup failed for pincode {pincode}: {e}")
            raise ReferenceDataError("get_zone", str(e)) from e

    async def get_warehouse_coverage(
        self,
        warehouse_id: int,
        pincode: str
    ) -> Optional[WarehouseCoverageInfo]:
        stmt = select(WarehouseCoverage).where(
            WarehouseCoverage.warehouse_id == warehouse_id,
            WarehouseCoverage.pincode == pincode,
        )
        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                coverage = result.scalar_one_or_none()
                if coverage is None:
                    return None
                return WarehouseCoverageInfo.model_validate(coverage)
        except (SQLAlchemyError, ValidationError) as e:
            logger.error(f"Coverage lookup failed for warehouse {warehouse_id}, pincode {pincode}: {e}")
            raise ReferenceDataError("get_warehouse_coverage", str(e)) from e

    async def list_active_rate_candidates(self) -> List[RateCandidate]:
        # Inner join drops rates whose carrier row is missing
        rates_stmt = (
            select(ShippingRate)
            .join(ShippingRate.carrier)
            .options(joinedload(ShippingRate.carrier))
            .order_by(ShippingRate.id)
        )
        try:
            async with self.session_factory() as session:
                result = await session.execute(rates_stmt)
                rates = list(result.scalars().all())

                surcharges_by_carrier: Dict[int, List[SurchargeRule]] = defaultdict(list)
                carrier_ids = {r.carrier_id for r in rates}
                if carrier_ids:
                    surcharge_stmt = (
                        select(RateSurcharge)
                        .where(
                            RateSurcharge.carrier_id.in_(carrier_ids),
                            RateSurcharge.active == True,
                        )
                        .order_by(RateSurcharge.id)
                    )
                    surcharge_result = await session.execute(surcharge_stmt)
                    for s in surcharge_result.scalars().all():
                        surcharges_by_carrier[s.carrier_id].append(
                            SurchargeRule(name=s.name, percent=s.percent, flat=s.flat)
                        )

                return [
                    RateCandidate(
                        carrier_id=r.carrier_id,
                        carrier_name=r.carrier.name,
                        rate_id=r.id,
                        service_name=r.service_name,
                        base_rate=r.rate,
                        estimated_delivery_days=r.estimated_delivery_days,
                        surcharges=list(surcharges_by_carrier.get(r.carrier_id, [])),
                    )
                    for r in rates
                ]
        except (SQLAlchemyError, ValidationError) as e:
            logger.error(f"Rate candidate query failed: {e}")
            raise ReferenceDataError("list_active_rate_candidates", str(e)) from e
