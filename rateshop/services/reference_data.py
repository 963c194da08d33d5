"""
Reference data interfaces consumed by the rate shop engine.

Each data store provides one implementation, chosen when the engine is built:
1. SqlAlchemyReferenceData - async SQLAlchemy (production)
2. InMemoryReferenceData - plain in-process snapshot (tests, embedding)

Usage:
    source = SqlAlchemyReferenceData(async_session_factory)
    zone = await source.get_zone("400001")
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from rateshop.schemas.serviceability import PincodeZoneInfo, WarehouseCoverageInfo
from rateshop.schemas.rate_shop import RateCandidate


class ReferenceDataError(Exception):
    """Reference data store failure (connection, query, mapping)."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.message = message
        super().__init__(f"Reference data error during {operation}: {message}")


class ZoneLookup(ABC):
    """Pincode zone lookup."""

    @abstractmethod
    async def get_zone(self, pincode: str) -> Optional[PincodeZoneInfo]:
        """Return zone metadata, or None if the pincode is unknown."""
        pass


class CoverageLookup(ABC):
    """Warehouse coverage override lookup."""

    @abstractmethod
    async def get_warehouse_coverage(
        self,
        warehouse_id: int,
        pincode: str
    ) -> Optional[WarehouseCoverageInfo]:
        """Return the override row, or None if the warehouse has none for this pincode."""
        pass


class RateCandidateSource(ABC):
    """Supplier of priced carrier services."""

    @abstractmethod
    async def list_active_rate_candidates(self) -> List[RateCandidate]:
        """
        Return every shipping rate whose carrier exists, each carrying only
        that carrier's active surcharges, in a stable store order.
        """
        pass


class ReferenceDataSource(ZoneLookup, CoverageLookup, RateCandidateSource):
    """Full capability set of a single data store."""
    pass
