"""
Serviceability reference models.

Two-tier ODA/TAT resolution:
1. PincodeZone - Zone code and ODA flag per pincode (global)
2. WarehouseCoverage - Per warehouse/pincode override of TAT, ODA flag and ODA fee

Both tables are maintained by an external admin process and are read-only
to the rate shop engine.
"""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import String, Boolean, DateTime, Integer, Numeric
from sqlalchemy import UniqueConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column

from rateshop.database import Base


class PincodeZone(Base):
    """
    Pincode to zone mapping.

    Example:
    - 400001 -> zone "WEST", oda=False
    - 791001 -> zone "NE", oda=True
    """
    __tablename__ = "pincode_zones"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    pincode: Mapped[str] = mapped_column(
        String(10),
        unique=True,
        nullable=False,
        index=True
    )

    zone: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True,
        comment="Nominal region code e.g. NORTH, WEST, METRO"
    )

    oda: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        comment="Out of Delivery Area flag"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    def __repr__(self) -> str:
        return f"<PincodeZone({self.pincode} = Zone {self.zone}, oda={self.oda})>"


class WarehouseCoverage(Base):
    """
    Warehouse-specific coverage override for a destination pincode.

    At most one row per (warehouse_id, pincode).
    """
    __tablename__ = "warehouse_coverages"
    __table_args__ = (
        UniqueConstraint(
            "warehouse_id", "pincode",
            name="uq_warehouse_coverage"
        ),
        Index("ix_warehouse_coverage_pincode", "pincode"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    warehouse_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    pincode: Mapped[str] = mapped_column(String(10), nullable=False)

    tat_days: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="Turnaround days from this warehouse to the pincode"
    )

    is_oda: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    oda_fee: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(10, 2),
        nullable=True,
        comment="Flat ODA fee used when the carrier has no ODA surcharge rule"
    )

    # Applicability bounds (stored, not used for filtering)
    min_weight_grams: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    max_weight_grams: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    def __repr__(self) -> str:
        return f"<WarehouseCoverage(warehouse={self.warehouse_id}, pincode='{self.pincode}', oda={self.is_oda})>"
