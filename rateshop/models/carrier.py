"""Carrier, service rate and surcharge models."""
from decimal import Decimal
from typing import Optional, List

from sqlalchemy import String, Boolean, ForeignKey, Integer, Numeric, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rateshop.database import Base


class Carrier(Base):
    """
    Carrier/courier partner, e.g. Delhivery, BlueDart.
    Owns its service rates and surcharge rules.
    """
    __tablename__ = "carriers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)

    rates: Mapped[List["ShippingRate"]] = relationship(
        "ShippingRate",
        back_populates="carrier",
        cascade="all, delete-orphan",
        order_by="ShippingRate.id",
    )
    surcharges: Mapped[List["RateSurcharge"]] = relationship(
        "RateSurcharge",
        back_populates="carrier",
        cascade="all, delete-orphan",
        order_by="RateSurcharge.id",
    )

    def __repr__(self) -> str:
        return f"<Carrier(id={self.id}, name='{self.name}')>"


class ShippingRate(Base):
    """
    One service offering of a carrier (Standard, Express, ...).
    Priced per chargeable kg.
    """
    __tablename__ = "shipping_rates"
    __table_args__ = (
        CheckConstraint("estimated_delivery_days >= 1", name="ck_shipping_rate_eta"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    carrier_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("carriers.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    service_name: Mapped[str] = mapped_column(String(100), nullable=False)

    rate: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        comment="Price per chargeable kg"
    )

    estimated_delivery_days: Mapped[int] = mapped_column(Integer, nullable=False)

    carrier: Mapped["Carrier"] = relationship("Carrier", back_populates="rates")

    def __repr__(self) -> str:
        return f"<ShippingRate(carrier={self.carrier_id}, service='{self.service_name}', rate={self.rate})>"


class RateSurcharge(Base):
    """
    Surcharge rule of a carrier.

    A name containing "oda" (any case) marks the rule as ODA-conditional.
    """
    __tablename__ = "rate_surcharges"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    carrier_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("carriers.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    percent: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(10, 4),
        nullable=True,
        comment="Percentage of the running price"
    )
    flat: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(10, 2),
        nullable=True,
        comment="Flat amount added after the percentage"
    )

    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    carrier: Mapped["Carrier"] = relationship("Carrier", back_populates="surcharges")

    def __repr__(self) -> str:
        return f"<RateSurcharge(name='{self.name}', percent={self.percent}, flat={self.flat})>"
