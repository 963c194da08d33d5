"""
Seed Rate Shop Reference Data.

Creates:
1. Pincode Zones - Metro, regional and ODA pincodes
2. Warehouse Coverage - TAT/ODA overrides for the Mumbai warehouse
3. Carriers - Services, per-kg rates and surcharge rules

Usage:
    python -m scripts.seed_reference_data
"""
import asyncio
import logging
from decimal import Decimal

from sqlalchemy import select

from rateshop.database import get_db_session, init_db
from rateshop.models import PincodeZone, WarehouseCoverage, Carrier, ShippingRate, RateSurcharge

logger = logging.getLogger(__name__)


# Mumbai Pincodes (400001-400099)
MUMBAI_PINCODES = [str(p) for p in range(400001, 400100)]

# Delhi Pincodes (110001-110099)
DELHI_PINCODES = [str(p) for p in range(110001, 110100)]

# Bangalore Pincodes (560001-560099)
BANGALORE_PINCODES = [str(p) for p in range(560001, 560100)]

# North-East pincodes flagged Out of Delivery Area
ODA_PINCODES = ["791001", "795001", "797001", "798601", "737101"]

MUMBAI_WAREHOUSE_ID = 1

CARRIERS = [
    {
        "name": "Delhivery",
        "rates": [("Surface", "45.00", 5), ("Express", "80.00", 2)],
        "surcharges": [
            {"name": "Fuel Surcharge", "percent": "12.5"},
            {"name": "ODA Charge", "flat": "35.00"},
        ],
    },
    {
        "name": "BlueDart",
        "rates": [("Air", "110.00", 1)],
        "surcharges": [
            {"name": "Fuel Surcharge", "percent": "18"},
            {"name": "Docket Fee", "flat": "10.00"},
        ],
    },
    {
        "name": "Xpressbees",
        "rates": [("Standard", "40.00", 4)],
        "surcharges": [
            {"name": "Fuel Surcharge", "percent": "10"},
            # No ODA rule: warehouse ODA fee applies
        ],
    },
]


async def seed_zones(db) -> int:
    existing = await db.execute(select(PincodeZone.pincode))
    known = set(existing.scalars().all())

    count = 0
    for zone, pincodes, oda in [
        ("WEST", MUMBAI_PINCODES, False),
        ("NORTH", DELHI_PINCODES, False),
        ("SOUTH", BANGALORE_PINCODES, False),
        ("NE", ODA_PINCODES, True),
    ]:
        for pincode in pincodes:
            if pincode in known:
                continue
            db.add(PincodeZone(pincode=pincode, zone=zone, oda=oda))
            count += 1
    return count


async def seed_coverage(db) -> int:
    existing = await db.execute(
        select(WarehouseCoverage.pincode).where(WarehouseCoverage.warehouse_id == MUMBAI_WAREHOUSE_ID)
    )
    known = set(existing.scalars().all())

    count = 0
    for pincode in MUMBAI_PINCODES[:20]:
        if pincode not in known:
            db.add(WarehouseCoverage(warehouse_id=MUMBAI_WAREHOUSE_ID, pincode=pincode, tat_days=1))
            count += 1
    for pincode in ODA_PINCODES:
        if pincode not in known:
            db.add(WarehouseCoverage(
                warehouse_id=MUMBAI_WAREHOUSE_ID,
                pincode=pincode,
                tat_days=7,
                is_oda=True,
                oda_fee=Decimal("50.00"),
            ))
            count += 1
    return count


async def seed_carriers(db) -> int:
    existing = await db.execute(select(Carrier.name))
    known = set(existing.scalars().all())

    count = 0
    for data in CARRIERS:
        if data["name"] in known:
            continue
        carrier = Carrier(name=data["name"])
        for service_name, rate, eta in data["rates"]:
            carrier.rates.append(ShippingRate(
                service_name=service_name,
                rate=Decimal(rate),
                estimated_delivery_days=eta,
            ))
        for s in data["surcharges"]:
            carrier.surcharges.append(RateSurcharge(
                name=s["name"],
                percent=Decimal(s["percent"]) if "percent" in s else None,
                flat=Decimal(s["flat"]) if "flat" in s else None,
                active=True,
            ))
        db.add(carrier)
        count += 1
    return count


async def main():
    await init_db()
    async with get_db_session() as db:
        zones = await seed_zones(db)
        coverage = await seed_coverage(db)
        carriers = await seed_carriers(db)
    logger.info(f"Seeded {zones} zones, {coverage} coverage rows, {carriers} carriers")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
