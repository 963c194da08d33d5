"""
Tests for the database-backed reference data source.

Runs against a throwaway SQLite file through aiosqlite.

Run with: pytest tests/test_sql_reference_data.py -v
"""
from decimal import Decimal

import pytest
import pytest_asyncio

from rateshop.database import build_engine, build_session_factory, init_db
from rateshop.models import PincodeZone, WarehouseCoverage, Carrier, ShippingRate, RateSurcharge
from rateshop.schemas.rate_shop import RateShopRequest, RateShopStatus
from rateshop.services.rate_shop_service import RateShopService
from rateshop.services.reference_data import ReferenceDataError
from rateshop.services.sql_reference_data import SqlAlchemyReferenceData
from scripts.seed_reference_data import seed_zones, seed_coverage, seed_carriers


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'reference.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return build_session_factory(db_engine)


@pytest_asyncio.fixture
async def seeded(session_factory):
    """Two carriers, one with an inactive surcharge, plus an orphaned rate."""
    async with session_factory() as session:
        session.add_all([
            PincodeZone(pincode="400001", zone="WEST", oda=False),
            PincodeZone(pincode="791001", zone="NE", oda=True),
            WarehouseCoverage(
                warehouse_id=1,
                pincode="791001",
                tat_days=6,
                is_oda=True,
                oda_fee=Decimal("50.00"),
            ),
        ])

        delhivery = Carrier(name="Delhivery")
        delhivery.rates.append(ShippingRate(service_name="Surface", rate=Decimal("45.00"), estimated_delivery_days=5))
        delhivery.rates.append(ShippingRate(service_name="Express", rate=Decimal("80.00"), estimated_delivery_days=2))
        delhivery.surcharges.append(RateSurcharge(name="Fuel Surcharge", percent=Decimal("10"), active=True))
        delhivery.surcharges.append(RateSurcharge(name="Festive Surcharge", flat=Decimal("99"), active=False))
        delhivery.surcharges.append(RateSurcharge(name="ODA Charge", flat=Decimal("35.00"), active=True))

        bluedart = Carrier(name="BlueDart")
        bluedart.rates.append(ShippingRate(service_name="Air", rate=Decimal("110.00"), estimated_delivery_days=1))

        session.add_all([delhivery, bluedart])
        await session.flush()

        # Rate pointing at a carrier that no longer exists
        session.add(ShippingRate(carrier_id=9999, service_name="Ghost", rate=Decimal("1.00"), estimated_delivery_days=1))
        await session.commit()
    return SqlAlchemyReferenceData(session_factory)


class TestZoneAndCoverage:

    async def test_get_zone(self, seeded):
        zone = await seeded.get_zone("791001")

        assert zone.pincode == "791001"
        assert zone.zone == "NE"
        assert zone.oda is True

    async def test_unknown_zone(self, seeded):
        assert await seeded.get_zone("999999") is None

    async def test_get_warehouse_coverage(self, seeded):
        row = await seeded.get_warehouse_coverage(1, "791001")

        assert row.tat_days == 6
        assert row.is_oda is True
        assert row.oda_fee == Decimal("50.00")

    async def test_coverage_is_per_warehouse(self, seeded):
        assert await seeded.get_warehouse_coverage(2, "791001") is None
        assert await seeded.get_warehouse_coverage(1, "400001") is None


class TestRateCandidates:

    async def test_candidates_in_store_order(self, seeded):
        candidates = await seeded.list_active_rate_candidates()

        assert [(c.carrier_name, c.service_name) for c in candidates] == [
            ("Delhivery", "Surface"),
            ("Delhivery", "Express"),
            ("BlueDart", "Air"),
        ]

    async def test_orphan_rate_excluded(self, seeded):
        candidates = await seeded.list_active_rate_candidates()

        assert all(c.service_name != "Ghost" for c in candidates)

    async def test_only_active_surcharges_attached(self, seeded):
        candidates = await seeded.list_active_rate_candidates()

        surface = candidates[0]
        assert [s.name for s in surface.surcharges] == ["Fuel Surcharge", "ODA Charge"]
        assert surface.surcharges[0].percent == Decimal("10")
        assert surface.surcharges[1].flat == Decimal("35.00")

    async def test_carrier_without_surcharges(self, seeded):
        candidates = await seeded.list_active_rate_candidates()

        assert candidates[2].surcharges == []
        assert candidates[2].base_rate == Decimal("110.00")

    async def test_empty_store(self, session_factory):
        source = SqlAlchemyReferenceData(session_factory)

        assert await source.list_active_rate_candidates() == []


class TestStoreFailures:
    """Missing tables surface as ReferenceDataError."""

    @pytest_asyncio.fixture
    async def bare_source(self, tmp_path):
        engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
        yield SqlAlchemyReferenceData(build_session_factory(engine))
        await engine.dispose()

    async def test_zone_failure(self, bare_source):
        with pytest.raises(ReferenceDataError) as exc_info:
            await bare_source.get_zone("400001")
        assert exc_info.value.operation == "get_zone"

    async def test_coverage_failure(self, bare_source):
        with pytest.raises(ReferenceDataError) as exc_info:
            await bare_source.get_warehouse_coverage(1, "400001")
        assert exc_info.value.operation == "get_warehouse_coverage"

    async def test_candidate_failure(self, bare_source):
        with pytest.raises(ReferenceDataError) as exc_info:
            await bare_source.list_active_rate_candidates()
        assert exc_info.value.operation == "list_active_rate_candidates"


class TestRowMapping:
    """Stored values outside the schema bounds."""

    @pytest_asyncio.fixture
    async def one_carrier(self, session_factory):
        async with session_factory() as session:
            session.add_all([
                PincodeZone(pincode="400001", zone="WEST"),
                PincodeZone(pincode="110001", zone="NORTH"),
            ])
            carrier = Carrier(name="Delhivery")
            carrier.rates.append(ShippingRate(service_name="Surface", rate=Decimal("100.00"), estimated_delivery_days=3))
            session.add(carrier)
            await session.commit()
        return session_factory

    async def test_same_day_tat_flows_through(self, one_carrier):
        async with one_carrier() as session:
            session.add(WarehouseCoverage(warehouse_id=1, pincode="110001", tat_days=0))
            await session.commit()
        source = SqlAlchemyReferenceData(one_carrier)

        row = await source.get_warehouse_coverage(1, "110001")
        assert row.tat_days == 0

        result = await RateShopService.from_source(source).shop(RateShopRequest(
            origin_pincode="400001",
            destination_pincode="110001",
            weight_grams=2000,
            warehouse_id=1,
        ))
        assert result.status == RateShopStatus.DECIDED
        assert result.decision.eta_days == 0
        assert result.decision.price == Decimal("200")
        assert result.decision.score == pytest.approx(0.6 * 200)

    async def test_negative_surcharge_row_is_reference_error(self, one_carrier):
        async with one_carrier() as session:
            session.add(RateSurcharge(carrier_id=1, name="Fuel Surcharge", percent=Decimal("-5"), active=True))
            await session.commit()
        source = SqlAlchemyReferenceData(one_carrier)

        with pytest.raises(ReferenceDataError) as exc_info:
            await source.list_active_rate_candidates()
        assert exc_info.value.operation == "list_active_rate_candidates"

        with pytest.raises(ReferenceDataError):
            await RateShopService.from_source(source).shop(RateShopRequest(
                origin_pincode="400001",
                destination_pincode="110001",
                weight_grams=2000,
            ))

    async def test_negative_oda_fee_row_is_reference_error(self, one_carrier):
        async with one_carrier() as session:
            session.add(WarehouseCoverage(warehouse_id=1, pincode="110001", is_oda=True, oda_fee=Decimal("-10")))
            await session.commit()
        source = SqlAlchemyReferenceData(one_carrier)

        with pytest.raises(ReferenceDataError) as exc_info:
            await source.get_warehouse_coverage(1, "110001")
        assert exc_info.value.operation == "get_warehouse_coverage"


class TestEndToEnd:
    """Rate shop over the database source."""

    async def test_oda_decision(self, seeded):
        service = RateShopService.from_source(seeded)
        result = await service.shop(RateShopRequest(
            origin_pincode="400001",
            destination_pincode="791001",
            weight_grams=1500,
            warehouse_id=1,
        ))

        assert result.status == RateShopStatus.DECIDED
        # Every service is capped at the warehouse TAT of 6 days
        assert result.decision.eta_days == 6
        # Delhivery Surface: 45 * 2 = 90, +10% = 99, +ODA 35 = 134
        assert result.decision.carrier_name == "Delhivery"
        assert result.decision.service_name == "Surface"
        assert result.decision.price == Decimal("134")

    async def test_seed_script_is_idempotent(self, session_factory):
        async with session_factory() as session:
            first = (await seed_zones(session), await seed_coverage(session), await seed_carriers(session))
            await session.commit()
        async with session_factory() as session:
            second = (await seed_zones(session), await seed_coverage(session), await seed_carriers(session))
            await session.commit()

        assert all(count > 0 for count in first)
        assert second == (0, 0, 0)

        source = SqlAlchemyReferenceData(session_factory)
        candidates = await source.list_active_rate_candidates()
        assert {c.carrier_name for c in candidates} == {"Delhivery", "BlueDart", "Xpressbees"}
