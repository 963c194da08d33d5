"""
Pricing Engine for carrier rate shopping.

This service handles:
1. Weight calculation (actual vs volumetric)
2. Surcharge application with conditional ODA handling
3. Combined cost/SLA scoring with preferred-carrier bonus
4. Winner selection
"""
import logging
import math
from decimal import Decimal
from typing import List, Optional

from rateshop.config import settings
from rateshop.schemas.rate_shop import RateCandidate, RateShopPreferences, SurchargeRule

logger = logging.getLogger(__name__)


class CandidatePrice:
    """Final price of a candidate plus how it was reached."""
    def __init__(
        self,
        candidate: RateCandidate,
        base_price: Decimal,
        price: Decimal,
        oda_handled: bool = False,
        oda_fee_applied: bool = False,
    ):
        self.candidate = candidate
        self.base_price = base_price
        self.price = price
        self.oda_handled = oda_handled
        self.oda_fee_applied = oda_fee_applied
        self.sla_days: int = candidate.estimated_delivery_days
        self.score: float = 0.0

    @property
    def surcharge_total(self) -> Decimal:
        return self.price - self.base_price

    def to_dict(self) -> dict:
        return {
            "carrier_id": self.candidate.carrier_id,
            "carrier_name": self.candidate.carrier_name,
            "rate_id": self.candidate.rate_id,
            "service_name": self.candidate.service_name,
            "base_price": self.base_price,
            "price": self.price,
            "oda_handled": self.oda_handled,
            "oda_fee_applied": self.oda_fee_applied,
            "eta_days": self.sla_days,
            "score": self.score,
        }


class PricingEngine:
    """
    Rate shop pricing engine.

    Pure computation: no I/O, no state beyond the configured constants.
    """

    # Volumetric divisor (standard for courier industry, cm3 per kg)
    VOLUMETRIC_DIVISOR = 5000

    def __init__(
        self,
        volumetric_divisor: Optional[int] = None,
        default_weight_cost: Optional[float] = None,
        default_weight_sla: Optional[float] = None,
        preferred_carrier_bonus: Optional[float] = None,
    ):
        self.volumetric_divisor = volumetric_divisor or settings.VOLUMETRIC_DIVISOR or self.VOLUMETRIC_DIVISOR
        self.default_weight_cost = (
            settings.DEFAULT_WEIGHT_COST if default_weight_cost is None else default_weight_cost
        )
        self.default_weight_sla = (
            settings.DEFAULT_WEIGHT_SLA if default_weight_sla is None else default_weight_sla
        )
        self.preferred_carrier_bonus = (
            settings.PREFERRED_CARRIER_BONUS if preferred_carrier_bonus is None else preferred_carrier_bonus
        )

    # ============================================
    # WEIGHT CALCULATIONS
    # ============================================

    def calculate_volumetric_weight(
        self,
        length_cm: Optional[float],
        width_cm: Optional[float],
        height_cm: Optional[float],
    ) -> float:
        """
        Volumetric weight in kg.

        Returns 0 unless all three dimensions are present and non-zero.
        """
        if not all([length_cm, width_cm, height_cm]):
            return 0.0
        return (length_cm * width_cm * height_cm) / self.volumetric_divisor / 1000

    def get_chargeable_weight(
        self,
        weight_grams: int,
        length_cm: Optional[float] = None,
        width_cm: Optional[float] = None,
        height_cm: Optional[float] = None,
    ) -> float:
        """Chargeable weight in kg: the greater of physical and volumetric weight."""
        physical_kg = weight_grams / 1000
        volumetric_kg = self.calculate_volumetric_weight(length_cm, width_cm, height_cm)
        return max(physical_kg, volumetric_kg)

    @staticmethod
    def billable_units(chargeable_kg: float) -> int:
        """Whole kg billed: rounded up, never less than 1."""
        return max(1, math.ceil(chargeable_kg))

    # ============================================
    # SURCHARGES
    # ============================================

    def price_candidate(
        self,
        candidate: RateCandidate,
        chargeable_kg: float,
        is_oda_destination: bool,
        oda_fee: Decimal = Decimal("0"),
    ) -> CandidatePrice:
        """
        Price one candidate.

        Surcharges are applied in list order and percentages compound on the
        running price. ODA-named rules apply only to ODA destinations; the
        warehouse ODA fee is the fallback when no such rule matched.
        """
        base_price = Decimal(str(candidate.base_rate)) * self.billable_units(chargeable_kg)
        price = base_price
        oda_handled = False

        for surcharge in candidate.surcharges:
            if surcharge.is_oda:
                if is_oda_destination:
                    price = self._apply_surcharge(price, surcharge)
                    oda_handled = True
                continue
            price = self._apply_surcharge(price, surcharge)

        oda_fee_applied = False
        if is_oda_destination and not oda_handled and oda_fee:
            price += Decimal(str(oda_fee))
            oda_fee_applied = True

        return CandidatePrice(
            candidate=candidate,
            base_price=base_price,
            price=price,
            oda_handled=oda_handled,
            oda_fee_applied=oda_fee_applied,
        )

    def _apply_surcharge(self, price: Decimal, surcharge: SurchargeRule) -> Decimal:
        if surcharge.percent:
            price += price * Decimal(str(surcharge.percent)) / 100
        if surcharge.flat:
            price += Decimal(str(surcharge.flat))
        return price

    # ============================================
    # SCORING & SELECTION
    # ============================================

    def score_candidates(
        self,
        priced: List[CandidatePrice],
        coverage_tat: Optional[int] = None,
        preferences: Optional[RateShopPreferences] = None,
    ) -> List[CandidatePrice]:
        """
        Score candidates and return them best (lowest score) first.

        Sort is stable: equal scores keep the order the candidates arrived in.
        """
        weight_cost = self.default_weight_cost
        weight_sla = self.default_weight_sla
        preferred = set()
        if preferences:
            if preferences.weight_cost is not None:
                weight_cost = preferences.weight_cost
            if preferences.weight_sla is not None:
                weight_sla = preferences.weight_sla
            preferred = set(preferences.preferred_carriers or [])

        for entry in priced:
            entry.sla_days = coverage_tat if coverage_tat is not None else entry.candidate.estimated_delivery_days
            combined = weight_cost * float(entry.price) + weight_sla * entry.sla_days
            if entry.candidate.carrier_name in preferred:
                combined *= self.preferred_carrier_bonus
            entry.score = combined

        return sorted(priced, key=lambda e: e.score)

    def select_best(
        self,
        priced: List[CandidatePrice],
        coverage_tat: Optional[int] = None,
        preferences: Optional[RateShopPreferences] = None,
    ) -> Optional[CandidatePrice]:
        ranked = self.score_candidates(priced, coverage_tat, preferences)
        if not ranked:
            return None
        return ranked[0]
