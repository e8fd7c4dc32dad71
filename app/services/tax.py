"""Tax model - yearly tax burden under the selected regime."""

import logging
import math

from app.models.settings import AppSettings, TaxRegime
from app.schemas.settings import (
    PatentTaxRecord,
    SelfEmployedTaxRecord,
    TaxRecord,
    UsnTaxRecord,
)
from app.schemas.statistics import TaxBurden
from app.services.settings import get_tax_record

logger = logging.getLogger(__name__)

DEFAULT_USN_RATE = 6
DEFAULT_SELF_EMPLOYED_RATE = 4


def _percent(earnings: int, rate: float) -> int:
    """Percentage of earnings rounded half up, not to even."""
    return math.floor(earnings * rate / 100 + 0.5)


def record_for_regime(record: TaxRecord | None, regime: str, year: int) -> TaxRecord | None:
    """
    The year's record as the variant of ``regime``.

    A record entered under another regime still contributes its insurance
    cost; its regime-specific fields fall back to defaults.
    """
    record_types = {
        TaxRegime.PATENT.value: PatentTaxRecord,
        TaxRegime.USN.value: UsnTaxRecord,
        TaxRegime.SELF_EMPLOYED.value: SelfEmployedTaxRecord,
    }
    record_type = record_types.get(regime)
    if record_type is None:
        return None
    if isinstance(record, record_type):
        return record
    insurance_cost = record.insurance_cost if record is not None else 0
    return record_type(year=year, insurance_cost=insurance_cost)


def calculate_tax_burden(
    earnings: int,
    regime: str,
    record: TaxRecord | None,
    year: int,
) -> TaxBurden:
    """Compute tax, insurance and their total for a year's earnings."""
    if regime == TaxRegime.NONE.value:
        return TaxBurden(
            regime=regime, tax_amount=0, insurance_cost=0, total=0, description="Без налогов"
        )

    record = record_for_regime(record, regime, year)

    if isinstance(record, PatentTaxRecord):
        return TaxBurden(
            regime=regime,
            tax_amount=record.patent_cost,
            insurance_cost=record.insurance_cost,
            total=record.patent_cost + record.insurance_cost,
            description="Патент + Страховые",
        )

    if isinstance(record, UsnTaxRecord):
        tax_rate = record.tax_rate or DEFAULT_USN_RATE
        tax_amount = _percent(earnings, tax_rate)
        return TaxBurden(
            regime=regime,
            tax_amount=tax_amount,
            insurance_cost=record.insurance_cost,
            tax_rate=tax_rate,
            total=tax_amount + record.insurance_cost,
            description=f"УСН {tax_rate:g}% + Страховые",
        )

    if isinstance(record, SelfEmployedTaxRecord):
        tax_rate = record.tax_rate or DEFAULT_SELF_EMPLOYED_RATE
        tax_amount = _percent(earnings, tax_rate)
        # Insurance is voluntary here but still counts when entered
        return TaxBurden(
            regime=regime,
            tax_amount=tax_amount,
            insurance_cost=record.insurance_cost,
            tax_rate=tax_rate,
            total=tax_amount + record.insurance_cost,
            description=f"НПД {tax_rate:g}%",
        )

    logger.warning("Unknown tax regime %r, assuming no tax burden", regime)
    return TaxBurden(
        regime=str(regime), tax_amount=0, insurance_cost=0, total=0, description="Не указано"
    )


def tax_burden_for_year(app_settings: AppSettings, earnings: int, year: int) -> TaxBurden:
    """Tax burden using the settings' regime and that year's record."""
    return calculate_tax_burden(
        earnings,
        app_settings.tax_system,
        get_tax_record(app_settings, year),
        year,
    )
