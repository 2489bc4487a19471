"""Quote pricing: services subtotal, capped travel cost and stacked taxes.

All functions are pure. Figures are accumulated at full precision and only
rounded by callers at the display/persist boundary (``PriceBreakdown.rounded``).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence

from ..config import settings
from ..models.domain import (
    PriceBreakdown,
    QuoteOptionLine,
    QuoteServiceLine,
    SelectedService,
    ServiceCatalog,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PricingRates:
    rate_per_km: float
    travel_cost_cap: float
    tax_rate: float

    @classmethod
    def from_settings(cls) -> "PricingRates":
        return cls(
            rate_per_km=settings.travel_rate_per_km,
            travel_cost_cap=settings.travel_cost_cap,
            tax_rate=settings.combined_tax_rate,
        )


def service_line(selection: SelectedService, catalog: ServiceCatalog) -> QuoteServiceLine:
    """Price one selection. Stale service or option references contribute 0."""
    entry = catalog.get(selection.service_id)
    if entry is None:
        logger.warning(f"Selected service '{selection.service_id}' is not in the catalog")

    base_price = entry.base_price if (entry is not None and selection.base_selected) else 0.0

    option_lines: list[QuoteOptionLine] = []
    for selected in selection.options:
        option = catalog.option(selection.service_id, selected.option_index)
        if option is None:
            if entry is not None:
                logger.warning(
                    f"Option index {selected.option_index} is not defined for service '{selection.service_id}'"
                )
            option_lines.append(QuoteOptionLine(name="", price=0.0, quantity=selected.quantity, total=0.0))
            continue
        option_lines.append(
            QuoteOptionLine(
                name=option.name,
                price=option.price,
                quantity=selected.quantity,
                total=option.price * selected.quantity,
            )
        )

    return QuoteServiceLine(
        service_id=selection.service_id,
        service_name=entry.name if entry is not None else "",
        base_price=base_price,
        base_selected=selection.base_selected,
        options=tuple(option_lines),
        total_price=base_price + sum(line.total for line in option_lines),
    )


def calculate_subtotal(selections: Sequence[SelectedService], catalog: ServiceCatalog) -> float:
    return sum(service_line(selection, catalog).total_price for selection in selections)


def calculate_travel_cost(distance_km: float, rates: PricingRates | None = None) -> float:
    rates = rates or PricingRates.from_settings()
    if distance_km is None or math.isnan(distance_km) or distance_km < 0:
        distance_km = 0.0
    return min(distance_km * rates.rate_per_km, rates.travel_cost_cap)


def calculate_taxes(taxable_amount: float, rates: PricingRates | None = None) -> float:
    """Taxes apply to services and travel together."""
    rates = rates or PricingRates.from_settings()
    return taxable_amount * rates.tax_rate


def price_quote(
    selections: Sequence[SelectedService],
    catalog: ServiceCatalog,
    distance_km: float,
    rates: PricingRates | None = None,
) -> PriceBreakdown:
    rates = rates or PricingRates.from_settings()
    subtotal = calculate_subtotal(selections, catalog)
    travel_cost = calculate_travel_cost(distance_km, rates)
    taxes = calculate_taxes(subtotal + travel_cost, rates)
    return PriceBreakdown(
        subtotal=subtotal,
        travel_cost=travel_cost,
        taxes=taxes,
        total=subtotal + travel_cost + taxes,
    )
