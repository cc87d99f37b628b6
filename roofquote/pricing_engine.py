"""
Pricing Engine.

Resolves every price-sheet line against the Quantities/Pin snapshot and
rolls the extended prices into an EstimateTotals record.
Pure math — quantity × waste × unit cost × markup, then overhead and profit.

Input: PriceSheet + Quantities + Pins + manual quantities
Output: PricedEstimate
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor

from .calculators.qty_rules import calculate_line_quantity, unresolved_rule_warnings
from .config import settings
from .schemas import EstimateTotals, PricedEstimate, PricedLine

logger = logging.getLogger(__name__)


class InvalidParameterError(ValueError):
    """Negative or non-finite pricing input, rejected before any arithmetic."""


def _require_finite(name: str, value) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidParameterError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(number):
        raise InvalidParameterError(f"{name} must be finite, got {value!r}")
    return number


def _require_non_negative(name: str, value) -> float:
    number = _require_finite(name, value)
    if number < 0:
        raise InvalidParameterError(f"{name} must not be negative, got {number:g}")
    return number


def calculate_extended_price(base_qty: float, waste_pct: float,
                             unit_cost: float, markup_pct: float) -> float:
    """
    Waste first, then markup on the wasted material cost:
        wasted_qty    = base_qty × (1 + waste%/100)
        material_cost = wasted_qty × unit_cost
        result        = material_cost × (1 + markup%/100)
    """
    base_qty = _require_finite("base_qty", base_qty)
    waste_pct = _require_non_negative("waste_pct", waste_pct)
    unit_cost = _require_non_negative("unit_cost", unit_cost)
    markup_pct = _require_non_negative("markup_pct", markup_pct)

    wasted_qty = base_qty * (1 + waste_pct / 100.0)
    material_cost = wasted_qty * unit_cost
    return material_cost * (1 + markup_pct / 100.0)


def calculate_estimate_totals(subtotal: float, overhead_pct: float = 10.0,
                              profit_pct: float = 15.0) -> EstimateTotals:
    """
    Profit compounds on cost including overhead:
        overhead = subtotal × overhead%/100
        profit   = (subtotal + overhead) × profit%/100
        total    = subtotal + overhead + profit
    """
    subtotal = _require_finite("subtotal", subtotal)
    overhead_pct = _require_non_negative("overhead_pct", overhead_pct)
    profit_pct = _require_non_negative("profit_pct", profit_pct)

    overhead = subtotal * overhead_pct / 100.0
    profit = (subtotal + overhead) * profit_pct / 100.0
    return EstimateTotals(
        subtotal=subtotal,
        overhead=overhead,
        profit=profit,
        total=subtotal + overhead + profit,
    )


class PricingEngine:
    """
    Assembles a PricedEstimate from one price sheet and one geometry snapshot.

    Lines are independent: each reads the shared frozen snapshots and writes
    only its own PricedLine, so they may be priced on a thread pool.
    A line with invalid parameters is priced at 0 and flagged; the rest of
    the estimate still prices.
    """

    def __init__(self, max_workers: int = None):
        self.max_workers = max_workers if max_workers is not None else settings.PRICING_MAX_WORKERS

    def price_line(self, line, quantities, pins, manual_qty: float = 0.0) -> PricedLine:
        """Resolve and price a single line. Never raises."""
        resolved = calculate_line_quantity(line, quantities, pins, manual_qty)
        try:
            extended = calculate_extended_price(
                resolved, line.waste_pct, line.unit_cost, line.markup_pct,
            )
        except InvalidParameterError as e:
            logger.warning("Line %s flagged: %s", line.code, e)
            return PricedLine(
                line=line,
                resolved_qty=resolved,
                extended_price=0.0,
                flagged=True,
                flag_reason=str(e),
            )
        return PricedLine(line=line, resolved_qty=resolved, extended_price=extended)

    def price_lines(self, lines, quantities, pins, manual_quantities: dict = None) -> list:
        """Price every line, results in sheet order."""
        manual_quantities = dict(manual_quantities or {})
        pins = tuple(pins or ())
        lines = tuple(lines)

        def _price(line):
            return self.price_line(line, quantities, pins, manual_quantities.get(line.code, 0.0))

        if self.max_workers <= 1 or len(lines) <= 1:
            return [_price(line) for line in lines]
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            return list(pool.map(_price, lines))

    def build_priced_estimate(self, price_sheet, quantities, pins=(),
                              manual_quantities: dict = None,
                              overhead_pct: float = None,
                              profit_pct: float = None) -> PricedEstimate:
        """
        Assembles the PricedEstimate.

        Args:
            price_sheet: PriceSheet (immutable for the duration of the call)
            quantities: Quantities snapshot
            pins: Pin snapshot for pins:type=… lines
            manual_quantities: {line code: qty} for qtyFrom == "manual"
            overhead_pct / profit_pct: None uses settings defaults

        Returns:
            PricedEstimate — always; problems surface as flags and warnings
        """
        advisories = []
        overhead_pct, profit_pct = self._resolve_rates(overhead_pct, profit_pct, advisories)

        priced = self.price_lines(price_sheet.lines, quantities, pins, manual_quantities)

        subtotal = math.fsum(p.extended_price for p in priced if not p.flagged)
        taxable_subtotal = math.fsum(
            p.extended_price for p in priced if not p.flagged and p.line.taxable
        )
        totals = calculate_estimate_totals(subtotal, overhead_pct, profit_pct)

        catalog_warnings = unresolved_rule_warnings(price_sheet.lines)
        for warning in catalog_warnings:
            logger.warning("Price sheet %s: %s", price_sheet.id or price_sheet.name, warning)

        for p in priced:
            if p.flagged:
                advisories.append(f"Line {p.line.code} priced at 0: {p.flag_reason}")

        return PricedEstimate(
            price_sheet_id=price_sheet.id,
            system=price_sheet.system,
            version=price_sheet.version,
            lines=priced,
            overhead_pct=overhead_pct,
            profit_pct=profit_pct,
            taxable_subtotal=taxable_subtotal,
            totals=totals,
            catalog_warnings=catalog_warnings,
            advisories=advisories,
        )

    def recalculate_totals(self, estimate: PricedEstimate, overhead_pct: float,
                           profit_pct: float) -> PricedEstimate:
        """
        Re-roll totals with new overhead/profit percentages.
        Returns a new PricedEstimate; line prices are not re-resolved.
        """
        advisories = list(estimate.advisories)
        overhead_pct, profit_pct = self._resolve_rates(overhead_pct, profit_pct, advisories)
        totals = calculate_estimate_totals(estimate.totals.subtotal, overhead_pct, profit_pct)
        return estimate.model_copy(update={
            "overhead_pct": overhead_pct,
            "profit_pct": profit_pct,
            "totals": totals,
            "advisories": advisories,
        })

    def _resolve_rates(self, overhead_pct, profit_pct, advisories: list) -> tuple:
        """Invalid roll-up percentages fall back to the configured defaults."""
        resolved = []
        for name, value, default in (
            ("overhead_pct", overhead_pct, settings.OVERHEAD_PCT_DEFAULT),
            ("profit_pct", profit_pct, settings.PROFIT_PCT_DEFAULT),
        ):
            if value is None:
                resolved.append(default)
                continue
            try:
                resolved.append(_require_non_negative(name, value))
            except InvalidParameterError as e:
                logger.warning("%s — using default %g", e, default)
                advisories.append(f"{e}; default {default:g}% used.")
                resolved.append(default)
        return resolved[0], resolved[1]
