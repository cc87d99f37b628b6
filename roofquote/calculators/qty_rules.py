"""
qtyFrom rule resolution — maps a price-sheet line to its base quantity.

Grammar (closed):
    manual                  → caller-supplied manual quantity
    area_sq | eave_lf | …   → the matching Quantities field
    pins:type=<value>       → sum of qty over pins whose type == value
    anything else           → 0

Resolution is fail-closed: an unknown or malformed rule resolves to 0 and
is reported for catalog review, it never raises. One bad catalog row must
not block pricing of the rest of the estimate.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache

from ..models import QtySourceKind, QUANTITY_FIELDS

logger = logging.getLogger(__name__)

MANUAL_KEYWORD = "manual"
PIN_PREFIX = "pins:"
PIN_FILTER_KEYS = {"type"}


@dataclass(frozen=True)
class QtySource:
    kind: QtySourceKind
    expression: str = ""
    field: str = ""
    key: str = ""
    value: str = ""

    @property
    def resolvable(self) -> bool:
        if self.kind == QtySourceKind.UNKNOWN:
            return False
        if self.kind == QtySourceKind.PIN_FILTER:
            return self.key in PIN_FILTER_KEYS
        return True


@lru_cache(maxsize=1024)
def parse_qty_from(expression) -> QtySource:
    """Parse a qtyFrom string into a QtySource. Never raises."""
    if not isinstance(expression, str):
        return QtySource(QtySourceKind.UNKNOWN, expression=str(expression))
    expr = expression.strip()

    if expr == MANUAL_KEYWORD:
        return QtySource(QtySourceKind.MANUAL, expression=expression)

    if expr in QUANTITY_FIELDS:
        return QtySource(QtySourceKind.DIRECT, expression=expression, field=expr)

    if expr.startswith(PIN_PREFIX):
        # Single key=value equality only — no conjunctions
        remainder = expr[len(PIN_PREFIX):]
        if "=" not in remainder:
            return QtySource(QtySourceKind.UNKNOWN, expression=expression)
        key, value = remainder.split("=", 1)
        return QtySource(
            QtySourceKind.PIN_FILTER,
            expression=expression,
            key=key.strip(),
            value=value.strip(),
        )

    return QtySource(QtySourceKind.UNKNOWN, expression=expression)


def _sum_pins(source: QtySource, pins) -> float:
    if source.key != "type":
        return 0.0
    return float(sum(int(p.qty or 0) for p in pins if p.type == source.value))


def calculate_line_quantity(line, quantities, pins, manual_qty: float = 0.0) -> float:
    """
    Resolve a PriceSheetLine's base quantity.

    Args:
        line: PriceSheetLine (its parsed qtyFrom source)
        quantities: Quantities snapshot
        pins: iterable of Pin
        manual_qty: used verbatim when qtyFrom == "manual"

    Returns:
        float — 0 for any unresolved rule
    """
    source = line.source

    if source.kind == QtySourceKind.MANUAL:
        return manual_qty if manual_qty is not None else 0.0

    if source.kind == QtySourceKind.DIRECT:
        value = getattr(quantities, source.field, 0.0) if quantities is not None else 0.0
        return float(value or 0.0)

    if source.kind == QtySourceKind.PIN_FILTER:
        return _sum_pins(source, pins or ())

    logger.debug("Unresolved qtyFrom rule %r — resolving to 0", source.expression)
    return 0.0


def unresolved_rule_warnings(lines) -> list:
    """
    Catalog-data warnings for lines whose qtyFrom cannot be resolved.
    Kept out of the pricing hot path — run once per price sheet.
    """
    warnings = []
    for line in lines:
        if not line.source.resolvable:
            warnings.append(
                f"Line {line.code}: qtyFrom '{line.qty_from}' is not a recognized "
                f"quantity source — priced at 0. Review the price sheet."
            )
    return warnings

