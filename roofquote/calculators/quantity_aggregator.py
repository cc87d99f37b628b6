"""
Quantity Aggregator — turns drawn Facets and Edges into a Quantities record.

Quantities is derived, never hand-edited: recompute whenever geometry
changes. Each facet's own pitch governs its own slope adjustment.
Empty geometry yields an all-zero record; this never fails.
"""

import logging
import math

from ..config import settings
from ..models import EDGE_LABEL_FIELDS, LINEAR_FIELDS, SQ_FT_PER_SQUARE
from ..schemas import FacetArea, Quantities, QuantityReport
from .geometry import plan_area_sq_ft, slope_factor

logger = logging.getLogger(__name__)

_LABEL_TO_FIELD = {label.value: field for label, field in EDGE_LABEL_FIELDS.items()}


def facet_advisories(facets, suspicious_pitch: float = None) -> list:
    """Warnings for degenerate facets and suspiciously steep pitches."""
    if suspicious_pitch is None:
        suspicious_pitch = settings.SUSPICIOUS_PITCH
    advisories = []
    for i, facet in enumerate(facets):
        name = facet.id or f"#{i + 1}"
        if len(facet.vertices) < 3:
            advisories.append(
                f"Facet {name} has {len(facet.vertices)} vertices — counted as 0 area."
            )
        if facet.pitch > suspicious_pitch:
            advisories.append(
                f"Facet {name} pitch {facet.pitch:g}/12 exceeds {suspicious_pitch:g}/12 — verify."
            )
    return advisories


class QuantityAggregator:
    """Aggregates one project's geometry into a Quantities snapshot."""

    def facet_area(self, facet) -> FacetArea:
        plan = plan_area_sq_ft(facet.vertices)
        factor = slope_factor(facet.pitch)
        return FacetArea(
            facet_id=facet.id,
            plan_area_sq_ft=plan,
            slope_factor=factor,
            area_sq_ft=plan * factor,
        )

    def aggregate(self, facets, edges) -> Quantities:
        """
        area_sq = Σ(plan area × slope factor) / 100
        *_lf    = Σ length_ft over edges carrying that label
        """
        area_sq_ft = math.fsum(
            plan_area_sq_ft(f.vertices) * slope_factor(f.pitch) for f in facets
        )
        return Quantities(
            area_sq=area_sq_ft / SQ_FT_PER_SQUARE,
            **self._linear_totals(edges),
        )

    def build_report(self, facets, edges, suspicious_pitch: float = None) -> QuantityReport:
        """Quantities plus per-facet areas and advisories for the operator."""
        facet_areas = [self.facet_area(f) for f in facets]
        quantities = self.aggregate(facets, edges)

        unlabeled = sum(1 for e in edges if e.label not in _LABEL_TO_FIELD)
        advisories = facet_advisories(facets, suspicious_pitch)
        if unlabeled:
            advisories.append(
                f"{unlabeled} edge(s) have no recognized label and are excluded "
                f"from linear-foot totals."
            )
        for note in advisories:
            logger.info("Takeoff advisory: %s", note)

        return QuantityReport(
            quantities=quantities,
            facet_areas=facet_areas,
            unlabeled_edge_count=unlabeled,
            advisories=advisories,
        )

    def _linear_totals(self, edges) -> dict:
        buckets = {field: [] for field in LINEAR_FIELDS}
        for edge in edges:
            field = _LABEL_TO_FIELD.get(edge.label)
            if field is not None:
                buckets[field].append(edge.length_ft)
        return {field: math.fsum(lengths) for field, lengths in buckets.items()}
