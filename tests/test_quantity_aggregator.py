"""
Quantity aggregation tests.

Tests:
1-2. Area in squares — single 4/12 facet, per-facet pitch
3-4. Linear feet by label — named sums, unrecognized labels excluded
5-6. Empty geometry and degenerate facets yield zeros
7-9. Report — facet table, advisories for degenerate/steep facets, unlabeled count
10.  Edge length derived from validated endpoints, malformed points rejected
11.  Quantities and facet flags are frozen
"""

import pytest
from pydantic import ValidationError

from roofquote.calculators.geometry import slope_factor
from roofquote.calculators.quantity_aggregator import QuantityAggregator, facet_advisories
from roofquote.schemas import Edge, Facet, Quantities

from conftest import square


def test_single_square_facet_four_twelve():
    q = QuantityAggregator().aggregate([Facet(vertices=square(10), pitch=4)], [])
    assert q.area_sq == pytest.approx(1.0541, abs=1e-4)
    assert q.area_sq == pytest.approx(100 * slope_factor(4) / 100)


def test_each_facet_uses_its_own_pitch(sample_facets):
    q = QuantityAggregator().aggregate(sample_facets, [])
    expected = (100 * slope_factor(4) + 200 * slope_factor(0)) / 100
    assert q.area_sq == pytest.approx(expected)


def test_linear_feet_by_label():
    edges = [
        Edge(label="EAVE", length_ft=20),
        Edge(label="EAVE", length_ft=15),
        Edge(label="RIDGE", length_ft=10),
    ]
    q = QuantityAggregator().aggregate([], edges)
    assert q.eave_lf == 35
    assert q.ridge_lf == 10
    for field in ["rake_lf", "hip_lf", "valley_lf", "wall_lf", "step_lf"]:
        assert getattr(q, field) == 0
    assert q.area_sq == 0


def test_unrecognized_labels_feed_no_sum():
    edges = [
        Edge(label="GUTTER", length_ft=40),
        Edge(label=None, length_ft=12),
        Edge(label="eave", length_ft=9),
        Edge(label="VALLEY", length_ft=6),
    ]
    q = QuantityAggregator().aggregate([], edges)
    assert q.valley_lf == 6
    assert q.eave_lf == 0
    total = sum(getattr(q, f) for f in ["eave_lf", "rake_lf", "ridge_lf", "hip_lf",
                                         "valley_lf", "wall_lf", "step_lf"])
    assert total == 6


def test_empty_geometry_is_all_zero():
    q = QuantityAggregator().aggregate([], [])
    assert q == Quantities()
    assert q.model_dump() == {
        "area_sq": 0.0, "eave_lf": 0.0, "rake_lf": 0.0, "ridge_lf": 0.0,
        "hip_lf": 0.0, "valley_lf": 0.0, "wall_lf": 0.0, "step_lf": 0.0,
    }


def test_degenerate_facet_counts_as_zero_area():
    facets = [Facet(vertices=((0, 0), (10, 0)), pitch=6), Facet(vertices=square(10), pitch=0)]
    q = QuantityAggregator().aggregate(facets, [])
    assert q.area_sq == pytest.approx(1.0)


def test_report_facet_table(sample_facets, sample_edges):
    report = QuantityAggregator().build_report(sample_facets, sample_edges)
    assert len(report.facet_areas) == 2
    f1 = report.facet_areas[0]
    assert f1.facet_id == "f1"
    assert f1.plan_area_sq_ft == pytest.approx(100.0)
    assert f1.area_sq_ft == pytest.approx(100.0 * slope_factor(4))
    assert report.quantities.eave_lf == 35
    assert report.quantities.rake_lf == 12.5


def test_report_unlabeled_edges(sample_facets, sample_edges):
    report = QuantityAggregator().build_report(sample_facets, sample_edges)
    assert report.unlabeled_edge_count == 1
    assert any("no recognized label" in a for a in report.advisories)


def test_advisories_for_degenerate_and_steep_facets():
    facets = [
        Facet(id="tiny", vertices=((0, 0), (1, 1))),
        Facet(id="steep", vertices=square(10), pitch=30),
        Facet(id="normal", vertices=square(10), pitch=6),
    ]
    advisories = facet_advisories(facets, suspicious_pitch=24)
    assert len(advisories) == 2
    assert any("tiny" in a and "0 area" in a for a in advisories)
    assert any("steep" in a and "30/12" in a for a in advisories)
    # Steep pitch is flagged, not rejected
    q = QuantityAggregator().aggregate(facets, [])
    assert q.area_sq == pytest.approx((100 * slope_factor(30) + 100 * slope_factor(6)) / 100)


def test_edge_length_from_endpoints():
    edge = Edge(label="HIP", start=(0, 0), end=(6, 8))
    assert edge.length_ft == pytest.approx(10.0)
    # Explicit length wins over endpoints
    edge = Edge(label="HIP", length_ft=3, start=(0, 0), end=(6, 8))
    assert edge.length_ft == 3


def test_quantities_are_frozen():
    q = Quantities(area_sq=1.0)
    with pytest.raises(ValidationError):
        q.area_sq = 2.0


def test_edge_length_from_string_coordinates():
    edge = Edge(label="EAVE", start=("0", "0"), end=("3", "4"))
    assert edge.length_ft == pytest.approx(5.0)
    q = QuantityAggregator().aggregate([], [edge])
    assert q.eave_lf == pytest.approx(5.0)


def test_edge_without_length_or_points_is_zero():
    assert Edge(label="RAKE").length_ft == 0.0
    assert Edge(label="RAKE", start=(0, 0)).length_ft == 0.0


def test_edge_malformed_point_rejected():
    with pytest.raises(ValidationError):
        Edge(label="EAVE", start=(0, 0, 0), end=(3, 4))
    with pytest.raises(ValidationError):
        Edge(label="EAVE", start={"x": 0, "y": 0}, end=(3, 4))


def test_facet_flags_are_immutable(sample_facets):
    flat = sample_facets[1]
    assert flat.flags == (("low_slope", True),)
    assert flat.has_flag("low_slope")
    assert not flat.has_flag("tear_off")
    assert not Facet(vertices=square(10), flags={"tear_off": False}).has_flag("tear_off")
    with pytest.raises(TypeError):
        flat.flags[0] = ("tear_off", True)
