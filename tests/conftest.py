"""
Shared test fixtures — FastAPI test client and sample takeoff snapshots.
"""

import pytest
from fastapi.testclient import TestClient

from roofquote.main import app
from roofquote.schemas import Edge, Facet, Pin, PriceSheet, PriceSheetLine


def square(side: float, origin=(0.0, 0.0)):
    """Counter-clockwise square ring, implicitly closed."""
    x, y = origin
    return ((x, y), (x + side, y), (x + side, y + side), (x, y + side))


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def sample_facets():
    """Two planes: a 10x10 at 4/12 and a 20x10 flat section."""
    return [
        Facet(id="f1", vertices=square(10), pitch=4),
        Facet(id="f2", vertices=((20, 0), (40, 0), (40, 10), (20, 10)), pitch=0,
              flags={"low_slope": True}),
    ]


@pytest.fixture
def sample_edges():
    return [
        Edge(id="e1", label="EAVE", length_ft=20),
        Edge(id="e2", label="EAVE", length_ft=15),
        Edge(id="e3", label="RIDGE", length_ft=10),
        Edge(id="e4", label="RAKE", length_ft=12.5),
        Edge(id="e5", label=None, length_ft=8),
    ]


@pytest.fixture
def sample_pins():
    return [
        Pin(id="p1", category="DOWNSPOUTS", type="Drain", qty=3),
        Pin(id="p2", category="OFF-RIDGE VENT", type="Vent", qty=2),
        Pin(id="p3", category="DOWNSPOUTS", type="Drain", qty=1),
    ]


@pytest.fixture
def sample_price_sheet():
    return PriceSheet(
        id="tpo-2026",
        name="TPO Standard",
        system="TPO",
        version="3",
        lines=(
            PriceSheetLine(code="MEMB", description="TPO membrane", unit="SQ",
                           qtyFrom="area_sq", unitCost=250, wastePct=10, markupPct=20,
                           taxable=True),
            PriceSheetLine(code="EDGE", description="Edge metal", unit="LF",
                           qtyFrom="eave_lf", unitCost=4, wastePct=5, markupPct=15,
                           taxable=True),
            PriceSheetLine(code="DRAIN", description="Drain outlet", unit="EA",
                           qtyFrom="pins:type=Drain", unitCost=85, wastePct=0, markupPct=10),
            PriceSheetLine(code="DUMP", description="Dumpster", unit="EA",
                           qtyFrom="manual", unitCost=450, wastePct=0, markupPct=0),
        ),
    )
