"""
Estimate endpoints — stateless wrappers around the pricing pipeline.

POST /api/estimate/quantities      — takeoff → QuantityReport
POST /api/estimate/quantities.csv  — takeoff → CSV download
POST /api/estimate/price           — price sheet + snapshot → PricedEstimate
POST /api/estimate/scope           — system + Quantities → narrative text

Nothing here is persisted; the caller owns storage.
"""

from fastapi import APIRouter
from fastapi.responses import Response

from .. import schemas
from ..calculators.quantity_aggregator import QuantityAggregator
from ..export import quantities_csv
from ..pricing_engine import PricingEngine
from ..scope_narrative import ScopeNarrativeBuilder

router = APIRouter(prefix="/estimate", tags=["estimate"])


@router.post("/quantities", response_model=schemas.QuantityReport)
def takeoff_quantities(body: schemas.TakeoffRequest):
    return QuantityAggregator().build_report(body.facets, body.edges)


@router.post("/quantities.csv")
def takeoff_quantities_csv(body: schemas.TakeoffRequest):
    quantities = QuantityAggregator().aggregate(body.facets, body.edges)
    return Response(
        content=quantities_csv(quantities),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="quantities.csv"'},
    )


@router.post("/price", response_model=schemas.PricedEstimate)
def price_estimate(body: schemas.EstimateRequest):
    """
    Price a sheet against supplied Quantities, or against Quantities
    aggregated from the supplied facets/edges when none are given.
    """
    quantities = body.quantities
    if quantities is None:
        quantities = QuantityAggregator().aggregate(body.facets, body.edges)
    return PricingEngine().build_priced_estimate(
        body.price_sheet,
        quantities,
        pins=body.pins,
        manual_quantities=body.manual_quantities,
        overhead_pct=body.overhead_pct,
        profit_pct=body.profit_pct,
    )


@router.post("/scope", response_model=schemas.ScopeResponse)
def scope_of_work(body: schemas.ScopeRequest):
    content = ScopeNarrativeBuilder().build(body.system, body.quantities)
    return {"system": body.system, "content": content}
