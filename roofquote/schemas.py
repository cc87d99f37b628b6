"""
Boundary records for the takeoff → quantities → pricing pipeline.

Every snapshot model is frozen so a batch resolve can share it across
worker threads without copying.
"""
from pydantic import BaseModel, Field, PrivateAttr, field_validator, model_validator
from typing import Optional, List, Dict, Tuple

from .calculators.geometry import line_length_ft
from .calculators.qty_rules import QtySource, parse_qty_from

Point = Tuple[float, float]


# --- Geometry ---

class Facet(BaseModel):
    id: Optional[str] = None
    vertices: Tuple[Point, ...] = ()
    pitch: float = 4.0
    story: int = 1
    # (name, enabled) pairs; a mapping is accepted on input
    flags: Tuple[Tuple[str, bool], ...] = ()

    class Config:
        frozen = True

    @field_validator("flags", mode="before")
    @classmethod
    def _flags_from_mapping(cls, value):
        if isinstance(value, dict):
            return tuple(value.items())
        return value

    def has_flag(self, name: str) -> bool:
        return any(flag == name and enabled for flag, enabled in self.flags)


class Edge(BaseModel):
    id: Optional[str] = None
    label: Optional[str] = None
    length_ft: Optional[float] = None
    start: Optional[Point] = None
    end: Optional[Point] = None

    class Config:
        frozen = True

    @model_validator(mode="after")
    def _derive_length(self):
        """Fill length_ft from the endpoints when the drawing tool omits it."""
        if self.length_ft is None:
            length = 0.0
            if self.start is not None and self.end is not None:
                length = line_length_ft(self.start, self.end)
            object.__setattr__(self, "length_ft", length)
        return self


class Pin(BaseModel):
    id: Optional[str] = None
    category: str
    type: str = ""
    size: Optional[str] = None
    qty: int = 1

    class Config:
        frozen = True


class Quantities(BaseModel):
    area_sq: float = 0.0
    eave_lf: float = 0.0
    rake_lf: float = 0.0
    ridge_lf: float = 0.0
    hip_lf: float = 0.0
    valley_lf: float = 0.0
    wall_lf: float = 0.0
    step_lf: float = 0.0

    class Config:
        frozen = True


class FacetArea(BaseModel):
    facet_id: Optional[str] = None
    plan_area_sq_ft: float
    slope_factor: float
    area_sq_ft: float


class QuantityReport(BaseModel):
    quantities: Quantities
    facet_areas: List[FacetArea] = []
    unlabeled_edge_count: int = 0
    advisories: List[str] = []


# --- Price sheet ---

class PriceSheetLine(BaseModel):
    code: str
    description: str = ""
    unit: str = "ea"
    qty_from: str = Field("manual", alias="qtyFrom")
    unit_cost: float = Field(0.0, alias="unitCost")
    waste_pct: float = Field(0.0, alias="wastePct")
    markup_pct: float = Field(0.0, alias="markupPct")
    taxable: bool = False

    _source: Optional[QtySource] = PrivateAttr(default=None)

    class Config:
        frozen = True
        populate_by_name = True

    def model_post_init(self, context):
        self._source = parse_qty_from(self.qty_from)

    @property
    def source(self) -> QtySource:
        """qtyFrom parsed once at construction."""
        return self._source


class PriceSheet(BaseModel):
    id: Optional[str] = None
    name: str = ""
    system: str = ""
    version: str = "1"
    lines: Tuple[PriceSheetLine, ...] = ()

    class Config:
        frozen = True


class PricedLine(BaseModel):
    line: PriceSheetLine
    resolved_qty: float = 0.0
    extended_price: float = 0.0
    flagged: bool = False
    flag_reason: Optional[str] = None


class EstimateTotals(BaseModel):
    subtotal: float = 0.0
    overhead: float = 0.0
    profit: float = 0.0
    total: float = 0.0


class PricedEstimate(BaseModel):
    price_sheet_id: Optional[str] = None
    system: str = ""
    version: str = "1"
    lines: List[PricedLine] = []
    overhead_pct: float
    profit_pct: float
    taxable_subtotal: float = 0.0
    totals: EstimateTotals
    catalog_warnings: List[str] = []
    advisories: List[str] = []


# --- Materials ---

class Material(BaseModel):
    name: str
    category: str = ""
    unit: Optional[str] = None
    unit_cost: Optional[float] = None

    class Config:
        frozen = True


class MaterialMappingRule(BaseModel):
    pin_category: str = Field(alias="pinCategory")
    name_pattern: Optional[str] = Field(None, alias="namePattern")
    material_categories: Tuple[str, ...] = Field((), alias="materialCategories")
    material_name_patterns: Tuple[str, ...] = Field((), alias="materialNamePatterns")

    class Config:
        frozen = True
        populate_by_name = True


# --- HTTP request bodies ---

class TakeoffRequest(BaseModel):
    facets: List[Facet] = []
    edges: List[Edge] = []


class EstimateRequest(BaseModel):
    price_sheet: PriceSheet
    quantities: Optional[Quantities] = None
    facets: List[Facet] = []
    edges: List[Edge] = []
    pins: List[Pin] = []
    manual_quantities: Dict[str, float] = {}
    overhead_pct: Optional[float] = None
    profit_pct: Optional[float] = None


class ScopeRequest(BaseModel):
    system: str
    quantities: Quantities


class ScopeResponse(BaseModel):
    system: str
    content: str


class PinMaterialsRequest(BaseModel):
    pins: List[Pin]
    catalog: List[Material]
    rules: Optional[List[MaterialMappingRule]] = None


class PinMaterialsResponse(BaseModel):
    materials: Dict[str, List[Material]] = {}
    advisories: List[str] = []
