import enum


# --- Enums ---

class EdgeLabel(str, enum.Enum):
    EAVE = "EAVE"
    RAKE = "RAKE"
    RIDGE = "RIDGE"
    HIP = "HIP"
    VALLEY = "VALLEY"
    WALL = "WALL"
    STEP = "STEP"


class RoofSystem(str, enum.Enum):
    TPO = "TPO"
    METAL = "METAL"
    SHINGLE = "SHINGLE"


class QtySourceKind(str, enum.Enum):
    DIRECT = "direct"
    MANUAL = "manual"
    PIN_FILTER = "pin_filter"
    UNKNOWN = "unknown"


# Edge label → Quantities field. Labels outside this map feed no named sum.
EDGE_LABEL_FIELDS = {
    EdgeLabel.EAVE: "eave_lf",
    EdgeLabel.RAKE: "rake_lf",
    EdgeLabel.RIDGE: "ridge_lf",
    EdgeLabel.HIP: "hip_lf",
    EdgeLabel.VALLEY: "valley_lf",
    EdgeLabel.WALL: "wall_lf",
    EdgeLabel.STEP: "step_lf",
}

LINEAR_FIELDS = list(EDGE_LABEL_FIELDS.values())

# Direct qtyFrom keys — every numeric field of Quantities
QUANTITY_FIELDS = ["area_sq"] + LINEAR_FIELDS

SQ_FT_PER_SQUARE = 100.0


# --- Pin taxonomy — authoritative list of pin categories ---

PIN_CATEGORIES = [
    "EQUIPMENT CURB",
    "HIP STARTERS",
    "REMOVE AND REPLACE WOOD",
    "OFF-RIDGE VENT",
    "FLUE & CHIMNEY CAPS",
    "SKYLIGHTS",
    "PLUMBING BOOTS",
    "CHIMNEY FLASHING",
    "PAINT & SEALANT",
    "MISCELLANEOUS",
    "DOWNSPOUTS",
    "INSPECTION PINS",
    "INSULATION",
    "EXCLUSIONS",
    "REMOVE",
    "ADDITIONAL ITEMS",
]
