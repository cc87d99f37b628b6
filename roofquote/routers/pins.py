from fastapi import APIRouter

from .. import schemas
from ..calculators.material_selection import MaterialSelector

router = APIRouter(prefix="/pins", tags=["pins"])


@router.post("/materials", response_model=schemas.PinMaterialsResponse)
def pin_materials(body: schemas.PinMaterialsRequest):
    """Candidate catalog materials for each pin, keyed by pin id."""
    selector = MaterialSelector(body.rules)
    materials, advisories = selector.materials_for_pins(body.pins, body.catalog)
    return {"materials": materials, "advisories": advisories}
