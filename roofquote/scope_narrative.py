"""
Scope Narrative Builder — fills a roofing-system template with Quantities.

Every number in the narrative comes from the Quantities record passed in,
formatted to one decimal place. Nothing is recomputed here.
Unknown systems get a single generic sentence instead of an error.
"""

from .config import settings
from .models import QUANTITY_FIELDS, RoofSystem

GENERIC_SCOPE = (
    "Scope of work for the selected roofing system will be provided upon request."
)

SCOPE_TEMPLATES = {
    RoofSystem.TPO: (
        "SCOPE OF WORK — TPO SINGLE-PLY MEMBRANE\n"
        "\n"
        "1. Prepare approximately {area_sq} squares of roof deck to receive a new "
        "TPO membrane system. Remove loose debris and verify the substrate is sound.\n"
        "2. Install insulation and cover board per manufacturer requirements, then "
        "fully adhere or mechanically fasten the TPO membrane over {area_sq} squares. "
        "Heat-weld all seams.\n"
        "3. Install TPO-coated metal edge along {eave_lf} LF of eaves and {rake_lf} LF "
        "of rakes.\n"
        "4. Flash {wall_lf} LF of wall and parapet terminations with membrane, "
        "termination bar and counterflashing; flash {step_lf} LF of step conditions.\n"
        "5. Detail {ridge_lf} LF of ridge, {hip_lf} LF of hips and {valley_lf} LF of "
        "valleys with reinforced membrane strips.\n"
        "6. Flash all penetrations and equipment curbs, clean the site and haul away "
        "all debris.\n"
    ),
    RoofSystem.METAL: (
        "SCOPE OF WORK — STANDING SEAM METAL ROOF\n"
        "\n"
        "1. Install high-temperature synthetic underlayment over approximately "
        "{area_sq} squares of roof deck.\n"
        "2. Install standing seam metal panels over {area_sq} squares, fastened with "
        "concealed clips per manufacturer spacing.\n"
        "3. Install eave trim along {eave_lf} LF and rake/gable trim along {rake_lf} LF.\n"
        "4. Install vented ridge cap along {ridge_lf} LF and hip cap along {hip_lf} LF.\n"
        "5. Install valley pans along {valley_lf} LF.\n"
        "6. Install sidewall and headwall flashing along {wall_lf} LF and step flashing "
        "along {step_lf} LF.\n"
        "7. Flash all penetrations with metal roof boots, clean the site and haul away "
        "all debris.\n"
    ),
    RoofSystem.SHINGLE: (
        "SCOPE OF WORK — ARCHITECTURAL ASPHALT SHINGLES\n"
        "\n"
        "1. Remove existing roofing down to the deck over approximately {area_sq} "
        "squares and inspect decking.\n"
        "2. Install synthetic underlayment and ice and water shield at eaves and "
        "valleys.\n"
        "3. Install drip edge along {eave_lf} LF of eaves and {rake_lf} LF of rakes, "
        "with starter strip at all eaves.\n"
        "4. Install architectural shingles over {area_sq} squares per manufacturer "
        "nailing pattern.\n"
        "5. Install ridge vent and ridge cap along {ridge_lf} LF and hip cap along "
        "{hip_lf} LF.\n"
        "6. Install valley metal along {valley_lf} LF.\n"
        "7. Install headwall flashing along {wall_lf} LF and step flashing along "
        "{step_lf} LF.\n"
        "8. Replace pipe boots and vents, clean the site and haul away all debris.\n"
    ),
}


class ScopeNarrativeBuilder:
    """
    Builds the scope-of-work text for a roofing system.
    """

    def __init__(self, company_name: str = None, templates: dict = None):
        self.company_name = company_name if company_name is not None else settings.COMPANY_NAME
        self.templates = templates if templates is not None else SCOPE_TEMPLATES

    def build(self, system: str, quantities) -> str:
        """
        Args:
            system: "TPO" | "METAL" | "SHINGLE" (case-insensitive)
            quantities: Quantities record

        Returns:
            narrative text, or GENERIC_SCOPE for an unknown system
        """
        roof_system = self._normalize_system(system)
        if roof_system is None or roof_system not in self.templates:
            return GENERIC_SCOPE

        body = self.templates[roof_system].format(**self._format_quantities(quantities))
        header = f"{self.company_name} — {roof_system.value} Roofing Proposal\n\n"
        return header + body

    def _normalize_system(self, system):
        try:
            return RoofSystem(str(system).strip().upper())
        except ValueError:
            return None

    def _format_quantities(self, quantities) -> dict:
        return {
            field: f"{float(getattr(quantities, field, 0.0) or 0.0):.1f}"
            for field in QUANTITY_FIELDS
        }


def generate_scope_content(system: str, quantities) -> str:
    return ScopeNarrativeBuilder().build(system, quantities)
