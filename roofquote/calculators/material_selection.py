"""
Pin → material selection.

An ordered MaterialMappingRule table maps a pin's category (and optionally
its name) to material categories and name patterns in a flat catalog.
Every matching rule contributes — results are unioned across rules, then
de-duplicated by material name (last write wins).

Rule table fallback chain:
1. JSON file at settings.MATERIAL_RULES_PATH (if set)
2. DEFAULT_MAPPING_RULES from this file

Matching is read-only: neither the catalog nor the rule table is mutated.
"""

import json
import logging
import re
from functools import lru_cache

from ..config import settings
from ..schemas import MaterialMappingRule

logger = logging.getLogger(__name__)

# Without name patterns a rule takes at most this many category matches
CATEGORY_MATCH_CAP = 2

# Built-in rules — one row per pin category/name family, in evaluation order
DEFAULT_MAPPING_RULES = [
    # Equipment curbs — membrane depends on the roof system named on the pin
    {"pinCategory": "EQUIPMENT CURB", "namePattern": "tpo",
     "materialCategories": ["TPO", "Flashing"],
     "materialNamePatterns": ["tpo", "termination bar", "counterflashing"]},
    {"pinCategory": "EQUIPMENT CURB", "namePattern": "torch",
     "materialCategories": ["Modified Bitumen", "Flashing"],
     "materialNamePatterns": ["cap sheet", "base sheet", "counterflashing"]},
    {"pinCategory": "EQUIPMENT CURB", "namePattern": "shingle",
     "materialCategories": ["Shingles", "Flashing"],
     "materialNamePatterns": ["step", "saddle", "shingle"]},
    {"pinCategory": "EQUIPMENT CURB", "namePattern": "standing seam",
     "materialCategories": ["Metal"],
     "materialNamePatterns": ["standing seam", "curb"]},
    {"pinCategory": "EQUIPMENT CURB",
     "materialCategories": ["Lumber"]},
    # Skylights
    {"pinCategory": "SKYLIGHTS", "namePattern": "flashing kit",
     "materialCategories": ["Skylight", "Flashing"],
     "materialNamePatterns": ["flashing kit"]},
    {"pinCategory": "SKYLIGHTS", "namePattern": "solatube|sun tunnel",
     "materialCategories": ["Skylight"],
     "materialNamePatterns": ["solatube", "tunnel"]},
    {"pinCategory": "SKYLIGHTS", "namePattern": "glass",
     "materialCategories": ["Skylight"],
     "materialNamePatterns": ["low e", "glass"]},
    {"pinCategory": "SKYLIGHTS",
     "materialCategories": ["Sealant"]},
    # Plumbing boots
    {"pinCategory": "PLUMBING BOOTS", "namePattern": "lead",
     "materialCategories": ["Plumbing", "Flashing"],
     "materialNamePatterns": ["lead"]},
    {"pinCategory": "PLUMBING BOOTS", "namePattern": "tpo",
     "materialCategories": ["TPO", "Plumbing"],
     "materialNamePatterns": ["tpo", "boot"]},
    {"pinCategory": "PLUMBING BOOTS", "namePattern": "pvc",
     "materialCategories": ["PVC", "Plumbing"],
     "materialNamePatterns": ["pvc", "boot"]},
    {"pinCategory": "PLUMBING BOOTS", "namePattern": "jack pipe",
     "materialCategories": ["Plumbing"],
     "materialNamePatterns": ["jack"]},
    {"pinCategory": "PLUMBING BOOTS", "namePattern": "rubber collar",
     "materialCategories": ["Plumbing"],
     "materialNamePatterns": ["collar"]},
    # Chimney flashing
    {"pinCategory": "CHIMNEY FLASHING",
     "materialCategories": ["Flashing"],
     "materialNamePatterns": ["chimney", "counter", "cricket"]},
    {"pinCategory": "CHIMNEY FLASHING", "namePattern": "paint|seal",
     "materialCategories": ["Sealant", "Paint"]},
    # Flue & chimney caps
    {"pinCategory": "FLUE & CHIMNEY CAPS",
     "materialCategories": ["Vent", "Flashing"],
     "materialNamePatterns": ["flue", "oval", "spark", "chimney cap"]},
    # Ventilation
    {"pinCategory": "OFF-RIDGE VENT",
     "materialCategories": ["Vent"],
     "materialNamePatterns": ["vent"]},
    {"pinCategory": "OFF-RIDGE VENT", "namePattern": "o'?hag[ai]n",
     "materialCategories": ["Vent"],
     "materialNamePatterns": ["o'?hag[ai]n"]},
    # Hip starters
    {"pinCategory": "HIP STARTERS",
     "materialCategories": ["Shingles", "Tile"],
     "materialNamePatterns": ["hip", "ridge", "starter"]},
    # Downspouts
    {"pinCategory": "DOWNSPOUTS", "namePattern": "drain|outlet",
     "materialCategories": ["Drainage"],
     "materialNamePatterns": ["drain", "outlet"]},
    {"pinCategory": "DOWNSPOUTS", "namePattern": "downspout|spout",
     "materialCategories": ["Gutters", "Drainage"],
     "materialNamePatterns": ["downspout", "elbow"]},
    {"pinCategory": "DOWNSPOUTS", "namePattern": "scupper",
     "materialCategories": ["Drainage", "Sheet Metal"],
     "materialNamePatterns": ["scupper"]},
    # Wood repair
    {"pinCategory": "REMOVE AND REPLACE WOOD", "namePattern": "plywood|sheathing|deck",
     "materialCategories": ["Lumber", "Decking"],
     "materialNamePatterns": ["plywood", "osb", "sheathing", "deck"]},
    {"pinCategory": "REMOVE AND REPLACE WOOD", "namePattern": "fascia|rafter",
     "materialCategories": ["Lumber"],
     "materialNamePatterns": ["2x", "fascia"]},
    # Insulation
    {"pinCategory": "INSULATION",
     "materialCategories": ["Insulation"]},
    # Paint & sealant
    {"pinCategory": "PAINT & SEALANT",
     "materialCategories": ["Sealant", "Paint", "Adhesive"]},
]


def _build_rules(rows) -> tuple:
    return tuple(MaterialMappingRule.model_validate(row) for row in rows)


def load_mapping_rules(path: str = None) -> tuple:
    """
    Load an ordered rule table.
    Falls back to DEFAULT_MAPPING_RULES when no path is configured.
    A configured path that cannot be read is an error.
    """
    if path is None:
        path = settings.MATERIAL_RULES_PATH
    if not path:
        return _build_rules(DEFAULT_MAPPING_RULES)
    with open(path) as f:
        rows = json.load(f)
    rules = _build_rules(rows)
    logger.info("Loaded %d material mapping rules from %s", len(rules), path)
    return rules


@lru_cache(maxsize=512)
def _compile(pattern: str):
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error:
        logger.warning("Invalid material pattern %r — matching as literal text", pattern)
        return re.compile(re.escape(pattern), re.IGNORECASE)


def pattern_matches(pattern: str, text: str) -> bool:
    """Case-insensitive regex search; broken patterns match literally."""
    return _compile(pattern).search(text or "") is not None


class MaterialSelector:
    """
    Selects candidate catalog materials for a pin from an ordered rule table.
    """

    def __init__(self, rules=None):
        self.rules = tuple(rules) if rules is not None else load_mapping_rules()

    def matching_rules(self, pin_name: str, pin_category: str) -> list:
        """Every rule for the pin's category whose name pattern (if any) matches."""
        return [
            rule for rule in self.rules
            if rule.pin_category == pin_category
            and (not rule.name_pattern or pattern_matches(rule.name_pattern, pin_name))
        ]

    def get_materials_for_pin(self, pin_name: str, pin_category: str, catalog) -> list:
        """
        Returns the de-duplicated union of materials from all matching rules.
        Empty list when nothing matches — a normal outcome, not an error.
        """
        selected = {}
        for rule in self.matching_rules(pin_name, pin_category):
            for material in self._materials_for_rule(rule, catalog):
                selected[material.name] = material
        return list(selected.values())

    def materials_for_pins(self, pins, catalog) -> tuple:
        """
        Returns ({pin_id: [Material]}, advisories).
        Pins without an id are keyed by their position.
        """
        result = {}
        advisories = []
        for i, pin in enumerate(pins):
            key = pin.id if pin.id is not None else str(i)
            materials = self.get_materials_for_pin(pin.type, pin.category, catalog)
            result[key] = materials
            if not materials:
                advisories.append(
                    f"No mapping found for pin '{pin.type}' ({pin.category})."
                )
        return result, advisories

    def _materials_for_rule(self, rule, catalog) -> list:
        wanted = [c.lower() for c in rule.material_categories]
        by_category = [
            m for m in catalog
            if any(c in (m.category or "").lower() for c in wanted)
        ]
        if rule.material_name_patterns:
            return [
                m for m in by_category
                if any(pattern_matches(p, m.name) for p in rule.material_name_patterns)
            ]
        return by_category[:CATEGORY_MATCH_CAP]


def get_materials_for_pin(pin_name: str, pin_category: str, catalog, rules=None) -> list:
    """Convenience wrapper around MaterialSelector.get_materials_for_pin."""
    return MaterialSelector(rules).get_materials_for_pin(pin_name, pin_category, catalog)
