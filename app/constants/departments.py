"""Production department names and the tables that suggest them."""

from typing import Dict

from app.models.enums import ElementType

CAST = "Cast"
COSTUME = "Costume"
PROPS = "Props"
SET_DESIGN = "Set Design"
LOCATIONS = "Locations"
HAIR_AND_MAKEUP = "Hair & Makeup"
VFX = "VFX"
SOUND = "Sound"

ELEMENT_TYPE_DEPARTMENT_MAP: Dict[ElementType, str] = {
    ElementType.CHARACTER: CAST,
    ElementType.LOCATION: LOCATIONS,
    ElementType.OTHER: PROPS,
}

# Final Draft TagData category -> department
TAG_CATEGORY_DEPARTMENT_MAP: Dict[str, str] = {
    "Props": PROPS,
    "Vehicles": PROPS,
    "Wardrobe": COSTUME,
    "Costume": COSTUME,
    "Hair": HAIR_AND_MAKEUP,
    "Makeup": HAIR_AND_MAKEUP,
    "Hair & Makeup": HAIR_AND_MAKEUP,
    "Set Dressing": SET_DESIGN,
    "Special Effects": VFX,
    "Visual Effects": VFX,
    "Sound Effects": SOUND,
    "Music": SOUND,
}
