"""
FFF competition phases.
The federation splits a competition calendar into phases; youth teams play
in phase 2, every other category in phase 1.
"""
from enum import IntEnum
from typing import Dict, Optional


class Phase(IntEnum):
    SENIOR = 1
    YOUTH = 2


# Lower-cased team category -> phase
CATEGORY_PHASES: Dict[str, Phase] = {
    "jeune": Phase.YOUTH,
}

DEFAULT_PHASE = Phase.SENIOR


def phase_for_category(category: Optional[str]) -> Phase:
    """Resolve the phase of a team category; unknown categories are senior."""
    if not category:
        return DEFAULT_PHASE
    return CATEGORY_PHASES.get(category.strip().lower(), DEFAULT_PHASE)
