"""Fighter operation handlers."""

from gangroster.core.handlers.fighter.advancement import (
    FighterAdvancementDeletionResult,
    FighterAdvancementResult,
    handle_advancement_deletion,
    handle_characteristic_advancement,
    handle_skill_advancement,
)
from gangroster.core.handlers.fighter.details import (
    FieldChange,
    FighterDetailsResult,
    handle_fighter_details_update,
)
from gangroster.core.handlers.fighter.effects import (
    FighterEffectsResult,
    handle_fighter_effects_update,
)
from gangroster.core.handlers.fighter.status import (
    FighterStatusResult,
    handle_fighter_status_change,
)
from gangroster.core.handlers.fighter.xp import (
    FighterXpResult,
    handle_fighter_xp_update,
)

__all__ = [
    "FieldChange",
    "FighterAdvancementDeletionResult",
    "FighterAdvancementResult",
    "FighterDetailsResult",
    "FighterEffectsResult",
    "FighterStatusResult",
    "FighterXpResult",
    "handle_advancement_deletion",
    "handle_characteristic_advancement",
    "handle_fighter_details_update",
    "handle_fighter_effects_update",
    "handle_fighter_status_change",
    "handle_fighter_xp_update",
    "handle_skill_advancement",
]
