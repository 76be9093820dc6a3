"""Core engine components - lazy imports to avoid circular dependencies"""

# Core types can be imported directly
from .types import (
    AbilityKind, CardType, Color, EffectKind, Keyword, Phase, PlayerKey,
    TriggerEvent, Zone,
)

_LAZY = {
    'Game': '.game',
    'GameConfig': '.game',
    'start_game': '.game',
    'GameState': '.state',
    'GameResult': '.state',
    'PlayerState': '.player',
    'CardDefinition': '.objects',
    'CardInstance': '.objects',
    'CombatState': '.combat',
    'ManaCost': '.mana',
    'ManaPool': '.mana',
    'ActionResult': '.results',
    'GameSnapshot': '.snapshot',
    'Stack': '.stack',
}


def __getattr__(name):
    """Lazy import for engine components."""
    module_name = _LAZY.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    from importlib import import_module
    return getattr(import_module(module_name, __name__), name)
