"""Ability parsing and resolution"""
from .descriptors import (
    AbilityCost, AbilityDescriptor, ActivatedAbility, Effect, StaticAbility,
    TriggeredAbility,
)
from .parser import (
    activated_abilities, parse_abilities, parse_effect, parse_spell_effects,
    split_clauses,
)
from .resolver import resolve_effect
from .triggered import apply_static, trigger_attack, trigger_etb
from .activated import activate_ability
