"""Keyword ability implementations"""
from .static import (
    StaticKeyword, KeywordCategory, Flying, Trample, Deathtouch, FirstStrike,
    DoubleStrike, Lifelink, Vigilance, Haste, Menace, Reach, Defender,
    Hexproof, Indestructible, Flash, KeywordRegistry, get_registry
)
