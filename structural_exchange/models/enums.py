"""Closed enumerations for the categories the canonical model distinguishes.

Producers spell these categories inconsistently ("Semi-Rigid", "semirigid",
"SEMIRIGID"). Each enum therefore offers ``parse`` which normalises a free-form
string and falls back to a documented member instead of raising, so that a
single odd record never aborts an import.
"""

import logging
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


def _normalise(value: str) -> str:
    return "".join(ch for ch in value.lower() if ch.isalnum())


class _ParsableEnum(str, Enum):
    """String enum with lenient parsing of producer spellings.

    Every subclass must override ``fallback``; the base has no sensible
    default member.
    """

    @classmethod
    def fallback(cls) -> "_ParsableEnum":
        raise NotImplementedError(f"{cls.__name__} must define fallback()")

    @classmethod
    def parse(cls, value: Optional[str]):
        """Map a free-form string onto a member.

        Args:
            value: Raw category string (case and punctuation are ignored)

        Returns:
            Matching member, or ``cls.fallback()`` for empty/unknown input
        """
        if not value:
            return cls.fallback()
        key = _normalise(value)
        for member in cls:
            if _normalise(member.value) == key or _normalise(member.name) == key:
                return member
        aliases = getattr(cls, "_aliases", None)
        if aliases and key in aliases():
            return cls(aliases()[key])
        logger.warning(f"Unknown {cls.__name__} '{value}', using {cls.fallback().value}")
        return cls.fallback()


class MaterialKind(_ParsableEnum):
    """Kind tag of the material tagged union."""
    CONCRETE = "concrete"
    STEEL = "steel"
    WOOD = "wood"
    MASONRY = "masonry"
    COLD_FORMED = "coldFormed"

    @classmethod
    def fallback(cls) -> "MaterialKind":
        return cls.STEEL

    @staticmethod
    def _aliases():
        return {"coldform": "coldFormed", "timber": "wood", "rebar": "steel"}


class DiaphragmType(_ParsableEnum):
    RIGID = "Rigid"
    SEMI_RIGID = "SemiRigid"
    FLEXIBLE = "Flexible"

    @classmethod
    def fallback(cls) -> "DiaphragmType":
        return cls.RIGID


class FrameMaterialType(_ParsableEnum):
    STEEL = "Steel"
    CONCRETE = "Concrete"
    WOOD = "Wood"

    @classmethod
    def fallback(cls) -> "FrameMaterialType":
        return cls.STEEL


class StructuralFloorType(_ParsableEnum):
    SLAB = "Slab"
    FILLED_DECK = "FilledDeck"
    UNFILLED_DECK = "UnfilledDeck"
    SOLID_SLAB_DECK = "SolidSlabDeck"

    @classmethod
    def fallback(cls) -> "StructuralFloorType":
        return cls.SLAB


class LoadType(_ParsableEnum):
    """Load category of a load definition (load pattern)."""
    DEAD = "Dead"
    SUPER_DEAD = "SuperDead"
    LIVE = "Live"
    SNOW = "Snow"
    WIND = "Wind"
    SEISMIC = "Seismic"
    THERMAL = "Thermal"
    OTHER = "Other"

    @classmethod
    def fallback(cls) -> "LoadType":
        return cls.OTHER

    @staticmethod
    def _aliases():
        return {
            "sdl": "SuperDead",
            "superimposeddead": "SuperDead",
            "quake": "Seismic",
            "earthquake": "Seismic",
            "temperature": "Thermal",
            "reducelive": "Live",
        }
