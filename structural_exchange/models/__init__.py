"""Canonical model graph for structural model exchange.

Pydantic schemas for every entity of the interchange graph. The persisted JSON
form uses camelCase field names; Python code uses snake_case attributes.
"""

from .geometry import ExchangeModel, Point2D, Point3D, GridPoint
from .enums import (
    MaterialKind,
    DiaphragmType,
    FrameMaterialType,
    StructuralFloorType,
    LoadType,
)
from .metadata import ProjectInfo, Units, Coordinates, Metadata
from .layout import FloorType, Level, Grid, ModelLayout
from .properties import (
    Material,
    ConcreteProperties,
    SteelProperties,
    WoodProperties,
    MasonryProperties,
    ColdFormedProperties,
    FrameProperties,
    FloorProperties,
    WallProperties,
    Diaphragm,
    PropertiesContainer,
    default_properties,
)
from .loads import LoadDefinition, SurfaceLoad, LoadCombination, LineLoad, LoadContainer
from .elements import (
    StructuralElement,
    Beam,
    Column,
    Brace,
    Wall,
    Floor,
    Opening,
    Joint,
    IsolatedFooting,
    ContinuousFooting,
    Pile,
    Pier,
    ElementContainer,
)
from .canonical_model import CanonicalModel, COLLECTIONS, ELEMENT_COLLECTIONS

__all__ = [
    # Geometry
    "ExchangeModel",
    "Point2D",
    "Point3D",
    "GridPoint",

    # Enumerations
    "MaterialKind",
    "DiaphragmType",
    "FrameMaterialType",
    "StructuralFloorType",
    "LoadType",

    # Metadata / layout
    "ProjectInfo",
    "Units",
    "Coordinates",
    "Metadata",
    "FloorType",
    "Level",
    "Grid",
    "ModelLayout",

    # Properties
    "Material",
    "ConcreteProperties",
    "SteelProperties",
    "WoodProperties",
    "MasonryProperties",
    "ColdFormedProperties",
    "FrameProperties",
    "FloorProperties",
    "WallProperties",
    "Diaphragm",
    "PropertiesContainer",
    "default_properties",

    # Loads
    "LoadDefinition",
    "SurfaceLoad",
    "LoadCombination",
    "LineLoad",
    "LoadContainer",

    # Elements
    "StructuralElement",
    "Beam",
    "Column",
    "Brace",
    "Wall",
    "Floor",
    "Opening",
    "Joint",
    "IsolatedFooting",
    "ContinuousFooting",
    "Pile",
    "Pier",
    "ElementContainer",

    # Root
    "CanonicalModel",
    "COLLECTIONS",
    "ELEMENT_COLLECTIONS",
]
