"""Material and section properties.

Materials are a closed tagged union: shared physical constants live on a common
base, kind-specific constants on a per-kind variant, and pydantic dispatches on
the explicit ``kind`` tag when reading persisted data:

    {"id": "MAT-1", "name": "A992Fy50",
     "properties": {"kind": "steel", "fy": 50000.0, "fu": 65000.0, ...}}

Every property entity carries an ``additional_attributes`` bag. The core never
reads or validates its contents; it is copied through import, merge and
persistence untouched.

Default constants are US customary (psi, pcf).
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import Field

from .enums import DiaphragmType, FrameMaterialType, MaterialKind, StructuralFloorType
from .geometry import ExchangeModel


# =============================================================================
# Material variants
# =============================================================================


class _MaterialConstants(ExchangeModel):
    weight_density: float = Field(..., description="Unit weight, pcf")
    elastic_modulus: float = Field(..., description="Young's modulus, psi")
    poissons_ratio: float = Field(..., description="Poisson's ratio")


class ConcreteProperties(_MaterialConstants):
    kind: Literal["concrete"] = "concrete"
    fc: float = 4000.0
    weight_density: float = 150.0
    elastic_modulus: float = 3600000.0
    poissons_ratio: float = 0.2
    weight_class: str = "Normal"
    shear_strength_reduction_factor: float = 0.75


class SteelProperties(_MaterialConstants):
    kind: Literal["steel"] = "steel"
    fy: float = 50000.0
    fu: float = 65000.0
    grade: str = "A992"
    weight_density: float = 490.0
    elastic_modulus: float = 29000000.0
    poissons_ratio: float = 0.3


class WoodProperties(_MaterialConstants):
    kind: Literal["wood"] = "wood"
    fb: float = 1000.0
    ft: float = 675.0
    fc: float = 1500.0
    fc_perp: float = 625.0
    fv: float = 180.0
    species: str = "Douglas Fir-Larch"
    grade: str = "No.1"
    weight_density: float = 35.0
    elastic_modulus: float = 1600000.0
    poissons_ratio: float = 0.2


class MasonryProperties(_MaterialConstants):
    kind: Literal["masonry"] = "masonry"
    fm: float = 1500.0
    unit_type: str = "CMU"
    mortar_type: str = "Type S"
    grout_strength: float = 2000.0
    weight_density: float = 125.0
    elastic_modulus: float = 1350000.0
    poissons_ratio: float = 0.2


class ColdFormedProperties(_MaterialConstants):
    kind: Literal["coldFormed"] = "coldFormed"
    fy: float = 33000.0
    fu: float = 45000.0
    grade: str = "33 ksi"
    coating_type: str = "G60"
    base_thickness: float = 0.0346
    weight_density: float = 490.0
    elastic_modulus: float = 29500000.0
    poissons_ratio: float = 0.3


MaterialProperties = Annotated[
    Union[
        ConcreteProperties,
        SteelProperties,
        WoodProperties,
        MasonryProperties,
        ColdFormedProperties,
    ],
    Field(discriminator="kind"),
]

_VARIANTS = {
    MaterialKind.CONCRETE: ConcreteProperties,
    MaterialKind.STEEL: SteelProperties,
    MaterialKind.WOOD: WoodProperties,
    MaterialKind.MASONRY: MasonryProperties,
    MaterialKind.COLD_FORMED: ColdFormedProperties,
}


def default_properties(kind: MaterialKind, **overrides: Any):
    """Build the variant for ``kind`` with its default constants.

    Args:
        kind: Material kind tag
        **overrides: Field values replacing the defaults (snake_case)

    Returns:
        Variant instance whose ``kind`` equals ``kind.value``
    """
    return _VARIANTS[MaterialKind(kind)](**overrides)


class Material(ExchangeModel):
    """Material with kind-specific physical constants.

    Example:
        >>> mat = Material.create("MAT-1", "4000Psi", MaterialKind.CONCRETE, fc=5000)
        >>> mat.kind
        <MaterialKind.CONCRETE: 'concrete'>
    """

    id: str
    name: str
    properties: MaterialProperties = Field(default_factory=SteelProperties)
    design_code_id: Optional[str] = None
    additional_attributes: Dict[str, Any] = Field(default_factory=dict)

    @property
    def kind(self) -> MaterialKind:
        return MaterialKind(self.properties.kind)

    @classmethod
    def create(cls, material_id: str, name: str, kind: MaterialKind, **overrides: Any) -> "Material":
        return cls(id=material_id, name=name, properties=default_properties(kind, **overrides))


# =============================================================================
# Section / shell properties
# =============================================================================


class FrameProperties(ExchangeModel):
    """Line-element cross section.

    Attributes:
        name: Section name as exported (e.g. "W10X12")
        material_id: Reference to a Material
        type: Frame material family
        section_shape: Shape family ("W", "HSS", "Rectangular", ...)
    """

    id: str
    name: str
    material_id: Optional[str] = None
    type: FrameMaterialType = FrameMaterialType.STEEL
    section_shape: Optional[str] = None
    additional_attributes: Dict[str, Any] = Field(default_factory=dict)


class FloorProperties(ExchangeModel):
    id: str
    name: str
    type: StructuralFloorType = StructuralFloorType.SLAB
    thickness: float = 0.0
    material_id: Optional[str] = None
    additional_attributes: Dict[str, Any] = Field(default_factory=dict)


class WallProperties(ExchangeModel):
    id: str
    name: str
    thickness: float = 0.0
    material_id: Optional[str] = None
    additional_attributes: Dict[str, Any] = Field(default_factory=dict)


class Diaphragm(ExchangeModel):
    id: str
    name: str
    type: DiaphragmType = DiaphragmType.RIGID
    additional_attributes: Dict[str, Any] = Field(default_factory=dict)


class PropertiesContainer(ExchangeModel):
    materials: List[Material] = Field(default_factory=list)
    frame_properties: List[FrameProperties] = Field(default_factory=list)
    floor_properties: List[FloorProperties] = Field(default_factory=list)
    wall_properties: List[WallProperties] = Field(default_factory=list)
    diaphragms: List[Diaphragm] = Field(default_factory=list)
