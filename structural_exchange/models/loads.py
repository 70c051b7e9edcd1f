"""Load definitions, surface loads, combinations and member loads."""

from typing import Any, Dict, List, Optional

from pydantic import Field

from .enums import LoadType
from .geometry import ExchangeModel


class LoadDefinition(ExchangeModel):
    """A load pattern.

    Attributes:
        name: Pattern name as exported (e.g. "Dead", "LIVE")
        type: Load category
        self_weight: Self-weight multiplier applied by the analysis program
    """

    id: str
    name: str
    type: LoadType = LoadType.OTHER
    self_weight: float = 0.0
    additional_attributes: Dict[str, Any] = Field(default_factory=dict)


class SurfaceLoad(ExchangeModel):
    """Uniform area load set bound to a floor type."""

    id: str
    name: Optional[str] = None
    floor_type_id: Optional[str] = None
    dead_load_id: Optional[str] = None
    dead_load_value: float = 0.0
    live_load_id: Optional[str] = None
    live_load_value: float = 0.0


class LoadCombination(ExchangeModel):
    id: str
    name: Optional[str] = None
    load_definition_ids: List[str] = Field(default_factory=list)
    scale_factors: List[float] = Field(
        default_factory=list,
        description="Scale factor per entry of load_definition_ids (1.0 when absent)",
    )

    def factor_for(self, index: int) -> float:
        if index < len(self.scale_factors):
            return self.scale_factors[index]
        return 1.0


class LineLoad(ExchangeModel):
    """Distributed load assigned to a single line member (beam, brace or column)."""

    id: str
    element_id: str = Field(..., description="Id of the loaded line element")
    load_definition_id: Optional[str] = None
    magnitude: float = 0.0
    direction: str = "Gravity"


class LoadContainer(ExchangeModel):
    load_definitions: List[LoadDefinition] = Field(default_factory=list)
    surface_loads: List[SurfaceLoad] = Field(default_factory=list)
    load_combinations: List[LoadCombination] = Field(default_factory=list)
    line_loads: List[LineLoad] = Field(default_factory=list)
