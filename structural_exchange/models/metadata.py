"""Project-level metadata: project info, units and survey coordinates."""

from typing import Optional

from pydantic import Field

from .geometry import ExchangeModel, Point3D


class ProjectInfo(ExchangeModel):
    project_name: str = Field("", description="Project / model name")
    description: Optional[str] = None
    company: Optional[str] = None
    version: Optional[str] = Field(None, description="Producing program version")
    created: Optional[str] = None
    modified: Optional[str] = None


class Units(ExchangeModel):
    """Unit system of every numeric value in the model.

    Attributes:
        length: Length unit name (inches by default)
        force: Force unit name (pounds by default)
        temperature: Temperature unit name (fahrenheit by default)
    """

    length: str = "inches"
    force: str = "pounds"
    temperature: str = "fahrenheit"


class Coordinates(ExchangeModel):
    """Placement of the model relative to the site."""

    rotation: float = Field(0.0, description="Rotation from project north, degrees")
    project_base_point: Optional[Point3D] = None
    survey_point: Optional[Point3D] = None
    coordination_point: Optional[Point3D] = None


class Metadata(ExchangeModel):
    project_info: ProjectInfo = Field(default_factory=ProjectInfo)
    units: Units = Field(default_factory=Units)
    coordinates: Coordinates = Field(default_factory=Coordinates)
