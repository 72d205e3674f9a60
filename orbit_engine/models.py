from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class _Record(BaseModel):
    """Immutable value record, computed per request and never persisted."""

    model_config = ConfigDict(frozen=True)


# --- Orbital elements (extractor output) ---

class OrbitalElements(_Record):
    semi_major_axis: float | None = Field(default=None, description="Semi-major axis a (AU)")
    eccentricity: float | None = Field(default=None, ge=0, description="Eccentricity e")
    inclination: float | None = Field(default=None, description="Inclination i (degrees)")
    perihelion_distance: float | None = Field(default=None, description="Perihelion q (AU)")
    aphelion_distance: float | None = Field(default=None, description="Aphelion Q (AU)")
    orbital_period: float | None = Field(default=None, description="Orbital period (years)")
    argument_of_perihelion: float | None = Field(default=None, description="Argument of perihelion (degrees)")
    longitude_of_ascending_node: float | None = Field(default=None, description="Longitude of ascending node (degrees)")
    mean_anomaly: float | None = Field(default=None, description="Mean anomaly (degrees)")

    @property
    def has_shape(self) -> bool:
        """True when a, e and i are all known."""
        return (
            self.semi_major_axis is not None
            and self.eccentricity is not None
            and self.inclination is not None
        )

    @property
    def perihelion(self) -> float | None:
        """q, falling back to a(1 - e)."""
        if self.perihelion_distance is not None:
            return self.perihelion_distance
        if self.semi_major_axis is None or self.eccentricity is None:
            return None
        return self.semi_major_axis * (1 - self.eccentricity)

    @property
    def aphelion(self) -> float | None:
        """Q, falling back to a(1 + e)."""
        if self.aphelion_distance is not None:
            return self.aphelion_distance
        if self.semi_major_axis is None or self.eccentricity is None:
            return None
        return self.semi_major_axis * (1 + self.eccentricity)


# --- Orbit classification ---

class ClassificationMethod(str, Enum):
    PROVIDER = "provider"
    COMPUTED = "computed"
    PREDICTED = "predicted"
    FALLBACK = "fallback"


class OrbitRiskLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class OrbitClassification(_Record):
    orbit_class: str
    description: str
    confidence: int = Field(ge=0, le=100)
    method: ClassificationMethod
    risk_level: OrbitRiskLevel


# --- Close approach input ---

class ObjectType(str, Enum):
    ASTEROID = "asteroid"
    COMET = "comet"


class DiameterRange(_Record):
    min: float = Field(ge=0, description="Estimated minimum diameter (m)")
    max: float = Field(ge=0, description="Estimated maximum diameter (m)")

    @property
    def mean(self) -> float:
        return (self.min + self.max) / 2


class ApproachRecord(_Record):
    name: str
    diameter: DiameterRange = Field(description="Diameter (m); a single value is a zero-width range")
    velocity: float = Field(description="Relative velocity (km/s)")
    miss_distance: float = Field(description="Miss distance (AU)")
    approach_date: str
    is_hazardous: bool = False
    object_type: ObjectType = ObjectType.ASTEROID
    orbit_class: str | None = None
    magnitude: float | None = None
    orbital_period: str | None = None
    inclination: str | None = None
    eccentricity: str | None = None

    @classmethod
    def from_diameter(cls, diameter: float, **kwargs) -> ApproachRecord:
        """Build a record from a single diameter estimate."""
        return cls(diameter=DiameterRange(min=diameter, max=diameter), **kwargs)


# --- Risk narrative output ---

class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class RiskAnalysis(_Record):
    analysis: str
    risk_level: RiskLevel
    recommendations: list[str] = []
    timestamp: datetime
    generated: bool = Field(default=False, description="True when the text came from the generative service")


# --- Mitigation planning output ---

class Feasibility(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class MitigationStrategy(_Record):
    category: str
    title: str
    description: str
    feasibility: Feasibility
    timeframe: str
    effectiveness: str
    requirements: list[str] = []
    estimated_cost: str | None = Field(default=None, alias="estimatedCost")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class MitigationPhase(_Record):
    phase: str
    duration: str
    description: str
    priority: str


class MitigationPlan(_Record):
    strategies: list[MitigationStrategy]
    timeline: list[MitigationPhase] = []
    global_coordination: list[str] = Field(default=[], alias="globalCoordination")
    public_preparedness: list[str] = Field(default=[], alias="publicPreparedness")
    timestamp: datetime
    generated: bool = False

    model_config = ConfigDict(frozen=True, populate_by_name=True)
