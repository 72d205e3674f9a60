"""Multi-source orbit classification and risk resolution engine for near-Earth objects."""

from orbit_engine.config import EngineSettings
from orbit_engine.elements import extract_orbital_elements
from orbit_engine.mitigation import MitigationPlanner, build_mitigation_plan
from orbit_engine.models import (
    ApproachRecord,
    ClassificationMethod,
    DiameterRange,
    MitigationPlan,
    OrbitalElements,
    OrbitClassification,
    OrbitRiskLevel,
    RiskAnalysis,
    RiskLevel,
)
from orbit_engine.orbit_classifier import classify, fallback_classification, risk_level_from_class
from orbit_engine.resolver import ClassificationResolver
from orbit_engine.synthesizer import RiskNarrativeSynthesizer

__all__ = [
    "ApproachRecord",
    "ClassificationMethod",
    "ClassificationResolver",
    "DiameterRange",
    "EngineSettings",
    "MitigationPlan",
    "MitigationPlanner",
    "OrbitClassification",
    "OrbitRiskLevel",
    "OrbitalElements",
    "RiskAnalysis",
    "RiskLevel",
    "RiskNarrativeSynthesizer",
    "build_mitigation_plan",
    "classify",
    "extract_orbital_elements",
    "fallback_classification",
    "risk_level_from_class",
]
