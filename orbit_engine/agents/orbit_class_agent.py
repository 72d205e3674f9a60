"""Predicted-tier agent: asks the generative service for an orbit class from approach data."""

from __future__ import annotations

import logging
import re

from pydantic import BaseModel

from orbit_engine.agents.base_agent import TextAgent
from orbit_engine.exceptions import GenerationParseError
from orbit_engine.models import ClassificationMethod, OrbitClassification
from orbit_engine.orbit_classifier import risk_level_from_class

logger = logging.getLogger(__name__)

PREDICTED_CONFIDENCE = 60

_CLASS_RE = re.compile(r"CLASS:\s*([A-Za-z\s]+?)\s*\|")
_REASON_RE = re.compile(r"REASON:\s*(.+)")


class PredictionInput(BaseModel):
    """Compact summary of one object, as sent to the service."""

    name: str = "Unknown"
    diameter_m: float = 0.0
    velocity_km_s: float = 0.0
    miss_distance_au: float = 0.0
    is_hazardous: bool = False
    magnitude: float | None = None


def build_orbit_class_prompt(data: PredictionInput) -> str:
    magnitude = data.magnitude if data.magnitude is not None else "unknown"
    return f"""Predict the orbit class for this asteroid based on available data:

ASTEROID DATA:
- Name: {data.name}
- Diameter: {round(data.diameter_m)}m
- Velocity: {data.velocity_km_s:.1f} km/s
- Miss Distance: {data.miss_distance_au:.4f} AU
- Hazardous: {str(data.is_hazardous).lower()}
- Magnitude: {magnitude}

Based on this data, predict the most likely orbit class from these options:
- Apollo (Earth-crossing, a > 1 AU)
- Aten (Earth-crossing, a < 1 AU)
- Amor (Near-Earth, doesn't cross)
- Atira (Interior Earth Objects)
- Main Belt (2.1-3.3 AU)
- Unknown (insufficient data)

IMPORTANT: Respond with ONLY the orbit class name and a brief explanation. Format: "CLASS: [name] | REASON: [explanation]" - No markdown, no formatting, plain text only."""


def parse_orbit_class_response(raw: str) -> tuple[str, str]:
    """Extract ``(class, reason)`` from a ``CLASS: <name> | REASON: <text>`` reply."""
    class_match = _CLASS_RE.search(raw or "")
    reason_match = _REASON_RE.search(raw or "")
    if not class_match or not reason_match:
        raise GenerationParseError("Response is not in CLASS/REASON format", raw=raw)

    predicted = " ".join(class_match.group(1).split())
    reason = reason_match.group(1).strip()
    if not predicted or not reason:
        raise GenerationParseError("Empty CLASS or REASON in response", raw=raw)
    return predicted, reason


class OrbitClassAgent(TextAgent):
    name = "orbit_class"
    temperature = 0.1
    max_tokens = 256
    top_k = 20
    top_p = 0.8

    async def predict(self, data: PredictionInput) -> OrbitClassification:
        raw = await self._generate(build_orbit_class_prompt(data))
        try:
            predicted, reason = parse_orbit_class_response(raw)
        except GenerationParseError:
            logger.debug("Raw orbit class output: %s", (raw or "")[:500])
            raise

        return OrbitClassification(
            orbit_class=predicted,
            description=f"AI-predicted: {reason}",
            confidence=PREDICTED_CONFIDENCE,
            method=ClassificationMethod.PREDICTED,
            risk_level=risk_level_from_class(predicted),
        )
