"""Tiered orbit-class resolution: provider -> computed -> predicted -> fallback.

Each tier is a small strategy object. The resolver walks them in rank order
and returns the first classification produced; a tier that is unavailable,
returns nothing, or raises is skipped. The fallback tier always answers, so
``resolve`` never raises (caller cancellation excepted).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from orbit_engine.agents.base_agent import TextClient, build_text_client
from orbit_engine.agents.orbit_class_agent import OrbitClassAgent, PredictionInput
from orbit_engine.config import DEFAULT_TIMEOUT_SECONDS, EngineSettings
from orbit_engine.elements import extract_orbital_elements, parse_number
from orbit_engine.models import ClassificationMethod, OrbitalElements, OrbitClassification
from orbit_engine.orbit_classifier import classify, fallback_classification, risk_level_from_class

logger = logging.getLogger(__name__)

PROVIDER_CONFIDENCE = 95

_CLASS_KEYS = ("type", "orbit_class_type", "code")
_DESCRIPTION_KEYS = ("description", "orbit_class_description", "name")


@dataclass(frozen=True)
class ResolutionRequest:
    provider_class: Any
    elements: OrbitalElements
    hazardous: bool | None
    allow_predicted: bool
    prediction_input: PredictionInput | None = None
    provider_source: str = "NASA"


class ClassificationTier:
    """One ranked source of orbit classifications."""

    name: str = "tier"

    def available(self, request: ResolutionRequest) -> bool:
        return True

    async def attempt(self, request: ResolutionRequest) -> OrbitClassification | None:
        raise NotImplementedError


def _first_string(source: Mapping[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = source.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


class ProviderTier(ClassificationTier):
    """Wraps a class label already stated by the data provider."""

    name = "provider"

    @staticmethod
    def parse(provider_class: Any, source: str = "NASA") -> tuple[str, str] | None:
        """Return ``(class, description)`` for a string or structured provider class."""
        if isinstance(provider_class, str):
            label = provider_class.strip()
            return (label, f"{source} classified as {label}") if label else None
        if isinstance(provider_class, Mapping):
            label = _first_string(provider_class, _CLASS_KEYS)
            if label is None:
                return None
            description = _first_string(provider_class, _DESCRIPTION_KEYS)
            return label, description or f"{source} classified as {label}"
        return None

    def available(self, request: ResolutionRequest) -> bool:
        return self.parse(request.provider_class, request.provider_source) is not None

    async def attempt(self, request: ResolutionRequest) -> OrbitClassification | None:
        parsed = self.parse(request.provider_class, request.provider_source)
        if parsed is None:
            return None
        label, description = parsed
        return OrbitClassification(
            orbit_class=label,
            description=description,
            confidence=PROVIDER_CONFIDENCE,
            method=ClassificationMethod.PROVIDER,
            risk_level=risk_level_from_class(label),
        )


class ComputedTier(ClassificationTier):
    """Geometric classification from orbital elements."""

    name = "computed"

    def available(self, request: ResolutionRequest) -> bool:
        return request.elements.has_shape

    async def attempt(self, request: ResolutionRequest) -> OrbitClassification | None:
        result = classify(request.elements, request.hazardous)
        if result.method is not ClassificationMethod.COMPUTED:
            return None
        return result


class PredictedTier(ClassificationTier):
    """Generative-service prediction from approach data."""

    name = "predicted"

    def __init__(self, agent: OrbitClassAgent | None):
        self.agent = agent

    def available(self, request: ResolutionRequest) -> bool:
        return request.allow_predicted and self.agent is not None

    async def attempt(self, request: ResolutionRequest) -> OrbitClassification | None:
        data = request.prediction_input or PredictionInput(is_hazardous=bool(request.hazardous))
        return await self.agent.predict(data)


class FallbackTier(ClassificationTier):
    """Rule-of-thumb classification keyed only on the hazard flag."""

    name = "fallback"

    async def attempt(self, request: ResolutionRequest) -> OrbitClassification | None:
        return fallback_classification(request.hazardous)


class ClassificationResolver:
    """Resolves one object's orbit class across the ranked tiers.

    The generative client comes from ``settings`` (or is injected directly);
    when neither provides one the predicted tier is simply never available.
    """

    def __init__(
        self,
        settings: EngineSettings | None = None,
        client: TextClient | None = None,
        tiers: Sequence[ClassificationTier] | None = None,
    ):
        timeout = settings.timeout_seconds if settings else DEFAULT_TIMEOUT_SECONDS
        if client is None and settings is not None:
            client = build_text_client(settings)
        self.agent = OrbitClassAgent(client, timeout) if client is not None else None
        self.tiers: list[ClassificationTier] = list(tiers) if tiers is not None else [
            ProviderTier(),
            ComputedTier(),
            PredictedTier(self.agent),
            FallbackTier(),
        ]

    async def resolve(
        self,
        provider_class: Any,
        elements: OrbitalElements | None,
        hazardous: bool | None = None,
        allow_predicted: bool = True,
        *,
        prediction_input: PredictionInput | None = None,
        provider_source: str = "NASA",
    ) -> OrbitClassification:
        request = ResolutionRequest(
            provider_class=provider_class,
            elements=elements if isinstance(elements, OrbitalElements) else OrbitalElements(),
            hazardous=hazardous,
            allow_predicted=allow_predicted,
            prediction_input=prediction_input,
            provider_source=provider_source,
        )

        for tier in self.tiers:
            try:
                if not tier.available(request):
                    logger.debug("Tier %s unavailable", tier.name)
                    continue
                result = await tier.attempt(request)
            except Exception as exc:
                logger.warning("Tier %s failed, trying next tier: %s", tier.name, exc)
                continue
            if result is not None:
                logger.info("Classified as %s via %s tier", result.orbit_class, tier.name)
                return result

        return fallback_classification(hazardous)

    async def resolve_record(
        self,
        record: Mapping[str, Any] | None,
        jpl_record: Mapping[str, Any] | None = None,
        allow_predicted: bool = True,
    ) -> OrbitClassification:
        """Resolve straight from provider records (NeoWs object plus optional SBDB lookup)."""
        record = record if isinstance(record, Mapping) else {}
        jpl_record = jpl_record if isinstance(jpl_record, Mapping) else {}

        provider_class, source = _find_provider_class(record, jpl_record)
        elements = extract_orbital_elements(jpl_record) if jpl_record.get("orbit") else OrbitalElements()
        if not elements.has_shape:
            elements = extract_orbital_elements(record)
        hazardous = record.get("is_potentially_hazardous_asteroid") is True

        return await self.resolve(
            provider_class,
            elements,
            hazardous,
            allow_predicted,
            prediction_input=prediction_input_from_record(record),
            provider_source=source,
        )


def _find_provider_class(record: Mapping[str, Any], jpl_record: Mapping[str, Any]) -> tuple[Any, str]:
    jpl_object = jpl_record.get("object")
    jpl_orbit = jpl_record.get("orbit")
    if isinstance(jpl_object, Mapping):
        orbit_class = jpl_object.get("orbit_class")
        if ProviderTier.parse(orbit_class) is not None:
            return orbit_class, "JPL"
    for block in (jpl_object, jpl_orbit):
        if isinstance(block, Mapping) and ProviderTier.parse(block.get("class")) is not None:
            description = block.get("class_name")
            if isinstance(description, str) and description.strip():
                return {"type": block["class"], "description": description}, "JPL"
            return block["class"], "JPL"

    orbital_data = record.get("orbital_data")
    if isinstance(orbital_data, Mapping):
        return orbital_data.get("orbit_class"), "NASA"
    return None, "NASA"


def prediction_input_from_record(record: Mapping[str, Any]) -> PredictionInput:
    """Summarize a NeoWs object for the predicted tier."""
    diameter = 0.0
    estimated = record.get("estimated_diameter")
    meters = estimated.get("meters") if isinstance(estimated, Mapping) else None
    if isinstance(meters, Mapping):
        low = parse_number(meters.get("estimated_diameter_min"))
        high = parse_number(meters.get("estimated_diameter_max"))
        if low is not None and high is not None:
            diameter = (low + high) / 2

    velocity = miss_distance = 0.0
    approaches = record.get("close_approach_data")
    if isinstance(approaches, list) and approaches and isinstance(approaches[0], Mapping):
        approach = approaches[0]
        relative_velocity = approach.get("relative_velocity")
        if isinstance(relative_velocity, Mapping):
            velocity = parse_number(relative_velocity.get("kilometers_per_second")) or 0.0
        miss = approach.get("miss_distance")
        if isinstance(miss, Mapping):
            miss_distance = parse_number(miss.get("astronomical")) or 0.0

    name = record.get("name")
    return PredictionInput(
        name=name if isinstance(name, str) and name else "Unknown",
        diameter_m=diameter,
        velocity_km_s=velocity,
        miss_distance_au=miss_distance,
        is_hazardous=record.get("is_potentially_hazardous_asteroid") is True,
        magnitude=parse_number(record.get("absolute_magnitude_h")),
    )
