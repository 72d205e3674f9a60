"""Tests for the tiered classification resolver."""

import asyncio

import pytest

from orbit_engine.agents.orbit_class_agent import PredictionInput
from orbit_engine.config import EngineSettings
from orbit_engine.models import ClassificationMethod, OrbitalElements, OrbitRiskLevel
from orbit_engine.resolver import (
    ClassificationResolver,
    ClassificationTier,
    ComputedTier,
    FallbackTier,
    ProviderTier,
)
from tests.conftest import FailingTextClient, FixedTextClient, SlowTextClient

APOLLO_ELEMENTS = OrbitalElements(semi_major_axis=1.47, eccentricity=0.56, inclination=6.4)


def resolve(resolver, *args, **kwargs):
    return asyncio.run(resolver.resolve(*args, **kwargs))


class TestProviderTier:
    """Class labels supplied by the data provider."""

    def test_string_class_wrapped_verbatim(self):
        result = resolve(ClassificationResolver(), "APO", OrbitalElements())
        assert result.orbit_class == "APO"
        assert result.description == "NASA classified as APO"
        assert result.confidence == 95
        assert result.method == ClassificationMethod.PROVIDER
        assert result.risk_level == OrbitRiskLevel.HIGH

    def test_structured_class(self):
        provider = {"orbit_class_type": "AMO", "orbit_class_description": "Near-Earth asteroid orbits similar to that of 1221 Amor"}
        result = resolve(ClassificationResolver(), provider, APOLLO_ELEMENTS)
        assert result.orbit_class == "AMO"
        assert result.description.startswith("Near-Earth asteroid orbits")
        assert result.risk_level == OrbitRiskLevel.MEDIUM

    def test_type_description_shape(self):
        result = resolve(ClassificationResolver(), {"type": "MBA", "description": "Main-belt"}, OrbitalElements())
        assert result.orbit_class == "MBA"
        assert result.risk_level == OrbitRiskLevel.LOW

    def test_provider_beats_computed(self):
        result = resolve(ClassificationResolver(), "Main Belt", APOLLO_ELEMENTS)
        assert result.method == ClassificationMethod.PROVIDER

    @pytest.mark.parametrize("provider", [None, "", "   ", {}, {"description": "no type"}, 7])
    def test_unusable_provider_class_skipped(self, provider):
        result = resolve(ClassificationResolver(), provider, APOLLO_ELEMENTS)
        assert result.method == ClassificationMethod.COMPUTED
        assert result.orbit_class == "Apollo"


class TestComputedTier:
    """Geometric classification inside the resolver."""

    def test_computed_from_elements(self):
        result = resolve(ClassificationResolver(), None, APOLLO_ELEMENTS, True)
        assert result.orbit_class == "Apollo"
        assert result.confidence == 85

    def test_elements_none_treated_as_empty(self):
        result = resolve(ClassificationResolver(), None, None, False)
        assert result.orbit_class == "Unknown"


class TestFallbackTier:
    """Hazard-flag fallback at the end of the chain."""

    def test_empty_elements_hazardous(self):
        result = resolve(ClassificationResolver(), None, OrbitalElements(), True, False)
        assert (result.orbit_class, result.risk_level, result.confidence, result.method) == (
            "Potentially Hazardous", OrbitRiskLevel.HIGH, 50, ClassificationMethod.FALLBACK)

    def test_empty_elements_not_hazardous(self):
        result = resolve(ClassificationResolver(), None, OrbitalElements(), False, False)
        assert (result.orbit_class, result.risk_level, result.confidence, result.method) == (
            "Unknown", OrbitRiskLevel.LOW, 0, ClassificationMethod.FALLBACK)


class TestPredictedTier:
    """Generative prediction and its failure modes."""

    def test_prediction_used_when_lower_tiers_unavailable(self):
        client = FixedTextClient("CLASS: Apollo | REASON: Fast, close approach typical of Earth-crossers")
        resolver = ClassificationResolver(client=client)
        result = resolve(resolver, None, OrbitalElements(), True, True,
                         prediction_input=PredictionInput(name="(2020 QQ)", diameter_m=120, velocity_km_s=19.2))
        assert result.orbit_class == "Apollo"
        assert result.method == ClassificationMethod.PREDICTED
        assert result.confidence == 60
        assert result.description == "AI-predicted: Fast, close approach typical of Earth-crossers"
        assert result.risk_level == OrbitRiskLevel.HIGH
        assert "(2020 QQ)" in client.prompts[0]

    def test_not_consulted_when_computed_available(self):
        client = FixedTextClient("CLASS: Amor | REASON: whatever")
        result = resolve(ClassificationResolver(client=client), None, APOLLO_ELEMENTS, False, True)
        assert result.method == ClassificationMethod.COMPUTED
        assert client.prompts == []

    def test_disallowed_prediction_skipped(self):
        client = FixedTextClient("CLASS: Amor | REASON: whatever")
        result = resolve(ClassificationResolver(client=client), None, OrbitalElements(), False, False)
        assert result.method == ClassificationMethod.FALLBACK
        assert client.prompts == []

    def test_unconfigured_settings_never_predict(self):
        resolver = ClassificationResolver(settings=EngineSettings(gemini_api_key="your_gemini_api_key_here"))
        assert resolver.agent is None
        result = resolve(resolver, None, OrbitalElements(), True, True)
        assert result.method == ClassificationMethod.FALLBACK

    @pytest.mark.parametrize("reply", ["Apollo, probably", "CLASS: Apollo", "REASON: no class", ""])
    def test_malformed_reply_falls_through(self, reply):
        resolver = ClassificationResolver(client=FixedTextClient(reply))
        result = resolve(resolver, None, OrbitalElements(), True, True)
        assert result.orbit_class == "Potentially Hazardous"
        assert result.method == ClassificationMethod.FALLBACK

    def test_service_error_falls_through(self):
        client = FailingTextClient()
        result = resolve(ClassificationResolver(client=client), None, OrbitalElements(), False, True)
        assert client.calls == 1
        assert result.orbit_class == "Unknown"

    @pytest.mark.parametrize("hazardous", [True, False])
    def test_timeout_matches_prediction_disabled(self, hazardous):
        slow = SlowTextClient(delay=5.0)
        resolver = ClassificationResolver(settings=EngineSettings(timeout_seconds=0.05), client=slow)
        timed_out = resolve(resolver, None, OrbitalElements(), hazardous, True)
        disabled = resolve(ClassificationResolver(), None, OrbitalElements(), hazardous, False)
        assert timed_out == disabled
        assert slow.cancelled


class TestTierIsolation:
    """A failing tier never stops the chain."""

    def test_raising_tier_is_skipped(self):
        class BrokenTier(ClassificationTier):
            name = "broken"

            async def attempt(self, request):
                raise ValueError("boom")

        resolver = ClassificationResolver(tiers=[BrokenTier(), ComputedTier(), FallbackTier()])
        result = resolve(resolver, None, APOLLO_ELEMENTS)
        assert result.orbit_class == "Apollo"

    def test_raising_availability_check_is_skipped(self):
        class BrokenCheck(ProviderTier):
            def available(self, request):
                raise KeyError("missing")

        resolver = ClassificationResolver(tiers=[BrokenCheck(), FallbackTier()])
        result = resolve(resolver, "Apollo", OrbitalElements(), True)
        assert result.method == ClassificationMethod.FALLBACK

    def test_no_tiers_still_answers(self):
        result = resolve(ClassificationResolver(tiers=[]), None, APOLLO_ELEMENTS, True)
        assert result.orbit_class == "Potentially Hazardous"

    def test_confidence_monotonic_across_tiers(self):
        provider = resolve(ClassificationResolver(), "Apollo", APOLLO_ELEMENTS)
        computed = resolve(ClassificationResolver(), None, APOLLO_ELEMENTS)
        predicted = resolve(ClassificationResolver(client=FixedTextClient("CLASS: Aten | REASON: r")), None, OrbitalElements())
        fallback = resolve(ClassificationResolver(), None, OrbitalElements(), True)
        assert provider.confidence >= computed.confidence >= predicted.confidence >= fallback.confidence


class TestResolveRecord:
    """Resolution straight from raw NeoWs and SBDB records."""

    def test_neows_structured_class(self, neows_record):
        neows_record["orbital_data"]["orbit_class"] = {
            "orbit_class_type": "APO",
            "orbit_class_description": "Near-Earth asteroid orbits which cross the Earth's orbit",
        }
        result = asyncio.run(ClassificationResolver().resolve_record(neows_record))
        assert result.method == ClassificationMethod.PROVIDER
        assert result.orbit_class == "APO"

    def test_jpl_class_preferred(self, neows_record):
        neows_record["orbital_data"]["orbit_class"] = "AMO"
        jpl = {"object": {"orbit_class": {"code": "APO", "name": "Apollo"}}}
        result = asyncio.run(ClassificationResolver().resolve_record(neows_record, jpl))
        assert result.orbit_class == "APO"
        assert result.description == "Apollo"

    def test_jpl_plain_class_string(self):
        jpl = {"object": {"class": "ATE", "class_name": "Aten"}}
        result = asyncio.run(ClassificationResolver().resolve_record({}, jpl))
        assert result.orbit_class == "ATE"
        assert result.description == "Aten"

    def test_computed_from_neows_elements(self, neows_record):
        result = asyncio.run(ClassificationResolver().resolve_record(neows_record))
        assert result.method == ClassificationMethod.COMPUTED
        assert result.orbit_class == "Apollo"

    def test_jpl_elements_used_when_present(self):
        jpl = {"orbit": {"elements": [
            {"name": "a", "value": "2.77"}, {"name": "e", "value": "0.08"}, {"name": "i", "value": "10.6"},
        ]}}
        result = asyncio.run(ClassificationResolver().resolve_record({"orbital_data": {}}, jpl))
        assert result.orbit_class == "Main Belt"

    def test_prediction_input_from_record(self, neows_record):
        del neows_record["orbital_data"]
        client = FixedTextClient("CLASS: Apollo | REASON: close")
        result = asyncio.run(ClassificationResolver(client=client).resolve_record(neows_record))
        assert result.method == ClassificationMethod.PREDICTED
        prompt = client.prompts[0]
        assert "1862 Apollo (1932 HA)" in prompt
        assert "Diameter: 2100m" in prompt
        assert "Velocity: 17.5 km/s" in prompt
        assert "Miss Distance: 0.0710 AU" in prompt
        assert "Hazardous: true" in prompt
        assert "Magnitude: 16.07" in prompt

    @pytest.mark.parametrize("record", [None, {}, {"orbital_data": None}, "junk"])
    def test_absent_record(self, record):
        result = asyncio.run(ClassificationResolver().resolve_record(record))
        assert result.orbit_class == "Unknown"
        assert result.method == ClassificationMethod.FALLBACK
