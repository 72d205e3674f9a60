"""Generative risk narratives for a batch of approaches or a single object."""

from __future__ import annotations

from collections.abc import Sequence

from orbit_engine.agents.base_agent import TextAgent
from orbit_engine.exceptions import GenerationParseError
from orbit_engine.models import ApproachRecord
from orbit_engine.orbit_classes import get_orbit_class_info
from orbit_engine.risk import distance_category, single_object_risk_level, size_category, summary_risk_level

PLAIN_TEXT_RULE = (
    "IMPORTANT: Respond with plain text only. Do NOT use markdown formatting, headers, "
    "bullet points, or any special characters. Write in clear, readable paragraphs."
)


def summarize_object(record: ApproachRecord) -> str:
    """One compact summary line per object for the batch prompt."""
    diameter = record.diameter.mean
    return (
        f"{record.name}: {size_category(diameter)} {diameter:g}m, "
        f"{distance_category(record.miss_distance)} {record.miss_distance:g}AU, "
        f"{summary_risk_level(record).value} risk, {record.velocity:g}km/s, {record.approach_date}"
    )


def build_batch_prompt(records: Sequence[ApproachRecord]) -> str:
    summary = "\n".join(summarize_object(r) for r in records)
    return f"""Analyze Near Earth Objects for impact risk:

OBJECTS ({len(records)} total):
{summary}

{PLAIN_TEXT_RULE}

Provide:
1. Risk Assessment - Overall threat level and critical objects
2. Priority Objects - Most dangerous requiring immediate attention
3. Monitoring Recommendations - Enhanced tracking needs
4. Global Coordination - International response requirements

Focus on actionable insights and clear prioritization. Write in professional language without formatting symbols."""


def build_single_prompt(record: ApproachRecord) -> str:
    avg_diameter = record.diameter.mean
    kind = record.object_type.value
    orbit_class = record.orbit_class or "Unknown"
    optional = []
    if record.orbital_period:
        optional.append(f"- Orbital Period: {record.orbital_period} years")
    if record.inclination:
        optional.append(f"- Inclination: {record.inclination}°")
    if record.magnitude is not None:
        optional.append(f"- Magnitude: {record.magnitude}")
    optional_text = "\n".join(optional)

    return f"""Analyze this {kind} for impact risk assessment:

SUMMARY:
- Name: {record.name}
- Type: {kind.upper()}
- Size: {size_category(avg_diameter)} ({round(avg_diameter)}m avg diameter)
- Risk Level: {single_object_risk_level(record).value.upper()}
- Approach: {distance_category(record.miss_distance)} ({record.miss_distance:.4f} AU)
- Velocity: {record.velocity} km/s
- Date: {record.approach_date}
- Orbit Class: {orbit_class} ({get_orbit_class_info(orbit_class).description})
- Hazardous: {str(record.is_hazardous).lower()}
{optional_text}

{PLAIN_TEXT_RULE}

Provide analysis covering:
1. Risk Assessment - Threat level and impact probability
2. Orbital Analysis - Trajectory characteristics and stability
3. Scientific Significance - Research value and observations
4. Monitoring Recommendations - Tracking and observation needs
5. Future Predictions - Long-term trajectory and approaches

Write in clear, professional language without any formatting symbols."""


class RiskNarrativeAgent(TextAgent):
    name = "risk_narrative"
    top_k = 32
    top_p = 0.9

    async def _narrative(self, prompt: str, temperature: float, max_tokens: int) -> str:
        text = await self._generate(prompt, temperature=temperature, max_tokens=max_tokens)
        if not text or not text.strip():
            raise GenerationParseError("Empty narrative from generative service", raw=text or "")
        return text.strip()

    async def analyze_batch(self, records: Sequence[ApproachRecord]) -> str:
        return await self._narrative(build_batch_prompt(records), temperature=0.2, max_tokens=1536)

    async def analyze_single(self, record: ApproachRecord) -> str:
        return await self._narrative(build_single_prompt(record), temperature=0.3, max_tokens=2048)
