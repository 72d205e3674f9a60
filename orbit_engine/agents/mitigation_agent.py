"""Generative mitigation strategies returned as JSON."""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from orbit_engine.agents.base_agent import TextAgent
from orbit_engine.exceptions import GenerationParseError
from orbit_engine.models import ApproachRecord, MitigationPlan
from orbit_engine.risk import distance_category, size_category, summary_risk_level

logger = logging.getLogger(__name__)

_FENCED_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")
_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")


def build_mitigation_prompt(record: ApproachRecord, impact_probability: float | None = None) -> str:
    avg_diameter = record.diameter.mean
    probability_line = f"\n- Impact Probability: {impact_probability}" if impact_probability else ""
    return f"""Provide mitigation strategies for {record.name}:

SUMMARY:
- Type: {record.object_type.value.upper()}
- Size: {size_category(avg_diameter)} ({round(avg_diameter)}m average)
- Approach: {distance_category(record.miss_distance)} ({record.miss_distance} AU)
- Velocity: {record.velocity} km/s
- Risk Level: {summary_risk_level(record).value.upper()}
- Hazardous: {str(record.is_hazardous).lower()}{probability_line}

CRITICAL INSTRUCTIONS:
1. Respond with ONLY valid JSON - no markdown, no explanations, no text before or after
2. Start your response with {{ and end with }}
3. Ensure all strings are properly escaped
4. No trailing commas
5. No text before or after the JSON

REQUIRED JSON FORMAT:
{{
  "strategies": [
    {{
      "category": "Detection & Tracking",
      "title": "Strategy Name",
      "description": "2-3 sentence description",
      "feasibility": "high",
      "timeframe": "Implementation time",
      "effectiveness": "95%",
      "requirements": ["requirement1", "requirement2"],
      "estimatedCost": "Cost estimate"
    }}
  ],
  "timeline": [
    {{
      "phase": "Phase Name",
      "duration": "Duration",
      "description": "What happens in this phase",
      "priority": "high"
    }}
  ],
  "globalCoordination": ["coordination item 1", "item 2"],
  "publicPreparedness": ["preparedness item 1", "item 2"]
}}

Include exactly 4 strategies: Detection & Tracking, Kinetic Impactor, Civil Defense, International Coordination."""


def parse_mitigation_json(raw: str) -> dict[str, Any]:
    """Find and decode the JSON object in a model reply."""
    text = raw or ""
    fenced = _FENCED_RE.search(text)
    if fenced:
        candidate = fenced.group(1).strip()
    else:
        found = _OBJECT_RE.search(text)
        if not found:
            raise GenerationParseError("No JSON object in mitigation response", raw=text)
        candidate = found.group(0)

    first, last = candidate.find("{"), candidate.rfind("}")
    if first == -1 or last <= first:
        raise GenerationParseError("No JSON object in mitigation response", raw=text)
    candidate = _TRAILING_COMMA_RE.sub(r"\1", candidate[first:last + 1])

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise GenerationParseError(f"Mitigation JSON did not decode: {exc}", raw=text) from exc
    if not isinstance(data, dict) or not isinstance(data.get("strategies"), list):
        raise GenerationParseError("Mitigation JSON missing strategies list", raw=text)
    return data


class MitigationAgent(TextAgent):
    name = "mitigation"
    temperature = 0.3
    max_tokens = 1536
    top_k = 20
    top_p = 0.8

    async def plan(
        self,
        record: ApproachRecord,
        generated_at: datetime,
        impact_probability: float | None = None,
    ) -> MitigationPlan:
        raw = await self._generate(build_mitigation_prompt(record, impact_probability))
        try:
            data = parse_mitigation_json(raw)
            data.pop("timestamp", None)
            return MitigationPlan.model_validate({**data, "timestamp": generated_at, "generated": True})
        except ValidationError as exc:
            logger.debug("Raw mitigation output: %s", (raw or "")[:500])
            raise GenerationParseError(f"Mitigation JSON failed validation: {exc}", raw=raw) from exc
        except GenerationParseError:
            logger.debug("Raw mitigation output: %s", (raw or "")[:500])
            raise
