"""Mitigation planning for a single approaching object."""

from __future__ import annotations

import logging
from datetime import datetime

from orbit_engine.agents.base_agent import TextClient, build_text_client
from orbit_engine.agents.mitigation_agent import MitigationAgent
from orbit_engine.config import DEFAULT_TIMEOUT_SECONDS, EngineSettings
from orbit_engine.models import (
    ApproachRecord,
    Feasibility,
    MitigationPhase,
    MitigationPlan,
    MitigationStrategy,
)
from orbit_engine.risk import CLOSE_AU, LARGE_DIAMETER_M
from orbit_engine.synthesizer import Clock, utc_now

logger = logging.getLogger(__name__)

GLOBAL_COORDINATION = [
    "International Asteroid Warning Network (IAWN) coordination",
    "United Nations Committee on Peaceful Uses of Outer Space (COPUOS)",
    "Space Mission Planning Advisory Group (SMPAG)",
    "NASA Planetary Defense Coordination Office (PDCO)",
    "European Space Agency (ESA) coordination",
    "International data sharing protocols",
]

PUBLIC_PREPAREDNESS = [
    "Public education campaigns about asteroid threats",
    "Emergency response training for impact zones",
    "Early warning system development",
    "Infrastructure hardening in high-risk areas",
    "International communication protocols",
    "Community preparedness drills",
]


def build_mitigation_plan(record: ApproachRecord, generated_at: datetime) -> MitigationPlan:
    """Deterministic plan keyed on object size, proximity and hazard flag."""
    is_large = record.diameter.mean > LARGE_DIAMETER_M
    is_very_close = record.miss_distance < CLOSE_AU
    elevated = "high" if record.is_hazardous else "medium"

    strategies = [
        MitigationStrategy(
            category="Detection & Tracking",
            title="Enhanced Monitoring System",
            description=(
                f"Deploy advanced ground-based and space-based telescopes to continuously track {record.name}. "
                "Implement radar observations during close approach to refine orbital parameters and physical characteristics."
            ),
            feasibility=Feasibility.HIGH,
            timeframe="Immediate - 6 months",
            effectiveness="95%",
            requirements=["Ground-based telescopes", "Radar facilities", "Data processing systems", "International coordination"],
            estimated_cost="$5-10M annually",
        ),
        MitigationStrategy(
            category="Kinetic Impactor",
            title="DART-Style Deflection Mission",
            description=(
                f"Launch a kinetic impactor spacecraft similar to NASA's DART mission to alter {record.name}'s trajectory "
                "through high-speed impact. Most effective for objects with sufficient warning time."
            ),
            feasibility=Feasibility.MEDIUM if is_large else Feasibility.HIGH,
            timeframe="2-5 years",
            effectiveness="60-80%" if is_large else "80-95%",
            requirements=["Launch vehicle", "Spacecraft design", "Navigation systems", "Impact assessment"],
            estimated_cost="$300-500M",
        ),
        MitigationStrategy(
            category="Gravity Tractor",
            title="Gravitational Deflection",
            description=(
                f"Deploy a spacecraft that hovers near {record.name} and uses its gravitational pull to gradually alter "
                "the object's trajectory. Requires long lead time but very precise."
            ),
            feasibility=Feasibility.MEDIUM,
            timeframe="5-15 years",
            effectiveness="70-90%",
            requirements=["Long-duration spacecraft", "Precise navigation", "Power systems", "Extended mission support"],
            estimated_cost="$200-400M",
        ),
        MitigationStrategy(
            category="Nuclear Deflection",
            title="Nuclear Standoff Deflection",
            description=(
                "For large objects with short warning time, deploy a nuclear device that detonates at a safe distance "
                "to create a deflection impulse. Last resort option requiring international approval."
            ),
            feasibility=Feasibility.HIGH if is_large and is_very_close else Feasibility.LOW,
            timeframe="1-3 years",
            effectiveness="85-95%",
            requirements=["Nuclear device", "Launch capability", "International coordination", "Safety protocols"],
            estimated_cost="$500M-1B",
        ),
        MitigationStrategy(
            category="Civil Defense",
            title="Emergency Preparedness",
            description=(
                "Develop evacuation and sheltering plans for potential impact zones. "
                "Establish early warning systems and public communication protocols."
            ),
            feasibility=Feasibility.HIGH,
            timeframe="6 months - 2 years",
            effectiveness="60-80%",
            requirements=["Emergency management systems", "Public communication", "Infrastructure assessment", "Training programs"],
            estimated_cost="$10-50M",
        ),
    ]

    timeline = [
        MitigationPhase(
            phase="Immediate Assessment",
            duration="0-6 months",
            description="Enhanced tracking, orbital refinement, and risk assessment",
            priority="high",
        ),
        MitigationPhase(
            phase="Mission Planning",
            duration="6 months - 2 years",
            description="Design and develop deflection mission if needed",
            priority=elevated,
        ),
        MitigationPhase(
            phase="Mission Execution",
            duration="1-3 years",
            description="Launch and execute deflection mission",
            priority=elevated,
        ),
        MitigationPhase(
            phase="Monitoring & Verification",
            duration="1-5 years",
            description="Monitor trajectory changes and verify mission success",
            priority="high",
        ),
    ]

    return MitigationPlan(
        strategies=strategies,
        timeline=timeline,
        global_coordination=list(GLOBAL_COORDINATION),
        public_preparedness=list(PUBLIC_PREPAREDNESS),
        timestamp=generated_at,
    )


class MitigationPlanner:
    """Mitigation strategies: generative JSON when configured, deterministic plan otherwise."""

    def __init__(
        self,
        settings: EngineSettings | None = None,
        client: TextClient | None = None,
        clock: Clock = utc_now,
    ):
        timeout = settings.timeout_seconds if settings else DEFAULT_TIMEOUT_SECONDS
        if client is None and settings is not None:
            client = build_text_client(settings)
        self.agent = MitigationAgent(client, timeout) if client is not None else None
        self.clock = clock

    async def plan(self, record: ApproachRecord, impact_probability: float | None = None) -> MitigationPlan:
        generated_at = self.clock()
        if self.agent is not None:
            try:
                return await self.agent.plan(record, generated_at, impact_probability)
            except Exception as exc:
                logger.warning("Generative mitigation plan for %s failed, using standard plan: %s", record.name, exc)
        return build_mitigation_plan(record, generated_at)
