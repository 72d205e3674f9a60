"""Risk narrative synthesis with generative-first, heuristic-fallback discipline."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timezone

from orbit_engine.agents.base_agent import TextClient, build_text_client
from orbit_engine.agents.risk_agent import RiskNarrativeAgent
from orbit_engine.config import DEFAULT_TIMEOUT_SECONDS, EngineSettings
from orbit_engine.models import ApproachRecord, RiskAnalysis
from orbit_engine.risk import (
    batch_recommendations,
    batch_risk_level,
    build_batch_report,
    build_single_report,
    extract_recommendations,
    single_object_risk_level,
    single_recommendations,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RiskNarrativeSynthesizer:
    """Turns approach records into a ``RiskAnalysis``.

    The risk level always comes from the deterministic heuristics. Only the
    narrative text and recommendations differ between the two paths, and any
    generative failure (error, timeout, empty reply) yields the template report.
    """

    def __init__(
        self,
        settings: EngineSettings | None = None,
        client: TextClient | None = None,
        clock: Clock = utc_now,
    ):
        timeout = settings.timeout_seconds if settings else DEFAULT_TIMEOUT_SECONDS
        if client is None and settings is not None:
            client = build_text_client(settings)
        self.agent = RiskNarrativeAgent(client, timeout) if client is not None else None
        self.clock = clock

    async def synthesize(self, records: Sequence[ApproachRecord]) -> RiskAnalysis:
        records = list(records)
        risk = batch_risk_level(records)

        if self.agent is not None and records:
            try:
                text = await self.agent.analyze_batch(records)
            except Exception as exc:
                logger.warning("Generative batch analysis failed, using template report: %s", exc)
            else:
                return RiskAnalysis(
                    analysis=text,
                    risk_level=risk,
                    recommendations=extract_recommendations(text),
                    timestamp=self.clock(),
                    generated=True,
                )

        generated_at = self.clock()
        return RiskAnalysis(
            analysis=build_batch_report(records, generated_at),
            risk_level=risk,
            recommendations=batch_recommendations(records),
            timestamp=generated_at,
        )

    async def synthesize_single(self, record: ApproachRecord) -> RiskAnalysis:
        risk = single_object_risk_level(record)

        if self.agent is not None:
            try:
                text = await self.agent.analyze_single(record)
            except Exception as exc:
                logger.warning("Generative analysis of %s failed, using template report: %s", record.name, exc)
            else:
                return RiskAnalysis(
                    analysis=text,
                    risk_level=risk,
                    recommendations=extract_recommendations(text),
                    timestamp=self.clock(),
                    generated=True,
                )

        generated_at = self.clock()
        return RiskAnalysis(
            analysis=build_single_report(record, generated_at),
            risk_level=risk,
            recommendations=single_recommendations(record),
            timestamp=generated_at,
        )
