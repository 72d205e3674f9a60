from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import pytest

from orbit_engine.models import ApproachRecord, DiameterRange

FIXED_TIME = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


class FixedTextClient:
    """Answers every prompt with the same text and remembers what it was asked."""

    def __init__(self, text: str):
        self.text = text
        self.prompts: list[str] = []
        self.calls: list[dict] = []

    async def generate(self, prompt, *, temperature, max_tokens, top_k=None, top_p=None):
        self.prompts.append(prompt)
        self.calls.append({"temperature": temperature, "max_tokens": max_tokens, "top_k": top_k, "top_p": top_p})
        return self.text


class FailingTextClient:
    def __init__(self, exc: Exception | None = None):
        self.exc = exc or RuntimeError("service unavailable")
        self.calls = 0

    async def generate(self, prompt, *, temperature, max_tokens, top_k=None, top_p=None):
        self.calls += 1
        raise self.exc


class SlowTextClient:
    """Sleeps past any reasonable deadline before answering."""

    def __init__(self, delay: float = 5.0, text: str = "CLASS: Apollo | REASON: late"):
        self.delay = delay
        self.text = text
        self.cancelled = False

    async def generate(self, prompt, *, temperature, max_tokens, top_k=None, top_p=None):
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return self.text


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_TIME


@pytest.fixture
def hazardous_close_large():
    return ApproachRecord(
        name="(2024 XY)",
        diameter=DiameterRange(min=1500, max=2000),
        velocity=21.4,
        miss_distance=0.02,
        approach_date="2026-03-02",
        is_hazardous=True,
    )


@pytest.fixture
def benign_distant_small():
    return ApproachRecord(
        name="(2019 AB)",
        diameter=DiameterRange(min=20, max=45),
        velocity=8.1,
        miss_distance=0.3,
        approach_date="2026-04-11",
        is_hazardous=False,
    )


@pytest.fixture
def neows_record():
    """A NeoWs object with string-encoded orbital data and one close approach."""
    return {
        "id": "2001862",
        "name": "1862 Apollo (1932 HA)",
        "absolute_magnitude_h": 16.07,
        "is_potentially_hazardous_asteroid": True,
        "estimated_diameter": {
            "meters": {"estimated_diameter_min": 1300.0, "estimated_diameter_max": 2900.0},
        },
        "close_approach_data": [
            {
                "close_approach_date": "2026-05-01",
                "relative_velocity": {"kilometers_per_second": "17.5"},
                "miss_distance": {"astronomical": "0.071"},
            }
        ],
        "orbital_data": {
            "semi_major_axis": "1.4702",
            "eccentricity": "0.5600",
            "inclination": "6.35",
            "perihelion_distance": "0.6469",
            "aphelion_distance": "2.2935",
            "orbital_period": "650.2",
            "perihelion_argument": "286.0",
            "ascending_node_longitude": "35.5",
            "mean_anomaly": "180.1",
        },
    }
