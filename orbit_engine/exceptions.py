"""Error taxonomy for the generative-service paths.

None of these escape the public operations: the resolver, synthesizer and
planner catch them at the tier boundary and move on to the next tier.
"""

from __future__ import annotations


class OrbitEngineError(Exception):
    """Base class for engine errors."""


class GenerationError(OrbitEngineError):
    """The generative text service failed or returned an unusable response."""


class GenerationTimeout(GenerationError):
    """The generative text service did not answer within the deadline."""


class GenerationParseError(GenerationError):
    """The generative text service answered, but not in the required format."""

    def __init__(self, message: str, raw: str = ""):
        super().__init__(message)
        self.raw = raw
