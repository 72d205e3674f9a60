"""Engine configuration.

Settings are built once by the application (usually via ``EngineSettings.from_env``)
and passed into the resolver, synthesizer and planner. Nothing in the engine
reads the environment while serving a request.
"""

from __future__ import annotations

import logging
import os
from enum import Enum

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

PLACEHOLDER_KEYS = {"", "your_gemini_api_key_here", "your_actual_gemini_api_key_here"}

DEFAULT_GEMINI_MODEL = "gemini-2.0-flash-exp"
DEFAULT_BEDROCK_MODEL = "us.anthropic.claude-sonnet-4-20250514-v1:0"
DEFAULT_TIMEOUT_SECONDS = 9.0


class GenerativeProvider(str, Enum):
    GEMINI = "gemini"
    BEDROCK = "bedrock"


class EngineSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    provider: GenerativeProvider = GenerativeProvider.GEMINI
    gemini_api_key: str | None = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    aws_region: str = "us-east-1"
    aws_access_key: str | None = None
    aws_secret_key: str | None = None
    bedrock_model_id: str = DEFAULT_BEDROCK_MODEL
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)

    @property
    def generative_enabled(self) -> bool:
        """Whether the selected provider has usable credentials."""
        if self.provider is GenerativeProvider.GEMINI:
            return (self.gemini_api_key or "").strip() not in PLACEHOLDER_KEYS
        return bool(self.aws_access_key and self.aws_secret_key)

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> EngineSettings:
        """Read settings from the process environment (and ``.env`` if present)."""
        if load_env_file:
            load_dotenv()

        provider_name = os.getenv("GENERATIVE_PROVIDER", GenerativeProvider.GEMINI.value).strip().lower()
        try:
            provider = GenerativeProvider(provider_name)
        except ValueError:
            logger.warning("Unknown GENERATIVE_PROVIDER %r, using gemini", provider_name)
            provider = GenerativeProvider.GEMINI

        timeout_raw = os.getenv("GENERATIVE_TIMEOUT_SECONDS", "")
        try:
            timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT_SECONDS
        except ValueError:
            logger.warning("Invalid GENERATIVE_TIMEOUT_SECONDS %r, using %.1fs", timeout_raw, DEFAULT_TIMEOUT_SECONDS)
            timeout = DEFAULT_TIMEOUT_SECONDS
        if timeout <= 0:
            timeout = DEFAULT_TIMEOUT_SECONDS

        return cls(
            provider=provider,
            gemini_api_key=os.getenv("GEMINI_API_KEY"),
            gemini_model=os.getenv("GEMINI_MODEL", DEFAULT_GEMINI_MODEL),
            aws_region=os.getenv("AWS_REGION", "us-east-1"),
            aws_access_key=os.getenv("AWS_ACCESS_KEY_ID"),
            aws_secret_key=os.getenv("AWS_SECRET_ACCESS_KEY"),
            bedrock_model_id=os.getenv("BEDROCK_MODEL_ID", DEFAULT_BEDROCK_MODEL),
            timeout_seconds=timeout,
        )
