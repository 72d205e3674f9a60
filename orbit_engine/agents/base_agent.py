"""Generative text service clients and the deadline-bounded agent base class."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

import httpx
from anthropic import AnthropicBedrock

from orbit_engine.config import DEFAULT_TIMEOUT_SECONDS, EngineSettings, GenerativeProvider
from orbit_engine.exceptions import GenerationError, GenerationTimeout

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"
BEDROCK_MAX_RETRIES = 1

_STATUS_HINTS = {
    400: "bad request",
    403: "API key invalid or insufficient permissions",
    404: "model not found or API key invalid",
    429: "rate limit exceeded",
}


class TextClient(Protocol):
    async def generate(
        self,
        prompt: str,
        *,
        temperature: float,
        max_tokens: int,
        top_k: int | None = None,
        top_p: float | None = None,
    ) -> str: ...


class GeminiTextClient:
    """Gemini ``generateContent`` REST endpoint over httpx."""

    def __init__(
        self,
        api_key: str,
        model: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._transport = transport

    async def generate(
        self,
        prompt: str,
        *,
        temperature: float,
        max_tokens: int,
        top_k: int | None = None,
        top_p: float | None = None,
    ) -> str:
        generation_config: dict[str, float | int] = {
            "temperature": temperature,
            "maxOutputTokens": max_tokens,
        }
        if top_k is not None:
            generation_config["topK"] = top_k
        if top_p is not None:
            generation_config["topP"] = top_p

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                resp = await client.post(
                    f"{GEMINI_BASE_URL}/{self.model}:generateContent",
                    params={"key": self.api_key},
                    json={
                        "contents": [{"parts": [{"text": prompt}]}],
                        "generationConfig": generation_config,
                    },
                    headers={"Content-Type": "application/json"},
                )
                resp.raise_for_status()
            except httpx.HTTPStatusError as exc:
                status = exc.response.status_code
                logger.warning(
                    "Gemini API error: %s (%s)", status, _STATUS_HINTS.get(status, exc.response.reason_phrase)
                )
                raise GenerationError(f"Gemini API returned {status}") from exc
            except httpx.HTTPError as exc:
                raise GenerationError(f"Gemini request failed: {type(exc).__name__}: {exc}") from exc

            try:
                data = resp.json()
            except ValueError as exc:
                raise GenerationError("Gemini returned malformed JSON") from exc

        candidates = data.get("candidates") if isinstance(data, dict) else None
        if not candidates:
            raise GenerationError("No candidates in Gemini response")
        try:
            return candidates[0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            raise GenerationError("Gemini candidate carried no text") from exc


class BedrockTextClient:
    """Claude via Bedrock. The SDK is synchronous, so calls are offloaded to a thread."""

    def __init__(self, client: AnthropicBedrock, model_id: str):
        self.client = client
        self.model_id = model_id

    async def generate(
        self,
        prompt: str,
        *,
        temperature: float,
        max_tokens: int,
        top_k: int | None = None,
        top_p: float | None = None,
    ) -> str:
        kwargs: dict = {
            "model": self.model_id,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if top_k is not None:
            kwargs["top_k"] = top_k

        try:
            response = await asyncio.to_thread(self.client.messages.create, **kwargs)
        except Exception as exc:
            raise GenerationError(f"Bedrock request failed: {type(exc).__name__}: {exc}") from exc

        text = "".join(block.text for block in response.content if block.type == "text")
        if not text:
            raise GenerationError("Bedrock response carried no text")
        return text


def build_text_client(settings: EngineSettings) -> TextClient | None:
    """Construct the configured client, or ``None`` when no provider is usable."""
    if not settings.generative_enabled:
        logger.debug("No generative provider configured; deterministic paths only")
        return None
    if settings.provider is GenerativeProvider.BEDROCK:
        return BedrockTextClient(
            AnthropicBedrock(
                aws_region=settings.aws_region,
                aws_access_key=settings.aws_access_key,
                aws_secret_key=settings.aws_secret_key,
                timeout=settings.timeout_seconds,
                max_retries=BEDROCK_MAX_RETRIES,
            ),
            settings.bedrock_model_id,
        )
    return GeminiTextClient(settings.gemini_api_key or "", settings.gemini_model, timeout=settings.timeout_seconds)


class TextAgent:
    """Base class for the prompt/parse agents.

    Every call to the service is raced against ``timeout`` seconds; a timeout
    surfaces as ``GenerationTimeout`` so callers handle one exception family.
    """

    name: str = "base"
    temperature: float = 0.2
    max_tokens: int = 1024
    top_k: int | None = None
    top_p: float | None = None

    def __init__(self, client: TextClient, timeout: float):
        self.client = client
        self.timeout = timeout

    async def _generate(self, prompt: str, *, temperature: float | None = None, max_tokens: int | None = None) -> str:
        try:
            return await asyncio.wait_for(
                self.client.generate(
                    prompt,
                    temperature=self.temperature if temperature is None else temperature,
                    max_tokens=self.max_tokens if max_tokens is None else max_tokens,
                    top_k=self.top_k,
                    top_p=self.top_p,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as exc:
            raise GenerationTimeout(f"{self.name} agent timed out after {self.timeout:.1f}s") from exc
