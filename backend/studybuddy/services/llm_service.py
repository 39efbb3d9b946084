"""
Text-generation client for the Hugging Face inference API.

Usage:
    text = await generate_text(prompt, temperature=0.7)

The service is treated as unreliable: every transport error, non-2xx status and
unexpected body shape is raised as AIServiceError for the caller to absorb.
"""
from __future__ import annotations

import logging

import httpx

from studybuddy.config import settings

logger = logging.getLogger(__name__)


class AIServiceError(Exception):
    """Raised when the text-generation service fails or returns an unusable body."""


class LLMUnavailableError(AIServiceError):
    """Raised when no API credential is configured."""


async def generate_text(
    prompt: str,
    *,
    temperature: float,
    max_new_tokens: int | None = None,
    api_key: str | None = None,
    model_url: str | None = None,
    timeout: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """
    Send one prompt and return the generated text.

    Arguments left as None fall back to the configured settings.
    Raises LLMUnavailableError without a credential, AIServiceError on any failure.
    """
    api_key = settings.huggingface_api_key if api_key is None else api_key
    if not api_key.strip():
        raise LLMUnavailableError("No Hugging Face API key configured")

    payload = {
        "inputs": prompt,
        "parameters": {
            "max_new_tokens": max_new_tokens or settings.ai_max_new_tokens,
            "temperature": temperature,
        },
    }
    try:
        async with httpx.AsyncClient(transport=transport) as client:
            res = await client.post(
                model_url or settings.ai_model_url,
                json=payload,
                headers={"Authorization": f"Bearer {api_key}"},
                timeout=timeout or settings.ai_timeout,
            )
            res.raise_for_status()
            body = res.json()
    except httpx.HTTPError as e:
        raise AIServiceError(f"Text generation request failed: {e}") from e
    except ValueError as e:
        raise AIServiceError(f"Text generation returned invalid JSON: {e}") from e

    # Expected shape: [{"generated_text": "..."}]
    if not isinstance(body, list) or not body or not isinstance(body[0], dict):
        raise AIServiceError(f"Unexpected response shape: {type(body).__name__}")
    text = body[0].get("generated_text")
    if not isinstance(text, str):
        raise AIServiceError("Response has no generated_text")
    return text
