"""Decoder client abstractions and implementations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from openai import AsyncOpenAI

from src.config import settings


class DecoderClient(ABC):
    """Abstract decoder interface for text generation models."""

    @abstractmethod
    async def decode(self, prompt: str, *, max_tokens: int | None = None) -> str:
        """Return the decoded/completed text for the provided prompt."""


class OpenAIDecoderClient(DecoderClient):
    """Decoder backed by an OpenAI-compatible Chat Completions endpoint.

    Used against OpenRouter, which speaks the same wire format when the SDK is
    given its ``base_url``.
    """

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        base_url: str | None = None,
        temperature: float = 0.1,
        max_tokens: int = 4000,
        timeout: float = 30.0,
        default_headers: dict[str, str] | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("API key is required to initialize decoder client")
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url or None,
            timeout=timeout,
            default_headers=default_headers,
        )
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def decode(self, prompt: str, *, max_tokens: int | None = None) -> str:
        """Send the prompt as a single user message and return the reply text."""

        chat_api = getattr(getattr(self._client, "chat", None), "completions", None)
        if chat_api is None:
            raise RuntimeError("OpenAI client does not expose Chat Completions endpoint")
        return await self._decode_with_chat_completions(
            chat_api, prompt, max_tokens or self._max_tokens
        )

    async def _decode_with_chat_completions(
        self,
        chat_api: Any,
        prompt: str,
        max_tokens: int,
    ) -> str:
        completion = await chat_api.create(
            model=self._model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self._temperature,
            max_tokens=max_tokens,
        )

        if getattr(completion, "choices", None):
            message = completion.choices[0].message
            content = getattr(message, "content", None)
            if isinstance(content, list):
                # Newer SDKs can return list-based content payloads
                text_chunks = (
                    part.get("text", "") for part in content if isinstance(part, dict)
                )
                return "".join(text_chunks) or str(completion)
            if content:
                return content

        return str(completion)


_decoder_client: DecoderClient | None = None


def _initialize_decoder() -> DecoderClient | None:
    if not settings.translator_enabled:
        return None
    return OpenAIDecoderClient(
        api_key=settings.OPENROUTER_API_KEY,
        model=settings.TRANSLATION_MODEL,
        base_url=settings.OPENROUTER_BASE_URL,
        timeout=settings.TRANSLATION_TIMEOUT_SECONDS,
        default_headers={
            "HTTP-Referer": "https://github.com/ads-account-bot",
            "X-Title": "Ads Account Bot Chinese Translation",
        },
    )


def get_decoder_client() -> DecoderClient | None:
    """Return the configured decoder client, created on first use."""

    global _decoder_client
    if _decoder_client is None:
        _decoder_client = _initialize_decoder()
    return _decoder_client
