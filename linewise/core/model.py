"""Remote model providers for Linewise."""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Type

import httpx

from linewise.core.config import ProviderSettings
from linewise.utils.errors import ProviderError
from linewise.utils.logging import get_logger

logger = get_logger(__name__)

Messages = List[Dict[str, str]]


class BaseProvider:
    """Interface implemented by all provider backends."""

    name: str

    def __init__(self, *, settings: ProviderSettings, client: Optional[httpx.AsyncClient] = None) -> None:
        self.settings = settings
        self.api_key = settings.api_key
        self.base_url = settings.base_url
        self._client = client

    async def complete(self, messages: Messages) -> str:
        """Return the assistant text for ``messages``.

        Implementations raise :class:`ProviderError` for every failure so the
        caller can fall back without inspecting transport details.
        """

        raise NotImplementedError


class OpenAIProvider(BaseProvider):
    """OpenAI-compatible chat completions provider using HTTPX.

    An ``httpx.AsyncClient`` may be injected; otherwise a short-lived client
    is opened per call with the configured timeout.
    """

    name = "openai"
    default_url = "https://api.openai.com/v1/chat/completions"

    async def complete(self, messages: Messages) -> str:
        if not self.api_key:
            raise ProviderError("OpenAI API key missing")
        payload = {
            "model": self.settings.model,
            "messages": messages,
            "temperature": self.settings.temperature,
            "max_tokens": self.settings.max_tokens,
            "stream": False,
        }
        try:
            if self._client is not None:
                response = await self._post(self._client, payload)
            else:
                async with httpx.AsyncClient(timeout=self.settings.timeout) as client:
                    response = await self._post(client, payload)
        except httpx.HTTPError as exc:
            raise ProviderError(f"OpenAI request failed: {exc}") from exc

        if response.status_code >= 400:
            raise ProviderError(f"OpenAI error {response.status_code}: {response.text}")
        try:
            body = response.json()
            content = body["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise ProviderError("OpenAI response missing assistant content") from exc
        if not isinstance(content, str) or not content:
            raise ProviderError("No response from OpenAI")
        return content

    async def _post(self, client: httpx.AsyncClient, payload: Dict[str, Any]) -> httpx.Response:
        return await client.post(
            self.base_url or self.default_url,
            headers={"Authorization": f"Bearer {self.api_key}"},
            json=payload,
        )


PROVIDER_REGISTRY: Dict[str, Type[BaseProvider]] = {
    OpenAIProvider.name: OpenAIProvider,
}


def create_provider(settings: ProviderSettings, *, client: Optional[httpx.AsyncClient] = None) -> Optional[BaseProvider]:
    """Build the configured provider, or ``None`` when it cannot be used.

    A missing or placeholder API key means the remote strategy is not
    configured. An unknown provider type is a configuration mistake and is
    logged, but still only disables the remote strategy.
    """

    if not settings.has_api_key:
        logger.info("API key not configured, using fallback analysis", extra={"provider": settings.type})
        return None
    provider_cls = PROVIDER_REGISTRY.get(settings.type)
    if provider_cls is None:
        logger.error("unknown provider type", extra={"provider": settings.type})
        return None
    logger.info("provider initialised", extra={"provider": settings.type})
    return provider_cls(settings=settings, client=client)


__all__ = [
    "BaseProvider",
    "OpenAIProvider",
    "PROVIDER_REGISTRY",
    "ProviderError",
    "create_provider",
]
