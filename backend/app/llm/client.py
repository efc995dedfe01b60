"""Streaming LLM client for chat turns with OpenAI integration.

Security: API keys come from the request's provider config or the environment,
never hardcoded. Provides a deterministic stub when no key is present.
"""

import logging
from collections.abc import AsyncIterator, Callable
from typing import Protocol

from openai import AsyncOpenAI

from backend.app.config import Settings, get_settings
from backend.app.models.chat import ProviderConfig

logger = logging.getLogger(__name__)

STUB_REPLY = (
    "I can't reach a language model right now because no API key is configured. "
    "Add one in Settings and send your message again. "
    "Your document was left unchanged."
)


class CompletionClient(Protocol):
    """Protocol for streaming completion clients."""

    def stream_completion(self, *, messages: list[dict[str, str]]) -> AsyncIterator[str]:
        """Stream completion text for a chat message list.

        Args:
            messages: Chat messages (system prompt first, then history)

        Yields:
            Non-empty text chunks in generation order
        """
        ...


class DeterministicStubClient:
    """Deterministic stub client for testing (no API key required)."""

    def __init__(self, reply: str = STUB_REPLY, chunk_size: int = 24):
        self.reply = reply
        self.chunk_size = chunk_size

    async def stream_completion(self, *, messages: list[dict[str, str]]) -> AsyncIterator[str]:
        """Stream the fixed reply in fixed-size chunks."""
        for start in range(0, len(self.reply), self.chunk_size):
            yield self.reply[start : start + self.chunk_size]


class OpenAIStreamingClient:
    """OpenAI-backed streaming client."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        base_url: str | None = None,
        max_tokens: int = 4096,
    ):
        """Initialize OpenAI client.

        Args:
            api_key: Provider API key
            model: Model name to use
            base_url: Optional OpenAI-compatible endpoint
            max_tokens: Completion token cap per turn
        """
        self.client = AsyncOpenAI(api_key=api_key, base_url=base_url or None)
        self.model = model
        self.max_tokens = max_tokens

    async def stream_completion(self, *, messages: list[dict[str, str]]) -> AsyncIterator[str]:
        """Stream completion text from the chat completions API.

        Upstream errors propagate; the gateway turns them into error frames.
        """
        stream = await self.client.chat.completions.create(
            model=self.model,
            messages=messages,  # type: ignore[arg-type]
            stream=True,
            max_tokens=self.max_tokens,
        )

        async for chunk in stream:
            if not chunk.choices:
                continue
            text = chunk.choices[0].delta.content
            if text:
                yield text


def get_completion_client(
    provider: ProviderConfig, settings: Settings | None = None
) -> CompletionClient:
    """Pick a completion client for one turn.

    Request-level provider values win over server settings.

    Returns:
        OpenAIStreamingClient if an API key is available, DeterministicStubClient otherwise
    """
    settings = settings or get_settings()

    api_key = provider.api_key
    if not api_key and settings.openai_api_key:
        api_key = settings.openai_api_key.get_secret_value()

    if not api_key:
        logger.warning("No OpenAI API key configured, using deterministic stub client")
        return DeterministicStubClient()

    model = provider.model or settings.openai_model
    logger.info(f"Using OpenAI client for chat turn (model={model})")
    return OpenAIStreamingClient(
        api_key=api_key,
        model=model,
        base_url=provider.base_url or settings.openai_base_url,
        max_tokens=settings.chat_max_tokens,
    )


CompletionClientFactory = Callable[[ProviderConfig, Settings], CompletionClient]


def get_completion_client_factory() -> CompletionClientFactory:
    """FastAPI dependency returning the client factory (overridden in tests)."""
    return get_completion_client
