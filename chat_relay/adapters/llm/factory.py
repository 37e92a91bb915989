"""Factory pattern for creating LLM client instances."""

from chat_relay.adapters.llm.base import AbstractLLMClient
from chat_relay.adapters.llm.mock_client import MockLLMClient
from chat_relay.adapters.llm.openai_client import OpenAIClient
from chat_relay.core.config import LLMSettings, settings
from chat_relay.core.errors import ValidationAppError


def create_llm_client(llm_settings: LLMSettings | None = None) -> AbstractLLMClient:
    """Instantiate the upstream client selected by configuration.

    ``MOCK_API=true`` (or ``LLM_PROVIDER=mock``) wins over any provider
    setting so the service can run without credentials.

    Args:
        llm_settings: Optional settings; defaults to the global settings.

    Returns:
        AbstractLLMClient: Configured client instance.

    Raises:
        ValidationAppError: If provider-specific requirements are not met.
    """
    cfg = llm_settings or settings.llm
    provider = cfg.provider.lower()

    if cfg.mock_api or provider == "mock":
        return MockLLMClient()

    if provider == "openai":
        if not cfg.api_key:
            raise ValidationAppError(
                code="llm_missing_api_key",
                message="OpenAI provider requires LLM_API_KEY or OPENAI_API_KEY",
            )
        return OpenAIClient(
            api_key=cfg.api_key,
            model=cfg.model,
            base_url=cfg.base_url,
            timeout_seconds=cfg.timeout_seconds,
        )

    raise ValidationAppError(
        code="llm_unknown_provider",
        message=(
            f"Unknown LLM provider: '{provider}'. Supported providers: openai, mock"
        ),
    )
