"""
Chat Client Factory

Creates OpenAI-compatible chat clients (OpenRouter, OpenAI) or Groq clients.
"""

from typing import Any, Dict, Optional
import logging

from ...domain.exceptions import ModelConnectionError


logger = logging.getLogger(__name__)


def create_chat_client(
    provider: str = "openrouter",
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    timeout: float = 60.0,
    max_retries: int = 1,
    headers: Optional[Dict[str, str]] = None
) -> Any:
    """
    Create a chat completions client.

    Args:
        provider: "openrouter", "openai" or "groq"
        api_key: Provider API key
        base_url: Override API base URL (OpenAI-compatible providers)
        timeout: Request timeout in seconds
        max_retries: Client-level retries
        headers: Extra headers sent with every request

    Returns:
        Client exposing `chat.completions.create`

    Raises:
        ModelConnectionError: If no API key is configured or the SDK is missing
    """
    if not api_key:
        raise ModelConnectionError(
            "API key not provided. Set LABEL_SCANNER_API_KEY or OPENROUTER_API_KEY.",
            provider=provider,
        )

    provider = (provider or "openrouter").lower()

    try:
        if provider == "groq":
            from groq import Groq

            client = Groq(api_key=api_key, timeout=timeout, max_retries=max_retries)
        else:
            from openai import OpenAI

            client = OpenAI(
                api_key=api_key,
                base_url=base_url,
                timeout=timeout,
                max_retries=max_retries,
                default_headers=headers or None,
            )
    except ImportError as e:
        raise ModelConnectionError(f"Client SDK not installed: {e}", provider=provider)

    logger.info(f"Chat client initialized for provider={provider}")
    return client
