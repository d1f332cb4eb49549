"""OpenAI API connector for the note assistant.

This module provides a thin wrapper around the OpenAI Python SDK with:
- Async chat completions, including JSON-mode completions for structured replies
- Token usage tracking and cost estimation
- OpenTelemetry instrumentation for observability
- Configurable retry logic and timeouts
"""

from enum import Enum
from typing import Any

from openai import AsyncOpenAI
from openai.types.chat import ChatCompletion
from opentelemetry import trace

tracer = trace.get_tracer(__name__)


class OpenAIModel(str, Enum):
    """Available OpenAI chat models for easy reference."""

    GPT_4O = "gpt-4o"
    GPT_4O_MINI = "gpt-4o-mini"
    GPT_4_TURBO = "gpt-4-turbo"
    GPT_4 = "gpt-4"
    GPT_35_TURBO = "gpt-3.5-turbo"


class OpenAIConnector:
    """Async OpenAI connector.

    Example:
        >>> async with OpenAIConnector(api_key="sk-...") as connector:
        ...     response = await connector.chat_completion(
        ...         messages=[{"role": "user", "content": "Hello!"}],
        ...         model=OpenAIModel.GPT_4O_MINI
        ...     )
        ...     print(response.choices[0].message.content)
    """

    def __init__(
        self,
        api_key: str | None = None,
        organization: str | None = None,
        base_url: str | None = None,
        timeout: float = 60.0,
        max_retries: int = 3,
    ):
        """Initialize OpenAI connector.

        Args:
            api_key: OpenAI API key (falls back to OPENAI_API_KEY env var)
            organization: Optional organization ID
            base_url: Optional custom base URL (for proxies or compatible APIs)
            timeout: Request timeout in seconds
            max_retries: Maximum number of retry attempts
        """
        self.client = AsyncOpenAI(
            api_key=api_key,
            organization=organization,
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
        )

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def close(self):
        """Close the underlying HTTP client."""
        await self.client.close()

    @tracer.start_as_current_span("openai.chat_completion")
    async def chat_completion(
        self,
        messages: list[dict[str, Any]],
        model: OpenAIModel | str = OpenAIModel.GPT_4O_MINI,
        temperature: float | None = None,
        max_tokens: int | None = None,
        response_format: dict[str, str] | None = None,
        seed: int | None = None,
        **kwargs: Any,
    ) -> ChatCompletion:
        """Create a chat completion.

        Args:
            messages: List of message dicts with 'role' and 'content'
            model: Model to use for completion
            temperature: Sampling temperature (0-2)
            max_tokens: Maximum tokens to generate
            response_format: Response format (e.g., {"type": "json_object"})
            seed: Random seed for deterministic sampling
            **kwargs: Additional parameters to pass to the API

        Returns:
            ChatCompletion object
        """
        span = trace.get_current_span()
        span.set_attribute("openai.model", str(model))
        span.set_attribute("openai.message_count", len(messages))

        # Build params dict, only including non-None values
        params: dict[str, Any] = {
            "model": model,  # OpenAIModel inherits from str, so it can be used directly
            "messages": messages,
            **kwargs,
        }

        if temperature is not None:
            params["temperature"] = temperature
        if max_tokens is not None:
            params["max_tokens"] = max_tokens
        if response_format is not None:
            params["response_format"] = response_format
        if seed is not None:
            params["seed"] = seed

        try:
            response = await self.client.chat.completions.create(**params)

            if response.usage:
                span.set_attribute("openai.prompt_tokens", response.usage.prompt_tokens)
                span.set_attribute("openai.completion_tokens", response.usage.completion_tokens)
                span.set_attribute("openai.total_tokens", response.usage.total_tokens)

            return response
        except Exception as e:
            span.record_exception(e)
            raise

    async def json_completion(
        self,
        messages: list[dict[str, Any]],
        model: OpenAIModel | str = OpenAIModel.GPT_4O_MINI,
        **kwargs: Any,
    ) -> tuple[str, ChatCompletion]:
        """Create a JSON-mode completion and return its raw JSON text with the completion.

        Raises:
            ValueError: If the model returned no content
        """
        completion = await self.chat_completion(
            messages=messages,
            model=model,
            response_format={"type": "json_object"},
            **kwargs,
        )
        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            raise ValueError("Model returned an empty response")
        return content, completion

    def estimate_cost(
        self,
        model: OpenAIModel | str,
        prompt_tokens: int,
        completion_tokens: int = 0,
    ) -> float:
        """Estimate cost in USD for a completion.

        Pricing is approximate; check the OpenAI pricing page for current rates.

        Args:
            model: Model used
            prompt_tokens: Number of prompt tokens
            completion_tokens: Number of completion tokens

        Returns:
            Estimated cost in USD
        """
        # Prices per 1M tokens (input, output)
        pricing = {
            OpenAIModel.GPT_4O: (2.50, 10.00),
            OpenAIModel.GPT_4O_MINI: (0.15, 0.60),
            OpenAIModel.GPT_4_TURBO: (10.00, 30.00),
            OpenAIModel.GPT_4: (30.00, 60.00),
            OpenAIModel.GPT_35_TURBO: (0.50, 1.50),
        }

        model_str = model.value if isinstance(model, OpenAIModel) else model

        # Longest key first so "gpt-4o-2024-08-06" prices as gpt-4o, not gpt-4
        for model_key, (input_price, output_price) in sorted(
            pricing.items(), key=lambda item: len(item[0].value), reverse=True
        ):
            if model_str.startswith(model_key.value):
                input_cost = (prompt_tokens / 1_000_000) * input_price
                output_cost = (completion_tokens / 1_000_000) * output_price
                return input_cost + output_cost

        # Default fallback estimate (GPT-4o-mini pricing)
        return (prompt_tokens / 1_000_000) * 0.15 + (completion_tokens / 1_000_000) * 0.60
