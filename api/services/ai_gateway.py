"""Summarize, translate and chat flows over the OpenAI connector.

Every flow asks the model for a JSON object and validates it against the
matching response model before anything is returned. Transport errors, model
errors and replies that fail validation all surface as ``ServiceError``; the
gateway never touches note state, so callers can retry freely.
"""

from __future__ import annotations

from time import time

import structlog
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from connectors.openai import OpenAIConnector, OpenAIModel

from ..exceptions import ServiceError, ValidationError
from ..models import (
    MIN_SUMMARY_LENGTH,
    ChatMessage,
    ChatResponse,
    Language,
    NoteContent,
    SummarizeResponse,
    TranslateResponse,
)
from ..observability import get_app_metrics, get_tracer
from ..prompts import get_chat_system_prompt, get_summarize_prompt, get_translate_prompt

logger = structlog.get_logger(__name__)

tracer = get_tracer(__name__)

# Assistant turns are called "model" on the client side
_ROLE_MAP = {"user": "user", "model": "assistant"}


class AIGateway:
    """AI assistant operations used by the note routes and the chat endpoint."""

    def __init__(
        self,
        api_key: str | None,
        model: OpenAIModel | str = OpenAIModel.GPT_4O_MINI,
        timeout: float = 60.0,
        max_retries: int = 3,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.max_retries = max_retries

    async def summarize(self, body: str) -> str:
        """Summarize a note body.

        Raises:
            ValidationError: If the body is too short to be worth summarizing
            ServiceError: If the model call fails or returns an invalid reply
        """
        if len(body) < MIN_SUMMARY_LENGTH:
            raise ValidationError(
                f"Note is too short to summarize (minimum {MIN_SUMMARY_LENGTH} characters)"
            )

        messages = [
            {"role": "system", "content": get_summarize_prompt()},
            {"role": "user", "content": body},
        ]
        reply = await self._complete("summarize", messages, SummarizeResponse, temperature=0.3)
        return reply.summary

    async def translate(self, title: str, body: str, target_language: Language) -> NoteContent:
        """Translate a note title and body into ``target_language``.

        Raises:
            ServiceError: If the model call fails or returns an invalid reply
        """
        target_language = Language(target_language)
        messages = [
            {"role": "system", "content": get_translate_prompt(target_language.display_name)},
            {"role": "user", "content": f"Title: {title}\nBody:\n{body}"},
        ]
        reply = await self._complete(
            "translate",
            messages,
            TranslateResponse,
            temperature=0.2,
            target_language=target_language.value,
        )
        return NoteContent(title=reply.translated_title, body=reply.translated_body)

    async def chat(self, history: list[ChatMessage]) -> str:
        """Answer the last user turn of ``history`` as SmartBot."""
        messages = [{"role": "system", "content": get_chat_system_prompt()}]
        messages.extend(
            {"role": _ROLE_MAP[message.role], "content": message.text} for message in history
        )
        reply = await self._complete("chat", messages, ChatResponse, temperature=0.7)
        return reply.response

    async def _complete(
        self,
        operation: str,
        messages: list[dict[str, str]],
        reply_model: type[BaseModel],
        temperature: float | None = None,
        **log_fields,
    ):
        metrics = get_app_metrics()
        metrics.ai_requests.add(1, {"operation": operation})

        with tracer.start_as_current_span(f"ai.{operation}") as span:
            span.set_attribute("ai.operation", operation)
            span.set_attribute("ai.model", str(self.model))

            if not self.api_key:
                metrics.ai_failures.add(1, {"operation": operation})
                logger.error("openai_api_key_missing", operation=operation)
                raise ServiceError("OpenAI API key not configured")

            logger.info("ai_request_started", operation=operation, **log_fields)
            start_time = time()

            try:
                async with OpenAIConnector(
                    api_key=self.api_key, timeout=self.timeout, max_retries=self.max_retries
                ) as connector:
                    raw_reply, completion = await connector.json_completion(
                        messages=messages, model=self.model, temperature=temperature
                    )
                    reply = reply_model.model_validate_json(raw_reply)

                    if completion.usage:
                        cost = connector.estimate_cost(
                            model=self.model,
                            prompt_tokens=completion.usage.prompt_tokens,
                            completion_tokens=completion.usage.completion_tokens,
                        )
                        span.set_attribute("openai.estimated_cost_usd", cost)
                        logger.info(
                            "openai_completion_success",
                            operation=operation,
                            prompt_tokens=completion.usage.prompt_tokens,
                            completion_tokens=completion.usage.completion_tokens,
                            cost_usd=cost,
                        )
            except PydanticValidationError as e:
                metrics.ai_failures.add(1, {"operation": operation})
                logger.error("ai_reply_invalid", operation=operation, error_count=e.error_count())
                raise ServiceError(f"The assistant returned an unexpected {operation} reply") from e
            except Exception as e:
                metrics.ai_failures.add(1, {"operation": operation})
                logger.error("ai_request_failed", operation=operation, error=str(e))
                raise ServiceError(f"The assistant could not {operation} right now: {e!s}") from e
            finally:
                metrics.ai_duration.record(
                    (time() - start_time) * 1000, {"operation": operation}
                )

            logger.info("ai_request_completed", operation=operation, **log_fields)
            return reply
