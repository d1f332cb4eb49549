"""AI assistant endpoints: summarize, translate and SmartBot chat."""

import structlog
from fastapi import APIRouter, Depends

from ..dependencies import get_ai_gateway
from ..exceptions import ValidationError
from ..models import (
    ChatRequest,
    ChatResponse,
    SummarizeRequest,
    SummarizeResponse,
    TranslateRequest,
    TranslateResponse,
)
from ..observability import get_tracer
from ..services import AIGateway

logger = structlog.get_logger(__name__)

tracer = get_tracer(__name__)

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/summarize", response_model=SummarizeResponse)
async def summarize(request: SummarizeRequest, gateway: AIGateway = Depends(get_ai_gateway)):
    """Summarize arbitrary note text."""
    with tracer.start_as_current_span("ai_summarize") as span:
        span.set_attribute("note.length", len(request.note))
        return SummarizeResponse(summary=await gateway.summarize(request.note))


@router.post("/translate", response_model=TranslateResponse)
async def translate(request: TranslateRequest, gateway: AIGateway = Depends(get_ai_gateway)):
    """Translate a title and body into the target language."""
    with tracer.start_as_current_span("ai_translate") as span:
        span.set_attribute("translation.target", request.target_language.value)

        translated = await gateway.translate(request.title, request.body, request.target_language)
        return TranslateResponse(
            translated_title=translated.title, translated_body=translated.body
        )


@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest, gateway: AIGateway = Depends(get_ai_gateway)):
    """
    Continue a SmartBot conversation.

    The client sends the whole history; the last turn must be the user's.
    Nothing is stored server-side.
    """
    with tracer.start_as_current_span("ai_chat") as span:
        span.set_attribute("chat.turns", len(request.history))

        if request.history[-1].role != "user":
            raise ValidationError("The last message in the history must come from the user")

        logger.info("chat_message_received", turns=len(request.history))
        return ChatResponse(response=await gateway.chat(request.history))
