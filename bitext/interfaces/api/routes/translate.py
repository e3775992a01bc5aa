"""
Translation Routes - Bilingual translation endpoints.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from bitext.config.errors import ValidationError
from bitext.domains.orchestration import TranslationOrchestrator
from bitext.interfaces.api.deps import get_orchestrator

router = APIRouter()


class TranslateRequest(BaseModel):
    """Translate request body: ``text`` alone, or ``messages`` with ``model``."""

    text: Any = None
    messages: list[Any] | None = None
    model: str | None = Field(default=None, description="Model id; defaults to the configured model")


class WordItem(BaseModel):
    """Vocabulary item."""

    word: str
    type: str
    meaning: str


class TranslationPayload(BaseModel):
    """Sentence-aligned translation."""

    en: list[str]
    zh: list[str]
    words: list[WordItem]


class TranslateResponse(BaseModel):
    """Translate response."""

    success: bool = True
    data: TranslationPayload


class ModelsResponse(BaseModel):
    """Registry listing."""

    success: bool = True
    default_model: str
    models: dict[str, list[str]]


@router.post("/translate", response_model=TranslateResponse)
async def translate(
    body: TranslateRequest,
    request: Request,
    orchestrator: TranslationOrchestrator = Depends(get_orchestrator),
) -> TranslateResponse:
    """
    Translate Chinese text into sentence-aligned English with vocabulary.

    - **text**: Text to translate (default model)
    - **messages**: Conversation; the last message is translated
    - **model**: Model id from `/api/models`
    """
    model_id = body.model or orchestrator.default_model
    request.state.model_id = model_id
    request.state.has_credential = orchestrator.registry.has_credential(model_id)

    if body.messages is not None:
        result = await orchestrator.translate_messages(body.messages, model_id)
    elif body.text is not None:
        result = await orchestrator.translate_text(body.text, model_id)
    else:
        raise ValidationError("No text or messages provided")

    return TranslateResponse(data=TranslationPayload.model_validate(result.to_payload()))


@router.get("/models", response_model=ModelsResponse)
async def list_models(
    orchestrator: TranslationOrchestrator = Depends(get_orchestrator),
) -> ModelsResponse:
    """List supported models grouped by backend family."""
    return ModelsResponse(
        default_model=orchestrator.default_model,
        models=orchestrator.registry.models(),
    )
