"""Utilities for interacting with OpenAI."""

from __future__ import annotations

from typing import Any

import structlog
from openai import OpenAI, OpenAIError

from bocado.core.catalog import CATEGORY_INFO, RATING_FIELDS, Category, price_label
from bocado.core.config import settings
from bocado.schemas.enhance import ReviewEnhanceRequest, ReviewTextEnhanceRequest

logger = structlog.get_logger(__name__)

HIGH_RATING_THRESHOLD = 8


def _category_singular(category: str | None) -> str | None:
    if not category:
        return None
    try:
        return CATEGORY_INFO[Category(category)].singular
    except ValueError:
        return category


def build_review_context(request: ReviewTextEnhanceRequest) -> str:
    """One-line context: place, dish, type, price, high ratings and dietary options."""
    parts: list[str] = []
    if request.place_name:
        parts.append(f"Lugar: {request.place_name}")
    if request.dish_name:
        parts.append(f"Plato recomendado: {request.dish_name}")
    if request.category:
        parts.append(f"Tipo: {_category_singular(request.category)}")
    if request.price_range:
        parts.append(f"Precio por persona: {price_label(request.price_range)}")

    high = [
        f"{RATING_FIELDS.get(key, key)}: {value}/10"
        for key, value in request.ratings.items()
        if value >= HIGH_RATING_THRESHOLD
    ]
    if high:
        parts.append(f"Puntuaciones altas: {', '.join(high)}")

    if request.dietary_options:
        dietary = []
        if request.dietary_options.celiac_friendly:
            dietary.append("apto celíacos")
        if request.dietary_options.vegetarian_friendly:
            dietary.append("opciones vegetarianas")
        if dietary:
            parts.append(f"Opciones especiales: {', '.join(dietary)}")
    return " | ".join(parts)


def review_text_prompt(request: ReviewTextEnhanceRequest) -> str:
    return (
        "Eres un asistente que ayuda a mejorar reseñas de restaurantes en Argentina.\n\n"
        f"CONTEXTO DE LA RESEÑA:\n{build_review_context(request)}\n\n"
        f'TEXTO ORIGINAL:\n"{request.original_text}"\n\n'
        "INSTRUCCIONES:\n"
        "- Mejora el texto manteniendo el tono personal y auténtico\n"
        "- Usa vocabulario argentino natural y coloquial\n"
        "- Mantén la longitud similar (máximo 50% más largo)\n"
        "- Incorpora sutilmente el contexto de la reseña si es relevante\n"
        "- NO inventes información que no esté en el contexto\n"
        "- Mantén la opinión original del usuario\n"
        "- Si el texto está vacío, sugiere un comentario basado en el contexto\n\n"
        "Responde SOLO con el texto mejorado, sin comillas ni explicaciones adicionales."
    )


def review_comment_prompt(request: ReviewEnhanceRequest) -> str:
    return (
        "Eres un experto en reseñas gastronómicas. Mejora la siguiente reseña de "
        "restaurante manteniendo la opinión original del usuario, pero haciéndola más "
        "descriptiva, atractiva y útil para otros comensales.\n\n"
        "Información del contexto:\n"
        f"- Restaurante: {request.place_name or 'No especificado'}\n"
        f"- Categoría: {_category_singular(request.category) or 'No especificada'}\n"
        f"- Plato mencionado: {request.dish_name or 'No especificado'}\n\n"
        f'Reseña original:\n"{request.comment.strip()}"\n\n'
        "Instrucciones:\n"
        "1. Mantén la opinión y sentimiento original del usuario\n"
        "2. Usa un lenguaje natural y cercano, típico de Argentina\n"
        "3. Mantén un tono auténtico, no exagerado\n"
        "4. Si es muy corta, expándela con detalles relevantes\n"
        "5. Máximo 300 palabras\n"
        "6. No inventes información que no esté implícita en el comentario original\n\n"
        "Responde SOLO con la reseña mejorada, sin comillas ni explicaciones adicionales."
    )


class LLMService:
    """Wrapper around the OpenAI chat API for review prose."""

    def __init__(self, client: Any | None = None) -> None:
        if client is None:
            if not settings.openai_api_key:
                raise RuntimeError("OPENAI_API_KEY is not configured.")
            client = OpenAI(api_key=settings.openai_api_key, timeout=settings.llm_timeout_seconds)
        self._client = client

    def _complete(self, prompt: str, max_tokens: int, temperature: float) -> str:
        response = self._client.chat.completions.create(
            model=settings.openai_response_model,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=max_tokens,
            temperature=temperature,
        )
        return (response.choices[0].message.content or "").strip().strip('"')

    def _best_effort(self, prompt: str, fallback: str, max_tokens: int, temperature: float) -> tuple[str, bool]:
        try:
            text = self._complete(prompt, max_tokens, temperature)
        except OpenAIError as exc:
            logger.warning("llm_enhance_failed", error=str(exc))
            return fallback, False
        if not text:
            return fallback, False
        return text, True

    def enhance_review_text(self, request: ReviewTextEnhanceRequest) -> tuple[str, bool]:
        """Improve review prose using its structured context; the original comes back on failure."""
        return self._best_effort(review_text_prompt(request), request.original_text, 200, 0.7)

    def enhance_review(self, request: ReviewEnhanceRequest) -> tuple[str, bool]:
        return self._best_effort(review_comment_prompt(request), request.comment, 400, 0.7)


_llm_service_instance: LLMService | None = None


def get_llm_service() -> LLMService:
    """Lazy initialization of LLM service."""
    global _llm_service_instance
    if _llm_service_instance is None:
        _llm_service_instance = LLMService()
    return _llm_service_instance
