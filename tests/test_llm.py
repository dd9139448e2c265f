"""Tests for review text enhancement."""

from unittest.mock import MagicMock

import httpx
from openai import APITimeoutError

from bocado.schemas.enhance import DietaryOptions, ReviewEnhanceRequest, ReviewTextEnhanceRequest
from bocado.services.llm import LLMService, build_review_context


def _request(**overrides) -> ReviewTextEnhanceRequest:
    data = {
        "original_text": "Muy rico todo",
        "place_name": "Bar El Cairo",
        "dish_name": "Lomito",
        "ratings": {"food_taste": 9, "service": 5, "ambiance": 8},
        "price_range": "15000_20000",
        "category": "BARES",
        "dietary_options": DietaryOptions(celiac_friendly=True),
    }
    data.update(overrides)
    return ReviewTextEnhanceRequest(**data)


class TestBuildReviewContext:

    def test_includes_labels_and_only_high_ratings(self):
        context = build_review_context(_request())

        assert "Lugar: Bar El Cairo" in context
        assert "Tipo: Bar" in context
        assert "Precio por persona: $15.000 - $20.000" in context
        assert "Sabor: 9/10" in context
        assert "Ambiente: 8/10" in context
        assert "Servicio" not in context
        assert "apto celíacos" in context

    def test_empty_context(self):
        assert build_review_context(ReviewTextEnhanceRequest()) == ""


class TestLLMService:

    def test_returns_enhanced_text(self, openai_client):
        service = LLMService(client=openai_client)

        text, success = service.enhance_review_text(_request())

        assert (text, success) == ("Texto mejorado", True)
        kwargs = openai_client.chat.completions.create.call_args.kwargs
        assert kwargs["max_tokens"] == 200
        assert "Muy rico todo" in kwargs["messages"][0]["content"]

    def test_failure_returns_original_text(self):
        client = MagicMock()
        client.chat.completions.create.side_effect = APITimeoutError(
            request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        )
        service = LLMService(client=client)

        text, success = service.enhance_review_text(_request())

        assert (text, success) == ("Muy rico todo", False)

    def test_empty_completion_is_a_failure(self, openai_client):
        openai_client.chat.completions.create.return_value.choices[0].message.content = "  "
        service = LLMService(client=openai_client)

        assert service.enhance_review(ReviewEnhanceRequest(comment="Bien")) == ("Bien", False)

    def test_comment_enhancement_uses_larger_budget(self, openai_client):
        service = LLMService(client=openai_client)

        service.enhance_review(ReviewEnhanceRequest(comment="Bien", category="PIZZERIAS"))

        kwargs = openai_client.chat.completions.create.call_args.kwargs
        assert kwargs["max_tokens"] == 400
        assert "Pizzería" in kwargs["messages"][0]["content"]
