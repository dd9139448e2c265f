"""Review prose enhancement endpoints (best-effort LLM)."""

from fastapi import APIRouter, Depends

from bocado.api.deps import get_current_user
from bocado.core.exceptions import InvalidReviewData
from bocado.models.user import User
from bocado.schemas.enhance import EnhanceResponse, ReviewEnhanceRequest, ReviewTextEnhanceRequest
from bocado.services.llm import LLMService, get_llm_service

router = APIRouter(prefix="/enhance", tags=["enhance"])


@router.post("/review-text", response_model=EnhanceResponse)
def enhance_review_text(
    payload: ReviewTextEnhanceRequest,
    llm: LLMService = Depends(get_llm_service),
) -> EnhanceResponse:
    """Rewrite review text with its context; on failure the original text comes back."""
    text, success = llm.enhance_review_text(payload)
    return EnhanceResponse(enhanced_text=text, success=success)


@router.post("/review", response_model=EnhanceResponse)
def enhance_review(
    payload: ReviewEnhanceRequest,
    user: User = Depends(get_current_user),
    llm: LLMService = Depends(get_llm_service),
) -> EnhanceResponse:
    if not payload.comment.strip():
        raise InvalidReviewData("El comentario no puede estar vacío")
    text, success = llm.enhance_review(payload)
    return EnhanceResponse(enhanced_text=text, success=success)
