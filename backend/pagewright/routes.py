# --- include all imports here ---
import json
from fastapi import APIRouter, HTTPException

from pagewright.agent import process_instruction
from pagewright.generator import GenerationError
from pagewright.intent import classify_intent
from pagewright.patch import apply_edits_with_count
from pagewright.logger import get_logger
from pagewright.models import (
    ApplyEditsRequest,
    ApplyEditsResponse,
    ClassifyRequest,
    GenerateHtmlRequest,
    GenerateHtmlResponse,
    IntentClassification,
)
import config

logger = get_logger(__name__)


router = APIRouter()


def resolve_user_message(request: GenerateHtmlRequest) -> tuple[str, str | None]:
    """Pick the instruction and model for a request.

    The instruction falls back to the last non-system message. A userMessage
    that is itself JSON of the form {"message": ..., "model": ...} overrides
    both values.
    """
    user_message = request.userMessage
    if not user_message:
        turns = [m for m in request.messages if m.role != "system"]
        user_message = turns[-1].content if turns else ""
    model = request.model

    try:
        parsed = json.loads(user_message)
    except (json.JSONDecodeError, TypeError):
        parsed = None
    if isinstance(parsed, dict) and parsed.get("message") and parsed.get("model"):
        user_message = str(parsed["message"])
        model = str(parsed["model"])

    return user_message, model


@router.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "message": "Pagewright API is running"}


@router.post("/api/generate-html", response_model=GenerateHtmlResponse)
async def generate_html(request: GenerateHtmlRequest):
    """Generate a new page or edit the current one"""
    if not config.OPENROUTER_API_KEY:
        raise HTTPException(status_code=500, detail="OPENROUTER_API_KEY not configured")

    user_message, model = resolve_user_message(request)
    if not user_message.strip():
        raise HTTPException(status_code=400, detail="No instruction provided")

    try:
        result = await process_instruction(
            user_message,
            request.currentHtml,
            request.messages,
            model=model,
            reasoning=request.reasoning,
        )

        return GenerateHtmlResponse(
            html=result.html,
            mode=result.mode,
            intent=result.intent,
            confidence=result.confidence,
            editsApplied=result.edits_applied,
            message=result.message,
        )

    except GenerationError as e:
        logger.error(f"Generation failed: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to generate HTML: {str(e)}")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error generating HTML: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")


@router.post("/api/classify", response_model=IntentClassification)
def classify(request: ClassifyRequest):
    """Classify an instruction without calling the model"""
    return classify_intent(request.instruction)


@router.post("/api/apply-edits", response_model=ApplyEditsResponse)
def apply_edits_endpoint(request: ApplyEditsRequest):
    """Apply a validated list of edit operations to a document"""
    html, edits_applied = apply_edits_with_count(request.html, request.ops)
    return ApplyEditsResponse(html=html, editsApplied=edits_applied)
