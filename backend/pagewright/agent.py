"""Build pipeline: chooses between full generation and incremental edits"""

from dataclasses import dataclass
from typing import List, Optional

from pagewright.generator import generate_document
from pagewright.intent import classify_intent
from pagewright.models import BuildMode, ChatMessage, IntentType
from pagewright.patch import apply_edits_with_count
from pagewright.router import route_edit_strategy
from pagewright.style_memory import extract_style_profile, style_hints
from pagewright.logger import get_logger

logger = get_logger(__name__)

INTENT_LABELS = {
    "micro": "Quick edit",
    "semantic": "Semantic update",
    "abstract": "Design transformation",
}


@dataclass
class BuildResult:
    """Result of processing one instruction"""

    html: str
    mode: BuildMode
    message: str
    intent: Optional[IntentType] = None
    confidence: Optional[float] = None
    edits_applied: int = 0


def select_mode(current_html: str | None) -> BuildMode:
    """Edit when a document exists, otherwise generate one from scratch"""
    if current_html and current_html.strip():
        return "edit"
    return "generate"


async def process_instruction(
    user_message: str,
    current_html: str = "",
    history: Optional[List[ChatMessage]] = None,
    *,
    model: str | None = None,
    reasoning: bool = False,
    client=None,
) -> BuildResult:
    """Process a single instruction against the current page.

    Generation failures raise GenerationError; edit failures never raise and
    leave the document unchanged.
    """
    mode = select_mode(current_html)
    logger.info(f"Processing instruction in {mode} mode: {user_message[:100]}")

    if mode == "generate":
        html = await generate_document(
            user_message, history, model=model, reasoning=reasoning, client=client
        )
        line_count = len([line for line in html.split("\n") if line.strip()])
        return BuildResult(
            html=html,
            mode=mode,
            message=f"Built · {line_count} lines",
        )

    classification = classify_intent(user_message)
    hints = style_hints(extract_style_profile(current_html))

    response = await route_edit_strategy(
        classification.intent,
        current_html,
        user_message,
        model=model,
        reasoning=reasoning,
        style_hints=hints,
        client=client,
    )
    new_html, edits_applied = apply_edits_with_count(current_html, response.ops)

    logger.info(
        f"{classification.intent} edit: {edits_applied}/{len(response.ops)} operations changed the document"
    )
    return BuildResult(
        html=new_html,
        mode=mode,
        message=f"{INTENT_LABELS[classification.intent]} complete · {edits_applied} changes applied",
        intent=classification.intent,
        confidence=classification.confidence,
        edits_applied=edits_applied,
    )
