"""Full-document generation for pages that do not exist yet"""

import re
from typing import List, Optional

from pagewright import llm
from pagewright.models import ChatMessage, LayoutIntent
from pagewright.prompts import GENERATION_SYSTEM_PROMPT
from pagewright.logger import get_logger
import config

logger = get_logger(__name__)

GENERATION_REASONING_BUDGET = 10000

HTML_FENCE_RE = re.compile(r"```html\n([\s\S]*?)\n```")
PLAIN_FENCE_RE = re.compile(r"```\n([\s\S]*?)\n```")
DOCUMENT_RE = re.compile(r"((?:<!DOCTYPE html>|<html)[\s\S]*</html>)", re.IGNORECASE)


class GenerationError(Exception):
    """Raised when the model could not produce an HTML document"""


def decompose_intent(user_message: str) -> LayoutIntent:
    """Derive layout, style and mood guidance from keywords in the request"""
    lower = user_message.lower()

    if "landing" in lower or "hero" in lower:
        layout = "hero-focused"
    elif "dashboard" in lower or "admin" in lower:
        layout = "grid-layout"
    elif "portfolio" in lower or "gallery" in lower:
        layout = "gallery-style"
    else:
        layout = "standard-flow"

    if "minimal" in lower or "clean" in lower:
        style = "minimal"
    elif "bold" in lower or "brutalist" in lower:
        style = "brutalist"
    elif "modern" in lower or "sleek" in lower:
        style = "modern"
    else:
        style = "balanced"

    if "professional" in lower or "corporate" in lower:
        mood = "professional"
    elif "playful" in lower or "fun" in lower:
        mood = "playful"
    elif "luxury" in lower or "premium" in lower:
        mood = "luxury"
    else:
        mood = "neutral"

    return LayoutIntent(layout=layout, style=style, mood=mood)


def build_generation_messages(
    user_message: str, history: Optional[List[ChatMessage]] = None
) -> List[dict]:
    intent = decompose_intent(user_message)
    logger.info(f"Intent decomposition: {intent.model_dump()}")

    system_prompt = (
        GENERATION_SYSTEM_PROMPT.replace("{LAYOUT}", intent.layout)
        .replace("{STYLE}", intent.style)
        .replace("{MOOD}", intent.mood)
    )
    messages = [{"role": "system", "content": system_prompt}]
    for message in history or []:
        if message.role != "system":
            messages.append({"role": message.role, "content": message.content})

    # The current instruction may already be the last history entry
    if not (
        messages[-1]["role"] == "user" and messages[-1]["content"] == user_message
    ):
        messages.append({"role": "user", "content": user_message})
    return messages


def extract_html(text: str) -> str:
    """Extract the HTML document from a raw model response"""
    html = text
    html_match = HTML_FENCE_RE.search(html)
    if html_match:
        html = html_match.group(1)
    else:
        plain_match = PLAIN_FENCE_RE.search(html)
        if plain_match:
            html = plain_match.group(1)

    if not html.lstrip().lower().startswith(("<!doctype", "<html")):
        document_match = DOCUMENT_RE.search(html)
        if document_match:
            html = document_match.group(1)

    return html.strip()


async def generate_document(
    user_message: str,
    history: Optional[List[ChatMessage]] = None,
    *,
    model: str | None = None,
    reasoning: bool = False,
    client=None,
) -> str:
    """Generate a complete HTML page from a request"""
    messages = build_generation_messages(user_message, history)

    try:
        text = await llm.complete(
            messages,
            temperature=config.GENERATION_TEMPERATURE,
            max_tokens=config.GENERATION_MAX_TOKENS,
            model=model,
            reasoning_budget=GENERATION_REASONING_BUDGET if reasoning else None,
            client=client,
        )
    except llm.ModelCallError as e:
        logger.error(f"Error generating HTML: {e}")
        raise GenerationError(str(e)) from e

    html = extract_html(text)
    if "<html" not in html.lower():
        logger.error(f"Model response has no HTML document: {text[:500]}")
        raise GenerationError("Model response did not contain an HTML document")

    logger.info(f"Generated HTML document, length {len(html)}")
    return html
