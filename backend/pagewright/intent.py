"""
Intent classifier for edit requests

Maps a free-text instruction onto one of three edit strategies:
- "micro": small, local text or value edits (a title, a number, one word)
- "semantic": translations, theme switches, page-wide or multi-section edits
- "abstract": vague aesthetic requests ("modern", "premium", "Apple-like")

Pattern tables are checked in priority order (micro, semantic, abstract) and
the first table with a match wins. No I/O, no state.
"""

import re
from typing import Pattern, Tuple

from pagewright.models import IntentClassification, IntentType
from pagewright.logger import get_logger

logger = get_logger(__name__)

LANGUAGES = (
    "english",
    "turkish",
    "spanish",
    "french",
    "german",
    "italian",
    "portuguese",
    "russian",
    "chinese",
    "mandarin",
    "japanese",
    "korean",
    "arabic",
    "hindi",
    "dutch",
    "polish",
    "swedish",
    "norwegian",
    "danish",
    "finnish",
    "greek",
    "hebrew",
    "persian",
    "ukrainian",
    "indonesian",
    "vietnamese",
    "thai",
)

_LANGUAGE_ALT = "|".join(LANGUAGES)
_BROAD_WORDS = (
    r"all|every|entire|whole|throughout|everything|everywhere|"
    r"translate|translation|locali[sz]e|locali[sz]ation|language|" + _LANGUAGE_ALT
)

# Micro patterns must not fire when the instruction reaches across the page
_NARROW = rf"(?!.*\b(?:{_BROAD_WORDS})\b)"


def _compile(*patterns: str) -> Tuple[Pattern[str], ...]:
    return tuple(re.compile(p, re.IGNORECASE | re.DOTALL) for p in patterns)


MICRO_PATTERNS = _compile(
    # "change the title to Launch"
    rf"^{_NARROW}(?:change|replace|update|swap|alter|rename)\b.{{0,50}}\b(?:to|with)\s+[\"']?[^\"']+[\"']?$",
    # "set padding to 20px"
    rf"^{_NARROW}(?:make|set)\b.{{0,30}}(?:\bto\s+|=\s*)(?:\d+(?:\.\d+)?(?:px|rem|em|%)?|true|false|[\"'][^\"']+[\"'])$",
    # "remove the button"
    rf"^{_NARROW}(?:add|remove|delete)\b.{{0,50}}\b(?:button|link|text|word|title|heading|image|icon|sentence)s?$",
    # "fix the typo"
    rf"^{_NARROW}(?:edit|fix|correct)\b.{{0,50}}\b(?:typo|error|mistake|word|text|spelling)s?$",
    # "what is the title?"
    rf"^{_NARROW}(?:what|which)\b.{{0,50}}\b(?:the|this|current)\b.+\?$",
    # "make the text bigger"
    rf"^{_NARROW}make\b.{{0,20}}\b(?:darker|lighter|bigger|smaller|larger|bold|italic)$",
    # "headline: New Title"
    rf"^{_NARROW}[a-z][a-z\s]{{0,30}}:\s*[\"']?[^\"']+[\"']?$",
)

SEMANTIC_PATTERNS = _compile(
    r"\b(?:translate|translation|locali[sz]e|locali[sz]ation)\b",
    rf"\b(?:{_LANGUAGE_ALT})\b",
    r"\b(?:dark|light|night)\s*(?:mode|theme)\b|\b(?:theme|colou?r scheme|palette)\b",
    r"\b(?:all|every|entire|whole|throughout|everything|everywhere)\b",
    r"^(?:rewrite|redo)\b.{0,100}\b(?:section|page|content|copy)\b",
    r"\b(?:layout|restructure|reorgani[sz]e|rearrange)\b",
    r"\b(?:add|remove|delete|make|create)\b.{0,50}\b(?:footer|header|sidebar|navigation|navbar|menu|section)\b",
    r"^(?:make|turn|switch|convert)\b.{0,30}\b(?:dark|light)\b",
)

ABSTRACT_PATTERNS = _compile(
    r"\b(?:make|feel|look|seem)s?\b.{0,50}\b(?:modern|premium|luxury|luxurious|minimal|minimalist|brutalist|cozy|professional|corporate|playful|fun|sleek|elegant|bold|clean|fresh|classy|fancy|stylish)\b",
    r"\b(?:more|less)\b.{0,50}\b(?:modern|premium|professional|playful|minimal|bold|fancy|elegant|polished)\b",
    r"^(?:improve|enhance|polish|better)\b.{0,50}\b(?:design|look|feel|ui|ux|style|aesthetics?)$",
    r"\b(?:vibe|feel|aesthetic|mood|energy)\b",
    r"\b(?:look|feel|seem)s?\s+like\b|\binspired by\b|\b[a-z]+-(?:like|style|esque)\b",
    r"^(?:imagine|picture|envision)\b",
    r"^(?:refresh|revamp|moderni[sz]e|redesign)\b",
)

_PATTERN_TABLES: Tuple[Tuple[IntentType, Tuple[Pattern[str], ...], str], ...] = (
    ("micro", MICRO_PATTERNS, "local text/value change"),
    ("semantic", SEMANTIC_PATTERNS, "language/theme/structure change"),
    ("abstract", ABSTRACT_PATTERNS, "vague creative request"),
)

FALLBACK_MICRO_MAX_WORDS = 8


def count_matches(text: str, patterns: Tuple[Pattern[str], ...]) -> int:
    return sum(1 for pattern in patterns if pattern.search(text))


def classify_intent(instruction: str) -> IntentClassification:
    """Classify an instruction into micro, semantic or abstract.

    Always returns a classification, including for empty input.
    """
    text = (instruction or "").strip()

    for intent, patterns, label in _PATTERN_TABLES:
        matches = count_matches(text, patterns)
        if matches > 0:
            result = IntentClassification(
                intent=intent,
                confidence=min(0.95, 0.6 + 0.15 * matches),
                reasoning=f"Detected {intent} edit pattern ({matches} matches): {label}",
            )
            break
    else:
        if len(text.split()) <= FALLBACK_MICRO_MAX_WORDS:
            result = IntentClassification(
                intent="micro",
                confidence=0.4,
                reasoning="Short message - treating as potential micro edit",
            )
        else:
            result = IntentClassification(
                intent="semantic",
                confidence=0.5,
                reasoning="Default fallback to semantic",
            )

    logger.info(
        f"Intent classified: {result.intent} "
        f"(confidence: {result.confidence * 100:.0f}%) - {result.reasoning}"
    )
    return result
