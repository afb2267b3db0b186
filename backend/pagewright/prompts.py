import re
from dataclasses import dataclass
from typing import Dict, List

from pagewright.models import IntentType

# --- edit strategy system prompts ---

OUTPUT_CONTRACT = """<output_format>
CRITICAL: You MUST respond with ONLY valid JSON. No other text before or after the JSON.
NEVER return a full HTML document. Return ONLY edit operations.

The JSON must have exactly one top-level field, "ops", a list of operations:
{"ops": [{"op": "<operation>", "target": "<exact text>", "value": "<new text>"}]}

Allowed operations:
- "replace": replace the ONE place where "target" occurs with "value"
- "replace_all": replace EVERY occurrence of "target" with "value"
- "insert_before": insert "value" immediately before the ONE occurrence of "target"
- "insert_after": insert "value" immediately after the ONE occurrence of "target"
- "delete": remove the ONE occurrence of "target" (no "value")
- "set_css": "target" is a CSS selector, "value" its complete declarations, e.g. {"op": "set_css", "target": ".hero", "value": "padding: 4rem 2rem; background: #111"}

JSON FORMATTING REQUIREMENTS:
- Escape double quotes inside strings as \\" and newlines as \\n
- NO trailing commas, NO comments, NO JavaScript expressions inside the JSON
- If nothing should change or you cannot find an exact target, return: {"ops": []}
</output_format>"""

MICRO_SYSTEM_PROMPT = """<role>
You are a MICRO-EDIT HTML engine. You ONLY make tiny, precise changes.
</role>

<rules>
1. Make at most {MAX_OPS} operations, ideally 1 to 3
2. ONLY targeted replacements - NO refactoring, NO restyling of unrelated parts
3. Copy every "target" VERBATIM from the page text excerpt or the HTML - never invent or paraphrase a target
4. A "replace" target must occur exactly ONCE in the HTML; include surrounding markup (for example the enclosing tag) to make it unique
5. If the change would affect several places ambiguously, return {"ops": []}
6. Keep edits atomic - ONE concept per operation
</rules>

<example>
Request: "change title to MyApp"
Response: {"ops": [{"op": "replace", "target": "<h1>Old Title</h1>", "value": "<h1>MyApp</h1>"}]}
</example>

""" + OUTPUT_CONTRACT

SEMANTIC_SYSTEM_PROMPT = """<role>
You are a SEMANTIC HTML transformer. You make meaningful, multi-section changes.
</role>

<rules>
1. Up to {MAX_OPS} operations are allowed
2. This is a TRANSFORMATION, not a refactor - keep the HTML structure identical
3. Copy every "target" VERBATIM from the page text excerpt or the HTML - never invent a target
4. You MAY replace whole sections or all visible text when the request requires it (for example a translation)
5. Use "replace_all" for a phrase that repeats across the page and must change everywhere
6. Apply theme and colour changes consistently, preferring "set_css" for stylesheet rules
7. If a target cannot be found precisely, leave it out
</rules>

<examples>
"translate to Turkish":
- find all visible text content and replace it with Turkish equivalents
- keep tags, attributes, classes and scripts identical

"make it dark theme":
- change background colours to dark, text colours to light, update accent colours
</examples>

""" + OUTPUT_CONTRACT

ABSTRACT_SYSTEM_PROMPT = """<role>
You are an ABSTRACT design enhancer. You convert vague creative requests into specific edits.
</role>

<process>
1. Understand the vague request
2. Decide what it means concretely:
   - modern: clean sans-serif fonts, generous whitespace, subtle shadows, rounded corners
   - premium / luxury: dark backgrounds, gold or refined accents, elegant serif or display type, smooth transitions
   - minimal: fewer decorations, no heavy borders or gradients, restrained palette, more space
   - professional / corporate: muted colours, structured grid, consistent spacing, clear hierarchy
   - playful: brighter colours, rounded shapes, lively hover states
   - "X-like" (Apple, Stripe...): emulate that brand's typography, spacing and colour habits
3. Emit SPECIFIC operations that achieve it
</process>

<rules>
1. Up to {MAX_OPS} operations are allowed
2. Mix "set_css" rules with "replace" edits of exact existing values (colours, font families, spacing)
3. Preserve all HTML structure and content
4. "replace" targets must be copied exactly from the HTML and occur once
5. If you cannot make specific edits, return {"ops": []}
</rules>

<example>
Request: "make it more modern"
Response: {"ops": [
  {"op": "set_css", "target": "body", "value": "font-family: 'Inter', 'Segoe UI', sans-serif; letter-spacing: 0.01em"},
  {"op": "set_css", "target": ".container", "value": "padding: 2rem; border-radius: 12px; box-shadow: 0 10px 30px rgba(0,0,0,0.08)"},
  {"op": "replace", "target": "border-radius: 0;", "value": "border-radius: 8px;"}
]}
</example>

""" + OUTPUT_CONTRACT

# --- edit strategy user prompts ---

EXCERPT_USER_PROMPT = """<file_contents>
{FILE}
</file_contents>

<page_text_excerpt>
Visible text found in the page (copy targets from here verbatim):
{EXCERPT}
</page_text_excerpt>

<user_query>
{QUERY}
</user_query>

{CLOSING}{STYLE_HINTS}"""

ABSTRACT_USER_PROMPT = """<file_contents>
{FILE}
</file_contents>

<user_query>
"{QUERY}"
</user_query>

{CLOSING}{STYLE_HINTS}"""


@dataclass(frozen=True)
class StrategyProfile:
    """Prompt scaffolding and budget for one edit intent"""

    intent: IntentType
    system_prompt: str
    closing: str
    max_ops: int
    temperature: float
    max_tokens: int
    include_excerpt: bool


STRATEGIES: Dict[IntentType, StrategyProfile] = {
    "micro": StrategyProfile(
        intent="micro",
        system_prompt=MICRO_SYSTEM_PROMPT,
        closing="Make a TINY, PRECISE change only. Return JSON with edit ops.",
        max_ops=5,
        temperature=0.1,
        max_tokens=2000,
        include_excerpt=True,
    ),
    "semantic": StrategyProfile(
        intent="semantic",
        system_prompt=SEMANTIC_SYSTEM_PROMPT,
        closing="Apply this SEMANTIC transformation using precise edit operations.",
        max_ops=15,
        temperature=0.35,
        max_tokens=6000,
        include_excerpt=True,
    ),
    "abstract": StrategyProfile(
        intent="abstract",
        system_prompt=ABSTRACT_SYSTEM_PROMPT,
        closing="Convert this vague design request into specific edits. Focus on CSS and spacing.",
        max_ops=15,
        temperature=0.5,
        max_tokens=8000,
        include_excerpt=False,
    ),
}

_NON_VISIBLE_RE = re.compile(
    r"<(script|style|svg|noscript)[^>]*>[\s\S]*?</\1>|<!--[\s\S]*?-->", re.IGNORECASE
)
_TEXT_NODE_RE = re.compile(r">([^<>]+)<")
_TITLE_RE = re.compile(r"<title[^>]*>([\s\S]*?)</title>", re.IGNORECASE)

_PLACEHOLDER_RE = re.compile(r"\{(FILE|EXCERPT|QUERY|CLOSING|STYLE_HINTS)\}")

EXCERPT_MAX_LINES = 120
EXCERPT_MAX_LINE_CHARS = 200


def extract_text_excerpt(
    html: str,
    max_lines: int = EXCERPT_MAX_LINES,
    max_line_chars: int = EXCERPT_MAX_LINE_CHARS,
) -> str:
    """Collect the visible text nodes of a page, verbatim and deduplicated"""
    visible = _NON_VISIBLE_RE.sub("<>", html)
    lines: List[str] = []
    seen = set()

    title_match = _TITLE_RE.search(html)
    candidates = [title_match.group(1)] if title_match else []
    candidates.extend(m.group(1) for m in _TEXT_NODE_RE.finditer(visible))

    for text in candidates:
        text = text.strip()
        if not text or text in seen:
            continue
        seen.add(text)
        lines.append(f"- {text[:max_line_chars]}")
        if len(lines) >= max_lines:
            break

    return "\n".join(lines) if lines else "(no visible text found)"


def build_system_prompt(profile: StrategyProfile) -> str:
    return profile.system_prompt.replace("{MAX_OPS}", str(profile.max_ops))


def build_user_prompt(
    profile: StrategyProfile, html: str, query: str, style_hints: str = ""
) -> str:
    """Fill the user prompt template for a strategy.

    Placeholders are substituted in a single pass so braces in HTML/CSS never
    need escaping and substituted text is never rescanned.
    """
    template = EXCERPT_USER_PROMPT if profile.include_excerpt else ABSTRACT_USER_PROMPT
    values = {
        "FILE": html,
        "QUERY": query,
        "CLOSING": profile.closing,
        "STYLE_HINTS": style_hints,
    }
    if profile.include_excerpt:
        values["EXCERPT"] = extract_text_excerpt(html)
    return _PLACEHOLDER_RE.sub(lambda m: values.get(m.group(1), m.group(0)), template)


# --- full document generation ---

GENERATION_SYSTEM_PROMPT = """<role>
You are an elite frontend engineer. You ONLY produce single-file, production-ready HTML websites.
</role>

<absolute_rules>
1. Output ONLY raw HTML code - no markdown, no explanation, no comments, no extra text
2. The page must be substantial: more than 100 lines
3. Every answer MUST start with <!DOCTYPE html> and end with </html>
4. One .html file that works when double-clicked
5. No npm, no build tools, no frameworks that need compiling, no API keys, no auth
6. Fully responsive and works offline apart from public CDNs
7. Public CDNs are allowed (Google Fonts, Font Awesome, GSAP, Three.js, Swiper, Anime.js)
8. Smooth animations, modern UI, semantic HTML, accessibility
</absolute_rules>

<intent_guidance>
- Layout approach: {LAYOUT}
- Visual style: {STYLE}
- Mood/tone: {MOOD}
</intent_guidance>

<output_format>
<!DOCTYPE html>
<html>
...THE WHOLE PAGE...
</html>

WRITE NOTHING ELSE. ONLY THE COMPLETE HTML.
</output_format>"""
