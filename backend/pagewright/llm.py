"""
LLM module for handling AI model interactions
"""

import json
import re
from typing import Any, List, Dict, Optional

import openai

from pagewright.logger import get_logger
import config

logger = get_logger(__name__)

_client: Optional[openai.AsyncOpenAI] = None


class ModelCallError(Exception):
    """The model provider could not produce a usable text response"""


def get_client() -> Optional[openai.AsyncOpenAI]:
    """Return the shared OpenRouter client, or None when no key is configured"""
    global _client
    if _client is None and config.OPENROUTER_API_KEY:
        _client = openai.AsyncOpenAI(
            base_url=config.OPENROUTER_BASE_URL,
            api_key=config.OPENROUTER_API_KEY,
            default_headers={"HTTP-Referer": config.OPENROUTER_REFERER},
        )
    return _client


async def complete(
    messages: List[Dict[str, str]],
    *,
    temperature: float,
    max_tokens: int,
    model: str | None = None,
    reasoning_budget: int | None = None,
    client=None,
) -> str:
    """Send a chat completion request and return the raw text of the first choice"""
    selected_client = client or get_client()
    if selected_client is None:
        raise ModelCallError("OpenRouter client not initialized. Check OPENROUTER_API_KEY.")

    selected_model = model or config.OPENROUTER_MODEL
    extra_body: Dict[str, Any] = {}
    if reasoning_budget:
        extra_body["reasoning"] = {"type": "enabled", "budget_tokens": reasoning_budget}

    logger.info(
        f"Calling OpenRouter API with model: {selected_model} "
        f"(temperature={temperature}, max_tokens={max_tokens})"
    )
    try:
        response = await selected_client.chat.completions.create(
            model=selected_model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
            top_p=0.9,
            extra_body=extra_body or None,
        )
    except openai.OpenAIError as e:
        raise ModelCallError(f"OpenRouter API error: {e}") from e

    if not response.choices:
        raise ModelCallError("No choices in OpenRouter response")

    text = response.choices[0].message.content
    if not text:
        raise ModelCallError("Empty message content in OpenRouter response")

    logger.info(f"Received response from OpenRouter: {text[:200]}...")
    return text


def strip_code_fences(text: str) -> str:
    """Remove a markdown code block wrapper if present"""
    json_text = text.strip()
    json_text = re.sub(r"^```[a-zA-Z]*[ \t]*\n?", "", json_text)
    json_text = re.sub(r"\n?```$", "", json_text)
    return json_text.strip()


def _fix_string_escapes(match: re.Match) -> str:
    # Keep valid escapes: \" \\ \/ \b \f \n \r \t \u
    string_content = match.group(1)
    fixed = re.sub(r'\\([^"\\\/bfnrtu])', r"\1", string_content)
    return f'"{fixed}"'


def _first_json_object(text: str) -> str:
    """Cut text down to its first balanced {...} object, ignoring braces in strings"""
    start = text.find("{")
    if start == -1:
        return text

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start : index + 1]
    return text[start:]


def parse_json_response(text: str) -> Any:
    """Parse a model response as JSON, with one cleanup pass for common LLM mistakes.

    Raises json.JSONDecodeError when the text cannot be parsed.
    """
    json_text = strip_code_fences(text)
    try:
        return json.loads(json_text)
    except json.JSONDecodeError as e:
        logger.warning(f"JSON parsing failed, attempting to fix: {e}")

        cleaned_json = _first_json_object(json_text)
        # Fix double-escaped quotes: \\\" -> \"
        cleaned_json = re.sub(r"\\\\\"", r"\"", cleaned_json)
        # Remove backslashes before characters that don't need escaping in JSON
        cleaned_json = re.sub(r'"((?:[^"\\]|\\.)*)\"', _fix_string_escapes, cleaned_json)

        try:
            result = json.loads(cleaned_json)
        except json.JSONDecodeError as parse_error:
            logger.error(f"Still unable to parse JSON after cleaning: {parse_error}")
            raise e

        logger.info("Successfully cleaned malformed JSON")
        return result
