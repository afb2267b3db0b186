"""
Edit strategy router

Builds an intent-specific prompt, asks the model for edit operations and
validates the answer. Always returns an EditCommandResponse, never a full
HTML document, and never raises: every failure becomes an empty op list.
"""

import json

from pagewright import llm
from pagewright.models import EditCommandResponse, IntentType, validate_edit_response
from pagewright.prompts import STRATEGIES, StrategyProfile, build_system_prompt, build_user_prompt
from pagewright.logger import get_logger

logger = get_logger(__name__)

EDIT_REASONING_BUDGET = 3000


def get_strategy(intent: IntentType) -> StrategyProfile:
    strategy = STRATEGIES.get(intent)
    if strategy is None:
        logger.warning(f"Unknown intent: {intent}, defaulting to semantic")
        strategy = STRATEGIES["semantic"]
    return strategy


def parse_edit_response(text: str) -> EditCommandResponse:
    """Turn raw model text into validated edit operations, or an empty list"""
    try:
        data = llm.parse_json_response(text)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse edit response: {e}")
        logger.error(f"Raw response (first 500 chars): {text[:500]}")
        return EditCommandResponse(ops=[])

    response = validate_edit_response(data)
    if response is None:
        logger.error(f"Edit response rejected, invalid shape: {str(data)[:500]}")
        return EditCommandResponse(ops=[])

    return response


async def route_edit_strategy(
    intent: IntentType,
    current_html: str,
    user_message: str,
    *,
    model: str | None = None,
    reasoning: bool = False,
    style_hints: str = "",
    client=None,
) -> EditCommandResponse:
    """Route an edit request to the strategy for its intent and return the edit ops"""
    strategy = get_strategy(intent)
    logger.info(f"Routing to {strategy.intent} edit strategy")

    messages = [
        {"role": "system", "content": build_system_prompt(strategy)},
        {
            "role": "user",
            "content": build_user_prompt(strategy, current_html, user_message, style_hints),
        },
    ]

    try:
        text = await llm.complete(
            messages,
            temperature=strategy.temperature,
            max_tokens=strategy.max_tokens,
            model=model,
            reasoning_budget=EDIT_REASONING_BUDGET if reasoning else None,
            client=client,
        )
    except llm.ModelCallError as e:
        logger.error(f"Edit LLM call failed: {e}")
        return EditCommandResponse(ops=[])
    except Exception as e:
        logger.error(f"Unexpected error in edit LLM call: {str(e)}", exc_info=True)
        return EditCommandResponse(ops=[])

    response = parse_edit_response(text)
    if len(response.ops) > strategy.max_ops:
        logger.warning(
            f"{strategy.intent} strategy returned {len(response.ops)} ops, "
            f"above its budget of {strategy.max_ops}"
        )
    logger.info(f"{strategy.intent} strategy produced {len(response.ops)} edit operations")
    return response
