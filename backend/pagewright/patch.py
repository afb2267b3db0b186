"""
Patch engine: applies model-produced edit operations to an HTML document

Operations are applied strictly in order, each against the result of the
previous one. Every operation either applies fully or leaves the document
untouched. Ambiguous targets are never guessed at; the operation is skipped.
"""

import re
from typing import Any, Iterable, List, Optional, Tuple, Union

from pydantic import ValidationError

from pagewright.models import EditOperation
from pagewright.logger import get_logger

logger = get_logger(__name__)

STYLE_BLOCK_RE = re.compile(r"(<style[^>]*>)([\s\S]*?)(</style>)", re.IGNORECASE)
HEAD_OPEN_RE = re.compile(r"<head(?:\s[^>]*)?>", re.IGNORECASE)

OperationLike = Union[EditOperation, dict]


class SkipOperation(Exception):
    """Raised when an operation cannot be applied and must leave the document as is."""


def _preview(text: str, limit: int = 50) -> str:
    return text[:limit].replace("\n", " ")


def _find_unique(html: str, target: str) -> Optional[int]:
    """Return the index of the only occurrence of target, or None."""
    index = html.find(target)
    if index == -1:
        return None
    if html.find(target, index + 1) != -1:
        return None
    return index


def _count_label(html: str, target: str) -> str:
    return "not found" if target not in html else "matches multiple locations"


def flexible_pattern(target: str) -> Optional[re.Pattern]:
    """Build a whitespace-insensitive pattern from the words of target.

    Every word is escaped, so the target is always treated literally.
    """
    words = target.split()
    if not words:
        return None
    return re.compile(r"\s+".join(re.escape(word) for word in words))


def find_flexible(html: str, target: str) -> Optional[Tuple[int, int]]:
    """Return the span of the only whitespace-insensitive match, or None.

    Overlapping matches count separately.
    """
    pattern = flexible_pattern(target)
    if pattern is None:
        return None
    lookahead = re.compile(f"(?=({pattern.pattern}))")
    matches = list(lookahead.finditer(html))
    if len(matches) != 1:
        return None
    return matches[0].span(1)


def apply_replace(html: str, target: str, value: str) -> str:
    if target in html:
        index = _find_unique(html, target)
        if index is None:
            raise SkipOperation(
                f"Replace target matches multiple locations, skipping: {_preview(target)}..."
            )
        return html[:index] + value + html[index + len(target) :]

    span = find_flexible(html, target)
    if span is None:
        raise SkipOperation(
            f"Replace target {_count_label(html, target)}, skipping: {_preview(target)}..."
        )

    start, end = span
    logger.info(f"Replace target resolved by flexible whitespace match: {_preview(target)}...")
    return html[:start] + value + html[end:]


def apply_replace_all(html: str, target: str, value: str) -> str:
    occurrences = html.count(target)
    if occurrences == 0:
        raise SkipOperation(f"Replace-all target not found: {_preview(target)}...")

    logger.debug(f"Replacing {occurrences} occurrences of: {_preview(target)}...")
    return value.join(html.split(target))


def apply_insert_before(html: str, target: str, value: str) -> str:
    index = _find_unique(html, target)
    if index is None:
        raise SkipOperation(
            f"Insert before target {_count_label(html, target)}, skipping: {_preview(target)}..."
        )
    return html[:index] + value + html[index:]


def apply_insert_after(html: str, target: str, value: str) -> str:
    index = _find_unique(html, target)
    if index is None:
        raise SkipOperation(
            f"Insert after target {_count_label(html, target)}, skipping: {_preview(target)}..."
        )
    insert_index = index + len(target)
    return html[:insert_index] + value + html[insert_index:]


def apply_delete(html: str, target: str) -> str:
    index = _find_unique(html, target)
    if index is None:
        raise SkipOperation(
            f"Delete target {_count_label(html, target)}, skipping: {_preview(target)}..."
        )
    return html[:index] + html[index + len(target) :]


def css_rule_pattern(selector: str) -> re.Pattern:
    """Match a rule whose selector text is exactly selector.

    The selector must start a rule: it follows the start of the stylesheet,
    one of "{", "}" or ";", or the end of a comment, with only whitespace in
    between.
    """
    return re.compile(
        r"(^|[{};]|\*/)(\s*)" + re.escape(selector.strip()) + r"\s*\{[^}]*\}"
    )


def apply_set_css(html: str, selector: str, declarations: str) -> str:
    selector = selector.strip()
    rule = f"{selector} {{ {declarations.strip()} }}"

    style_match = STYLE_BLOCK_RE.search(html)
    if not style_match:
        head_match = HEAD_OPEN_RE.search(html)
        if not head_match:
            raise SkipOperation(f"No <style> or <head> tag for set_css: {selector}")
        insert_at = head_match.end()
        return html[:insert_at] + f"<style>\n{rule}\n</style>" + html[insert_at:]

    style_content = style_match.group(2)
    pattern = css_rule_pattern(selector)

    if pattern.search(style_content):
        new_content = pattern.sub(
            lambda m: m.group(1) + m.group(2) + rule, style_content
        )
    else:
        new_content = style_content + f"\n{rule}\n"

    start, end = style_match.span(2)
    return html[:start] + new_content + html[end:]


def apply_operation(html: str, operation: EditOperation) -> str:
    """Apply one validated operation, raising SkipOperation when it cannot apply."""
    if not operation.target:
        raise SkipOperation(f"Empty target for {operation.op}")

    if operation.op == "delete":
        return apply_delete(html, operation.target)

    if operation.value is None:
        raise SkipOperation(f"Missing value for {operation.op}: {_preview(operation.target)}...")

    if operation.op == "replace":
        return apply_replace(html, operation.target, operation.value)
    if operation.op == "replace_all":
        return apply_replace_all(html, operation.target, operation.value)
    if operation.op == "insert_before":
        return apply_insert_before(html, operation.target, operation.value)
    if operation.op == "insert_after":
        return apply_insert_after(html, operation.target, operation.value)
    if operation.op == "set_css":
        return apply_set_css(html, operation.target, operation.value)

    raise SkipOperation(f"Unknown operation: {operation.op}")


def _coerce(operation: Any) -> EditOperation:
    if isinstance(operation, EditOperation):
        return operation
    return EditOperation.model_validate(operation)


def apply_edits_with_count(
    html: str, ops: Iterable[OperationLike]
) -> Tuple[str, int]:
    """Apply edit operations in order and count the ones that changed the document."""
    result = html
    applied = 0

    for position, raw in enumerate(ops):
        try:
            operation = _coerce(raw)
        except ValidationError as e:
            logger.error(f"Edit operation #{position} is malformed, skipping: {e}")
            continue

        try:
            updated = apply_operation(result, operation)
        except SkipOperation as e:
            logger.warning(f"Edit operation #{position} ({operation.op}) skipped: {e}")
            continue
        except (re.error, ValueError) as e:
            logger.error(f"Edit operation #{position} ({operation.op}) failed: {e}")
            continue

        if updated != result:
            applied += 1
        result = updated

    logger.info(f"Applied {applied} edit operations, document length {len(result)}")
    return result, applied


def apply_edits(html: str, ops: List[OperationLike]) -> str:
    """Apply edit operations to an HTML string and return the new string."""
    return apply_edits_with_count(html, ops)[0]
