"""Turn a model reply into a fixed ``description / emotions / tags`` shape.

The model is asked for JSON but does not always comply: replies arrive wrapped
in Markdown fences, truncated, or as loosely formatted prose. ``normalize_response``
accepts any text and always returns an :class:`AIAnalysis`; it never raises
because of the reply's contents.
"""
import json
import logging
import re
from typing import Any, List, Optional

from ...application.ports.ai_provider import AIAnalysis

logger = logging.getLogger(__name__)

NO_DESCRIPTION = "No description available"
NO_EMOTIONS = "No emotions detected"

_FENCE_RE = re.compile(r"^```[a-zA-Z0-9_-]*\s*\n?(.*?)\n?\s*```$", re.DOTALL)

# A label, optionally written as a quoted JSON key, followed by ':' and/or whitespace
_LABEL = r"[\"']?\b{name}\b[\"']?\s*[:\s]\s*"
_DESCRIPTION_QUOTED_RE = re.compile(_LABEL.format(name="description") + r"\"([^\"]+)\"", re.IGNORECASE)
_DESCRIPTION_LINE_RE = re.compile(_LABEL.format(name="description") + r"(.+?)(?=\n|$)", re.IGNORECASE)
_EMOTIONS_QUOTED_RE = re.compile(_LABEL.format(name="(?:emotions|mood)") + r"\"([^\"]+)\"", re.IGNORECASE)
_EMOTIONS_LINE_RE = re.compile(_LABEL.format(name="(?:emotions|mood)") + r"(.+?)(?=\n|$)", re.IGNORECASE)
_TAGS_RE = re.compile(_LABEL.format(name="tags") + r"\[(.*?)\]", re.IGNORECASE | re.DOTALL)


def _strip_fence(text: str) -> str:
    stripped = text.strip()
    match = _FENCE_RE.match(stripped)
    return match.group(1).strip() if match else stripped


def _text_or(value: Any, placeholder: str) -> str:
    if not value:
        return placeholder
    return value if isinstance(value, str) else str(value)


def _parse_structured(text: str) -> Optional[AIAnalysis]:
    try:
        data = json.loads(_strip_fence(text))
    except (ValueError, RecursionError):
        # RecursionError: deeply nested brackets
        return None
    if not isinstance(data, dict):
        return None

    tags = data.get("tags")
    emotions = data.get("emotions")
    if not emotions:
        emotions = data.get("mood")
    return AIAnalysis(
        description=_text_or(data.get("description"), NO_DESCRIPTION),
        emotions=_text_or(emotions, NO_EMOTIONS),
        tags=[str(tag) for tag in tags] if isinstance(tags, list) else [],
        raw_response=text,
    )


def _first_match(text: str, *patterns: re.Pattern) -> Optional[str]:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            value = match.group(1).strip()
            if value:
                return value
    return None


def split_tags(fragment: str) -> List[str]:
    """Split the inside of a ``[...]`` tag list on commas.

    Each tag loses at most one leading and one trailing quote. Tags that
    themselves contain commas are split apart; there is no quoting convention
    to recover them.
    """
    tags = []
    for part in fragment.split(","):
        tag = part.strip()
        if tag[:1] in ("\"", "'"):
            tag = tag[1:]
        if tag[-1:] in ("\"", "'"):
            tag = tag[:-1]
        tag = tag.strip()
        if tag:
            tags.append(tag)
    return tags


def _extract_fields(text: str) -> AIAnalysis:
    description = _first_match(text, _DESCRIPTION_QUOTED_RE, _DESCRIPTION_LINE_RE)
    emotions = _first_match(text, _EMOTIONS_QUOTED_RE, _EMOTIONS_LINE_RE)
    tags_match = _TAGS_RE.search(text)
    return AIAnalysis(
        description=description or NO_DESCRIPTION,
        emotions=emotions or NO_EMOTIONS,
        tags=split_tags(tags_match.group(1)) if tags_match else [],
        raw_response=text,
    )


def normalize_response(text: Optional[str]) -> AIAnalysis:
    if text is None:
        text = ""
    elif not isinstance(text, str):
        text = str(text)

    structured = _parse_structured(text)
    if structured is not None:
        return structured

    logger.warning("AI response was not valid JSON, falling back to pattern extraction")
    return _extract_fields(text)
