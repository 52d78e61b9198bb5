"""Coerce a free-text model reply into a clean list of alternatives.

The model is asked for ``{"alternatives": [...]}`` but may wrap it in prose,
return a numbered list, or emit broken JSON. Fallback order:

1. greedy ``{...}`` span parsed as JSON, ``alternatives`` read from it;
2. no span: non-blank lines, list markers stripped;
3. span present but unparsable: same, also dropping lines that start with
   ``{`` or ``}``.

Every path caps the result at ``count`` and drops blank entries.
"""
import json
import logging
import re

from decision_journal.core.errors import NoAlternativesProduced

logger = logging.getLogger(__name__)

JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")
LIST_MARKER_RE = re.compile(r"^[\d.\-*]+\s*")


def _strip_marker(line: str) -> str:
    return LIST_MARKER_RE.sub("", line.strip()).strip()


def _lines(content: str, count: int, skip_braces: bool = False) -> list[str]:
    result = []
    for line in content.splitlines():
        if not line.strip():
            continue
        if skip_braces and (line.startswith("{") or line.startswith("}")):
            continue
        text = _strip_marker(line)
        if text:
            result.append(text)
        if len(result) >= count:
            break
    return result


def _from_json(raw: str) -> list[str]:
    parsed = json.loads(raw)
    if not isinstance(parsed, dict):
        raise ValueError("expected a JSON object")
    alternatives = parsed.get("alternatives") or []
    if not isinstance(alternatives, list):
        raise ValueError("'alternatives' is not a list")
    return [str(item).strip() for item in alternatives if item is not None and str(item).strip()]


def parse_alternatives(content: str, count: int) -> list[str]:
    """Return at most ``count`` non-empty alternatives; raise NoAlternativesProduced if none."""
    match = JSON_OBJECT_RE.search(content)
    if match is None:
        alternatives = _lines(content, count)
    else:
        try:
            alternatives = _from_json(match.group(0))
        except ValueError as exc:  # json.JSONDecodeError is a ValueError
            logger.debug("Model reply is not valid JSON (%s); falling back to lines", exc)
            alternatives = _lines(content, count, skip_braces=True)

    alternatives = alternatives[:count]
    if not alternatives:
        raise NoAlternativesProduced()
    return alternatives
