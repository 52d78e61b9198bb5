"""Heuristic gate on how much context a decision description carries."""
from dataclasses import dataclass

from decision_journal.core.errors import InvalidContext

MIN_CONTEXT_LENGTH = 20


@dataclass(frozen=True)
class ContextValidation:
    valid: bool
    message: str | None = None


def validate_context(description: str | None) -> ContextValidation:
    """Return valid=False with an explanatory message when the trimmed description is too short."""
    if not description or len(description.strip()) < MIN_CONTEXT_LENGTH:
        return ContextValidation(valid=False, message=InvalidContext.default_message)
    return ContextValidation(valid=True)
