from decision_journal.services.context_validator import validate_context
from decision_journal.services.scenarios import ScenarioService

__all__ = ["validate_context", "ScenarioService"]
