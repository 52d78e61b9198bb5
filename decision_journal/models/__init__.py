from decision_journal.models.user import User
from decision_journal.models.scenario import Scenario
from decision_journal.models.alternative import Alternative

__all__ = ["User", "Scenario", "Alternative"]
