"""SQLAlchemy declarative base and model imports for Alembic."""
from decision_journal.db.session import Base

# Import all models so Alembic can see them
from decision_journal.models.alternative import Alternative  # noqa: F401
from decision_journal.models.scenario import Scenario  # noqa: F401
from decision_journal.models.user import User  # noqa: F401

__all__ = ["Base", "User", "Scenario", "Alternative"]
