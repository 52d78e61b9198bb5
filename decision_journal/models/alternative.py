"""Alternative model: one concrete option of a scenario, kept in insertion order."""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from decision_journal.db.session import Base


class Alternative(Base):
    __tablename__ = "alternatives"

    id = Column(String(36), primary_key=True)  # UUID4
    scenario_id = Column(
        String(36),
        ForeignKey("scenarios.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content = Column(Text, nullable=False)
    position = Column(Integer, nullable=False, default=0)  # insertion order within the scenario
    created_at = Column(DateTime(timezone=True), nullable=False)

    scenario = relationship("Scenario", back_populates="alternatives")
