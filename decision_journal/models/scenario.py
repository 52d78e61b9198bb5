"""Scenario model: one decision record owned by a user."""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from decision_journal.db.session import Base


class Scenario(Base):
    __tablename__ = "scenarios"

    id = Column(String(36), primary_key=True)  # UUID4
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    user = relationship("User", back_populates="scenarios")
    alternatives = relationship(
        "Alternative",
        back_populates="scenario",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Alternative.position",
    )
