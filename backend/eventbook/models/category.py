"""
Category model used to group events for browsing.
"""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from eventbook.db.base import Base, TimestampMixin


class Category(Base, TimestampMixin):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    description = Column(String(500), nullable=True)
    color = Column(String(20), nullable=True)  # hex code for UI theming

    events = relationship("Event", back_populates="category")

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name})>"
