"""SQLAlchemy ORM models for entities and their JSON documents"""

import uuid

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class BudgetEntity(Base):
    """Household, business or trip owned by a user"""

    __tablename__ = "budget_entity"

    id = Column(Text, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(Text, nullable=False)
    kind = Column(Text, nullable=False)
    owner_id = Column(Text, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    documents = relationship("BudgetDocument", back_populates="entity", cascade="all, delete-orphan")


class BudgetDocument(Base):
    """
    Whole-document storage keyed by entity, module and optional year-month.

    `revision` increases on every write and backs compare-and-swap updates.
    """

    __tablename__ = "budget_document"
    __table_args__ = (UniqueConstraint("entity_id", "module", "year_month", name="uq_budget_document_key"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    entity_id = Column(Text, ForeignKey("budget_entity.id", ondelete="CASCADE"), nullable=False, index=True)
    module = Column(Text, nullable=False)
    # Empty string for modules with a single document per entity
    year_month = Column(Text, nullable=False, default="")
    data = Column(JSON, nullable=False)
    revision = Column(Integer, nullable=False, default=1)
    updated_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    entity = relationship("BudgetEntity", back_populates="documents")
