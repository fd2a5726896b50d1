# This project was developed with assistance from AI tools.
"""
Underwriting demo -- domain models

Loan applications linked to a company in the accounting-data provider,
and the data requirements each application has fulfilled so far.
"""

import uuid

from sqlalchemy import (
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import relationship

from .database import Base
from .enums import ApplicationStatus, DataRequirement


class Application(Base):
    """Loan application tracked through data collection and underwriting."""

    __tablename__ = "applications"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    codat_company_id = Column(String(64), unique=True, nullable=False, index=True)
    accounting_connection_id = Column(String(64), nullable=True)
    status = Column(
        Enum(ApplicationStatus, name="application_status", native_enum=False),
        nullable=False,
        default=ApplicationStatus.CREATED,
        index=True,
    )
    # Both set together when the applicant submits the form
    loan_amount = Column(Numeric(12, 2), nullable=True)
    loan_term = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    requirements = relationship(
        "FulfilledRequirement",
        back_populates="application",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<Application(id={self.id}, status='{self.status}')>"


class FulfilledRequirement(Base):
    """A data requirement satisfied for an application (one row per kind)."""

    __tablename__ = "fulfilled_requirements"
    __table_args__ = (
        UniqueConstraint("application_id", "requirement", name="uq_fulfilled_requirement"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    application_id = Column(
        Uuid, ForeignKey("applications.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    requirement = Column(
        Enum(DataRequirement, name="data_requirement", native_enum=False),
        nullable=False,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    application = relationship("Application", back_populates="requirements")

    def __repr__(self):
        return (
            f"<FulfilledRequirement(app_id={self.application_id}, "
            f"requirement='{self.requirement}')>"
        )
