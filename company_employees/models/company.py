"""Company model. A company owns zero or more employees."""

import uuid

from sqlalchemy import Column, String, Uuid
from sqlalchemy.orm import relationship

from company_employees.database import Base


class Company(Base):
    __tablename__ = "companies"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(60), nullable=False, index=True)
    address = Column(String(60), nullable=False)
    country = Column(String(60), nullable=True)

    # Relationships
    employees = relationship(
        "Employee",
        back_populates="company",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Company(id={self.id}, name={self.name!r})>"
