"""Employee model. Every employee belongs to exactly one company."""

import uuid

from sqlalchemy import Column, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import relationship

from company_employees.database import Base


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(30), nullable=False, index=True)
    age = Column(Integer, nullable=False)
    position = Column(String(20), nullable=False)

    company_id = Column(Uuid, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)

    # Relationships
    company = relationship("Company", back_populates="employees")

    def __repr__(self) -> str:
        return f"<Employee(id={self.id}, name={self.name!r}, company_id={self.company_id})>"
