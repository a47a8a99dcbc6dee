from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from company_employees.schemas.employee import EmployeeForCreation


class CompanyDto(BaseModel):
    """Client-visible representation of a company."""

    id: UUID
    name: str
    full_address: str

    model_config = {"from_attributes": True}


class CompanyForManipulation(BaseModel):
    name: str = Field(..., min_length=1, max_length=60, description="Company name is a required field (max 60 characters).")
    address: str = Field(..., min_length=1, max_length=60, description="Address is a required field (max 60 characters).")
    country: Optional[str] = Field(None, max_length=60)
    employees: list[EmployeeForCreation] = Field(default_factory=list)


class CompanyForCreation(CompanyForManipulation):
    pass


class CompanyForUpdate(CompanyForManipulation):
    pass
