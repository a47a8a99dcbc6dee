from uuid import UUID

from pydantic import BaseModel, Field


class EmployeeDto(BaseModel):
    """Client-visible representation of an employee."""

    id: UUID
    name: str
    age: int
    position: str

    model_config = {"from_attributes": True}


class EmployeeForManipulation(BaseModel):
    name: str = Field(..., min_length=1, max_length=30, description="Employee name is a required field (max 30 characters).")
    age: int = Field(..., ge=18, le=120, description="Age is required and must be between 18 and 120.")
    position: str = Field(..., min_length=1, max_length=20, description="Position is a required field (max 20 characters).")

    model_config = {"from_attributes": True}


class EmployeeForCreation(EmployeeForManipulation):
    pass


class EmployeeForUpdate(EmployeeForManipulation):
    """Transfer shape targeted by full updates and patch documents."""
