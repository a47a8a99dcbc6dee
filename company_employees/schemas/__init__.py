from .company import CompanyDto, CompanyForCreation, CompanyForUpdate
from .employee import EmployeeDto, EmployeeForCreation, EmployeeForUpdate

# Define the public API of this module
__all__ = [
    "CompanyDto",
    "CompanyForCreation",
    "CompanyForUpdate",
    "EmployeeDto",
    "EmployeeForCreation",
    "EmployeeForUpdate",
]
