from .company import Company
from .employee import Employee

__all__ = [
    "Company",
    "Employee",
]
