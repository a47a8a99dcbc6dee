"""Mapping between persisted models and their transfer shapes."""

from company_employees.models import Company, Employee
from company_employees.schemas.company import CompanyDto, CompanyForCreation, CompanyForUpdate
from company_employees.schemas.employee import EmployeeDto, EmployeeForCreation, EmployeeForUpdate


def full_address(company: Company) -> str:
    return " ".join(part for part in (company.address, company.country) if part)


def company_to_dto(company: Company) -> CompanyDto:
    return CompanyDto(id=company.id, name=company.name, full_address=full_address(company))


def company_to_update(company: Company) -> CompanyForUpdate:
    # The snapshot is not re-validated; existing employees are not part of the shape.
    return CompanyForUpdate.model_construct(
        name=company.name, address=company.address, country=company.country, employees=[]
    )


def company_from_creation(data: CompanyForCreation) -> Company:
    company = Company(name=data.name, address=data.address, country=data.country)
    company.employees = [employee_from_creation(employee) for employee in data.employees]
    return company


def apply_company_update(data: CompanyForUpdate, company: Company) -> None:
    company.name = data.name
    company.address = data.address
    company.country = data.country
    for employee in data.employees:
        new_employee = employee_from_creation(employee)
        new_employee.company_id = company.id
        company.employees.append(new_employee)


def employee_to_dto(employee: Employee) -> EmployeeDto:
    return EmployeeDto.model_validate(employee)


def employee_to_update(employee: Employee) -> EmployeeForUpdate:
    return EmployeeForUpdate.model_construct(name=employee.name, age=employee.age, position=employee.position)


def employee_from_creation(data: EmployeeForCreation) -> Employee:
    return Employee(name=data.name, age=data.age, position=data.position)


def apply_employee_update(data: EmployeeForUpdate, employee: Employee) -> None:
    employee.name = data.name
    employee.age = data.age
    employee.position = data.position
