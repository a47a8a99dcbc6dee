"""Persistence operations for employees of a company."""

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from company_employees.models import Employee
from company_employees.services.company_service import save
from company_employees.utils.pagination import EmployeeParameters, PagedList, paginate
from company_employees.utils.sorting import build_order_by

logger = logging.getLogger(__name__)


async def get_employees(db: AsyncSession, company_id: UUID, parameters: EmployeeParameters) -> PagedList[Employee]:
    """
    Get one page of a company's employees.

    Filters by age range and by a case-insensitive name search before
    sorting and paging, so the metadata describes the filtered set.
    """
    stmt = select(Employee).where(
        Employee.company_id == company_id,
        Employee.age >= parameters.min_age,
        Employee.age <= parameters.max_age,
    )
    if parameters.search_term:
        stmt = stmt.where(func.lower(Employee.name).contains(parameters.search_term.lower(), autoescape=True))
    stmt = stmt.order_by(*build_order_by(Employee, parameters.order_by))
    return await paginate(db, stmt, parameters.pagination)


async def get_employee(db: AsyncSession, company_id: UUID, employee_id: UUID) -> Employee | None:
    """Get an employee by ID, scoped to its company."""
    result = await db.execute(
        select(Employee).where(Employee.company_id == company_id, Employee.id == employee_id)
    )
    return result.scalar_one_or_none()


async def create_employee_for_company(db: AsyncSession, company_id: UUID, employee: Employee) -> Employee:
    employee.company_id = company_id
    db.add(employee)
    await save(db)
    await db.refresh(employee)
    logger.info(f"Created employee {employee.id} for company {company_id}")
    return employee


async def delete_employee(db: AsyncSession, employee: Employee) -> None:
    await db.delete(employee)
    await save(db)
    logger.info(f"Deleted employee {employee.id}")
