"""Persistence operations for companies."""

import logging
from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from company_employees.models import Company
from company_employees.utils.pagination import CompanyParameters, PagedList, paginate
from company_employees.utils.sorting import build_order_by

logger = logging.getLogger(__name__)


async def get_companies(db: AsyncSession, parameters: CompanyParameters) -> PagedList[Company]:
    """Get one page of companies, sorted by ``parameters.order_by``."""
    stmt = select(Company).order_by(*build_order_by(Company, parameters.order_by))
    return await paginate(db, stmt, parameters.pagination)


async def get_company(db: AsyncSession, company_id: UUID, with_employees: bool = False) -> Company | None:
    """Get company by ID, optionally with its employees loaded."""
    stmt = select(Company).where(Company.id == company_id)
    if with_employees:
        stmt = stmt.options(selectinload(Company.employees))
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def get_companies_by_ids(db: AsyncSession, ids: Iterable[UUID]) -> list[Company]:
    result = await db.execute(select(Company).where(Company.id.in_(list(ids))).order_by(Company.name))
    return list(result.scalars().all())


async def create_company(db: AsyncSession, company: Company) -> Company:
    """Create a company together with any employees attached to it."""
    db.add(company)
    await save(db)
    await db.refresh(company)
    logger.info(f"Created company {company.id}")
    return company


async def create_companies(db: AsyncSession, companies: list[Company]) -> list[Company]:
    db.add_all(companies)
    await save(db)
    for company in companies:
        await db.refresh(company)
    logger.info(f"Created {len(companies)} companies")
    return companies


async def delete_company(db: AsyncSession, company: Company) -> None:
    """Delete a company. Its employees are removed by the FK cascade."""
    await db.delete(company)
    await save(db)
    logger.info(f"Deleted company {company.id}")


async def save(db: AsyncSession) -> None:
    """Commit pending changes; failures roll back and propagate."""
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise
