"""
Pytest configuration and fixtures for the Company Employees API tests
"""

import os
import sys
from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))  # noqa: PTH100, PTH118, PTH119, PTH120

from company_employees.database import Base, enable_sqlite_foreign_keys, get_db  # noqa: E402
from company_employees.exception_handlers import register_exception_handlers  # noqa: E402
from company_employees.models import Company, Employee  # noqa: E402
from company_employees.routes import companies, employees  # noqa: E402

# Test database URL (SQLite in-memory for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="function")
async def test_engine():
    """Fresh in-memory database per test, with FK cascades enforced."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture(scope="function")
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture(scope="function")
async def test_db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for tests that need it."""
    async with session_factory() as session:
        yield session


@pytest.fixture(scope="function")
def test_app(session_factory) -> FastAPI:
    """Minimal app with the API routers and the database dependency overridden."""
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(companies.router, prefix="/api")
    app.include_router(employees.router, prefix="/api")

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as test_client:
        yield test_client


@pytest.fixture
async def test_company(test_db: AsyncSession) -> Company:
    """A company with no employees."""
    company = Company(name="IT_Solutions Ltd", address="583 Wall Dr. Gwynn Oak, MD 21207", country="USA")
    test_db.add(company)
    await test_db.commit()
    await test_db.refresh(company)
    return company


@pytest.fixture
async def other_company(test_db: AsyncSession) -> Company:
    company = Company(name="Admin_Solutions Ltd", address="312 Forest Avenue, BF 923", country="USA")
    test_db.add(company)
    await test_db.commit()
    await test_db.refresh(company)
    return company


@pytest.fixture
async def staffed_company(test_db: AsyncSession, test_company: Company) -> Company:
    """The test company with 25 employees aged 20 through 44."""
    for number in range(1, 26):
        test_db.add(
            Employee(
                name=f"Employee {number:02d}",
                age=19 + number,
                position="Developer" if number % 2 else "Tester",
                company_id=test_company.id,
            )
        )
    await test_db.commit()
    return test_company


@pytest.fixture
async def test_employee(test_db: AsyncSession, test_company: Company) -> Employee:
    employee = Employee(name="Sam Raiden", age=26, position="Software developer", company_id=test_company.id)
    test_db.add(employee)
    await test_db.commit()
    await test_db.refresh(employee)
    return employee
