"""create_companies_and_employees

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-19 00:00:00.000000

Creates the `companies` and `employees` tables and seeds two companies
with three employees between them.
"""

from __future__ import annotations

import uuid

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic
revision: str = "a1b2c3d4e5f6"
down_revision: str | None = None
branch_labels: str | None = None
depends_on: str | None = None

IT_SOLUTIONS_ID = uuid.UUID("c9d4c053-49b6-410c-bc78-2d54a9991870")
ADMIN_SOLUTIONS_ID = uuid.UUID("3d490a70-94ce-4d15-9494-5248280c2ce3")


def upgrade() -> None:
    companies = op.create_table(
        "companies",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(60), nullable=False),
        sa.Column("address", sa.String(60), nullable=False),
        sa.Column("country", sa.String(60), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_companies_name"), "companies", ["name"], unique=False)

    employees = op.create_table(
        "employees",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(30), nullable=False),
        sa.Column("age", sa.Integer(), nullable=False),
        sa.Column("position", sa.String(20), nullable=False),
        sa.Column("company_id", sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_employees_name"), "employees", ["name"], unique=False)
    op.create_index(op.f("ix_employees_company_id"), "employees", ["company_id"], unique=False)

    op.bulk_insert(
        companies,
        [
            {
                "id": IT_SOLUTIONS_ID,
                "name": "IT_Solutions Ltd",
                "address": "583 Wall Dr. Gwynn Oak, MD 21207",
                "country": "USA",
            },
            {
                "id": ADMIN_SOLUTIONS_ID,
                "name": "Admin_Solutions Ltd",
                "address": "312 Forest Avenue, BF 923",
                "country": "USA",
            },
        ],
    )
    op.bulk_insert(
        employees,
        [
            {
                "id": uuid.UUID("80abbca8-664d-4b20-b5de-024705497d4a"),
                "name": "Sam Raiden",
                "age": 26,
                "position": "Software developer",
                "company_id": IT_SOLUTIONS_ID,
            },
            {
                "id": uuid.UUID("86dba8c0-d178-41e7-938c-ed49778fb52a"),
                "name": "Jana McLeaf",
                "age": 30,
                "position": "Software developer",
                "company_id": IT_SOLUTIONS_ID,
            },
            {
                "id": uuid.UUID("021ca3c1-0deb-4afd-ae94-2159a8479811"),
                "name": "Kane Miller",
                "age": 35,
                "position": "Administrator",
                "company_id": ADMIN_SOLUTIONS_ID,
            },
        ],
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_employees_company_id"), table_name="employees")
    op.drop_index(op.f("ix_employees_name"), table_name="employees")
    op.drop_table("employees")
    op.drop_index(op.f("ix_companies_name"), table_name="companies")
    op.drop_table("companies")
