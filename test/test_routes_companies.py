"""
Tests for company routes

Tests company CRUD endpoints, paging headers and field selection with
database integration.
"""

import json
import uuid

from sqlalchemy import func, select

from company_employees.models import Company, Employee


class TestListCompanies:
    """Test GET /api/companies"""

    async def test_list_with_pagination_header(self, client, test_company, other_company):
        response = await client.get("/api/companies")

        assert response.status_code == 200
        body = response.json()
        assert [company["name"] for company in body] == ["Admin_Solutions Ltd", "IT_Solutions Ltd"]
        assert body[1]["full_address"] == "583 Wall Dr. Gwynn Oak, MD 21207 USA"
        assert json.loads(response.headers["X-Pagination"]) == {
            "currentPage": 1,
            "pageSize": 10,
            "totalCount": 2,
            "totalPages": 1,
            "hasPrevious": False,
            "hasNext": False,
        }

    async def test_fields_and_order(self, client, test_company, other_company):
        response = await client.get("/api/companies", params={"fields": "name", "orderBy": "name desc"})

        assert response.status_code == 200
        assert response.json() == [{"name": "IT_Solutions Ltd"}, {"name": "Admin_Solutions Ltd"}]

    async def test_bad_paging_input_is_clamped(self, client, test_company):
        response = await client.get("/api/companies", params={"pageNumber": "-5", "pageSize": "999999"})

        assert response.status_code == 200
        metadata = json.loads(response.headers["X-Pagination"])
        assert metadata["currentPage"] == 1
        assert metadata["pageSize"] == 50

    async def test_unparseable_paging_input_uses_defaults(self, client, test_company):
        response = await client.get("/api/companies", params={"pageNumber": "abc"})

        assert response.status_code == 200
        assert json.loads(response.headers["X-Pagination"])["currentPage"] == 1

    async def test_head(self, client, test_company):
        response = await client.head("/api/companies")

        assert response.status_code == 200
        assert "X-Pagination" in response.headers

    async def test_options(self, client):
        response = await client.options("/api/companies")

        assert response.status_code == 200
        assert response.headers["Allow"] == "GET, HEAD, OPTIONS, POST"


class TestGetCompany:
    """Test GET /api/companies/{id}"""

    async def test_get(self, client, test_company):
        response = await client.get(f"/api/companies/{test_company.id}")

        assert response.status_code == 200
        assert response.json() == {
            "id": str(test_company.id),
            "name": "IT_Solutions Ltd",
            "full_address": "583 Wall Dr. Gwynn Oak, MD 21207 USA",
        }

    async def test_get_with_fields(self, client, test_company):
        response = await client.get(f"/api/companies/{test_company.id}", params={"fields": "id,bogus"})

        assert response.status_code == 200
        assert response.json() == {"id": str(test_company.id)}

    async def test_not_found(self, client):
        response = await client.get(f"/api/companies/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json()["error"]["error_code"] == "RESOURCE_COMPANY_NOT_FOUND"


class TestCompanyCollection:
    """Test the collection endpoints"""

    async def test_get_collection(self, client, test_company, other_company):
        response = await client.get(f"/api/companies/collection/({test_company.id},{other_company.id})")

        assert response.status_code == 200
        assert {company["id"] for company in response.json()} == {str(test_company.id), str(other_company.id)}

    async def test_get_collection_with_missing_id(self, client, test_company):
        response = await client.get(f"/api/companies/collection/({test_company.id},{uuid.uuid4()})")

        assert response.status_code == 404

    async def test_get_collection_with_malformed_ids(self, client):
        response = await client.get("/api/companies/collection/(not-a-guid)")

        assert response.status_code == 400

    async def test_create_collection(self, client, test_db):
        payload = [
            {"name": "First Ltd", "address": "1 Main St", "country": "UK"},
            {"name": "Second Ltd", "address": "2 Main St", "country": "UK"},
        ]
        response = await client.post("/api/companies/collection", json=payload)

        assert response.status_code == 201
        assert [company["name"] for company in response.json()] == ["First Ltd", "Second Ltd"]
        assert "/api/companies/collection/(" in response.headers["Location"]

        count = (await test_db.execute(select(func.count()).select_from(Company))).scalar_one()
        assert count == 2


class TestCreateCompany:
    """Test POST /api/companies"""

    async def test_create(self, client):
        response = await client.post(
            "/api/companies", json={"name": "New Co", "address": "1 Main St", "country": "USA"}
        )

        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "New Co"
        assert body["full_address"] == "1 Main St USA"
        assert response.headers["Location"].endswith(f"/api/companies/{body['id']}")

    async def test_create_with_employees(self, client, test_db):
        payload = {
            "name": "New Co",
            "address": "1 Main St",
            "country": "USA",
            "employees": [{"name": "Joan Dane", "age": 29, "position": "Manager"}],
        }
        response = await client.post("/api/companies", json=payload)

        assert response.status_code == 201
        company_id = uuid.UUID(response.json()["id"])
        result = await test_db.execute(select(Employee).where(Employee.company_id == company_id))
        assert [employee.name for employee in result.scalars()] == ["Joan Dane"]

    async def test_create_null_body(self, client):
        response = await client.post("/api/companies")

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "CompanyForCreation object is null"

    async def test_create_invalid(self, client):
        response = await client.post("/api/companies", json={"name": "x" * 61, "address": "1 Main St"})

        assert response.status_code == 422
        assert response.json()["error"]["error_code"] == "VALIDATION_FAILED"


class TestUpdateCompany:
    """Test PUT and PATCH /api/companies/{id}"""

    async def test_put(self, client, test_company):
        payload = {
            "name": "Renamed Ltd",
            "address": "9 New Road",
            "country": "Canada",
            "employees": [{"name": "Hired Later", "age": 40, "position": "Accountant"}],
        }
        response = await client.put(f"/api/companies/{test_company.id}", json=payload)
        assert response.status_code == 204

        company = (await client.get(f"/api/companies/{test_company.id}")).json()
        assert company["name"] == "Renamed Ltd"
        assert company["full_address"] == "9 New Road Canada"

        employees = (await client.get(f"/api/companies/{test_company.id}/employees")).json()
        assert [employee["name"] for employee in employees] == ["Hired Later"]

    async def test_put_missing_company(self, client):
        payload = {"name": "Renamed Ltd", "address": "9 New Road"}
        response = await client.put(f"/api/companies/{uuid.uuid4()}", json=payload)

        assert response.status_code == 404

    async def test_patch(self, client, test_company):
        patch_doc = [
            {"op": "replace", "path": "/name", "value": "Patched Ltd"},
            {"op": "add", "path": "/employees/-", "value": {"name": "Patch Hire", "age": 33, "position": "QA"}},
        ]
        response = await client.patch(f"/api/companies/{test_company.id}", json=patch_doc)
        assert response.status_code == 204

        company = (await client.get(f"/api/companies/{test_company.id}")).json()
        assert company["name"] == "Patched Ltd"
        employees = (await client.get(f"/api/companies/{test_company.id}/employees")).json()
        assert [employee["name"] for employee in employees] == ["Patch Hire"]

    async def test_patch_invalid_result(self, client, test_company):
        response = await client.patch(
            f"/api/companies/{test_company.id}", json=[{"op": "remove", "path": "/address"}]
        )

        assert response.status_code == 422
        company = (await client.get(f"/api/companies/{test_company.id}")).json()
        assert company["full_address"] == "583 Wall Dr. Gwynn Oak, MD 21207 USA"


class TestDeleteCompany:
    """Test DELETE /api/companies/{id}"""

    async def test_delete_cascades_to_employees(self, client, test_db, test_employee, test_company):
        response = await client.delete(f"/api/companies/{test_company.id}")
        assert response.status_code == 204

        assert (await client.get(f"/api/companies/{test_company.id}")).status_code == 404
        remaining = (await test_db.execute(select(func.count()).select_from(Employee))).scalar_one()
        assert remaining == 0

    async def test_delete_missing(self, client):
        response = await client.delete(f"/api/companies/{uuid.uuid4()}")

        assert response.status_code == 404
