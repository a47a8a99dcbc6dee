import logging
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from company_employees.database import get_db
from company_employees.exceptions import EmployeeNotFoundError, InvalidRangeError, NullPayloadError
from company_employees.mapping import (
    apply_employee_update,
    employee_from_creation,
    employee_to_dto,
    employee_to_update,
)
from company_employees.models import Company, Employee
from company_employees.routes.companies import company_for_request, load_company
from company_employees.schemas.employee import EmployeeDto, EmployeeForCreation, EmployeeForUpdate
from company_employees.services import employee_service
from company_employees.utils.data_shaper import DataShaper
from company_employees.utils.field_selector import FieldSelector
from company_employees.utils.pagination import EmployeeParameters, employee_parameters, set_pagination_header
from company_employees.utils.patch import PatchMerger, parse_operations

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/companies/{company_id}/employees", tags=["Employees"])

employee_shaper = DataShaper(EmployeeDto)
employee_patcher = PatchMerger(EmployeeForUpdate, employee_to_update, apply_employee_update)


async def employee_for_company(
    employee_id: UUID,
    company: Company = Depends(company_for_request),
    db: AsyncSession = Depends(get_db),
) -> Employee:
    """Resolve the employee addressed by the URL, checking its company first."""
    employee = await employee_service.get_employee(db, company.id, employee_id)
    if employee is None:
        logger.info(f"Employee with id: {employee_id} doesn't exist in the database.")
        raise EmployeeNotFoundError(employee_id)
    return employee


@router.api_route("", methods=["GET", "HEAD"])
async def get_employees_for_company(
    company_id: UUID,
    response: Response,
    parameters: EmployeeParameters = Depends(employee_parameters),
    db: AsyncSession = Depends(get_db),
):
    if not parameters.valid_age_range:
        raise InvalidRangeError("age", parameters.min_age, parameters.max_age)

    await load_company(db, company_id)
    employees = await employee_service.get_employees(db, company_id, parameters)
    set_pagination_header(response, employees.metadata)
    return employee_shaper.shape_data([employee_to_dto(employee) for employee in employees], parameters.fields)


@router.get("/{employee_id}", name="get_employee_for_company")
async def get_employee_for_company(
    employee: Employee = Depends(employee_for_company),
    fields: FieldSelector = Depends(),
):
    return fields.apply(employee_to_dto(employee), employee_shaper)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=EmployeeDto)
async def create_employee_for_company(
    company_id: UUID,
    request: Request,
    response: Response,
    payload: EmployeeForCreation | None = Body(None),
    db: AsyncSession = Depends(get_db),
):
    if payload is None:
        logger.error("EmployeeForCreation object sent from client is null.")
        raise NullPayloadError("EmployeeForCreation")

    await load_company(db, company_id)
    employee = await employee_service.create_employee_for_company(db, company_id, employee_from_creation(payload))
    response.headers["Location"] = str(
        request.url_for("get_employee_for_company", company_id=str(company_id), employee_id=str(employee.id))
    )
    return employee_to_dto(employee)


@router.put("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_employee_for_company(
    payload: EmployeeForUpdate | None = Body(None),
    employee: Employee = Depends(employee_for_company),
    db: AsyncSession = Depends(get_db),
):
    if payload is None:
        logger.error("EmployeeForUpdate object sent from client is null.")
        raise NullPayloadError("EmployeeForUpdate")
    apply_employee_update(payload, employee)
    await employee_service.save(db)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def partially_update_employee_for_company(
    patch_doc: Any = Body(None),
    employee: Employee = Depends(employee_for_company),
    db: AsyncSession = Depends(get_db),
):
    if patch_doc is None:
        logger.error("patchDoc object sent from client is null.")
        raise NullPayloadError("patchDoc")

    result = employee_patcher.merge(employee, parse_operations(patch_doc))
    if result.rejected:
        logger.error("Invalid model state for the patch document")
    result.raise_for_rejection()
    await employee_service.save(db)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_employee_for_company(
    employee: Employee = Depends(employee_for_company),
    db: AsyncSession = Depends(get_db),
):
    await employee_service.delete_employee(db, employee)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
