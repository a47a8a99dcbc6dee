import logging
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from company_employees.database import get_db
from company_employees.exceptions import ClientInputError, CompanyNotFoundError, NullPayloadError
from company_employees.mapping import (
    apply_company_update,
    company_from_creation,
    company_to_dto,
    company_to_update,
)
from company_employees.models import Company
from company_employees.schemas.company import CompanyDto, CompanyForCreation, CompanyForUpdate
from company_employees.services import company_service
from company_employees.utils.data_shaper import DataShaper
from company_employees.utils.field_selector import FieldSelector
from company_employees.utils.pagination import CompanyParameters, company_parameters, set_pagination_header
from company_employees.utils.patch import PatchMerger, parse_operations

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/companies", tags=["Companies"])

company_shaper = DataShaper(CompanyDto)
company_patcher = PatchMerger(CompanyForUpdate, company_to_update, apply_company_update)


async def load_company(db: AsyncSession, company_id: UUID, with_employees: bool = False) -> Company:
    company = await company_service.get_company(db, company_id, with_employees=with_employees)
    if company is None:
        logger.info(f"Company with id: {company_id} doesn't exist in the database.")
        raise CompanyNotFoundError(company_id)
    return company


async def company_for_request(company_id: UUID, db: AsyncSession = Depends(get_db)) -> Company:
    return await load_company(db, company_id)


def parse_ids(ids: str) -> list[UUID]:
    """Parse ``id1,id2`` into UUIDs; a null or malformed list is a client error."""
    raw = [part.strip() for part in (ids or "").split(",") if part.strip()]
    if not raw:
        raise ClientInputError("Parameter ids is null", details={"ids": ids})
    try:
        return [UUID(part) for part in raw]
    except ValueError as e:
        raise ClientInputError("Parameter ids is malformed", details={"ids": ids}) from e


@router.api_route("", methods=["GET", "HEAD"])
async def get_companies(
    response: Response,
    parameters: CompanyParameters = Depends(company_parameters),
    db: AsyncSession = Depends(get_db),
):
    companies = await company_service.get_companies(db, parameters)
    set_pagination_header(response, companies.metadata)
    return company_shaper.shape_data([company_to_dto(company) for company in companies], parameters.fields)


@router.options("")
async def get_companies_options():
    return Response(headers={"Allow": "GET, HEAD, OPTIONS, POST"})


@router.get("/collection/({ids})", name="get_company_collection")
async def get_company_collection(ids: str, db: AsyncSession = Depends(get_db)):
    company_ids = parse_ids(ids)
    companies = await company_service.get_companies_by_ids(db, company_ids)
    if len(companies) != len(set(company_ids)):
        logger.error("Some ids are not valid in a collection")
        missing = {str(company_id) for company_id in company_ids} - {str(company.id) for company in companies}
        raise CompanyNotFoundError(", ".join(sorted(missing)))
    return [company_to_dto(company) for company in companies]


@router.post("/collection", status_code=status.HTTP_201_CREATED)
async def create_company_collection(
    request: Request,
    response: Response,
    payload: list[CompanyForCreation] | None = Body(None),
    db: AsyncSession = Depends(get_db),
):
    if payload is None:
        logger.error("Company collection sent from client is null.")
        raise NullPayloadError("Company collection")
    companies = await company_service.create_companies(db, [company_from_creation(item) for item in payload])
    ids = ",".join(str(company.id) for company in companies)
    response.headers["Location"] = str(request.url_for("get_company_collection", ids=ids))
    return [company_to_dto(company) for company in companies]


@router.get("/{company_id}", name="get_company")
async def get_company(
    company: Company = Depends(company_for_request),
    fields: FieldSelector = Depends(),
):
    return fields.apply(company_to_dto(company), company_shaper)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=CompanyDto)
async def create_company(
    request: Request,
    response: Response,
    payload: CompanyForCreation | None = Body(None),
    db: AsyncSession = Depends(get_db),
):
    if payload is None:
        logger.error("CompanyForCreation object sent from client is null.")
        raise NullPayloadError("CompanyForCreation")
    company = await company_service.create_company(db, company_from_creation(payload))
    response.headers["Location"] = str(request.url_for("get_company", company_id=str(company.id)))
    return company_to_dto(company)


@router.put("/{company_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_company(
    company_id: UUID,
    payload: CompanyForUpdate | None = Body(None),
    db: AsyncSession = Depends(get_db),
):
    if payload is None:
        logger.error("CompanyForUpdate object sent from client is null.")
        raise NullPayloadError("CompanyForUpdate")
    company = await load_company(db, company_id, with_employees=True)
    apply_company_update(payload, company)
    await company_service.save(db)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{company_id}", status_code=status.HTTP_204_NO_CONTENT)
async def partially_update_company(
    company_id: UUID,
    patch_doc: Any = Body(None),
    db: AsyncSession = Depends(get_db),
):
    if patch_doc is None:
        logger.error("patchDoc object sent from client is null.")
        raise NullPayloadError("patchDoc")
    operations = parse_operations(patch_doc)
    company = await load_company(db, company_id, with_employees=True)
    result = company_patcher.merge(company, operations)
    result.raise_for_rejection()
    await company_service.save(db)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{company_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_company(company: Company = Depends(company_for_request), db: AsyncSession = Depends(get_db)):
    await company_service.delete_company(db, company)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
