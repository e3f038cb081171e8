# employee_api/routers/employees.py - Employee record endpoints

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from pydantic import BaseModel, Field
from supabase import Client

from employee_api.auth import (
    AuthContext,
    get_admin_auth,
    get_current_auth,
    get_director_auth,
    get_manager_auth,
)
from employee_api.database import get_db
from employee_api.models.employee import (
    EmployeeCreate,
    EmployeeFilter,
    EmployeeSortBy,
    EmployeeUpdate,
    ProfileUpdate,
)
from employee_api.routers._responses import DataEnvelope, ErrorEnvelope
from employee_api.services import employees
from employee_api.utils.pagination import PaginationParams, SortOrder

router = APIRouter()


class EmployeeListRequest(BaseModel):
    filter: EmployeeFilter = Field(default_factory=EmployeeFilter)
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1, le=100)
    # Unrecognized keys are accepted and sort by creation time.
    sort_by: EmployeeSortBy | str = "CREATED_AT"
    sort_order: SortOrder = "DESC"


class EmployeeGetRequest(BaseModel):
    id: int


class EmployeeUpdateRequest(BaseModel):
    id: int
    input: EmployeeUpdate


class EmployeeImportRequest(BaseModel):
    rows: list[dict[str, Any]]


@router.post("/list", response_model=DataEnvelope, responses={401: {"model": ErrorEnvelope}})
async def list_employees(
    payload: EmployeeListRequest,
    _: AuthContext = Depends(get_current_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    page = employees.list_employees(
        client,
        filters=payload.filter,
        pagination=PaginationParams(page=payload.page, page_size=payload.page_size),
        sort_by=payload.sort_by,
        sort_order=payload.sort_order,
    )
    return DataEnvelope(data=page.model_dump())


@router.post("/get", response_model=DataEnvelope, responses={404: {"model": ErrorEnvelope}})
async def get_employee(
    payload: EmployeeGetRequest,
    _: AuthContext = Depends(get_current_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    return DataEnvelope(data=employees.get_employee(client, payload.id))


@router.post("/create", response_model=DataEnvelope, responses={403: {"model": ErrorEnvelope}})
async def create_employee(
    payload: EmployeeCreate,
    _: AuthContext = Depends(get_admin_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    return DataEnvelope(data=employees.create_employee(client, payload))


@router.post(
    "/update",
    response_model=DataEnvelope,
    responses={403: {"model": ErrorEnvelope}, 404: {"model": ErrorEnvelope}},
)
async def update_employee(
    payload: EmployeeUpdateRequest,
    _: AuthContext = Depends(get_admin_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    return DataEnvelope(data=employees.update_employee(client, payload.id, payload.input))


@router.post(
    "/delete",
    response_model=DataEnvelope,
    responses={403: {"model": ErrorEnvelope}, 404: {"model": ErrorEnvelope}},
)
async def delete_employee(
    payload: EmployeeGetRequest,
    _: AuthContext = Depends(get_director_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    return DataEnvelope(data=employees.delete_employee(client, payload.id))


@router.post(
    "/terminate",
    response_model=DataEnvelope,
    responses={403: {"model": ErrorEnvelope}, 404: {"model": ErrorEnvelope}},
)
async def terminate_employee(
    payload: EmployeeGetRequest,
    _: AuthContext = Depends(get_admin_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    return DataEnvelope(data=employees.terminate_employee(client, payload.id))


@router.post("/me", response_model=DataEnvelope, responses={401: {"model": ErrorEnvelope}})
async def my_profile(
    auth: AuthContext = Depends(get_current_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    """The caller's own employee record, provisioned on first use."""
    return DataEnvelope(data=employees.ensure_employee_for_user(client, auth))


@router.post("/me/update", response_model=DataEnvelope, responses={401: {"model": ErrorEnvelope}})
async def update_my_profile(
    payload: ProfileUpdate,
    auth: AuthContext = Depends(get_current_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    return DataEnvelope(data=employees.update_my_profile(client, auth, payload))


@router.get("/export", responses={403: {"model": ErrorEnvelope}})
async def export_employees(
    _: AuthContext = Depends(get_manager_auth),
    client: Client = Depends(get_db),
) -> Response:
    return Response(
        content=employees.export_employees_csv(client),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=employees.csv"},
    )


@router.post("/import", response_model=DataEnvelope, responses={403: {"model": ErrorEnvelope}})
async def import_employees(
    payload: EmployeeImportRequest,
    _: AuthContext = Depends(get_admin_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    return DataEnvelope(data=employees.bulk_import_employees(client, payload.rows))
