"""CRUD endpoints for the editable entity kinds.

Every mutation goes through the payroll session so that remote sync,
derived fields and audit logging apply exactly as for any other caller.
"""

from typing import Annotated, Any

from fastapi import APIRouter, HTTPException, Path, Response, status
from pydantic import BaseModel

from payroll_records.api.dependencies import Session
from payroll_records.api.schemas import (
    AllowanceResponse,
    AllowanceTypeResponse,
    EmployeeResponse,
    ErrorResponse,
    PayslipResponse,
)
from payroll_records.models.entities import EntityKind
from payroll_records.models.inputs import (
    AllowanceCreate,
    AllowanceTypeCreate,
    AllowanceTypeUpdate,
    AllowanceUpdate,
    EmployeeCreate,
    EmployeeUpdate,
    PayslipCreate,
    PayslipUpdate,
)
from payroll_records.services.orchestrator import MutationResult


def _unwrap(result: MutationResult, schema: type[BaseModel]) -> Any:
    """Turn a mutation result into a response or an HTTP error."""
    if result.ok:
        return schema.model_validate(result.entity) if result.entity is not None else None
    if result.not_found:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.error)
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error)


def entity_router(
    prefix: str,
    kind: EntityKind,
    create_model: type[BaseModel],
    update_model: type[BaseModel],
    schema: type[BaseModel],
) -> APIRouter:
    """Build list/get/create/update/delete routes for one entity kind."""
    router = APIRouter(prefix=prefix, tags=[prefix.strip("/")])
    name = kind.value
    errors = {400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}

    @router.get("", response_model=list[schema])
    async def list_entities(session: Session) -> Any:
        return [schema.model_validate(e) for e in session.store.collection(kind).list()]

    @router.get("/{entity_id}", response_model=schema, responses=errors)
    async def get_entity(session: Session, entity_id: Annotated[int, Path()]) -> Any:
        entity = session.store.collection(kind).get_by_id(entity_id)
        if entity is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"{kind.label} {entity_id} not found",
            )
        return schema.model_validate(entity)

    @router.post("", response_model=schema, status_code=status.HTTP_201_CREATED, responses=errors)
    async def create_entity(session: Session, payload: create_model) -> Any:  # type: ignore[valid-type]
        result = await getattr(session, f"add_{name}")(payload)
        return _unwrap(result, schema)

    @router.patch("/{entity_id}", response_model=schema, responses=errors)
    async def update_entity(
        session: Session,
        entity_id: Annotated[int, Path()],
        payload: update_model,  # type: ignore[valid-type]
    ) -> Any:
        result = await getattr(session, f"update_{name}")(entity_id, payload)
        return _unwrap(result, schema)

    @router.delete("/{entity_id}", status_code=status.HTTP_204_NO_CONTENT, responses=errors)
    async def delete_entity(session: Session, entity_id: Annotated[int, Path()]) -> Response:
        result = await getattr(session, f"delete_{name}")(entity_id)
        _unwrap(result, schema)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router


allowance_types_router = entity_router(
    "/allowance-types",
    EntityKind.ALLOWANCE_TYPE,
    AllowanceTypeCreate,
    AllowanceTypeUpdate,
    AllowanceTypeResponse,
)
employees_router = entity_router(
    "/employees",
    EntityKind.EMPLOYEE,
    EmployeeCreate,
    EmployeeUpdate,
    EmployeeResponse,
)
payslips_router = entity_router(
    "/payslips",
    EntityKind.PAYSLIP,
    PayslipCreate,
    PayslipUpdate,
    PayslipResponse,
)
allowances_router = entity_router(
    "/allowances",
    EntityKind.ALLOWANCE,
    AllowanceCreate,
    AllowanceUpdate,
    AllowanceResponse,
)
