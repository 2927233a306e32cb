"""
CRUD router factory over `RecordAccessor`.

Request bodies are pydantic models, so the column names that reach the
accessor are always the model's declared fields.
"""

from typing import Any

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from auth import dependencies as auth_dependencies

from .accessor import RecordAccessor, validate_table
from .dependencies import get_accessor

_require_user = Depends(auth_dependencies.get_current_user)


def build_router(
    table: str,
    *,
    create_schema: type[BaseModel] | None = None,
    update_schema: type[BaseModel] | None = None,
    protect_list: bool = False,
    hidden_fields: tuple[str, ...] = (),
) -> APIRouter:
    validate_table(table)
    router = APIRouter()

    def public(row: dict[str, Any]) -> dict[str, Any]:
        return {k: v for k, v in row.items() if k not in hidden_fields}

    @router.get("", dependencies=[_require_user] if protect_list else [])
    async def list_records(records: RecordAccessor = Depends(get_accessor)) -> list[dict]:
        return [public(row) for row in await records.list_all(table)]

    @router.get("/{record_id}")
    async def get_record(record_id: int, records: RecordAccessor = Depends(get_accessor)) -> dict:
        return public(await records.get_by_id(table, record_id))

    if create_schema is not None:

        @router.post("", status_code=status.HTTP_201_CREATED, dependencies=[_require_user])
        async def create_record(
            payload: create_schema,  # type: ignore[valid-type]
            records: RecordAccessor = Depends(get_accessor),
        ) -> dict:
            created = await records.insert(table, payload.model_dump(exclude_none=True))
            return {
                "id": created.id,
                "message": f"{table} created successfully",
                "data": public(created.record),
            }

    if update_schema is not None:

        @router.put("/{record_id}", dependencies=[_require_user])
        async def update_record(
            record_id: int,
            payload: update_schema,  # type: ignore[valid-type]
            records: RecordAccessor = Depends(get_accessor),
        ) -> dict:
            # Omitted and null fields both leave the column unchanged.
            changes = payload.model_dump(exclude_unset=True, exclude_none=True)
            result = await records.update(table, record_id, changes)
            return {"message": f"{table} updated successfully", "affected_rows": result.affected}

    @router.delete("/{record_id}", dependencies=[_require_user])
    async def delete_record(record_id: int, records: RecordAccessor = Depends(get_accessor)) -> dict:
        result = await records.remove(table, record_id)
        return {"message": f"{table} deleted successfully", "affected_rows": result.affected}

    return router
