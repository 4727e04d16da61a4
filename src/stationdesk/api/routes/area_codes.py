"""Area code administration endpoints."""

from __future__ import annotations

from dataclasses import asdict
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ...models.domain import AreaCode
from ...persistence.store import PackageStore, StoreError, get_store
from ...schemas.area_codes import (
    AreaCodeCreateRequest,
    AreaCodeModel,
    AreaCodeUpdateRequest,
    AssignRequest,
)
from ...services.area_codes import (
    AreaCodeError,
    assign_area_code,
    create_area_code,
    delete_area_code,
    toggle_area_code_status,
    update_area_code,
)
from ...services.export import area_codes_to_csv
from ...services.reports import area_code_usage

router = APIRouter(prefix="/area-codes", tags=["area-codes"])

_NULLABLE_FIELDS = {"notes"}


def _to_model(item: AreaCode, usage: dict[str, int]) -> AreaCodeModel:
    return AreaCodeModel(**asdict(item), package_count=usage.get(item.id, 0))


def _run(action):
    try:
        return action()
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except AreaCodeError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except StoreError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc


@router.get("", response_model=List[AreaCodeModel])
def list_area_codes(store: PackageStore = Depends(get_store)) -> List[AreaCodeModel]:
    items = store.list_area_codes()
    usage = area_code_usage(store.list_packages(), items)
    return [_to_model(item, usage) for item in items]


@router.post("", response_model=AreaCodeModel, status_code=status.HTTP_201_CREATED)
def add_area_code(payload: AreaCodeCreateRequest, store: PackageStore = Depends(get_store)) -> AreaCodeModel:
    item = _run(lambda: create_area_code(store, **payload.model_dump()))
    return _to_model(item, {})


@router.get("/export")
def export_area_codes(store: PackageStore = Depends(get_store)) -> Response:
    items = store.list_area_codes()
    usage = area_code_usage(store.list_packages(), items)
    return Response(
        content=area_codes_to_csv(items, usage),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="area-codes.csv"'},
    )


@router.put("/{area_code_id}", response_model=AreaCodeModel)
def edit_area_code(
    area_code_id: str, payload: AreaCodeUpdateRequest, store: PackageStore = Depends(get_store)
) -> AreaCodeModel:
    # An explicit null clears nullable fields; for required ones it means "leave as is".
    changes = {
        key: value
        for key, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or key in _NULLABLE_FIELDS
    }
    item = _run(lambda: update_area_code(store, area_code_id, **changes))
    return _to_model(item, {})


@router.post("/{area_code_id}/toggle", response_model=AreaCodeModel)
def toggle_area_code(area_code_id: str, store: PackageStore = Depends(get_store)) -> AreaCodeModel:
    item = _run(lambda: toggle_area_code_status(store, area_code_id))
    return _to_model(item, {})


@router.post("/{area_code_id}/assign", response_model=AreaCodeModel)
def assign_user(area_code_id: str, payload: AssignRequest, store: PackageStore = Depends(get_store)) -> AreaCodeModel:
    item = _run(lambda: assign_area_code(store, area_code_id, payload.user_id))
    return _to_model(item, {})


@router.delete("/{area_code_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_area_code(area_code_id: str, store: PackageStore = Depends(get_store)) -> Response:
    _run(lambda: delete_area_code(store, area_code_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
