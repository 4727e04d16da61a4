"""Package registration and listing endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ...models.domain import Quantities
from ...persistence.store import DuplicateCodeError, PackageStore, StoreError, get_store
from ...schemas.packages import (
    PackageListResponse,
    PackageModel,
    ParsedCodeResponse,
    RegisterPackageRequest,
)
from ...services.allocation import MalformedCodeError, OutOfRangeError, UnknownStationError, parse_tracking_code
from ...services.export import packages_to_csv, packages_to_xlsx
from ...services.registration import RangeFullError, RegistrationError, register_package
from ...services.reports import filter_packages, package_totals

router = APIRouter(prefix="/packages", tags=["packages"])


@router.get("", response_model=PackageListResponse)
def list_packages(
    q: str | None = Query(default=None, description="Search tracking code, recipient or sender"),
    station: str | None = Query(default=None, description="Exact station name"),
    store: PackageStore = Depends(get_store),
) -> PackageListResponse:
    items = filter_packages(store.list_packages(), query=q, station=station)
    items.sort(key=lambda p: p.registered_at, reverse=True)
    return PackageListResponse(
        items=[PackageModel.model_validate(p) for p in items],
        totals=package_totals(items),
    )


@router.post("", response_model=PackageModel, status_code=status.HTTP_201_CREATED)
def create_package(payload: RegisterPackageRequest, store: PackageStore = Depends(get_store)) -> PackageModel:
    try:
        package = register_package(
            store,
            payload.station,
            number=payload.number,
            quantities=Quantities(**payload.quantities.model_dump()),
            recorded_by=payload.recorded_by,
            brought_by=payload.brought_by,
        )
    except UnknownStationError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown station: {payload.station}") from exc
    except (OutOfRangeError, RegistrationError) as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except RangeFullError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Full") from exc
    except DuplicateCodeError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except StoreError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return PackageModel.model_validate(package)


@router.get("/export")
def export_packages(
    fmt: str = Query(default="csv", pattern="^(csv|xlsx)$"),
    q: str | None = Query(default=None),
    station: str | None = Query(default=None),
    store: PackageStore = Depends(get_store),
) -> Response:
    items = filter_packages(store.list_packages(), query=q, station=station)
    if fmt == "xlsx":
        return Response(
            content=packages_to_xlsx(items),
            media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            headers={"Content-Disposition": 'attachment; filename="packages.xlsx"'},
        )
    return Response(
        content=packages_to_csv(items),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="packages.csv"'},
    )


@router.get("/parse/{code}", response_model=ParsedCodeResponse)
def parse_code(code: str) -> ParsedCodeResponse:
    try:
        name, number = parse_tracking_code(code)
    except MalformedCodeError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    return ParsedCodeResponse(station=name, number=number)


@router.get("/{tracking_number}", response_model=PackageModel)
def get_package(tracking_number: str, store: PackageStore = Depends(get_store)) -> PackageModel:
    package = store.find_package(tracking_number)
    if package is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Package not found")
    return PackageModel.model_validate(package)
