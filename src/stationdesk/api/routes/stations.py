"""Station range endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ...persistence.store import PackageStore, get_store
from ...schemas.stations import (
    CodeValidationResponse,
    NextCodeResponse,
    StationModel,
    StationSummaryModel,
)
from ...services.allocation import UnknownStationError, get_station, is_valid_code, list_stations
from ...services.export import station_packages_to_csv
from ...services.registration import suggest_code
from ...services.reports import station_summaries

router = APIRouter(prefix="/stations", tags=["stations"])


def _resolve(station_key: str):
    try:
        return get_station(station_key)
    except UnknownStationError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown station: {station_key}") from exc


@router.get("", response_model=List[StationModel])
def get_stations() -> List[StationModel]:
    return [
        StationModel(id=s.id, name=s.name, range_min=s.range_min, range_max=s.range_max)
        for s in list_stations()
    ]


@router.get("/summary", response_model=List[StationSummaryModel])
def get_station_summaries(
    date: str | None = Query(default=None, description="Only stations with packages registered on this date prefix"),
    store: PackageStore = Depends(get_store),
) -> List[StationSummaryModel]:
    summaries = station_summaries(store.list_packages(), list_stations(), date_prefix=date)
    return [StationSummaryModel.model_validate(item) for item in summaries]


@router.get("/{station_key}/validate", response_model=CodeValidationResponse)
def validate_code(station_key: str, number: int = Query(..., description="Candidate tracking number")) -> CodeValidationResponse:
    station = _resolve(station_key)
    valid = is_valid_code(station, number)
    message = None
    if not valid:
        message = f"Code must be between {station.range_min} and {station.range_max} for {station.name}."
    return CodeValidationResponse(station=station.name, number=number, valid=valid, message=message)


@router.get("/{station_key}/next", response_model=NextCodeResponse)
def next_code(station_key: str, store: PackageStore = Depends(get_store)) -> NextCodeResponse:
    _resolve(station_key)
    return NextCodeResponse(**suggest_code(store, station_key))


@router.get("/{station_key}/export")
def export_station(station_key: str, store: PackageStore = Depends(get_store)) -> Response:
    station = _resolve(station_key)
    packages = [p for p in store.list_packages() if p.station == station.name]
    return Response(
        content=station_packages_to_csv(packages),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{station.name}-packages.csv"'},
    )
