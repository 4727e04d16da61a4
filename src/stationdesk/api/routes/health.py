"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...config import settings
from ...persistence.store import PackageStore, get_store

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/store", status_code=status.HTTP_200_OK)
def check_store(store: PackageStore = Depends(get_store)) -> dict:
    """Report which backend holds the records and how many packages it sees."""
    try:
        packages = store.list_packages()
    except Exception as exc:
        return {
            "backend": store.backend,
            "remote_enabled": settings.remote_enabled,
            "connected": False,
            "error": str(exc),
        }
    return {
        "backend": store.backend,
        "remote_enabled": settings.remote_enabled,
        "connected": True,
        "packages_count": len(packages),
    }
