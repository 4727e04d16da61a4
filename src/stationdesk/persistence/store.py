"""Record stores for packages and area codes.

Two backends share one interface: ``LocalStore`` keeps each collection as a
whole JSON array in a file slot, ``SupabaseStore`` reads and inserts rows in
the remote tables. ``get_store`` picks one from the remote-enabled flag.

Reads are forgiving: a corrupt local slot reads as empty and a failing remote
query falls back to the local slots. Writes are not: any failure to read the
current state or to persist the change raises ``StoreError`` and nothing is
overwritten.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from functools import lru_cache
from pathlib import Path
from typing import Callable, Sequence

from postgrest.exceptions import APIError

from ..config import settings
from ..db.supabase import get_supabase_client
from ..models.domain import AreaCode, Package
from .filesystem import FileStorage
from .mappers import area_code_to_row, package_to_row, row_to_area_code, row_to_package

logger = logging.getLogger(__name__)

PACKAGES_SLOT = "packages"
AREA_CODES_SLOT = "area_codes"

# Postgres unique_violation
_UNIQUE_VIOLATION = "23505"

AreaCodeChange = Callable[[list[AreaCode]], list[AreaCode]]


class StoreError(RuntimeError):
    """The backing store could not complete a write."""


class DuplicateCodeError(StoreError):
    """A package with the same tracking code already exists."""

    def __init__(self, tracking_number: str) -> None:
        self.tracking_number = tracking_number
        super().__init__(f"Tracking code {tracking_number} is already issued")


class PackageStore(ABC):
    """Read and append access to the shared record lists."""

    backend: str

    @abstractmethod
    def list_packages(self) -> list[Package]:
        raise NotImplementedError

    @abstractmethod
    def append_package(self, package: Package) -> Package:
        """Persist ``package``; raises DuplicateCodeError if its code is taken."""
        raise NotImplementedError

    @abstractmethod
    def list_area_codes(self) -> list[AreaCode]:
        raise NotImplementedError

    @abstractmethod
    def upsert_area_codes(self, items: Sequence[AreaCode]) -> None:
        raise NotImplementedError

    @abstractmethod
    def mutate_area_codes(self, change: AreaCodeChange) -> list[AreaCode]:
        """Apply ``change`` to the current area code list and persist its result.

        ``change`` receives the stored list and returns the list to save.
        Exceptions it raises propagate and leave the store untouched.
        """
        raise NotImplementedError

    @abstractmethod
    def delete_area_code(self, area_code_id: str) -> None:
        raise NotImplementedError

    def find_package(self, tracking_number: str) -> Package | None:
        for package in self.list_packages():
            if package.tracking_number == tracking_number:
                return package
        return None


def _rows_to_packages(rows: list[dict]) -> list[Package]:
    packages: list[Package] = []
    for row in rows:
        try:
            packages.append(row_to_package(row))
        except (KeyError, ValueError, TypeError) as e:
            logger.warning("Skipping invalid package row: %s", e)
    return packages


def _rows_to_area_codes(rows: list[dict]) -> list[AreaCode]:
    area_codes: list[AreaCode] = []
    for row in rows:
        try:
            area_codes.append(row_to_area_code(row))
        except (KeyError, ValueError, TypeError) as e:
            logger.warning("Skipping invalid area code row: %s", e)
    return area_codes


class LocalStore(PackageStore):
    """Whole-array JSON slots on disk; writes are serialized by a lock."""

    backend = "local"

    def __init__(self, root: Path | None = None) -> None:
        self.storage = FileStorage(root=root)
        self._lock = threading.Lock()

    def _read_rows(self, slot: str) -> list[dict]:
        try:
            data = self.storage.read_json(slot, [])
        except ValueError as e:
            logger.warning("Local slot '%s' is not valid JSON, treating it as empty: %s", slot, e)
            return []
        return data if isinstance(data, list) else []

    def _read_rows_for_write(self, slot: str) -> list[dict]:
        """Like ``_read_rows`` but refuses to treat a damaged slot as empty."""
        try:
            data = self.storage.read_json(slot, [])
        except ValueError as e:
            raise StoreError(f"Local slot '{slot}' is not valid JSON; refusing to overwrite it") from e
        if not isinstance(data, list):
            raise StoreError(f"Local slot '{slot}' does not hold a list; refusing to overwrite it")
        return data

    def list_packages(self) -> list[Package]:
        return _rows_to_packages(self._read_rows(PACKAGES_SLOT))

    def append_package(self, package: Package) -> Package:
        with self._lock:
            rows = self._read_rows_for_write(PACKAGES_SLOT)
            existing = {row.get("trackingnumber") or row.get("trackingNumber") for row in rows}
            if package.tracking_number in existing:
                raise DuplicateCodeError(package.tracking_number)
            rows.append(package_to_row(package))
            self.storage.write_json(PACKAGES_SLOT, rows)
        return package

    def list_area_codes(self) -> list[AreaCode]:
        return _rows_to_area_codes(self._read_rows(AREA_CODES_SLOT))

    def upsert_area_codes(self, items: Sequence[AreaCode]) -> None:
        with self._lock:
            self.storage.write_json(AREA_CODES_SLOT, [area_code_to_row(item) for item in items])

    def mutate_area_codes(self, change: AreaCodeChange) -> list[AreaCode]:
        with self._lock:
            items = change(_rows_to_area_codes(self._read_rows_for_write(AREA_CODES_SLOT)))
            self.storage.write_json(AREA_CODES_SLOT, [area_code_to_row(item) for item in items])
        return items

    def delete_area_code(self, area_code_id: str) -> None:
        with self._lock:
            rows = self._read_rows_for_write(AREA_CODES_SLOT)
            rows = [row for row in rows if str(row.get("id")) != area_code_id]
            self.storage.write_json(AREA_CODES_SLOT, rows)


class SupabaseStore(PackageStore):
    """Remote tables; reads fall back to the local slots when the query fails."""

    backend = "supabase"

    def __init__(self, client, fallback: LocalStore | None = None) -> None:
        self.client = client
        self.fallback = fallback or LocalStore()

    def list_packages(self) -> list[Package]:
        try:
            response = self.client.table("packages").select("*").order("registeredat").execute()
        except Exception as e:
            logger.warning("Failed to read packages from Supabase, using local slot: %s", e)
            return self.fallback.list_packages()
        return _rows_to_packages(response.data or [])

    def _find_remote(self, tracking_number: str) -> Package | None:
        response = (
            self.client.table("packages")
            .select("*")
            .eq("trackingnumber", tracking_number)
            .limit(1)
            .execute()
        )
        rows = _rows_to_packages(response.data or [])
        return rows[0] if rows else None

    def find_package(self, tracking_number: str) -> Package | None:
        try:
            return self._find_remote(tracking_number)
        except Exception as e:
            logger.warning("Failed to look up package in Supabase, using local slot: %s", e)
            return self.fallback.find_package(tracking_number)

    def append_package(self, package: Package) -> Package:
        # The select narrows the race window; the table's unique constraint closes it.
        try:
            existing = self._find_remote(package.tracking_number)
        except Exception as e:
            raise StoreError(f"Could not check {package.tracking_number} against Supabase: {e}") from e
        if existing is not None:
            raise DuplicateCodeError(package.tracking_number)
        try:
            self.client.table("packages").insert(package_to_row(package)).execute()
        except APIError as e:
            if e.code == _UNIQUE_VIOLATION:
                raise DuplicateCodeError(package.tracking_number) from e
            raise StoreError(f"Supabase rejected package {package.tracking_number}: {e.message}") from e
        except Exception as e:
            raise StoreError(f"Could not save package {package.tracking_number} to Supabase: {e}") from e
        logger.info("Saved package %s to Supabase", package.tracking_number)
        return package

    def list_area_codes(self) -> list[AreaCode]:
        try:
            response = self.client.table("area_codes").select("*").order("minrange").execute()
        except Exception as e:
            logger.warning("Failed to read area codes from Supabase, using local slot: %s", e)
            return self.fallback.list_area_codes()
        return _rows_to_area_codes(response.data or [])

    def upsert_area_codes(self, items: Sequence[AreaCode]) -> None:
        if not items:
            return
        try:
            self.client.table("area_codes").upsert(
                [area_code_to_row(item) for item in items], on_conflict="id"
            ).execute()
        except APIError as e:
            raise StoreError(f"Supabase rejected area codes: {e.message}") from e
        except Exception as e:
            raise StoreError(f"Could not save area codes to Supabase: {e}") from e

    def mutate_area_codes(self, change: AreaCodeChange) -> list[AreaCode]:
        # Rows are keyed by id, so concurrent edits to different codes do not clobber each other.
        try:
            response = self.client.table("area_codes").select("*").order("minrange").execute()
        except Exception as e:
            raise StoreError(f"Could not read area codes from Supabase: {e}") from e
        items = change(_rows_to_area_codes(response.data or []))
        self.upsert_area_codes(items)
        return items

    def delete_area_code(self, area_code_id: str) -> None:
        try:
            self.client.table("area_codes").delete().eq("id", area_code_id).execute()
        except APIError as e:
            raise StoreError(f"Supabase rejected area code delete: {e.message}") from e
        except Exception as e:
            raise StoreError(f"Could not delete area code {area_code_id} from Supabase: {e}") from e


@lru_cache(maxsize=1)
def get_store() -> PackageStore:
    """Return the configured store: Supabase when enabled and reachable, else local slots."""
    if settings.remote_enabled:
        client = get_supabase_client()
        if client is not None:
            return SupabaseStore(client)
        logger.warning("Remote store enabled but Supabase client unavailable, using local slots")
    return LocalStore()
