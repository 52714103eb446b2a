"""
Interfaces and protocols for dependency injection.
"""

from __future__ import annotations

from collections.abc import Collection
from datetime import datetime
from pathlib import Path
from typing import Protocol

from licdash.common.models import (
    DashboardSnapshot,
    Dataset,
    LicenseRecord,
    LicenseStatus,
    OversharedLicense,
    Publication,
    UsageEvent,
)


class IDataPersistence(Protocol):
    """Protocol for data persistence operations."""

    @staticmethod
    def load_dataset(file_path: Path) -> Dataset: ...

    @staticmethod
    def load_revoked_licenses(file_path: Path) -> dict[str, int]: ...

    @staticmethod
    def save_revoked_licenses(
        file_path: Path, revoked_licenses: dict[str, int]
    ) -> None: ...


class ILicenseStore(Protocol):
    """Protocol for the license/publication store behind the dashboard."""

    def all_licenses(self) -> list[LicenseRecord]: ...

    def get_license(self, license_id: str) -> LicenseRecord | None: ...

    def licenses_for_user(self, user_id: str) -> list[LicenseRecord]: ...

    def overshared_licenses(self) -> list[OversharedLicense]: ...

    def events_for_license(self, license_id: str) -> list[UsageEvent]: ...

    def all_publications(self) -> list[Publication]: ...

    def count_publications(self) -> int: ...

    def publications_slice(self, offset: int, limit: int) -> list[Publication]: ...

    def delete_publication(self, uuid: str) -> bool: ...

    def transition_status(
        self,
        license_id: str,
        allowed_from: Collection[LicenseStatus],
        target: LicenseStatus,
    ) -> LicenseStatus: ...

    def snapshot(self) -> DashboardSnapshot: ...


class IClock(Protocol):
    def __call__(self) -> datetime: ...
