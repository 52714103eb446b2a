"""
Read-side handler for dashboard data.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from licdash.common.exceptions import BadRequestError, NotFoundError
from licdash.common.models import (
    DashboardSnapshot,
    DeletionResult,
    LicenseRecord,
    OversharedLicense,
    PaginationRequest,
    PublicationPage,
    UsageEvent,
)

if TYPE_CHECKING:
    from licdash.common.interfaces import ILicenseStore


def _required(value: str, name: str) -> str:
    value = value.strip()
    if not value:
        raise BadRequestError(f"{name} is required")
    return value


class QueryHandler:
    """Dashboard queries. Callers are already authenticated."""

    def __init__(self, store: ILicenseStore):
        self.store = store

    def get_snapshot(self) -> DashboardSnapshot:
        return self.store.snapshot()

    def list_overshared_licenses(self) -> list[OversharedLicense]:
        return sorted(self.store.overshared_licenses(), key=lambda lic: lic.id)

    def list_user_licenses(self, user_id: str) -> list[LicenseRecord]:
        """Unknown users yield an empty list."""
        return self.store.licenses_for_user(_required(user_id, "User id"))

    def list_license_events(self, license_id: str) -> list[UsageEvent]:
        """Events in chronological order; unknown licenses yield an empty list."""
        events = self.store.events_for_license(_required(license_id, "License id"))
        return sorted(events, key=lambda event: event.timestamp)

    def list_publications(self, pagination: PaginationRequest) -> PublicationPage:
        return PublicationPage(
            items=self.store.publications_slice(pagination.offset, pagination.limit),
            page=pagination.page,
            per_page=pagination.per_page,
            total=self.store.count_publications(),
        )

    def delete_publication(self, uuid: str) -> DeletionResult:
        uuid = _required(uuid, "Publication id")
        if not self.store.delete_publication(uuid):
            raise NotFoundError(f"Publication {uuid} not found")
        return DeletionResult(
            success=True, message="Publication deleted successfully", uuid=uuid
        )
