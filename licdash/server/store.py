"""
In-memory license store backing the dashboard.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Collection
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from licdash.common.exceptions import InvalidStateTransitionError, NotFoundError
from licdash.common.models import (
    DashboardSnapshot,
    Dataset,
    LicenseRecord,
    LicenseStatus,
    OversharedLicense,
    Publication,
    UsageEvent,
)

from .aggregation import build_snapshot

if TYPE_CHECKING:
    from licdash.common.interfaces import IClock


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryLicenseStore:
    """License, event and publication records held in process memory.

    Status transitions are serialized per license id, so concurrent
    revocations of the same license settle on one state (first writer wins).
    """

    def __init__(
        self,
        dataset: Dataset,
        device_limit: int = 2,
        clock: IClock | None = None,
    ):
        self.device_limit = device_limit
        self.clock = clock or utcnow
        self.logger = logging.getLogger(__name__)

        self._licenses: dict[str, LicenseRecord] = {
            lic.id: lic for lic in dataset.licenses
        }
        self._locks: dict[str, threading.Lock] = {
            license_id: threading.Lock() for license_id in self._licenses
        }
        self._events: dict[str, list[UsageEvent]] = {
            license_id: sorted(events, key=lambda e: e.timestamp)
            for license_id, events in dataset.events.items()
        }
        self._publications: dict[str, Publication] = {
            pub.uuid: pub for pub in dataset.publications
        }
        self._publications_lock = threading.Lock()

    # Licenses

    def all_licenses(self) -> list[LicenseRecord]:
        return list(self._licenses.values())

    def get_license(self, license_id: str) -> LicenseRecord | None:
        return self._licenses.get(license_id)

    def licenses_for_user(self, user_id: str) -> list[LicenseRecord]:
        """Licenses whose user id matches, or whose email matches ignoring case."""
        needle = user_id.casefold()
        return [
            lic
            for lic in self._licenses.values()
            if lic.user_id == user_id
            or (lic.user_email is not None and lic.user_email.casefold() == needle)
        ]

    def overshared_licenses(self) -> list[OversharedLicense]:
        return [
            OversharedLicense(**lic.model_dump(), device_limit=self.device_limit)
            for lic in sorted(self._licenses.values(), key=lambda lic: lic.id)
            if lic.device_count > self.device_limit
        ]

    def events_for_license(self, license_id: str) -> list[UsageEvent]:
        return list(self._events.get(license_id, []))

    def transition_status(
        self,
        license_id: str,
        allowed_from: Collection[LicenseStatus],
        target: LicenseStatus,
    ) -> LicenseStatus:
        """Move a license to ``target`` and return its previous status.

        A license already in ``target`` is left untouched.
        """
        lock = self._locks.get(license_id)
        if lock is None:
            raise NotFoundError(f"License {license_id} not found")
        with lock:
            record = self._licenses[license_id]
            previous = record.status
            if previous == target:
                return previous
            if previous not in allowed_from:
                raise InvalidStateTransitionError(
                    license_id, previous.value, target.value
                )
            self._licenses[license_id] = record.model_copy(update={"status": target})
        self.logger.debug(
            "License %s moved from %s to %s", license_id, previous.value, target.value
        )
        return previous

    # Publications

    def all_publications(self) -> list[Publication]:
        return list(self._publications.values())

    def count_publications(self) -> int:
        return len(self._publications)

    def publications_slice(self, offset: int, limit: int) -> list[Publication]:
        return list(self._publications.values())[offset : offset + limit]

    def delete_publication(self, uuid: str) -> bool:
        with self._publications_lock:
            return self._publications.pop(uuid, None) is not None

    # Aggregates

    def snapshot(self) -> DashboardSnapshot:
        return build_snapshot(
            self.all_licenses(),
            self.all_publications(),
            len(self.overshared_licenses()),
            self.clock(),
        )
