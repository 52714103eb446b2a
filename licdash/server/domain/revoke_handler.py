"""
Revocation handler for the dashboard.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING, Callable

from licdash.common.exceptions import (
    BadRequestError,
    InvalidStateTransitionError,
)
from licdash.common.models import LicenseStatus, RevocationResult

if TYPE_CHECKING:
    from pathlib import Path

    from licdash.common.interfaces import IDataPersistence, ILicenseStore

REVOCABLE_STATUSES = frozenset({LicenseStatus.READY, LicenseStatus.ACTIVE})


class RevokeHandler:
    """Applies the ``{ready, active} -> revoked`` transition to one license."""

    def __init__(
        self,
        store: ILicenseStore,
        data_persistence: IDataPersistence,
        revoked_licenses_file_path: Path | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.data_persistence = data_persistence
        self.revoked_licenses_file_path = revoked_licenses_file_path
        self.clock = clock
        self.logger = logging.getLogger(__name__)
        self._lock = threading.Lock()
        self.revoked_licenses: dict[str, int] = (
            data_persistence.load_revoked_licenses(revoked_licenses_file_path)
            if revoked_licenses_file_path
            else {}
        )

    def revoke(self, license_id: str) -> RevocationResult:
        """Revoke a license; revoking an already revoked license is a no-op."""
        license_id = license_id.strip()
        if not license_id:
            raise BadRequestError("License id is required")

        previous = self.store.transition_status(
            license_id, REVOCABLE_STATUSES, LicenseStatus.REVOKED
        )
        if previous == LicenseStatus.REVOKED:
            self.logger.info("License %s already revoked", license_id)
            if license_id not in self.revoked_licenses:
                self._record(license_id)
            return RevocationResult(
                success=True,
                message="License was already revoked",
                license_id=license_id,
            )

        self._record(license_id)
        self.logger.info("Revoked license %s (was %s)", license_id, previous.value)
        return RevocationResult(
            success=True,
            message="License revocation was successful",
            license_id=license_id,
        )

    def reapply(self) -> int:
        """Re-apply persisted revocations to the store, returning how many took effect."""
        applied = 0
        for license_id in list(self.revoked_licenses):
            if self.store.get_license(license_id) is None:
                self.logger.warning(
                    "Skipping persisted revocation of unknown license %s", license_id
                )
                continue
            try:
                previous = self.store.transition_status(
                    license_id, REVOCABLE_STATUSES, LicenseStatus.REVOKED
                )
            except InvalidStateTransitionError as err:
                self.logger.warning("Skipping persisted revocation of %s: %s", license_id, err)
                continue
            if previous != LicenseStatus.REVOKED:
                applied += 1
        return applied

    def _record(self, license_id: str) -> None:
        """Remember a revocation; an unsaved entry is retried on the next revoke."""
        with self._lock:
            self.revoked_licenses[license_id] = int(self.clock())
            if not self.revoked_licenses_file_path:
                return
            try:
                self.data_persistence.save_revoked_licenses(
                    self.revoked_licenses_file_path, self.revoked_licenses
                )
            except OSError:
                self.logger.exception(
                    "Could not persist revocation of %s to %s",
                    license_id,
                    self.revoked_licenses_file_path,
                )
                del self.revoked_licenses[license_id]
