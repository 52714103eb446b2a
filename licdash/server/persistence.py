"""
Data persistence utilities.
"""

from __future__ import annotations

import json
from pathlib import Path  # noqa: TC003

from pydantic import TypeAdapter, ValidationError

from licdash.common.models import Dataset

RevokedLicenses = TypeAdapter(dict[str, int])


class DataPersistence:
    """Handles loading and saving persistent data."""

    @staticmethod
    def load_dataset(file_path: Path) -> Dataset:
        """Load a store seed file (licenses, events, publications)."""
        with file_path.open() as f:
            return Dataset.model_validate_json(f.read())

    @staticmethod
    def load_revoked_licenses(file_path: Path) -> dict[str, int]:
        """Load revoked licenses from file; an unreadable or malformed file loads as empty."""
        try:
            return RevokedLicenses.validate_json(file_path.read_bytes())
        except (OSError, ValidationError):
            return {}

    @staticmethod
    def save_revoked_licenses(
        file_path: Path, revoked_licenses: dict[str, int]
    ) -> None:
        """Save revoked licenses to file."""
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with file_path.open("w") as f:
            json.dump(revoked_licenses, f)
