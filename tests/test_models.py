import pytest
from pydantic import ValidationError

from licdash.common.exceptions import InvalidStateTransitionError, NotFoundError
from licdash.common.models import (
    Credentials,
    LicenseRecord,
    LicenseStatus,
    LicenseType,
    OversharedLicense,
    PublicationPage,
)

LICENSE_WIRE = {
    "id": "lic-001",
    "publicationId": "pub-123",
    "altId": "alt-123",
    "title": "Advanced JavaScript Patterns",
    "userId": "user-001",
    "userEmail": "john.doe@example.com",
    "type": "loan",
    "status": "active",
    "deviceCount": 5,
}


def test_license_from_wire() -> None:
    lic = LicenseRecord.model_validate(LICENSE_WIRE)

    assert lic.publication_id == "pub-123"
    assert lic.type is LicenseType.LOAN
    assert lic.status is LicenseStatus.ACTIVE
    assert lic.provider is None


def test_license_to_wire_is_camel_case() -> None:
    wire = LicenseRecord.model_validate(LICENSE_WIRE).to_wire()

    assert wire["deviceCount"] == 5
    assert wire["userEmail"] == "john.doe@example.com"
    assert "device_count" not in wire
    assert wire["createdAt"] is None


def test_license_accepts_snake_case() -> None:
    lic = LicenseRecord(
        id="x",
        publication_id="p",
        alt_id="a",
        title="t",
        user_id="u",
        type="buy",
        status="ready",
        device_count=0,
    )
    assert lic.to_wire()["publicationId"] == "p"


@pytest.mark.parametrize(
    "changes",
    [{"deviceCount": -1}, {"status": "deleted"}, {"type": "rent"}, {"title": None}],
)
def test_license_rejects_invalid_fields(changes) -> None:
    with pytest.raises(ValidationError):
        LicenseRecord.model_validate({**LICENSE_WIRE, **changes})


def test_overshared_excess_devices() -> None:
    lic = OversharedLicense.model_validate({**LICENSE_WIRE, "deviceLimit": 2})
    assert lic.excess_devices == 3
    assert lic.to_wire()["deviceLimit"] == 2


def test_credentials_require_both_fields() -> None:
    with pytest.raises(ValidationError):
        Credentials(username="admin", password="")
    with pytest.raises(ValidationError):
        Credentials.model_validate({"username": "admin"})


def test_publication_page_wire_format() -> None:
    page = PublicationPage(items=[], page=1, per_page=20, total=0)
    assert page.to_wire() == {"items": [], "page": 1, "perPage": 20, "total": 0}


def test_error_envelopes() -> None:
    assert NotFoundError().to_dict() == {"error": "Resource not found", "code": "NOT_FOUND"}

    err = InvalidStateTransitionError("lic-1", "expired", "revoked")
    assert err.status_code == 409
    assert err.to_dict()["code"] == "INVALID_STATE_TRANSITION"
    assert err.current == "expired"


def test_license_round_trip() -> None:
    wire = {
        **LICENSE_WIRE,
        "provider": "EDRLab",
        "start": "2024-01-15T00:00:00Z",
        "end": "2024-12-31T23:59:59Z",
        "createdAt": "2024-01-15T00:00:00Z",
    }
    lic = LicenseRecord.model_validate(wire)

    parsed = LicenseRecord.model_validate(lic.to_wire())

    assert parsed == lic
    assert parsed.to_wire() == lic.to_wire()
