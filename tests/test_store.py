import json
import threading
from datetime import datetime, timezone

import pytest

from licdash.common.exceptions import (
    BadRequestError,
    InvalidStateTransitionError,
    NotFoundError,
)
from licdash.common.models import (
    Dataset,
    LicenseRecord,
    LicenseStatus,
    PaginationRequest,
    Publication,
)
from licdash.server.aggregation import build_snapshot
from licdash.server.domain.query_handler import QueryHandler
from licdash.server.domain.revoke_handler import RevokeHandler
from licdash.server.persistence import DataPersistence
from licdash.server.sample_data import sample_dataset
from licdash.server.store import InMemoryLicenseStore


def make_license(license_id: str, **fields) -> LicenseRecord:
    values = {
        "id": license_id,
        "publication_id": "pub-1",
        "alt_id": "alt-1",
        "title": "A Book",
        "user_id": "user-1",
        "type": "loan",
        "status": "active",
        "device_count": 1,
    }
    values.update(fields)
    return LicenseRecord(**values)


def make_publication(uuid: str, content_type: str = "application/epub+zip") -> Publication:
    return Publication(
        uuid=uuid,
        created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
        content_type=content_type,
        title=uuid,
        href=f"https://example.com/{uuid}",
        size=1,
        checksum="00",
    )


@pytest.fixture
def store() -> InMemoryLicenseStore:
    return InMemoryLicenseStore(sample_dataset())


@pytest.fixture
def revoke_handler(store: InMemoryLicenseStore, tmp_path) -> RevokeHandler:
    return RevokeHandler(
        store, DataPersistence(), revoked_licenses_file_path=tmp_path / "revoked.json"
    )


# Store


def test_overshared_uses_device_limit() -> None:
    dataset = Dataset(
        licenses=[
            make_license("b", device_count=3),
            make_license("a", device_count=5),
            make_license("c", device_count=2),
        ]
    )
    store = InMemoryLicenseStore(dataset, device_limit=2)

    overshared = store.overshared_licenses()

    assert [lic.id for lic in overshared] == ["a", "b"]
    assert overshared[0].device_limit == 2
    assert overshared[0].excess_devices == 3
    assert [lic.id for lic in InMemoryLicenseStore(dataset, device_limit=4).overshared_licenses()] == ["a"]


def test_transition_status(store: InMemoryLicenseStore) -> None:
    allowed = {LicenseStatus.READY, LicenseStatus.ACTIVE}

    previous = store.transition_status("lic-002", allowed, LicenseStatus.REVOKED)

    assert previous == LicenseStatus.READY
    assert store.get_license("lic-002").status == LicenseStatus.REVOKED  # type: ignore[union-attr]
    assert store.transition_status("lic-002", allowed, LicenseStatus.REVOKED) == LicenseStatus.REVOKED

    with pytest.raises(InvalidStateTransitionError):
        store.transition_status("lic-007", allowed, LicenseStatus.REVOKED)
    with pytest.raises(NotFoundError):
        store.transition_status("lic-404", allowed, LicenseStatus.REVOKED)


def test_delete_publication(store: InMemoryLicenseStore) -> None:
    assert store.delete_publication("pub-002")
    assert not store.delete_publication("pub-002")
    assert store.count_publications() == 24


def test_events_are_chronological() -> None:
    dataset = sample_dataset()
    dataset.events["lic-001"] = list(reversed(dataset.events["lic-005"]))
    store = InMemoryLicenseStore(dataset)

    timestamps = [event.timestamp for event in store.events_for_license("lic-001")]

    assert timestamps == sorted(timestamps)


# Revocation


def test_revoke(revoke_handler: RevokeHandler, tmp_path) -> None:
    result = revoke_handler.revoke("lic-001")

    assert result.success
    assert result.message == "License revocation was successful"
    saved = json.loads((tmp_path / "revoked.json").read_text())
    assert list(saved) == ["lic-001"]


def test_revoke_twice(revoke_handler: RevokeHandler) -> None:
    revoke_handler.revoke("lic-001")
    result = revoke_handler.revoke("lic-001")
    assert result.success
    assert result.message == "License was already revoked"


def test_revoke_rejects_blank_id(revoke_handler: RevokeHandler) -> None:
    with pytest.raises(BadRequestError):
        revoke_handler.revoke("  ")


@pytest.mark.parametrize("license_id", ["lic-004", "lic-007", "lic-008"])
def test_revoke_closed_licenses(revoke_handler: RevokeHandler, license_id: str) -> None:
    with pytest.raises(InvalidStateTransitionError) as exc_info:
        revoke_handler.revoke(license_id)
    assert exc_info.value.status_code == 409


def test_concurrent_revocations_settle_once(revoke_handler: RevokeHandler) -> None:
    results = []
    barrier = threading.Barrier(8)

    def worker() -> None:
        barrier.wait()
        results.append(revoke_handler.revoke("lic-003"))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    messages = [result.message for result in results]
    assert messages.count("License revocation was successful") == 1
    assert messages.count("License was already revoked") == 7
    assert revoke_handler.store.get_license("lic-003").status == LicenseStatus.REVOKED  # type: ignore[union-attr]


def test_reapply_persisted_revocations(tmp_path) -> None:
    revoked_file = tmp_path / "revoked.json"
    revoked_file.write_text(json.dumps({"lic-001": 1, "lic-004": 2, "lic-404": 3}))
    store = InMemoryLicenseStore(sample_dataset())
    handler = RevokeHandler(store, DataPersistence(), revoked_licenses_file_path=revoked_file)

    assert handler.reapply() == 1
    assert store.get_license("lic-001").status == LicenseStatus.REVOKED  # type: ignore[union-attr]
    assert store.get_license("lic-004").status == LicenseStatus.EXPIRED  # type: ignore[union-attr]


class FlakyPersistence(DataPersistence):
    """Fails the first save, then behaves normally."""

    def __init__(self) -> None:
        self.failures = 1

    def save_revoked_licenses(self, file_path, revoked_licenses) -> None:
        if self.failures:
            self.failures -= 1
            raise OSError("disk full")
        DataPersistence.save_revoked_licenses(file_path, revoked_licenses)


def test_failed_save_is_retried_on_next_revoke(tmp_path) -> None:
    revoked_file = tmp_path / "revoked.json"
    store = InMemoryLicenseStore(sample_dataset())
    handler = RevokeHandler(store, FlakyPersistence(), revoked_licenses_file_path=revoked_file)

    first = handler.revoke("lic-001")
    assert first.message == "License revocation was successful"
    assert not revoked_file.exists()
    assert "lic-001" not in handler.revoked_licenses

    second = handler.revoke("lic-001")
    assert second.message == "License was already revoked"
    assert list(json.loads(revoked_file.read_text())) == ["lic-001"]

    restarted = InMemoryLicenseStore(sample_dataset())
    RevokeHandler(restarted, DataPersistence(), revoked_licenses_file_path=revoked_file).reapply()
    assert restarted.get_license("lic-001").status == LicenseStatus.REVOKED  # type: ignore[union-attr]


# Queries


def test_query_handler_pagination(store: InMemoryLicenseStore) -> None:
    page = QueryHandler(store).list_publications(PaginationRequest(page=2, per_page=10))
    assert page.total == 25
    assert page.items[0].uuid == "pub-011"
    assert len(page.items) == 10


def test_query_handler_requires_ids(store: InMemoryLicenseStore) -> None:
    handler = QueryHandler(store)
    with pytest.raises(BadRequestError):
        handler.list_user_licenses("")
    with pytest.raises(NotFoundError):
        handler.delete_publication("pub-404")


# Persistence


def test_load_dataset_file(tmp_path) -> None:
    path = tmp_path / "dataset.json"
    path.write_text(json.dumps(sample_dataset().to_wire()))

    loaded = DataPersistence.load_dataset(path)
    assert loaded.to_wire() == sample_dataset().to_wire()


def test_load_revoked_licenses_tolerates_bad_files(tmp_path) -> None:
    assert DataPersistence.load_revoked_licenses(tmp_path / "missing.json") == {}
    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    assert DataPersistence.load_revoked_licenses(broken) == {}


@pytest.mark.parametrize("content", ["null", '["lic-001"]', '{"lic-001": "yesterday"}', "42"])
def test_load_revoked_licenses_rejects_wrong_shape(tmp_path, content: str) -> None:
    path = tmp_path / "revoked.json"
    path.write_text(content)
    assert DataPersistence.load_revoked_licenses(path) == {}


def test_load_revoked_licenses_from_directory(tmp_path) -> None:
    assert DataPersistence.load_revoked_licenses(tmp_path) == {}


def test_load_revoked_licenses(tmp_path) -> None:
    path = tmp_path / "revoked.json"
    DataPersistence.save_revoked_licenses(path, {"lic-001": 1700000000})
    assert DataPersistence.load_revoked_licenses(path) == {"lic-001": 1700000000}


# Aggregation


def test_build_snapshot() -> None:
    now = datetime(2025, 9, 30, 12, 0, tzinfo=timezone.utc)
    licenses = [
        make_license("a", created_at=datetime(2025, 9, 30, 8, 0, tzinfo=timezone.utc)),
        make_license("b", created_at=datetime(2025, 9, 26, tzinfo=timezone.utc), user_id="user-2"),
        make_license("c", created_at=datetime(2025, 7, 15), status="revoked"),
        make_license("d", created_at=datetime(2023, 1, 1, tzinfo=timezone.utc)),
        make_license("e"),
    ]
    publications = [
        make_publication("p1"),
        make_publication("p2", "application/pdf"),
        make_publication("p3"),
        make_publication("p4", "application/x-unknown"),
    ]

    snapshot = build_snapshot(licenses, publications, overshared_count=1, now=now)

    assert snapshot.total_licenses == 5
    assert snapshot.total_users == 2
    assert snapshot.total_publications == 4
    assert snapshot.licenses_last_day == 1
    assert snapshot.licenses_last_week == 2
    assert snapshot.licenses_last_month == 2
    assert snapshot.licenses_last_12_months == 3
    assert str(snapshot.oldest_license_date) == "2023-01-01"
    assert str(snapshot.latest_license_date) == "2025-09-30"
    assert snapshot.overshared_licenses_count == 1

    assert [(t.name, t.count) for t in snapshot.publication_types] == [
        ("EPUB", 2),
        ("PDF", 1),
        ("application/x-unknown", 1),
    ]
    statuses = {s.name: s.count for s in snapshot.license_statuses}
    assert statuses["Active"] == 4
    assert statuses["Revoked"] == 1
    assert statuses["Canceled"] == 0

    months = [point.month for point in snapshot.chart_data]
    assert months[0] == "Oct"
    assert months[-1] == "Sep"
    assert snapshot.chart_data[-1].licenses == 2
    assert snapshot.chart_data[-3].licenses == 1
