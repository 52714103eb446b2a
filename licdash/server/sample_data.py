"""
Built-in sample dataset used when no data file is configured.
"""

from __future__ import annotations

from datetime import datetime, timezone

from licdash.common.models import Dataset, LicenseRecord, Publication, UsageEvent


def _ts(value: str) -> datetime:
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)


_LICENSES = [
    {
        "id": "lic-001",
        "publication_id": "pub-123",
        "alt_id": "alt-123",
        "title": "The Complete Guide to Modern Web Development with React and TypeScript",
        "user_id": "user-001",
        "user_email": "john.doe@example.com",
        "type": "loan",
        "status": "active",
        "device_count": 5,
        "created_at": "2025-03-14T09:12:00",
    },
    {
        "id": "lic-002",
        "publication_id": "pub-456",
        "alt_id": "alt-456",
        "title": "Advanced JavaScript Patterns",
        "user_id": "user-002",
        "type": "buy",
        "status": "ready",
        "device_count": 4,
        "created_at": "2025-05-02T15:40:00",
    },
    {
        "id": "lic-003",
        "publication_id": "pub-789",
        "alt_id": "alt-789",
        "title": "Mastering Node.js: Build Scalable Applications",
        "user_id": "user-003",
        "user_email": "bob.wilson@example.com",
        "type": "loan",
        "status": "active",
        "device_count": 6,
        "created_at": "2025-06-21T11:05:00",
    },
    {
        "id": "lic-004",
        "publication_id": "pub-101",
        "alt_id": "alt-101",
        "title": "CSS Grid and Flexbox: A Complete Guide",
        "user_id": "user-004",
        "user_email": "alice.brown@example.com",
        "type": "buy",
        "status": "expired",
        "device_count": 3,
        "created_at": "2024-11-08T08:30:00",
    },
    {
        "id": "lic-005",
        "publication_id": "pub-212",
        "alt_id": "alt-212",
        "title": "Python for Data Science and Machine Learning",
        "user_id": "user-005",
        "user_email": "charlie.davis@example.com",
        "type": "loan",
        "status": "active",
        "device_count": 7,
        "created_at": "2025-08-30T17:45:00",
    },
    {
        "id": "license-001-user123",
        "publication_id": "pub-001",
        "alt_id": "alt-001",
        "title": "Introduction to Digital Publishing",
        "user_id": "user123",
        "user_email": "user123@example.com",
        "type": "loan",
        "status": "active",
        "device_count": 3,
        "provider": "EDRLab",
        "start": "2024-01-15T00:00:00",
        "end": "2024-12-31T23:59:59",
        "created_at": "2024-01-15T00:00:00",
    },
    {
        "id": "license-002-user123",
        "publication_id": "pub-002",
        "alt_id": "alt-002",
        "title": "Advanced eBook Technologies",
        "user_id": "user123",
        "user_email": "user123@example.com",
        "type": "loan",
        "status": "expired",
        "device_count": 2,
        "start": "2024-06-01T00:00:00",
        "end": "2024-11-30T23:59:59",
        "created_at": "2024-06-01T00:00:00",
    },
    {
        "id": "license-003-johndoe",
        "publication_id": "pub-003",
        "alt_id": "alt-003",
        "title": "Modern Library Management",
        "user_id": "john.doe",
        "user_email": "john.doe@example.org",
        "type": "buy",
        "status": "active",
        "device_count": 5,
        "provider": "LibrarySystem",
        "start": "2024-03-01T00:00:00",
        "end": "2025-03-01T00:00:00",
        "created_at": "2024-03-01T00:00:00",
    },
    {
        "id": "lic-006",
        "publication_id": "pub-123",
        "alt_id": "alt-123",
        "title": "The Complete Guide to Modern Web Development with React and TypeScript",
        "user_id": "user-006",
        "user_email": "dana.miller@example.com",
        "type": "loan",
        "status": "revoked",
        "device_count": 1,
        "created_at": "2025-02-11T10:00:00",
    },
    {
        "id": "lic-007",
        "publication_id": "pub-456",
        "alt_id": "alt-456",
        "title": "Advanced JavaScript Patterns",
        "user_id": "user-007",
        "type": "buy",
        "status": "canceled",
        "device_count": 0,
        "created_at": "2025-04-19T14:20:00",
    },
    {
        "id": "lic-008",
        "publication_id": "pub-789",
        "alt_id": "alt-789",
        "title": "Mastering Node.js: Build Scalable Applications",
        "user_id": "user-001",
        "user_email": "john.doe@example.com",
        "type": "loan",
        "status": "returned",
        "device_count": 1,
        "created_at": "2025-07-03T16:55:00",
    },
]

_EVENTS = {
    "license-001-user123": [
        ("2025-09-25T10:00:00", "register", "John's iPad", "device-001"),
        ("2025-09-27T18:30:00", "return", "John's iPad", "device-001"),
        ("2025-09-29T08:15:00", "register", "John's iPhone", "device-002"),
    ],
    "license-002-user123": [
        ("2025-09-22T12:00:00", "register", "MacBook Pro", "device-003"),
        ("2025-10-01T09:45:00", "renew", "MacBook Pro", "device-003"),
    ],
    "license-003-johndoe": [
        ("2025-09-12T09:00:00", "register", "Library Tablet 1", "lib-tablet-001"),
        ("2025-09-17T09:30:00", "register", "Library Tablet 2", "lib-tablet-002"),
        ("2025-09-22T16:00:00", "return", "Library Tablet 1", "lib-tablet-001"),
    ],
    "lic-005": [
        ("2025-08-30T18:00:00", "register", "Pixel 8", "device-101"),
        ("2025-08-31T07:10:00", "register", "Kobo Libra", "device-102"),
        ("2025-09-02T21:40:00", "register", "Work Laptop", "device-103"),
    ],
}

_PUBLICATION_KINDS = [
    ("application/epub+zip", "epub"),
    ("application/pdf", "pdf"),
    ("application/audiobook+lcp", "lcpa"),
    ("application/divina+zip", "lcpdi"),
]

_PUBLICATION_TITLES = [
    "Introduction to Digital Publishing",
    "Advanced eBook Technologies",
    "Modern Library Management",
    "The Complete Guide to Modern Web Development with React and TypeScript",
    "Advanced JavaScript Patterns",
    "Mastering Node.js: Build Scalable Applications",
    "CSS Grid and Flexbox: A Complete Guide",
    "Python for Data Science and Machine Learning",
    "Accessible EPUB 3",
    "Typography for the Screen",
    "A History of the Printed Book",
    "Metadata for Librarians",
    "Reading Systems Explained",
    "The Audiobook Producer's Handbook",
    "Comics Layout and Panels",
    "Digital Rights in Practice",
    "Open Standards for Publishing",
    "Designing Fixed Layout Books",
    "Libraries in the Cloud",
    "Lending Models for eBooks",
    "The Web Publication Primer",
    "Fonts, Scripts and Languages",
    "Graphic Novels Today",
    "Podcasts to Audiobooks",
    "Preserving Digital Collections",
]


def _publications() -> list[Publication]:
    publications = []
    for index, title in enumerate(_PUBLICATION_TITLES, start=1):
        content_type, extension = _PUBLICATION_KINDS[index % len(_PUBLICATION_KINDS)]
        uuid = f"pub-{index:03d}"
        publications.append(
            Publication(
                uuid=uuid,
                created_at=_ts(f"2024-{(index % 12) + 1:02d}-{(index % 27) + 1:02d}T12:00:00"),
                provider="EDRLab" if index % 3 else "LibrarySystem",
                alt_id=f"alt-{index:03d}",
                content_type=content_type,
                title=title,
                authors="Various Authors",
                publishers="Sample Press",
                href=f"https://storage.example.com/publications/{uuid}.{extension}",
                size=250_000 + index * 13_337,
                checksum=f"{index:064x}",
            )
        )
    return publications


def sample_dataset() -> Dataset:
    """Build the sample dataset shipped with the server."""
    licenses = []
    for item in _LICENSES:
        record = dict(item)
        for key in ("start", "end", "created_at"):
            if key in record:
                record[key] = _ts(record[key])
        licenses.append(LicenseRecord(**record))

    events = {
        license_id: [
            UsageEvent(
                timestamp=_ts(timestamp),
                type=event_type,
                device_name=device_name,
                device_id=device_id,
            )
            for timestamp, event_type, device_name, device_id in rows
        ]
        for license_id, rows in _EVENTS.items()
    }

    return Dataset(licenses=licenses, events=events, publications=_publications())
