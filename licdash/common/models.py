"""
Pydantic models for request/response validation.

The wire format is camelCase; every model also accepts its snake_case field
names on input.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class LicenseType(str, Enum):
    LOAN = "loan"
    BUY = "buy"


class LicenseStatus(str, Enum):
    READY = "ready"
    ACTIVE = "active"
    EXPIRED = "expired"
    REVOKED = "revoked"
    CANCELED = "canceled"
    RETURNED = "returned"


class EventType(str, Enum):
    REGISTER = "register"
    RETURN = "return"
    RENEW = "renew"


# Authentication


class Credentials(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class Principal(WireModel):
    username: str


class UserProfile(WireModel):
    id: str
    email: str
    name: str


class SessionToken(WireModel):
    token: str
    principal: Principal
    issued_at: int
    expires_at: int
    signature: str


class LoginResponse(WireModel):
    token: str
    user: UserProfile


class SessionInfo(WireModel):
    user: UserProfile
    expires_at: int | None = None


class ErrorResponse(BaseModel):
    error: str
    code: str | None = None


# Pagination


class PaginationRequest(WireModel):
    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=20, ge=1)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page

    @property
    def limit(self) -> int:
        return self.per_page


# Licenses


class LicenseRecord(WireModel):
    id: str
    publication_id: str
    alt_id: str
    title: str
    user_id: str
    user_email: str | None = None
    type: LicenseType
    status: LicenseStatus
    device_count: int = Field(ge=0)
    provider: str | None = None
    start: datetime | None = None
    end: datetime | None = None
    created_at: datetime | None = None


class OversharedLicense(LicenseRecord):
    device_limit: int

    @property
    def excess_devices(self) -> int:
        return max(self.device_count - self.device_limit, 0)


class UsageEvent(WireModel):
    timestamp: datetime
    type: EventType
    device_name: str
    device_id: str


class RevocationResult(WireModel):
    success: bool
    message: str
    license_id: str


# Publications


class Publication(WireModel):
    uuid: str
    created_at: datetime
    provider: str | None = None
    alt_id: str | None = None
    content_type: str
    title: str
    description: str | None = None
    authors: str | None = None
    publishers: str | None = None
    cover_url: str | None = None
    href: str
    size: int = Field(ge=0)
    checksum: str


class PublicationPage(WireModel):
    items: list[Publication]
    page: int
    per_page: int
    total: int


class DeletionResult(WireModel):
    success: bool
    message: str
    uuid: str


# Dashboard


class NameCount(WireModel):
    name: str
    count: int


class ChartDataPoint(WireModel):
    month: str
    licenses: int


class DashboardSnapshot(WireModel):
    total_publications: int
    total_users: int
    total_licenses: int
    licenses_last_12_months: int
    licenses_last_month: int
    licenses_last_week: int
    licenses_last_day: int
    oldest_license_date: date | None = None
    latest_license_date: date | None = None
    overshared_licenses_count: int
    publication_types: list[NameCount] = Field(default_factory=list)
    license_statuses: list[NameCount] = Field(default_factory=list)
    chart_data: list[ChartDataPoint] = Field(default_factory=list)


class Dataset(WireModel):
    """Contents of a store seed file."""

    licenses: list[LicenseRecord] = Field(default_factory=list)
    events: dict[str, list[UsageEvent]] = Field(default_factory=dict)
    publications: list[Publication] = Field(default_factory=list)


class ClientConfig(BaseModel):
    server_url: str | None = None
    username: str | None = None
    password: str | None = None
    token: str | None = None
    timeout: float | None = None
    relogin_on_expiry: bool = True
