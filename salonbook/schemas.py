# salonbook/schemas.py

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError
from enum import Enum
from datetime import datetime, timezone
from typing import Annotated, Dict, List, Literal, Optional, Union

from salonbook.data import PAYMENT_METHODS
from salonbook.errors import ValidationError


class UserRole(str, Enum):
    customer = "customer"
    salon_owner = "salon_owner"
    admin = "admin"


class AppointmentStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"


class SalonStatus(str, Enum):
    active = "active"
    inactive = "inactive"
    suspended = "suspended"


def as_utc(value: datetime) -> datetime:
    # naive values are read as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def not_null(value):
    """Partial updates may leave a field out but may not null a required column."""
    if value is None:
        raise ValueError("may be omitted but not set to null")
    return value


# --- Caller -----------------------------------------------------------------
# Who is making a request, tagged by role. Authorization rules switch on the tag.

class CustomerCaller(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["customer"] = "customer"
    id: int


class SalonOwnerCaller(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["salon_owner"] = "salon_owner"
    id: int


class AdminCaller(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["admin"] = "admin"
    id: int


Caller = Annotated[
    Union[CustomerCaller, SalonOwnerCaller, AdminCaller],
    Field(discriminator="role"),
]

_caller_adapter = TypeAdapter(Caller)


def make_caller(user_id: int, role: str) -> Caller:
    return _caller_adapter.validate_python({"id": user_id, "role": role})


# --- Users / auth -----------------------------------------------------------

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserCreate(BaseModel):
    username: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=8, max_length=72)
    confirm_password: str
    full_name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    email: Optional[str] = None
    # admins are provisioned out of band
    role: Literal["customer", "salon_owner"] = "customer"
    is_privacy_focused: bool = False
    prefers_female_staff: bool = False
    preferred_language: str = "ar"

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class UserUpdate(BaseModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    image_url: Optional[str] = None
    is_privacy_focused: Optional[bool] = None
    prefers_female_staff: Optional[bool] = None
    preferred_language: Optional[str] = None

    @field_validator(
        "full_name", "phone", "is_privacy_focused", "prefers_female_staff", "preferred_language"
    )
    @classmethod
    def required_columns(cls, value):
        return not_null(value)


class UserPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    full_name: str
    phone: str
    email: Optional[str] = None
    role: UserRole
    image_url: Optional[str] = None
    is_privacy_focused: bool
    prefers_female_staff: bool
    preferred_language: str
    loyalty_points: int
    created_at: datetime


# --- Salons -----------------------------------------------------------------

class SalonCreate(BaseModel):
    # owner_id, rating and review_count are never taken from the client
    name: str = Field(min_length=1)
    description: Optional[str] = None
    address: str = Field(min_length=1)
    city: str = Field(min_length=1)
    district: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    image_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    is_female_only: bool = False
    has_private_rooms: bool = False
    opening_hours: Optional[Dict[str, str]] = None


class SalonUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    address: Optional[str] = Field(default=None, min_length=1)
    city: Optional[str] = Field(default=None, min_length=1)
    district: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = Field(default=None, min_length=1)
    image_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    is_female_only: Optional[bool] = None
    has_private_rooms: Optional[bool] = None
    opening_hours: Optional[Dict[str, str]] = None
    status: Optional[SalonStatus] = None

    @field_validator(
        "name", "address", "city", "district", "phone",
        "is_female_only", "has_private_rooms", "status",
    )
    @classmethod
    def required_columns(cls, value):
        return not_null(value)


class SalonPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    name: str
    description: Optional[str] = None
    address: str
    city: str
    district: str
    phone: str
    image_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    is_female_only: bool
    has_private_rooms: bool
    rating: int
    review_count: int
    opening_hours: Optional[Dict[str, str]] = None
    status: str
    created_at: datetime


# --- Catalog ----------------------------------------------------------------

class ServiceCategoryCreate(BaseModel):
    name: str
    name_en: Optional[str] = None
    icon: Optional[str] = None


class ServiceCategoryPublic(ServiceCategoryCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int


class ServiceCreate(BaseModel):
    salon_id: int
    category_id: int
    name: str = Field(min_length=1)
    description: Optional[str] = None
    price: int = Field(gt=0)
    duration_minutes: int = Field(gt=0)
    image_url: Optional[str] = None
    is_active: bool = True
    is_featured: bool = False
    female_staff_only: bool = False


class ServiceUpdate(BaseModel):
    # salon_id is fixed once the service exists
    category_id: Optional[int] = None
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    price: Optional[int] = Field(default=None, gt=0)
    duration_minutes: Optional[int] = Field(default=None, gt=0)
    image_url: Optional[str] = None
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None
    female_staff_only: Optional[bool] = None

    @field_validator(
        "category_id", "name", "price", "duration_minutes",
        "is_active", "is_featured", "female_staff_only",
    )
    @classmethod
    def required_columns(cls, value):
        return not_null(value)


class ServicePublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    salon_id: int
    category_id: int
    name: str
    description: Optional[str] = None
    price: int
    duration_minutes: int
    image_url: Optional[str] = None
    is_active: bool
    is_featured: bool
    female_staff_only: bool
    created_at: datetime


class SpecialOfferCreate(BaseModel):
    salon_id: int
    title: str = Field(min_length=1)
    description: Optional[str] = None
    original_price: int = Field(ge=0)
    discounted_price: int = Field(ge=0)
    image_url: Optional[str] = None
    start_date: datetime
    end_date: datetime
    is_active: bool = True

    @field_validator("start_date", "end_date")
    @classmethod
    def utc_dates(cls, value):
        return as_utc(value)


class SpecialOfferPublic(SpecialOfferCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime


# --- Appointments -----------------------------------------------------------

class AppointmentCreate(BaseModel):
    """Booking draft. user_id, status and payment_status are set server side."""

    salon_id: int
    appointment_date: datetime
    total_price: int = Field(ge=0)
    total_duration: int = Field(ge=0)
    request_female_staff: bool = False
    request_private_room: bool = False
    payment_method: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("appointment_date")
    @classmethod
    def utc_date(cls, value):
        return as_utc(value)

    @field_validator("payment_method")
    @classmethod
    def known_payment_method(cls, value):
        # recorded only, nothing is charged
        if value is not None and value not in PAYMENT_METHODS:
            raise ValueError(f"payment_method must be one of: {', '.join(PAYMENT_METHODS)}")
        return value


class AppointmentServiceLine(BaseModel):
    service_id: int
    price: int = Field(ge=0)
    duration_minutes: int = Field(ge=0)


class AppointmentBooking(BaseModel):
    appointment_data: AppointmentCreate
    services: List[AppointmentServiceLine] = Field(min_length=1)


class AppointmentStatusUpdate(BaseModel):
    # checked against AppointmentStatus by the status engine, not here
    status: str


class AppointmentPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    salon_id: int
    appointment_date: datetime
    status: AppointmentStatus
    total_price: int
    total_duration: int
    request_female_staff: bool
    request_private_room: bool
    payment_method: Optional[str] = None
    payment_status: str
    notes: Optional[str] = None
    created_at: datetime


class AppointmentServicePublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    appointment_id: int
    service_id: int
    price: int
    duration_minutes: int


class AppointmentDetail(AppointmentPublic):
    services: List[AppointmentServicePublic]


# --- Reviews ----------------------------------------------------------------

class ReviewCreate(BaseModel):
    salon_id: int
    appointment_id: Optional[int] = None
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = None
    is_private: bool = False


class ReviewPublic(ReviewCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    created_at: datetime


# --- Payload validation -----------------------------------------------------

def parse_payload(schema, data, prefix: str = ""):
    """Validate ``data`` against ``schema`` unless it already is one.

    Pydantic errors become a ``ValidationError`` naming each offending field.
    """
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except PydanticValidationError as exc:
        errors = []
        for err in exc.errors():
            path = ".".join(str(p) for p in err["loc"])
            field = f"{prefix}.{path}" if prefix and path else (prefix or path)
            errors.append({"field": field, "message": err["msg"]})
        raise ValidationError(f"Invalid {prefix or schema.__name__} data", errors) from exc
