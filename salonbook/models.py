# salonbook/models.py

from typing import Optional, Dict
from datetime import datetime, timezone

from sqlalchemy.types import JSON
from sqlmodel import SQLModel, Field, Column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(index=True, unique=True)
    password_hash: str
    full_name: str
    phone: str
    email: Optional[str] = None
    role: str = "customer"  # customer, salon_owner or admin
    image_url: Optional[str] = None
    is_privacy_focused: bool = False
    prefers_female_staff: bool = False
    preferred_language: str = "ar"
    loyalty_points: int = 0
    created_at: datetime = Field(default_factory=utcnow)


class Salon(SQLModel, table=True):
    __tablename__ = "salons"

    id: Optional[int] = Field(default=None, primary_key=True)
    owner_id: int = Field(foreign_key="users.id", index=True)
    name: str
    description: Optional[str] = None
    address: str
    city: str
    district: str
    phone: str
    image_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    is_female_only: bool = False
    has_private_rooms: bool = False
    # derived from the review set, see ratings.py
    rating: int = 0
    review_count: int = 0
    opening_hours: Optional[Dict[str, str]] = Field(default=None, sa_column=Column(JSON))
    status: str = "active"  # active, inactive or suspended
    created_at: datetime = Field(default_factory=utcnow)


class ServiceCategory(SQLModel, table=True):
    __tablename__ = "service_categories"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    name_en: Optional[str] = None
    icon: Optional[str] = None


class Service(SQLModel, table=True):
    __tablename__ = "services"

    id: Optional[int] = Field(default=None, primary_key=True)
    salon_id: int = Field(foreign_key="salons.id", index=True)
    category_id: int = Field(foreign_key="service_categories.id")
    name: str
    description: Optional[str] = None
    price: int  # whole riyal
    duration_minutes: int
    image_url: Optional[str] = None
    is_active: bool = True
    is_featured: bool = False
    female_staff_only: bool = False
    created_at: datetime = Field(default_factory=utcnow)


class SpecialOffer(SQLModel, table=True):
    __tablename__ = "special_offers"

    id: Optional[int] = Field(default=None, primary_key=True)
    salon_id: int = Field(foreign_key="salons.id", index=True)
    title: str
    description: Optional[str] = None
    original_price: int
    discounted_price: int
    image_url: Optional[str] = None
    start_date: datetime
    end_date: datetime
    is_active: bool = True
    created_at: datetime = Field(default_factory=utcnow)


class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    salon_id: int = Field(foreign_key="salons.id", index=True)
    appointment_date: datetime
    status: str = "pending"  # pending, confirmed, completed, cancelled
    total_price: int
    total_duration: int
    request_female_staff: bool = False
    request_private_room: bool = False
    payment_method: Optional[str] = None  # mada, credit_card, cash
    payment_status: str = "pending"
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)


class AppointmentService(SQLModel, table=True):
    __tablename__ = "appointment_services"

    id: Optional[int] = Field(default=None, primary_key=True)
    appointment_id: int = Field(foreign_key="appointments.id", index=True)
    service_id: int = Field(foreign_key="services.id")
    # snapshot at booking time, independent of later Service edits
    price: int
    duration_minutes: int


class Review(SQLModel, table=True):
    __tablename__ = "reviews"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id")
    salon_id: int = Field(foreign_key="salons.id", index=True)
    appointment_id: Optional[int] = Field(default=None, foreign_key="appointments.id")
    rating: int
    comment: Optional[str] = None
    is_private: bool = False
    created_at: datetime = Field(default_factory=utcnow)
