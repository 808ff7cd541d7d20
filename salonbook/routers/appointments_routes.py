# salonbook/routers/appointments_routes.py

from typing import List, Optional

from fastapi import APIRouter, Depends

from salonbook import appointments
from salonbook.auth import get_optional_caller
from salonbook.deps import get_store
from salonbook.schemas import (
    AppointmentBooking,
    AppointmentDetail,
    AppointmentPublic,
    AppointmentStatusUpdate,
    Caller,
)
from salonbook.store import Store

router = APIRouter(
    prefix="/appointments",
    tags=["appointments"],
)


@router.get("", response_model=List[AppointmentPublic])
def list_appointments(
    store: Store = Depends(get_store),
    caller: Optional[Caller] = Depends(get_optional_caller),
):
    # customers see their own, owners see every salon they own
    return appointments.list_appointments_for_caller(store, caller)


@router.post("", response_model=AppointmentPublic, status_code=201)
def create_appointment(
    booking: AppointmentBooking,
    store: Store = Depends(get_store),
    caller: Optional[Caller] = Depends(get_optional_caller),
):
    return appointments.create_appointment(
        store, booking.appointment_data, booking.services, caller
    )


@router.get("/{appointment_id}", response_model=AppointmentDetail)
def get_appointment(
    appointment_id: int,
    store: Store = Depends(get_store),
    caller: Optional[Caller] = Depends(get_optional_caller),
):
    return appointments.get_appointment(store, appointment_id, caller)


@router.patch("/{appointment_id}/status", response_model=AppointmentPublic)
def update_appointment_status(
    appointment_id: int,
    body: AppointmentStatusUpdate,
    store: Store = Depends(get_store),
    caller: Optional[Caller] = Depends(get_optional_caller),
):
    return appointments.set_status(store, appointment_id, body.status, caller)
