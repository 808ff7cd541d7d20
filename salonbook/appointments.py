# salonbook/appointments.py

"""
Booking and status changes.

``create_appointment`` writes an appointment and its service lines in one
transaction. ``set_status`` applies a status change after the role checks in
``permissions.can_set_status``.

Two rules are loose by default and can be tightened through settings:

- totals: the client's ``total_price``/``total_duration`` are stored as sent
  (``trust_client_totals``); ``require_matching_totals`` checks them
  against the service lines instead.
- transitions: any of the four statuses may be set by an authorized caller
  (``allow_any_transition``); ``check_transition_table`` enforces
  ``TRANSITIONS``.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence

from salonbook import permissions
from salonbook.config import settings
from salonbook.errors import InvalidTransitionError, NotFoundError, ValidationError
from salonbook.models import Appointment, AppointmentService, Salon, Service
from salonbook.schemas import (
    AppointmentCreate,
    AppointmentDetail,
    AppointmentServiceLine,
    AppointmentStatus,
    Caller,
    parse_payload,
)
from salonbook.store import Store

logger = logging.getLogger(__name__)

STATUSES = tuple(s.value for s in AppointmentStatus)

TotalsCheck = Callable[[AppointmentCreate, List[AppointmentServiceLine]], None]
TransitionCheck = Callable[[Appointment, str, str], None]


# --- totals -----------------------------------------------------------------

def trust_client_totals(draft: AppointmentCreate, lines: List[AppointmentServiceLine]) -> None:
    return None


def require_matching_totals(draft: AppointmentCreate, lines: List[AppointmentServiceLine]) -> None:
    price = sum(line.price for line in lines)
    duration = sum(line.duration_minutes for line in lines)
    errors = []
    if draft.total_price != price:
        errors.append({
            "field": "appointment_data.total_price",
            "message": f"total_price {draft.total_price} does not match services total {price}",
        })
    if draft.total_duration != duration:
        errors.append({
            "field": "appointment_data.total_duration",
            "message": f"total_duration {draft.total_duration} does not match services total {duration}",
        })
    if errors:
        raise ValidationError("Appointment totals do not match the selected services", errors)


def default_totals_check() -> TotalsCheck:
    return require_matching_totals if settings.strict_totals else trust_client_totals


# --- transitions ------------------------------------------------------------

# from_status -> role -> allowed targets
TRANSITIONS: Dict[str, Dict[str, List[str]]] = {
    "pending": {
        "customer": ["cancelled"],
        "salon_owner": ["confirmed", "cancelled"],
        "admin": ["confirmed", "cancelled"],
    },
    "confirmed": {
        "customer": ["cancelled"],
        "salon_owner": ["completed", "cancelled"],
        "admin": ["completed", "cancelled"],
    },
    "completed": {},
    "cancelled": {},
}


def allow_any_transition(appointment: Appointment, role: str, status: str) -> None:
    return None


def check_transition_table(appointment: Appointment, role: str, status: str) -> None:
    allowed = TRANSITIONS.get(appointment.status, {}).get(role, [])
    if status not in allowed:
        raise InvalidTransitionError(
            f"Cannot move appointment from {appointment.status} to {status}",
            [{"field": "status", "message": f"allowed: {', '.join(allowed) or 'none'}"}],
        )


def default_transition_check() -> TransitionCheck:
    return check_transition_table if settings.strict_transitions else allow_any_transition


# --- operations -------------------------------------------------------------

def create_appointment(
    store: Store,
    draft,
    service_lines: Sequence,
    caller: Optional[Caller],
    totals_check: Optional[TotalsCheck] = None,
) -> Appointment:
    permissions.enforce(permissions.can_create_appointment(caller))

    # 1) Shape
    draft = parse_payload(AppointmentCreate, draft, "appointment_data")
    if not service_lines:
        raise ValidationError(
            "At least one service is required",
            [{"field": "services", "message": "must contain at least one service"}],
        )
    lines = [
        parse_payload(AppointmentServiceLine, line, f"services.{i}")
        for i, line in enumerate(service_lines)
    ]

    # 2) References
    if store.get(Salon, draft.salon_id) is None:
        raise NotFoundError("Salon not found")
    for i, line in enumerate(lines):
        service = store.get(Service, line.service_id)
        if service is None:
            raise NotFoundError(f"Service {line.service_id} not found")
        if service.salon_id != draft.salon_id:
            raise ValidationError(
                "Service does not belong to the booked salon",
                [{"field": f"services.{i}.service_id", "message": "service belongs to another salon"}],
            )

    # 3) Totals
    (totals_check or default_totals_check())(draft, lines)

    # 4) Appointment and lines, all or nothing
    with store.transaction():
        appointment = store.insert(Appointment, {
            **draft.model_dump(),
            "user_id": caller.id,
            "status": AppointmentStatus.pending.value,
            "payment_status": "pending",
        })
        for line in lines:
            store.insert(AppointmentService, {**line.model_dump(), "appointment_id": appointment.id})

    logger.info(
        "Appointment %s booked by user %s at salon %s with %s services",
        appointment.id, caller.id, appointment.salon_id, len(lines),
    )
    return appointment


def get_appointment(store: Store, appointment_id: int, caller: Optional[Caller]) -> AppointmentDetail:
    if caller is None:
        permissions.enforce(permissions.NOT_AUTHENTICATED)

    appointment = store.get(Appointment, appointment_id)
    if appointment is None:
        raise NotFoundError("Appointment not found")

    salon = store.get(Salon, appointment.salon_id)
    permissions.enforce(permissions.can_view_appointment(caller, appointment, salon))

    lines = store.list(AppointmentService, appointment_id=appointment.id)
    return AppointmentDetail.model_validate({
        **appointment.model_dump(),
        "services": [line.model_dump() for line in lines],
    })


def list_appointments_for_caller(store: Store, caller: Optional[Caller]) -> List[Appointment]:
    permissions.enforce(permissions.can_list_appointments(caller))

    if caller.role == "customer":
        return store.list(Appointment, user_id=caller.id)

    appointments = []
    for salon in store.list(Salon, owner_id=caller.id):
        appointments.extend(store.list(Appointment, salon_id=salon.id))
    return appointments


def set_status(
    store: Store,
    appointment_id: int,
    status: str,
    caller: Optional[Caller],
    transition_check: Optional[TransitionCheck] = None,
) -> Appointment:
    if caller is None:
        permissions.enforce(permissions.NOT_AUTHENTICATED)

    # 1) Appointment must exist
    appointment = store.get(Appointment, appointment_id)
    if appointment is None:
        raise NotFoundError("Appointment not found")

    # 2) Only the four known statuses
    if isinstance(status, AppointmentStatus):
        status = status.value
    if status not in STATUSES:
        raise ValidationError(
            "Invalid status",
            [{"field": "status", "message": f"must be one of: {', '.join(STATUSES)}"}],
        )

    # 3) Who may set it
    salon = store.get(Salon, appointment.salon_id)
    permissions.enforce(permissions.can_set_status(caller, appointment, salon, status))
    (transition_check or default_transition_check())(appointment, caller.role, status)

    # 4) Apply
    previous = appointment.status
    updated = store.update(Appointment, appointment_id, {"status": status})
    logger.info(
        "Appointment %s status %s -> %s by user %s",
        appointment_id, previous, status, caller.id,
    )
    return updated
