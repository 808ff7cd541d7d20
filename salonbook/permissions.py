# salonbook/permissions.py

"""
Authorization rules.

Each ``can_*`` function is a pure check over the caller's role tag and the
ownership fields of the target resources. It returns ``Allow`` or
``Deny(reason)`` and never touches the store; callers look the resources up
first and hand them in. ``enforce`` turns a ``Deny`` into the matching error.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from salonbook.errors import AuthorizationError, UnauthenticatedError
from salonbook.models import Appointment, Salon
from salonbook.schemas import AppointmentStatus, Caller

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Allow:
    def __bool__(self):
        return True


@dataclass(frozen=True)
class Deny:
    reason: str
    unauthenticated: bool = False

    def __bool__(self):
        return False


Decision = Union[Allow, Deny]

ALLOW = Allow()
NOT_AUTHENTICATED = Deny("Authentication required", unauthenticated=True)


def enforce(decision: Decision) -> None:
    if isinstance(decision, Allow):
        return
    if decision.unauthenticated:
        raise UnauthenticatedError(decision.reason)
    logger.warning("Permission denied: %s", decision.reason)
    raise AuthorizationError(decision.reason)


def _owns(caller: Caller, salon: Optional[Salon]) -> bool:
    return salon is not None and salon.owner_id == caller.id


def can_create_salon(caller: Optional[Caller]) -> Decision:
    if caller is None:
        return NOT_AUTHENTICATED
    if caller.role != "salon_owner":
        return Deny("Only salon owners can create salons")
    return ALLOW


def can_update_salon(caller: Optional[Caller], salon: Salon) -> Decision:
    if caller is None:
        return NOT_AUTHENTICATED
    if _owns(caller, salon) or caller.role == "admin":
        return ALLOW
    return Deny("You don't have permission to update this salon")


def can_manage_service(caller: Optional[Caller], salon: Optional[Salon]) -> Decision:
    """Create, update and delete all require owning the service's salon."""
    if caller is None:
        return NOT_AUTHENTICATED
    if not _owns(caller, salon):
        return Deny("You don't have permission to manage services of this salon")
    return ALLOW


def can_create_offer(caller: Optional[Caller], salon: Optional[Salon]) -> Decision:
    if caller is None:
        return NOT_AUTHENTICATED
    if not _owns(caller, salon):
        return Deny("You don't have permission to add offers to this salon")
    return ALLOW


def can_create_appointment(caller: Optional[Caller]) -> Decision:
    if caller is None:
        return NOT_AUTHENTICATED
    if caller.role != "customer":
        return Deny("Only customers can book appointments")
    return ALLOW


def can_list_appointments(caller: Optional[Caller]) -> Decision:
    if caller is None:
        return NOT_AUTHENTICATED
    if caller.role not in ("customer", "salon_owner"):
        return Deny("Unauthorized user type")
    return ALLOW


def can_view_appointment(
    caller: Optional[Caller], appointment: Appointment, salon: Optional[Salon]
) -> Decision:
    if caller is None:
        return NOT_AUTHENTICATED
    if appointment.user_id == caller.id or _owns(caller, salon) or caller.role == "admin":
        return ALLOW
    return Deny("You don't have permission to view this appointment")


def can_set_status(
    caller: Optional[Caller],
    appointment: Appointment,
    salon: Optional[Salon],
    status: str,
) -> Decision:
    if caller is None:
        return NOT_AUTHENTICATED
    if caller.role == "admin" or _owns(caller, salon):
        return ALLOW
    if appointment.user_id == caller.id:
        if status == AppointmentStatus.cancelled.value:
            return ALLOW
        return Deny("Customers can only cancel their appointments")
    return Deny("You don't have permission to update this appointment")


def can_create_review(caller: Optional[Caller], appointment: Optional[Appointment] = None) -> Decision:
    if caller is None:
        return NOT_AUTHENTICATED
    if caller.role != "customer":
        return Deny("Only customers can create reviews")
    if appointment is not None and appointment.user_id != caller.id:
        return Deny("You don't have permission to review this appointment")
    return ALLOW
