# salonbook/reviews.py

import logging
from typing import List, Optional

from salonbook import permissions
from salonbook.errors import NotFoundError, ValidationError
from salonbook.models import Appointment, Review, Salon
from salonbook.ratings import recompute_salon_rating
from salonbook.schemas import Caller, ReviewCreate, parse_payload
from salonbook.store import Store

logger = logging.getLogger(__name__)


def list_reviews(store: Store, salon_id: int) -> List[Review]:
    return store.list(Review, salon_id=salon_id)


def create_review(store: Store, data, caller: Optional[Caller]) -> Review:
    """Store a review and refresh the salon's rating in the same transaction."""
    permissions.enforce(permissions.can_create_review(caller))
    payload = parse_payload(ReviewCreate, data, "review")

    if store.get(Salon, payload.salon_id) is None:
        raise NotFoundError("Salon not found")

    if payload.appointment_id is not None:
        appointment = store.get(Appointment, payload.appointment_id)
        if appointment is None:
            raise NotFoundError("Appointment not found")
        permissions.enforce(permissions.can_create_review(caller, appointment))
        if appointment.salon_id != payload.salon_id:
            raise ValidationError(
                "Appointment was booked at another salon",
                [{"field": "review.appointment_id", "message": "appointment belongs to another salon"}],
            )

    with store.transaction():
        review = store.insert(Review, {**payload.model_dump(), "user_id": caller.id})
        recompute_salon_rating(store, payload.salon_id)

    logger.info("Review %s added to salon %s by user %s", review.id, payload.salon_id, caller.id)
    return review
