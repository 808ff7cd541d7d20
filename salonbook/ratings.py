# salonbook/ratings.py

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from salonbook.errors import NotFoundError
from salonbook.models import Review, Salon
from salonbook.store import Store

logger = logging.getLogger(__name__)


def average_rating(ratings: Iterable[int]) -> int:
    """Mean of the ratings rounded half up (4.5 -> 5). 0 when there are none."""
    ratings = list(ratings)
    if not ratings:
        return 0
    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    return int(mean.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def recompute_salon_rating(store: Store, salon_id: int) -> Salon:
    """Rewrite ``rating`` and ``review_count`` from the salon's current reviews.

    Run it inside the same ``store.transaction()`` as the review insert.
    """
    ratings = [r.rating for r in store.list(Review, salon_id=salon_id)]
    salon = store.update(
        Salon,
        salon_id,
        {"rating": average_rating(ratings), "review_count": len(ratings)},
    )
    if salon is None:
        raise NotFoundError("Salon not found")

    logger.info(
        "Salon %s rating recomputed: %s from %s reviews",
        salon_id, salon.rating, salon.review_count,
    )
    return salon
