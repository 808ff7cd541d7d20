# salonbook/routers/reviews_routes.py

from typing import Optional

from fastapi import APIRouter, Depends

from salonbook import reviews
from salonbook.auth import get_optional_caller
from salonbook.deps import get_store
from salonbook.schemas import Caller, ReviewCreate, ReviewPublic
from salonbook.store import Store

router = APIRouter(
    prefix="/reviews",
    tags=["reviews"],
)


@router.post("", response_model=ReviewPublic, status_code=201)
def create_review(
    review: ReviewCreate,
    store: Store = Depends(get_store),
    caller: Optional[Caller] = Depends(get_optional_caller),
):
    # also refreshes the salon's rating and review_count
    return reviews.create_review(store, review, caller)
