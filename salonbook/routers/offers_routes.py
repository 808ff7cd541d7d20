# salonbook/routers/offers_routes.py

from typing import List, Optional

from fastapi import APIRouter, Depends

from salonbook import catalog
from salonbook.auth import get_optional_caller
from salonbook.deps import get_store
from salonbook.schemas import Caller, SpecialOfferCreate, SpecialOfferPublic
from salonbook.store import Store

router = APIRouter(
    prefix="/special-offers",
    tags=["special-offers"],
)


@router.get("", response_model=List[SpecialOfferPublic])
def list_special_offers(store: Store = Depends(get_store)):
    return catalog.list_special_offers(store)


@router.post("", response_model=SpecialOfferPublic, status_code=201)
def create_special_offer(
    offer: SpecialOfferCreate,
    store: Store = Depends(get_store),
    caller: Optional[Caller] = Depends(get_optional_caller),
):
    return catalog.create_special_offer(store, offer, caller)
