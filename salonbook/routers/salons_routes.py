# salonbook/routers/salons_routes.py

from typing import List, Optional

from fastapi import APIRouter, Depends

from salonbook import catalog, reviews
from salonbook.auth import get_optional_caller
from salonbook.deps import get_store
from salonbook.schemas import (
    Caller,
    ReviewPublic,
    SalonCreate,
    SalonPublic,
    SalonUpdate,
    ServicePublic,
    SpecialOfferPublic,
)
from salonbook.store import Store

router = APIRouter(
    prefix="/salons",
    tags=["salons"],
)


@router.get("", response_model=List[SalonPublic])
def list_salons(store: Store = Depends(get_store)):
    return catalog.list_salons(store)


@router.get("/{salon_id}", response_model=SalonPublic)
def get_salon(salon_id: int, store: Store = Depends(get_store)):
    return catalog.get_salon(store, salon_id)


@router.post("", response_model=SalonPublic, status_code=201)
def create_salon(
    salon: SalonCreate,
    store: Store = Depends(get_store),
    caller: Optional[Caller] = Depends(get_optional_caller),
):
    return catalog.create_salon(store, salon, caller)


@router.patch("/{salon_id}", response_model=SalonPublic)
def update_salon(
    salon_id: int,
    changes: SalonUpdate,
    store: Store = Depends(get_store),
    caller: Optional[Caller] = Depends(get_optional_caller),
):
    return catalog.update_salon(store, salon_id, changes, caller)


@router.get("/{salon_id}/services", response_model=List[ServicePublic])
def list_salon_services(salon_id: int, store: Store = Depends(get_store)):
    return catalog.list_services(store, salon_id)


@router.get("/{salon_id}/special-offers", response_model=List[SpecialOfferPublic])
def list_salon_offers(salon_id: int, store: Store = Depends(get_store)):
    return catalog.list_special_offers_for_salon(store, salon_id)


@router.get("/{salon_id}/reviews", response_model=List[ReviewPublic])
def list_salon_reviews(salon_id: int, store: Store = Depends(get_store)):
    return reviews.list_reviews(store, salon_id)
