# salonbook/catalog.py

"""Salons, service categories, services and special offers."""

import logging
from typing import List, Optional

from salonbook import permissions
from salonbook.data import DEFAULT_SERVICE_CATEGORIES
from salonbook.errors import NotFoundError, ValidationError
from salonbook.models import Salon, Service, ServiceCategory, SpecialOffer
from salonbook.schemas import (
    Caller,
    SalonCreate,
    SalonUpdate,
    ServiceCreate,
    ServiceUpdate,
    SpecialOfferCreate,
    parse_payload,
)
from salonbook.store import Store

logger = logging.getLogger(__name__)


# --- Salons -----------------------------------------------------------------

def list_salons(store: Store) -> List[Salon]:
    return store.list(Salon)


def get_salon(store: Store, salon_id: int) -> Salon:
    salon = store.get(Salon, salon_id)
    if salon is None:
        raise NotFoundError("Salon not found")
    return salon


def create_salon(store: Store, data, caller: Optional[Caller]) -> Salon:
    permissions.enforce(permissions.can_create_salon(caller))
    payload = parse_payload(SalonCreate, data, "salon")

    salon = store.insert(Salon, {**payload.model_dump(), "owner_id": caller.id})
    logger.info("Salon %s created by owner %s", salon.id, caller.id)
    return salon


def update_salon(store: Store, salon_id: int, data, caller: Optional[Caller]) -> Salon:
    if caller is None:
        permissions.enforce(permissions.NOT_AUTHENTICATED)
    salon = get_salon(store, salon_id)
    permissions.enforce(permissions.can_update_salon(caller, salon))

    # rating and review_count are not part of SalonUpdate, so they stay derived
    changes = parse_payload(SalonUpdate, data, "salon").model_dump(exclude_unset=True)
    return store.update(Salon, salon_id, changes)


# --- Service categories -----------------------------------------------------

def list_service_categories(store: Store) -> List[ServiceCategory]:
    return store.list(ServiceCategory)


def seed_service_categories(store: Store) -> int:
    """Insert the default categories when the table is empty. Returns how many were added."""
    if store.count(ServiceCategory):
        return 0
    with store.transaction():
        for category in DEFAULT_SERVICE_CATEGORIES:
            store.insert(ServiceCategory, dict(category))
    logger.info("Seeded %s service categories", len(DEFAULT_SERVICE_CATEGORIES))
    return len(DEFAULT_SERVICE_CATEGORIES)


# --- Services ---------------------------------------------------------------

def list_services(store: Store, salon_id: int) -> List[Service]:
    return store.list(Service, salon_id=salon_id)


def create_service(store: Store, data, caller: Optional[Caller]) -> Service:
    if caller is None:
        permissions.enforce(permissions.NOT_AUTHENTICATED)
    payload = parse_payload(ServiceCreate, data, "service")

    salon = get_salon(store, payload.salon_id)
    permissions.enforce(permissions.can_manage_service(caller, salon))
    if store.get(ServiceCategory, payload.category_id) is None:
        raise NotFoundError("Service category not found")

    service = store.insert(Service, payload.model_dump())
    logger.info("Service %s added to salon %s", service.id, salon.id)
    return service


def _owned_service(store: Store, service_id: int, caller: Optional[Caller]) -> Service:
    if caller is None:
        permissions.enforce(permissions.NOT_AUTHENTICATED)
    service = store.get(Service, service_id)
    if service is None:
        raise NotFoundError("Service not found")
    salon = store.get(Salon, service.salon_id)
    permissions.enforce(permissions.can_manage_service(caller, salon))
    return service


def update_service(store: Store, service_id: int, data, caller: Optional[Caller]) -> Service:
    _owned_service(store, service_id, caller)
    changes = parse_payload(ServiceUpdate, data, "service").model_dump(exclude_unset=True)
    if "category_id" in changes and store.get(ServiceCategory, changes["category_id"]) is None:
        raise NotFoundError("Service category not found")
    return store.update(Service, service_id, changes)


def delete_service(store: Store, service_id: int, caller: Optional[Caller]) -> bool:
    _owned_service(store, service_id, caller)
    deleted = store.delete(Service, service_id)
    logger.info("Service %s deleted by user %s", service_id, caller.id)
    return deleted


# --- Special offers ---------------------------------------------------------

def list_special_offers(store: Store) -> List[SpecialOffer]:
    return store.list(SpecialOffer)


def list_special_offers_for_salon(store: Store, salon_id: int) -> List[SpecialOffer]:
    return store.list(SpecialOffer, salon_id=salon_id, is_active=True)


def create_special_offer(store: Store, data, caller: Optional[Caller]) -> SpecialOffer:
    if caller is None:
        permissions.enforce(permissions.NOT_AUTHENTICATED)
    payload = parse_payload(SpecialOfferCreate, data, "offer")

    salon = get_salon(store, payload.salon_id)
    permissions.enforce(permissions.can_create_offer(caller, salon))
    if payload.end_date < payload.start_date:
        raise ValidationError(
            "Offer ends before it starts",
            [{"field": "offer.end_date", "message": "end_date must not be before start_date"}],
        )

    offer = store.insert(SpecialOffer, payload.model_dump())
    logger.info("Special offer %s created for salon %s", offer.id, salon.id)
    return offer
