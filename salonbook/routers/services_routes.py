# salonbook/routers/services_routes.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Response

from salonbook import catalog
from salonbook.auth import get_optional_caller
from salonbook.deps import get_store
from salonbook.errors import PersistenceError
from salonbook.schemas import (
    Caller,
    ServiceCategoryPublic,
    ServiceCreate,
    ServicePublic,
    ServiceUpdate,
)
from salonbook.store import Store

router = APIRouter(
    tags=["services"],
)


@router.get("/service-categories", response_model=List[ServiceCategoryPublic])
def list_service_categories(store: Store = Depends(get_store)):
    return catalog.list_service_categories(store)


@router.post("/services", response_model=ServicePublic, status_code=201)
def create_service(
    service: ServiceCreate,
    store: Store = Depends(get_store),
    caller: Optional[Caller] = Depends(get_optional_caller),
):
    return catalog.create_service(store, service, caller)


@router.patch("/services/{service_id}", response_model=ServicePublic)
def update_service(
    service_id: int,
    changes: ServiceUpdate,
    store: Store = Depends(get_store),
    caller: Optional[Caller] = Depends(get_optional_caller),
):
    return catalog.update_service(store, service_id, changes, caller)


@router.delete("/services/{service_id}", status_code=204)
def delete_service(
    service_id: int,
    store: Store = Depends(get_store),
    caller: Optional[Caller] = Depends(get_optional_caller),
):
    if not catalog.delete_service(store, service_id, caller):
        raise PersistenceError("Failed to delete service")
    return Response(status_code=204)
