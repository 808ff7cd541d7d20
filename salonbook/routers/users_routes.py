# salonbook/routers/users_routes.py

from fastapi import APIRouter, Depends

from salonbook.auth import require_user
from salonbook.deps import get_store
from salonbook.models import User
from salonbook.schemas import UserPublic, UserUpdate
from salonbook.store import Store

router = APIRouter(
    tags=["users"],
)


@router.get("/me", response_model=UserPublic)
def me(current_user: User = Depends(require_user)):
    return current_user


@router.patch("/me", response_model=UserPublic)
def update_me(
    changes: UserUpdate,
    current_user: User = Depends(require_user),
    store: Store = Depends(get_store),
):
    # role, username and loyalty points are not in UserUpdate
    return store.update(User, current_user.id, changes.model_dump(exclude_unset=True))
