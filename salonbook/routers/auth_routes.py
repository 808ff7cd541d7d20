# salonbook/routers/auth_routes.py

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm

from salonbook.auth import create_access_token, find_user, hash_password, verify_password
from salonbook.deps import get_store
from salonbook.models import User
from salonbook.schemas import Token, UserCreate, UserPublic
from salonbook.store import Store

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


@router.post("/register", status_code=201, response_model=UserPublic)
def register(
    user: UserCreate,
    store: Store = Depends(get_store),
):
    # 1) Username must be free
    if find_user(store, user.username) is not None:
        raise HTTPException(status_code=409, detail="Username already exists")

    # 2) Create user with hashed password
    data = user.model_dump(exclude={"password", "confirm_password"})
    data["password_hash"] = hash_password(user.password)
    db_user = store.insert(User, data)

    logger.info("Registered user %s as %s", db_user.id, db_user.role)
    return db_user


@router.post("/login", response_model=Token)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    store: Store = Depends(get_store),
):
    user = find_user(store, form_data.username)

    if user is None or not verify_password(form_data.password, user.password_hash):
        raise HTTPException(
            status_code=401,
            detail="Invalid username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = create_access_token({"sub": user.username})
    return {"access_token": token, "token_type": "bearer"}
