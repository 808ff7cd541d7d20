# salonbook/auth.py

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from passlib.context import CryptContext

from salonbook.config import settings
from salonbook.deps import get_store
from salonbook.errors import UnauthenticatedError
from salonbook.models import User
from salonbook.schemas import Caller, make_caller
from salonbook.store import Store

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
# auto_error=False: anonymous requests reach the route with no caller and
# the core decides whether that is allowed
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login", auto_error=False)


def create_access_token(data: dict, expires_minutes: int = settings.access_token_expire_minutes) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    to_encode["exp"] = expire
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def find_user(store: Store, username: str) -> Optional[User]:
    users = store.list(User, username=username)
    return users[0] if users else None


def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    store: Store = Depends(get_store),
) -> Optional[User]:
    if token is None:
        return None
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
        username = payload.get("sub")
    except JWTError:
        raise UnauthenticatedError("Invalid token")
    if username is None:
        raise UnauthenticatedError("Invalid token")

    user = find_user(store, username)
    if user is None:
        raise UnauthenticatedError("User not found")
    return user


def get_optional_caller(user: Optional[User] = Depends(get_current_user)) -> Optional[Caller]:
    if user is None:
        return None
    return make_caller(user.id, user.role)


def require_user(user: Optional[User] = Depends(get_current_user)) -> User:
    if user is None:
        raise UnauthenticatedError("Not authenticated")
    return user
