"""FastAPI dependencies for authentication and services."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.database import get_db
from src.models.user import User
from src.services.auth import decode_access_token
from src.services.expiry import ExpiryDecayEngine
from src.services.inventory_store import InventoryStore
from src.services.recipe_generator import RecipeGenerator

security = HTTPBearer()


def user_from_token(db: Session, token: str) -> User | None:
    """Resolve a bearer token to its user, or None if invalid."""
    payload = decode_access_token(token)
    if payload is None or payload.get("sub") is None:
        return None
    return db.query(User).filter(User.id == int(payload["sub"])).first()


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user from JWT token."""
    user = user_from_token(db, credentials.credentials)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_inventory_store(
    db: Annotated[Session, Depends(get_db)],
) -> InventoryStore:
    """Get the item store bound to the request session."""
    return InventoryStore(db)


def get_decay_engine(
    store: Annotated[InventoryStore, Depends(get_inventory_store)],
) -> ExpiryDecayEngine:
    """Get the decay engine over the request's item store."""
    return ExpiryDecayEngine(store)


def get_recipe_generator() -> RecipeGenerator:
    """Get recipe generator instance."""
    return RecipeGenerator()
