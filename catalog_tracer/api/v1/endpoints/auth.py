"""Authentication endpoints (API JWT)."""

from fastapi import APIRouter, Depends

from catalog_tracer.core.security import get_current_user
from catalog_tracer.models.actor import User
from catalog_tracer.schemas.user import UserRead

router: APIRouter = APIRouter()


@router.get("/me", response_model=UserRead)
def me(current_user: User = Depends(get_current_user)) -> UserRead:
    return UserRead.model_validate(current_user)
