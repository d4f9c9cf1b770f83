# api/users.py

from fastapi import APIRouter, Depends

from app import schemas
from app import models
from app.api.deps import get_current_user

router = APIRouter()


@router.get("/me", response_model=schemas.User)
def read_users_me(current_user: models.User = Depends(get_current_user)):
    """
    Profile of the authenticated user.
    """
    return current_user
