# api/auth.py
# Handles user registration, login and token generation.

import logging
from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

# Import local modules
from app import crud
from app import schemas
from app.api.deps import get_db, get_password_hasher, get_token_service
from app.core.hashing import PasswordHasher
from app.core.tokens import TokenService

# Create an API router
router = APIRouter()

# Get a logger instance
logger = logging.getLogger(__name__)

CREDENTIAL_ERRORS = {
    400: {"model": schemas.ErrorResponse, "description": "Unknown user"},
    401: {"model": schemas.ErrorResponse, "description": "Incorrect password"},
}


@router.post(
    "/register",
    response_model=schemas.Created,
    responses={400: {"model": schemas.ErrorResponse, "description": "Username already registered"}},
)
def register(
    user: schemas.UserCreate,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    """
    Register a new user.
    """
    db_user = crud.create_user(db, user, hasher)
    logger.info(f"User {db_user.username} registered")
    return {"message": f"User {db_user.username} registered!", "id": db_user.id}


@router.post("/login", response_model=schemas.LoginToken, responses=CREDENTIAL_ERRORS)
def login(
    credentials: schemas.UserLogin,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
):
    """
    Log in with a JSON body and get a bearer token valid for one hour.
    """
    user = crud.authenticate_user(db, credentials.username, credentials.password, hasher)
    return {"token": tokens.issue(user.id)}


@router.post("/token", response_model=schemas.Token, responses=CREDENTIAL_ERRORS)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
):
    """
    OAuth2 password flow, used by the interactive docs.
    """
    user = crud.authenticate_user(db, form_data.username, form_data.password, hasher)
    return {"access_token": tokens.issue(user.id), "token_type": "bearer"}
