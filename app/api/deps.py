# api/deps.py
# Request dependencies: database sessions, shared services and bearer-token authorization.

import logging
from uuid import UUID

from fastapi import Depends, Request, Security
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app import crud
from app import models
from app.core.context import AppContext
from app.core.errors import TokenMalformed, TokenMissing, UserNotFound
from app.core.hashing import PasswordHasher
from app.core.tokens import TokenService

# Get a logger instance
logger = logging.getLogger(__name__)

# OAuth2 scheme definition; lets the docs page log in through /auth/token
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token", auto_error=False)


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_db(context: AppContext = Depends(get_context)):
    """
    SQLAlchemy session generator.
    Yields a session and ensures it's closed afterward.
    """
    db = context.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_token_service(context: AppContext = Depends(get_context)) -> TokenService:
    return context.tokens


def get_password_hasher(context: AppContext = Depends(get_context)) -> PasswordHasher:
    return context.hasher


def extract_bearer_token(authorization: str | None) -> str:
    """
    Takes the second whitespace-separated part of an Authorization header.
    """
    if not authorization:
        raise TokenMissing()
    parts = authorization.split()
    if len(parts) < 2:
        raise TokenMissing()
    return parts[1]


def get_current_user_id(
    request: Request,
    _scheme_token: str | None = Security(oauth2_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> UUID:
    """
    Protects an endpoint. Resolves the bearer token to a user id and records
    it on the request state; any token failure ends the request with 401.
    """
    # The scheme only checks for a "Bearer" prefix, so the raw header is split here
    user_id = tokens.verify(extract_bearer_token(request.headers.get("Authorization")))
    request.state.user_id = user_id
    return user_id


def get_current_user(
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> models.User:
    try:
        user = crud.get_user(db, user_id=user_id)
    except UserNotFound:
        logger.error("Could not find user")
        raise TokenMalformed()
    logger.debug(f"Found user: {user.username}")
    return user
