# crud.py
# Contains the functions for Create, Read, Update, Delete (CRUD) operations.
# Lookups raise the errors from app.core.errors instead of returning None.

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app import models
from app import schemas
from app.core.errors import (
    DuplicateUsername,
    Forbidden,
    InvalidPassword,
    RecipeNotFound,
    UserNotFound,
)
from app.core.hashing import PasswordHasher

# Get a logger instance
logger = logging.getLogger(__name__)


# --- User CRUD Functions ---
def get_user_by_username(db: Session, username: str):
    return db.query(models.User).filter(models.User.username == username).first()


def get_user(db: Session, user_id: UUID) -> models.User:
    db_user = db.query(models.User).filter(models.User.id == user_id).first()
    if db_user is None:
        raise UserNotFound()
    return db_user


def create_user(db: Session, user: schemas.UserCreate, hasher: PasswordHasher) -> models.User:
    """
    Registers a new user. Fails with DuplicateUsername if the name is taken.
    """
    if get_user_by_username(db, username=user.username):
        logger.warning(f"Username {user.username} is already registered")
        raise DuplicateUsername()

    db_user = models.User(
        username=user.username,
        hashed_password=hasher.hash(user.password),
    )
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same name
        db.rollback()
        logger.warning(f"Username {user.username} was registered concurrently")
        raise DuplicateUsername()
    db.refresh(db_user)
    logger.debug(f"Registered user {db_user.id}")
    return db_user


def authenticate_user(db: Session, username: str, password: str, hasher: PasswordHasher) -> models.User:
    """
    Checks a username/password pair and returns the matching user.
    """
    db_user = get_user_by_username(db, username=username)
    if db_user is None:
        hasher.dummy_verify()
        logger.warning("Login attempt for unknown user")
        raise UserNotFound()
    if not hasher.verify(password, db_user.hashed_password):
        logger.warning("Incorrect password")
        raise InvalidPassword()
    return db_user


# --- Recipe CRUD Functions ---
def _check_owner(db_recipe: models.Recipe, requester_id: UUID, action: str):
    if db_recipe.owner_id != requester_id:
        logger.error(f"User {requester_id} is not authorized to {action} recipe with ID: {db_recipe.id}")
        raise Forbidden(f"Not authorized to {action} this recipe")


def _find_recipe(db: Session, recipe_id: UUID) -> models.Recipe:
    logger.debug(f"Retrieving recipe with id {recipe_id}")
    db_recipe = db.query(models.Recipe).filter(models.Recipe.id == recipe_id).first()
    if db_recipe is None:
        logger.warning(f"Recipe with ID {recipe_id} not found.")
        raise RecipeNotFound()
    return db_recipe


def get_recipe(db: Session, recipe_id: UUID, requester_id: UUID) -> models.Recipe:
    """
    Retrieve a single recipe the requester is allowed to see.
    Unowned legacy recipes are visible to everyone.
    """
    db_recipe = _find_recipe(db, recipe_id)
    if db_recipe.owner_id is not None:
        _check_owner(db_recipe, requester_id, "view")
    return db_recipe


def get_recipes_by_owner(db: Session, owner_id: UUID):
    """
    Retrieve every recipe owned by the given user, oldest first.
    """
    logger.debug(f"Retrieving recipes owned by {owner_id}")
    return (
        db.query(models.Recipe)
        .filter(models.Recipe.owner_id == owner_id)
        .order_by(models.Recipe.created_at)
        .all()
    )


def create_user_recipe(db: Session, recipe: schemas.RecipeCreate, user_id: UUID) -> models.Recipe:
    """
    Create a new recipe owned by the given user.
    """
    logger.debug(f"Creating recipe for user {user_id}")
    now = datetime.now(timezone.utc)
    db_recipe = models.Recipe(
        **recipe.model_dump(),
        owner_id=user_id,
        created_at=now,
        updated_at=now,
    )
    db.add(db_recipe)
    db.commit()
    db.refresh(db_recipe)
    return db_recipe


def update_recipe(
    db: Session, recipe_id: UUID, recipe_update: schemas.RecipeUpdate, requester_id: UUID
) -> models.Recipe:
    """
    Apply the fields set in recipe_update. Only the owner may do this.
    Concurrent updates are last-write-wins.
    """
    db_recipe = _find_recipe(db, recipe_id)
    _check_owner(db_recipe, requester_id, "update")

    update_data = recipe_update.model_dump(exclude_unset=True)
    if "ingredients" in update_data and update_data["ingredients"] is None:
        update_data["ingredients"] = []
    logger.debug(f"Updating recipe {recipe_id} fields: {sorted(update_data)}")
    for key, value in update_data.items():
        setattr(db_recipe, key, value)
    db_recipe.updated_at = datetime.now(timezone.utc)

    db.add(db_recipe)
    db.commit()
    db.refresh(db_recipe)
    return db_recipe


def delete_recipe(db: Session, recipe_id: UUID, requester_id: UUID) -> models.Recipe:
    """
    Delete a recipe. Only the owner may do this.
    """
    db_recipe = _find_recipe(db, recipe_id)
    _check_owner(db_recipe, requester_id, "delete")

    logger.debug(f"Deleting recipe {recipe_id}")
    db.delete(db_recipe)
    db.commit()
    return db_recipe
